# qit/apply_numpy.py
# Vectorised kernels: each gate builds the index pairs it touches and
# updates them with numpy fancy indexing. Indices are rebuilt per call and
# dropped on return, so nothing outlives the gate.
import cmath
import math

import numpy as np

SQRT2_INV = 1.0 / math.sqrt(2.0)


def _pairs(N: int, k: int, cmask: int):
    """(i0, i1) index arrays: bit k clear/set, every bit of cmask set."""
    step = 1 << k
    j = np.arange(N >> 1, dtype=np.int64)
    # insert a 0 at bit k
    i0 = ((j >> k) << (k + 1)) | (j & (step - 1))
    if cmask:
        i0 = i0[(i0 & cmask) == cmask]
    return i0, i0 | step


def _upper(N: int, k: int, cmask: int) -> np.ndarray:
    return _pairs(N, k, cmask)[1]


def apply_x(psi: np.ndarray, k: int, cmask: int = 0):
    i0, i1 = _pairs(psi.shape[0], k, cmask)
    psi[i0], psi[i1] = psi[i1], psi[i0]


def apply_y(psi: np.ndarray, k: int, cmask: int = 0):
    i0, i1 = _pairs(psi.shape[0], k, cmask)
    psi[i0], psi[i1] = -1j * psi[i1], 1j * psi[i0]


def apply_z(psi: np.ndarray, k: int, cmask: int = 0):
    psi[_upper(psi.shape[0], k, cmask)] *= -1
def apply_h(psi: np.ndarray, k: int, cmask: int = 0):
    i0, i1 = _pairs(psi.shape[0], k, cmask)
    a0 = psi[i0]
    a1 = psi[i1]
    psi[i0] = (a0 + a1) * SQRT2_INV
    psi[i1] = (a0 - a1) * SQRT2_INV


def apply_phase(psi: np.ndarray, k: int, cmask: int, theta: float):
    i1 = _upper(psi.shape[0], k, cmask)
    psi[i1] *= cmath.exp(1j * theta)


def apply_rz(psi: np.ndarray, k: int, cmask: int, theta: float):
    i0, i1 = _pairs(psi.shape[0], k, cmask)
    psi[i0] *= cmath.exp(-0.5j * theta)
    psi[i1] *= cmath.exp(0.5j * theta)


def apply_rx(psi: np.ndarray, k: int, cmask: int, theta: float):
    c = math.cos(0.5 * theta)
    s = -1j * math.sin(0.5 * theta)
    i0, i1 = _pairs(psi.shape[0], k, cmask)
    a0 = psi[i0]
    a1 = psi[i1]
    psi[i0] = c * a0 + s * a1
    psi[i1] = s * a0 + c * a1


def apply_ry(psi: np.ndarray, k: int, cmask: int, theta: float):
    c = math.cos(0.5 * theta)
    s = math.sin(0.5 * theta)
    i0, i1 = _pairs(psi.shape[0], k, cmask)
    a0 = psi[i0]
    a1 = psi[i1]
    psi[i0] = c * a0 - s * a1
    psi[i1] = s * a0 + c * a1
