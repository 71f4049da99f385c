# qit/apply_serial.py
# Reference kernels: plain Python loops over the amplitude pairs.
# Every kernel updates psi in place. cmask holds control bits that must all
# be 1 for a pair to be touched (0 = uncontrolled).
import cmath
import math

import numpy as np

SQRT2_INV = 1.0 / math.sqrt(2.0)


def _pairs(N: int, k: int, cmask: int):
    """Yield (i0, i1=i0|bit k) for every pair whose control bits are set."""
    step = 1 << k
    block = step << 1
    # iterate blocks of size 2^(k+1), pairs (i0, i0+step) inside each block
    for base in range(0, N, block):
        for off in range(step):
            i0 = base + off
            if (i0 & cmask) == cmask:
                yield i0, i0 + step


def apply_x(psi: np.ndarray, k: int, cmask: int = 0):
    for i0, i1 in _pairs(psi.shape[0], k, cmask):
        a0 = psi[i0]
        psi[i0] = psi[i1]
        psi[i1] = a0


def apply_y(psi: np.ndarray, k: int, cmask: int = 0):
    for i0, i1 in _pairs(psi.shape[0], k, cmask):
        a0 = psi[i0]
        psi[i0] = -1j * psi[i1]
        psi[i1] = 1j * a0


def apply_z(psi: np.ndarray, k: int, cmask: int = 0):
    for _, i1 in _pairs(psi.shape[0], k, cmask):
        psi[i1] = -psi[i1]


def apply_h(psi: np.ndarray, k: int, cmask: int = 0):
    for i0, i1 in _pairs(psi.shape[0], k, cmask):
        a0 = psi[i0]
        a1 = psi[i1]
        psi[i0] = (a0 + a1) * SQRT2_INV
        psi[i1] = (a0 - a1) * SQRT2_INV


def apply_phase(psi: np.ndarray, k: int, cmask: int, theta: float):
    phase = cmath.exp(1j * theta)
    for _, i1 in _pairs(psi.shape[0], k, cmask):
        psi[i1] = psi[i1] * phase


def apply_rz(psi: np.ndarray, k: int, cmask: int, theta: float):
    p0 = cmath.exp(-0.5j * theta)
    p1 = cmath.exp(0.5j * theta)
    for i0, i1 in _pairs(psi.shape[0], k, cmask):
        psi[i0] = psi[i0] * p0
        psi[i1] = psi[i1] * p1


def apply_rx(psi: np.ndarray, k: int, cmask: int, theta: float):
    c = math.cos(0.5 * theta)
    s = -1j * math.sin(0.5 * theta)
    for i0, i1 in _pairs(psi.shape[0], k, cmask):
        a0 = psi[i0]
        a1 = psi[i1]
        psi[i0] = c * a0 + s * a1
        psi[i1] = s * a0 + c * a1


def apply_ry(psi: np.ndarray, k: int, cmask: int, theta: float):
    c = math.cos(0.5 * theta)
    s = math.sin(0.5 * theta)
    for i0, i1 in _pairs(psi.shape[0], k, cmask):
        a0 = psi[i0]
        a1 = psi[i1]
        psi[i0] = c * a0 - s * a1
        psi[i1] = s * a0 + c * a1
