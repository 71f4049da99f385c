# qit/apply_numba.py
import cmath
import math

import numpy as np
from numba import njit, prange, set_num_threads, get_num_threads

SQRT2_INV = 1.0 / math.sqrt(2.0)

# ---------- low-level kernels (Numba JIT) ----------
# Each prange iteration owns the pair whose upper index is i1, so the pairs
# are disjoint and the loop is race-free.

@njit(parallel=True, fastmath=True)
def _x_kernel(psi, k, cmask):
    N = psi.shape[0]
    step = 1 << k
    m = cmask | step
    for i1 in prange(N):
        if (i1 & m) == m:
            i0 = i1 ^ step
            a0 = psi[i0]
            psi[i0] = psi[i1]
            psi[i1] = a0

@njit(parallel=True, fastmath=True)
def _y_kernel(psi, k, cmask):
    N = psi.shape[0]
    step = 1 << k
    m = cmask | step
    for i1 in prange(N):
        if (i1 & m) == m:
            i0 = i1 ^ step
            a0 = psi[i0]
            psi[i0] = -1j * psi[i1]
            psi[i1] = 1j * a0

@njit(parallel=True, fastmath=True)
def _h_kernel(psi, k, cmask):
    N = psi.shape[0]
    step = 1 << k
    m = cmask | step
    for i1 in prange(N):
        if (i1 & m) == m:
            i0 = i1 ^ step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = (a0 + a1) * SQRT2_INV
            psi[i1] = (a0 - a1) * SQRT2_INV

@njit(parallel=True, fastmath=True)
def _diag_kernel(psi, k, cmask, d0, d1):
    # (a0, a1) -> (d0*a0, d1*a1); Z, R and RZ are all of this form
    N = psi.shape[0]
    step = 1 << k
    m = cmask | step
    for i1 in prange(N):
        if (i1 & m) == m:
            i0 = i1 ^ step
            psi[i0] = d0 * psi[i0]
            psi[i1] = d1 * psi[i1]

@njit(parallel=True, fastmath=True)
def _rot_kernel(psi, k, cmask, c, s0, s1):
    # (a0, a1) -> (c*a0 + s0*a1, s1*a0 + c*a1); RX and RY are of this form
    N = psi.shape[0]
    step = 1 << k
    m = cmask | step
    for i1 in prange(N):
        if (i1 & m) == m:
            i0 = i1 ^ step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = c * a0 + s0 * a1
            psi[i1] = s1 * a0 + c * a1

# ---------- user-facing apply helpers ----------

def set_threads(n: int):
    set_num_threads(n)

def get_threads() -> int:
    return get_num_threads()

def apply_x(psi: np.ndarray, k: int, cmask: int = 0):
    _x_kernel(psi, k, cmask)

def apply_y(psi: np.ndarray, k: int, cmask: int = 0):
    _y_kernel(psi, k, cmask)

def apply_z(psi: np.ndarray, k: int, cmask: int = 0):
    _diag_kernel(psi, k, cmask, 1.0 + 0j, -1.0 + 0j)

def apply_h(psi: np.ndarray, k: int, cmask: int = 0):
    _h_kernel(psi, k, cmask)

def apply_phase(psi: np.ndarray, k: int, cmask: int, theta: float):
    _diag_kernel(psi, k, cmask, 1.0 + 0j, cmath.exp(1j * theta))

def apply_rz(psi: np.ndarray, k: int, cmask: int, theta: float):
    _diag_kernel(psi, k, cmask, cmath.exp(-0.5j * theta), cmath.exp(0.5j * theta))

def apply_rx(psi: np.ndarray, k: int, cmask: int, theta: float):
    s = -1j * math.sin(0.5 * theta)
    _rot_kernel(psi, k, cmask, complex(math.cos(0.5 * theta)), s, s)

def apply_ry(psi: np.ndarray, k: int, cmask: int, theta: float):
    s = math.sin(0.5 * theta)
    _rot_kernel(psi, k, cmask, complex(math.cos(0.5 * theta)), complex(-s), complex(s))
