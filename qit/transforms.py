# qit/transforms.py
import math
from typing import List, Sequence

from .arithmetic import _register, check_unique, swap
from .gates import CU, H, Operator, R, U


def qft(x: Sequence[int]) -> U:
    """Quantum Fourier transform on register ``x`` (x[0] least significant).

    |j> -> 2^(-k/2) sum_m exp(2 pi i j m / 2^k) |m>

    The register is bit-reversed first so the H / controlled-R ladder leaves
    its output in little-endian order.
    """
    x = _register(x)
    check_unique(x)
    k = len(x)
    gates: List[Operator] = []
    if k > 1:
        gates.extend(swap(x[: k // 2], x[::-1][: k // 2]).gates)
    for i in range(k):
        gates.append(H(x[i]))
        for j in range(i + 1, k):
            p = j + 1 - i
            gates.append(CU(x[j], [R(x[i], 2.0 * math.pi / (1 << p))], f"r_2^-{p}"))
    return U(gates, "qft")


def inv_qft(x: Sequence[int]) -> U:
    """Inverse of :func:`qft` on the same register."""
    return qft(x).inverse().rename("iqft")
