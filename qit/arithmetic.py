# qit/arithmetic.py
"""Reversible arithmetic circuits built from X, CX, CCX, CNX and CU.

A register is a sequence of qubit indices read as an unsigned integer with
``register[0]`` as its least significant bit. All generators return a
:class:`~qit.gates.U`; none of them touch amplitudes directly.

    >>> from qit.state import Qubits
    >>> sub_const([0, 1, 2], 5).apply(Qubits.from_num(3, 7)).most_plausible()
    2
"""
from typing import List, Sequence

import numpy as np

from .errors import InvalidRegister
from .gates import CCX, CNX, CU, CX, Operator, U, X
from .logging import get_logger
from .modular import is_coprime, mod_inv, mod_power

logger = get_logger(__name__)


def check_unique(*registers: Sequence[int]):
    """Raise InvalidRegister unless all indices are non-negative ints and no
    index appears twice across ``registers``."""
    seen = set()
    for reg in registers:
        for q in reg:
            if isinstance(q, bool) or not isinstance(q, (int, np.integer)) or q < 0:
                raise InvalidRegister(f"register entries must be non-negative ints, got {q!r}")
            if q in seen:
                raise InvalidRegister(f"qubit {q} appears more than once")
            seen.add(q)


def _register(reg: Sequence[int], what: str = "register") -> List[int]:
    reg = [int(q) if isinstance(q, np.integer) else q for q in reg]
    if not reg:
        raise InvalidRegister(f"{what} must not be empty")
    return reg


def _same_width(*registers: Sequence[int]):
    widths = {len(r) for r in registers}
    if len(widths) != 1:
        raise InvalidRegister(f"registers must have equal width, got {[len(r) for r in registers]}")


def _check_const(value: int, upper: int, what: str):
    if not 0 <= value < upper:
        raise InvalidRegister(f"{what} must be in [0, {upper}), got {value}")


def _mcx(controls: List[int], target: int) -> Operator:
    if len(controls) == 1:
        return CX(controls[0], target)
    if len(controls) == 2:
        return CCX(controls[0], controls[1], target)
    return CNX(controls, target)


# ------------------------------ adders ------------------------------

def half_adder_bit(a_in: int, b_in: int, s_out: int, c_out: int) -> U:
    """|a>|b>|0>|0> -> |a>|b>|a xor b>|a and b>"""
    check_unique([a_in, b_in, s_out, c_out])
    return U([CX(a_in, s_out), CX(b_in, s_out), CCX(a_in, b_in, c_out)], "half_adder")


def full_adder_bit(a_in: int, b_in: int, c_in: int, c_out: int) -> U:
    """|a>|b>|c>|0> -> |a>|a xor b xor c>|c>|carry>"""
    check_unique([a_in, b_in, c_in, c_out])
    return U([CCX(a_in, b_in, c_out), CX(a_in, b_in), CCX(b_in, c_in, c_out), CX(c_in, b_in)],
             "full_adder_bit")


def full_adder_nbits(a_in: Sequence[int], b_in: Sequence[int], c_inout: Sequence[int]) -> U:
    """|a>|b>|0> -> |a>|(a + b) mod 2^k>|0>

    ``c_inout`` is a scratch register of the same width, returned clean.
    """
    a_in, b_in, c_inout = _register(a_in), _register(b_in), _register(c_inout, "carry register")
    _same_width(a_in, b_in, c_inout)
    check_unique(a_in, b_in, c_inout)
    k = len(a_in)

    gates: List[Operator] = [CCX(a_in[0], b_in[0], c_inout[0])]
    # forward ripple: carries into c_inout, top bit gets its sum directly
    c_in = c_inout[0]
    for i in range(1, k):
        a, b, c_out = a_in[i], b_in[i], c_inout[i]
        if i == k - 1:
            gates += [CX(a, b), CX(c_in, b)]
        else:
            gates += [CCX(a, b, c_out), CX(a, b), CCX(c_in, b, c_out)]
            c_in = c_out
    # backward ripple: uncompute carries and write the lower sum bits
    for i in range(k - 2, 0, -1):
        a, b, c_out, c_in = a_in[i], b_in[i], c_inout[i], c_inout[i - 1]
        gates += [CCX(c_in, b, c_out), CX(a, b), CCX(a, b, c_out), CX(a, b), CX(c_in, b)]
    gates += [CCX(a_in[0], b_in[0], c_inout[0]), CX(a_in[0], b_in[0])]
    return U(gates, "full_adder")


def subtract_nbits(a_in: Sequence[int], b_in: Sequence[int], c_inout: Sequence[int]) -> U:
    """|a>|b>|0> -> |a>|(b - a) mod 2^k>|0>"""
    return full_adder_nbits(a_in, b_in, c_inout).inverse().rename("subtract")


# ------------------------- constant add / sub -------------------------

def add_const_2_power(b: Sequence[int], m: int) -> U:
    """|x> -> |(x + 2^m) mod 2^k>

    Bits above ``m`` flip from the top down when every bit between ``m`` and
    them is 1, then bit ``m`` flips.
    """
    b = _register(b)
    check_unique(b)
    _check_const(m, len(b), "power")
    gates: List[Operator] = []
    for i in range(len(b) - 1, m, -1):
        gates.append(_mcx(b[m:i], b[i]))
    gates.append(X(b[m]))
    return U(gates, f"add_2^{m}")


def overflow_add_const_2_power(b: Sequence[int], overflow: int, m: int) -> U:
    """|x>|o> -> |x + 2^m> with the carry out toggling ``overflow``."""
    b = _register(b)
    check_unique(b, [overflow])
    _check_const(m, len(b), "power")
    return add_const_2_power(b + [overflow], m).rename(f"overflow_add_2^{m}")


def add_const(b: Sequence[int], a_const: int) -> U:
    """|x> -> |(x + a_const) mod 2^k>"""
    b = _register(b)
    check_unique(b)
    _check_const(a_const, 1 << len(b), "constant")
    gates: List[Operator] = []
    for i in range(len(b)):
        if (a_const >> i) & 1:
            gates.extend(add_const_2_power(b, i).gates)
    logger.debug("add_const(%d) on %d qubits: %d gates", a_const, len(b), len(gates))
    return U(gates, "add_const")


def sub_const(b: Sequence[int], a_const: int) -> U:
    """|x> -> |(x - a_const) mod 2^k>"""
    return add_const(b, a_const).inverse().rename("sub_const")


def overflow_add_const(b: Sequence[int], overflow: int, a_const: int) -> U:
    """|x>|0> -> |(x + a) mod 2^k>|carry>, i.e. a (k+1)-bit add on b + [overflow]."""
    b = _register(b)
    check_unique(b, [overflow])
    _check_const(a_const, 1 << len(b), "constant")
    reg = b + [overflow]
    gates: List[Operator] = []
    for i in range(len(b)):
        if (a_const >> i) & 1:
            gates.extend(add_const_2_power(reg, i).gates)
    return U(gates, "overflow_add_const")


def overflow_sub_const(b: Sequence[int], overflow: int, a_const: int) -> U:
    """|x>|0> -> |(x - a) mod 2^k>|borrow>"""
    return overflow_add_const(b, overflow, a_const).inverse().rename("overflow_sub_const")


def swap(a_in: Sequence[int], b_in: Sequence[int]) -> U:
    """Exchange two registers qubit by qubit (three CX per pair)."""
    a_in, b_in = _register(a_in), _register(b_in)
    _same_width(a_in, b_in)
    check_unique(a_in, b_in)
    gates: List[Operator] = []
    for a, b in zip(a_in, b_in):
        gates += [CX(a, b), CX(b, a), CX(a, b)]
    return U(gates, "swap")


# ------------------------- modular arithmetic -------------------------

def mod_add(a: Sequence[int], b: Sequence[int], n_in: Sequence[int],
            zero: Sequence[int], t: int, num: int) -> U:
    """|a>|b>|N>|0>|t=0> -> |a>|(a + b) mod N>|N>|0>|0>

    ``n_in`` must hold ``num`` on input. Requires ``0 < num < 2^(k-1)`` and
    ``a, b < num``.
    """
    a, b, n_in, zero = _register(a), _register(b), _register(n_in), _register(zero)
    _same_width(a, b, n_in, zero)
    check_unique(a, b, n_in, zero, [t])
    if not 0 < num < (1 << (len(b) - 1)):
        raise InvalidRegister(f"modulus must be in (0, {1 << (len(b) - 1)}), got {num}")
    b_top = b[-1]
    toggle_n = [CX(t, q) for i, q in enumerate(n_in) if (num >> i) & 1]

    gates: List[Operator] = [
        full_adder_nbits(a, b, zero),                   # b = a + b
        subtract_nbits(n_in, b, zero),                  # b = a + b - N
        X(b_top), CX(b_top, t), X(b_top),               # t = 1 iff a + b >= N
        U(toggle_n, "clear_N"),                         # N register -> 0 when t
        full_adder_nbits(n_in, b, zero),                # b = (a + b) mod N
        U(toggle_n, "restore_N"),
        subtract_nbits(a, b, zero),                     # sign of b - a tells t
        CX(b_top, t),                                   # t -> 0
        full_adder_nbits(a, b, zero),
    ]
    return U(gates, "mod_add")


def mod_add_const(b: Sequence[int], overflow: int, a_const: int, n_const: int) -> U:
    """|x>|0> -> |(x + a) mod N>|0> for ``x < N``.

    Requires ``0 < N < 2^k`` and ``0 <= a < N``.
    """
    b = _register(b)
    check_unique(b, [overflow])
    if not 0 < n_const < (1 << len(b)):
        raise InvalidRegister(f"modulus must be in (0, {1 << len(b)}), got {n_const}")
    _check_const(a_const, n_const, "constant")

    gates: List[Operator] = [
        overflow_add_const(b, overflow, a_const),       # x + a
        overflow_sub_const(b, overflow, n_const),       # x + a - N, overflow = (x + a < N)
        CU(overflow, add_const(b, n_const).gates, "cu-add_N"),
        overflow_sub_const(b, overflow, a_const),       # overflow is now always 1
        X(overflow),
        add_const(b, a_const),
    ]
    return U(gates, "mod_add_const")


def cmm_const(x: Sequence[int], tar_reg: Sequence[int], overflow: int, cont: int,
              a_const: int, n_const: int) -> U:
    """Controlled modular multiplication by a constant.

    |x>|0>|0>|c> -> |x>|a*x mod N>|0>|c> if c else |x>|x>|0>|c>

    Requires ``x < N < 2^k`` and ``a < 2^k``.
    """
    x, tar_reg = _register(x), _register(tar_reg, "target register")
    _same_width(x, tar_reg)
    check_unique(x, tar_reg, [cont, overflow])
    k = len(x)
    _check_const(a_const, 1 << k, "constant")
    if not 0 < n_const < (1 << k):
        raise InvalidRegister(f"modulus must be in (0, {1 << k}), got {n_const}")

    mul = [CU.from_u(x[i], mod_add_const(tar_reg, overflow, (a_const << i) % n_const, n_const))
           for i in range(k)]
    gates: List[Operator] = [CU(cont, mul, "cu-mmul"), X(cont)]
    gates += [CCX(cont, x[i], tar_reg[i]) for i in range(k)]
    gates.append(X(cont))
    return U(gates, "cmm_const")


def me_const(x: Sequence[int], a_x: Sequence[int], zero: Sequence[int], overflow: int,
             a_const: int, n_const: int) -> U:
    """Modular exponentiation: |x>|0>|0>|0> -> |x>|a^x mod N>|0>|0>.

    ``a_x`` and ``zero`` are k-bit work registers with ``N < 2^k``; ``a``
    must be coprime to ``N``.
    """
    x, a_x, zero = _register(x), _register(a_x), _register(zero)
    _same_width(a_x, zero)
    check_unique(x, a_x, zero, [overflow])
    if not 1 < n_const < (1 << len(a_x)):
        raise InvalidRegister(f"modulus must be in (1, {1 << len(a_x)}), got {n_const}")
    if not is_coprime(a_const, n_const):
        raise InvalidRegister(f"{a_const} and {n_const} must be coprime")

    gates: List[Operator] = [X(a_x[0])]  # a^0 = 1
    for i, x_i in enumerate(x):
        c = mod_power(a_const, 1 << i, n_const)
        c_inv = mod_inv(c, n_const)
        gates.append(cmm_const(a_x, zero, overflow, x_i, c, n_const))
        gates.append(swap(a_x, zero))
        # clears the copy left in zero: zero - c^-1 * (c * y) = 0
        gates.append(cmm_const(a_x, zero, overflow, x_i, c_inv, n_const).inverse())
    return U(gates, "me_const")
