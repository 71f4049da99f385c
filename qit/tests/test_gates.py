# qit/tests/test_gates.py
import math

import numpy as np
import pytest

from qit.arithmetic import sub_const
from qit.circuit import Circuit
from qit.errors import InvalidQubitIndex
from qit.gates import CCX, CNX, CU, CX, H, R, RX, RY, RZ, U, X, Y, Z
from qit.state import Qubits

S = 2 ** -0.5


def almost(p, q, tol=1e-6):
    return np.allclose(p, q, atol=tol, rtol=0)


def probs(psi):
    return np.abs(psi)**2


def test_h_on_zero(backend):
    st = H(0).apply(Qubits.zeros(1), backend=backend)
    assert almost(st.psi, [S, S])


def test_h_on_one(backend):
    st = H(0).apply(Qubits.from_num(1, 1), backend=backend)
    assert almost(st.psi, [S, -S])


def test_h_twice_is_identity(backend):
    st = Qubits.from_amplitudes(2, [0.5, 0.5j, -0.5, 0.5])
    before = st.copy()
    H(1).apply(st, backend=backend)
    H(1).apply(st, backend=backend)
    assert st.isclose(before)


def test_x_and_z_are_self_inverse(backend):
    st = Qubits.from_amplitudes(2, [0.5, 0.5j, -0.5, 0.5])
    before = st.copy()
    for g in (X(0), X(0), Z(1), Z(1), X(1), Z(0), Z(0), X(1)):
        g.apply(st, backend=backend)
    assert st.isclose(before)
    X(0).apply(st, backend=backend)
    assert not st.isclose(before)


def test_x_flips(backend):
    # |0> -> X -> |1>
    st = X(0).apply(Qubits.zeros(1), backend=backend)
    assert almost(probs(st.psi), [0.0, 1.0])


def test_x_on_higher_qubit(backend):
    st = X(2).apply(Qubits.from_num(3, 1), backend=backend)
    assert st.most_plausible() == 5


def test_y_phases(backend):
    st = Y(0).apply(Qubits.zeros(1), backend=backend)
    assert almost(st.psi, [0, 1j])
    st = Y(0).apply(Qubits.from_num(1, 1), backend=backend)
    assert almost(st.psi, [-1j, 0])


def test_z_negates_one(backend):
    st = Z(0).apply(Qubits.from_amplitudes(1, [S, S]), backend=backend)
    assert almost(st.psi, [S, -S])


def test_r_pi_equals_z(backend):
    a = R(0, math.pi).apply(Qubits.from_num(2, 1), backend=backend)
    b = Z(0).apply(Qubits.from_num(2, 1), backend=backend)
    assert almost(a.psi, b.psi)
    assert almost(a.psi, [0, -1, 0, 0])


def test_r_leaves_zero_untouched(backend):
    st = R(0, 1.234).apply(Qubits.zeros(1), backend=backend)
    assert almost(st.psi, [1, 0])


def test_r_phase_on_one(backend):
    st = R(1, math.pi / 2).apply(Qubits.from_num(2, 2), backend=backend)
    assert st.amplitude(2) == pytest.approx(1j)


def test_rz_phases(backend):
    st = RZ(0, math.pi).apply(Qubits.from_amplitudes(1, [S, S]), backend=backend)
    assert almost(st.psi, [-1j * S, 1j * S])


def test_rx_pi_is_x_up_to_phase(backend):
    st = RX(0, math.pi).apply(Qubits.zeros(1), backend=backend)
    assert almost(st.psi, [0, -1j])


def test_ry_half_pi_makes_plus(backend):
    st = RY(0, math.pi / 2).apply(Qubits.zeros(1), backend=backend)
    assert almost(st.psi, [S, S])


def test_rotation_inverse(backend):
    st = Qubits.from_amplitudes(1, [0.6, 0.8j])
    before = st.copy()
    for g in (R(0, 0.3), RX(0, 0.7), RY(0, -1.1), RZ(0, 2.5)):
        g.apply(st, backend=backend)
        g.inverse().apply(st, backend=backend)
    assert st.isclose(before)


def test_cx_control_off_noop(backend):
    # |00> --(CX c=1,t=0)--> stays |00>
    st = CX(1, 0).apply(Qubits.zeros(2), backend=backend)
    assert st.most_plausible() == 0


def test_cx_control_on_flips(backend):
    # |10> --(CX 1->0)--> |11>
    st = CX(1, 0).apply(Qubits.from_num(2, 2), backend=backend)
    assert almost(probs(st.psi), [0, 0, 0, 1])


def test_cx_far_apart(backend):
    st = CX(0, 4).apply(Qubits.from_num(5, 31), backend=backend)
    assert st.most_plausible() == 15


def test_ccx_needs_both_controls(backend):
    assert CCX(0, 1, 2).apply(Qubits.from_num(3, 1), backend=backend).most_plausible() == 1
    assert CCX(0, 1, 2).apply(Qubits.from_num(3, 2), backend=backend).most_plausible() == 2
    assert CCX(0, 1, 2).apply(Qubits.from_num(3, 3), backend=backend).most_plausible() == 7


def test_cnx(backend):
    st = CNX([0, 1, 2], 3).apply(Qubits.from_num(4, 7), backend=backend)
    assert st.most_plausible() == 15
    st = CNX([0, 1, 2], 3).apply(Qubits.from_num(4, 5), backend=backend)
    assert st.most_plausible() == 5


def test_bell_state(backend):
    st = Circuit.empty(2).h(0).cx(0, 1).run(backend=backend)
    assert almost(st.psi, [S, 0, 0, S])


def test_normalization(backend):
    c = Circuit.empty(3).h(0).h(1).cx(1, 0).ry(2, 0.4).y(1).rz(0, 1.0)
    st = c.run(backend=backend)
    assert abs(1.0 - st.norm2()) < 1e-9


def test_normalization_of_random_input(backend, rng):
    amps = rng.normal(size=16) + 1j * rng.normal(size=16)
    st = Qubits.from_amplitudes(4, amps / np.linalg.norm(amps))
    u = U([
        H(0), RX(1, 0.9), CU(3, [RY(0, -0.4), CX(0, 2)]), sub_const([0, 1, 2], 5),
        R(2, 1.7), CCX(0, 1, 3), RZ(3, 2.2), Y(1),
    ], "mixed")
    u.apply(st, backend=backend)
    assert abs(1.0 - st.norm2()) < 1e-9


def test_complex64(backend):
    st = Circuit.empty(2).h(0).cx(0, 1).run(backend=backend, dtype=np.complex64)
    assert st.dtype == np.complex64
    assert almost(probs(st.psi), [0.5, 0, 0, 0.5])


def test_apply_returns_same_object():
    st = Qubits.zeros(1)
    assert X(0).apply(st) is st
    assert st.most_plausible() == 1


def test_apply_copy_leaves_input():
    st = Qubits.zeros(1)
    out = X(0).apply(st, copy=True)
    assert out is not st
    assert st.most_plausible() == 0
    assert out.most_plausible() == 1


def test_gate_outside_state():
    with pytest.raises(InvalidQubitIndex):
        X(3).apply(Qubits.zeros(2))
    with pytest.raises(InvalidQubitIndex):
        CX(0, 2).apply(Qubits.zeros(2))


@pytest.mark.parametrize("make", [
    lambda: X(-1),
    lambda: H(1.5),
    lambda: CX(1, 1),
    lambda: CCX(0, 0, 1),
    lambda: CNX([], 0),
    lambda: CNX([0, 1], 1),
])
def test_bad_gate_construction(make):
    with pytest.raises(InvalidQubitIndex):
        make()


def test_names_and_equality():
    assert X(0).name == "X(0)"
    assert CX(0, 1).name == "CX(0->1)"
    assert R(2, 0.5).name == "R_0.5(2)"
    assert X(1) == X(1)
    assert X(1) != Y(1)
    assert RZ(0, 0.1) != RZ(0, 0.2)
    assert len({H(0), H(0), H(1)}) == 2


def test_unknown_backend():
    with pytest.raises(NotImplementedError, match="Unknown backend"):
        X(0).apply(Qubits.zeros(1), backend="cuda")
