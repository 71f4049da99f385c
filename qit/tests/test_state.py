# qit/tests/test_state.py
import numpy as np
import pytest

from qit.config import settings_context
from qit.errors import InvalidIndex, InvalidSize, QitError
from qit.state import Qubits


def test_zeros_is_basis_zero():
    st = Qubits.zeros(3)
    assert st.n == 3
    assert st.num_states == 8
    assert st.amplitude(0) == 1
    assert st.most_plausible() == 0
    st.check_normalized()


def test_from_num_sets_single_amplitude():
    st = Qubits.from_num(3, 5)
    assert st.probability(5) == pytest.approx(1.0)
    assert np.count_nonzero(st.psi) == 1


def test_from_comp_keeps_phase():
    st = Qubits.from_comp(2, 3, 1j)
    assert st.amplitude(3) == pytest.approx(1j)
    assert st.probability(3) == pytest.approx(1.0)


def test_from_comp_rejects_non_unit_amplitude():
    with pytest.raises(ValueError):
        Qubits.from_comp(2, 1, 0.5)


@pytest.mark.parametrize("n", [0, -1, 27])
def test_invalid_sizes(n):
    with pytest.raises(InvalidSize):
        Qubits.zeros(n)


def test_max_qubits_follows_settings():
    with settings_context(max_qubits=4):
        Qubits.zeros(4)
        with pytest.raises(InvalidSize):
            Qubits.zeros(5)


@pytest.mark.parametrize("k", [-1, 8, 100])
def test_invalid_index(k):
    with pytest.raises(InvalidIndex):
        Qubits.from_num(3, k)


def test_errors_share_a_base():
    with pytest.raises(QitError):
        Qubits.from_num(2, 4)
    # still catchable as the builtin kinds
    with pytest.raises(IndexError):
        Qubits.from_num(2, 4)
    with pytest.raises(ValueError):
        Qubits.zeros(0)


def test_dtype_from_settings():
    assert Qubits.zeros(1).dtype == np.complex128
    with settings_context(dtype="complex64"):
        assert Qubits.zeros(1).dtype == np.complex64
    assert Qubits.zeros(1, dtype=np.complex64).dtype == np.complex64


def test_from_amplitudes_checks_length():
    amps = np.full(4, 0.5)
    st = Qubits.from_amplitudes(2, amps)
    st.check_normalized()
    with pytest.raises(InvalidSize):
        Qubits.from_amplitudes(2, amps[:3])


def test_check_normalized_raises():
    st = Qubits.from_amplitudes(1, [1.0, 1.0])
    with pytest.raises(AssertionError, match="Normalization failed"):
        st.check_normalized()


def test_copy_is_independent():
    st = Qubits.zeros(2)
    cp = st.copy()
    cp.psi[0] = 0
    cp.psi[1] = 1
    assert st.amplitude(0) == 1
    assert not st.isclose(cp)


def test_format_cmps_and_probs():
    st = Qubits.from_amplitudes(2, [2 ** -0.5, 0, 0, -(2 ** -0.5)])
    cmps = st.format_cmps()
    assert cmps[0] == "|00⟩ : +0.707 +0.000i"
    assert cmps[3] == "|11⟩ : -0.707 +0.000i"
    probs = st.format_probs()
    assert probs[0] == "|00⟩ :  50%"
    assert probs[1] == "|01⟩ :   0%"


def test_print_probs(capsys):
    Qubits.from_num(2, 2).print_probs()
    out = capsys.readouterr().out.splitlines()
    assert out == ["|00⟩ :   0%", "|01⟩ :   0%", "|10⟩ : 100%", "|11⟩ :   0%"]


def test_marginal_probs():
    # qubit 0 in |1>, qubit 1 uniform, qubit 2 in |0>
    st = Qubits.from_amplitudes(3, [0, 2 ** -0.5, 0, 2 ** -0.5, 0, 0, 0, 0])
    assert np.allclose(st.marginal_probs([0]), [0, 1])
    assert np.allclose(st.marginal_probs([1]), [0.5, 0.5])
    assert np.allclose(st.marginal_probs([0, 1]), [0, 0.5, 0, 0.5])
    with pytest.raises(InvalidIndex):
        st.marginal_probs([3])


def test_sample_follows_distribution(rng):
    st = Qubits.from_amplitudes(1, [0.6, 0.8])
    shots = st.sample(4000, rng=rng)
    assert set(np.unique(shots)) <= {0, 1}
    assert abs(shots.mean() - 0.64) < 0.05


def test_sample_basis_state_is_deterministic(rng):
    shots = Qubits.from_num(3, 6).sample(10, rng=rng)
    assert (shots == 6).all()


def test_failed_allocation_is_invalid_size(monkeypatch):
    def no_memory(*args, **kwargs):
        raise MemoryError

    with monkeypatch.context() as m:
        m.setattr(np, "zeros", no_memory)
        with pytest.raises(InvalidSize, match="cannot allocate"):
            Qubits.zeros(3)
