# qit/tests/test_cross_backend.py
import numpy as np
import pytest

from qit.arithmetic import add_const
from qit.circuit import Circuit
from qit.state import Qubits
from qit.transforms import qft


def max_abs_diff(a, b):
    return float(np.max(np.abs(a - b)))


def random_circuit(rng, n, depth):
    c = Circuit.empty(n)
    for _ in range(depth):
        g = rng.integers(0, 6)
        q = int(rng.integers(0, n))
        if g == 0:
            c.h(q)
        elif g == 1:
            c.x(q)
        elif g == 2:
            c.y(q)
        elif g == 3:
            c.rx(q, float(rng.uniform(0, 2 * np.pi)))
        elif g == 4:
            c.r(q, float(rng.uniform(0, 2 * np.pi)))
        else:
            t = q
            while t == q:
                t = int(rng.integers(0, n))
            c.cx(q, t)
    return c


def test_serial_vs_backend_small(backend):
    # 3-qubit mixed circuit
    c = Circuit.empty(3).h(0).x(1).cx(1, 2).h(2).cx(0, 1).x(2).ry(1, 0.3).ccx(0, 1, 2)
    st_s = c.run(backend="serial", dtype=np.complex64)
    st_b = c.run(backend=backend, dtype=np.complex64)
    assert max_abs_diff(st_s.psi, st_b.psi) < 1e-5


def test_random_circuits_match(rng, backend):
    n = 4
    for depth in (5, 10, 20):
        c = random_circuit(rng, n, depth)
        s = c.run(backend="serial")
        t = c.run(backend=backend)
        assert np.allclose(s.psi, t.psi, atol=1e-9, rtol=0)


def test_composites_match(backend):
    st = Qubits.from_num(4, 3)
    u = qft([0, 1, 2, 3])
    a = u.apply(st, backend="serial", copy=True)
    b = u.apply(st, backend=backend, copy=True)
    assert a.isclose(b)

    a = add_const([0, 1, 2, 3], 11).apply(Qubits.from_num(4, 9), backend=backend)
    assert a.most_plausible() == (9 + 11) % 16


def test_numba_threads():
    pytest.importorskip("numba")
    from qit.backend import get_threads, set_threads
    c = Circuit.empty(5).h(0).cx(0, 4).h(3)
    pool = get_threads()
    try:
        s = c.run(backend="serial")
        t = c.run(backend="numba", num_threads=1)
        assert get_threads() == 1
        assert s.isclose(t)
    finally:
        set_threads(pool)
    assert get_threads() == pool
