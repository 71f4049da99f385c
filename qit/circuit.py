# qit/circuit.py
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .backend import load_backend, set_threads
from .errors import InvalidSize
from .gates import CCX, CNX, CU, CX, H, Operator, R, RX, RY, RZ, U, X, Y, Z
from .logging import get_logger
from .state import Qubits

logger = get_logger(__name__)


@dataclass
class Circuit:
    """Builder for an ``n``-qubit composite gate.

    Operators are kept in the order they are appended; nothing is reordered
    or merged. Every append is checked against ``n`` so out-of-range qubits
    fail here rather than at apply time.

        >>> c = Circuit.empty(2).h(0).cx(0, 1)
        >>> bell = c.build()
    """

    n: int
    ops: List[Operator] = field(default_factory=list)
    label: str = "circuit"

    @staticmethod
    def empty(n: int, label: str = "circuit") -> "Circuit":
        return Circuit(n, [], label)

    def append(self, op: Operator) -> "Circuit":
        if not isinstance(op, Operator):
            raise TypeError(f"expected an Operator, got {type(op).__name__}")
        op.check_fits(self.n)
        self.ops.append(op)
        return self

    def extend(self, ops: Iterable[Operator]) -> "Circuit":
        for op in ops:
            self.append(op)
        return self

    def x(self, k: int): return self.append(X(k))
    def y(self, k: int): return self.append(Y(k))
    def z(self, k: int): return self.append(Z(k))
    def h(self, k: int): return self.append(H(k))
    def r(self, k: int, theta: float): return self.append(R(k, theta))
    def rx(self, k: int, theta: float): return self.append(RX(k, theta))
    def ry(self, k: int, theta: float): return self.append(RY(k, theta))
    def rz(self, k: int, theta: float): return self.append(RZ(k, theta))
    def cx(self, c: int, t: int): return self.append(CX(c, t))
    def ccx(self, c1: int, c2: int, t: int): return self.append(CCX(c1, c2, t))
    def cnx(self, cs: Iterable[int], t: int): return self.append(CNX(cs, t))

    def cu(self, c: int, ops: Iterable[Operator], label: str = "CU"):
        return self.append(CU(c, ops, label))

    def __len__(self):
        return len(self.ops)

    def build(self) -> U:
        u = U(self.ops, self.label)
        logger.debug("built %s: %d ops, %d elementary gates", u.name, len(self.ops), u.gate_count())
        return u

    def run(self, backend: Optional[str] = None, initial: Optional[Qubits] = None, dtype=None,
            check_norm=True, num_threads=None, check_norm_tol=None) -> Qubits:
        """Apply the circuit to ``initial`` (default |0...0>) and return the state.

        ``initial`` is not modified; the circuit runs on a copy, cast to
        ``dtype`` when one is given.
        """
        if initial is None:
            st = Qubits.zeros(self.n, dtype=dtype)
        else:
            if initial.n != self.n:
                raise InvalidSize(f"initial state has {initial.n} qubits, circuit has {self.n}")
            st = initial.copy()
            if dtype is not None:
                st.psi = st.psi.astype(dtype, copy=False)

        kernels = load_backend(backend)
        if num_threads is not None and kernels.__name__.endswith("apply_numba"):
            set_threads(int(num_threads))

        self.build().apply(st, backend=backend)

        if check_norm:
            st.check_normalized(tol=check_norm_tol)
        return st
