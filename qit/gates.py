# qit/gates.py
"""Gate objects.

Every gate is an :class:`Operator`: ``op.apply(state)`` transforms the
amplitude vector of ``state`` *in place* and returns the same ``Qubits``
object. No gate stores a matrix; each one calls a closed-form kernel of the
selected backend on the amplitude pairs it touches.

Controls are expressed as a bit mask. Controlled gates OR their control
bits into the mask they hand to the kernel, and :class:`CU` ORs its control
bit into the mask it hands to every child, so any gate (or whole circuit)
can be controlled without rewriting it.

    >>> from qit.state import Qubits
    >>> from qit.gates import CX
    >>> CX(0, 1).apply(Qubits.from_num(2, 1)).most_plausible()
    3
"""
from typing import FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .backend import load_backend
from .errors import InvalidQubitIndex
from .logging import get_logger
from .state import Qubits

logger = get_logger(__name__)

Controls = Tuple[int, ...]


def _qubit(q) -> int:
    if isinstance(q, bool) or not isinstance(q, (int, np.integer)):
        raise InvalidQubitIndex(f"qubit index must be an int, got {q!r}")
    if q < 0:
        raise InvalidQubitIndex(f"qubit index must be >= 0, got {q}")
    return int(q)


def _distinct(qubits: Sequence[int]):
    if len(set(qubits)) != len(qubits):
        raise InvalidQubitIndex(f"qubit indices must be distinct, got {list(qubits)}")


class Operator:
    """Base class of all gates."""

    qubits: FrozenSet[int] = frozenset()

    def apply(self, state: Qubits, backend: Optional[str] = None, copy: bool = False) -> Qubits:
        """Apply to ``state`` in place (or to a copy) and return the result.

        Raises InvalidQubitIndex if the gate references a qubit >= state.n.
        """
        self.check_fits(state.n)
        if copy:
            state = state.copy()
        kernels = load_backend(backend)
        logger.debug("apply %s (%d gates) to %d qubits [%s]",
                     self.name, self.gate_count(), state.n, kernels.__name__)
        self._apply(state.psi, kernels, 0)
        return state

    def check_fits(self, n: int):
        if self.qubits and max(self.qubits) >= n:
            raise InvalidQubitIndex(
                f"{self.name} uses qubit {max(self.qubits)} but the state has {n} qubits")

    def _apply(self, psi: np.ndarray, kernels, cmask: int):
        raise NotImplementedError

    @property
    def name(self) -> str:
        raise NotImplementedError

    def inverse(self) -> "Operator":
        raise NotImplementedError

    def gate_count(self) -> int:
        """Number of elementary gates this operator expands to."""
        return 1

    def flatten(self, controls: Controls = ()) -> List[Tuple[Controls, "Operator"]]:
        """Elementary gates in application order, with the extra controls
        inherited from enclosing :class:`CU` blocks."""
        return [(controls, self)]

    def _key(self) -> tuple:
        raise NotImplementedError

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__, self._key()))

    def __repr__(self):
        return self.name


# ------------------------- single-qubit gates -------------------------

class _SingleQubitGate(Operator):
    symbol = ""
    kernel = ""

    def __init__(self, target: int):
        self.target = _qubit(target)
        self.qubits = frozenset((self.target,))

    @property
    def name(self) -> str:
        return f"{self.symbol}({self.target})"

    def _apply(self, psi, kernels, cmask):
        getattr(kernels, self.kernel)(psi, self.target, cmask)

    def inverse(self):
        # X, Y, Z and H are their own inverses
        return self

    def _key(self):
        return (self.target,)


class X(_SingleQubitGate):
    """Pauli-X (NOT): swaps the two amplitudes of every pair."""
    symbol, kernel = "X", "apply_x"


class Y(_SingleQubitGate):
    """Pauli-Y: (a0, a1) -> (-i a1, i a0)."""
    symbol, kernel = "Y", "apply_y"


class Z(_SingleQubitGate):
    """Pauli-Z: negates amplitudes whose target bit is 1."""
    symbol, kernel = "Z", "apply_z"


class H(_SingleQubitGate):
    """Hadamard: (a0, a1) -> ((a0 + a1)/sqrt2, (a0 - a1)/sqrt2)."""
    symbol, kernel = "H", "apply_h"


class _RotationGate(Operator):
    symbol = ""
    kernel = ""

    def __init__(self, target: int, angle: float):
        self.target = _qubit(target)
        self.angle = float(angle)
        self.qubits = frozenset((self.target,))

    @property
    def name(self) -> str:
        return f"{self.symbol}_{self.angle:g}({self.target})"

    def _apply(self, psi, kernels, cmask):
        getattr(kernels, self.kernel)(psi, self.target, cmask, self.angle)

    def inverse(self):
        return type(self)(self.target, -self.angle)

    def _key(self):
        return (self.target, self.angle)


class R(_RotationGate):
    """Phase rotation about z: multiplies the |1> amplitude by e^{i angle}."""
    symbol, kernel = "R", "apply_phase"


class RX(_RotationGate):
    symbol, kernel = "RX", "apply_rx"


class RY(_RotationGate):
    symbol, kernel = "RY", "apply_ry"


class RZ(_RotationGate):
    """exp(-i angle Z / 2): |0> gets e^{-i angle/2}, |1> gets e^{+i angle/2}."""
    symbol, kernel = "RZ", "apply_rz"


# --------------------------- controlled X ---------------------------

class CNX(Operator):
    """X on ``target`` where every qubit in ``controls`` is 1."""

    def __init__(self, controls: Iterable[int], target: int):
        self.controls = tuple(_qubit(c) for c in controls)
        self.target = _qubit(target)
        if not self.controls:
            raise InvalidQubitIndex("a controlled gate needs at least one control")
        _distinct(self.controls + (self.target,))
        self.qubits = frozenset(self.controls + (self.target,))
        self._cmask = 0
        for c in self.controls:
            self._cmask |= 1 << c

    @property
    def name(self) -> str:
        return f"CNX[{','.join(map(str, self.controls))}]->{self.target}"

    def _apply(self, psi, kernels, cmask):
        kernels.apply_x(psi, self.target, cmask | self._cmask)

    def inverse(self):
        return self

    def _key(self):
        return (self.controls, self.target)


class CX(CNX):
    """Controlled NOT."""

    def __init__(self, control: int, target: int):
        super().__init__((control,), target)
        self.control = self.controls[0]

    @property
    def name(self) -> str:
        return f"CX({self.control}->{self.target})"


class CCX(CNX):
    """Toffoli."""

    def __init__(self, control1: int, control2: int, target: int):
        super().__init__((control1, control2), target)

    @property
    def name(self) -> str:
        return f"CCX([{self.controls[0]},{self.controls[1]}]->{self.target})"


# ----------------------------- composites -----------------------------

class U(Operator):
    """An ordered sequence of operators applied one after another.

    Children are kept in a tuple and never modified, so a sub-circuit can
    be shared by any number of composites.
    """

    def __init__(self, gates: Iterable[Operator], label: str = "U"):
        self.gates: Tuple[Operator, ...] = tuple(gates)
        for g in self.gates:
            if not isinstance(g, Operator):
                raise TypeError(f"U children must be Operators, got {type(g).__name__}")
        self.label = str(label)
        self.qubits = frozenset().union(*(g.qubits for g in self.gates))
        self._count = sum(g.gate_count() for g in self.gates)

    @property
    def name(self) -> str:
        return f"U[{self.label}]"

    def _apply(self, psi, kernels, cmask):
        for gate in self.gates:
            gate._apply(psi, kernels, cmask)

    def inverse(self) -> "U":
        return U((g.inverse() for g in reversed(self.gates)), self.label)

    def rename(self, label: str) -> "U":
        return U(self.gates, label)

    def gate_count(self) -> int:
        return self._count

    def flatten(self, controls: Controls = ()):
        out = []
        for gate in self.gates:
            out.extend(gate.flatten(controls))
        return out

    def describe(self, indent: int = 0) -> str:
        """Indented tree of the composite, one operator per line."""
        pad = "  " * indent
        lines = [pad + self.name]
        for gate in self.gates:
            if isinstance(gate, U):
                lines.append(gate.describe(indent + 1))
            else:
                lines.append(pad + "  " + gate.name)
        return "\n".join(lines)

    def __len__(self):
        return len(self.gates)

    def __iter__(self) -> Iterator[Operator]:
        return iter(self.gates)

    def _key(self):
        return (self.label, self.gates)


class CU(U):
    """Controlled composite: every child acts only where ``control`` is 1."""

    def __init__(self, control: int, gates: Iterable[Operator], label: str = "CU"):
        super().__init__(gates, label)
        self.control = _qubit(control)
        if self.control in self.qubits:
            raise InvalidQubitIndex(
                f"control qubit {self.control} is also used inside {self.label!r}")
        self.qubits = self.qubits | {self.control}

    @classmethod
    def from_u(cls, control: int, u: U) -> "CU":
        return cls(control, u.gates, u.label)

    @property
    def name(self) -> str:
        return f"CU({self.control})[{self.label}]"

    def _apply(self, psi, kernels, cmask):
        super()._apply(psi, kernels, cmask | (1 << self.control))

    def inverse(self) -> "CU":
        return CU(self.control, (g.inverse() for g in reversed(self.gates)), self.label)

    def rename(self, label: str) -> "CU":
        return CU(self.control, self.gates, label)

    def flatten(self, controls: Controls = ()):
        return super().flatten(controls + (self.control,))

    def _key(self):
        return (self.control, self.label, self.gates)
