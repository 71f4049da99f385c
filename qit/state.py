# qit/state.py
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .config import get_settings
from .errors import InvalidIndex, InvalidSize


def _check_size(n) -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidSize(f"qubit count must be an int, got {type(n).__name__}")
    n = int(n)
    limit = get_settings().max_qubits
    if n < 1 or n > limit:
        raise InvalidSize(f"qubit count must be in [1, {limit}], got {n}")
    return n


def _check_index(n: int, k) -> int:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidIndex(f"basis index must be an int, got {type(k).__name__}")
    k = int(k)
    if not 0 <= k < (1 << n):
        raise InvalidIndex(f"basis index {k} out of range for {n} qubits")
    return k


@dataclass
class Qubits:
    """Dense state of ``n`` qubits.

    ``psi[i]`` is the amplitude of the basis state whose bit pattern is ``i``;
    bit ``q`` of ``i`` is qubit ``q`` (little-endian). Gates mutate ``psi``
    in place.
    """

    n: int
    psi: np.ndarray  # shape (2**n,), dtype complex64/128

    @staticmethod
    def zeros(n: int, dtype=None) -> "Qubits":
        """|0...0>"""
        return Qubits.from_num(n, 0, dtype=dtype)

    @staticmethod
    def from_num(n: int, k: int, dtype=None) -> "Qubits":
        """Basis state |k>."""
        return Qubits.from_comp(n, k, 1.0 + 0.0j, dtype=dtype)

    @staticmethod
    def from_comp(n: int, k: int, comp: complex, dtype=None) -> "Qubits":
        """Basis state |k> carrying the unit-modulus amplitude ``comp``."""
        n = _check_size(n)
        k = _check_index(n, k)
        if abs(abs(comp) ** 2 - 1.0) > get_settings().norm_tol:
            raise ValueError(f"amplitude {comp} does not have unit modulus")
        try:
            psi = np.zeros(1 << n, dtype=dtype or get_settings().np_dtype)
        except MemoryError as e:
            raise InvalidSize(f"cannot allocate {1 << n} amplitudes for {n} qubits") from e
        psi[k] = comp
        return Qubits(n=n, psi=psi)

    @staticmethod
    def from_amplitudes(n: int, amplitudes: Sequence[complex], dtype=None) -> "Qubits":
        """Copy an explicit amplitude vector of length ``2**n``."""
        n = _check_size(n)
        psi = np.array(amplitudes, dtype=dtype or get_settings().np_dtype).reshape(-1)
        if psi.shape[0] != (1 << n):
            raise InvalidSize(f"expected {1 << n} amplitudes for {n} qubits, got {psi.shape[0]}")
        return Qubits(n=n, psi=psi)

    @property
    def dtype(self):
        return self.psi.dtype

    @property
    def num_states(self) -> int:
        return self.psi.shape[0]

    def amplitude(self, index: int) -> complex:
        return complex(self.psi[_check_index(self.n, index)])

    def probability(self, index: int) -> float:
        return float(abs(self.psi[_check_index(self.n, index)]) ** 2)

    def probs(self) -> np.ndarray:
        return np.abs(self.psi) ** 2

    def norm2(self) -> float:
        return float(np.vdot(self.psi, self.psi).real)

    def check_normalized(self, tol=None):
        if tol is None:
            tol = get_settings().norm_tol
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: ||psi||^2={n2}")

    def copy(self) -> "Qubits":
        return Qubits(self.n, self.psi.copy())

    def as_numpy(self) -> np.ndarray:
        return self.psi

    def isclose(self, other: "Qubits", atol: float = 1e-9) -> bool:
        return self.n == other.n and bool(np.allclose(self.psi, other.psi, atol=atol, rtol=0))

    # ---------------------------- read-out ----------------------------

    def _ket(self, index: int) -> str:
        return f"|{index:0{self.n}b}⟩"

    def format_cmps(self) -> List[str]:
        """One ``|b..b⟩ : +re +imi`` line per basis state, rounded to 3 places."""
        lines = []
        for i, a in enumerate(self.psi):
            lines.append(f"{self._ket(i)} : {round(a.real, 3):+.3f} {round(a.imag, 3):+.3f}i")
        return lines

    def format_probs(self) -> List[str]:
        """One ``|b..b⟩ : pp%`` line per basis state."""
        return [f"{self._ket(i)} : {round(p * 100):>3}%" for i, p in enumerate(self.probs())]

    def print_cmps(self):
        print("\n".join(self.format_cmps()))

    def print_probs(self):
        print("\n".join(self.format_probs()))

    # --------------------------- measurement ---------------------------

    def most_plausible(self) -> int:
        """Basis index with the largest probability (first one on ties)."""
        return int(np.argmax(self.probs()))

    def marginal_probs(self, targets: Sequence[int]) -> np.ndarray:
        """Probabilities of the sub-register ``targets`` (targets[0] is its LSB)."""
        targets = list(targets)
        for q in targets:
            if not 0 <= q < self.n:
                raise InvalidIndex(f"qubit {q} out of range for {self.n} qubits")
        idx = np.arange(self.num_states)
        sub = np.zeros_like(idx)
        for j, q in enumerate(targets):
            sub |= ((idx >> q) & 1) << j
        return np.bincount(sub, weights=self.probs(), minlength=1 << len(targets))

    def sample(self, shots: int = 1, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Draw ``shots`` basis indices from the current distribution."""
        rng = rng or np.random.default_rng()
        p = self.probs()
        return rng.choice(self.num_states, size=shots, p=p / p.sum())
