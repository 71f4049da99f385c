# qit/config.py
"""Process-wide simulator settings.

Defaults come from environment variables and can be overridden at runtime
with :func:`configure` or temporarily with :func:`settings_context`.

    QIT_BACKEND      kernel backend: serial, numpy or numba (default numpy)
    QIT_MAX_QUBITS   largest register zeros()/from_num() will allocate (26)
    QIT_NORM_TOL     tolerance used by normalization checks (1e-9)
    QIT_DTYPE        amplitude dtype: complex64 or complex128 (complex128)
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator

import numpy as np

BACKENDS = ("serial", "numpy", "numba")
DTYPES = ("complex64", "complex128")


@dataclass(frozen=True)
class Settings:
    backend: str = "numpy"
    max_qubits: int = 26
    norm_tol: float = 1e-9
    dtype: str = "complex128"

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {self.backend!r}")
        if self.dtype not in DTYPES:
            raise ValueError(f"dtype must be one of {DTYPES}, got {self.dtype!r}")
        if self.max_qubits < 1:
            raise ValueError(f"max_qubits must be >= 1, got {self.max_qubits}")
        if self.norm_tol <= 0:
            raise ValueError(f"norm_tol must be positive, got {self.norm_tol}")

    @property
    def np_dtype(self) -> np.dtype:
        return np.dtype(self.dtype)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            backend=os.getenv("QIT_BACKEND", cls.backend).lower(),
            max_qubits=int(os.getenv("QIT_MAX_QUBITS", cls.max_qubits)),
            norm_tol=float(os.getenv("QIT_NORM_TOL", cls.norm_tol)),
            dtype=os.getenv("QIT_DTYPE", cls.dtype).lower(),
        )


_settings: Settings = Settings.from_env()


def get_settings() -> Settings:
    return _settings


def configure(**overrides) -> Settings:
    """Replace individual settings, e.g. ``configure(backend="serial")``."""
    global _settings
    _settings = replace(_settings, **overrides)
    return _settings


@contextmanager
def settings_context(**overrides) -> Iterator[Settings]:
    """Temporarily override settings within a ``with`` block.

    >>> with settings_context(backend="serial"):
    ...     pass
    """
    global _settings
    prev = _settings
    _settings = replace(prev, **overrides)
    try:
        yield _settings
    finally:
        _settings = prev
