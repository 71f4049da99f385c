# qit/backend.py
"""Resolve a backend name to its kernel module.

Every kernel module exposes the same functions (``apply_x``, ``apply_y``,
``apply_z``, ``apply_h``, ``apply_phase``, ``apply_rz``, ``apply_rx``,
``apply_ry``), each taking ``(psi, target, cmask[, theta])`` and updating
``psi`` in place.
"""
import importlib
from types import ModuleType
from typing import Optional

from .config import BACKENDS, get_settings
from .logging import get_logger

logger = get_logger(__name__)

_loaded = {}


def load_backend(name: Optional[str] = None) -> ModuleType:
    """Return the kernel module for ``name`` (configured default if None)."""
    if name is None:
        name = get_settings().backend
    if name in _loaded:
        return _loaded[name]
    if name not in BACKENDS:
        raise NotImplementedError(f"Unknown backend: {name}")

    try:
        module = importlib.import_module(f"{__package__}.apply_{name}")
    except ImportError as e:
        if name == "numba":
            raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
        raise
    logger.debug("loaded %s backend", name)
    _loaded[name] = module
    return module


def set_threads(n: int):
    """Size the numba thread pool used by parallel kernels."""
    load_backend("numba").set_threads(int(n))


def get_threads() -> int:
    return load_backend("numba").get_threads()
