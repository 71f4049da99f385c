# qit/errors.py
"""Exceptions raised by the simulator.

Every error is raised where it is detected (construction or apply) and is
recoverable by the caller; nothing is corrected silently.
"""


class QitError(Exception):
    """Base class for all simulator errors."""


class InvalidSize(QitError, ValueError):
    """Qubit count is zero, negative, or above the configured maximum."""


class InvalidIndex(QitError, IndexError):
    """Basis-state index out of range for the qubit count."""


class InvalidQubitIndex(QitError, IndexError):
    """A gate references a qubit outside ``[0, n)`` or reuses one."""


class InvalidRegister(QitError, ValueError):
    """Register indices or constant are inconsistent for an arithmetic circuit."""
