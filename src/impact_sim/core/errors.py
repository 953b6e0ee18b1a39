"""Exceptions raised by the impact simulation core."""
from __future__ import annotations


class ImpactSimError(Exception):
    """Base class for all simulation errors."""


class InvalidConfiguration(ImpactSimError, ValueError):
    """Raised when planet or impactor parameters are outside their domain."""


class DegenerateGeometry(ImpactSimError, ArithmeticError):
    """Raised when a trajectory cannot be built from the given vectors."""


class SessionStateError(ImpactSimError, RuntimeError):
    """Raised when a session or command is used out of order."""


__all__ = [
    "DegenerateGeometry",
    "ImpactSimError",
    "InvalidConfiguration",
    "SessionStateError",
]
