"""Exception hierarchy for qmatrix."""

from __future__ import annotations


class QMatrixError(Exception):
    """Base class for all qmatrix errors."""


class UnknownGateError(QMatrixError, KeyError):
    """Raised when a gate identifier is not in the registry."""

    def __init__(self, gate: object, available: list[str] | None = None) -> None:
        self.gate = gate
        self.available = available or []
        msg = f"Unknown gate: {gate!r}"
        if self.available:
            msg += f". Available: {self.available}"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class ExportFormatError(QMatrixError, ValueError):
    """Raised when an export record is malformed."""


class ConfigError(QMatrixError, ValueError):
    """Raised for invalid configuration values."""
