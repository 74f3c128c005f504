"""
Numerical constants and runtime configuration.

The snapping epsilon and the validation tolerance are fixed constants:
every value in the package is computed against them. Tolerance, history
depth and display precision can be overridden per session through
:class:`LabConfig`, either directly or from ``QMATRIX_*`` environment
variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from qmatrix.errors import ConfigError

SNAP_EPSILON = 1e-15
"""Components with absolute value below this are stored as exactly 0."""

DEFAULT_TOLERANCE = 1e-12
"""Tolerance for unitarity, normalization and complex equality checks."""

ENTROPY_CUTOFF = 1e-15
"""Probabilities below this contribute nothing to the entropy."""

BLOCH_PHASE_CUTOFF = 1e-10
"""Below this |beta| the relative phase is undefined and reported as 0."""

DEFAULT_HISTORY_CAPACITY = 50
DEFAULT_PRECISION = 4

_ENV_PREFIX = "QMATRIX_"


@dataclass(frozen=True)
class LabConfig:
    """
    Per-session settings.

    Parameters
    ----------
    tolerance : float
        Tolerance used by validation and export checks.
    history_capacity : int
        Maximum number of undo snapshots kept.
    precision : int
        Decimal places used when rendering complex numbers.
    log_level : str
        Level name passed to :func:`qmatrix.logging.set_log_level`.
    """

    tolerance: float = DEFAULT_TOLERANCE
    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    precision: int = DEFAULT_PRECISION
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not self.tolerance > 0:
            raise ConfigError(f"tolerance must be positive, got {self.tolerance}")
        if self.history_capacity < 1:
            raise ConfigError(
                f"history_capacity must be at least 1, got {self.history_capacity}"
            )
        if not 0 <= self.precision <= 15:
            raise ConfigError(f"precision must be in [0, 15], got {self.precision}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LabConfig:
        """Build a config from ``QMATRIX_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        try:
            if f"{_ENV_PREFIX}TOLERANCE" in env:
                kwargs["tolerance"] = float(env[f"{_ENV_PREFIX}TOLERANCE"])
            if f"{_ENV_PREFIX}HISTORY_CAPACITY" in env:
                kwargs["history_capacity"] = int(env[f"{_ENV_PREFIX}HISTORY_CAPACITY"])
            if f"{_ENV_PREFIX}PRECISION" in env:
                kwargs["precision"] = int(env[f"{_ENV_PREFIX}PRECISION"])
        except ValueError as e:
            raise ConfigError(f"Invalid {_ENV_PREFIX}* value: {e}") from e
        if f"{_ENV_PREFIX}LOG_LEVEL" in env:
            kwargs["log_level"] = env[f"{_ENV_PREFIX}LOG_LEVEL"]
        return cls(**kwargs)
