"""Logging helpers.

Every module gets its logger through :func:`get_logger` so that all
qmatrix output shares one handler, one format and one level switch.
The starting level is read from ``QMATRIX_LOG_LEVEL`` (WARNING when unset
or unknown); :func:`apply_config` switches to a :class:`LabConfig` level.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from qmatrix.config import LabConfig

LOG_LEVEL_ENV = "QMATRIX_LOG_LEVEL"
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        return value if isinstance(value, int) else logging.WARNING
    return level


_DEFAULT_LEVEL = _coerce_level(os.environ.get(LOG_LEVEL_ENV, "WARNING"))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a ``qmatrix.*`` logger.

    Args:
        name: Logger name, typically ``__name__``. ``None`` gives the
            package logger.

    Returns:
        Cached logger writing to stderr.
    """
    if name is None:
        name = "qmatrix"
    logger_name = name if name == "qmatrix" or name.startswith("qmatrix.") else f"qmatrix.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every qmatrix logger, current and future."""
    global _DEFAULT_LEVEL
    level = _coerce_level(level)
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Replace the handlers of all qmatrix loggers.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format; defaults to ``[LEVEL] name: message``.
        stream: Output stream (default: ``sys.stderr``).
    """
    global _DEFAULT_LEVEL
    level = _coerce_level(level)
    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _DEFAULT_LEVEL = level


def apply_config(config: LabConfig) -> None:
    """Set every qmatrix logger to ``config.log_level``."""
    set_log_level(config.log_level)
