"""Logging setup for erpcore entry points."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT: Final[str] = "%H:%M:%S"
NOISY_LOGGERS: Final[tuple[str, ...]] = ("sqlalchemy.engine", "alembic.runtime.migration")


def resolve_log_level(level: int | str | None = None) -> int:
    """Return a numeric log level from an explicit value or ``ERPCORE_LOG_LEVEL``."""

    candidate = level if level is not None else os.getenv("ERPCORE_LOG_LEVEL", "INFO")
    if isinstance(candidate, int):
        return candidate
    resolved = logging.getLevelNamesMapping().get(candidate.strip().upper())
    if resolved is None:
        raise ConfigurationError(f"Unknown log level {candidate!r}")
    return resolved


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Initialise the root logger with a terse CLI format.

    Library loggers listed in ``NOISY_LOGGERS`` are capped at WARNING unless the
    requested level is DEBUG. Pass ``force=True`` to reconfigure during tests.
    """

    numeric_level = resolve_log_level(level)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=force,
    )
    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
