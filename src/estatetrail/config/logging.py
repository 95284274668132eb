"""Shared logging helpers for estatetrail."""

from __future__ import annotations

import logging
import os

from .errors import InvalidConfigurationError

LOG_LEVEL_ENV = "ESTATETRAIL_LOG_LEVEL"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI format.

    Pass ``force=True`` to reconfigure during tests or when the CLI raises
    verbosity after startup.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def log_level_from_env(default: int = logging.INFO) -> int:
    """Resolve ``ESTATETRAIL_LOG_LEVEL`` (a level name such as ``DEBUG``)."""

    value = os.getenv(LOG_LEVEL_ENV)
    if value is None or not value.strip():
        return default
    level = logging.getLevelNamesMapping().get(value.strip().upper())
    if level is None:
        raise InvalidConfigurationError(LOG_LEVEL_ENV, value, "is not a logging level name")
    return level
