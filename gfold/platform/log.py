"""Logger setup for the gfold CLI.

Library code never configures logging: scanner, resolver and collector take a
``logging.Logger`` argument and default to their module logger, which is a
child of the ``gfold`` logger configured here.
"""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    "LOG_ENV_VAR",
    "LOGGER_NAME",
    "resolve_level",
    "setup_logging",
]

LOGGER_NAME: Final[str] = "gfold"
LOG_ENV_VAR: Final[str] = "GFOLD_LOG"

_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def resolve_level(verbosity: int, env_value: str | None = None) -> int:
    """Pick a log level from ``-v`` count, overridden by a level name in the env.

    Unknown level names in the env are ignored.
    """
    if env_value:
        named = logging.getLevelNamesMapping().get(env_value.strip().upper())
        if named is not None:
            return named
    index = min(max(verbosity, 0), len(_VERBOSITY_LEVELS) - 1)
    return _VERBOSITY_LEVELS[index]


def setup_logging(verbosity: int = 0) -> logging.Logger:
    """Configure the ``gfold`` logger with a Rich handler on stderr."""
    level = resolve_level(verbosity, os.environ.get(LOG_ENV_VAR))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=level <= logging.DEBUG,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False

    return logger
