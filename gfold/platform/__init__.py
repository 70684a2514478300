"""Platform layer: subprocesses, user paths and logging setup."""

from .log import LOGGER_NAME, setup_logging
from .paths import config_file, home
from .process import ProcessError, run

__all__ = [
    # log
    "LOGGER_NAME",
    "setup_logging",
    # paths
    "config_file",
    "home",
    # process
    "ProcessError",
    "run",
]
