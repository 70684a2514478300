from __future__ import annotations

import logging
from dataclasses import dataclass

import typer

from gfold.core.config import Config, load_config
from gfold.core.errors import ErrorCode
from gfold.core.result import Err
from gfold.output.console import ConsoleProtocol, RichConsole
from gfold.output.errors import print_config_error
from gfold.platform.log import setup_logging
from gfold.platform.paths import config_file


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    logger: logging.Logger


def build_context(*, ignore_config_file: bool = False, verbosity: int = 0) -> CLIContext:
    """Set up logging and load the config file (unless ignored).

    Exits with CONFIG_ERROR if the config file exists but is invalid.
    """
    logger = setup_logging(verbosity)

    config = Config()
    if ignore_config_file:
        logger.debug("ignoring config file")
    else:
        path = config_file()
        result = load_config(path)
        if isinstance(result, Err):
            print_config_error(result.error, RichConsole())
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
        config = result.value
        logger.debug("loaded config from %s", path)

    return CLIContext(
        config=config,
        console=RichConsole(config.color_mode),
        logger=logger,
    )
