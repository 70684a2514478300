"""Error presentation utilities.

Centralized error formatting and exit code mapping for the CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gfold.core.config import ConfigError
from gfold.core.errors import ErrorCode
from gfold.git.collector import CollectError, RepositoryCollection
from gfold.output.console import Style

if TYPE_CHECKING:
    from gfold.output.console import ConsoleProtocol

__all__ = [
    "collection_exit_code",
    "print_collect_error",
    "print_config_error",
    "print_resolve_errors",
]


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.path is not None:
        console.print(f"config file: {error.path}", Style.DIM)
        console.print("hint: fix the file or pass --ignore-config-file", Style.DIM)


def print_collect_error(error: CollectError, console: ConsoleProtocol) -> None:
    console.error(str(error))


def print_resolve_errors(collection: RepositoryCollection, console: ConsoleProtocol) -> None:
    """Summarize repositories that could not be resolved, after the results."""
    if collection.ok:
        return
    count = len(collection.errors)
    noun = "repository" if count == 1 else "repositories"
    console.warning(f"{count} {noun} could not be resolved:")
    for error in sorted(collection.errors, key=lambda e: str(e.path)):
        console.print(f"  {error}", Style.DIM)


def collection_exit_code(collection: RepositoryCollection) -> int:
    """OK when every repository resolved, PARTIAL otherwise."""
    return int(ErrorCode.OK if collection.ok else ErrorCode.PARTIAL)
