"""Tests for gfold.output.errors module."""

from __future__ import annotations

from pathlib import Path

from gfold.core.config import ConfigError
from gfold.core.errors import ErrorCode
from gfold.git.collector import CollectError, RepositoryCollection
from gfold.git.view import ResolveError
from gfold.output.console import MockConsole, Style
from gfold.output.errors import (
    collection_exit_code,
    print_collect_error,
    print_config_error,
    print_resolve_errors,
)


class TestPrintConfigError:
    def test_with_path_adds_hint(self) -> None:
        console = MockConsole()
        print_config_error(ConfigError("Invalid TOML syntax", path=Path("/home/me/.config/gfold.toml")), console)

        assert console.messages[0] == "error: Invalid TOML syntax"
        assert console.find("--ignore-config-file")
        assert console.count(Style.DIM) == 2

    def test_without_path(self) -> None:
        console = MockConsole()
        print_config_error(ConfigError("bad"), console)
        assert console.messages == ["error: bad"]


def test_print_collect_error() -> None:
    console = MockConsole()
    print_collect_error(CollectError(Path("/nowhere"), "No such file or directory"), console)
    assert console.messages == ["error: /nowhere: No such file or directory"]


class TestPrintResolveErrors:
    def test_silent_when_ok(self) -> None:
        console = MockConsole()
        print_resolve_errors(RepositoryCollection(), console)
        assert console.outputs == []

    def test_lists_errors_sorted(self) -> None:
        collection = RepositoryCollection()
        collection.errors.append(ResolveError(Path("/src/zz"), "boom"))
        collection.errors.append(ResolveError(Path("/src/aa"), "bang"))
        console = MockConsole()

        print_resolve_errors(collection, console)

        assert console.messages == [
            "warning: 2 repositories could not be resolved:",
            "  /src/aa: bang",
            "  /src/zz: boom",
        ]

    def test_singular(self) -> None:
        collection = RepositoryCollection()
        collection.errors.append(ResolveError(Path("/src/x"), "boom"))
        console = MockConsole()

        print_resolve_errors(collection, console)

        assert console.messages[0] == "warning: 1 repository could not be resolved:"


class TestCollectionExitCode:
    def test_ok(self) -> None:
        assert collection_exit_code(RepositoryCollection()) == ErrorCode.OK

    def test_partial(self) -> None:
        collection = RepositoryCollection()
        collection.errors.append(ResolveError(Path("/src/x"), "boom"))
        assert collection_exit_code(collection) == ErrorCode.PARTIAL
