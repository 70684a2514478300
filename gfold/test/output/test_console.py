"""Tests for gfold.output.console module."""

from __future__ import annotations

import pytest

from gfold.core.config import ColorMode
from gfold.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
    make_rich_console,
)


class TestStyle:
    """Test Style enum."""

    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.ERROR) == "error"
        assert str(Style.DIM) == "dim"


class TestMakeRichConsole:
    def test_always_forces_terminal(self) -> None:
        assert make_rich_console(ColorMode.ALWAYS).is_terminal

    def test_never_disables_color(self) -> None:
        console = make_rich_console(ColorMode.NEVER)
        assert console.no_color
        assert console.color_system is None

    def test_compatibility_uses_standard_colors(self) -> None:
        console = make_rich_console(ColorMode.COMPATIBILITY)
        assert console.color_system in (None, "standard")

    def test_stderr(self) -> None:
        assert make_rich_console(ColorMode.NEVER, stderr=True).stderr


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs == [OutputRecord("hello", Style.DEFAULT)]

    def test_prefixed_helpers(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("broken")
        console.warning("careful")
        console.info("fyi")
        console.newline()

        assert console.messages == ["OK done", "error: broken", "warning: careful", "info: fyi", ""]
        assert console.has_error()
        assert console.has_warning()
        assert console.count(Style.INFO) == 1

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.print("/src/a: boom", Style.DIM)
        console.print("/src/b: fine")

        assert [o.message for o in console.find("boom")] == ["/src/a: boom"]
        assert console.text == "/src/a: boom\n/src/b: fine"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.print("ok")


class TestRichConsole:
    """RichConsole writes messages to stderr."""

    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(ColorMode.NEVER)
        console.error("something failed")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: something failed" in captured.err

    def test_markup_in_message_is_literal(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(ColorMode.NEVER)
        console.warning("/src/[bold]weird[/bold]")

        assert "/src/[bold]weird[/bold]" in capsys.readouterr().err

    def test_print_with_style(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(ColorMode.NEVER)
        console.print("dim line", Style.DIM)
        console.newline()

        assert capsys.readouterr().err == "dim line\n\n"
