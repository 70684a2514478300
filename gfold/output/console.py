"""Console output abstraction.

A protocol for user-facing messages (errors, warnings, summaries) with a Rich
implementation for the CLI and a capturing implementation for tests. Results
themselves are rendered by ``gfold.output.display``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

from rich.console import Console

from gfold.core.config import ColorMode

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "make_rich_console",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    BOLD = auto()

    def __str__(self) -> str:
        return self.name.lower()


def make_rich_console(color_mode: ColorMode, *, stderr: bool = False) -> Console:
    """Build a Rich console honoring the color mode.

    ``always`` forces color even when piped, ``compatibility`` only colors a
    real terminal and sticks to the 8 standard colors, ``never`` disables it.
    """
    match color_mode:
        case ColorMode.ALWAYS:
            return Console(stderr=stderr, force_terminal=True, highlight=False)
        case ColorMode.COMPATIBILITY:
            return Console(stderr=stderr, color_system="standard", highlight=False)
        case ColorMode.NEVER:
            return Console(stderr=stderr, no_color=True, color_system=None, highlight=False)


class ConsoleProtocol(Protocol):
    """Interface for user-facing messages."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Console implementation using Rich. Writes to stderr by default so
    messages never mix with results on stdout (JSON in particular)."""

    def __init__(self, color_mode: ColorMode = ColorMode.ALWAYS, *, stderr: bool = True) -> None:
        self._console = make_rich_console(color_mode, stderr=stderr)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.BOLD: "bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False, soft_wrap=True)
        else:
            self._console.print(message, markup=False, soft_wrap=True)

    def success(self, message: str) -> None:
        self._prefixed("OK", "green", message)

    def error(self, message: str) -> None:
        self._prefixed("error:", "red bold", message)

    def warning(self, message: str) -> None:
        self._prefixed("warning:", "yellow", message)

    def info(self, message: str) -> None:
        self._prefixed("info:", "cyan", message)

    def newline(self) -> None:
        self._console.print()

    def _prefixed(self, prefix: str, style: str, message: str) -> None:
        # Messages carry file paths; keep them out of Rich markup parsing.
        self._console.print(f"[{style}]{prefix}[/{style}] ", end="")
        self._console.print(message, markup=False, soft_wrap=True)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helper methods

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
