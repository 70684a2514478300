"""Output layer: console messages and result display."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
    make_rich_console,
)
from .display import DisplayHarness, sort_views

__all__ = [
    "ConsoleProtocol",
    "DisplayHarness",
    "MockConsole",
    "RichConsole",
    "Style",
    "make_rich_console",
    "sort_views",
]
