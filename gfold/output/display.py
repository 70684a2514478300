"""Rendering of a RepositoryCollection to stdout.

Three formats, picked by ``DisplayMode``:
- standard: one block per repository, sorted by status then name
- classic: one aligned table per parent directory
- json: pretty-printed array of every view, sorted by status then name
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from gfold.core.config import ColorMode, DisplayMode
from gfold.git.collector import RepositoryCollection
from gfold.git.status import Status
from gfold.git.view import RepositoryView
from gfold.output.console import make_rich_console

__all__ = [
    "NONE",
    "STATUS_COLORS",
    "DisplayHarness",
    "sort_views",
]

_log = logging.getLogger(__name__)

PAD = 2
NONE = "none"

STATUS_COLORS: dict[Status, str] = {
    Status.BARE: "red",
    Status.CLEAN: "green",
    Status.UNCLEAN: "yellow",
    Status.UNPUSHED: "blue",
    Status.UNKNOWN: "red",
}


def sort_views(views: Iterable[RepositoryView]) -> list[RepositoryView]:
    """Sort by status name, then repository name."""
    return sorted(views, key=lambda v: (str(v.status), v.name))


class DisplayHarness:
    """Prints a collection in the configured display mode."""

    def __init__(
        self,
        display_mode: DisplayMode,
        color_mode: ColorMode,
        console: Console | None = None,
    ) -> None:
        self.display_mode = display_mode
        self.color_mode = color_mode
        self._console = console or make_rich_console(color_mode)
        self._gray = "cyan" if color_mode is ColorMode.COMPATIBILITY else "color(242)"

    def run(self, collection: RepositoryCollection) -> None:
        match self.display_mode:
            case DisplayMode.STANDARD:
                self.standard(collection)
            case DisplayMode.CLASSIC:
                self.classic(collection)
            case DisplayMode.JSON:
                self.json(collection)

    def standard(self, collection: RepositoryCollection) -> None:
        _log.debug("displaying in standard mode")
        for view in sort_views(collection.views()):
            header = Text(view.name, style="bold")
            if view.parent is None:
                _log.warning("parent is empty for repository: %s", view.name)
            else:
                header.append(f" ~ {view.path}", style=self._gray)
            self._emit(header)

            line = Text("  ")
            line.append(str(view.status), style=STATUS_COLORS[view.status])
            line.append(f" ({view.branch})")
            self._emit(line)

            if view.url is not None:
                self._emit(Text(f"  {view.url}"))
            if view.email is not None:
                self._emit(Text(f"  {view.email}"))

    def classic(self, collection: RepositoryCollection) -> None:
        _log.debug("displaying in classic mode")
        show_titles = len(collection) > 1
        for index, (parent, group) in enumerate(collection.items()):
            if show_titles:
                if index > 0:
                    self._emit(Text(""))
                self._emit(Text(parent if parent is not None else NONE, style="bold"))

            name_width = max(len(v.name) for v in group) + PAD
            status_width = max(len(str(v.status)) for v in group) + PAD
            branch_width = max(len(v.branch) for v in group) + PAD

            for view in sort_views(group):
                row = Text(view.name.ljust(name_width))
                row.append(str(view.status).ljust(status_width), style=STATUS_COLORS[view.status])
                row.append(view.branch.ljust(branch_width))
                row.append(view.url if view.url is not None else NONE)
                self._emit(row)

    def json(self, collection: RepositoryCollection) -> None:
        _log.debug("displaying in json mode")
        payload = [view.to_dict() for view in sort_views(collection.views())]
        self._console.print(
            json.dumps(payload, indent=2, ensure_ascii=False),
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    def _emit(self, text: Text) -> None:
        self._console.print(text, soft_wrap=True)
