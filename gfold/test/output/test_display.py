"""Tests for gfold.output.display module."""

from __future__ import annotations

import io
import json

import pytest
from rich.console import Console

from gfold.core.config import ColorMode, DisplayMode
from gfold.git.collector import RepositoryCollection
from gfold.git.status import Status
from gfold.git.submodule import SubmoduleView
from gfold.git.view import RepositoryView
from gfold.output.display import DisplayHarness, sort_views

URL = "https://example.invalid/project.git"


def _render(collection: RepositoryCollection, mode: DisplayMode) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=True, color_system=None, width=200)
    DisplayHarness(mode, ColorMode.NEVER, console=console).run(collection)
    return buffer.getvalue()


@pytest.fixture
def collection() -> RepositoryCollection:
    collection = RepositoryCollection()
    collection.add(
        RepositoryView(
            name="zeta",
            branch="main",
            status=Status.UNCLEAN,
            parent="/src",
            url=URL,
            email="me@example.com",
        )
    )
    collection.add(RepositoryView(name="alpha", branch="HEAD", status=Status.CLEAN, parent="/src"))
    collection.add(
        RepositoryView(
            name="tools",
            branch="develop",
            status=Status.UNPUSHED,
            parent="/opt",
            submodules=(SubmoduleView(name="vendor", status=Status.CLEAN),),
        )
    )
    return collection


class TestSortViews:
    def test_status_then_name(self) -> None:
        views = [
            RepositoryView(name="b", branch="main", status=Status.UNCLEAN),
            RepositoryView(name="a", branch="main", status=Status.UNCLEAN),
            RepositoryView(name="c", branch="main", status=Status.BARE),
        ]

        assert [v.name for v in sort_views(views)] == ["c", "a", "b"]


class TestStandard:
    def test_blocks(self, collection: RepositoryCollection) -> None:
        output = _render(collection, DisplayMode.STANDARD)

        assert output == (
            "alpha ~ /src/alpha\n"
            "  clean (HEAD)\n"
            "zeta ~ /src/zeta\n"
            "  unclean (main)\n"
            f"  {URL}\n"
            "  me@example.com\n"
            "tools ~ /opt/tools\n"
            "  unpushed (develop)\n"
        )

    def test_missing_parent(self) -> None:
        collection = RepositoryCollection()
        collection.add(RepositoryView(name="root", branch="main", status=Status.CLEAN))

        assert _render(collection, DisplayMode.STANDARD) == "root\n  clean (main)\n"

    def test_empty(self) -> None:
        assert _render(RepositoryCollection(), DisplayMode.STANDARD) == ""


class TestClassic:
    def test_single_group_has_no_title(self) -> None:
        collection = RepositoryCollection()
        collection.add(RepositoryView(name="repo", branch="main", status=Status.CLEAN, parent="/src", url=URL))
        collection.add(RepositoryView(name="longer-name", branch="dev", status=Status.UNCLEAN, parent="/src"))

        lines = _render(collection, DisplayMode.CLASSIC).splitlines()

        assert lines == [
            f"repo         clean    main  {URL}",
            "longer-name  unclean  dev   none",
        ]

    def test_multiple_groups_have_titles(self, collection: RepositoryCollection) -> None:
        lines = _render(collection, DisplayMode.CLASSIC).splitlines()

        assert lines[0] == "/opt"
        assert lines[1].startswith("tools")
        assert lines[2] == ""
        assert lines[3] == "/src"
        assert lines[4].split() == ["alpha", "clean", "HEAD", "none"]
        assert lines[5].split() == ["zeta", "unclean", "main", URL]


class TestJson:
    def test_sorted_array(self, collection: RepositoryCollection) -> None:
        payload = json.loads(_render(collection, DisplayMode.JSON))

        assert [item["name"] for item in payload] == ["alpha", "zeta", "tools"]
        assert payload[2] == {
            "name": "tools",
            "branch": "develop",
            "status": "unpushed",
            "parent": "/opt",
            "url": None,
            "email": None,
            "submodules": [{"name": "vendor", "status": "clean"}],
        }

    def test_empty(self) -> None:
        assert json.loads(_render(RepositoryCollection(), DisplayMode.JSON)) == []

    def test_non_ascii_is_kept(self) -> None:
        collection = RepositoryCollection()
        collection.add(RepositoryView(name="café", branch="main", status=Status.CLEAN, parent="/src"))

        output = _render(collection, DisplayMode.JSON)

        assert '"café"' in output
        assert json.loads(output)[0]["name"] == "café"
