"""Multi-repository collection.

``collect`` scans a root directory, resolves every working tree it finds in
parallel, and folds the views into a ``RepositoryCollection`` grouped by
parent directory.

Usage:
    from gfold.git.collector import collect

    match collect(Path("~/src").expanduser(), include_email=True):
        case Ok(collection):
            for parent, views in collection.items():
                print(parent, [v.name for v in views])
            for error in collection.errors:
                print(f"failed: {error}")
        case Err(error):
            print(f"scan failed: {error}")
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from gfold.core.result import Err, Ok, Result
from gfold.git.status import Status
from gfold.git.target import scan
from gfold.git.text import display_path
from gfold.git.view import RepositoryView, ResolveError, resolve_view

__all__ = [
    "CollectError",
    "RepositoryCollection",
    "collect",
    "get_summary",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CollectError:
    """A run that produced no collection.

    Attributes:
        path: The root, or the repository that aborted a fail-fast run
        message: What went wrong
    """

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{display_path(self.path)}: {self.message}"


def _group_key(key: str | None) -> tuple[bool, str]:
    # None sorts before every path.
    return (key is not None, key or "")


def _view_key(view: RepositoryView) -> tuple[str, str, str]:
    return (str(view.status), view.name, view.branch)


class RepositoryCollection:
    """Repository views grouped by parent directory.

    Groups iterate in lexicographic key order with the ``None`` group first.
    Order inside a group is whatever the fold produced; displays apply their
    own sort. Failed repositories are kept in ``errors``.
    """

    def __init__(self) -> None:
        self._groups: dict[str | None, list[RepositoryView]] = {}
        self.errors: list[ResolveError] = []

    def add(self, view: RepositoryView) -> None:
        """Append a view to its parent's group, creating the group if needed."""
        self._groups.setdefault(view.parent, []).append(view)

    def keys(self) -> list[str | None]:
        return sorted(self._groups, key=_group_key)

    def items(self) -> list[tuple[str | None, list[RepositoryView]]]:
        return [(key, self._groups[key]) for key in self.keys()]

    def views(self) -> list[RepositoryView]:
        """Every view, group by group."""
        return [view for _, group in self.items() for view in group]

    @property
    def ok(self) -> bool:
        """True if every scanned repository resolved."""
        return not self.errors

    def __getitem__(self, key: str | None) -> list[RepositoryView]:
        return self._groups[key]

    def __contains__(self, key: object) -> bool:
        return key in self._groups

    def __iter__(self) -> Iterator[str | None]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._groups)

    def __eq__(self, other: object) -> bool:
        """Same groups with the same views, ignoring order inside groups."""
        if not isinstance(other, RepositoryCollection):
            return NotImplemented
        if self.keys() != other.keys():
            return False
        for key in self.keys():
            if sorted(self[key], key=_view_key) != sorted(other[key], key=_view_key):
                return False
        return sorted(e.path for e in self.errors) == sorted(e.path for e in other.errors)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        counts = {key: len(group) for key, group in self.items()}
        return f"RepositoryCollection({counts!r}, errors={len(self.errors)})"


def collect(
    root: Path,
    include_email: bool = False,
    include_submodules: bool = False,
    *,
    max_workers: int | None = None,
    fail_fast: bool = False,
    follow_symlinks: bool = False,
    logger: logging.Logger | None = None,
) -> Result[RepositoryCollection, CollectError]:
    """Scan ``root`` and resolve every working tree found.

    Args:
        root: Directory to scan
        include_email: Collect ``user.email`` for each repository
        include_submodules: Collect submodule status for each repository
        max_workers: Thread pool size for scanning and resolution
        fail_fast: Abort on the first repository that fails to resolve,
            instead of recording it in ``RepositoryCollection.errors``
        follow_symlinks: Descend into symlinked directories
        logger: Receives diagnostics from every stage

    Returns:
        Ok(RepositoryCollection), or Err(CollectError) if the root cannot be
        scanned (or a fail-fast run hit a failure)
    """
    log = logger or _log

    match scan(root, max_workers=max_workers, follow_symlinks=follow_symlinks, logger=log):
        case Err(e):
            return Err(CollectError(e.path, e.message))
        case Ok(targets):
            pass

    log.debug("resolving %d target(s) under %s", len(targets), root)
    resolve = partial(
        resolve_view,
        include_email=include_email,
        include_submodules=include_submodules,
        logger=log,
    )
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="gfold-resolve") as executor:
        results = list(executor.map(resolve, targets))

    collection = RepositoryCollection()
    for result in results:
        match result:
            case Ok(view):
                collection.add(view)
            case Err(error):
                if fail_fast:
                    return Err(CollectError(error.path, error.message))
                log.error("%s", error)
                collection.errors.append(error)

    return Ok(collection)


def get_summary(collection: RepositoryCollection) -> dict[str, int]:
    """Counts per status, plus totals.

    Returns:
        Dict with keys total, errors and one key per status value
    """
    summary = {str(status): 0 for status in Status}
    for view in collection.views():
        summary[str(view.status)] += 1
    summary["total"] = len(collection.views()) + len(collection.errors)
    summary["errors"] = len(collection.errors)
    return summary
