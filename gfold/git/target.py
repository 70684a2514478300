"""Discovery of git working trees under a root directory.

The walk expands one directory level at a time: every directory in the
current frontier is listed on its own worker, and the listings are merged in
the calling thread before the next level starts. Workers share nothing, and
no worker ever waits on another.

Rules for each directory entry:
- entries that are not directories are skipped
- hidden directories (name starts with ".") are skipped, contents included
- a directory holding a ``.git`` entry (directory, or file for a linked
  worktree) is a target and is not descended into
- any other directory is descended into

Symlinked directories are only followed with ``follow_symlinks=True``, in
which case canonical paths are tracked so a cycle is walked once.
"""

from __future__ import annotations

import errno
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from gfold.core.result import Err, Ok, Result
from gfold.git.text import display_path

__all__ = [
    "ScanError",
    "scan",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanError:
    """The root directory could not be scanned at all."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{display_path(self.path)}: {self.message}"


@dataclass(slots=True)
class _Listing:
    """Result of listing one directory."""

    targets: list[Path] = field(default_factory=list)
    pending: list[Path] = field(default_factory=list)


def _is_target(directory: str) -> bool:
    return os.path.exists(os.path.join(directory, ".git"))


def _read_listing(directory: Path, follow_symlinks: bool) -> _Listing:
    """List one directory. Raises OSError if it cannot be read."""
    listing = _Listing()
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.name.startswith("."):
                continue
            if not entry.is_dir(follow_symlinks=follow_symlinks):
                continue
            if _is_target(entry.path):
                listing.targets.append(Path(entry.path))
            else:
                listing.pending.append(Path(entry.path))
    return listing


def _list_subtree(directory: Path, follow_symlinks: bool, logger: logging.Logger) -> _Listing:
    """List a directory below the root; unreadable directories count as empty."""
    try:
        return _read_listing(directory, follow_symlinks)
    except PermissionError as e:
        logger.warning("%s: %s", e.strerror or e, display_path(directory))
    except OSError as e:
        logger.error("%s: %s", e.strerror or e, display_path(directory))
    return _Listing()


def _unvisited(paths: list[Path], seen: set[Path], logger: logging.Logger) -> list[Path]:
    """Drop paths whose canonical location was already walked (symlink cycles)."""
    fresh: list[Path] = []
    for path in paths:
        try:
            canonical = path.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            logger.warning("skipping unresolvable path %s: %s", path, e)
            continue
        if canonical in seen:
            logger.debug("already visited %s (as %s), skipping", path, canonical)
            continue
        seen.add(canonical)
        fresh.append(path)
    return fresh


def scan(
    root: Path,
    *,
    max_workers: int | None = None,
    follow_symlinks: bool = False,
    logger: logging.Logger | None = None,
) -> Result[list[Path], ScanError]:
    """Find every working tree below ``root``.

    Args:
        root: Directory to walk (the root itself is never reported)
        max_workers: Thread pool size; None lets the executor decide
        follow_symlinks: Descend into symlinked directories
        logger: Receives diagnostics for unreadable subdirectories

    Returns:
        Ok(sorted target paths), or Err(ScanError) if the root is unusable
    """
    log = logger or _log

    if not root.exists():
        return Err(ScanError(root, os.strerror(errno.ENOENT)))
    if not root.is_dir():
        return Err(ScanError(root, os.strerror(errno.ENOTDIR)))
    try:
        first = _read_listing(root, follow_symlinks)
    except OSError as e:
        return Err(ScanError(root, e.strerror or str(e)))

    targets = list(first.targets)
    frontier = list(first.pending)

    seen: set[Path] = set()
    if follow_symlinks:
        seen.add(root.resolve())

    list_subtree = partial(_list_subtree, follow_symlinks=follow_symlinks, logger=log)
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="gfold-scan") as executor:
        while frontier:
            if follow_symlinks:
                frontier = _unvisited(frontier, seen, log)
            listings = list(executor.map(list_subtree, frontier))
            frontier = []
            for listing in listings:
                targets.extend(listing.targets)
                frontier.extend(listing.pending)

    if follow_symlinks:
        targets = _unique_targets(targets, log)

    for target in targets:
        log.debug("found target: %s", target)
    return Ok(sorted(targets))


def _unique_targets(targets: list[Path], logger: logging.Logger) -> list[Path]:
    """Keep the first path found for each canonical repository location."""
    unique: dict[Path, Path] = {}
    for target in targets:
        try:
            canonical = target.resolve()
        except (OSError, RuntimeError) as e:
            logger.warning("skipping unresolvable target %s: %s", target, e)
            continue
        unique.setdefault(canonical, target)
    return list(unique.values())
