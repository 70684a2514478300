"""Submodule status for an opened repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from gfold.core.result import Err, Ok, Result
from gfold.git.repository import Repository
from gfold.git.status import Status, find_status
from gfold.git.text import is_text

__all__ = [
    "SubmoduleError",
    "SubmoduleView",
    "list_submodules",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SubmoduleError:
    """Error listing the submodules of a repository."""

    path: Path
    message: str


@dataclass(frozen=True, slots=True)
class SubmoduleView:
    """Reduced view of a submodule: its name and status."""

    name: str
    status: Status

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "status": str(self.status)}


def list_submodules(
    repo: Repository,
    *,
    logger: logging.Logger | None = None,
) -> Result[list[SubmoduleView], SubmoduleError]:
    """Classify every initialized submodule of ``repo``.

    Submodules that are not initialized, or that git refuses to open, are
    logged and skipped. A name that is not valid UTF-8 fails the whole list.
    """
    log = logger or _log

    match repo.submodules():
        case Err(e):
            return Err(SubmoduleError(repo.path, f"could not list submodules: {e.message}"))
        case Ok(entries):
            pass

    views: list[SubmoduleView] = []
    for entry in entries:
        if not is_text(entry.name):
            return Err(SubmoduleError(repo.path, "submodule name is invalid UTF-8"))

        subrepo = Repository(repo.path / entry.path)
        if not subrepo.exists():
            log.warning("could not open submodule as repository (not initialized): %s", subrepo.path)
            continue
        match subrepo.open():
            case Err(e):
                log.warning("could not open submodule as repository: %s: %s", subrepo.path, e.message)
                continue
            case Ok(_):
                pass

        match find_status(subrepo, logger=log):
            case Err(e):
                return Err(
                    SubmoduleError(repo.path, f"submodule {entry.name}: {e.message}")
                )
            case Ok(report):
                views.append(SubmoduleView(name=entry.name, status=report.status))

    return Ok(views)
