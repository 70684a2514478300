"""Per-repository views.

``resolve_view`` turns one scanned target into a ``RepositoryView``, or into a
``ResolveError`` scoped to that path. It never raises for repository-level
problems, so one bad repository cannot take down the rest of a run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from gfold.core.result import Err, Ok, Result
from gfold.git.repository import Repository
from gfold.git.status import Status, find_status
from gfold.git.submodule import SubmoduleView, list_submodules
from gfold.git.text import display_path, is_text

__all__ = [
    "HEAD_BRANCH",
    "UNKNOWN_BRANCH",
    "RepositoryView",
    "ResolveError",
    "read_email",
    "resolve_view",
]

_log = logging.getLogger(__name__)

# Branch reported when HEAD cannot be resolved (unborn branch, missing ref).
HEAD_BRANCH = "HEAD"
# Branch reported when git refused to open the repository at all.
UNKNOWN_BRANCH = "unknown"


@dataclass(frozen=True, slots=True)
class ResolveError:
    """A repository that could not be resolved.

    Attributes:
        path: The scanned target
        message: What went wrong
    """

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{display_path(self.path)}: {self.message}"


@dataclass(frozen=True, slots=True)
class RepositoryView:
    """Everything reported about one working tree.

    Attributes:
        name: Directory name of the repository
        branch: Current branch, "HEAD" if HEAD is unresolvable
        status: Classification of the working tree
        parent: Containing directory; None only when the path has no parent
        url: URL of the chosen remote, if any
        email: ``user.email``, only collected on request
        submodules: Submodule views, only collected on request
    """

    name: str
    branch: str
    status: Status
    parent: str | None = None
    url: str | None = None
    email: str | None = None
    submodules: tuple[SubmoduleView, ...] = field(default_factory=tuple)

    @property
    def path(self) -> Path:
        if self.parent is None:
            return Path(self.name)
        return Path(self.parent) / self.name

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "branch": self.branch,
            "status": str(self.status),
            "parent": self.parent,
            "url": self.url,
            "email": self.email,
            "submodules": [s.to_dict() for s in self.submodules],
        }


def _path_names(path: Path) -> Result[tuple[str, str | None], ResolveError]:
    """Name and parent of a target as text."""
    name = path.name
    if not name:
        return Err(ResolveError(path, "path has no file name"))
    if not is_text(name):
        return Err(ResolveError(path, "file name is invalid UTF-8"))

    if path.parent == path:
        return Ok((name, None))
    parent = str(path.parent)
    if not is_text(parent):
        return Err(ResolveError(path, "parent path is invalid UTF-8"))
    return Ok((name, parent))


def read_email(repo: Repository, *, logger: logging.Logger | None = None) -> str | None:
    """``user.email`` from the repository config, falling back to global config.

    Non-critical: every failure is swallowed and reported as None.
    """
    email = repo.config_get("user.email")
    if email is None:
        (logger or _log).debug("no user.email for %s", repo.path)
    elif not is_text(email):
        return None
    return email


def resolve_view(
    path: Path,
    include_email: bool = False,
    include_submodules: bool = False,
    *,
    logger: logging.Logger | None = None,
) -> Result[RepositoryView, ResolveError]:
    """Open the repository at ``path`` and build its view.

    A repository git refuses because of an unknown extension is not an error:
    it is reported with status UNKNOWN and branch "unknown".
    """
    log = logger or _log
    log.debug("resolving repository view for %s", path)

    match _path_names(path):
        case Err(e):
            return Err(e)
        case Ok((name, parent)):
            pass

    repo = Repository(path)
    match repo.open():
        case Err(e) if e.is_unsupported_extension:
            log.warning("skipping unsupported repository at %s: %s", path, e.message)
            return Ok(
                RepositoryView(name=name, branch=UNKNOWN_BRANCH, status=Status.UNKNOWN, parent=parent)
            )
        case Err(e):
            return Err(ResolveError(path, f"could not open repository: {e.message}"))
        case Ok(_):
            pass

    match find_status(repo, logger=log):
        case Err(e):
            return Err(ResolveError(path, e.message))
        case Ok(report):
            pass

    branch = report.head.shorthand if report.head is not None else HEAD_BRANCH
    if not is_text(branch):
        return Err(ResolveError(path, "branch name is invalid UTF-8"))

    submodules: tuple[SubmoduleView, ...] = ()
    if include_submodules:
        match list_submodules(repo, logger=log):
            case Err(e):
                return Err(ResolveError(path, e.message))
            case Ok(views):
                submodules = tuple(views)

    url = report.url if report.url is not None and is_text(report.url) else None
    email = read_email(repo, logger=log) if include_email else None

    log.debug("resolved %s: %s (%s)", path, report.status, branch)
    return Ok(
        RepositoryView(
            name=name,
            branch=branch,
            status=report.status,
            parent=parent,
            url=url,
            email=email,
            submodules=submodules,
        )
    )
