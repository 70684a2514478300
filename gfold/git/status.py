"""Working tree status classification.

``find_status`` reduces a repository to a single ``Status``:

1. any modified, staged or untracked entry -> UNCLEAN
2. bare repository (status cannot be computed) -> BARE
3. clean, with a resolved HEAD and a remote -> UNPUSHED if HEAD has commits
   missing from ``<remote>/<branch>`` (or that ref cannot be resolved), else CLEAN
4. clean, without HEAD or without remote -> CLEAN

The comparison only uses locally cached remote-tracking refs; nothing is fetched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from gfold.core.result import Err, Ok, Result
from gfold.git.repository import GitError, Head, Repository

__all__ = [
    "Status",
    "StatusReport",
    "choose_remote",
    "find_status",
    "is_unpushed",
]

_log = logging.getLogger(__name__)

PREFERRED_REMOTE = "origin"


class Status(StrEnum):
    """Summarized state of a working tree."""

    BARE = "bare"
    CLEAN = "clean"
    UNCLEAN = "unclean"
    UNPUSHED = "unpushed"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class StatusReport:
    """Outcome of ``find_status``.

    Attributes:
        status: The classification
        head: Resolved HEAD, None for an unborn branch or missing reference
        remote: Name of the remote used for comparison, if any
        url: URL of that remote, if configured
    """

    status: Status
    head: Head | None = None
    remote: str | None = None
    url: str | None = None


def choose_remote(repo: Repository) -> Result[str | None, GitError]:
    """Pick ``origin`` if it exists, otherwise the first remote git lists."""
    match repo.remotes():
        case Err(e):
            return Err(e)
        case Ok(names):
            if PREFERRED_REMOTE in names:
                return Ok(PREFERRED_REMOTE)
            return Ok(names[0] if names else None)


def is_unpushed(
    repo: Repository,
    head: Head,
    remote: str,
    *,
    logger: logging.Logger | None = None,
) -> bool:
    """True if HEAD has commits that ``<remote>/<branch>`` does not.

    An unresolvable remote-tracking ref counts as unpushed.
    """
    log = logger or _log
    tracking = f"{remote}/{head.shorthand}"

    match repo.resolve_commit(tracking):
        case Ok(str(remote_commit)):
            pass
        case Ok(None):
            log.debug("assuming unpushed; no remote-tracking ref %s in %s", tracking, repo.path)
            return True
        case Err(e):
            log.debug(
                "assuming unpushed; could not resolve %s in %s (ignored error: %s)",
                tracking,
                repo.path,
                e.message,
            )
            return True

    match repo.ahead_behind(head.commit, remote_commit):
        case Ok((ahead, _behind)):
            return ahead > 0
        case Err(e):
            log.debug("ignored ahead/behind error in %s: %s", repo.path, e.message)
            return False


def find_status(
    repo: Repository,
    *,
    logger: logging.Logger | None = None,
) -> Result[StatusReport, GitError]:
    """Classify an opened repository. The resolved HEAD and remote are returned too."""
    log = logger or _log

    match repo.head():
        case Err(e):
            return Err(e)
        case Ok(head):
            pass

    match choose_remote(repo):
        case Err(e):
            return Err(e)
        case Ok(remote):
            pass

    url = repo.remote_url(remote) if remote is not None else None

    match repo.status_entries():
        case Ok(entries) if entries:
            status = Status.UNCLEAN
        case Ok(_):
            if head is not None and remote is not None:
                unpushed = is_unpushed(repo, head, remote, logger=log)
                status = Status.UNPUSHED if unpushed else Status.CLEAN
            else:
                status = Status.CLEAN
        case Err(e):
            match repo.is_bare():
                case Ok(True):
                    status = Status.BARE
                case _:
                    return Err(e)

    log.debug("status for %s: %s", repo.path, status)
    return Ok(StatusReport(status=status, head=head, remote=remote, url=url))
