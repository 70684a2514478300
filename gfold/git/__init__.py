"""Git discovery and status resolution.

- target: find working trees under a root directory
- repository: read-only access to a single repository through ``git``
- status: classify a repository (bare, clean, unclean, unpushed, unknown)
- submodule / view: per-repository and per-submodule views
- collector: parallel resolution grouped by parent directory

Usage:
    from gfold.git import collect

    match collect(root, include_email=True):
        case Ok(collection):
            for parent, views in collection.items():
                ...
"""

from gfold.git.collector import (
    CollectError,
    RepositoryCollection,
    collect,
    get_summary,
)
from gfold.git.repository import (
    GitError,
    Head,
    Repository,
    StatusEntry,
    SubmoduleEntry,
)
from gfold.git.status import Status, StatusReport, find_status
from gfold.git.submodule import SubmoduleError, SubmoduleView, list_submodules
from gfold.git.target import ScanError, scan
from gfold.git.view import RepositoryView, ResolveError, resolve_view

__all__ = [
    # Collector
    "CollectError",
    "RepositoryCollection",
    "collect",
    "get_summary",
    # Repository
    "GitError",
    "Head",
    "Repository",
    "StatusEntry",
    "SubmoduleEntry",
    # Status
    "Status",
    "StatusReport",
    "find_status",
    # Submodules
    "SubmoduleError",
    "SubmoduleView",
    "list_submodules",
    # Targets
    "ScanError",
    "scan",
    # Views
    "RepositoryView",
    "ResolveError",
    "resolve_view",
]
