"""Git repository access.

``Repository`` runs the ``git`` executable against a single working tree
(``git -C <path> ...``). Every operation is read-only: optional index locks
are disabled, and nothing fetches, writes refs or touches the network.
Operations that can fail return Result types.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.head():
        case Ok(None):
            print("no commits yet")
        case Ok(head):
            print(f"on {head.shorthand} at {head.commit[:7]}")
        case Err(e):
            print(f"error: {e.message}")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from gfold.core.result import Err, Ok, Result
from gfold.platform.process import ProcessError
from gfold.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 120.0

# Exit code of `git rev-parse --verify --quiet`, `git symbolic-ref --quiet` and
# `git config --get` when the ref or key simply does not exist.
_NOT_FOUND_RETURNCODE = 1

_UNSUPPORTED_EXTENSION_MARKERS = (
    "unknown repository extension",
    "v1-only extension",
)

# Variables that would point every command at one fixed repository.
_REPOSITORY_ENV_VARS = frozenset(
    {"GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE", "GIT_COMMON_DIR", "GIT_OBJECT_DIRECTORY"}
)

__all__ = [
    "GitError",
    "Head",
    "Repository",
    "StatusEntry",
    "SubmoduleEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    @property
    def is_unsupported_extension(self) -> bool:
        """True if git refused the repository because of an extension it does not know."""
        lowered = self.message.lower()
        return any(marker in lowered for marker in _UNSUPPORTED_EXTENSION_MARKERS)


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"


@dataclass(frozen=True, slots=True)
class Head:
    """A resolved HEAD.

    Attributes:
        commit: Full object id of the checked-out commit
        shorthand: Branch name, or "HEAD" when detached
    """

    commit: str
    shorthand: str


@dataclass(frozen=True, slots=True)
class SubmoduleEntry:
    """A submodule declared in ``.gitmodules``.

    Attributes:
        name: Submodule name (the ``submodule.<name>`` subsection)
        path: Path relative to the parent working tree
    """

    name: str
    path: str


class Repository:
    """Read-only view of a git repository.

    Attributes:
        path: Path to the working tree root (containing .git)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """True if the path holds a ``.git`` directory or a ``.git`` file (linked worktree)."""
        return os.path.exists(os.path.join(self.path, ".git"))

    def open(self) -> Result[None, GitError]:
        """Check that git accepts this repository.

        Fails on corrupt repositories, dangling worktree links, unsupported
        extensions and ownership checks (see ``GitError.is_unsupported_extension``).
        """
        return self._git(["rev-parse", "--git-dir"]).map(lambda _: None)

    def is_bare(self) -> Result[bool, GitError]:
        return self._git(["rev-parse", "--is-bare-repository"]).map(
            lambda stdout: stdout.strip() == "true"
        )

    def head(self) -> Result[Head | None, GitError]:
        """Resolve HEAD.

        Returns:
            Ok(None) for an unborn branch or a missing reference
            Ok(Head) otherwise; a detached HEAD has the shorthand "HEAD"
            Err(GitError) if git fails for another reason
        """
        match self.resolve_commit("HEAD"):
            case Err(e):
                return Err(e)
            case Ok(None):
                return Ok(None)
            case Ok(commit):
                pass

        # Not --short: it prints "heads/main" when a tag "main" also exists.
        result = self._run(["symbolic-ref", "--quiet", "HEAD"])
        match result:
            case Ok(stdout):
                return Ok(Head(commit=commit, shorthand=_shorthand(stdout.strip())))
            case Err(e) if e.returncode == _NOT_FOUND_RETURNCODE:
                return Ok(Head(commit=commit, shorthand="HEAD"))
            case Err(e):
                return Err(_git_error("symbolic-ref", e))

    def remotes(self) -> Result[list[str], GitError]:
        """Remote names, in the order git lists them."""
        return self._git(["remote"]).map(
            lambda stdout: [line.strip() for line in stdout.splitlines() if line.strip()]
        )

    def remote_url(self, name: str) -> str | None:
        """Configured URL of a remote, or None if it has none."""
        return self.config_get(f"remote.{name}.url")

    def status_entries(self) -> Result[tuple[StatusEntry, ...], GitError]:
        """Working tree status including untracked files inside untracked directories.

        Runs `git status --porcelain=v1 --untracked-files=all`. Fails on bare
        repositories.
        """
        result = self._git(["status", "--porcelain=v1", "--untracked-files=all"])
        return result.map(_parse_status_entries)

    def resolve_commit(self, rev: str) -> Result[str | None, GitError]:
        """Resolve a revision (with the usual short-name rules) to a commit id.

        Returns Ok(None) if the revision does not name a commit.
        """
        result = self._run(["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"])
        match result:
            case Ok(stdout):
                return Ok(stdout.strip() or None)
            case Err(e) if e.returncode == _NOT_FOUND_RETURNCODE:
                return Ok(None)
            case Err(e):
                return Err(_git_error("rev-parse", e))

    def ahead_behind(self, local: str, upstream: str) -> Result[tuple[int, int], GitError]:
        """Count commits unique to ``local`` and unique to ``upstream``."""
        result = self._git(["rev-list", "--left-right", "--count", f"{local}...{upstream}"])
        match result:
            case Err(e):
                return Err(e)
            case Ok(stdout):
                parts = stdout.split()
                if len(parts) != 2 or not all(p.isdigit() for p in parts):
                    return Err(GitError("rev-list", f"unexpected output: {stdout.strip()!r}"))
                return Ok((int(parts[0]), int(parts[1])))

    def config_get(self, key: str) -> str | None:
        """Read a config value (local config first, then global and system).

        Returns None if the key is unset or git fails.
        """
        match self._run(["config", "--get", key]):
            case Ok(stdout):
                return stdout.rstrip("\n") or None
            case Err(_):
                return None

    def submodules(self) -> Result[list[SubmoduleEntry], GitError]:
        """Submodules declared in the working tree's ``.gitmodules``."""
        if not (self.path / ".gitmodules").is_file():
            return Ok([])

        result = self._run(
            [
                "config",
                "--file",
                ".gitmodules",
                "--null",
                "--get-regexp",
                r"^submodule\..*\.path$",
            ]
        )
        match result:
            case Ok(stdout):
                return Ok(_parse_submodule_entries(stdout))
            case Err(e) if e.returncode == _NOT_FOUND_RETURNCODE:
                return Ok([])
            case Err(e):
                return Err(_git_error("config", e))

    def _git(self, args: list[str]) -> Result[str, GitError]:
        """Run a git command, converting failures to GitError."""
        command = args[0] if args else ""
        return self._run(args).map_err(lambda e: _git_error(command, e))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "--no-optional-locks", "-C", str(self.path), *args],
            cwd=self.path,
            env=_git_env(self.path),
            timeout=_GIT_TIMEOUT_SECONDS,
        )


def _git_env(path: Path) -> dict[str, str]:
    # Untranslated messages keep GitError.is_unsupported_extension reliable.
    env = {k: v for k, v in os.environ.items() if k not in _REPOSITORY_ENV_VARS}
    # Discovery stops at the target; a broken .git never resolves to an enclosing repository.
    env["GIT_CEILING_DIRECTORIES"] = os.path.dirname(os.path.abspath(path))
    env["LC_ALL"] = "C"
    env["GIT_OPTIONAL_LOCKS"] = "0"
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def _shorthand(ref: str) -> str:
    for prefix in ("refs/heads/", "refs/"):
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return ref


def _git_error(command: str, error: ProcessError) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or f"git {command} failed",
        returncode=error.returncode,
    )


def _parse_status_entries(output: str) -> tuple[StatusEntry, ...]:
    entries: list[StatusEntry] = []
    for line in output.splitlines():
        if len(line) < 4:
            continue
        entries.append(StatusEntry(xy=line[:2], path=line[3:]))
    return tuple(entries)


def _parse_submodule_entries(output: str) -> list[SubmoduleEntry]:
    """Parse `git config --null --get-regexp` records: ``key\\nvalue\\0``."""
    entries: list[SubmoduleEntry] = []
    prefix, suffix = "submodule.", ".path"
    for record in output.split("\0"):
        if not record:
            continue
        key, _, value = record.partition("\n")
        if not (key.startswith(prefix) and key.endswith(suffix)):
            continue
        name = key[len(prefix) : -len(suffix)]
        if name and value:
            entries.append(SubmoduleEntry(name=name, path=value))
    return entries
