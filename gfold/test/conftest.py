"""Shared fixtures: an isolated git environment and helpers to build repositories."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

GLOBAL_GITCONFIG = """\
[user]
\tname = Test User
\temail = test@example.com
[init]
\tdefaultBranch = main
[commit]
\tgpgsign = false
[protocol "file"]
\tallow = always
"""

GitRunner = Callable[..., str]
RepoFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def isolated_git(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and git's global config at a throwaway directory."""
    home = tmp_path_factory.mktemp("home")
    gitconfig = home / ".gitconfig"
    gitconfig.write_text(GLOBAL_GITCONFIG, encoding="utf-8")

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GFOLD_LOG", raising=False)
    for var in ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def git() -> GitRunner:
    """Run git in a directory and return stdout; fails the test on error."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    def run(cwd: Path, *args: str) -> str:
        proc = subprocess.run(
            ["git", "-C", str(cwd), *args],
            capture_output=True,
            text=True,
            check=False,
        )
        assert proc.returncode == 0, f"git {' '.join(args)} failed: {proc.stderr}"
        return proc.stdout

    return run


@pytest.fixture
def make_repo(git: GitRunner) -> RepoFactory:
    """Create a repository.

    Keyword arguments:
        commits: number of empty commits to create
        remote: (name, url) remote to add
        untracked: file names to create without adding
        bare: mark the repository bare (core.bare = true)
    """

    def make(
        path: Path,
        *,
        commits: int = 0,
        remote: tuple[str, str] | None = None,
        untracked: tuple[str, ...] = (),
        bare: bool = False,
    ) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        git(path, "init", "--quiet")
        for index in range(commits):
            git(path, "commit", "--quiet", "--allow-empty", "-m", f"commit {index}")
        if remote is not None:
            git(path, "remote", "add", remote[0], remote[1])
        for name in untracked:
            target = path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("new\n", encoding="utf-8")
        if bare:
            git(path, "config", "core.bare", "true")
        return path

    return make
