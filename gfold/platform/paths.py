"""User-level path lookup."""

from __future__ import annotations

import os
import sys
from pathlib import Path

__all__ = [
    "CONFIG_FILE_NAME",
    "config_file",
    "home",
]

CONFIG_FILE_NAME = "gfold.toml"


def home() -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME on Unix, then falls back to Path.home().
    """
    if sys.platform == "win32":
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)

    return Path.home()


def config_file() -> Path:
    """Location of the optional config file: ``~/.config/gfold.toml`` on every platform."""
    return home() / ".config" / CONFIG_FILE_NAME
