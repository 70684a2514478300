"""Text checks for names that came from the filesystem or from git.

Python keeps undecodable bytes as lone surrogates (``surrogateescape``), so a
name is valid text exactly when it encodes back to UTF-8.
"""

from __future__ import annotations

import os


def is_text(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def display_path(path: str | os.PathLike[str]) -> str:
    """Printable form of a path; undecodable bytes become U+FFFD."""
    return os.fsencode(path).decode("utf-8", "replace")
