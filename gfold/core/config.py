"""Typed configuration loading and access.

The config file is optional and lives at ``$HOME/.config/gfold.toml``.
Every key is optional; missing keys fall back to defaults, and options given
on the command line take priority over the file.

Example:
    path = "/home/me/src"
    display_mode = "classic"
    color_mode = "never"
    max_workers = 8
    fail_fast = false
    follow_symlinks = false
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_int, get_str

__all__ = [
    "ColorMode",
    "Config",
    "ConfigError",
    "DisplayMode",
    "load_config",
    "parse_color_mode",
    "parse_display_mode",
]


class DisplayMode(StrEnum):
    """How results are printed. Also decides how much data is collected."""

    STANDARD = "standard"
    CLASSIC = "classic"
    JSON = "json"

    @property
    def include_email(self) -> bool:
        return self is not DisplayMode.CLASSIC

    @property
    def include_submodules(self) -> bool:
        return self is DisplayMode.JSON


class ColorMode(StrEnum):
    """Color handling for printed results."""

    ALWAYS = "always"
    COMPATIBILITY = "compatibility"
    NEVER = "never"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


def parse_display_mode(value: str) -> Result[DisplayMode, ConfigError]:
    """Parse a display mode name. ``default`` is an alias for ``standard``."""
    normalized = value.strip().lower()
    if normalized == "default":
        return Ok(DisplayMode.STANDARD)
    try:
        return Ok(DisplayMode(normalized))
    except ValueError:
        options = ", ".join([*DisplayMode, "default"])
        return Err(ConfigError(f"invalid display mode '{value}' (options: {options})"))


def parse_color_mode(value: str) -> Result[ColorMode, ConfigError]:
    normalized = value.strip().lower()
    try:
        return Ok(ColorMode(normalized))
    except ValueError:
        options = ", ".join(ColorMode)
        return Err(ConfigError(f"invalid color mode '{value}' (options: {options})"))


@dataclass(frozen=True, slots=True)
class Config:
    """Merged configuration for a run.

    Attributes:
        path: Directory to scan; None means the current working directory
        display_mode: Output format (and how much to collect)
        color_mode: Color handling for output
        max_workers: Thread pool size; None lets the executor decide
        fail_fast: Abort on the first repository that fails to resolve
        follow_symlinks: Descend into symlinked directories (cycle-guarded)
    """

    path: Path | None = None
    display_mode: DisplayMode = DisplayMode.STANDARD
    color_mode: ColorMode = ColorMode.ALWAYS
    max_workers: int | None = None
    fail_fast: bool = False
    follow_symlinks: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a parsed TOML table.

        Raises:
            ValueError: If a value is present but invalid.
        """
        config = cls()

        path = get_str(data, "path")
        if path is not None:
            config = replace(config, path=Path(path).expanduser())

        display_mode = get_str(data, "display_mode")
        if display_mode is not None:
            match parse_display_mode(display_mode):
                case Ok(mode):
                    config = replace(config, display_mode=mode)
                case Err(e):
                    raise ValueError(e.message)

        color_mode = get_str(data, "color_mode")
        if color_mode is not None:
            match parse_color_mode(color_mode):
                case Ok(mode):
                    config = replace(config, color_mode=mode)
                case Err(e):
                    raise ValueError(e.message)

        if "max_workers" in data:
            workers = get_int(data, "max_workers")
            if workers is None or workers < 1:
                raise ValueError("max_workers must be a positive integer")
            config = replace(config, max_workers=workers)

        for key in ("fail_fast", "follow_symlinks"):
            if key not in data:
                continue
            flag = get_bool(data, key)
            if flag is None:
                raise ValueError(f"{key} must be a boolean")
            config = replace(config, **{key: flag})

        return config

    def with_overrides(
        self,
        *,
        path: Path | None = None,
        display_mode: DisplayMode | None = None,
        color_mode: ColorMode | None = None,
        max_workers: int | None = None,
        fail_fast: bool | None = None,
        follow_symlinks: bool | None = None,
    ) -> Config:
        """Return a copy with every non-None override applied."""
        return Config(
            path=path if path is not None else self.path,
            display_mode=display_mode if display_mode is not None else self.display_mode,
            color_mode=color_mode if color_mode is not None else self.color_mode,
            max_workers=max_workers if max_workers is not None else self.max_workers,
            fail_fast=fail_fast if fail_fast is not None else self.fail_fast,
            follow_symlinks=(
                follow_symlinks if follow_symlinks is not None else self.follow_symlinks
            ),
        )

    def to_toml(self) -> str:
        """Render as TOML, in the same shape the config file accepts."""
        lines: list[str] = []
        if self.path is not None:
            lines.append(f"path = {_toml_string(str(self.path))}")
        lines.append(f'display_mode = "{self.display_mode}"')
        lines.append(f'color_mode = "{self.color_mode}"')
        if self.max_workers is not None:
            lines.append(f"max_workers = {self.max_workers}")
        lines.append(f"fail_fast = {str(self.fail_fast).lower()}")
        lines.append(f"follow_symlinks = {str(self.follow_symlinks).lower()}")
        return "\n".join(lines) + "\n"


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load configuration from a TOML file.

    A missing or empty file is not an error: defaults are returned.

    Returns:
        Ok(Config) on success, Err(ConfigError) on unreadable or invalid files
    """
    if not path.exists():
        return Ok(Config())

    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))
