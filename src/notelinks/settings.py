"""Configuration for notelinks.

Settings are read from a TOML file::

    [notelinks]
    workspace_root    = "notes"         # relative to this file
    extensions        = [".md", ".markdown"]
    default_extension = ".md"           # appended to bare [[wiki links]]
    exclude_dirs      = ["node_modules", "archive"]

The wrapping ``[notelinks]`` table is optional.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from notelinks.corpus import DEFAULT_EXCLUDE_DIRS


class SettingsError(ValueError):
    """Raised for unreadable or ill-typed configuration."""


def _ext(value: str) -> str:
    return value if value.startswith(".") else f".{value}"


def _str_list(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = data.get(key, default)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise SettingsError(f"'{key}' must be a list of strings, got {value!r}")
    return tuple(value)


@dataclass(frozen=True)
class Settings:
    workspace_root: Path | None = None
    extensions: tuple[str, ...] = (".md",)
    default_extension: str = ".md"
    exclude_dirs: tuple[str, ...] = DEFAULT_EXCLUDE_DIRS

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: Path | None = None) -> "Settings":
        data = data.get("notelinks", data)

        root = data.get("workspace_root")
        if root is not None and not isinstance(root, str):
            raise SettingsError(f"'workspace_root' must be a string, got {root!r}")
        root_path = Path(root).expanduser() if root else None
        if root_path is not None and base_dir is not None and not root_path.is_absolute():
            root_path = base_dir / root_path

        default_extension = data.get("default_extension", ".md")
        if not isinstance(default_extension, str) or not default_extension.strip("."):
            raise SettingsError(
                f"'default_extension' must be a non-empty string, got {default_extension!r}"
            )

        extensions = tuple(_ext(e) for e in _str_list(data, "extensions", (".md",)))
        if not extensions:
            raise SettingsError("'extensions' must not be empty")

        return cls(
            workspace_root=root_path,
            extensions=extensions,
            default_extension=_ext(default_extension),
            exclude_dirs=_str_list(data, "exclude_dirs", DEFAULT_EXCLUDE_DIRS),
        )


def load_settings(path: Path) -> Settings:
    """Read :class:`Settings` from a TOML file."""
    path = Path(path)
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise SettingsError(f"Cannot read settings from {path}: {exc}") from exc
    return Settings.from_dict(data, base_dir=path.parent)
