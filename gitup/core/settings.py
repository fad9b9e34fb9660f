"""User settings loading.

Settings live in a small optional TOML file in the user config directory:

  <user-config-dir>/config.toml

    [timeouts]
    git = 10        # seconds for each git invocation
    install = 900   # seconds for the package manager run

    [paths]
    profiles = "~/.config/gitup/profiles.toml"

A missing file means defaults.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from gitup.platform.paths import user_config_dir

from .result import Err, Ok, Result
from .structured import StrDict, get_number, get_str, get_table

__all__ = [
    "DEFAULT_GIT_TIMEOUT",
    "DEFAULT_INSTALL_TIMEOUT",
    "Settings",
    "SettingsError",
    "load_settings",
    "settings_path",
]

DEFAULT_GIT_TIMEOUT = 10.0
DEFAULT_INSTALL_TIMEOUT = 15 * 60.0

PROFILES_FILENAME = "profiles.toml"


@dataclass(frozen=True, slots=True)
class SettingsError:
    """Settings file exists but cannot be used."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    git_timeout: float = DEFAULT_GIT_TIMEOUT
    install_timeout: float = DEFAULT_INSTALL_TIMEOUT
    profiles_path: Path | None = None

    @property
    def profile_store_path(self) -> Path:
        """Where the profile store lives (override or default location)."""
        if self.profiles_path is not None:
            return self.profiles_path
        return user_config_dir() / PROFILES_FILENAME

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Settings:
        timeouts: StrDict = get_table(data, "timeouts") or {}
        paths: StrDict = get_table(data, "paths") or {}

        profiles = get_str(paths, "profiles")
        return cls(
            git_timeout=get_number(timeouts, "git") or DEFAULT_GIT_TIMEOUT,
            install_timeout=get_number(timeouts, "install") or DEFAULT_INSTALL_TIMEOUT,
            profiles_path=Path(profiles).expanduser() if profiles else None,
        )


def settings_path() -> Path:
    return user_config_dir() / "config.toml"


def load_settings(path: Path | None = None) -> Result[Settings, SettingsError]:
    """Load settings from ``path`` (default: the user settings file)."""
    path = path or settings_path()
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Ok(Settings())
    except OSError as e:
        return Err(SettingsError(f"Error reading {path}: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(SettingsError(f"Invalid UTF-8 in settings: {e}", path=path))

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        return Err(SettingsError(f"Invalid TOML syntax: {e}", path=path))

    return Ok(Settings.from_dict(data))
