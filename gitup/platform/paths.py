"""Platform-aware path utilities.

Locates the user home and the per-user configuration directory where the
profile store and the settings file live.
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from pathlib import Path

__all__ = [
    "APP_NAME",
    "clear_caches",
    "home",
    "user_config_dir",
]

APP_NAME = "gitup"


def _on_windows() -> bool:
    return sys.platform.startswith(("win32", "cygwin", "msys"))


@lru_cache(maxsize=1)
def home() -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME elsewhere, then Path.home().
    """
    env_name = "USERPROFILE" if _on_windows() else "HOME"
    value = os.environ.get(env_name)
    if value:
        return Path(value)
    return Path.home()


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """Get the user-level configuration directory.

    Location: $XDG_CONFIG_HOME/gitup or ~/.config/gitup (Linux/macOS),
    %APPDATA%/gitup (Windows).
    """
    if _on_windows():
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return home() / "AppData" / "Roaming" / APP_NAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home() / ".config" / APP_NAME


def clear_caches() -> None:
    """Clear cached paths (tests change HOME / XDG_CONFIG_HOME)."""
    home.cache_clear()
    user_config_dir.cache_clear()
