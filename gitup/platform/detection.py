"""Platform family detection.

Resolves the current machine to one of a closed set of platform families,
each of which shares a package manager and install command shape. Detection
never fails: anything unrecognized is ``PlatformIdentity.UNKNOWN``.
"""

from __future__ import annotations

import os as _os
import sys as _sys
from collections.abc import Mapping
from enum import Enum, auto
from functools import lru_cache
from pathlib import Path

__all__ = [
    "OS_RELEASE_PATH",
    "PlatformIdentity",
    "parse_os_release",
    "resolve",
    "resolve_from",
]

OS_RELEASE_PATH = Path("/etc/os-release")


class PlatformIdentity(Enum):
    """Platform family."""

    DEBIAN = auto()  # Debian, Ubuntu, Mint, Pop!_OS
    ARCH = auto()  # Arch, Manjaro, EndeavourOS
    RHEL = auto()  # RHEL, Rocky, Alma, CentOS, Fedora
    WINDOWS = auto()
    MACOS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def package_manager(self) -> str:
        """Display name of the package manager used for this family."""
        return {
            PlatformIdentity.DEBIAN: "apt-get",
            PlatformIdentity.ARCH: "pacman",
            PlatformIdentity.RHEL: "dnf/yum",
            PlatformIdentity.WINDOWS: "winget/choco",
            PlatformIdentity.MACOS: "brew",
            PlatformIdentity.UNKNOWN: "unknown",
        }[self]


_DISTRO_FAMILIES: dict[str, PlatformIdentity] = {
    "debian": PlatformIdentity.DEBIAN,
    "ubuntu": PlatformIdentity.DEBIAN,
    "linuxmint": PlatformIdentity.DEBIAN,
    "pop": PlatformIdentity.DEBIAN,
    "arch": PlatformIdentity.ARCH,
    "manjaro": PlatformIdentity.ARCH,
    "endeavouros": PlatformIdentity.ARCH,
    "rhel": PlatformIdentity.RHEL,
    "rocky": PlatformIdentity.RHEL,
    "almalinux": PlatformIdentity.RHEL,
    "centos": PlatformIdentity.RHEL,
    "fedora": PlatformIdentity.RHEL,
}


def parse_os_release(content: str) -> dict[str, str]:
    """Parse os-release ``KEY=value`` lines, unquoting values."""
    fields: dict[str, str] = {}
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        fields[key.strip()] = value
    return fields


def _family_from_os_release(content: str) -> PlatformIdentity | None:
    fields = parse_os_release(content)
    distro_id = fields.get("ID", "").lower()
    if distro_id in _DISTRO_FAMILIES:
        return _DISTRO_FAMILIES[distro_id]

    # Derivatives declare their parents in ID_LIKE, closest first.
    for token in fields.get("ID_LIKE", "").lower().split():
        if token in _DISTRO_FAMILIES:
            return _DISTRO_FAMILIES[token]
    return None


def resolve_from(
    sys_platform: str,
    os_release: str | None,
    environ: Mapping[str, str],
) -> PlatformIdentity:
    """Resolve the platform family from already-gathered signals.

    Args:
        sys_platform: Value of ``sys.platform``.
        os_release: Contents of /etc/os-release, or None if unreadable.
        environ: Process environment.
    """
    if os_release is not None:
        family = _family_from_os_release(os_release)
        if family is not None:
            return family

    system = sys_platform.lower()
    if system.startswith(("win32", "cygwin", "msys")) or environ.get("OS") == "Windows_NT":
        return PlatformIdentity.WINDOWS
    if system.startswith("darwin"):
        return PlatformIdentity.MACOS
    return PlatformIdentity.UNKNOWN


def _read_os_release() -> str | None:
    try:
        return OS_RELEASE_PATH.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


@lru_cache(maxsize=1)
def resolve() -> PlatformIdentity:
    """Resolve the current platform family (cached for the process)."""
    os_release = _read_os_release() if _sys.platform.startswith("linux") else None
    return resolve_from(_sys.platform, os_release, _os.environ)
