# SPDX-License-Identifier: MIT
"""Named identity profiles.

Profiles are stored in a single TOML file (``<user-config-dir>/profiles.toml``
unless overridden in settings):

    schema_version = 1
    active = "work"

    [profiles."work"]
    name = "Jane Doe"
    email = "jane@corp.example"

Every mutation reads the whole file, changes it in memory and writes it back
with an atomic replace, so an interrupted write leaves either the previous or
the new store on disk. There is no lock: two concurrent gitup processes can
lose each other's update.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from gitup.core.identity import Identity, InvalidIdentity, validate_identity, validate_profile_name
from gitup.core.result import Err, Ok, Result
from gitup.core.structured import StrDict, as_str_dict, get_table, toml_str
from gitup.git.config import ConfigError
from gitup.git.identity import IdentityConfigurator
from gitup.platform.files import atomic_write_text

__all__ = [
    "SCHEMA_VERSION",
    "DuplicateProfile",
    "Profile",
    "ProfileError",
    "ProfileStore",
    "StoreError",
    "UnknownProfile",
]

SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class Profile:
    name: str
    identity: Identity


@dataclass(frozen=True, slots=True)
class DuplicateProfile:
    name: str


@dataclass(frozen=True, slots=True)
class UnknownProfile:
    name: str
    available: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StoreError:
    """The store file could not be read, parsed or written."""

    message: str
    path: Path | None = None


ProfileError = DuplicateProfile | UnknownProfile | InvalidIdentity | StoreError | ConfigError


def _empty_profiles() -> dict[str, Identity]:
    return {}


@dataclass(slots=True)
class _StoreData:
    profiles: dict[str, Identity] = field(default_factory=_empty_profiles)
    active: str | None = None


class ProfileStore:
    def __init__(self, path: Path, configurator: IdentityConfigurator) -> None:
        self._path = path
        self._configurator = configurator

    @property
    def path(self) -> Path:
        return self._path

    def create(self, name: str, identity: Identity) -> Result[None, ProfileError]:
        """Add a new profile. An existing profile is never overwritten."""
        checked = _validate_entry(name, identity)
        if isinstance(checked, Err):
            return checked

        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        data = loaded.value

        if name in data.profiles:
            return Err(DuplicateProfile(name))
        data.profiles[name] = checked.value
        return self._save(data)

    def use(self, name: str) -> Result[Identity, ProfileError]:
        """Make profile ``name`` the live global identity and mark it active."""
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        data = loaded.value

        identity = data.profiles.get(name)
        if identity is None:
            return Err(UnknownProfile(name, available=tuple(sorted(data.profiles))))

        applied = self._configurator.set(identity)
        if isinstance(applied, Err):
            return applied

        data.active = name
        saved = self._save(data)
        if isinstance(saved, Err):
            return saved
        return Ok(identity)

    def list(self) -> Result[list[Profile], StoreError]:
        """All profiles, sorted by name."""
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        profiles = loaded.value.profiles
        return Ok([Profile(name, profiles[name]) for name in sorted(profiles)])

    def active(self) -> Result[str | None, StoreError]:
        """Name of the profile last activated with ``use``, if any."""
        return self._load().map(lambda data: data.active)

    def delete(self, name: str) -> Result[None, ProfileError]:
        """Remove a profile. The live global identity is left as it is."""
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        data = loaded.value

        if name not in data.profiles:
            return Err(UnknownProfile(name, available=tuple(sorted(data.profiles))))

        del data.profiles[name]
        if data.active == name:
            data.active = None
        return self._save(data)

    def merge(self, profiles: Mapping[str, Identity]) -> Result[None, ProfileError]:
        """Create or overwrite each given profile in one write."""
        if not profiles:
            return Ok(None)

        checked: dict[str, Identity] = {}
        for name, identity in profiles.items():
            entry = _validate_entry(name, identity)
            if isinstance(entry, Err):
                return entry
            checked[name] = entry.value

        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        data = loaded.value
        data.profiles.update(checked)
        return self._save(data)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _load(self) -> Result[_StoreData, StoreError]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return Ok(_StoreData())
        except OSError as e:
            return Err(StoreError(f"Error reading {self._path}: {e}", path=self._path))

        try:
            doc = tomllib.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(StoreError(f"Invalid UTF-8 in profile store: {e}", path=self._path))
        except tomllib.TOMLDecodeError as e:
            return Err(StoreError(f"Invalid TOML syntax: {e}", path=self._path))

        return _parse_store(doc, self._path)

    def _save(self, data: _StoreData) -> Result[None, StoreError]:
        try:
            atomic_write_text(self._path, _render_store(data))
        except OSError as e:
            return Err(StoreError(f"Could not write {self._path}: {e}", path=self._path))
        return Ok(None)


def _validate_entry(name: str, identity: Identity) -> Result[Identity, InvalidIdentity]:
    named = validate_profile_name(name)
    if isinstance(named, Err):
        return named
    return validate_identity(identity.name, identity.email)


def _parse_store(doc: StrDict, path: Path) -> Result[_StoreData, StoreError]:
    version = doc.get("schema_version")
    if not isinstance(version, int) or isinstance(version, bool):
        return Err(StoreError("schema_version is missing or not an integer", path=path))
    if version > SCHEMA_VERSION:
        return Err(
            StoreError(
                f"schema_version {version} is newer than supported ({SCHEMA_VERSION})",
                path=path,
            )
        )

    profiles: dict[str, Identity] = {}
    table = get_table(doc, "profiles") or {}
    for name, raw in table.items():
        entry = as_str_dict(raw)
        if entry is None:
            return Err(StoreError(f"profile '{name}' is not a table", path=path))
        prof_name = entry.get("name")
        prof_email = entry.get("email")
        if not isinstance(prof_name, str) or not isinstance(prof_email, str):
            return Err(StoreError(f"profile '{name}' needs string name and email", path=path))
        checked = _validate_entry(name, Identity(prof_name, prof_email))
        if isinstance(checked, Err):
            return Err(StoreError(f"profile '{name}': {checked.error.message}", path=path))
        profiles[name] = checked.value

    active = doc.get("active")
    if not isinstance(active, str) or active not in profiles:
        active = None

    return Ok(_StoreData(profiles=profiles, active=active))


def _render_store(data: _StoreData) -> str:
    lines = [f"schema_version = {SCHEMA_VERSION}"]
    if data.active is not None:
        lines.append(f"active = {toml_str(data.active)}")

    for name in sorted(data.profiles):
        identity = data.profiles[name]
        lines.append("")
        lines.append(f"[profiles.{toml_str(name)}]")
        lines.append(f"name = {toml_str(identity.name)}")
        lines.append(f"email = {toml_str(identity.email)}")

    return "\n".join(lines) + "\n"
