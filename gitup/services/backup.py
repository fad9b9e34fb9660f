# SPDX-License-Identifier: MIT
"""Back up and restore the global identity (and optionally all profiles).

A backup is a small line-oriented ``key=value`` file meant to be read and
edited by humans:

    # gitup backup
    schema_version=1
    user.name=Jane Doe
    user.email=jane@example.com
    profile.work.name=Jane Doe
    profile.work.email=jane@corp.example

Blank lines and ``#`` comments are ignored. A profile key is split at its
last dot, so profile names may themselves contain dots.

A backup is untrusted input: restore parses and validates the whole file
before changing anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from gitup.core.identity import Identity, InvalidIdentity, validate_identity, validate_profile_name
from gitup.core.result import Err, Ok, Result
from gitup.git.config import ConfigError
from gitup.git.identity import EMAIL_KEY, NAME_KEY, IdentityConfigurator, MissingField
from gitup.platform.files import atomic_write_text

from .profiles import ProfileError, ProfileStore, StoreError

__all__ = [
    "BACKUP_SCHEMA_VERSION",
    "BackupError",
    "BackupIOError",
    "BackupRecord",
    "BackupService",
    "MalformedBackup",
    "RestoreError",
    "RestoreSummary",
    "parse_backup",
    "render_backup",
]

BACKUP_SCHEMA_VERSION = 1

_HEADER = "# gitup backup"
_VERSION_KEY = "schema_version"
_PROFILE_PREFIX = "profile."
_PROFILE_FIELDS = ("name", "email")


@dataclass(frozen=True, slots=True)
class BackupIOError:
    """Backup file could not be read or written."""

    message: str
    path: Path


@dataclass(frozen=True, slots=True)
class MalformedBackup:
    """Backup file content is unusable.

    Attributes:
        reason: What is wrong.
        line: 1-based line number, when the problem is tied to a line.
    """

    reason: str
    line: int | None = None

    @property
    def message(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.reason}"
        return self.reason


def _empty_profiles() -> dict[str, Identity]:
    return {}


@dataclass(frozen=True, slots=True)
class BackupRecord:
    identity: Identity
    profiles: dict[str, Identity] = field(default_factory=_empty_profiles)


@dataclass(frozen=True, slots=True)
class RestoreSummary:
    identity: Identity
    profiles: tuple[str, ...]


BackupError = BackupIOError | ConfigError | InvalidIdentity | MissingField | StoreError
RestoreError = BackupIOError | MalformedBackup | ConfigError | InvalidIdentity | ProfileError


def render_backup(record: BackupRecord) -> str:
    lines = [
        _HEADER,
        f"{_VERSION_KEY}={BACKUP_SCHEMA_VERSION}",
        f"{NAME_KEY}={record.identity.name}",
        f"{EMAIL_KEY}={record.identity.email}",
    ]
    for name in sorted(record.profiles):
        identity = record.profiles[name]
        lines.append(f"{_PROFILE_PREFIX}{name}.name={identity.name}")
        lines.append(f"{_PROFILE_PREFIX}{name}.email={identity.email}")
    return "\n".join(lines) + "\n"


def parse_backup(content: str) -> Result[BackupRecord, MalformedBackup]:
    """Parse and validate backup file content."""
    values: dict[str, tuple[str, int]] = {}
    for lineno, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            return Err(MalformedBackup("expected key=value", line=lineno))
        key, _, value = line.partition("=")
        key = key.strip()
        if not key:
            return Err(MalformedBackup("empty key", line=lineno))
        if key in values:
            return Err(MalformedBackup(f"duplicate key '{key}'", line=lineno))
        values[key] = (value.strip(), lineno)

    version = values.pop(_VERSION_KEY, None)
    if version is None:
        return Err(MalformedBackup(f"missing '{_VERSION_KEY}'"))
    if not version[0].isdecimal() or not 1 <= int(version[0]) <= BACKUP_SCHEMA_VERSION:
        return Err(
            MalformedBackup(f"unsupported {_VERSION_KEY} '{version[0]}'", line=version[1])
        )

    name = values.pop(NAME_KEY, None)
    email = values.pop(EMAIL_KEY, None)
    missing = [key for key, item in ((NAME_KEY, name), (EMAIL_KEY, email)) if item is None]
    if missing or name is None or email is None:
        return Err(MalformedBackup(f"missing {', '.join(missing)}"))

    identity = validate_identity(name[0], email[0])
    if isinstance(identity, Err):
        lineno = name[1] if identity.error.field == "name" else email[1]
        return Err(MalformedBackup(identity.error.message, line=lineno))

    profiles = _collect_profiles(values)
    if isinstance(profiles, Err):
        return profiles

    return Ok(BackupRecord(identity=identity.value, profiles=profiles.value))


def _collect_profiles(
    values: dict[str, tuple[str, int]],
) -> Result[dict[str, Identity], MalformedBackup]:
    fields: dict[str, dict[str, tuple[str, int]]] = {}
    for key, (value, lineno) in values.items():
        if not key.startswith(_PROFILE_PREFIX):
            return Err(MalformedBackup(f"unknown key '{key}'", line=lineno))
        profile, dot, field_name = key[len(_PROFILE_PREFIX) :].rpartition(".")
        if not dot or field_name not in _PROFILE_FIELDS:
            return Err(MalformedBackup(f"unknown key '{key}'", line=lineno))
        if isinstance(validate_profile_name(profile), Err):
            return Err(MalformedBackup(f"invalid profile name in '{key}'", line=lineno))
        fields.setdefault(profile, {})[field_name] = (value, lineno)

    profiles: dict[str, Identity] = {}
    for profile, entry in fields.items():
        if "name" not in entry or "email" not in entry:
            lineno = next(iter(entry.values()))[1]
            return Err(MalformedBackup(f"profile '{profile}' needs name and email", line=lineno))
        checked = validate_identity(entry["name"][0], entry["email"][0])
        if isinstance(checked, Err):
            reason = f"profile '{profile}': {checked.error.message}"
            return Err(MalformedBackup(reason, line=entry["email"][1]))
        profiles[profile] = checked.value
    return Ok(profiles)


class BackupService:
    def __init__(self, configurator: IdentityConfigurator, store: ProfileStore) -> None:
        self._configurator = configurator
        self._store = store

    def backup(self, path: Path, *, include_profiles: bool = False) -> Result[None, BackupError]:
        """Write the live identity (and optionally all profiles) to ``path``.

        An existing file at ``path`` is replaced.
        """
        current = self._configurator.get()
        if isinstance(current, Err):
            return current
        # Values set outside gitup may still be ones a restore would reject.
        checked = validate_identity(current.value.name, current.value.email)
        if isinstance(checked, Err):
            return checked

        profiles: dict[str, Identity] = {}
        if include_profiles:
            listed = self._store.list()
            if isinstance(listed, Err):
                return listed
            profiles = {p.name: p.identity for p in listed.value}

        content = render_backup(BackupRecord(identity=current.value, profiles=profiles))
        try:
            atomic_write_text(path, content)
        except OSError as e:
            return Err(BackupIOError(f"Could not write {path}: {e}", path=path))
        return Ok(None)

    def restore(self, path: Path) -> Result[RestoreSummary, RestoreError]:
        """Apply a backup: identity first, then profiles (create or overwrite).

        The profile store is loaded before git is touched, so an unreadable
        store fails the restore with the global identity unchanged.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return Err(BackupIOError(f"Could not read {path}: {e}", path=path))

        parsed = parse_backup(content)
        if isinstance(parsed, Err):
            return parsed
        record = parsed.value

        if record.profiles:
            readable = self._store.list()
            if isinstance(readable, Err):
                return readable

        applied = self._configurator.set(record.identity)
        if isinstance(applied, Err):
            return applied

        merged = self._store.merge(record.profiles)
        if isinstance(merged, Err):
            return merged

        return Ok(RestoreSummary(identity=record.identity, profiles=tuple(sorted(record.profiles))))
