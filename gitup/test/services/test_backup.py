"""Tests for gitup.services.backup module."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitup.core.identity import Identity, InvalidIdentity
from gitup.core.result import Err, Ok
from gitup.git.config import ConfigError
from gitup.git.identity import EMAIL_KEY, NAME_KEY, IdentityConfigurator, MissingField
from gitup.services.backup import (
    BackupIOError,
    BackupRecord,
    BackupService,
    MalformedBackup,
    RestoreSummary,
    parse_backup,
    render_backup,
)
from gitup.services.profiles import Profile, ProfileStore, StoreError
from gitup.test.fakes import FakeRunner

ME = Identity("Jane Doe", "jane@example.com")
WORK = Identity("Jane Doe", "jane@corp.example")


@pytest.fixture
def service(configurator: IdentityConfigurator, store: ProfileStore) -> BackupService:
    return BackupService(configurator, store)


def write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "backup.txt"
    path.write_text(content, encoding="utf-8")
    return path


class TestRender:
    def test_identity_only(self) -> None:
        assert render_backup(BackupRecord(ME)) == (
            "# gitup backup\n"
            "schema_version=1\n"
            "user.name=Jane Doe\n"
            "user.email=jane@example.com\n"
        )

    def test_profiles_sorted(self) -> None:
        text = render_backup(BackupRecord(ME, {"work": WORK, "home": ME}))
        keys = [line.split("=", 1)[0] for line in text.splitlines()[4:]]
        assert keys == [
            "profile.home.name",
            "profile.home.email",
            "profile.work.name",
            "profile.work.email",
        ]


class TestParse:
    def test_parses_rendered_backup_with_dotted_profile(self) -> None:
        record = BackupRecord(ME, {"client.acme": WORK})

        assert parse_backup(render_backup(record)) == Ok(record)

    def test_comments_blank_lines_and_whitespace(self) -> None:
        content = (
            "\n# note\nschema_version = 1\n\n"
            "  user.name = Jane Doe \nuser.email=jane@example.com\n"
        )

        assert parse_backup(content) == Ok(BackupRecord(ME))

    def test_value_may_contain_equals(self) -> None:
        content = "schema_version=1\nuser.name=A=B\nuser.email=ab@example.com\n"

        result = parse_backup(content)

        assert isinstance(result, Ok)
        assert result.value.identity.name == "A=B"

    @pytest.mark.parametrize(
        ("content", "reason", "line"),
        [
            ("schema_version=1\nuser.name=Jane\n", "missing user.email", None),
            ("schema_version=1\n", "missing user.name, user.email", None),
            ("user.name=Jane\nuser.email=j@example.com\n", "missing 'schema_version'", None),
            ("schema_version=2\nuser.name=J\nuser.email=j@example.com\n", "unsupported", 1),
            ("schema_version=one\nuser.name=J\nuser.email=j@example.com\n", "unsupported", 1),
            ("schema_version=1\njust some text\n", "expected key=value", 2),
            ("schema_version=1\n=value\n", "empty key", 2),
            ("schema_version=1\nuser.name=A\nuser.name=B\n", "duplicate key 'user.name'", 3),
        ],
    )
    def test_malformed(self, content: str, reason: str, line: int | None) -> None:
        result = parse_backup(content)

        assert isinstance(result, Err)
        assert reason in result.error.reason
        assert result.error.line == line

    def test_invalid_email_points_at_its_line(self) -> None:
        result = parse_backup("schema_version=1\nuser.name=Jane\nuser.email=not-an-email\n")

        assert isinstance(result, Err)
        assert result.error.line == 3
        assert result.error.message.startswith("line 3: invalid email")

    def test_empty_name_points_at_its_line(self) -> None:
        result = parse_backup("schema_version=1\nuser.name=\nuser.email=j@example.com\n")

        assert isinstance(result, Err)
        assert result.error.line == 2

    def test_unknown_key(self) -> None:
        content = "schema_version=1\nuser.name=J\nuser.email=j@example.com\ncore.editor=vim\n"

        assert parse_backup(content) == Err(MalformedBackup("unknown key 'core.editor'", line=4))

    def test_incomplete_profile(self) -> None:
        content = "schema_version=1\nuser.name=J\nuser.email=j@example.com\nprofile.work.name=J\n"

        result = parse_backup(content)

        assert isinstance(result, Err)
        assert "needs name and email" in result.error.reason

    def test_invalid_profile_identity(self) -> None:
        content = (
            "schema_version=1\nuser.name=J\nuser.email=j@example.com\n"
            "profile.work.name=J\nprofile.work.email=broken\n"
        )

        result = parse_backup(content)

        assert isinstance(result, Err)
        assert result.error.line == 5


class TestBackup:
    def test_writes_identity(
        self, tmp_path: Path, service: BackupService, configurator: IdentityConfigurator
    ) -> None:
        configurator.set(ME)
        path = tmp_path / "out" / "backup.txt"

        assert service.backup(path) == Ok(None)
        assert path.read_text(encoding="utf-8") == render_backup(BackupRecord(ME))

    def test_profiles_only_when_requested(
        self,
        tmp_path: Path,
        service: BackupService,
        configurator: IdentityConfigurator,
        store: ProfileStore,
    ) -> None:
        configurator.set(ME)
        store.create("work", WORK)
        path = tmp_path / "backup.txt"

        service.backup(path)
        assert "profile." not in path.read_text(encoding="utf-8")

        service.backup(path, include_profiles=True)
        assert "profile.work.email=jane@corp.example" in path.read_text(encoding="utf-8")

    def test_incomplete_identity(
        self, tmp_path: Path, runner: FakeRunner, service: BackupService
    ) -> None:
        runner.config[NAME_KEY] = "Jane"
        path = tmp_path / "backup.txt"

        assert service.backup(path) == Err(MissingField(name="Jane", email=None))
        assert not path.exists()

    def test_unwritable_destination(
        self, tmp_path: Path, service: BackupService, configurator: IdentityConfigurator
    ) -> None:
        configurator.set(ME)
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")

        result = service.backup(blocker / "backup.txt")

        assert isinstance(result, Err)
        assert isinstance(result.error, BackupIOError)

    def test_unrestorable_live_identity_is_refused(
        self, tmp_path: Path, runner: FakeRunner, service: BackupService
    ) -> None:
        runner.config[NAME_KEY] = "Jane\u2028Doe"
        runner.config[EMAIL_KEY] = "jane@example.com"
        path = tmp_path / "backup.txt"

        result = service.backup(path)

        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidIdentity)
        assert not path.exists()


class TestRestore:
    def test_round_trip_on_fresh_store(
        self,
        tmp_path: Path,
        runner: FakeRunner,
        configurator: IdentityConfigurator,
    ) -> None:
        source = ProfileStore(tmp_path / "a" / "profiles.toml", configurator)
        configurator.set(ME)
        source.create("work", WORK)
        path = tmp_path / "backup.txt"
        BackupService(configurator, source).backup(path, include_profiles=True)

        runner.config.clear()
        target = ProfileStore(tmp_path / "b" / "profiles.toml", configurator)

        result = BackupService(configurator, target).restore(path)

        assert result == Ok(RestoreSummary(identity=ME, profiles=("work",)))
        assert configurator.get() == Ok(ME)
        assert target.list() == Ok([Profile("work", WORK)])

    def test_malformed_changes_nothing(
        self, tmp_path: Path, runner: FakeRunner, service: BackupService, store: ProfileStore
    ) -> None:
        path = write(tmp_path, "schema_version=1\nuser.name=Jane\n")

        result = service.restore(path)

        assert result == Err(MalformedBackup("missing user.email"))
        assert runner.git_calls == []
        assert not store.path.exists()

    def test_bad_profile_applies_nothing(
        self, tmp_path: Path, runner: FakeRunner, service: BackupService
    ) -> None:
        path = write(
            tmp_path,
            "schema_version=1\nuser.name=Jane\nuser.email=jane@example.com\nprofile.x.name=X\n",
        )

        result = service.restore(path)

        assert isinstance(result, Err)
        assert runner.config == {}

    def test_overwrites_existing_profile(
        self, tmp_path: Path, service: BackupService, store: ProfileStore
    ) -> None:
        store.create("work", ME)
        path = write(tmp_path, render_backup(BackupRecord(ME, {"work": WORK})))

        assert isinstance(service.restore(path), Ok)
        assert store.list() == Ok([Profile("work", WORK)])

    def test_missing_file(self, tmp_path: Path, service: BackupService) -> None:
        result = service.restore(tmp_path / "nope.txt")

        assert isinstance(result, Err)
        assert isinstance(result.error, BackupIOError)

    def test_git_write_failure(
        self, tmp_path: Path, runner: FakeRunner, service: BackupService, store: ProfileStore
    ) -> None:
        runner.fail_writes.add(EMAIL_KEY)
        path = write(tmp_path, render_backup(BackupRecord(ME, {"work": WORK})))

        result = service.restore(path)

        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigError)
        assert not store.path.exists()

    def test_unreadable_store_leaves_identity_unchanged(
        self,
        tmp_path: Path,
        runner: FakeRunner,
        configurator: IdentityConfigurator,
        service: BackupService,
        store: ProfileStore,
    ) -> None:
        old = Identity("Old", "old@example.com")
        configurator.set(old)
        store.path.parent.mkdir(parents=True, exist_ok=True)
        store.path.write_text("schema_version = 2\n", encoding="utf-8")
        path = write(tmp_path, render_backup(BackupRecord(ME, {"w": WORK})))

        result = service.restore(path)

        assert isinstance(result, Err)
        assert isinstance(result.error, StoreError)
        assert configurator.get() == Ok(old)

    @pytest.mark.parametrize("sep", ["\u2028", "\u2029", "\x85"])
    def test_line_separators_never_reach_a_backup(
        self,
        sep: str,
        runner: FakeRunner,
        configurator: IdentityConfigurator,
        store: ProfileStore,
    ) -> None:
        assert isinstance(configurator.set(Identity(f"Jane{sep}Doe", "jane@example.com")), Err)
        assert isinstance(store.create(f"a{sep}b", WORK), Err)
        assert runner.config == {}
        assert not store.path.exists()
