from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from gitup.git.config import GitConfigClient
from gitup.git.identity import IdentityConfigurator
from gitup.output.console import MockConsole
from gitup.platform.paths import clear_caches
from gitup.services.profiles import ProfileStore
from gitup.test.fakes import FakeRunner


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def configurator(runner: FakeRunner) -> IdentityConfigurator:
    return IdentityConfigurator(GitConfigClient(runner))


@pytest.fixture
def store(tmp_path: Path, configurator: IdentityConfigurator) -> ProfileStore:
    return ProfileStore(tmp_path / "config" / "profiles.toml", configurator)


@pytest.fixture
def isolated_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Redirect user_config_dir() to a temp location for tests."""
    if os.name == "nt":
        monkeypatch.setenv("APPDATA", str(tmp_path))
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    else:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("APPDATA", raising=False)

    clear_caches()
    yield tmp_path
    clear_caches()
