from __future__ import annotations

from dataclasses import dataclass

from gitup.core.result import Err
from gitup.core.settings import Settings, load_settings
from gitup.git.config import GitConfigClient
from gitup.git.identity import IdentityConfigurator
from gitup.output.console import ConsoleProtocol, RichConsole
from gitup.platform.detection import PlatformIdentity, resolve
from gitup.platform.process import CommandRunner, SubprocessRunner
from gitup.services.backup import BackupService
from gitup.services.detector import InstallationDetector
from gitup.services.installer import InstallerDispatcher
from gitup.services.profiles import ProfileStore


@dataclass(frozen=True, slots=True)
class CLIContext:
    platform: PlatformIdentity
    settings: Settings
    runner: CommandRunner
    console: ConsoleProtocol

    def detector(self) -> InstallationDetector:
        return InstallationDetector(self.runner, timeout=self.settings.git_timeout)

    def installer(self) -> InstallerDispatcher:
        return InstallerDispatcher(
            runner=self.runner,
            detector=self.detector(),
            console=self.console,
            timeout=self.settings.install_timeout,
        )

    def configurator(self) -> IdentityConfigurator:
        client = GitConfigClient(self.runner, timeout=self.settings.git_timeout)
        return IdentityConfigurator(client)

    def profiles(self) -> ProfileStore:
        return ProfileStore(self.settings.profile_store_path, self.configurator())

    def backups(self) -> BackupService:
        return BackupService(self.configurator(), self.profiles())


def build_context() -> CLIContext:
    console = RichConsole()

    settings = Settings()
    loaded = load_settings()
    if isinstance(loaded, Err):
        console.warning(f"{loaded.error.message} (using defaults)")
    else:
        settings = loaded.value

    return CLIContext(
        platform=resolve(),
        settings=settings,
        runner=SubprocessRunner(),
        console=console,
    )
