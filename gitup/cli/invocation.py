"""One gitup run: parsed flags in, exit code out.

The run moves strictly forward:

    platform resolved -> git detected (if needed) -> [install] -> restore -> set identity
    -> create/use/delete profile -> backup -> list -> show

The first failing step prints its diagnostic and ends the run with that
step's exit code. A failed install is terminal; nothing else is attempted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gitup.core.errors import ErrorCode
from gitup.core.identity import Identity
from gitup.core.result import Err, Ok, Result
from gitup.git.identity import MissingField
from gitup.output.console import Style
from gitup.output.errors import AppError, GitMissing, UsageError, error_exit_code, print_error
from gitup.services.detector import Installed, InstallStatus, NotInstalled

from .context import CLIContext

__all__ = ["Invocation", "run_invocation"]


@dataclass(frozen=True, slots=True)
class Invocation:
    """Flags of a single gitup run, as parsed by the CLI."""

    user: str | None = None
    email: str | None = None
    show_config: bool = False
    json_output: bool = False
    install: bool = False
    dry_run: bool = False
    create_profile: str | None = None
    use_profile: str | None = None
    delete_profile: str | None = None
    list_profiles: bool = False
    backup: Path | None = None
    include_profiles: bool = False
    restore: Path | None = None

    @property
    def sets_identity(self) -> bool:
        return self.create_profile is None and (self.user is not None or self.email is not None)

    @property
    def needs_git(self) -> bool:
        """True if any requested step reads or writes the global git config."""
        return (
            self.sets_identity
            or self.use_profile is not None
            or self.backup is not None
            or self.restore is not None
            or self.show_config
            or self.json_output
        )

    def validate(self) -> UsageError | None:
        if self.create_profile is not None and (self.user is None or self.email is None):
            return UsageError("--create-profile requires --user and --email")
        if (self.user is None) != (self.email is None):
            return UsageError("--user and --email must be given together")
        if self.include_profiles and self.backup is None:
            return UsageError("--include-profiles only applies to --backup")
        if self.dry_run and not self.install:
            return UsageError("--dry-run only applies to --install")
        if not (
            self.install
            or self.needs_git
            or self.create_profile is not None
            or self.delete_profile is not None
            or self.list_profiles
        ):
            return UsageError("nothing to do (see --help)")
        return None


StepHandler = Callable[[CLIContext, Invocation], Result[None, AppError]]


@dataclass(frozen=True, slots=True)
class _Step:
    operation: str
    handler: StepHandler
    needs_git: bool


def run_invocation(ctx: CLIContext, inv: Invocation) -> int:
    """Run every requested step in order and return the process exit code."""
    console = ctx.console

    usage = inv.validate()
    if usage is not None:
        return _fail(ctx, usage, "gitup")

    # Profile-only runs never spawn git.
    status: InstallStatus = NotInstalled()
    if inv.install or inv.needs_git:
        detected = ctx.detector().detect()
        if isinstance(detected, Err):
            return _fail(ctx, detected.error, "detect")
        status = detected.value

    if inv.install:
        console.print(f"platform: {ctx.platform}", Style.DIM)
        installed = _install(ctx, inv, status)
        if isinstance(installed, Err):
            return _fail(ctx, installed.error, "install")
        status = installed.value

    for step in _steps(inv):
        if step.needs_git and not isinstance(status, Installed):
            return _fail(ctx, GitMissing(), step.operation)
        outcome = step.handler(ctx, inv)
        if isinstance(outcome, Err):
            return _fail(ctx, outcome.error, step.operation)

    return int(ErrorCode.OK)


def _fail(ctx: CLIContext, error: AppError, operation: str) -> int:
    print_error(error, ctx.console, operation=operation)
    return error_exit_code(error)


def _steps(inv: Invocation) -> list[_Step]:
    steps: list[_Step] = []
    if inv.restore is not None:
        steps.append(_Step("restore", _restore, needs_git=True))
    if inv.sets_identity:
        steps.append(_Step("set identity", _set_identity, needs_git=True))
    if inv.create_profile is not None:
        steps.append(_Step("create profile", _create_profile, needs_git=False))
    if inv.use_profile is not None:
        steps.append(_Step("use profile", _use_profile, needs_git=True))
    if inv.delete_profile is not None:
        steps.append(_Step("delete profile", _delete_profile, needs_git=False))
    if inv.backup is not None:
        steps.append(_Step("backup", _backup, needs_git=True))
    if inv.list_profiles:
        steps.append(_Step("list profiles", _list_profiles, needs_git=False))
    if inv.show_config or inv.json_output:
        steps.append(_Step("show config", _show_config, needs_git=True))
    return steps


# -----------------------------------------------------------------------------
# Steps
# -----------------------------------------------------------------------------


def _install(
    ctx: CLIContext, inv: Invocation, status: InstallStatus
) -> Result[InstallStatus, AppError]:
    if isinstance(status, Installed):
        ctx.console.success(f"git {status.version} is already installed")
        return Ok(status)

    installer = ctx.installer()
    if inv.dry_run:
        planned = installer.plan(ctx.platform)
        if isinstance(planned, Err):
            return planned
        ctx.console.print(f"Would run: {planned.value.display}", Style.DIM)
        return Ok(status)

    ctx.console.info(f"git not found, installing with {ctx.platform.package_manager}")
    installed = installer.install(ctx.platform)
    if isinstance(installed, Err):
        return installed
    ctx.console.success(f"git {installed.value} installed")
    return Ok(Installed(version=installed.value))


def _restore(ctx: CLIContext, inv: Invocation) -> Result[None, AppError]:
    assert inv.restore is not None
    restored = ctx.backups().restore(inv.restore)
    if isinstance(restored, Err):
        return restored
    summary = restored.value
    ctx.console.success(f"restored {summary.identity} from {inv.restore}")
    if summary.profiles:
        ctx.console.print(f"profiles: {', '.join(summary.profiles)}", Style.DIM)
    return Ok(None)


def _set_identity(ctx: CLIContext, inv: Invocation) -> Result[None, AppError]:
    identity = Identity(name=inv.user or "", email=inv.email or "")
    applied = ctx.configurator().set(identity)
    if isinstance(applied, Err):
        return applied
    ctx.console.success(f"git identity set to {identity.name.strip()} <{identity.email.strip()}>")
    return Ok(None)


def _create_profile(ctx: CLIContext, inv: Invocation) -> Result[None, AppError]:
    assert inv.create_profile is not None
    identity = Identity(name=inv.user or "", email=inv.email or "")
    created = ctx.profiles().create(inv.create_profile, identity)
    if isinstance(created, Err):
        return created
    ctx.console.success(f"profile '{inv.create_profile}' created")
    return Ok(None)


def _use_profile(ctx: CLIContext, inv: Invocation) -> Result[None, AppError]:
    assert inv.use_profile is not None
    used = ctx.profiles().use(inv.use_profile)
    if isinstance(used, Err):
        return used
    ctx.console.success(f"switched to profile '{inv.use_profile}' ({used.value})")
    return Ok(None)


def _delete_profile(ctx: CLIContext, inv: Invocation) -> Result[None, AppError]:
    assert inv.delete_profile is not None
    deleted = ctx.profiles().delete(inv.delete_profile)
    if isinstance(deleted, Err):
        return deleted
    ctx.console.success(f"profile '{inv.delete_profile}' deleted")
    return Ok(None)


def _backup(ctx: CLIContext, inv: Invocation) -> Result[None, AppError]:
    assert inv.backup is not None
    written = ctx.backups().backup(inv.backup, include_profiles=inv.include_profiles)
    if isinstance(written, Err):
        return written
    ctx.console.success(f"configuration backed up to {inv.backup}")
    return Ok(None)


def _list_profiles(ctx: CLIContext, inv: Invocation) -> Result[None, AppError]:
    store = ctx.profiles()
    listed = store.list()
    if isinstance(listed, Err):
        return listed
    active = store.active()
    if isinstance(active, Err):
        return active

    if not listed.value:
        ctx.console.print("no profiles", Style.DIM)
        return Ok(None)
    for profile in listed.value:
        marker = "*" if profile.name == active.value else " "
        ctx.console.print(f"{marker} {profile.name}: {profile.identity}")
    return Ok(None)


def _show_config(ctx: CLIContext, inv: Invocation) -> Result[None, AppError]:
    current = ctx.configurator().get()
    match current:
        case Ok(identity):
            name, email = identity.name, identity.email
        case Err(MissingField(name=partial_name, email=partial_email)):
            name, email = partial_name, partial_email
        case Err(error):
            return Err(error)

    if inv.json_output:
        ctx.console.json({"user": name, "email": email})
    if inv.show_config:
        ctx.console.print(f"user.name: {name}" if name else "user.name is not set")
        ctx.console.print(f"user.email: {email}" if email else "user.email is not set")
    return Ok(None)
