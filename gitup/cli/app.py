from __future__ import annotations

from pathlib import Path

import typer

from gitup import __version__
from gitup.cli.context import build_context
from gitup.cli.invocation import Invocation, run_invocation

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


@app.command(no_args_is_help=True)
def gitup(
    user: str | None = typer.Option(None, "--user", help="Git user name."),
    email: str | None = typer.Option(None, "--email", help="Git user email."),
    show_config: bool = typer.Option(False, "--show-config", help="Show the global identity."),
    json_output: bool = typer.Option(False, "--json", help="Print the global identity as JSON."),
    install: bool = typer.Option(False, "--install", help="Install git if it is missing."),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="With --install: show the install command only."
    ),
    create_profile: str | None = typer.Option(
        None, "--create-profile", help="Save --user/--email as a named profile."
    ),
    use_profile: str | None = typer.Option(
        None, "--use-profile", help="Make a saved profile the global identity."
    ),
    delete_profile: str | None = typer.Option(
        None, "--delete-profile", help="Delete a saved profile."
    ),
    list_profiles: bool = typer.Option(False, "--list-profiles", help="List saved profiles."),
    backup: Path | None = typer.Option(None, "--backup", help="Write the identity to a file."),
    include_profiles: bool = typer.Option(
        False, "--include-profiles", help="With --backup: also save all profiles."
    ),
    restore: Path | None = typer.Option(None, "--restore", help="Restore from a backup file."),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Install git and manage the global git identity and profiles."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    ctx = build_context()
    code = run_invocation(
        ctx,
        Invocation(
            user=user,
            email=email,
            show_config=show_config,
            json_output=json_output,
            install=install,
            dry_run=dry_run,
            create_profile=create_profile,
            use_profile=use_profile,
            delete_profile=delete_profile,
            list_profiles=list_profiles,
            backup=backup.expanduser() if backup is not None else None,
            include_profiles=include_profiles,
            restore=restore.expanduser() if restore is not None else None,
        ),
    )
    if code:
        raise typer.Exit(code=code)


def main() -> None:
    app()
