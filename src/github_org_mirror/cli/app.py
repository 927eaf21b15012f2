"""`ghmirror` entry point: global options and sub-command registration."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from github_org_mirror import __version__
from github_org_mirror.cli import db as db_cmd
from github_org_mirror.cli import sync as sync_cmd
from github_org_mirror.cli import users as users_cmd
from github_org_mirror.config import get_settings
from github_org_mirror.logging import get_logger, setup_logging

app = typer.Typer(
    name="ghmirror",
    help="Mirror GitHub organization activity into a local database.",
    add_completion=False,
    no_args_is_help=True,
)
app.add_typer(db_cmd.app, name="db")
app.add_typer(users_cmd.app, name="users")
app.add_typer(sync_cmd.app, name="sync")

console = Console()


def _print_version(value: bool) -> None:
    if value:
        console.print(f"ghmirror version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log warnings and errors."),
    ] = False,
    database_url: Annotated[
        str | None,
        typer.Option(
            "--database-url",
            help="Override DATABASE_URL for this invocation.",
            show_default=False,
        ),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=_print_version,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """GitHub Org Mirror - organizations, repositories, commits, PRs, issues and members."""
    settings = get_settings()
    if database_url:
        # Engine creation reads the cached settings, so this must happen first
        settings.database_url = database_url

    logging_config = settings.logging
    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(logging_config.log_file) if logging_config.log_file else None,
        rotation=logging_config.rotation,
        retention=logging_config.retention,
        serialize=logging_config.serialize,
    )
    get_logger("cli").debug(
        "Using database {} and GitHub API {}", settings.database_url, settings.github_api_url
    )


if __name__ == "__main__":
    app()
