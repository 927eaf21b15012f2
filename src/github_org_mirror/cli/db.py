"""Database commands for GitHub Org Mirror."""

import json
from pathlib import Path

import typer
from alembic import command
from alembic.config import Config as AlembicConfig
from rich.table import Table

from github_org_mirror.cli.common import (
    OutputFormatOption,
    UserIdArgument,
    console,
    run_async_command,
)
from github_org_mirror.db import (
    ENTITY_MODELS,
    BaseRepository,
    create_tables,
    get_session,
)
from github_org_mirror.github.sync.enums import OutputFormat

app = typer.Typer(help="Manage the local database")


@app.command("init")
def init_db() -> None:
    """Create all tables (safe to run repeatedly)."""
    run_async_command(create_tables(), error_prefix="Database init failed")
    console.print("[green]Database initialized.[/green]")


@app.command("stats")
def db_stats(
    user_id: UserIdArgument,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show how many rows of each entity kind are stored for a user.

    Examples:
        ghmirror db stats 1
        ghmirror db stats 1 --format json
    """

    async def _stats() -> dict[str, int]:
        async with get_session() as session:
            counts: dict[str, int] = {}
            for kind, model in ENTITY_MODELS.items():
                repo = BaseRepository(session, model)
                counts[kind.value] = await repo.count_documents(user_id=user_id)
            return counts

    counts = run_async_command(_stats(), error_prefix="Stats failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(counts))
        return

    table = Table(title=f"Stored entities for user {user_id}")
    table.add_column("Entity", style="cyan")
    table.add_column("Rows", justify="right")
    for kind, count in counts.items():
        table.add_row(kind, str(count))
    console.print(table)


@app.command("migrate")
def migrate_db(
    revision: str = typer.Argument("head", help="Target Alembic revision"),
    config_path: Path = typer.Option(  # noqa: B008
        Path("alembic.ini"),
        "--config",
        "-c",
        help="Path to alembic.ini",
    ),
) -> None:
    """Apply Alembic migrations up to a revision."""
    if not config_path.exists():
        console.print(f"[red]Error:[/red] {config_path} not found")
        raise typer.Exit(1)

    try:
        command.upgrade(AlembicConfig(str(config_path)), revision)
    except Exception as e:
        console.print(f"[red]Migration failed:[/red] {e}")
        raise typer.Exit(1) from None
    console.print(f"[green]Database migrated to {revision}.[/green]")
