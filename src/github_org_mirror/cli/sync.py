"""Sync commands for GitHub Org Mirror."""

import json
from typing import Any

import typer
from rich.table import Table

from github_org_mirror.cli.common import (
    OutputFormatOption,
    UserIdArgument,
    console,
    run_async_command,
)
from github_org_mirror.db import UserRepository, get_session
from github_org_mirror.github.sync import (
    GitHubSyncOrchestrator,
    OutputFormat,
    SyncInProgressError,
    SyncStatusReporter,
    UserNotFoundError,
)

app = typer.Typer(help="Sync organization activity from GitHub")


async def _run_sync(user_id: int) -> dict[str, Any]:
    """Run a full orchestrator cycle for one user.

    Raises:
        UserNotFoundError: If the user does not exist
        SyncInProgressError: If a run for the user is already active
    """
    async with get_session() as session:
        user = await UserRepository(session).get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        if user.sync_in_progress:
            raise SyncInProgressError(user_id)

        orchestrator = GitHubSyncOrchestrator(user_id, session)
        await orchestrator.initialize()
        result = await orchestrator.run_sync()
        return result.to_dict()


@app.command("run")
def sync_run(
    user_id: UserIdArgument,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Mirror every organization visible to a user's GitHub token.

    The first run is a full sync; later runs only fetch what changed since
    the previous one.

    Examples:
        ghmirror sync run 1
        ghmirror sync run 1 --format json
        ghmirror -v sync run 1  # Debug logging
    """
    if output_format == OutputFormat.TEXT:
        console.print(f"[dim]Syncing GitHub activity for user {user_id}...[/dim]")

    result = run_async_command(_run_sync(user_id), error_prefix="Sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    summary = result["summary"]
    console.print(f"[bold]Sync Complete[/bold] ({summary['sync_type']})")
    console.print()

    table = Table(title="Stages")
    table.add_column("Stage", style="cyan")
    table.add_column("Status")
    table.add_column("Created", justify="right")
    table.add_column("Updated", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Pages", justify="right")
    table.add_column("Errors", justify="right")
    for stage in result["stages"]:
        if stage["failed"]:
            status = "[red]failed[/red]"
        elif stage["errors"]:
            status = "[yellow]partial[/yellow]"
        else:
            status = "[green]ok[/green]"
        table.add_row(
            stage["stage"],
            status,
            str(stage["created"]),
            str(stage["updated"]),
            str(stage["skipped"]),
            str(stage["pages"]),
            str(len(stage["errors"])),
        )
    console.print(table)

    errors = [error for stage in result["stages"] for error in stage["errors"]]
    if errors:
        console.print()
        console.print("[yellow]Errors:[/yellow]")
        for error in errors[:10]:
            console.print(f"  - {error}")
        if len(errors) > 10:
            console.print(f"  ... and {len(errors) - 10} more")

    console.print()
    console.print(f"  Duration: {summary['duration_seconds']:.1f}s")


@app.command("status")
def sync_status(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show the sync status of every user."""

    async def _status() -> list[dict[str, object]]:
        async with get_session() as session:
            entries = await SyncStatusReporter(session).get_status()
            return [entry.to_dict() for entry in entries]

    entries = run_async_command(_status(), error_prefix="Status failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(entries))
        return

    if not entries:
        console.print("[yellow]No users registered.[/yellow]")
        return

    table = Table(title="Sync Status")
    table.add_column("User", style="cyan", justify="right")
    table.add_column("Login")
    table.add_column("In Progress")
    table.add_column("Last Synced")
    table.add_column("Type")
    for entry in entries:
        table.add_row(
            str(entry["user_id"]),
            str(entry["login"]),
            "[yellow]yes[/yellow]" if entry["sync_in_progress"] else "no",
            str(entry["last_synced_at"] or "never"),
            str(entry["sync_type"] or "-"),
        )
    console.print(table)
