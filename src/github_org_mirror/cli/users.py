"""User management commands for GitHub Org Mirror."""

import typer
from rich.table import Table

from github_org_mirror.cli.common import console, run_async_command
from github_org_mirror.db import UserRepository, get_session
from github_org_mirror.schemas import UserRead

app = typer.Typer(help="Manage users whose GitHub credentials drive syncs")


@app.command("add")
def add_user(
    login: str = typer.Argument(..., help="GitHub login of the user"),
    token: str = typer.Option(
        ...,
        "--token",
        "-t",
        envvar="GITHUB_TOKEN",
        help="GitHub access token (read from GITHUB_TOKEN if omitted)",
    ),
) -> None:
    """Register a user, or replace the token of an existing one.

    Examples:
        ghmirror users add octocat --token ghp_xxx
        GITHUB_TOKEN=ghp_xxx ghmirror users add octocat
    """

    async def _add() -> tuple[int, bool]:
        async with get_session() as session:
            users = UserRepository(session)
            existing = await users.get_by_login(login)
            if existing is not None:
                await users.set_token(existing.id, token)
                return existing.id, False
            user = await users.create(login, token)
            return user.id, True

    user_id, created = run_async_command(_add(), error_prefix="Could not add user")
    action = "Created" if created else "Updated token for"
    console.print(f"[green]{action}[/green] user {login} (id {user_id})")


@app.command("list")
def list_users() -> None:
    """List registered users."""

    async def _list() -> list[UserRead]:
        async with get_session() as session:
            return UserRead.from_orm_list(await UserRepository(session).list_all())

    users = run_async_command(_list(), error_prefix="Could not list users")
    if not users:
        console.print("[yellow]No users registered.[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Login")
    table.add_column("Token")
    table.add_column("Last Synced")
    table.add_column("Type")
    for user in users:
        table.add_row(
            str(user.id),
            user.login,
            "yes" if user.has_token else "[red]missing[/red]",
            user.last_synced_at.strftime("%Y-%m-%d %H:%M") if user.last_synced_at else "never",
            user.last_sync_type.value if user.last_sync_type else "-",
        )
    console.print(table)
