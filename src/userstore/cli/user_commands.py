"""User record management CLI commands."""

from typing import Any, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from userstore.core.exceptions import EngineError, UserStoreError
from userstore.core.services.database.db_session import DbSessionService
from userstore.core.services.user.user_store import UserRecordStore
from userstore.entities.core.user import User

console = Console()

users_app = typer.Typer(help="Manage stored user records", no_args_is_help=True)


def get_user_store() -> UserRecordStore:
    """Build a store bound to the configured database."""
    return UserRecordStore(DbSessionService())


def _fail(action: str, error: Exception) -> typer.Exit:
    console.print(f"[red]❌ Failed to {action}: {error}[/red]")
    return typer.Exit(code=1)


def _flag(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "✅" if value else "❌"
    return str(value)


def _users_table(users: list[User], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Username", style="green")
    table.add_column("Phone", style="blue")
    table.add_column("Admin", style="yellow")

    for user in users:
        table.add_row(str(user.id), user.username, _flag(user.phone), _flag(user.admin))
    return table


@users_app.command("add")
def add_user(
    username: str = typer.Argument(..., help="Username for the new user"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Password"
    ),
    phone: Optional[int] = typer.Option(None, "--phone", help="Phone number"),
    admin: Optional[bool] = typer.Option(
        None, "--admin/--no-admin", help="Mark the user as administrator (or explicitly not)"
    ),
) -> None:
    """Create a new user record."""
    store = get_user_store()
    candidate: dict[str, Any] = {"username": username, "password": password}
    if phone is not None:
        candidate["phone"] = phone
    if admin is not None:
        candidate["admin"] = admin

    try:
        user = store.create(candidate)
    except (UserStoreError, EngineError) as e:
        raise _fail("create user", e) from e

    console.print(f"[green]✅ Created user '{user.username}' with ID {user.id}[/green]")


@users_app.command("show")
def show_user(username: str = typer.Argument(..., help="Username to look up")) -> None:
    """Show a user by username."""
    store = get_user_store()
    try:
        user = store.find_by_username(username)
    except EngineError as e:
        raise _fail("look up user", e) from e

    if user is None:
        console.print(f"[yellow]No user named '{username}'[/yellow]")
        raise typer.Exit(code=1)

    console.print(_users_table([user], title=f"User '{username}'"))


@users_app.command("list")
def list_users(
    offset: int = typer.Option(0, "--offset", "-o", help="Number of users to skip"),
    limit: int = typer.Option(100, "--limit", "-l", help="Maximum number of users to show"),
) -> None:
    """List stored users ordered by ID."""
    store = get_user_store()
    try:
        users = store.list_users(offset=offset, limit=limit)
    except EngineError as e:
        raise _fail("list users", e) from e

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    console.print(_users_table(users, title="Users"))
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("update")
def update_user(
    user_id: int = typer.Argument(..., help="ID of the user to update"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="New username"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="New password"),
    phone: Optional[int] = typer.Option(None, "--phone", help="New phone number"),
    clear_phone: bool = typer.Option(False, "--clear-phone", help="Remove the phone number"),
    admin: Optional[bool] = typer.Option(None, "--admin/--no-admin", help="Set the admin flag"),
) -> None:
    """Update fields of an existing user."""
    if phone is not None and clear_phone:
        console.print("[red]❌ --phone and --clear-phone are mutually exclusive[/red]")
        raise typer.Exit(code=2)

    changes: dict[str, Any] = {
        name: value
        for name, value in {
            "username": username,
            "password": password,
            "phone": phone,
            "admin": admin,
        }.items()
        if value is not None
    }
    if clear_phone:
        changes["phone"] = None

    store = get_user_store()
    try:
        user = store.update(user_id, changes)
    except (UserStoreError, EngineError) as e:
        raise _fail("update user", e) from e

    console.print(f"[green]✅ Updated user '{user.username}' (ID {user.id})[/green]")


@users_app.command("delete")
def delete_user(
    user_id: int = typer.Argument(..., help="ID of the user to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete a user record."""
    if not force and not Confirm.ask(f"Delete user {user_id}?"):
        console.print("[yellow]Aborted[/yellow]")
        return

    store = get_user_store()
    try:
        store.delete(user_id)
    except (UserStoreError, EngineError) as e:
        raise _fail("delete user", e) from e

    console.print(f"[green]✅ Deleted user {user_id}[/green]")
