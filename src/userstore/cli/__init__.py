"""Main CLI application module."""

import typer
from rich.console import Console

from userstore.core.exceptions import EngineError
from userstore.runtime.init_db import init_db
from userstore.runtime.logging_setup import configure_logging

from .user_commands import users_app

console = Console()

app = typer.Typer(
    help="User record store CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(users_app, name="users")


@app.callback()
def setup() -> None:
    """Configure logging before any command runs."""
    configure_logging()


@app.command("init-db")
def init_db_command() -> None:
    """Create the users table and its unique indexes."""
    try:
        init_db()
    except EngineError as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print("[green]✅ Database initialized[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
