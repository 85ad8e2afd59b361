"""User management CLI commands."""

import typer
from rich.console import Console
from rich.table import Table

from stock_service.cli.common import cli_db
from stock_service.config import get_settings
from stock_service.core.auth import (
    AuthService,
    Registration,
    RegistrationError,
    TokenConfigError,
)
from stock_service.core.users import UserRepository

app = typer.Typer()
console = Console()


@app.command("register")
def register(
    email: str = typer.Argument(..., help="User email address"),
    first_name: str = typer.Option(..., "--first-name", prompt=True, help="First name"),
    last_name: str = typer.Option(..., "--last-name", prompt=True, help="Last name"),
    timezone: str = typer.Option("", "--timezone", help="IANA timezone, e.g. America/New_York"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True, help="User password"
    ),
):
    """Register a new user."""
    form = Registration(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        password2=password,
        timezone=timezone,
    )
    with cli_db() as db:
        auth = AuthService(db, get_settings())
        try:
            user, tokens = auth.register(form)
        except (RegistrationError, TokenConfigError) as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

        console.print("[green]User registered successfully![/green]")
        console.print(f"  Email: {user.email}")
        console.print(f"  ID: {user.id}")
        console.print("\n[yellow]Access Token (for API):[/yellow]")
        console.print(f"  {tokens.access_token}")


@app.command("list")
def list_users():
    """List all users."""
    with cli_db() as db:
        users = UserRepository(db).get_all()

        if not users:
            console.print("[yellow]No users found.[/yellow]")
            return

        table = Table(title="Users")
        table.add_column("ID", style="dim")
        table.add_column("Name")
        table.add_column("Email")
        table.add_column("Timezone")
        table.add_column("Created")

        for user in users:
            table.add_row(
                user.id[:8] + "...",
                f"{user.first_name} {user.last_name}",
                user.email,
                user.timezone or "-",
                user.date.strftime("%Y-%m-%d %H:%M") if user.date else "-",
            )

        console.print(table)
