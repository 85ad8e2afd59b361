"""Main CLI entry point using Typer."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from stock_service.config import PRODUCT_NAME, PRODUCT_TAGLINE, PRODUCT_VERSION, configure_logging, get_settings

console = Console()
app = typer.Typer(
    name="stock-service",
    help=f"{PRODUCT_NAME} - {PRODUCT_TAGLINE}",
    add_completion=False,
)


@app.callback()
def main_callback():
    """Configure logging for every command."""
    configure_logging(get_settings().log_level)


# Import and add subcommands
from stock_service.cli.holdings import app as holdings_app
from stock_service.cli.users import app as users_app

app.add_typer(holdings_app, name="holdings", help="Inspect portfolio holdings")
app.add_typer(users_app, name="users", help="User management")


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]{PRODUCT_NAME}[/] {PRODUCT_VERSION}")
    console.print(f"[bold]Tagline:[/] {PRODUCT_TAGLINE}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (defaults to HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Listen port (defaults to PORT)"),
):
    """Run the API server."""
    from stock_service.main import run

    settings = get_settings()
    run(host or settings.host, port or settings.port)


@app.command()
def readme(
    output: Path = typer.Option(Path("README.md"), "--output", "-o", help="Where to write the README"),
):
    """Generate README.md from the registered API routes."""
    from stock_service.api.app import create_app
    from stock_service.api.catalogue import write_readme

    path = write_readme(create_app(), output)
    console.print(f"[green]README written to {path}[/green]")


if __name__ == "__main__":
    app()
