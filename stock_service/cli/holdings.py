"""Holdings CLI commands."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from stock_service.cli.common import cli_db
from stock_service.core.portfolio import HoldingRepository, SummaryError, holdings_from_records, summarize_holdings

console = Console()
app = typer.Typer()


@app.command("list")
def list_holdings(
    ticker: Optional[str] = typer.Option(None, "--ticker", "-t", help="Exact ticker to filter on"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Account substring to filter on"),
):
    """List holdings with their summary."""
    if ticker and account:
        console.print("[red]Error:[/red] Use either --ticker or --account, not both")
        raise typer.Exit(1)

    with cli_db() as db:
        repo = HoldingRepository(db)
        if ticker:
            records = repo.get_by_ticker(ticker)
        elif account:
            records = repo.get_by_account(account)
        else:
            records = repo.get_all()
        holdings = holdings_from_records(records)

    if not holdings:
        console.print("[yellow]No holdings found.[/yellow]")
        return

    table = Table(title="Holdings")
    table.add_column("ID", style="dim")
    table.add_column("Ticker", style="bold")
    table.add_column("Quantity", justify="right")
    table.add_column("Total Cost", justify="right")
    table.add_column("Account")

    for holding in holdings:
        table.add_row(
            holding.id[:8] + "...",
            holding.ticker,
            f"{holding.quantity:g}",
            f"${holding.total_cost:,.2f}",
            holding.account or "-",
        )

    console.print(table)

    try:
        summary = summarize_holdings(holdings)
    except SummaryError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"\n[bold]Found:[/bold] {summary.found}")
    console.print(f"[bold]Total Cost:[/bold] ${summary.total_cost:,.2f}")
