"""Market price CLI commands."""

import asyncio

import typer
from rich.table import Table

from src.farmconnect.core.services.database.db_manage import DbManageService
from src.farmconnect.core.services.market import (
    MarketPriceService,
    MarketSnapshot,
    build_provider,
)
from src.farmconnect.runtime.context import get_config

from .utils import console, get_database_service

market_app = typer.Typer(help="📈 Commodity market price commands")


def _price_table(title: str, rows: list[dict]) -> Table:
    table = Table(title=title)
    table.add_column("Commodity", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Market")
    table.add_column("Unit")
    table.add_column("Modal ₹", justify="right", style="green")
    table.add_column("Min ₹", justify="right")
    table.add_column("Max ₹", justify="right")
    table.add_column("Change %", justify="right")

    for row in rows:
        change = row.get("price_change_percentage")
        if change is None:
            change_cell = "-"
        else:
            colour = "green" if change >= 0 else "red"
            change_cell = f"[{colour}]{change:+.2f}[/{colour}]"
        table.add_row(
            str(row.get("commodity_name", "")),
            str(row.get("category", "")),
            str(row.get("market", "")),
            str(row.get("unit", "")),
            f"{row['modal_price']:.2f}",
            "-" if row.get("min_price") is None else f"{row['min_price']:.2f}",
            "-" if row.get("max_price") is None else f"{row['max_price']:.2f}",
            change_cell,
        )
    return table


@market_app.command("refresh")
def refresh() -> None:
    """Run the market price chain once and print what it returned."""
    config = get_config().market_prices
    database = get_database_service()
    DbManageService(database.engine).create_all()
    service = MarketPriceService(build_provider(config), config)

    with database.session_scope() as session:
        snapshot: MarketSnapshot = asyncio.run(service.get_prices(session))

    console.print(_price_table(f"Market prices ({snapshot.source})", snapshot.data))
    console.print(
        f"\nUpdated at {snapshot.updated_at:%Y-%m-%d %H:%M:%S} "
        f"{'[yellow](cached)[/yellow]' if snapshot.is_cached else '[green](live)[/green]'}"
    )


@market_app.command("show")
def show(
    limit: int = typer.Option(20, "--limit", "-l", help="Rows to show"),
) -> None:
    """Show the most recently stored price rows."""
    config = get_config().market_prices
    database = get_database_service()
    service = MarketPriceService(build_provider(config), config)

    with database.session_scope() as session:
        rows = [item.model_dump() for item in service.stored(session, limit)]

    if not rows:
        console.print("[yellow]No stored market prices; run 'farmconnect market refresh'[/yellow]")
        return
    console.print(_price_table("Stored market prices", rows))
