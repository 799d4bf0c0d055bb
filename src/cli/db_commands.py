"""Database CLI commands."""

import typer
from rich.prompt import Confirm
from rich.table import Table

from src.farmconnect.core.services.database.db_manage import DbManageService
from src.farmconnect.core.services.database.db_seed import DEMO_PASSWORD, seed_demo_data

from .utils import console, get_database_service

db_app = typer.Typer(help="🗄️  Database management commands")


@db_app.command("init")
def init() -> None:
    """Create all marketplace tables."""
    database = get_database_service()
    DbManageService(database.engine).create_all()
    console.print("[green]✅ Database tables created[/green]")


@db_app.command("reset")
def reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Drop and recreate every table."""
    if not force and not Confirm.ask("[red]Drop all tables and their data?[/red]"):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit(code=1)

    manager = DbManageService(get_database_service().engine)
    manager.drop_all()
    manager.create_all()
    console.print("[green]✅ Database reset[/green]")


@db_app.command("seed")
def seed(
    password: str = typer.Option(
        DEMO_PASSWORD, "--password", "-p", help="Password for every demo account"
    ),
) -> None:
    """Create demo farmers, a shopper and their products."""
    database = get_database_service()
    DbManageService(database.engine).create_all()

    with database.session_scope() as session:
        result = seed_demo_data(session, password=password)

    if not result.created_accounts:
        console.print("[yellow]Demo data already present; nothing to do[/yellow]")
        return

    table = Table(title="Demo accounts")
    table.add_column("Email", style="cyan")
    table.add_column("Password", style="green")
    for email in result.created_accounts:
        table.add_row(email, password)
    console.print(table)
    console.print(
        f"\n[green]Created {len(result.created_accounts)} accounts and "
        f"{result.created_products} products[/green]"
    )
