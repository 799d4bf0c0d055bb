"""Shared helpers for CLI commands."""

from rich.console import Console

from src.farmconnect.core.services.database.db_session import DbSessionService

console = Console()


def get_database_service() -> DbSessionService:
    return DbSessionService()
