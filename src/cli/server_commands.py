"""Development server command."""

import typer
import uvicorn

from src.farmconnect.runtime.context import get_config

from .utils import console


def serve(
    host: str | None = typer.Option(None, help="Host to bind; defaults to app.host"),
    port: int | None = typer.Option(None, help="Port to bind; defaults to app.port"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """🚀 Start the API server."""
    config = get_config().app
    bind_host = host or config.host
    bind_port = port or config.port
    console.print(f"[bold green]Starting FarmConnect API on {bind_host}:{bind_port}[/bold green]")
    uvicorn.run(
        "src.farmconnect.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,
    )
