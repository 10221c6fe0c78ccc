"""libcred serve — Start the API server."""

import typer
from rich.console import Console

from libcred.config import config

console = Console()


def serve(
    host: str = typer.Option(config.host, help="Host to bind to (LIBCRED_HOST)"),
    port: int = typer.Option(config.port, help="Port to listen on (LIBCRED_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Start the libcred API server."""
    import uvicorn
    console.print(f"[green]Starting libcred on {host}:{port}[/green]")
    uvicorn.run("libcred.api.main:app", host=host, port=port, reload=reload)
