"""libcred init-db — Create database tables."""

import asyncio
import typer
from rich.console import Console

console = Console()


async def _init() -> None:
    from libcred.db.database import init_db, engine

    with console.status("[dim]Connecting to database...[/dim]"):
        await init_db()
    await engine.dispose()


def init_database():
    """Create the library_credentials table if it does not exist.

    Uses LIBCRED_DATABASE_URL (default: ./libcred.db via aiosqlite).
    """
    try:
        asyncio.run(_init())
    except Exception as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    console.print("[bold green]Database initialised.[/bold green]")
