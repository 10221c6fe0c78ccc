"""libcred list — Show the library credentials of an org."""

import asyncio
import typer
from rich.console import Console
from rich.table import Table
from rich import box

console = Console()


async def _list(org_id: int):
    from libcred.config import config
    from libcred.credentials.encryption import FernetSecretStore
    from libcred.credentials.service import LibraryCredentialService
    from libcred.db.database import async_session, engine
    from libcred.db.repository import Repository

    async with async_session() as session:
        service = LibraryCredentialService(
            Repository(session),
            FernetSecretStore(key=config.secret_encryption_key),
        )
        views = await service.list_credentials(org_id)
    await engine.dispose()
    return views


def list_credentials(
    org: int = typer.Option(1, "--org", help="Org id"),
):
    """List credentials with their secret fields shown as set/unset only."""
    try:
        views = asyncio.run(_list(org))
    except Exception as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    if not views:
        console.print(f"[dim]No library credentials in org {org}.[/dim]")
        return

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title=f"[bold]{len(views)} Library Credentials[/bold] [dim](org {org})[/dim]",
    )
    table.add_column("ID", justify="right", width=6)
    table.add_column("UID", style="cyan", width=12)
    table.add_column("Name", width=24)
    table.add_column("Type", width=16)
    table.add_column("Secret fields", width=30)
    table.add_column("RO", width=4)

    for v in views:
        table.add_row(
            str(v.id),
            v.uid,
            v.name,
            v.type,
            f"[dim]{', '.join(sorted(v.secure_json_fields)) or '-'}[/dim]",
            "yes" if v.read_only else "",
        )
    console.print(table)
