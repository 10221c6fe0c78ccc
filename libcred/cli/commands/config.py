"""libcred config — Show resolved libcred configuration."""

from rich.console import Console
from rich.table import Table
from rich import box

console = Console()


def config_show():
    """Show the resolved configuration.

    Reads from environment variables and .env file.
    The encryption key is masked.
    """
    from libcred.config import LibcredConfig
    cfg = LibcredConfig()

    def mask(val: str) -> str:
        s = str(val)
        if len(s) <= 8:
            return "***"
        return s[:4] + "…" + "***"

    sensitive = {"secret_encryption_key"}

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title="[bold]libcred Configuration[/bold]",
    )
    table.add_column("Key", style="cyan", width=28)
    table.add_column("Value", width=45)
    table.add_column("Env Var", style="dim", width=36)

    sections = [
        ("App", ["debug", "log_level"]),
        ("Database", ["database_url"]),
        ("Secrets", ["secret_encryption_key"]),
        ("Credentials", [
            "uid_generation_retries", "uid_length", "default_org_id", "enforce_read_only_delete",
        ]),
        ("Server", ["host", "port", "cors_origins"]),
    ]

    first = True
    for section_name, fields in sections:
        if not first:
            table.add_row("", "", "")
        first = False
        table.add_row(f"[bold dim]── {section_name} ──[/bold dim]", "", "")
        for attr in fields:
            val = getattr(cfg, attr, None)
            if val is None or val == "":
                display = "[dim](not set)[/dim]"
            elif attr in sensitive:
                display = mask(str(val))
            else:
                display = str(val)
            table.add_row(f"  {attr}", display, f"LIBCRED_{attr.upper()}")

    console.print()
    console.print(table)
    console.print()
    console.print("[dim]Source: environment variables + .env file (prefix: LIBCRED_)[/dim]")
