"""libcred CLI — Typer application."""

import typer
from rich.console import Console

from libcred.version import __version__

app = typer.Typer(
    name="libcred",
    help="libcred — org-scoped library credentials with encrypted secret fields.",
    no_args_is_help=True,
    invoke_without_command=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", is_eager=True, help="Show version"),
):
    """libcred CLI."""
    if version:
        console.print(f"libcred v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


from libcred.cli.commands import config, credentials, db, keys, serve  # noqa: E402

app.command(name="generate-key", help="Print a new Fernet key for LIBCRED_SECRET_ENCRYPTION_KEY")(keys.generate_key)
app.command(name="init-db", help="Create the library_credentials table")(db.init_database)
app.command(name="list", help="List library credentials of an org (secret presence only)")(credentials.list_credentials)
app.command(name="config", help="Show resolved configuration")(config.config_show)
app.command(name="serve", help="Run the API server")(serve.serve)


if __name__ == "__main__":
    app()
