"""CLI commands using Typer."""

import typer

from userharness.cli.accounts import app as accounts_app
from userharness.logging import setup_logging

app = typer.Typer(name="userharness", help="User-management test harness CLI")

# Register sub-apps
app.add_typer(accounts_app, name="accounts")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Inspect and shortcut account state in a user-management test database."""
    level = "DEBUG" if verbose else None
    setup_logging(level)
    ctx.obj = {"log_level": level}


@app.command()
def version():
    """Show version information."""
    from userharness import __version__

    typer.echo(f"userharness v{__version__}")


@app.command()
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
    log_level: str | None = typer.Option(None, help="Harness log level, defaults to LOG_LEVEL"),
):
    """Run the harness API server."""
    import uvicorn

    from userharness.logging import get_uvicorn_log_config

    level = log_level or (ctx.obj or {}).get("log_level")
    uvicorn.run(
        "userharness.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=get_uvicorn_log_config(level),
    )


if __name__ == "__main__":
    app()
