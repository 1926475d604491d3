"""Typer CLI root application with serve command."""

import typer

from place_resolver.core.config import get_settings
from place_resolver.core.logging import setup_logging

app = typer.Typer(name="place-resolver", help="Event location resolution CLI")


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level (shows rejected candidates)"),
) -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "place_resolver.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from place_resolver.cli.db_cmd import db_app
    from place_resolver.cli.locations_cmd import locations_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(locations_app, name="locations", help="Location resolution commands")


_register_subcommands()
