"""Typer CLI root application with serve command."""

import typer

from address_resolver.core.config import get_settings
from address_resolver.core.logging import setup_logging

app = typer.Typer(name="address-resolver", help="Address geocoding and USPS validation CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("127.0.0.1", "--host", help="Bind host"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "address_resolver.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from address_resolver.cli.geocode_cmd import geocode_app
    from address_resolver.cli.usps_cmd import usps_app

    app.add_typer(geocode_app, name="geocode", help="Autocomplete and geocoding commands")
    app.add_typer(usps_app, name="usps", help="USPS address validation commands")


_register_subcommands()
