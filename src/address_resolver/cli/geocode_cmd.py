"""Geocoding CLI commands for autocomplete, forward and reverse lookups."""

import asyncio

import typer

from address_resolver.lib.geocoder import AddressSuggestion, GeocoderNotConfiguredError

geocode_app = typer.Typer()


def _echo_suggestion(suggestion: AddressSuggestion) -> None:
    typer.echo(suggestion.display_name)
    typer.echo(f"  Street:    {suggestion.street_address or '-'}")
    typer.echo(f"  City:      {suggestion.city or '-'}")
    typer.echo(f"  State:     {suggestion.state or '-'}")
    typer.echo(f"  ZIP:       {suggestion.zip or '-'}")
    typer.echo(f"  Location:  {suggestion.latitude:.6f}, {suggestion.longitude:.6f}")
    typer.echo(f"  Type:      {suggestion.place_type}  (via {suggestion.provider})")


@geocode_app.command("search")
def search(
    query: str = typer.Argument(..., help="Partial address to autocomplete"),
    limit: int = typer.Option(5, "--limit", min=1, max=20, help="Maximum suggestions"),
    deadline: float | None = typer.Option(None, "--deadline", help="Overall time budget in seconds"),
) -> None:
    """Autocomplete a partial address."""
    asyncio.run(_search(query, limit, deadline))


@geocode_app.command("forward")
def forward(
    address: str = typer.Argument(..., help="Full address to geocode"),
    deadline: float | None = typer.Option(None, "--deadline", help="Overall time budget in seconds"),
) -> None:
    """Geocode a full address to coordinates."""
    asyncio.run(_forward(address, deadline))


@geocode_app.command("reverse")
def reverse(
    lat: float = typer.Option(..., "--lat", min=-90, max=90, help="Latitude"),
    lon: float = typer.Option(..., "--lon", min=-180, max=180, help="Longitude"),
    deadline: float | None = typer.Option(None, "--deadline", help="Overall time budget in seconds"),
) -> None:
    """Reverse geocode coordinates to an address."""
    asyncio.run(_reverse(lat, lon, deadline))


@geocode_app.command("providers")
def providers() -> None:
    """Show geocoding backend configuration and health."""
    from address_resolver.services.address_service import get_address_service

    service = get_address_service()
    for status in service.get_provider_status():
        name = status.provider_name or "-"
        state = "healthy" if status.healthy else "degraded"
        configured = "configured" if status.configured else "not configured"
        typer.echo(f"{status.role:<10} {name:<12} {configured:<15} {state} (failures: {status.failure_count})")
    typer.echo(f"usps       {'configured' if service.is_usps_configured() else 'not configured'}")


async def _search(query: str, limit: int, deadline: float | None) -> None:
    """Async implementation of autocomplete."""
    from address_resolver.services.address_service import get_address_service

    try:
        suggestions = await get_address_service().search_addresses(query, limit, deadline=deadline)
    except GeocoderNotConfiguredError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2) from e

    if not suggestions:
        typer.echo("No suggestions found.")
        return
    for suggestion in suggestions:
        _echo_suggestion(suggestion)


async def _forward(address: str, deadline: float | None) -> None:
    """Async implementation of forward geocoding."""
    from address_resolver.services.address_service import get_address_service

    try:
        suggestion = await get_address_service().geocode_address(address, deadline=deadline)
    except GeocoderNotConfiguredError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2) from e

    if suggestion is None:
        typer.echo("Address could not be geocoded.")
        raise typer.Exit(code=1)
    _echo_suggestion(suggestion)


async def _reverse(lat: float, lon: float, deadline: float | None) -> None:
    """Async implementation of reverse geocoding."""
    from address_resolver.services.address_service import get_address_service

    try:
        suggestion = await get_address_service().reverse_geocode(lat, lon, deadline=deadline)
    except GeocoderNotConfiguredError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2) from e

    if suggestion is None:
        typer.echo("No address found at these coordinates.")
        raise typer.Exit(code=1)
    _echo_suggestion(suggestion)
