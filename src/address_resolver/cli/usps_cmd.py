"""USPS CLI commands for address validation and ZIP lookup."""

import asyncio

import typer

from address_resolver.lib.geocoder import get_state_abbreviation
from address_resolver.lib.postal import (
    CredentialExchangeError,
    PostalNotConfiguredError,
    ValidationRequest,
    describe_outcome,
)

usps_app = typer.Typer()


@usps_app.command("validate")
def validate(
    street: str = typer.Option(..., "--street", help="Street address, e.g. '123 Main St'"),
    city: str = typer.Option(..., "--city", help="City"),
    state: str = typer.Option(..., "--state", help="State code or name"),
    zip_code: str = typer.Option(..., "--zip", help="5-digit ZIP or ZIP+4"),
    unit: str | None = typer.Option(None, "--unit", help="Apartment, suite, or unit"),
    deadline: float | None = typer.Option(None, "--deadline", help="Overall time budget in seconds"),
) -> None:
    """Validate and standardize an address with USPS."""
    request = ValidationRequest(
        street_address=street,
        secondary_address=unit,
        city=city,
        state=get_state_abbreviation(state),
        zip_code=zip_code,
    )
    asyncio.run(_validate(request, deadline))


@usps_app.command("zip")
def zip_lookup(
    zip_code: str = typer.Argument(..., help="5-digit ZIP code"),
    deadline: float | None = typer.Option(None, "--deadline", help="Overall time budget in seconds"),
) -> None:
    """Look up the city and state for a ZIP code."""
    asyncio.run(_zip_lookup(zip_code, deadline))


async def _validate(request: ValidationRequest, deadline: float | None) -> None:
    """Async implementation of address validation."""
    from address_resolver.services.address_service import get_address_service

    try:
        result = await get_address_service().validate_address(request, deadline=deadline)
    except PostalNotConfiguredError as e:
        typer.echo("USPS validation is not configured (set USPS_CLIENT_ID and USPS_CLIENT_SECRET).", err=True)
        raise typer.Exit(code=2) from e
    except CredentialExchangeError as e:
        typer.echo(f"Could not authenticate with USPS: {e.message}", err=True)
        raise typer.Exit(code=1) from e

    outcome = describe_outcome(result)
    typer.echo(f"[{outcome.severity.upper()}] {outcome.title}")
    typer.echo(f"  {outcome.message}")

    standardized = result.standardized_address
    if standardized is not None:
        zip_full = f"{standardized.zip5}-{standardized.zip4}" if standardized.zip4 else standardized.zip5
        typer.echo("\nStandardized address:")
        typer.echo(f"  {standardized.street_address}")
        if standardized.secondary_address:
            typer.echo(f"  {standardized.secondary_address}")
        typer.echo(f"  {standardized.city}, {standardized.state} {zip_full}")

    typer.echo(f"\nDPV confirmation: {result.confirmation_code.value or '-'}")
    typer.echo(f"DPV footnotes:    {result.footnotes or '-'}")
    typer.echo(f"Vacant: {'yes' if result.is_vacant else 'no'}  Business: {'yes' if result.is_business else 'no'}")

    if not result.is_valid:
        raise typer.Exit(code=1)


async def _zip_lookup(zip_code: str, deadline: float | None) -> None:
    """Async implementation of ZIP lookup."""
    from address_resolver.services.address_service import get_address_service

    try:
        city_state = await get_address_service().lookup_zip_code(zip_code, deadline=deadline)
    except PostalNotConfiguredError as e:
        typer.echo("USPS validation is not configured (set USPS_CLIENT_ID and USPS_CLIENT_SECRET).", err=True)
        raise typer.Exit(code=2) from e
    except CredentialExchangeError as e:
        typer.echo(f"Could not authenticate with USPS: {e.message}", err=True)
        raise typer.Exit(code=1) from e

    if city_state is None:
        typer.echo(f"ZIP code {zip_code} not found.")
        raise typer.Exit(code=1)
    typer.echo(f"{zip_code}: {city_state.city}, {city_state.state}")
