"""Address API endpoints — autocomplete, geocode, reverse geocode, USPS validation, ZIP lookup."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from address_resolver.lib.geocoder import GeocoderNotConfiguredError, get_state_abbreviation
from address_resolver.lib.postal import (
    CredentialExchangeError,
    PostalNotConfiguredError,
    ValidationRequest,
    describe_outcome,
)
from address_resolver.schemas.address import (
    AddressSuggestionResponse,
    AddressValidationRequest,
    AddressValidationResponse,
    CityStateResponse,
    OutcomeResponse,
    ProviderStatusListResponse,
    ProviderStatusResponse,
    StandardizedAddressResponse,
)
from address_resolver.services.address_service import AddressService, get_address_service

addresses_router = APIRouter(prefix="/addresses", tags=["addresses"])

_GEOCODER_UNAVAILABLE = "No geocoding provider is configured."
_USPS_UNAVAILABLE = "Address validation is not configured."


@addresses_router.get("/search", response_model=list[AddressSuggestionResponse])
async def search_addresses(
    q: str = Query(..., max_length=500, description="Partial address typed by the user"),  # noqa: B008
    limit: int = Query(5, ge=1, le=20, description="Maximum suggestions"),  # noqa: B008
    service: AddressService = Depends(get_address_service),  # noqa: B008
) -> list[AddressSuggestionResponse]:
    """Autocomplete a partial address. Queries under three characters return an empty list."""
    try:
        suggestions = await service.search_addresses(q, limit)
    except GeocoderNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=_GEOCODER_UNAVAILABLE) from e
    return [AddressSuggestionResponse.model_validate(s) for s in suggestions]


@addresses_router.get("/geocode", response_model=AddressSuggestionResponse)
async def geocode_address(
    address: str = Query(..., min_length=1, max_length=500, description="Full address to geocode"),  # noqa: B008
    service: AddressService = Depends(get_address_service),  # noqa: B008
) -> AddressSuggestionResponse:
    """Geocode a full address to its best match."""
    try:
        suggestion = await service.geocode_address(address)
    except GeocoderNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=_GEOCODER_UNAVAILABLE) from e

    if suggestion is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Address could not be geocoded.",
        )
    return AddressSuggestionResponse.model_validate(suggestion)


@addresses_router.get("/reverse", response_model=AddressSuggestionResponse)
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90, description="Latitude (WGS84)"),  # noqa: B008
    lon: float = Query(..., ge=-180, le=180, description="Longitude (WGS84)"),  # noqa: B008
    service: AddressService = Depends(get_address_service),  # noqa: B008
) -> AddressSuggestionResponse:
    """Reverse geocode a coordinate pair to an address."""
    try:
        suggestion = await service.reverse_geocode(lat, lon)
    except GeocoderNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=_GEOCODER_UNAVAILABLE) from e

    if suggestion is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No address found at these coordinates.",
        )
    return AddressSuggestionResponse.model_validate(suggestion)


@addresses_router.post("/validate", response_model=AddressValidationResponse)
async def validate_address(
    body: AddressValidationRequest,
    service: AddressService = Depends(get_address_service),  # noqa: B008
) -> AddressValidationResponse:
    """Validate and standardize an address with USPS.

    Not-found, missing-unit, invalid-unit and vacant are returned as 200
    responses; only configuration and credential problems are errors.
    """
    request = ValidationRequest(
        street_address=body.street_address,
        secondary_address=body.secondary_address,
        city=body.city,
        state=get_state_abbreviation(body.state),
        zip_code=body.zip_code,
    )
    try:
        result = await service.validate_address(request)
    except PostalNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=_USPS_UNAVAILABLE) from e
    except CredentialExchangeError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Address validation provider is temporarily unavailable. Please retry later.",
        ) from e

    standardized = (
        StandardizedAddressResponse.model_validate(result.standardized_address)
        if result.standardized_address is not None
        else None
    )
    return AddressValidationResponse(
        is_valid=result.is_valid,
        needs_secondary_address=result.needs_secondary_address,
        secondary_address_invalid=result.secondary_address_invalid,
        standardized_address=standardized,
        confirmation_code=result.confirmation_code.value,
        footnotes=result.footnotes,
        is_vacant=result.is_vacant,
        is_business=result.is_business,
        error=result.error,
        outcome=OutcomeResponse.model_validate(describe_outcome(result)),
    )


@addresses_router.get("/zip/{zip_code}", response_model=CityStateResponse)
async def lookup_zip_code(
    zip_code: str,
    service: AddressService = Depends(get_address_service),  # noqa: B008
) -> CityStateResponse:
    """Look up the city and state for a ZIP code."""
    try:
        city_state = await service.lookup_zip_code(zip_code)
    except PostalNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=_USPS_UNAVAILABLE) from e
    except CredentialExchangeError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="ZIP lookup provider is temporarily unavailable. Please retry later.",
        ) from e

    if city_state is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"ZIP code {zip_code!r} not found.")
    return CityStateResponse(zip_code=zip_code, city=city_state.city, state=city_state.state)


@addresses_router.get("/providers", response_model=ProviderStatusListResponse)
async def provider_status(
    service: AddressService = Depends(get_address_service),  # noqa: B008
) -> ProviderStatusListResponse:
    """Report geocoding backend health and whether USPS validation is configured."""
    return ProviderStatusListResponse(
        providers=[ProviderStatusResponse.model_validate(s) for s in service.get_provider_status()],
        usps_configured=service.is_usps_configured(),
    )
