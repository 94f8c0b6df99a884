"""Pydantic v2 schemas for address resolution and validation endpoints."""

from pydantic import BaseModel, Field


class AddressSuggestionResponse(BaseModel):
    """A candidate address from a geocoding backend."""

    model_config = {"from_attributes": True}

    id: str
    display_name: str
    street_address: str
    city: str
    state: str
    zip: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    place_type: str
    provider: str


class AddressValidationRequest(BaseModel):
    """Structured address to validate with USPS."""

    street_address: str = Field(..., min_length=1, max_length=200)
    secondary_address: str | None = Field(default=None, max_length=100, description="Apartment, suite, or unit")
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=2, max_length=50, description="Two-letter code or full state name")
    zip_code: str = Field(..., pattern=r"^\d{5}(-?\d{4})?$", description="5-digit ZIP or ZIP+4")


class StandardizedAddressResponse(BaseModel):
    """Address as standardized by USPS."""

    model_config = {"from_attributes": True}

    street_address: str
    secondary_address: str | None = None
    city: str
    state: str
    zip5: str
    zip4: str | None = None


class OutcomeResponse(BaseModel):
    """User-facing summary of a validation result."""

    model_config = {"from_attributes": True}

    severity: str
    title: str
    message: str


class AddressValidationResponse(BaseModel):
    """Classified USPS validation result."""

    is_valid: bool
    needs_secondary_address: bool
    secondary_address_invalid: bool
    standardized_address: StandardizedAddressResponse | None = None
    confirmation_code: str
    footnotes: str
    is_vacant: bool
    is_business: bool
    error: str | None = None
    outcome: OutcomeResponse


class CityStateResponse(BaseModel):
    """City and state for a ZIP code."""

    model_config = {"from_attributes": True}

    zip_code: str
    city: str
    state: str


class ProviderStatusResponse(BaseModel):
    """Health of one geocoding backend."""

    model_config = {"from_attributes": True}

    role: str
    provider_name: str | None = None
    failure_count: int
    healthy: bool
    configured: bool


class ProviderStatusListResponse(BaseModel):
    """Health of both geocoding backends plus postal configuration."""

    providers: list[ProviderStatusResponse]
    usps_configured: bool
