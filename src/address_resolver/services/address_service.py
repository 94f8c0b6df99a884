"""Address service — the inbound interface for geocoding and postal validation.

Wraps one :class:`GeocodingGateway` and one :class:`USPSClient`. The
process-wide instance from :func:`get_address_service` shares a single health
tracker and a single credential cache across all requests.
"""

from functools import lru_cache

from address_resolver.core.config import Settings, get_settings
from address_resolver.lib.geocoder import (
    MIN_QUERY_LENGTH,
    AddressSuggestion,
    GeocodingGateway,
    ProviderRole,
    ProviderStatus,
    create_gateway,
)
from address_resolver.lib.postal import (
    CityState,
    CredentialCache,
    USPSClient,
    ValidationRequest,
    ValidationResult,
    create_usps_client,
)


class AddressService:
    """Geocoding with failover plus USPS validation.

    Args:
        gateway: Geocoding gateway with its health tracker.
        usps: Postal validation client with its credential cache.
    """

    def __init__(self, gateway: GeocodingGateway, usps: USPSClient) -> None:
        self._gateway = gateway
        self._usps = usps

    @property
    def gateway(self) -> GeocodingGateway:
        return self._gateway

    @property
    def usps(self) -> USPSClient:
        return self._usps

    async def search_addresses(
        self,
        text: str,
        limit: int = 5,
        deadline: float | None = None,
    ) -> list[AddressSuggestion]:
        """Autocomplete free text into candidate addresses.

        Queries shorter than three characters return an empty list without
        touching any backend.
        """
        if len(text.strip()) < MIN_QUERY_LENGTH:
            return []
        return await self._gateway.autocomplete(text, limit, deadline=deadline)

    async def geocode_address(self, text: str, deadline: float | None = None) -> AddressSuggestion | None:
        if len(text.strip()) < MIN_QUERY_LENGTH:
            return None
        return await self._gateway.forward_geocode(text, deadline=deadline)

    async def reverse_geocode(
        self,
        latitude: float,
        longitude: float,
        deadline: float | None = None,
    ) -> AddressSuggestion | None:
        return await self._gateway.reverse_geocode(latitude, longitude, deadline=deadline)

    async def validate_address(self, request: ValidationRequest, deadline: float | None = None) -> ValidationResult:
        """Validate a structured address with USPS.

        A spent deadline is reported through the result's ``error``.

        Raises:
            PostalNotConfiguredError: If USPS credentials are missing; callers
                should check :meth:`is_usps_configured` and skip validation.
            CredentialExchangeError: If a USPS token could not be obtained.
        """
        return await self._usps.validate(request, deadline=deadline)

    async def lookup_zip_code(self, zip_code: str, deadline: float | None = None) -> CityState | None:
        return await self._usps.lookup_city_state(zip_code, deadline=deadline)

    def is_usps_configured(self) -> bool:
        return self._usps.is_configured

    def is_secondary_configured(self) -> bool:
        return self._gateway.health.is_configured(ProviderRole.SECONDARY)

    def get_provider_status(self) -> list[ProviderStatus]:
        return self._gateway.provider_status()


def create_address_service(settings: Settings, credentials: CredentialCache | None = None) -> AddressService:
    """Wire an AddressService from settings.

    Args:
        settings: Application settings.
        credentials: Credential cache to share; a new one is created when omitted.

    Returns:
        AddressService with its own health tracker.
    """
    return AddressService(
        gateway=create_gateway(settings),
        usps=create_usps_client(settings, credentials),
    )


@lru_cache
def get_address_service() -> AddressService:
    """Return the process-wide AddressService."""
    return create_address_service(get_settings())
