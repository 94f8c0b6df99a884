"""Geocoder library — autocomplete, forward and reverse geocoding with failover.

Public API:
    - AddressSuggestion: Candidate address dataclass
    - ProviderRole: Primary/secondary backend enum
    - LookupResult / LookupStatus: Typed found/empty/failed outcome
    - BaseGeocoder: Abstract backend interface
    - NominatimGeocoder: OpenStreetMap Nominatim (primary)
    - LocationIQGeocoder: LocationIQ (secondary, requires API key)
    - HealthTracker: Per-backend failure counters and call order
    - GeocodingGateway: Failover orchestration across backends
    - get_configured_geocoders: Build the enabled, configured backends from settings
    - create_gateway: Build a gateway plus its health tracker from settings
    - get_state_abbreviation: State name to USPS code
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from address_resolver.lib.geocoder.base import (
    MIN_QUERY_LENGTH,
    AddressSuggestion,
    BaseGeocoder,
    GeocoderNotConfiguredError,
    GeocodingProviderError,
    LookupResult,
    LookupStatus,
    ProviderRole,
)
from address_resolver.lib.geocoder.gateway import GeocodingGateway
from address_resolver.lib.geocoder.health import HealthTracker, ProviderHealth, ProviderStatus
from address_resolver.lib.geocoder.locationiq import LocationIQGeocoder
from address_resolver.lib.geocoder.nominatim import NominatimGeocoder
from address_resolver.lib.geocoder.states import STATE_ABBREVIATIONS, get_state_abbreviation

if TYPE_CHECKING:
    from address_resolver.core.config import Settings


def get_configured_geocoders(settings: Settings) -> list[BaseGeocoder]:
    """Get geocoder instances for the backends that are enabled and configured.

    The primary (Nominatim) is included unless disabled. The secondary
    (LocationIQ) is included only when an API key is set.

    Args:
        settings: Application settings.

    Returns:
        Configured BaseGeocoder instances, primary first.
    """
    geocoders: list[BaseGeocoder] = []

    if settings.geocoder_nominatim_enabled:
        geocoders.append(
            NominatimGeocoder(
                timeout=settings.geocoder_nominatim_timeout,
                base_url=settings.geocoder_nominatim_base_url,
                user_agent=settings.geocoder_nominatim_user_agent,
                email=settings.geocoder_nominatim_email,
                viewbox=settings.geocoder_viewbox,
                country_code=settings.geocoder_country_code,
            )
        )

    locationiq = LocationIQGeocoder(
        api_key=settings.geocoder_locationiq_api_key or "",
        timeout=settings.geocoder_locationiq_timeout,
        base_url=settings.geocoder_locationiq_base_url,
        viewbox=settings.geocoder_viewbox,
        country_code=settings.geocoder_country_code,
        user_agent=settings.geocoder_nominatim_user_agent,
    )
    if locationiq.is_configured:
        geocoders.append(locationiq)

    return geocoders


def create_gateway(settings: Settings) -> GeocodingGateway:
    """Build a gateway over the configured backends with a fresh health tracker.

    Args:
        settings: Application settings.

    Returns:
        GeocodingGateway wired to its own HealthTracker.
    """
    geocoders = get_configured_geocoders(settings)
    roles = {g.role for g in geocoders}
    health = HealthTracker(
        secondary_configured=ProviderRole.SECONDARY in roles,
        primary_enabled=ProviderRole.PRIMARY in roles,
        failure_threshold=settings.geocoder_failure_threshold,
        reset_interval=settings.geocoder_failure_reset_seconds,
    )
    return GeocodingGateway(geocoders, health)


__all__ = [
    "MIN_QUERY_LENGTH",
    "STATE_ABBREVIATIONS",
    "AddressSuggestion",
    "BaseGeocoder",
    "GeocoderNotConfiguredError",
    "GeocodingGateway",
    "GeocodingProviderError",
    "HealthTracker",
    "LocationIQGeocoder",
    "LookupResult",
    "LookupStatus",
    "NominatimGeocoder",
    "ProviderHealth",
    "ProviderRole",
    "ProviderStatus",
    "create_gateway",
    "get_configured_geocoders",
    "get_state_abbreviation",
]
