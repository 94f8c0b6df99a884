"""Parsing for Nominatim-format place payloads.

Nominatim and LocationIQ both serve OpenStreetMap data in the same JSON
shape (``place_id``, ``lat``/``lon`` as strings, an ``address`` block of
OSM tags), so both adapters share this module.
"""

from typing import Any

from loguru import logger

from address_resolver.lib.geocoder.base import AddressSuggestion, GeocodingProviderError, ProviderRole

# OSM places a settlement under whichever of these tags matches its size
_CITY_KEYS = ("city", "town", "village")

DEFAULT_PLACE_TYPE = "place"


def format_street_address(address: dict[str, Any]) -> str:
    """Join house number and road, skipping whichever is missing."""
    parts = [address[key] for key in ("house_number", "road") if address.get(key)]
    return " ".join(parts)


def city_from_address(address: dict[str, Any]) -> str:
    """Return the first of city/town/village present, or an empty string."""
    for key in _CITY_KEYS:
        if address.get(key):
            return address[key]
    return ""


def in_country(place: dict[str, Any], country_code: str) -> bool:
    """Whether a place's ``address.country_code`` matches ``country_code``."""
    address = place.get("address") or {}
    return str(address.get("country_code", "")).lower() == country_code


def parse_place(
    place: dict[str, Any],
    *,
    provider_name: str,
    role: ProviderRole,
    id_prefix: str,
) -> AddressSuggestion:
    """Convert one Nominatim-format place into an AddressSuggestion.

    Args:
        place: A single result object from the backend.
        provider_name: Backend name, used in error messages.
        role: Primary or secondary, stamped on the suggestion.
        id_prefix: Prefix that keeps ids from the two backends apart.

    Returns:
        The parsed suggestion.

    Raises:
        GeocodingProviderError: If coordinates are missing or malformed.
    """
    try:
        lat = float(place["lat"])
        lon = float(place["lon"])
        suggestion_id = f"{id_prefix}_{place['place_id']}"
        address = place.get("address") or {}
        return AddressSuggestion(
            id=suggestion_id,
            display_name=place.get("display_name") or "",
            street_address=format_street_address(address),
            city=city_from_address(address),
            state=address.get("state") or "",
            zip=address.get("postcode") or "",
            latitude=lat,
            longitude=lon,
            place_type=place.get("type") or DEFAULT_PLACE_TYPE,
            provider=role,
        )
    except (KeyError, ValueError, TypeError) as e:
        logger.warning(f"Failed to parse {provider_name} place: {e}")
        raise GeocodingProviderError(provider_name, f"Failed to parse response: {e}") from e


def parse_places(
    data: Any,
    *,
    provider_name: str,
    role: ProviderRole,
    id_prefix: str,
    country_code: str,
) -> list[AddressSuggestion]:
    """Parse a search/autocomplete result list, keeping only ``country_code`` places.

    Raises:
        GeocodingProviderError: If the payload is not a list or a kept place is malformed.
    """
    if not isinstance(data, list):
        raise GeocodingProviderError(provider_name, "Expected a JSON array of places")
    return [
        parse_place(place, provider_name=provider_name, role=role, id_prefix=id_prefix)
        for place in data
        if isinstance(place, dict) and in_country(place, country_code)
    ]


def parse_reverse(
    data: Any,
    *,
    provider_name: str,
    role: ProviderRole,
    id_prefix: str,
) -> AddressSuggestion | None:
    """Parse a reverse-geocode payload.

    Returns:
        The suggestion, or None when the backend reported no place at the point.

    Raises:
        GeocodingProviderError: If the place lacks its address block or coordinates.
    """
    if not data:
        return None
    if not isinstance(data, dict):
        raise GeocodingProviderError(provider_name, "Expected a JSON object")
    if "error" in data:
        # Nominatim answers 200 {"error": "Unable to geocode"} over open water etc.
        logger.debug(f"{provider_name} reverse geocode returned no place: {data['error']}")
        return None
    if not data.get("address"):
        raise GeocodingProviderError(provider_name, "Response is missing address details")
    return parse_place(data, provider_name=provider_name, role=role, id_prefix=id_prefix)
