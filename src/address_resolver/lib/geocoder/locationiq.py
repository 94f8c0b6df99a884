"""LocationIQ geocoder provider.

Uses the LocationIQ API (https://docs.locationiq.com/) as the failover
backend. It serves the same OpenStreetMap data in Nominatim's response
shape, adds a dedicated autocomplete endpoint, and requires an access token.
Free tier allows 2 req/sec.
"""

from typing import Any

from address_resolver.lib.geocoder.base import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    DEFAULT_VIEWBOX,
    AddressSuggestion,
    BaseGeocoder,
    ProviderRole,
)
from address_resolver.lib.geocoder.osm import parse_places, parse_reverse

DEFAULT_BASE_URL = "https://us1.locationiq.com/v1"


class LocationIQGeocoder(BaseGeocoder):
    """LocationIQ geocoder provider (secondary backend)."""

    # LocationIQ answers 404 {"error": "Unable to geocode"} when nothing matches
    empty_status_codes = frozenset({404})

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = DEFAULT_BASE_URL,
        viewbox: str = DEFAULT_VIEWBOX,
        country_code: str = "us",
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._viewbox = viewbox
        self._country_code = country_code.lower()

    @property
    def provider_name(self) -> str:
        return "locationiq"

    @property
    def role(self) -> ProviderRole:
        return ProviderRole.SECONDARY

    @property
    def requires_api_key(self) -> bool:
        return True

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def rate_limit_delay(self) -> float:
        return 0.5

    def _params(self, **params: Any) -> dict[str, Any]:
        params.update(key=self._api_key, format="json", addressdetails=1)
        return params

    def _parse_places(self, data: Any) -> list[AddressSuggestion]:
        if data is None:
            return []
        return parse_places(
            data,
            provider_name=self.provider_name,
            role=self.role,
            id_prefix="liq",
            country_code=self._country_code,
        )

    async def _search(self, query: str, limit: int) -> list[AddressSuggestion]:
        params = self._params(
            q=query,
            countrycodes=self._country_code,
            limit=limit,
            viewbox=self._viewbox,
            bounded=0,
            normalizeaddress=1,
        )
        data = await self._get_json(f"{self._base_url}/autocomplete", params)
        return self._parse_places(data)

    async def _forward(self, address: str) -> AddressSuggestion | None:
        params = self._params(q=address, countrycodes=self._country_code, limit=1)
        data = await self._get_json(f"{self._base_url}/search", params)
        places = self._parse_places(data)
        return places[0] if places else None

    async def _reverse(self, latitude: float, longitude: float) -> AddressSuggestion | None:
        params = self._params(lat=latitude, lon=longitude)
        data = await self._get_json(f"{self._base_url}/reverse", params)
        return parse_reverse(data, provider_name=self.provider_name, role=self.role, id_prefix="liq")
