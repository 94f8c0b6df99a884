"""OpenStreetMap Nominatim geocoder provider.

Uses the Nominatim API (https://nominatim.org/release-docs/develop/api/Search/)
for autocomplete, forward and reverse geocoding. Free and keyless, but the
public server requires an identifying User-Agent and allows 1 req/sec.
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

DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org"


class NominatimGeocoder(BaseGeocoder):
    """OpenStreetMap Nominatim geocoder provider (primary backend)."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        email: str = "",
        viewbox: str = DEFAULT_VIEWBOX,
        country_code: str = "us",
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        self._base_url = base_url.rstrip("/")
        self._email = email
        self._viewbox = viewbox
        self._country_code = country_code.lower()

    @property
    def provider_name(self) -> str:
        return "nominatim"

    @property
    def role(self) -> ProviderRole:
        return ProviderRole.PRIMARY

    @property
    def rate_limit_delay(self) -> float:
        return 1.0

    def _params(self, **params: Any) -> dict[str, Any]:
        params.update(format="json", addressdetails=1)
        if self._email:
            params["email"] = self._email
        return params

    def _parse_places(self, data: Any) -> list[AddressSuggestion]:
        return parse_places(
            data,
            provider_name=self.provider_name,
            role=self.role,
            id_prefix="nom",
            country_code=self._country_code,
        )

    async def _search(self, query: str, limit: int) -> list[AddressSuggestion]:
        params = self._params(
            q=query,
            countrycodes=self._country_code,
            limit=limit,
            viewbox=self._viewbox,
            bounded=0,
        )
        data = await self._get_json(f"{self._base_url}/search", params)
        return self._parse_places(data)

    async def _forward(self, address: str) -> AddressSuggestion | None:
        params = self._params(q=address, countrycodes=self._country_code, limit=1)
        data = await self._get_json(f"{self._base_url}/search", params)
        places = self._parse_places(data)
        return places[0] if places else None

    async def _reverse(self, latitude: float, longitude: float) -> AddressSuggestion | None:
        params = self._params(lat=latitude, lon=longitude)
        data = await self._get_json(f"{self._base_url}/reverse", params)
        return parse_reverse(data, provider_name=self.provider_name, role=self.role, id_prefix="nom")
