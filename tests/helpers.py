"""Test helpers: HTTP response fakes, suggestion factory, and a fake geocoding backend."""

import json
from typing import Any

import httpx

from address_resolver.lib.geocoder.base import (
    AddressSuggestion,
    BaseGeocoder,
    GeocodingProviderError,
    ProviderRole,
)


def make_response(status_code: int = 200, json_data: Any = None, *, text: str = "") -> httpx.Response:
    """Build a real httpx.Response with a bound request."""
    if json_data is not None:
        content = json.dumps(json_data).encode()
        headers = {"content-type": "application/json"}
    else:
        content = text.encode()
        headers = {"content-type": "text/plain"}
    return httpx.Response(
        status_code=status_code,
        content=content,
        headers=headers,
        request=httpx.Request("GET", "http://test"),
    )


def make_suggestion(
    provider: ProviderRole = ProviderRole.PRIMARY,
    suggestion_id: str = "nom_1",
    city: str = "Kansas City",
) -> AddressSuggestion:
    return AddressSuggestion(
        id=suggestion_id,
        display_name=f"1200 Main St, {city}, Missouri, 64105, United States",
        street_address="1200 Main St",
        city=city,
        state="Missouri",
        zip="64105",
        latitude=39.0997,
        longitude=-94.5786,
        place_type="house",
        provider=provider,
    )


class FakeGeocoder(BaseGeocoder):
    """Backend that returns canned results or raises a provider error."""

    def __init__(
        self,
        role: ProviderRole,
        suggestions: list[AddressSuggestion] | None = None,
        error: bool = False,
        configured: bool = True,
    ) -> None:
        super().__init__()
        self._role = role
        self._suggestions = suggestions or []
        self._error = error
        self._configured = configured
        self.calls: list[str] = []

    @property
    def provider_name(self) -> str:
        return f"fake-{self._role}"

    @property
    def role(self) -> ProviderRole:
        return self._role

    @property
    def is_configured(self) -> bool:
        return self._configured

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if self._error:
            raise GeocodingProviderError(self.provider_name, "Connection to geocoding provider failed")

    async def _search(self, query: str, limit: int) -> list[AddressSuggestion]:
        self._maybe_fail("search")
        return self._suggestions[:limit]

    async def _forward(self, address: str) -> AddressSuggestion | None:
        self._maybe_fail("forward")
        return self._suggestions[0] if self._suggestions else None

    async def _reverse(self, latitude: float, longitude: float) -> AddressSuggestion | None:
        self._maybe_fail("reverse")
        return self._suggestions[0] if self._suggestions else None
