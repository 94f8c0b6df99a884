"""Abstract base geocoder interface shared by the primary and secondary backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

import httpx
from loguru import logger

from address_resolver.core.logging import redact

# Autocomplete and forward-geocode queries shorter than this never hit the network
MIN_QUERY_LENGTH = 3

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "address-resolver/1.0"

# Kansas City metro (lon1,lat1,lon2,lat2); biases results without restricting them
DEFAULT_VIEWBOX = "-95.5,39.5,-94.0,38.5"

T = TypeVar("T")


class ProviderRole(StrEnum):
    """Position of a geocoding backend in the failover pair."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class LookupStatus(StrEnum):
    """Outcome of a single backend call."""

    FOUND = "found"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class AddressSuggestion:
    """Candidate address returned by a geocoding backend.

    Text components are empty strings when the backend omitted them so
    downstream formatting never has to handle ``None``.
    """

    id: str
    display_name: str
    street_address: str
    city: str
    state: str
    zip: str
    latitude: float
    longitude: float
    place_type: str
    provider: ProviderRole

    def __post_init__(self) -> None:
        if not (-90 <= self.latitude <= 90):
            msg = f"latitude must be between -90 and 90, got {self.latitude}"
            raise ValueError(msg)
        if not (-180 <= self.longitude <= 180):
            msg = f"longitude must be between -180 and 180, got {self.longitude}"
            raise ValueError(msg)


class GeocodingProviderError(Exception):
    """Raised when a geocoding provider experiences a transport or service error.

    Distinguishes provider failures (timeout, HTTP error, connection error,
    unusable payload) from a successful response with no match.

    Args:
        provider_name: Name of the failing provider.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the provider.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


class GeocoderNotConfiguredError(Exception):
    """Raised when no geocoding backend is enabled and configured."""


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """Typed result of one backend call.

    ``value`` always carries the degraded shape (``[]`` or ``None``) when the
    lookup is empty or failed, so callers that only care about the value can
    ignore ``status``.
    """

    status: LookupStatus
    value: T
    error: GeocodingProviderError | None = None

    @property
    def found(self) -> bool:
        return self.status == LookupStatus.FOUND

    @property
    def failed(self) -> bool:
        return self.status == LookupStatus.FAILED


def result_of(value: T) -> LookupResult[T]:
    """Wrap a non-empty value, or mark an empty list/None as EMPTY."""
    status = LookupStatus.FOUND if value else LookupStatus.EMPTY
    return LookupResult(status=status, value=value)


def empty_result(value: T) -> LookupResult[T]:
    return LookupResult(status=LookupStatus.EMPTY, value=value)


def failed_result(value: T, error: GeocodingProviderError) -> LookupResult[T]:
    return LookupResult(status=LookupStatus.FAILED, value=value, error=error)


class BaseGeocoder(ABC):
    """Abstract geocoder interface. Both backends implement this.

    Subclasses implement ``_search``, ``_forward`` and ``_reverse``, which may
    raise :class:`GeocodingProviderError`. The public ``lookup_*`` methods
    never raise: they convert provider errors into a FAILED
    :class:`LookupResult` and log the cause. The plain ``autocomplete``,
    ``forward_geocode`` and ``reverse_geocode`` methods return just the value.
    """

    # HTTP statuses that a backend uses to say "no match" rather than "error"
    empty_status_codes: frozenset[int] = frozenset()

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self._timeout = timeout
        self._user_agent = user_agent

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this geocoder provider."""

    @property
    @abstractmethod
    def role(self) -> ProviderRole:
        """Whether this backend is the primary or the secondary."""

    @property
    def requires_api_key(self) -> bool:
        """Whether this provider requires an API key to function."""
        return False

    @property
    def is_configured(self) -> bool:
        """Whether this provider has all required configuration (e.g., API keys)."""
        return True

    @property
    def rate_limit_delay(self) -> float:
        """Documented minimum delay in seconds between requests.

        Reported as metadata only; calls are not throttled.
        """
        return 0.0

    @abstractmethod
    async def _search(self, query: str, limit: int) -> list[AddressSuggestion]:
        """Return ranked candidates for a partial query."""

    @abstractmethod
    async def _forward(self, address: str) -> AddressSuggestion | None:
        """Return the best match for a full address string."""

    @abstractmethod
    async def _reverse(self, latitude: float, longitude: float) -> AddressSuggestion | None:
        """Return the address at the given coordinates."""

    def _not_configured(self) -> GeocodingProviderError:
        return GeocodingProviderError(self.provider_name, "Provider is not configured")

    async def lookup_autocomplete(self, query: str, limit: int = 5) -> LookupResult[list[AddressSuggestion]]:
        """Autocomplete a partial address.

        Args:
            query: Free text typed by the user.
            limit: Maximum number of suggestions.

        Returns:
            LookupResult wrapping the (possibly empty) suggestion list.
        """
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return empty_result([])
        if not self.is_configured:
            return failed_result([], self._not_configured())
        try:
            return result_of(await self._search(query, limit))
        except GeocodingProviderError as e:
            logger.warning(f"{self.provider_name} autocomplete failed for {redact(query)}: {e.message}")
            return failed_result([], e)

    async def lookup_forward(self, address: str) -> LookupResult[AddressSuggestion | None]:
        """Geocode a full address string to its best match."""
        address = address.strip()
        if len(address) < MIN_QUERY_LENGTH:
            return empty_result(None)
        if not self.is_configured:
            return failed_result(None, self._not_configured())
        try:
            return result_of(await self._forward(address))
        except GeocodingProviderError as e:
            logger.warning(f"{self.provider_name} geocode failed for {redact(address)}: {e.message}")
            return failed_result(None, e)

    async def lookup_reverse(self, latitude: float, longitude: float) -> LookupResult[AddressSuggestion | None]:
        """Reverse geocode coordinates to an address."""
        if not self.is_configured:
            return failed_result(None, self._not_configured())
        try:
            return result_of(await self._reverse(latitude, longitude))
        except GeocodingProviderError as e:
            logger.warning(f"{self.provider_name} reverse geocode failed: {e.message}")
            return failed_result(None, e)

    async def autocomplete(self, query: str, limit: int = 5) -> list[AddressSuggestion]:
        return (await self.lookup_autocomplete(query, limit)).value

    async def forward_geocode(self, address: str) -> AddressSuggestion | None:
        return (await self.lookup_forward(address)).value

    async def reverse_geocode(self, latitude: float, longitude: float) -> AddressSuggestion | None:
        return (await self.lookup_reverse(latitude, longitude)).value

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        return headers

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        """GET a JSON document from the backend.

        Args:
            url: Endpoint URL.
            params: Query parameters.

        Returns:
            Decoded JSON body, or None when the backend answered with one of
            ``empty_status_codes``.

        Raises:
            GeocodingProviderError: On transport or service errors.
        """
        name = self.provider_name
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, params=params, headers=self._headers())
                if response.status_code in self.empty_status_codes:
                    return None
                response.raise_for_status()

            return response.json()

        except httpx.TimeoutException as e:
            logger.warning(f"{name} geocoder timeout")
            raise GeocodingProviderError(name, "Geocoding request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"{name} geocoder HTTP error {e.response.status_code}")
            raise GeocodingProviderError(
                name,
                f"Provider returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.ConnectError as e:
            logger.warning(f"{name} geocoder connection error")
            raise GeocodingProviderError(name, "Connection to geocoding provider failed") from e
        except ValueError as e:
            logger.warning(f"{name} geocoder returned a non-JSON body")
            raise GeocodingProviderError(name, f"Failed to decode response: {e}") from e
        except Exception as e:
            logger.exception(f"{name} geocoder unexpected error")
            raise GeocodingProviderError(name, f"Unexpected error: {e}") from e
