"""Geocoding gateway — failover across the primary and secondary backends.

Each operation walks the backends in the order given by the
:class:`HealthTracker` (or an explicit ``provider_order``), records the
outcome of every attempt, and returns the first usable answer. There is no
retry loop beyond trying each backend once, and no backoff.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from typing import TypeVar

from loguru import logger

from address_resolver.lib.geocoder.base import (
    AddressSuggestion,
    BaseGeocoder,
    GeocoderNotConfiguredError,
    GeocodingProviderError,
    LookupResult,
    LookupStatus,
    ProviderRole,
)
from address_resolver.lib.geocoder.health import HealthTracker, ProviderStatus

T = TypeVar("T")


class GeocodingGateway:
    """Runs geocoding operations against backends in health-biased order.

    Args:
        geocoders: The backend adapters, at most one per role.
        health: Shared failure tracker that decides the default order.
    """

    def __init__(self, geocoders: Iterable[BaseGeocoder], health: HealthTracker) -> None:
        self._geocoders: dict[ProviderRole, BaseGeocoder] = {g.role: g for g in geocoders}
        self._health = health

    @property
    def health(self) -> HealthTracker:
        return self._health

    def geocoder_for(self, role: ProviderRole) -> BaseGeocoder | None:
        return self._geocoders.get(role)

    def provider_status(self) -> list[ProviderStatus]:
        """Return the health snapshot labelled with each backend's provider name."""
        statuses = []
        for status in self._health.snapshot():
            geocoder = self._geocoders.get(status.role)
            name = geocoder.provider_name if geocoder is not None else None
            statuses.append(replace(status, provider_name=name))
        return statuses

    def _resolve_order(self, provider_order: list[ProviderRole] | None) -> list[BaseGeocoder]:
        order = provider_order if provider_order is not None else self._health.get_order()
        geocoders = [self._geocoders[role] for role in order if role in self._geocoders]
        if not geocoders:
            msg = "No geocoding backend is enabled and configured"
            raise GeocoderNotConfiguredError(msg)
        return geocoders

    async def _run(
        self,
        operation: str,
        call: Callable[[BaseGeocoder], Awaitable[LookupResult[T]]],
        default: T,
        *,
        provider_order: list[ProviderRole] | None,
        deadline: float | None,
        accept_empty: bool,
    ) -> LookupResult[T]:
        """Try ``call`` on each backend until one answers.

        Args:
            operation: Operation name for log lines.
            call: Invokes the operation's ``lookup_*`` method on a backend.
            default: Degraded value returned when no backend answers.
            provider_order: Explicit order; defaults to the health tracker's.
            deadline: Overall budget in seconds across all attempts.
            accept_empty: Whether an EMPTY answer ends the walk (autocomplete)
                or moves on to the next backend (forward/reverse).

        Raises:
            GeocoderNotConfiguredError: If no backend is usable at all.
        """
        geocoders = self._resolve_order(provider_order)
        loop = asyncio.get_running_loop()
        expires_at = None if deadline is None else loop.time() + deadline
        last_error: GeocodingProviderError | None = None
        answered = False

        for geocoder in geocoders:
            remaining = None if expires_at is None else expires_at - loop.time()
            if remaining is not None and remaining <= 0:
                logger.warning(f"Geocoding {operation} deadline spent before trying {geocoder.provider_name}")
                break

            try:
                async with asyncio.timeout(remaining):
                    result = await call(geocoder)
            except TimeoutError:
                logger.warning(f"{geocoder.provider_name} {operation} exceeded the {deadline}s deadline")
                self._health.record_failure(geocoder.role)
                last_error = GeocodingProviderError(geocoder.provider_name, "Deadline exceeded")
                break

            if result.failed:
                self._health.record_failure(geocoder.role)
                last_error = result.error
                logger.warning(f"Geocoding {operation} failed on {geocoder.provider_name}, trying next provider")
                continue

            self._health.record_success(geocoder.role)
            answered = True
            if result.found or accept_empty:
                return result

        if not answered:
            logger.error(f"Geocoding {operation}: all providers failed")
            return LookupResult(status=LookupStatus.FAILED, value=default, error=last_error)
        return LookupResult(status=LookupStatus.EMPTY, value=default)

    async def lookup_autocomplete(
        self,
        query: str,
        limit: int = 5,
        provider_order: list[ProviderRole] | None = None,
        deadline: float | None = None,
    ) -> LookupResult[list[AddressSuggestion]]:
        return await self._run(
            "autocomplete",
            lambda g: g.lookup_autocomplete(query, limit),
            [],
            provider_order=provider_order,
            deadline=deadline,
            accept_empty=True,
        )

    async def lookup_forward(
        self,
        address: str,
        provider_order: list[ProviderRole] | None = None,
        deadline: float | None = None,
    ) -> LookupResult[AddressSuggestion | None]:
        return await self._run(
            "geocode",
            lambda g: g.lookup_forward(address),
            None,
            provider_order=provider_order,
            deadline=deadline,
            accept_empty=False,
        )

    async def lookup_reverse(
        self,
        latitude: float,
        longitude: float,
        provider_order: list[ProviderRole] | None = None,
        deadline: float | None = None,
    ) -> LookupResult[AddressSuggestion | None]:
        return await self._run(
            "reverse geocode",
            lambda g: g.lookup_reverse(latitude, longitude),
            None,
            provider_order=provider_order,
            deadline=deadline,
            accept_empty=False,
        )

    async def autocomplete(
        self,
        query: str,
        limit: int = 5,
        provider_order: list[ProviderRole] | None = None,
        deadline: float | None = None,
    ) -> list[AddressSuggestion]:
        """Autocomplete ``query``, failing over between backends.

        Returns:
            Suggestions from the first backend that answered, or an empty list.
        """
        return (await self.lookup_autocomplete(query, limit, provider_order, deadline)).value

    async def forward_geocode(
        self,
        address: str,
        provider_order: list[ProviderRole] | None = None,
        deadline: float | None = None,
    ) -> AddressSuggestion | None:
        """Geocode ``address`` to its best match, or None."""
        return (await self.lookup_forward(address, provider_order, deadline)).value

    async def reverse_geocode(
        self,
        latitude: float,
        longitude: float,
        provider_order: list[ProviderRole] | None = None,
        deadline: float | None = None,
    ) -> AddressSuggestion | None:
        """Reverse geocode a coordinate pair, or None."""
        return (await self.lookup_reverse(latitude, longitude, provider_order, deadline)).value
