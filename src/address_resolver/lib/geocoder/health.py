"""Provider health tracking for geocoding failover.

Keeps a failure counter per backend in a fixed time bucket: once more than
``reset_interval`` seconds have passed since a backend's window opened, its
count drops to zero and a new window starts. This is a decaying bucket, not
a sliding window, and successes never clear the count mid-window.

The order is health-biased, not exclusive: a degraded backend is still tried
second, so results stay available when both backends are struggling.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from address_resolver.lib.geocoder.base import ProviderRole

DEFAULT_FAILURE_THRESHOLD = 3
DEFAULT_RESET_INTERVAL = 60.0


@dataclass
class ProviderHealth:
    """Failure bookkeeping for one backend."""

    failure_count: int
    window_started_at: float


@dataclass
class ProviderStatus:
    """Point-in-time view of one backend's health, for status reporting."""

    role: ProviderRole
    failure_count: int
    healthy: bool
    configured: bool
    provider_name: str | None = None


class HealthTracker:
    """Per-backend failure counters that decide the call order.

    All reads and writes go through one lock so concurrent requests (threads
    or event loops) see consistent counters.

    Args:
        secondary_configured: Whether the secondary backend has credentials.
        primary_enabled: Whether the primary backend is enabled.
        failure_threshold: Failures within a window that mark a backend unhealthy.
        reset_interval: Window length in seconds.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        secondary_configured: bool,
        primary_enabled: bool = True,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        reset_interval: float = DEFAULT_RESET_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._configured = {
            ProviderRole.PRIMARY: primary_enabled,
            ProviderRole.SECONDARY: secondary_configured,
        }
        self._threshold = failure_threshold
        self._reset_interval = reset_interval
        self._clock = clock
        self._lock = threading.Lock()
        now = clock()
        self._health = {role: ProviderHealth(failure_count=0, window_started_at=now) for role in ProviderRole}

    def _roll_windows(self) -> None:
        """Reset any backend whose window has expired. Caller holds the lock."""
        now = self._clock()
        for health in self._health.values():
            if now - health.window_started_at > self._reset_interval:
                health.failure_count = 0
                health.window_started_at = now

    def _is_unhealthy(self, role: ProviderRole) -> bool:
        return self._health[role].failure_count >= self._threshold

    def is_configured(self, role: ProviderRole) -> bool:
        return self._configured[role]

    def record_failure(self, role: ProviderRole) -> None:
        with self._lock:
            self._roll_windows()
            self._health[role].failure_count += 1

    def record_success(self, role: ProviderRole) -> None:
        # Success only advances the clock; it does not forgive earlier failures.
        with self._lock:
            self._roll_windows()

    def failure_count(self, role: ProviderRole) -> int:
        with self._lock:
            self._roll_windows()
            return self._health[role].failure_count

    def get_order(self) -> list[ProviderRole]:
        """Return the backends to try, most preferred first.

        Returns:
            ``[primary]`` when the secondary is not configured,
            ``[secondary, primary]`` when only the primary is unhealthy,
            and ``[primary, secondary]`` otherwise. A disabled primary is
            left out.
        """
        with self._lock:
            self._roll_windows()
            primary, secondary = ProviderRole.PRIMARY, ProviderRole.SECONDARY

            if not self._configured[secondary]:
                order = [primary]
            elif self._is_unhealthy(primary) and not self._is_unhealthy(secondary):
                order = [secondary, primary]
            else:
                order = [primary, secondary]

        return [role for role in order if self._configured[role]]

    def snapshot(self) -> list[ProviderStatus]:
        """Return the current status of both backends, primary first."""
        with self._lock:
            self._roll_windows()
            return [
                ProviderStatus(
                    role=role,
                    failure_count=health.failure_count,
                    healthy=health.failure_count < self._threshold,
                    configured=self._configured[role],
                )
                for role, health in self._health.items()
            ]
