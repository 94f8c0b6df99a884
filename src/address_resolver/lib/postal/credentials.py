"""Bearer credential cache for the postal validation backend."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from loguru import logger

# A token within this many seconds of expiry is refreshed before use
REFRESH_MARGIN = 5 * 60


@dataclass(frozen=True)
class Credential:
    """An access token and the epoch time it expires at."""

    token: str
    expires_at: float

    def is_usable(self, now: float, margin: float = REFRESH_MARGIN) -> bool:
        return self.expires_at - now > margin


class CredentialCache:
    """One credential slot shared by every caller of the postal client.

    Concurrent callers that find the slot stale wait on a single refresh
    instead of each exchanging credentials.

    Args:
        clock: Epoch-seconds time source, injectable for tests.
        refresh_margin: Seconds before expiry at which the token is refreshed.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        refresh_margin: float = REFRESH_MARGIN,
    ) -> None:
        self._clock = clock
        self._refresh_margin = refresh_margin
        self._credential: Credential | None = None
        self._lock = asyncio.Lock()

    def now(self) -> float:
        return self._clock()

    @property
    def credential(self) -> Credential | None:
        return self._credential

    def _usable(self) -> Credential | None:
        credential = self._credential
        if credential is not None and credential.is_usable(self._clock(), self._refresh_margin):
            return credential
        return None

    def store(self, credential: Credential) -> None:
        self._credential = credential

    def clear(self) -> None:
        self._credential = None

    async def get_token(self, fetch: Callable[[], Awaitable[Credential]]) -> str:
        """Return a usable token, calling ``fetch`` once if the slot is stale.

        Args:
            fetch: Performs the credential exchange.

        Returns:
            The bearer token.

        Raises:
            CredentialExchangeError: Propagated from ``fetch``; the slot is left unchanged.
        """
        credential = self._usable()
        if credential is not None:
            return credential.token

        async with self._lock:
            # Another caller may have refreshed while we waited
            credential = self._usable()
            if credential is not None:
                return credential.token

            credential = await fetch()
            self._credential = credential
            logger.debug(f"Cached postal credential valid for {credential.expires_at - self._clock():.0f}s")
            return credential.token
