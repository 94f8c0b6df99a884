"""Unit tests for the postal credential cache."""

import asyncio

import pytest

from address_resolver.lib.postal.base import CredentialExchangeError
from address_resolver.lib.postal.credentials import REFRESH_MARGIN, Credential, CredentialCache


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


class CountingFetch:
    """Credential exchange stub that issues numbered tokens."""

    def __init__(self, clock: FakeClock, lifetime: float = 3600, delay: float = 0.0) -> None:
        self.clock = clock
        self.lifetime = lifetime
        self.delay = delay
        self.calls = 0

    async def __call__(self) -> Credential:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return Credential(token=f"token-{self.calls}", expires_at=self.clock() + self.lifetime)


class TestCredential:
    """Tests for Credential.is_usable()."""

    def test_usable_outside_margin(self) -> None:
        assert Credential("t", expires_at=1000 + REFRESH_MARGIN + 1).is_usable(1000)

    def test_not_usable_inside_margin(self) -> None:
        assert not Credential("t", expires_at=1000 + REFRESH_MARGIN).is_usable(1000)

    def test_refresh_margin_is_five_minutes(self) -> None:
        assert REFRESH_MARGIN == 300


class TestCredentialCache:
    """Tests for CredentialCache.get_token()."""

    async def test_first_call_fetches(self) -> None:
        clock = FakeClock()
        cache = CredentialCache(clock=clock)
        fetch = CountingFetch(clock)

        assert await cache.get_token(fetch) == "token-1"
        assert fetch.calls == 1
        assert cache.credential is not None

    async def test_fresh_token_is_reused(self) -> None:
        clock = FakeClock()
        cache = CredentialCache(clock=clock)
        fetch = CountingFetch(clock)

        await cache.get_token(fetch)
        clock.now += 1000
        assert await cache.get_token(fetch) == "token-1"
        assert fetch.calls == 1

    async def test_token_near_expiry_is_refreshed_once(self) -> None:
        clock = FakeClock()
        cache = CredentialCache(clock=clock)
        fetch = CountingFetch(clock)

        await cache.get_token(fetch)
        # 4 minutes of life left is inside the 5 minute margin
        clock.now += 3600 - 240
        assert await cache.get_token(fetch) == "token-2"
        assert await cache.get_token(fetch) == "token-2"
        assert fetch.calls == 2

    async def test_concurrent_callers_share_one_refresh(self) -> None:
        clock = FakeClock()
        cache = CredentialCache(clock=clock)
        fetch = CountingFetch(clock, delay=0.01)

        tokens = await asyncio.gather(*(cache.get_token(fetch) for _ in range(10)))

        assert set(tokens) == {"token-1"}
        assert fetch.calls == 1

    async def test_failed_fetch_leaves_slot_unchanged(self) -> None:
        clock = FakeClock()
        cache = CredentialCache(clock=clock)

        async def failing_fetch() -> Credential:
            msg = "USPS OAuth error: 401"
            raise CredentialExchangeError(msg, status_code=401)

        with pytest.raises(CredentialExchangeError):
            await cache.get_token(failing_fetch)
        assert cache.credential is None

    async def test_clear_forces_refresh(self) -> None:
        clock = FakeClock()
        cache = CredentialCache(clock=clock)
        fetch = CountingFetch(clock)

        await cache.get_token(fetch)
        cache.clear()
        assert await cache.get_token(fetch) == "token-2"

    async def test_custom_margin(self) -> None:
        clock = FakeClock()
        cache = CredentialCache(clock=clock, refresh_margin=0)
        fetch = CountingFetch(clock)

        await cache.get_token(fetch)
        clock.now += 3599
        assert await cache.get_token(fetch) == "token-1"
