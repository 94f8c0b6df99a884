"""Unit tests for AddressService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from address_resolver.core.config import Settings
from address_resolver.lib.geocoder import GeocodingGateway, HealthTracker, ProviderRole
from address_resolver.lib.postal import CredentialCache, ValidationRequest, ValidationResult
from address_resolver.services.address_service import AddressService, create_address_service
from tests.helpers import FakeGeocoder, make_suggestion

PRIMARY = ProviderRole.PRIMARY
SECONDARY = ProviderRole.SECONDARY


@pytest.fixture
def usps() -> MagicMock:
    client = MagicMock()
    client.is_configured = True
    client.validate = AsyncMock(return_value=ValidationResult(is_valid=True))
    client.lookup_city_state = AsyncMock(return_value=None)
    return client


def _service(usps: MagicMock, primary: FakeGeocoder, secondary: FakeGeocoder | None = None) -> AddressService:
    geocoders = [primary] if secondary is None else [primary, secondary]
    gateway = GeocodingGateway(geocoders, HealthTracker(secondary_configured=secondary is not None))
    return AddressService(gateway, usps)


class TestSearchAddresses:
    """Tests for AddressService.search_addresses()."""

    async def test_short_query_never_reaches_gateway(self, usps: MagicMock) -> None:
        primary = FakeGeocoder(PRIMARY, [make_suggestion()])
        service = _service(usps, primary)

        assert await service.search_addresses("ab") == []
        assert await service.search_addresses("   ") == []
        assert primary.calls == []

    async def test_primary_failure_falls_over(self, usps: MagicMock) -> None:
        primary = FakeGeocoder(PRIMARY, error=True)
        secondary = FakeGeocoder(SECONDARY, [make_suggestion(SECONDARY, "liq_9")])
        service = _service(usps, primary, secondary)

        suggestions = await service.search_addresses("1200 Main")

        assert [s.id for s in suggestions] == ["liq_9"]
        statuses = {s.role: s for s in service.get_provider_status()}
        assert statuses[PRIMARY].failure_count == 1
        assert statuses[SECONDARY].failure_count == 0

    async def test_limit_is_passed_through(self, usps: MagicMock) -> None:
        suggestions = [make_suggestion(suggestion_id=f"nom_{i}") for i in range(5)]
        service = _service(usps, FakeGeocoder(PRIMARY, suggestions))
        assert len(await service.search_addresses("1200 Main", limit=2)) == 2


class TestGeocoding:
    """Tests for forward and reverse geocoding through the service."""

    async def test_geocode_short_text_is_none(self, usps: MagicMock) -> None:
        primary = FakeGeocoder(PRIMARY, [make_suggestion()])
        service = _service(usps, primary)
        assert await service.geocode_address("a") is None
        assert primary.calls == []

    async def test_geocode(self, usps: MagicMock) -> None:
        service = _service(usps, FakeGeocoder(PRIMARY, [make_suggestion()]))
        suggestion = await service.geocode_address("1200 Main St, Kansas City, MO")
        assert suggestion is not None
        assert suggestion.zip == "64105"

    async def test_reverse(self, usps: MagicMock) -> None:
        service = _service(usps, FakeGeocoder(PRIMARY, [make_suggestion()]))
        suggestion = await service.reverse_geocode(39.0997, -94.5786)
        assert suggestion is not None
        assert suggestion.city == "Kansas City"


class TestPostal:
    """Tests for validation and ZIP lookup delegation."""

    async def test_validate_delegates(self, usps: MagicMock) -> None:
        service = _service(usps, FakeGeocoder(PRIMARY))
        request = ValidationRequest(street_address="1200 Main St", city="Kansas City", state="MO", zip_code="64105")

        result = await service.validate_address(request)

        assert result.is_valid is True
        usps.validate.assert_awaited_once_with(request, deadline=None)

    async def test_zip_lookup_delegates(self, usps: MagicMock) -> None:
        service = _service(usps, FakeGeocoder(PRIMARY))
        assert await service.lookup_zip_code("62704") is None
        usps.lookup_city_state.assert_awaited_once_with("62704", deadline=None)

    async def test_deadline_is_passed_through(self, usps: MagicMock) -> None:
        service = _service(usps, FakeGeocoder(PRIMARY))
        request = ValidationRequest(street_address="1200 Main St", city="Kansas City", state="MO", zip_code="64105")

        await service.validate_address(request, deadline=2.5)
        await service.lookup_zip_code("62704", deadline=2.5)

        usps.validate.assert_awaited_once_with(request, deadline=2.5)
        usps.lookup_city_state.assert_awaited_once_with("62704", deadline=2.5)

    def test_configuration_flags(self, usps: MagicMock) -> None:
        service = _service(usps, FakeGeocoder(PRIMARY))
        assert service.is_usps_configured() is True
        assert service.is_secondary_configured() is False


class TestCreateAddressService:
    """Tests for create_address_service()."""

    def test_wires_from_settings(self, settings: Settings) -> None:
        service = create_address_service(settings)
        assert service.is_usps_configured() is True
        assert service.is_secondary_configured() is True

    def test_bare_settings(self, bare_settings: Settings) -> None:
        service = create_address_service(bare_settings)
        assert service.is_usps_configured() is False
        assert service.is_secondary_configured() is False

    def test_shared_credential_cache(self, settings: Settings) -> None:
        cache = CredentialCache()
        service = create_address_service(settings, cache)
        assert service.usps._credentials is cache
