"""Unit tests for building geocoders and the gateway from settings."""

from address_resolver.core.config import Settings
from address_resolver.lib.geocoder import (
    LocationIQGeocoder,
    NominatimGeocoder,
    ProviderRole,
    create_gateway,
    get_configured_geocoders,
)


class TestGetConfiguredGeocoders:
    """Tests for get_configured_geocoders()."""

    def test_both_backends_when_key_set(self, settings: Settings) -> None:
        geocoders = get_configured_geocoders(settings)
        assert [type(g) for g in geocoders] == [NominatimGeocoder, LocationIQGeocoder]

    def test_primary_only_without_key(self, bare_settings: Settings) -> None:
        geocoders = get_configured_geocoders(bare_settings)
        assert [g.provider_name for g in geocoders] == ["nominatim"]

    def test_primary_can_be_disabled(self, settings: Settings) -> None:
        settings.geocoder_nominatim_enabled = False
        geocoders = get_configured_geocoders(settings)
        assert [g.provider_name for g in geocoders] == ["locationiq"]


class TestCreateGateway:
    """Tests for create_gateway()."""

    def test_order_follows_configuration(self, settings: Settings) -> None:
        gateway = create_gateway(settings)
        assert gateway.health.get_order() == [ProviderRole.PRIMARY, ProviderRole.SECONDARY]

    def test_primary_only_order(self, bare_settings: Settings) -> None:
        gateway = create_gateway(bare_settings)
        assert gateway.health.get_order() == [ProviderRole.PRIMARY]
        assert gateway.health.is_configured(ProviderRole.SECONDARY) is False

    def test_threshold_comes_from_settings(self, settings: Settings) -> None:
        settings.geocoder_failure_threshold = 1
        gateway = create_gateway(settings)
        gateway.health.record_failure(ProviderRole.PRIMARY)
        assert gateway.health.get_order() == [ProviderRole.SECONDARY, ProviderRole.PRIMARY]

    def test_each_gateway_has_its_own_tracker(self, settings: Settings) -> None:
        first = create_gateway(settings)
        second = create_gateway(settings)
        first.health.record_failure(ProviderRole.PRIMARY)
        assert second.health.failure_count(ProviderRole.PRIMARY) == 0
