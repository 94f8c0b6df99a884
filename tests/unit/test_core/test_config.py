"""Unit tests for core configuration module."""

import pytest
from pydantic import ValidationError

from address_resolver.core.config import Settings


class TestSettings:
    """Tests for Settings configuration."""

    def test_settings_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Default values are applied correctly."""
        for name in ("GEOCODER_LOCATIONIQ_API_KEY", "USPS_CLIENT_ID", "USPS_CLIENT_SECRET"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.geocoder_viewbox == "-95.5,39.5,-94.0,38.5"
        assert settings.geocoder_country_code == "us"
        assert settings.geocoder_failure_threshold == 3
        assert settings.geocoder_failure_reset_seconds == 60.0
        assert settings.geocoder_nominatim_enabled is True
        assert settings.geocoder_nominatim_base_url == "https://nominatim.openstreetmap.org"
        assert settings.geocoder_locationiq_api_key is None
        assert settings.geocoder_locationiq_base_url == "https://us1.locationiq.com/v1"
        assert settings.usps_api_url == "https://apis.usps.com"
        assert settings.usps_configured is False
        assert settings.log_level == "INFO"
        assert settings.api_v1_prefix == "/api/v1"

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings load from environment variables."""
        monkeypatch.setenv("GEOCODER_LOCATIONIQ_API_KEY", "pk.env")
        monkeypatch.setenv("USPS_CLIENT_ID", "client")
        monkeypatch.setenv("USPS_CLIENT_SECRET", "secret")
        monkeypatch.setenv("GEOCODER_COUNTRY_CODE", "US")
        settings = Settings(_env_file=None)
        assert settings.geocoder_locationiq_api_key == "pk.env"
        assert settings.usps_configured is True
        assert settings.geocoder_country_code == "us"

    def test_usps_needs_both_credentials(self) -> None:
        settings = Settings(_env_file=None, usps_client_id="client", usps_client_secret=None)
        assert settings.usps_configured is False

    def test_base_url_trailing_slash_stripped(self) -> None:
        settings = Settings(_env_file=None, usps_api_url="https://apis-tem.usps.com/")
        assert settings.usps_api_url == "https://apis-tem.usps.com"

    def test_base_url_requires_scheme(self) -> None:
        with pytest.raises(ValidationError, match="http"):
            Settings(_env_file=None, geocoder_nominatim_base_url="nominatim.local")

    def test_viewbox_spaces_removed(self) -> None:
        settings = Settings(_env_file=None, geocoder_viewbox="-95.5, 39.5, -94.0, 38.5")
        assert settings.geocoder_viewbox == "-95.5,39.5,-94.0,38.5"

    def test_viewbox_must_have_four_numbers(self) -> None:
        with pytest.raises(ValidationError, match="four comma-separated"):
            Settings(_env_file=None, geocoder_viewbox="-95.5,39.5")

    def test_failure_threshold_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, geocoder_failure_threshold=0)

    def test_cors_origin_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CORS origins string is parsed into a list."""
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, http://example.com")
        settings = Settings(_env_file=None)
        assert settings.cors_origin_list == ["http://localhost:3000", "http://example.com"]

    def test_cors_origin_list_empty(self) -> None:
        assert Settings(_env_file=None, cors_origins="  ").cors_origin_list == []
