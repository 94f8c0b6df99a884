"""Shared test fixtures."""

import pytest

from address_resolver.core.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Test application settings with both optional backends configured."""
    return Settings(
        _env_file=None,
        geocoder_locationiq_api_key="test-locationiq-key",
        usps_client_id="test-client-id",
        usps_client_secret="test-client-secret",
    )


@pytest.fixture
def bare_settings() -> Settings:
    """Test settings with no optional credentials."""
    return Settings(
        _env_file=None,
        geocoder_locationiq_api_key=None,
        usps_client_id=None,
        usps_client_secret=None,
    )

