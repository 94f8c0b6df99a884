"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VIEWBOX_PATTERN = re.compile(r"^-?\d+(\.\d+)?(,-?\d+(\.\d+)?){3}$")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Geocoding: shared
    geocoder_viewbox: str = Field(
        default="-95.5,39.5,-94.0,38.5",
        description="Metro bounding box (lon1,lat1,lon2,lat2) used to bias autocomplete results",
    )
    geocoder_country_code: str = Field(
        default="us",
        min_length=2,
        max_length=2,
        description="ISO 3166-1 alpha-2 country code results are restricted to",
    )
    geocoder_failure_threshold: int = Field(
        default=3,
        description="Failures within a window after which a backend is ordered second",
        gt=0,
    )
    geocoder_failure_reset_seconds: float = Field(
        default=60.0,
        description="Seconds after which a backend's failure window resets",
        gt=0,
    )

    @field_validator("geocoder_viewbox")
    @classmethod
    def validate_viewbox(cls, v: str) -> str:
        stripped = v.replace(" ", "")
        if not _VIEWBOX_PATTERN.match(stripped):
            msg = "geocoder_viewbox must be four comma-separated numbers (lon1,lat1,lon2,lat2)"
            raise ValueError(msg)
        return stripped

    @field_validator("geocoder_country_code")
    @classmethod
    def validate_country_code(cls, v: str) -> str:
        return v.lower()

    # Geocoding: Nominatim (OpenStreetMap), primary backend
    geocoder_nominatim_enabled: bool = Field(
        default=True,
        description="Enable Nominatim (OpenStreetMap) geocoder",
    )
    geocoder_nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Nominatim base URL (self-hostable)",
    )
    geocoder_nominatim_user_agent: str = Field(
        default="address-resolver/1.0",
        description="Identifying User-Agent sent to Nominatim per its usage policy",
    )
    geocoder_nominatim_email: str = Field(
        default="",
        description="Email for Nominatim usage policy compliance",
    )
    geocoder_nominatim_timeout: float = Field(
        default=10.0,
        description="Nominatim request timeout in seconds",
        gt=0,
    )

    # Geocoding: LocationIQ, secondary backend
    geocoder_locationiq_api_key: str | None = Field(
        default=None,
        description="LocationIQ access token (secondary backend is disabled without it)",
    )
    geocoder_locationiq_base_url: str = Field(
        default="https://us1.locationiq.com/v1",
        description="LocationIQ regional API base URL",
    )
    geocoder_locationiq_timeout: float = Field(
        default=10.0,
        description="LocationIQ request timeout in seconds",
        gt=0,
    )

    # Postal validation: USPS Addresses v3
    usps_api_url: str = Field(
        default="https://apis.usps.com",
        description="USPS API base URL",
    )
    usps_client_id: str | None = Field(
        default=None,
        description="USPS OAuth client ID",
    )
    usps_client_secret: str | None = Field(
        default=None,
        description="USPS OAuth client secret",
    )
    usps_timeout: float = Field(
        default=10.0,
        description="USPS request timeout in seconds",
        gt=0,
    )

    @field_validator("usps_api_url", "geocoder_nominatim_base_url", "geocoder_locationiq_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            msg = "Backend base URLs must start with http:// or https://"
            raise ValueError(msg)
        return v.rstrip("/")

    @property
    def usps_configured(self) -> bool:
        """Whether both USPS OAuth credentials are present."""
        return bool(self.usps_client_id and self.usps_client_secret)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
