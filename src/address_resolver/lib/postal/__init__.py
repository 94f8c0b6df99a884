"""Postal library — USPS address standardization and DPV classification.

Public API:
    - ValidationRequest / ValidationResult / StandardizedAddress / CityState
    - DPVConfirmation: Delivery Point Validation code enum
    - Credential / CredentialCache: Shared OAuth bearer token slot
    - USPSClient: Validation and ZIP lookup client
    - classify_dpv / parse_validation_response: Pure response classification
    - describe_outcome / OutcomeMessage / Severity: User-facing messages
    - create_usps_client: Build a client from settings
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from address_resolver.lib.postal.base import (
    CityState,
    CredentialExchangeError,
    DPVConfirmation,
    PostalNotConfiguredError,
    StandardizedAddress,
    ValidationRequest,
    ValidationResult,
)
from address_resolver.lib.postal.credentials import REFRESH_MARGIN, Credential, CredentialCache
from address_resolver.lib.postal.outcome import OUTCOME_RULES, OutcomeMessage, Severity, describe_outcome
from address_resolver.lib.postal.usps import (
    NOT_FOUND_MESSAGE,
    USPSClient,
    classify_dpv,
    normalize_zip5,
    parse_validation_response,
)

if TYPE_CHECKING:
    from address_resolver.core.config import Settings


def create_usps_client(settings: Settings, credentials: CredentialCache | None = None) -> USPSClient:
    """Build a USPS client from settings.

    Args:
        settings: Application settings.
        credentials: Cache to share; a new one is created when omitted.

    Returns:
        USPSClient, which reports ``is_configured=False`` without credentials.
    """
    return USPSClient(
        client_id=settings.usps_client_id or "",
        client_secret=settings.usps_client_secret or "",
        credentials=credentials if credentials is not None else CredentialCache(),
        base_url=settings.usps_api_url,
        timeout=settings.usps_timeout,
    )


__all__ = [
    "NOT_FOUND_MESSAGE",
    "OUTCOME_RULES",
    "REFRESH_MARGIN",
    "CityState",
    "Credential",
    "CredentialCache",
    "CredentialExchangeError",
    "DPVConfirmation",
    "OutcomeMessage",
    "PostalNotConfiguredError",
    "Severity",
    "StandardizedAddress",
    "USPSClient",
    "ValidationRequest",
    "ValidationResult",
    "classify_dpv",
    "create_usps_client",
    "describe_outcome",
    "normalize_zip5",
    "parse_validation_response",
]
