"""Unit tests for postal data model helpers."""

import pytest

from address_resolver.lib.postal.base import CredentialExchangeError, DPVConfirmation, ValidationResult


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Y", DPVConfirmation.FULL_MATCH),
        ("d", DPVConfirmation.SECONDARY_MISSING),
        (" S ", DPVConfirmation.SECONDARY_INVALID),
        ("N", DPVConfirmation.NOT_FOUND),
        ("", DPVConfirmation.UNKNOWN),
        (None, DPVConfirmation.UNKNOWN),
        ("X", DPVConfirmation.UNKNOWN),
    ],
)
def test_dpv_parse(raw: str | None, expected: DPVConfirmation) -> None:
    assert DPVConfirmation.parse(raw) == expected


def test_failure_has_no_flags_set() -> None:
    result = ValidationResult.failure("Validation failed: 500")
    assert result.is_valid is False
    assert result.needs_secondary_address is False
    assert result.secondary_address_invalid is False
    assert result.standardized_address is None
    assert result.confirmation_code == DPVConfirmation.UNKNOWN
    assert result.error == "Validation failed: 500"


def test_credential_error_keeps_status_code() -> None:
    error = CredentialExchangeError("USPS OAuth error: 401", status_code=401)
    assert error.status_code == 401
    assert str(error) == "USPS OAuth error: 401"
