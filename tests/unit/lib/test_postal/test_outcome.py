"""Unit tests for describe_outcome()."""

from address_resolver.lib.postal.base import DPVConfirmation, ValidationResult
from address_resolver.lib.postal.outcome import NOT_FOUND_FALLBACK, Severity, describe_outcome
from address_resolver.lib.postal.usps import NOT_FOUND_MESSAGE


def test_valid_address_is_success() -> None:
    outcome = describe_outcome(ValidationResult(is_valid=True, confirmation_code=DPVConfirmation.FULL_MATCH))
    assert outcome.severity == Severity.SUCCESS
    assert outcome.title == "Address Verified"


def test_valid_wins_over_vacant() -> None:
    outcome = describe_outcome(ValidationResult(is_valid=True, is_vacant=True))
    assert outcome.title == "Address Verified"


def test_missing_unit_is_warning() -> None:
    outcome = describe_outcome(ValidationResult(needs_secondary_address=True))
    assert outcome.severity == Severity.WARNING
    assert outcome.title == "Unit Number Required"


def test_missing_unit_wins_over_vacant() -> None:
    outcome = describe_outcome(ValidationResult(needs_secondary_address=True, is_vacant=True))
    assert outcome.title == "Unit Number Required"


def test_invalid_unit_is_warning() -> None:
    outcome = describe_outcome(ValidationResult(secondary_address_invalid=True))
    assert outcome.severity == Severity.WARNING
    assert outcome.title == "Invalid Unit Number"


def test_vacant_is_warning() -> None:
    outcome = describe_outcome(ValidationResult(is_vacant=True))
    assert outcome.severity == Severity.WARNING
    assert outcome.title == "Vacant Address"


def test_not_found_carries_error_text() -> None:
    result = ValidationResult.failure(NOT_FOUND_MESSAGE, DPVConfirmation.NOT_FOUND)
    outcome = describe_outcome(result)
    assert outcome.severity == Severity.ERROR
    assert outcome.title == "Address Not Found"
    assert outcome.message == NOT_FOUND_MESSAGE


def test_error_without_text_uses_fallback() -> None:
    outcome = describe_outcome(ValidationResult())
    assert outcome.severity == Severity.ERROR
    assert outcome.message == NOT_FOUND_FALLBACK
