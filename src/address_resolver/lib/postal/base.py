"""Postal validation data model and errors."""

from dataclasses import dataclass
from enum import StrEnum


class DPVConfirmation(StrEnum):
    """Delivery Point Validation confirmation code reported by USPS."""

    FULL_MATCH = "Y"
    SECONDARY_MISSING = "D"
    SECONDARY_INVALID = "S"
    NOT_FOUND = "N"
    UNKNOWN = ""

    @classmethod
    def parse(cls, raw: str | None) -> "DPVConfirmation":
        """Map a raw backend code to the enum; anything unrecognized is UNKNOWN."""
        try:
            return cls((raw or "").strip().upper())
        except ValueError:
            return cls.UNKNOWN


@dataclass
class ValidationRequest:
    """Structured address submitted for postal validation."""

    street_address: str
    city: str
    state: str
    zip_code: str
    secondary_address: str | None = None


@dataclass
class StandardizedAddress:
    """Address as echoed back by the postal backend."""

    street_address: str
    city: str
    state: str
    zip5: str
    secondary_address: str | None = None
    zip4: str | None = None


@dataclass
class ValidationResult:
    """Classified outcome of a postal validation call.

    ``is_valid``, ``needs_secondary_address`` and ``secondary_address_invalid``
    are mutually exclusive; all three are False when the address was not
    found or the call failed, in which case ``error`` is set.
    """

    is_valid: bool = False
    needs_secondary_address: bool = False
    secondary_address_invalid: bool = False
    standardized_address: StandardizedAddress | None = None
    confirmation_code: DPVConfirmation = DPVConfirmation.UNKNOWN
    footnotes: str = ""
    is_vacant: bool = False
    is_business: bool = False
    error: str | None = None

    @classmethod
    def failure(
        cls,
        error: str,
        confirmation_code: DPVConfirmation = DPVConfirmation.UNKNOWN,
    ) -> "ValidationResult":
        """Build a result for a call that produced no usable validation."""
        return cls(confirmation_code=confirmation_code, error=error)


@dataclass
class CityState:
    """City and state for a ZIP code."""

    city: str
    state: str


class PostalNotConfiguredError(Exception):
    """Raised when postal validation is attempted without client credentials."""


class CredentialExchangeError(Exception):
    """Raised when the OAuth client-credentials exchange fails.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code from the token endpoint.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
