"""User-facing description of a postal validation result.

Rules are evaluated top to bottom and the first match wins. Order matters
when a result satisfies more than one condition, e.g. a vacant address that
also needs a unit number is reported as needing the unit number.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from address_resolver.lib.postal.base import ValidationResult


class Severity(StrEnum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class OutcomeMessage:
    """Severity, title and body to show for a validation result."""

    severity: Severity
    title: str
    message: str


NOT_FOUND_TITLE = "Address Not Found"
NOT_FOUND_FALLBACK = "We could not verify this address. Please check the street address, city, and ZIP code."

OUTCOME_RULES: tuple[tuple[Callable[[ValidationResult], bool], OutcomeMessage], ...] = (
    (
        lambda r: r.is_valid,
        OutcomeMessage(
            Severity.SUCCESS,
            "Address Verified",
            "Your address has been validated and is ready for delivery.",
        ),
    ),
    (
        lambda r: r.needs_secondary_address,
        OutcomeMessage(
            Severity.WARNING,
            "Unit Number Required",
            "This appears to be a multi-unit building. Please add your apartment, suite, or unit number.",
        ),
    ),
    (
        lambda r: r.secondary_address_invalid,
        OutcomeMessage(
            Severity.WARNING,
            "Invalid Unit Number",
            "The unit number you entered could not be verified. Please check and try again.",
        ),
    ),
    (
        lambda r: r.is_vacant,
        OutcomeMessage(
            Severity.WARNING,
            "Vacant Address",
            "This address is marked as vacant. Please verify this is correct.",
        ),
    ),
)


def describe_outcome(result: ValidationResult) -> OutcomeMessage:
    """Pick the message for ``result`` from :data:`OUTCOME_RULES`.

    Falls through to an error carrying ``result.error`` when set, or a
    generic not-found message otherwise.
    """
    for predicate, outcome in OUTCOME_RULES:
        if predicate(result):
            return outcome
    return OutcomeMessage(Severity.ERROR, NOT_FOUND_TITLE, result.error or NOT_FOUND_FALLBACK)
