"""USPS Addresses v3 client.

Uses the USPS Addresses API (https://developers.usps.com/addressesv3) to
standardize an address and classify its Delivery Point Validation result.
Authentication is OAuth2 client credentials; the default tier allows
60 calls/hour, which this client does not throttle.
"""

import asyncio
import re
from typing import Any

import httpx
from loguru import logger

from address_resolver.lib.postal.base import (
    CityState,
    CredentialExchangeError,
    DPVConfirmation,
    PostalNotConfiguredError,
    StandardizedAddress,
    ValidationRequest,
    ValidationResult,
)
from address_resolver.lib.postal.credentials import Credential, CredentialCache

DEFAULT_BASE_URL = "https://apis.usps.com"
DEFAULT_TIMEOUT = 10.0
DEFAULT_TOKEN_LIFETIME = 3600

TOKEN_PATH = "/oauth2/v3/token"
ADDRESS_PATH = "/addresses/v3/address"
CITY_STATE_PATH = "/addresses/v3/city-state"

NOT_FOUND_MESSAGE = "Address not found. Please check the address and try again."

# Footnotes that flag a missing secondary even when the code does not
_MISSING_SECONDARY_FOOTNOTES = ("N1", "C1")
_INVALID_SECONDARY_FOOTNOTES = ("CC",)

_ZIP_PATTERN = re.compile(r"^(\d{5})(-?\d{4})?$")


def classify_dpv(code: DPVConfirmation, footnotes: str) -> tuple[bool, bool, bool]:
    """Classify a DPV code and footnotes into the three outcome flags.

    The confirmation code takes priority. Footnote heuristics are consulted
    only when the code is missing or unrecognized, and a missing secondary
    wins over an invalid one, so at most one flag is ever set.

    Args:
        code: Parsed confirmation code.
        footnotes: Raw DPV footnote string, e.g. ``"AAN1"``.

    Returns:
        ``(is_valid, needs_secondary_address, secondary_address_invalid)``.
    """
    if code == DPVConfirmation.FULL_MATCH:
        return True, False, False
    if code == DPVConfirmation.SECONDARY_MISSING:
        return False, True, False
    if code == DPVConfirmation.SECONDARY_INVALID:
        return False, False, True
    if code == DPVConfirmation.NOT_FOUND:
        return False, False, False

    if any(note in footnotes for note in _MISSING_SECONDARY_FOOTNOTES):
        return False, True, False
    if any(note in footnotes for note in _INVALID_SECONDARY_FOOTNOTES):
        return False, False, True
    return False, False, False


def parse_validation_response(data: dict[str, Any]) -> ValidationResult:
    """Parse a successful address-validation payload.

    Args:
        data: Decoded JSON body with ``address`` and ``additionalInfo`` blocks.

    Returns:
        Classified ValidationResult. The standardized address is always
        populated from whatever fields were echoed back.
    """
    address = data.get("address")
    if not isinstance(address, dict):
        address = {}
    info = data.get("additionalInfo")
    if not isinstance(info, dict):
        info = {}

    code = DPVConfirmation.parse(info.get("DPVConfirmation"))
    footnotes = info.get("DPVFootnotes") or ""
    is_valid, needs_secondary, secondary_invalid = classify_dpv(code, footnotes)

    standardized = StandardizedAddress(
        street_address=address.get("streetAddress") or "",
        secondary_address=address.get("secondaryAddress") or None,
        city=address.get("city") or "",
        state=address.get("state") or "",
        zip5=address.get("ZIPCode") or "",
        zip4=address.get("ZIPPlus4") or None,
    )

    return ValidationResult(
        is_valid=is_valid,
        needs_secondary_address=needs_secondary,
        secondary_address_invalid=secondary_invalid,
        standardized_address=standardized,
        confirmation_code=code,
        footnotes=footnotes,
        is_vacant=info.get("vacant") == "Y",
        is_business=info.get("business") == "Y",
        error=NOT_FOUND_MESSAGE if code == DPVConfirmation.NOT_FOUND else None,
    )


def normalize_zip5(zip_code: str) -> str | None:
    """Return the 5-digit ZIP from ``12345`` or ``12345-6789``, else None."""
    match = _ZIP_PATTERN.match(zip_code.strip())
    return match.group(1) if match else None


class USPSClient:
    """USPS address validation and ZIP lookup client.

    Args:
        client_id: OAuth client ID.
        client_secret: OAuth client secret.
        credentials: Shared credential cache.
        base_url: API base URL.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        credentials: CredentialCache,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def _require_configured(self) -> None:
        if not self.is_configured:
            msg = "USPS API credentials not configured"
            raise PostalNotConfiguredError(msg)

    async def _exchange_credential(self) -> Credential:
        """Exchange client credentials for a bearer token.

        Raises:
            CredentialExchangeError: On transport errors, non-2xx responses,
                or a body without ``access_token``.
        """
        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    f"{self._base_url}{TOKEN_PATH}",
                    data=form,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error(f"USPS token request failed: {type(e).__name__}")
            msg = f"USPS token request failed: {e}"
            raise CredentialExchangeError(msg) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"USPS OAuth error {response.status_code}")
            msg = f"USPS OAuth error: {response.status_code} - {response.text[:200]}"
            raise CredentialExchangeError(msg, status_code=response.status_code)

        try:
            payload = response.json()
            token = payload["access_token"]
            expires_in = float(payload.get("expires_in", DEFAULT_TOKEN_LIFETIME))
        except (ValueError, KeyError, TypeError) as e:
            msg = f"USPS token response is missing access_token: {e}"
            raise CredentialExchangeError(msg, status_code=response.status_code) from e

        if not isinstance(token, str) or not token:
            logger.error("USPS token response carried an empty access_token")
            msg = "USPS token response is missing access_token"
            raise CredentialExchangeError(msg, status_code=response.status_code)

        logger.info("Obtained USPS OAuth token")
        return Credential(token=token, expires_at=self._credentials.now() + expires_in)

    async def _bearer_headers(self) -> dict[str, str]:
        token = await self._credentials.get_token(self._exchange_credential)
        return {"Accept": "application/json", "Authorization": f"Bearer {token}"}

    async def validate(self, request: ValidationRequest, deadline: float | None = None) -> ValidationResult:
        """Standardize and validate an address.

        Args:
            request: Structured address to validate.
            deadline: Overall budget in seconds, covering the token exchange
                and the validation request.

        Returns:
            Classified ValidationResult. Not-found, HTTP errors, transport
            errors, unreadable bodies and deadline expiry are reported through
            ``error`` rather than raised.

        Raises:
            PostalNotConfiguredError: If client credentials are missing.
            CredentialExchangeError: If a token could not be obtained.
        """
        self._require_configured()
        try:
            async with asyncio.timeout(deadline):
                return await self._validate(request)
        except TimeoutError:
            logger.warning(f"USPS validation exceeded the {deadline}s deadline")
            return ValidationResult.failure("Validation timed out")

    async def _validate(self, request: ValidationRequest) -> ValidationResult:
        headers = await self._bearer_headers()

        params = {
            "streetAddress": request.street_address.strip(),
            "city": request.city.strip(),
            "state": request.state.strip(),
            "ZIPCode": request.zip_code.strip(),
        }
        if request.secondary_address and request.secondary_address.strip():
            params["secondaryAddress"] = request.secondary_address.strip()

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(f"{self._base_url}{ADDRESS_PATH}", params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"USPS validation transport error: {type(e).__name__}")
            return ValidationResult.failure(f"Validation request failed: {e}")

        if response.status_code == 404:
            return ValidationResult.failure(NOT_FOUND_MESSAGE, DPVConfirmation.NOT_FOUND)
        if response.status_code == 401:
            # Token revoked early; drop it so the next call re-authenticates
            self._credentials.clear()
        if not 200 <= response.status_code < 300:
            logger.warning(f"USPS validation HTTP error {response.status_code}")
            return ValidationResult.failure(f"Validation failed: {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            logger.warning("USPS validation returned a non-JSON body")
            return ValidationResult.failure("Validation failed: unreadable response")
        if not isinstance(data, dict):
            logger.warning(f"USPS validation returned a JSON {type(data).__name__}, expected an object")
            return ValidationResult.failure("Validation failed: unreadable response")

        result = parse_validation_response(data)
        logger.debug(f"USPS DPV confirmation {result.confirmation_code!r}, footnotes {result.footnotes!r}")
        return result

    async def lookup_city_state(self, zip_code: str, deadline: float | None = None) -> CityState | None:
        """Look up the city and state for a ZIP code.

        Args:
            zip_code: 5-digit ZIP or ZIP+4.
            deadline: Overall budget in seconds, covering the token exchange
                and the lookup request.

        Returns:
            CityState, or None for a malformed ZIP, a non-2xx response, an
            unreadable body, a transport error, or deadline expiry.

        Raises:
            PostalNotConfiguredError: If client credentials are missing.
            CredentialExchangeError: If a token could not be obtained.
        """
        self._require_configured()
        zip5 = normalize_zip5(zip_code)
        if zip5 is None:
            return None

        try:
            async with asyncio.timeout(deadline):
                return await self._lookup_city_state(zip5)
        except TimeoutError:
            logger.warning(f"USPS city-state lookup exceeded the {deadline}s deadline")
            return None

    async def _lookup_city_state(self, zip5: str) -> CityState | None:
        headers = await self._bearer_headers()
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    f"{self._base_url}{CITY_STATE_PATH}",
                    params={"ZIPCode": zip5},
                    headers=headers,
                )
            if not 200 <= response.status_code < 300:
                logger.warning(f"USPS city-state lookup HTTP error {response.status_code}")
                return None
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"USPS city-state lookup failed: {type(e).__name__}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"USPS city-state lookup returned a JSON {type(data).__name__}, expected an object")
            return None
        return CityState(city=data.get("city") or "", state=data.get("state") or "")
