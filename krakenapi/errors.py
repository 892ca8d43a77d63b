# ============================================================================
# Kraken REST Client v0.1.0
# Error Taxonomy
# ============================================================================
#
# Purpose: Typed failures for every way a Kraken call can go wrong
#
# Every exception carries an ErrorKind and a stable error code so callers
# can branch on `err.kind` instead of walking the class hierarchy.
#
# Error Codes:
#   - KRAKEN-SEC-001: API key or secret missing
#   - KRAKEN-SEC-002: Secret not valid base64 / hash primitive unavailable
#   - KRAKEN-CLI-001: Network failure or non-2xx HTTP status
#   - KRAKEN-CLI-002: Response body does not match the expected shape
#   - KRAKEN-API-001: Exchange answered with a non-empty error list
#   - KRAKEN-CFG-001: Invalid client configuration
#
# ============================================================================

from enum import Enum
from typing import List, Optional


class ErrorKind(Enum):
    """Failure category of a Kraken client call."""
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
    CRYPTO_FAILURE = "CRYPTO_FAILURE"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    DECODE_FAILURE = "DECODE_FAILURE"
    API_ERROR = "API_ERROR"
    CONFIGURATION = "CONFIGURATION"


class KrakenErrorCode:
    """Error codes used in log lines and exception messages."""
    MISSING_CREDENTIALS = "KRAKEN-SEC-001"
    CRYPTO_FAILURE = "KRAKEN-SEC-002"
    TRANSPORT_FAILURE = "KRAKEN-CLI-001"
    DECODE_FAILURE = "KRAKEN-CLI-002"
    API_ERROR = "KRAKEN-API-001"
    CONFIG_INVALID = "KRAKEN-CFG-001"


class KrakenClientError(Exception):
    """
    Base exception for Kraken client errors.

    Attributes:
        kind: ErrorKind of the failure
        error_code: Stable code (e.g. "KRAKEN-SEC-001")
        message: Human-readable message without the code prefix
    """

    kind: ErrorKind = ErrorKind.API_ERROR
    default_code: str = KrakenErrorCode.API_ERROR

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.error_code = error_code or self.default_code
        self.message = message
        super().__init__(f"{self.error_code}: {message}")


class MissingCredentialsError(KrakenClientError):
    """Raised when a private operation is attempted without key and secret."""
    kind = ErrorKind.MISSING_CREDENTIALS
    default_code = KrakenErrorCode.MISSING_CREDENTIALS


class CryptoFailureError(KrakenClientError):
    """Raised when the secret cannot be decoded or hashing fails."""
    kind = ErrorKind.CRYPTO_FAILURE
    default_code = KrakenErrorCode.CRYPTO_FAILURE


class TransportError(KrakenClientError):
    """
    Raised on connection failures and non-success HTTP statuses.

    `status_code` is None when no response was received at all.
    """
    kind = ErrorKind.TRANSPORT_FAILURE
    default_code = KrakenErrorCode.TRANSPORT_FAILURE

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class DecodeError(KrakenClientError):
    """Raised when a response body does not decode into the expected shape."""
    kind = ErrorKind.DECODE_FAILURE
    default_code = KrakenErrorCode.DECODE_FAILURE


class APIError(KrakenClientError):
    """Raised when Kraken returns a non-empty `error` list."""
    kind = ErrorKind.API_ERROR
    default_code = KrakenErrorCode.API_ERROR

    def __init__(self, errors: List[str], path: Optional[str] = None):
        self.errors = list(errors)
        self.path = path
        super().__init__(
            f"Kraken returned errors for {path or 'request'}: {', '.join(self.errors)}"
        )


class KrakenConfigurationError(KrakenClientError):
    """Raised when KrakenConfig validation fails."""
    kind = ErrorKind.CONFIGURATION
    default_code = KrakenErrorCode.CONFIG_INVALID
