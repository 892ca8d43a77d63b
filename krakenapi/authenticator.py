# ============================================================================
# Kraken REST Client v0.1.0
# Request Authenticator - Signed Private Requests
# ============================================================================
#
# Purpose: Turn (path, params) into headers + body for a private call
#
# MANDATE:
#   - Credentials checked BEFORE any nonce, crypto or network work
#   - One nonce per request, strictly increasing per authenticator
#   - API key logged only in redacted form
#
# Error Codes:
#   - KRAKEN-SEC-001: API key or secret missing
#   - KRAKEN-SEC-002: Signature could not be computed
#
# ============================================================================

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from krakenapi.errors import KrakenErrorCode, MissingCredentialsError
from krakenapi.hmac_signer import build_post_body, generate_signature
from krakenapi.nonce import NonceGenerator

logger = logging.getLogger(__name__)

HEADER_API_KEY = "API-Key"
HEADER_API_SIGN = "API-Sign"
HEADER_CONTENT_TYPE = "Content-Type"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


@dataclass(frozen=True)
class Credentials:
    """
    Kraken API key pair.

    The secret is the base64 string shown by Kraken when the key is created.
    """
    api_key: str
    api_secret: str = field(repr=False)

    def is_complete(self) -> bool:
        """True when both key and secret are non-empty."""
        return bool(self.api_key) and bool(self.api_secret)

    def get_redacted_key(self) -> str:
        """
        Get redacted API key for logging purposes.

        Returns first 4 and last 4 characters only.
        """
        if self.api_key and len(self.api_key) > 8:
            return f"{self.api_key[:4]}...{self.api_key[-4:]}"
        return "[REDACTED]"


@dataclass(frozen=True)
class AuthenticatedRequest:
    """Headers and form body ready to POST to a private endpoint."""
    headers: Dict[str, str]
    body: str
    nonce: int


class RequestAuthenticator:
    """
    Signs private requests for one credential pair.

    Example Usage:
        auth = RequestAuthenticator(Credentials("key", "c2VjcmV0"))
        signed = auth.authenticate("/0/private/Balance")
        requests.post(url, headers=signed.headers, data=signed.body)
    """

    def __init__(
        self,
        credentials: Optional[Credentials],
        nonce_generator: Optional[NonceGenerator] = None
    ):
        self.credentials = credentials
        self.nonce_generator = nonce_generator or NonceGenerator()

    def has_credentials(self) -> bool:
        return self.credentials is not None and self.credentials.is_complete()

    def authenticate(
        self,
        path: str,
        params: Optional[Mapping[str, object]] = None
    ) -> AuthenticatedRequest:
        """
        Build the signed request descriptor for a private endpoint.

        Args:
            path: Endpoint path (e.g. "/0/private/Balance")
            params: Caller parameters, without nonce

        Returns:
            AuthenticatedRequest with API-Key/API-Sign headers and form body

        Raises:
            MissingCredentialsError: If key or secret is missing or empty
            CryptoFailureError: If the secret is not valid base64
            ValueError: If params contains the reserved 'nonce' key
        """
        if not self.has_credentials():
            logger.error(
                f"[{KrakenErrorCode.MISSING_CREDENTIALS}] Missing credentials | "
                f"path={path}"
            )
            raise MissingCredentialsError(
                "must provide API key and secret for private endpoints"
            )

        nonce = self.nonce_generator.next_nonce()
        body = build_post_body(params, nonce)
        signature = generate_signature(path, nonce, body, self.credentials.api_secret)

        logger.debug(
            f"[KRAKEN-AUTH] Request signed | "
            f"path={path} | nonce={nonce} | "
            f"api_key={self.credentials.get_redacted_key()} | signature=[REDACTED]"
        )

        return AuthenticatedRequest(
            headers={
                HEADER_API_KEY: self.credentials.api_key,
                HEADER_API_SIGN: signature,
                HEADER_CONTENT_TYPE: FORM_CONTENT_TYPE,
            },
            body=body,
            nonce=nonce,
        )
