# ============================================================================
# Kraken REST Client v0.1.0
# HTTP JSON Client - Public/Private Query Dispatcher
# ============================================================================
#
# Purpose: Compose public (GET) and private (POST) requests, send them
#          through the transport and return the raw response body
#
# MANDATE:
#   - Public calls carry no authentication headers and no body
#   - Private calls are signed by the RequestAuthenticator
#   - No retries; every failure propagates to the caller unchanged
#   - Non-2xx statuses raise TransportError whatever transport is plugged in
#
# ============================================================================

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, TypeVar

from krakenapi.authenticator import RequestAuthenticator
from krakenapi.errors import KrakenErrorCode, MissingCredentialsError, TransportError
from krakenapi.hmac_signer import encode_params
from krakenapi.transport import ERROR_BODY_LIMIT, HttpTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")

Params = Optional[Mapping[str, object]]


@dataclass(frozen=True)
class PreparedRequest:
    """Fully composed request handed to the transport."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


class HttpJsonClient:
    """
    Dispatcher for Kraken public and private queries.

    Example Usage:
        client = HttpJsonClient("https://api.kraken.com", RequestsTransport())
        body = client.execute_public_query("/0/public/Ticker", {"pair": "XBTUSD"})
    """

    def __init__(
        self,
        base_url: str,
        transport: HttpTransport,
        authenticator: Optional[RequestAuthenticator] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self.authenticator = authenticator

    # ========================================================================
    # Request composition
    # ========================================================================

    def build_public_request(self, path: str, params: Params = None) -> PreparedRequest:
        """GET request with params in the query string."""
        url = self.base_url + path
        query = encode_params(params)
        if query:
            url = f"{url}?{query}"
        return PreparedRequest(method="GET", url=url)

    def build_private_request(self, path: str, params: Params = None) -> PreparedRequest:
        """
        Signed POST request.

        Raises:
            MissingCredentialsError: If no usable credentials are configured
        """
        if self.authenticator is None:
            logger.error(
                f"[{KrakenErrorCode.MISSING_CREDENTIALS}] No authenticator configured | "
                f"path={path}"
            )
            raise MissingCredentialsError(
                "must provide API key and secret for private endpoints"
            )

        signed = self.authenticator.authenticate(path, params)
        return PreparedRequest(
            method="POST",
            url=self.base_url + path,
            headers=dict(signed.headers),
            body=signed.body,
        )

    # ========================================================================
    # Execution
    # ========================================================================

    def execute_public_query(
        self,
        path: str,
        params: Params = None,
        timeout: Optional[float] = None
    ) -> str:
        """Send an unauthenticated GET and return the response body."""
        return self._send(self.build_public_request(path, params), timeout)

    def execute_private_query(
        self,
        path: str,
        params: Params = None,
        timeout: Optional[float] = None
    ) -> str:
        """Send a signed POST and return the response body."""
        return self._send(self.build_private_request(path, params), timeout)

    def execute(
        self,
        path: str,
        decoder: Callable[[str], T],
        params: Params = None,
        private: bool = False,
        timeout: Optional[float] = None
    ) -> T:
        """
        Dispatch a query and decode the body with `decoder`.

        DecodeError raised by the decoder propagates unchanged.
        """
        if private:
            body = self.execute_private_query(path, params, timeout)
        else:
            body = self.execute_public_query(path, params, timeout)
        return decoder(body)

    def _send(self, request: PreparedRequest, timeout: Optional[float]) -> str:
        logger.debug(f"[KRAKEN-CLI] {request.method} {request.url}")
        response = self.transport.send(
            request.method,
            request.url,
            headers=request.headers or None,
            body=request.body,
            timeout=timeout,
        )
        if not response.ok:
            logger.error(
                f"[{KrakenErrorCode.TRANSPORT_FAILURE}] HTTP error | "
                f"method={request.method} | url={request.url} | status={response.status_code}"
            )
            raise TransportError(
                f"{request.method} {request.url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.body[:ERROR_BODY_LIMIT]
            )
        return response.body

    def close(self) -> None:
        self.transport.close()
