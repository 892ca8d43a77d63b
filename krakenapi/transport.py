# ============================================================================
# Kraken REST Client v0.1.0
# HTTP Transport - requests-backed send()
# ============================================================================
#
# Purpose: Send one HTTP request and hand back status + body text
#
# The transport does not retry and does not interpret payloads. Timeouts are
# enforced here, either per call or from the transport default.
#
# Error Codes:
#   - KRAKEN-CLI-001: Connection failure, timeout or non-2xx status
#
# ============================================================================

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from krakenapi.errors import KrakenErrorCode, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "krakenapi-python/0.1.0"

# Body excerpt kept on TransportError for diagnostics
ERROR_BODY_LIMIT = 512


@dataclass(frozen=True)
class TransportResponse:
    """Raw HTTP response."""
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport(ABC):
    """Capability to send a single HTTP request."""

    @abstractmethod
    def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> TransportResponse:
        """
        Send a request.

        Returns:
            TransportResponse with a 2xx status

        Raises:
            TransportError: On network failure or non-2xx status
        """

    def close(self) -> None:
        """Release transport resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class RequestsTransport(HttpTransport):
    """
    HttpTransport backed by a requests.Session.

    Example Usage:
        with RequestsTransport(timeout=10.0) as transport:
            response = transport.send("GET", "https://api.kraken.com/0/public/Time")
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        self._session = session or requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent

    def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> TransportResponse:
        request_headers = {"User-Agent": self.user_agent}
        if headers:
            request_headers.update(headers)

        effective_timeout = self.timeout if timeout is None else timeout

        try:
            response = self._session.request(
                method.upper(),
                url,
                headers=request_headers,
                data=body.encode('utf-8') if body is not None else None,
                timeout=effective_timeout
            )
        except requests.RequestException as e:
            logger.error(
                f"[{KrakenErrorCode.TRANSPORT_FAILURE}] Request failed | "
                f"method={method.upper()} | url={url} | error={type(e).__name__}: {e}"
            )
            raise TransportError(f"{method.upper()} {url} failed: {e}") from e

        result = TransportResponse(status_code=response.status_code, body=response.text)

        if not result.ok:
            logger.error(
                f"[{KrakenErrorCode.TRANSPORT_FAILURE}] HTTP error | "
                f"method={method.upper()} | url={url} | status={result.status_code}"
            )
            raise TransportError(
                f"{method.upper()} {url} returned HTTP {result.status_code}",
                status_code=result.status_code,
                body=result.body[:ERROR_BODY_LIMIT]
            )

        logger.debug(
            f"[KRAKEN-HTTP] {method.upper()} {url} | "
            f"status={result.status_code} | bytes={len(result.body)}"
        )
        return result

    def close(self) -> None:
        """Close HTTP session."""
        self._session.close()
        logger.debug("[KRAKEN-HTTP] Transport closed")
