"""
Shared test fixtures.

SpyTransport stands in for the HTTP layer: it records every send() call and
replays queued responses, so no test touches the network.
"""

import os
import sys
from typing import Dict, List, Optional, Union

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from krakenapi.transport import HttpTransport, TransportResponse


OK_EMPTY = '{"error": [], "result": {}}'


class SpyTransport(HttpTransport):
    """HttpTransport that records calls and replays queued responses."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, object]] = []
        self._responses: List[Union[TransportResponse, Exception]] = []
        self.closed = False

    def queue(self, body: str, status_code: int = 200) -> "SpyTransport":
        self._responses.append(TransportResponse(status_code=status_code, body=body))
        return self

    def queue_error(self, error: Exception) -> "SpyTransport":
        self._responses.append(error)
        return self

    def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> TransportResponse:
        self.calls.append({
            "method": method,
            "url": url,
            "headers": dict(headers or {}),
            "body": body,
            "timeout": timeout,
        })
        if not self._responses:
            return TransportResponse(status_code=200, body=OK_EMPTY)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True

    @property
    def last_call(self) -> Dict[str, object]:
        return self.calls[-1]


@pytest.fixture
def spy_transport() -> SpyTransport:
    """Fresh SpyTransport per test."""
    return SpyTransport()
