"""
Unit Tests for the requests-backed HTTP Transport

requests.Session is replaced with a MagicMock; no network access.
"""

from unittest.mock import MagicMock

import pytest
import requests

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from krakenapi.errors import ErrorKind, KrakenErrorCode, TransportError
from krakenapi.transport import (
    DEFAULT_USER_AGENT,
    ERROR_BODY_LIMIT,
    RequestsTransport,
    TransportResponse,
)


def make_session(status_code: int = 200, text: str = '{"error":[],"result":{}}') -> MagicMock:
    session = MagicMock()
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    session.request.return_value = response
    return session


class TestSend:

    def test_get_request(self) -> None:
        session = make_session(text='{"ok": true}')
        transport = RequestsTransport(session=session, timeout=12.0)

        result = transport.send("get", "https://api.kraken.com/0/public/Time")

        assert result == TransportResponse(status_code=200, body='{"ok": true}')
        session.request.assert_called_once_with(
            "GET",
            "https://api.kraken.com/0/public/Time",
            headers={"User-Agent": DEFAULT_USER_AGENT},
            data=None,
            timeout=12.0,
        )

    def test_post_request_with_headers_and_body(self) -> None:
        session = make_session()
        transport = RequestsTransport(session=session)

        transport.send(
            "POST",
            "https://api.kraken.com/0/private/Balance",
            headers={"API-Key": "K", "API-Sign": "sig"},
            body="nonce=1",
        )

        _, kwargs = session.request.call_args
        assert kwargs["data"] == b"nonce=1"
        assert kwargs["headers"]["API-Key"] == "K"
        assert kwargs["headers"]["API-Sign"] == "sig"
        assert kwargs["headers"]["User-Agent"] == DEFAULT_USER_AGENT

    def test_per_call_timeout_overrides_default(self) -> None:
        session = make_session()
        transport = RequestsTransport(session=session, timeout=30.0)

        transport.send("GET", "https://api.kraken.com/0/public/Time", timeout=0.5)

        assert session.request.call_args[1]["timeout"] == 0.5


class TestFailures:

    @pytest.mark.parametrize("status_code", [400, 404, 500, 503])
    def test_non_2xx_raises_transport_error(self, status_code: int) -> None:
        transport = RequestsTransport(session=make_session(status_code, "x" * 2000))

        with pytest.raises(TransportError) as exc_info:
            transport.send("GET", "https://api.kraken.com/0/public/Time")

        error = exc_info.value
        assert error.kind is ErrorKind.TRANSPORT_FAILURE
        assert error.error_code == KrakenErrorCode.TRANSPORT_FAILURE
        assert error.status_code == status_code
        assert len(error.body) == ERROR_BODY_LIMIT

    @pytest.mark.parametrize(
        "exc",
        [requests.ConnectionError("refused"), requests.Timeout("slow")],
        ids=["connection", "timeout"],
    )
    def test_request_exception_raises_transport_error(self, exc) -> None:
        session = MagicMock()
        session.request.side_effect = exc
        transport = RequestsTransport(session=session)

        with pytest.raises(TransportError) as exc_info:
            transport.send("GET", "https://api.kraken.com/0/public/Time")

        assert exc_info.value.status_code is None
        assert exc_info.value.__cause__ is exc

    def test_no_retry_on_failure(self) -> None:
        session = make_session(status_code=503)
        transport = RequestsTransport(session=session)

        with pytest.raises(TransportError):
            transport.send("GET", "https://api.kraken.com/0/public/Time")

        assert session.request.call_count == 1


class TestLifecycle:

    def test_close_closes_session(self) -> None:
        session = make_session()
        RequestsTransport(session=session).close()
        session.close.assert_called_once()

    def test_context_manager_closes_session(self) -> None:
        session = make_session()
        with RequestsTransport(session=session) as transport:
            transport.send("GET", "https://api.kraken.com/0/public/Time")
        session.close.assert_called_once()

    def test_default_session_is_requests_session(self) -> None:
        transport = RequestsTransport()
        try:
            assert isinstance(transport._session, requests.Session)
        finally:
            transport.close()
