"""
Unit Tests for the Public/Private Query Dispatcher

Tests HttpJsonClient request composition and error propagation using a
spy transport (see tests/conftest.py):
- Public queries: GET, query string, no auth headers, no body
- Private queries: POST, signed headers, form body
- Missing credentials: zero transport calls
- Transport and decode failures propagate unchanged
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from krakenapi.authenticator import Credentials, RequestAuthenticator
from krakenapi.errors import DecodeError, MissingCredentialsError, TransportError
from krakenapi.http_json_client import HttpJsonClient
from krakenapi.nonce import NonceGenerator
from krakenapi.transport import ERROR_BODY_LIMIT


BASE_URL = "https://api.kraken.com"

BALANCE_SIGNATURE = (
    "pGpWiSKFzUmj7JH7DDPWqp3cWzHwouxKs02OJ3rS3opjf4Zyn6bOXVwr"
    "+nnrNdFfyzvhCkrzRAuBCLRgVAftcQ=="
)


@pytest.fixture
def authenticator() -> RequestAuthenticator:
    return RequestAuthenticator(
        Credentials("K", "c2VjcmV0"),
        NonceGenerator(clock=lambda: 1700000000000000),
    )


@pytest.fixture
def client(spy_transport, authenticator) -> HttpJsonClient:
    return HttpJsonClient(BASE_URL, spy_transport, authenticator)


# =============================================================================
# Public Queries
# =============================================================================

class TestPublicQueries:

    def test_ticker_url_method_and_body(self, client, spy_transport) -> None:
        spy_transport.queue('{"error": [], "result": {}}')

        body = client.execute_public_query("/0/public/Ticker", {"pair": "XBTUSD"})

        assert body == '{"error": [], "result": {}}'
        call = spy_transport.last_call
        assert call["method"] == "GET"
        assert call["url"] == "https://api.kraken.com/0/public/Ticker?pair=XBTUSD"
        assert call["body"] is None
        assert "API-Key" not in call["headers"]
        assert "API-Sign" not in call["headers"]

    def test_no_params_means_no_query_suffix(self, client, spy_transport) -> None:
        client.execute_public_query("/0/public/Time")
        assert spy_transport.last_call["url"] == "https://api.kraken.com/0/public/Time"

    def test_multiple_params_joined_without_trailing_ampersand(self, client) -> None:
        request = client.build_public_request(
            "/0/public/OHLC", {"pair": "XBTUSD", "interval": 60}
        )
        assert request.url == "https://api.kraken.com/0/public/OHLC?pair=XBTUSD&interval=60"
        assert not request.url.endswith("&")

    def test_public_query_works_without_authenticator(self, spy_transport) -> None:
        client = HttpJsonClient(BASE_URL, spy_transport)
        client.execute_public_query("/0/public/Time")
        assert len(spy_transport.calls) == 1

    def test_base_url_trailing_slash_stripped(self, spy_transport) -> None:
        client = HttpJsonClient("https://example.test/", spy_transport)
        assert client.build_public_request("/0/public/Time").url == "https://example.test/0/public/Time"


# =============================================================================
# Private Queries
# =============================================================================

class TestPrivateQueries:

    def test_balance_request_is_signed_post(self, client, spy_transport) -> None:
        client.execute_private_query("/0/private/Balance")

        call = spy_transport.last_call
        assert call["method"] == "POST"
        assert call["url"] == "https://api.kraken.com/0/private/Balance"
        assert call["body"] == "nonce=1700000000000000"
        assert call["headers"]["API-Key"] == "K"
        assert call["headers"]["API-Sign"] == BALANCE_SIGNATURE
        assert call["headers"]["Content-Type"].startswith("application/x-www-form-urlencoded")

    def test_private_params_go_in_body_not_url(self, client, spy_transport) -> None:
        client.execute_private_query("/0/private/TradeBalance", {"asset": "ZUSD"})

        call = spy_transport.last_call
        assert "?" not in call["url"]
        assert call["body"] == "asset=ZUSD&nonce=1700000000000000"

    def test_empty_secret_makes_zero_network_calls(self, spy_transport) -> None:
        auth = RequestAuthenticator(Credentials("K", ""))
        client = HttpJsonClient(BASE_URL, spy_transport, auth)

        with pytest.raises(MissingCredentialsError):
            client.execute_private_query("/0/private/Balance")

        assert spy_transport.calls == []

    def test_no_authenticator_makes_zero_network_calls(self, spy_transport) -> None:
        client = HttpJsonClient(BASE_URL, spy_transport)

        with pytest.raises(MissingCredentialsError):
            client.execute_private_query("/0/private/Balance")

        assert spy_transport.calls == []


# =============================================================================
# Execution
# =============================================================================

class TestExecute:

    def test_timeout_threaded_to_transport(self, client, spy_transport) -> None:
        client.execute_public_query("/0/public/Time", timeout=2.5)
        assert spy_transport.last_call["timeout"] == 2.5

        client.execute_private_query("/0/private/Balance", timeout=1.0)
        assert spy_transport.last_call["timeout"] == 1.0

    def test_execute_applies_decoder(self, client, spy_transport) -> None:
        spy_transport.queue("42")
        assert client.execute("/0/public/Time", decoder=int) == 42

    def test_execute_private_flag(self, client, spy_transport) -> None:
        client.execute("/0/private/Balance", decoder=str, private=True)
        assert spy_transport.last_call["method"] == "POST"

    def test_transport_error_propagates_unchanged(self, client, spy_transport) -> None:
        error = TransportError("boom", status_code=502)
        spy_transport.queue_error(error)

        with pytest.raises(TransportError) as exc_info:
            client.execute_public_query("/0/public/Time")

        assert exc_info.value is error

    @pytest.mark.parametrize("status_code", [404, 500, 503])
    def test_non_2xx_status_raises_even_with_valid_envelope(
        self, client, spy_transport, status_code
    ) -> None:
        spy_transport.queue(
            '{"error": [], "result": {"unixtime": 1, "rfc1123": "x"}}',
            status_code=status_code,
        )
        decoder_calls = []

        with pytest.raises(TransportError) as exc_info:
            client.execute("/0/public/Time", decoder=decoder_calls.append)

        assert exc_info.value.status_code == status_code
        assert exc_info.value.body.startswith('{"error": []')
        assert decoder_calls == []

    def test_non_2xx_body_truncated(self, client, spy_transport) -> None:
        spy_transport.queue("x" * 2000, status_code=502)

        with pytest.raises(TransportError) as exc_info:
            client.execute_private_query("/0/private/Balance")

        assert len(exc_info.value.body) == ERROR_BODY_LIMIT

    def test_decode_error_propagates_unchanged(self, client) -> None:
        error = DecodeError("bad shape")

        def failing_decoder(body: str):
            raise error

        with pytest.raises(DecodeError) as exc_info:
            client.execute("/0/public/Time", decoder=failing_decoder)

        assert exc_info.value is error

    def test_close_closes_transport(self, client, spy_transport) -> None:
        client.close()
        assert spy_transport.closed is True
