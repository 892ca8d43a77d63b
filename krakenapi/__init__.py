# ============================================================================
# Kraken REST Client v0.1.0
# Package Exports
# ============================================================================
#
# Purpose: Kraken cryptocurrency exchange REST client
#
# Components:
#   - generate_signature: SHA256 + HMAC-SHA512 request signing
#   - NonceGenerator: Thread-safe, strictly increasing nonces
#   - RequestAuthenticator: API-Key/API-Sign headers + form body
#   - HttpJsonClient: Public (GET) / private (POST) query dispatcher
#   - RequestsTransport: requests-backed HTTP transport
#   - KrakenAPIClient: Market data, account and order operations
#
# ============================================================================

from krakenapi.authenticator import (
    AuthenticatedRequest,
    Credentials,
    RequestAuthenticator,
)
from krakenapi.config import KrakenConfig
from krakenapi.decimal_gateway import DecimalGateway
from krakenapi.decoder import decode_response
from krakenapi.endpoints import KrakenMethod
from krakenapi.errors import (
    APIError,
    CryptoFailureError,
    DecodeError,
    ErrorKind,
    KrakenClientError,
    KrakenConfigurationError,
    KrakenErrorCode,
    MissingCredentialsError,
    TransportError,
)
from krakenapi.hmac_signer import build_post_body, generate_signature
from krakenapi.http_json_client import HttpJsonClient, PreparedRequest
from krakenapi.intervals import Interval
from krakenapi.kraken_client import KrakenAPIClient
from krakenapi.nonce import NonceGenerator
from krakenapi.results import KrakenResponse
from krakenapi.transport import HttpTransport, RequestsTransport, TransportResponse

__all__ = [
    # Signing
    'generate_signature',
    'build_post_body',
    'NonceGenerator',
    'Credentials',
    'RequestAuthenticator',
    'AuthenticatedRequest',
    # Dispatch
    'HttpJsonClient',
    'PreparedRequest',
    'HttpTransport',
    'RequestsTransport',
    'TransportResponse',
    # Decoding
    'DecimalGateway',
    'decode_response',
    'KrakenResponse',
    # Client
    'KrakenAPIClient',
    'KrakenConfig',
    'KrakenMethod',
    'Interval',
    # Errors
    'ErrorKind',
    'KrakenErrorCode',
    'KrakenClientError',
    'MissingCredentialsError',
    'CryptoFailureError',
    'TransportError',
    'DecodeError',
    'APIError',
    'KrakenConfigurationError',
]

__version__ = '0.1.0'
