"""
============================================================================
Kraken REST Client - Configuration
============================================================================

This module provides configuration management for the Kraken client:
- Environment variable parsing with type safety
- Default values for optional configuration
- Validation with fail-closed behavior (KRAKEN-CFG-001)
- Credentials never exposed through to_dict() or repr()

ENVIRONMENT VARIABLES:
    - KRAKEN_BASE_URL: API root (default: https://api.kraken.com)
    - KRAKEN_API_KEY: API key (optional, required for private endpoints)
    - KRAKEN_API_SECRET: Base64 API secret (optional, required for private endpoints)
    - KRAKEN_TIMEOUT_SECONDS: HTTP timeout (default: 30)

ERROR CODES:
    - KRAKEN-CFG-001: Invalid configuration

============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import os

from dotenv import load_dotenv

from krakenapi.authenticator import Credentials
from krakenapi.errors import KrakenConfigurationError, KrakenErrorCode

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Default Values
# =============================================================================

DEFAULT_BASE_URL = "https://api.kraken.com"

DEFAULT_TIMEOUT_SECONDS = 30.0

ENV_BASE_URL = "KRAKEN_BASE_URL"
ENV_API_KEY = "KRAKEN_API_KEY"
ENV_API_SECRET = "KRAKEN_API_SECRET"
ENV_TIMEOUT_SECONDS = "KRAKEN_TIMEOUT_SECONDS"


# =============================================================================
# KrakenConfig Class
# =============================================================================

@dataclass
class KrakenConfig:
    """
    Kraken client configuration.

    ============================================================================
    CONFIGURATION PARAMETERS:
    ============================================================================
    - base_url: API root, overridable for sandboxes and tests
    - api_key: API key (empty for public-only use)
    - api_secret: Base64 API secret (empty for public-only use)
    - timeout_seconds: Default HTTP timeout per request
    ============================================================================
    """

    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    api_secret: str = field(default="", repr=False)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        self.base_url = (self.base_url or "").strip().rstrip("/")
        self.api_key = (self.api_key or "").strip()
        self.api_secret = (self.api_secret or "").strip()

    def has_credentials(self) -> bool:
        return bool(self.api_key) and bool(self.api_secret)

    def credentials(self) -> Optional[Credentials]:
        """Credentials when both key and secret are set, otherwise None."""
        if not self.has_credentials():
            return None
        return Credentials(api_key=self.api_key, api_secret=self.api_secret)

    def validate(self) -> None:
        """
        Validate configuration completeness.

        Credentials are optional here; their absence only fails private calls.

        Raises:
            KrakenConfigurationError: If base_url or timeout_seconds is invalid
        """
        errors: List[str] = []

        if not self.base_url:
            errors.append(f"{ENV_BASE_URL} must not be empty")
        elif not self.base_url.startswith(("https://", "http://")):
            errors.append(f"{ENV_BASE_URL} must be an http(s) URL, got: {self.base_url}")

        if self.timeout_seconds <= 0:
            errors.append(
                f"{ENV_TIMEOUT_SECONDS} must be positive, got: {self.timeout_seconds}"
            )

        if bool(self.api_key) != bool(self.api_secret):
            logger.warning(
                f"[KRAKEN-CONFIG] Only one of {ENV_API_KEY}/{ENV_API_SECRET} is set | "
                f"private endpoints will fail with {KrakenErrorCode.MISSING_CREDENTIALS}"
            )

        if errors:
            error_msg = "Kraken configuration validation failed: " + "; ".join(errors)
            logger.error(f"[{KrakenErrorCode.CONFIG_INVALID}] {error_msg}")
            raise KrakenConfigurationError(error_msg)

        logger.info(
            f"[KRAKEN-CONFIG] Configuration validated | "
            f"base_url={self.base_url} | "
            f"timeout_seconds={self.timeout_seconds} | "
            f"authenticated={self.has_credentials()}"
        )

    @classmethod
    def from_environment(cls, validate: bool = True, dotenv: bool = True) -> "KrakenConfig":
        """
        Load configuration from environment variables.

        Args:
            validate: Whether to validate configuration after loading
            dotenv: Whether to load a .env file first (existing variables win)

        Raises:
            KrakenConfigurationError: If validation is requested and fails
        """
        if dotenv:
            load_dotenv()

        base_url = os.environ.get(ENV_BASE_URL, DEFAULT_BASE_URL)
        api_key = os.environ.get(ENV_API_KEY, "")
        api_secret = os.environ.get(ENV_API_SECRET, "")

        timeout_str = os.environ.get(ENV_TIMEOUT_SECONDS, str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout_seconds = float(timeout_str.strip())
        except ValueError:
            logger.warning(
                f"[KRAKEN-CONFIG] Invalid {ENV_TIMEOUT_SECONDS} value: {timeout_str}, "
                f"using default: {DEFAULT_TIMEOUT_SECONDS}"
            )
            timeout_seconds = DEFAULT_TIMEOUT_SECONDS

        config = cls(
            base_url=base_url,
            api_key=api_key,
            api_secret=api_secret,
            timeout_seconds=timeout_seconds,
        )

        logger.info(
            f"[KRAKEN-CONFIG] Loading configuration from environment | "
            f"{ENV_BASE_URL}={config.base_url} | "
            f"{ENV_TIMEOUT_SECONDS}={config.timeout_seconds} | "
            f"credentials_present={config.has_credentials()}"
        )

        if validate:
            config.validate()

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Configuration summary safe for logging."""
        return {
            "base_url": self.base_url,
            "timeout_seconds": self.timeout_seconds,
            "api_key": "[REDACTED]" if self.api_key else "",
            "api_secret": "[REDACTED]" if self.api_secret else "",
        }
