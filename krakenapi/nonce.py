# ============================================================================
# Kraken REST Client v0.1.0
# Nonce Generator - Strictly Increasing Request Tokens
# ============================================================================
#
# Purpose: Issue one nonce per private request, each larger than the last
#
# MANDATE:
#   - Thread-safe with mutex lock (Kraken rejects non-increasing nonces)
#   - Seeded from wall-clock microseconds so restarts keep increasing
#   - Clock stepping backwards bumps the counter instead of repeating
#
# Error Codes:
#   - KRAKEN-NONCE-001: Clock went backwards (warning only)
#
# ============================================================================

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def microsecond_clock() -> int:
    """Wall-clock time in whole microseconds since the epoch."""
    return time.time_ns() // 1000


class NonceGenerator:
    """
    Thread-Safe Nonce Generator.

    Every call to next_nonce() returns max(clock(), last + 1), so two calls
    never observe the same value even when they land in the same microsecond
    or the clock is adjusted.

    Example Usage:
        nonces = NonceGenerator()
        n1 = nonces.next_nonce()
        n2 = nonces.next_nonce()
        assert n2 > n1
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        """
        Args:
            clock: Integer time source, microseconds by default
        """
        self._clock = clock or microsecond_clock
        self._last: Optional[int] = None
        self._last_clock: Optional[int] = None
        self._lock = threading.Lock()

    @property
    def last_nonce(self) -> Optional[int]:
        """Last issued nonce, or None before the first call."""
        with self._lock:
            return self._last

    def next_nonce(self) -> int:
        """Issue the next nonce."""
        with self._lock:
            now = int(self._clock())
            previous_clock = self._last_clock
            self._last_clock = now

            if self._last is None:
                self._last = now
                return now

            if now > self._last:
                self._last = now
            else:
                # Several calls per tick also land here; only warn on a real step back
                if previous_clock is not None and now < previous_clock:
                    logger.warning(
                        f"[KRAKEN-NONCE-001] Clock behind last nonce | "
                        f"clock={now} | last={self._last} | action=bump"
                    )
                self._last += 1

            return self._last
