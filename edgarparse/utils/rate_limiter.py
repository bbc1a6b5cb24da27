"""
Rate limiter for SEC requests.

Implements token bucket algorithm to respect SEC's fair access policy
(10 requests per second). Tokens are refilled lazily from elapsed time on
each acquire, so no background thread is needed.
"""

import asyncio
import threading
import time
from typing import Optional

from .config import get_settings
from .logger import get_logger

logger = get_logger("edgarparse.utils.rate_limiter")


class RateLimiter:
    """
    Token bucket rate limiter for API requests.

    Thread-safe implementation that can be used for both sync and async code.
    A blocked acquire only blocks the calling thread or task.

    Attributes:
        rate: Tokens added per second.
        burst: Maximum bucket size (tokens).
    """

    def __init__(
        self,
        rate: Optional[float] = None,
        burst: Optional[int] = None,
    ) -> None:
        """
        Initialize rate limiter.

        Args:
            rate: Requests per second. Defaults to config value.
            burst: Maximum burst size. Defaults to config value.
        """
        settings = get_settings()

        self.rate = rate or settings.sec_api.rate_limit_per_second
        self.burst = burst or settings.sec_api.burst
        if self.rate <= 0 or self.burst < 1:
            raise ValueError(f"invalid rate limiter parameters: rate={self.rate}, burst={self.burst}")

        # Token bucket state
        self._tokens = float(self.burst)
        self._last_update = time.monotonic()

        # Thread safety
        self._lock = threading.Lock()
        self._async_lock: Optional[asyncio.Lock] = None

        logger.debug(
            f"Rate limiter initialized: rate={self.rate}/sec, burst={self.burst}"
        )

    def _refill_tokens(self) -> None:
        """Refill tokens based on elapsed time."""
        now = time.monotonic()
        elapsed = now - self._last_update
        self._tokens = min(self.burst, self._tokens + elapsed * self.rate)
        self._last_update = now

    def _try_take(self) -> float:
        """Take a token if one is available; otherwise return seconds to wait."""
        with self._lock:
            self._refill_tokens()

            if self._tokens >= 1:
                self._tokens -= 1
                return 0.0

            return (1 - self._tokens) / self.rate

    def acquire(
        self,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bool:
        """
        Acquire a token (blocking).

        Args:
            timeout: Maximum time to wait for a token (seconds).
                    None means wait indefinitely.
            cancel_event: Abandon the wait as soon as this event is set.

        Returns:
            True if token acquired, False if timeout exceeded or cancelled.
        """
        start_time = time.monotonic()

        while True:
            if cancel_event is not None and cancel_event.is_set():
                return False

            wait_time = self._try_take()
            if wait_time == 0.0:
                return True

            if timeout is not None:
                elapsed = time.monotonic() - start_time
                if elapsed + wait_time > timeout:
                    return False

            # Wait for tokens to refill
            if cancel_event is not None:
                if cancel_event.wait(min(wait_time, 0.1)):
                    return False
            else:
                time.sleep(min(wait_time, 0.1))

    async def acquire_async(self, timeout: Optional[float] = None) -> bool:
        """
        Acquire a token asynchronously.

        Cancelling the awaiting task abandons the wait.

        Args:
            timeout: Maximum time to wait for a token (seconds).

        Returns:
            True if token acquired, False if timeout exceeded.
        """
        if self._async_lock is None:
            self._async_lock = asyncio.Lock()

        start_time = time.monotonic()

        while True:
            async with self._async_lock:
                wait_time = self._try_take()
            if wait_time == 0.0:
                return True

            if timeout is not None:
                elapsed = time.monotonic() - start_time
                if elapsed + wait_time > timeout:
                    return False

            await asyncio.sleep(min(wait_time, 0.1))

    def wait(self) -> None:
        """Wait until a token is available (blocking)."""
        self.acquire(timeout=None)

    async def wait_async(self) -> None:
        """Wait until a token is available (async)."""
        await self.acquire_async(timeout=None)

    @property
    def available_tokens(self) -> float:
        """Get current number of available tokens."""
        with self._lock:
            self._refill_tokens()
            return self._tokens

    def reset(self) -> None:
        """Reset the rate limiter to full capacity."""
        with self._lock:
            self._tokens = float(self.burst)
            self._last_update = time.monotonic()


# Shared process-wide instance
_rate_limiter: Optional[RateLimiter] = None
_rate_limiter_lock = threading.Lock()


def get_rate_limiter() -> RateLimiter:
    """Get the global rate limiter instance."""
    global _rate_limiter
    with _rate_limiter_lock:
        if _rate_limiter is None:
            _rate_limiter = RateLimiter()
        return _rate_limiter
