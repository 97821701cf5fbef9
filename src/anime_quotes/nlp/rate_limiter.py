"""
Async token-bucket rate limiter for OpenAI calls.

Caps annotation requests at `rate` calls per `per` seconds independent of
the batch size. The clock and sleep functions are injectable for tests.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

# Tolerance for float drift in refill arithmetic
_EPSILON = 1e-9


class AsyncTokenBucket:
    """
    Token bucket shared by all annotation coroutines of a run.

    The bucket starts full (`rate` tokens) and refills continuously at
    rate/per tokens per second. acquire() waits until one token is available.
    """

    def __init__(
        self,
        rate: int,
        per: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        if per <= 0:
            raise ValueError(f"per must be positive, got {per}")

        self.rate = rate
        self.per = per
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(rate)
        self._last_refill = clock()
        self._lock = asyncio.Lock()

    @property
    def fill_rate(self) -> float:
        """Tokens added per second."""
        return self.rate / self.per

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._last_refill)
        self._tokens = min(float(self.rate), self._tokens + elapsed * self.fill_rate)
        self._last_refill = now

    async def acquire(self) -> None:
        """Wait for and consume a single token."""
        # Lock keeps waiters in FIFO order and the token count consistent
        async with self._lock:
            self._refill()
            while self._tokens < 1.0 - _EPSILON:
                wait = (1.0 - self._tokens) / self.fill_rate
                logger.debug(f"Rate limit reached, waiting {wait:.2f}s for next token")
                await self._sleep(wait)
                self._refill()
            self._tokens = max(0.0, self._tokens - 1.0)
