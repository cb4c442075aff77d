"""Minimum-interval pacing between consecutive publishes."""

import asyncio
import time
from typing import Awaitable, Callable, Optional


class RateLimiter:
    """
    Keeps consecutive publishes at least ``interval_ms`` apart.

    The limiter only gates time: call ``wait()`` before publishing and
    ``mark()`` once the publish has been submitted.
    """

    def __init__(
        self,
        interval_ms: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.interval_ms = interval_ms
        self._clock = clock
        self._sleep = sleep
        self.last_publish_time: Optional[float] = None
        self.last_delay_ms: float = 0.0

    def remaining_ms(self) -> float:
        """Milliseconds left before the next publish is allowed."""
        if self.last_publish_time is None:
            return 0.0
        elapsed_ms = (self._clock() - self.last_publish_time) * 1000
        return max(self.interval_ms - elapsed_ms, 0.0)

    async def wait(self) -> float:
        """Suspend until the interval has passed; return the delay in ms."""
        delay_ms = self.remaining_ms()
        self.last_delay_ms = delay_ms
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000)
        return delay_ms

    def mark(self) -> float:
        """Record a publish at the current clock time."""
        self.last_publish_time = self._clock()
        return self.last_publish_time
