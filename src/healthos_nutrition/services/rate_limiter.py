"""Minimum-spacing gate for calls to a throttled provider."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)


@dataclass
class RateLimiter:
    """Serializes callers so consecutive requests are spaced by an interval.

    One instance guards one provider for the whole process. Deployments with
    several replicas need a shared limiter instead; this one only sees its own
    event loop.
    """

    min_interval_seconds: float = 6.0
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    _last_request_at: float | None = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def acquire(self) -> None:
        """Wait until the next request slot, then claim it."""
        async with self._lock:
            if self._last_request_at is not None:
                elapsed = self.clock() - self._last_request_at
                wait = max(0.0, self.min_interval_seconds - elapsed)
                if wait > 0:
                    _logger.debug("Throttling provider request for %.2fs", wait)
                    await self.sleep(wait)
            self._last_request_at = self.clock()
