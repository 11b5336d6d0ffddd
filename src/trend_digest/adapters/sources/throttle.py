"""Pacing policy for sequential requests to rate-limited APIs."""

import asyncio
from typing import Awaitable, Callable


class RequestThrottle:
    """Insert a fixed delay between consecutive calls.

    The first call passes immediately; every later call waits ``interval``
    seconds. ``sleep`` is injectable so tests can record delays instead of
    waiting.
    """

    def __init__(
        self,
        interval: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval < 0:
            raise ValueError("Interval cannot be negative")
        self.interval = interval
        self._sleep = sleep
        self.calls = 0

    async def wait(self) -> None:
        """Wait for the next call slot."""
        if self.calls > 0 and self.interval > 0:
            await self._sleep(self.interval)
        self.calls += 1

    def reset(self) -> None:
        self.calls = 0
