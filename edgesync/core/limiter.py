"""
Concurrency limiter for outbound store and cache API calls.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

from .constants import DEFAULT_CONCURRENCY

T = TypeVar("T")


class ConcurrencyLimiter:
    """
    Fixed-size permit pool.

    Each wrapped operation holds one permit for its whole duration; the
    permit is released even if the operation raises. Waiters are woken in
    the order they started waiting (asyncio.Semaphore is FIFO).
    """

    def __init__(self, capacity: int = DEFAULT_CONCURRENCY):
        if capacity < 1:
            raise ValueError(f"concurrency must be at least 1, got {capacity}")
        self.capacity = capacity
        self._semaphore = asyncio.Semaphore(capacity)
        self._in_flight = 0
        self._peak = 0

    @property
    def in_flight(self) -> int:
        """Operations currently holding a permit."""
        return self._in_flight

    @property
    def peak(self) -> int:
        """Highest number of simultaneous permit holders seen."""
        return self._peak

    async def __aenter__(self):
        await self._semaphore.acquire()
        self._in_flight += 1
        self._peak = max(self._peak, self._in_flight)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self._in_flight -= 1
        self._semaphore.release()
        return False

    async def run(self, operation: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        """Await operation(*args, **kwargs) while holding a permit."""
        async with self:
            return await operation(*args, **kwargs)
