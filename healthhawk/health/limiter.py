"""Concurrency limiter — caps simultaneous in-flight checks.

A counting semaphore gates admission; waiters are admitted in arrival order.
The slot is returned when the operation settles, whether it succeeded,
raised, or was cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConcurrencyLimiter:
    """Runs deferred operations with at most ``limit`` in flight."""

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"Concurrency limit must be positive, got {limit}")
        self.limit = limit
        self._semaphore = asyncio.Semaphore(limit)
        self.in_flight = 0
        self.peak = 0

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        """Wait for a free slot, then await ``factory()`` while holding it."""
        async with self._semaphore:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            try:
                return await factory()
            finally:
                self.in_flight -= 1

    async def gather(self, factories: Iterable[Callable[[], Awaitable[T]]]) -> list[T | BaseException]:
        """Run every factory through the limiter; results keep input order.

        Exceptions are returned in place of results so one failing operation
        never aborts the others.
        """
        tasks = [self.run(f) for f in factories]
        results: list[Any] = await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug("Limiter settled %d operations (peak %d/%d)", len(results), self.peak, self.limit)
        return results
