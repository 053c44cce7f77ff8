"""
Process-wide dispatch rate limiter.

Serializes outbound fetches: one operation in flight at a time, dispatched in
submission order, with a minimum spacing between consecutive dispatches.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

from webextract.observability.metrics import METRICS

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class DispatchRateLimiter:
    """
    Single-slot scheduler with a minimum interval between dispatches.

    Features:
    - At most one scheduled operation executes at any time
    - Consecutive dispatches are at least ``min_interval`` seconds apart
    - FIFO dispatch order (``asyncio.Lock`` wakes waiters in arrival order)
    - Waiting callers suspend instead of blocking the event loop

    One instance is meant to live for the whole process and be shared by
    every fetcher that talks to the network.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last_dispatch: Optional[float] = None
        self._dispatched = 0

        logger.debug("Rate limiter initialized", min_interval=min_interval)

    @property
    def dispatched(self) -> int:
        """Number of operations dispatched so far."""
        return self._dispatched

    @property
    def is_busy(self) -> bool:
        """True while an operation holds the slot."""
        return self._lock.locked()

    async def schedule(self, operation: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """
        Wait for the slot, then run ``operation(*args, **kwargs)``.

        Args:
            operation: Coroutine function to execute
            *args: Positional arguments for the operation
            **kwargs: Keyword arguments for the operation

        Returns:
            Whatever the operation returns; its exceptions propagate unchanged.
        """
        async with self._lock:
            waited = await self._wait_for_interval()
            self._last_dispatch = self._clock()
            self._dispatched += 1

            METRICS["rate_limiter_wait_seconds"].observe(waited)
            if waited > 0:
                logger.debug("Dispatch delayed by rate limiter", waited=round(waited, 3))

            return await operation(*args, **kwargs)

    async def _wait_for_interval(self) -> float:
        """Sleep until ``min_interval`` has elapsed since the previous dispatch."""
        if self._last_dispatch is None:
            return 0.0

        waited = 0.0
        remaining = self._last_dispatch + self.min_interval - self._clock()
        # Loop guards against timers firing a hair early.
        while remaining > 0:
            await asyncio.sleep(remaining)
            waited += remaining
            remaining = self._last_dispatch + self.min_interval - self._clock()
        return waited

    def get_stats(self) -> dict[str, Any]:
        """Get current limiter statistics."""
        since_last = None
        if self._last_dispatch is not None:
            since_last = self._clock() - self._last_dispatch
        return {
            "min_interval": self.min_interval,
            "dispatched": self._dispatched,
            "busy": self.is_busy,
            "time_since_last_dispatch": since_last,
        }
