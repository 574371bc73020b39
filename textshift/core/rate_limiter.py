"""
Provider Rate Limiter - paced, concurrency-capped gate for outbound calls.

Every provider request acquires a slot first and releases it afterwards,
on success and on failure alike. Two properties hold per limiter:

- in-flight requests never exceed ``max_concurrency``; extra acquirers wait
  in FIFO order and are handed a slot directly when one is released
- consecutive dispatches are at least ``1 / requests_per_second`` apart,
  plus a small random jitter so parallel bursts do not line up
"""

import asyncio
import logging
import random
import time
from collections import deque
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class SlotRelease:
    """Idempotent release handle returned by :meth:`RateLimiter.acquire`."""

    __slots__ = ("_limiter", "_released")

    def __init__(self, limiter: "RateLimiter"):
        self._limiter = limiter
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def __call__(self) -> None:
        if self._released:
            return
        self._released = True
        self._limiter._release_slot()


class RateLimiter:
    """Per-provider-class request gate."""

    def __init__(
        self,
        name: str,
        requests_per_second: float,
        max_concurrency: int,
        max_jitter: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.name = name
        self.requests_per_second = requests_per_second
        self.max_concurrency = max_concurrency
        self.max_jitter = max_jitter
        self._interval = 1.0 / requests_per_second
        self._clock = clock
        self._sleep = sleep
        self._rng = rng

        self._in_flight = 0
        self._last_dispatch: float | None = None
        self._waiters: deque[asyncio.Future] = deque()
        self._pace_lock = asyncio.Lock()

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def waiting(self) -> int:
        return sum(1 for w in self._waiters if not w.done())

    @property
    def last_dispatch(self) -> float | None:
        return self._last_dispatch

    async def acquire(self) -> SlotRelease:
        """Wait for a slot and the pacing interval, then return a release handle."""
        await self._reserve_slot()
        try:
            await self._pace()
        except BaseException:
            self._release_slot()
            raise
        return SlotRelease(self)

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Scoped acquisition: the slot is released however the block exits."""
        release = await self.acquire()
        try:
            yield
        finally:
            release()

    async def _reserve_slot(self) -> None:
        if self._in_flight < self.max_concurrency and not self._waiters:
            self._in_flight += 1
            return

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        logger.debug(
            f"[RateLimiter:{self.name}] queued (in_flight={self._in_flight}, "
            f"waiting={len(self._waiters)})"
        )
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # A slot was handed over just before cancellation, pass it on
                self._release_slot()
            else:
                try:
                    self._waiters.remove(waiter)
                except ValueError:
                    pass
            raise

    async def _pace(self) -> None:
        async with self._pace_lock:
            if self._last_dispatch is not None:
                remaining = self._interval - (self._clock() - self._last_dispatch)
                if remaining > 0:
                    delay = remaining + self._rng() * self.max_jitter
                    logger.debug(f"[RateLimiter:{self.name}] pacing {delay:.3f}s")
                    await self._sleep(delay)
            self._last_dispatch = self._clock()

    def _release_slot(self) -> None:
        # Hand the slot straight to the next live waiter; in_flight is unchanged
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._in_flight -= 1
