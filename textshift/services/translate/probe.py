"""Cached liveness probe for the Google translation family."""

import asyncio
import logging
import time
from collections.abc import Callable

import httpx

logger = logging.getLogger(__name__)


class LivenessProbe:
    """
    Cheap reachability check whose result is reused for ``ttl`` seconds.

    Concurrent callers share one in-flight probe.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        timeout: float = 3.0,
        ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.url = url
        self.timeout = timeout
        self.ttl = ttl
        self._clock = clock
        self._result: bool | None = None
        self._checked_at = 0.0
        self._lock = asyncio.Lock()

    def invalidate(self) -> None:
        self._result = None

    async def is_reachable(self) -> bool:
        async with self._lock:
            if self._result is not None and self._clock() - self._checked_at < self.ttl:
                return self._result
            self._result = await self._check()
            self._checked_at = self._clock()
            return self._result

    async def _check(self) -> bool:
        try:
            response = await self.client.get(
                self.url,
                params={"client": "gtx", "dt": "t", "sl": "en", "tl": "zh", "q": "test"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.warning(f"[Probe] Google translation unreachable: {e.__class__.__name__}")
            return False
        if response.is_success:
            logger.debug("[Probe] Google translation reachable")
            return True
        logger.warning(f"[Probe] Google translation returned HTTP {response.status_code}")
        return False
