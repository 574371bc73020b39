"""Fire-and-forget usage counters."""

import asyncio
import logging

import httpx

from ..core.config import Settings

logger = logging.getLogger(__name__)

TRANSLATE_COUNTER = "translateUsageCount"
FORMAT_COUNTER = "stylelintUsageCount"
PROCESS_NODES_COUNTER = "processNodesCount"


class UsageRecorder:
    """
    Increments remote counters without ever blocking or failing a run.

    Each ``record`` call schedules a background task; failures are logged and
    dropped. ``drain`` awaits outstanding tasks (used at shutdown and in tests).
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.base_url = settings.USAGE_COUNTER_URL.rstrip("/")
        self.enabled = settings.usage_counters_enabled
        self._tasks: set[asyncio.Task] = set()

    async def increment(self, counter: str, value: int = 1) -> int | None:
        """Increment one counter and return its new value, or None on failure."""
        if not self.enabled:
            logger.debug(f"[Usage] skip recording {counter} (disabled)")
            return None
        try:
            response = await self.client.get(
                f"{self.base_url}/{counter}/incrementby/get",
                params={"value": value},
            )
            response.raise_for_status()
            updated = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"[Usage] failed to update {counter}: {e}")
            return None
        logger.debug(f"[Usage] {counter} -> {updated}")
        return updated

    def record(self, counter: str, value: int = 1) -> None:
        if not self.enabled or value <= 0:
            return
        task = asyncio.create_task(self.increment(counter, value))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def record_run(self, translate: bool, format_: bool, item_count: int) -> None:
        if translate:
            self.record(TRANSLATE_COUNTER)
        if format_:
            self.record(FORMAT_COUNTER)
        self.record(PROCESS_NODES_COUNTER, item_count)

    async def drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
