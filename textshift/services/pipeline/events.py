"""
Progress / notification channel.

Subscribers are plain callables receiving :class:`PipelineEvent`. Every run
publishes through its own :class:`RunScope`; opening a new scope supersedes
all earlier ones, and events from a superseded or closed scope are dropped
so a late callback from a previous run cannot touch the current display.
"""

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ...core.constants import NotifyLevel
from .types import Stage

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    CLEAR = "clear"
    ITEMS_TOTAL = "items_total"
    STAGE_TOTAL = "stage_total"
    STAGE_STEP = "stage_step"
    ITEM_COMPLETE = "item_complete"
    NOTIFY = "notify"
    RUN_FINISHED = "run_finished"


@dataclass(frozen=True)
class PipelineEvent:
    kind: EventKind
    run_id: int
    stage: Stage | None = None
    value: int | None = None
    level: NotifyLevel | None = None
    message: str | None = None


Subscriber = Callable[[PipelineEvent], None]


class ProgressChannel:
    """Fire-and-forget event sink shared by all runs."""

    def __init__(self):
        self._subscribers: list[Subscriber] = []
        self._run_ids = itertools.count(1)
        self._current_run: int | None = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def current_run(self) -> int | None:
        return self._current_run

    def open_scope(self) -> "RunScope":
        run_id = next(self._run_ids)
        self._current_run = run_id
        return RunScope(self, run_id)

    def notify(self, level: NotifyLevel, message: str) -> None:
        """Notification outside any run (e.g. cache reset)."""
        self._dispatch(PipelineEvent(EventKind.NOTIFY, 0, level=level, message=message))

    def _is_live(self, run_id: int) -> bool:
        return run_id == self._current_run

    def _dispatch(self, event: PipelineEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"[Pipeline] event subscriber failed on {event.kind.value}: {e}")


class RunScope:
    """Publishing handle for a single pipeline run."""

    def __init__(self, channel: ProgressChannel, run_id: int):
        self.channel = channel
        self.run_id = run_id
        self._closed = False

    @property
    def active(self) -> bool:
        return not self._closed and self.channel._is_live(self.run_id)

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> "RunScope":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def emit(self, kind: EventKind, **fields) -> bool:
        if not self.active:
            logger.debug(f"[Pipeline] dropped stale {kind.value} from run {self.run_id}")
            return False
        self.channel._dispatch(PipelineEvent(kind, self.run_id, **fields))
        return True

    def clear(self) -> None:
        self.emit(EventKind.CLEAR)

    def items_total(self, total: int) -> None:
        self.emit(EventKind.ITEMS_TOTAL, value=total)

    def stage_total(self, stage: Stage, total: int) -> None:
        self.emit(EventKind.STAGE_TOTAL, stage=stage, value=total)

    def stage_step(self, stage: Stage, completed: int) -> None:
        self.emit(EventKind.STAGE_STEP, stage=stage, value=completed)

    def item_complete(self, index: int) -> None:
        self.emit(EventKind.ITEM_COMPLETE, value=index)

    def notify(self, level: NotifyLevel, message: str) -> None:
        self.emit(EventKind.NOTIFY, level=level, message=message)

    def info(self, message: str) -> None:
        self.notify(NotifyLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.notify(NotifyLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.notify(NotifyLevel.NEGATIVE, message)

    def finished(self) -> None:
        self.emit(EventKind.RUN_FINISHED)
