"""Data types shared by the pipeline controller and its collaborators."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..settings_store import SettingsStore, StorageKey


class Stage(str, Enum):
    TRANSLATE = "translate"
    POLISH = "polish"
    FORMAT = "format"


@dataclass(frozen=True)
class SourceFragment:
    """One text fragment as read from the host document."""

    content: str
    node_name: str = ""
    parent_node_name: str = ""
    font_style: str | None = None
    font_size: float | None = None


class ContentSource(Protocol):
    """Host-document side of the pipeline."""

    async def fetch_fragments(self) -> list[SourceFragment]:
        ...

    async def write_back(
        self, index: int, content: str | None, style_key: str | None
    ) -> None:
        """Apply results to fragment ``index``; ``None`` leaves a field unchanged."""
        ...


@dataclass
class WorkItem:
    """
    One fragment in flight.

    ``draft_content`` feeds the next stage once set; if nothing sets it the
    original content stands and write-back is a no-op for that field.
    """

    index: int
    fragment: SourceFragment
    draft_content: str | None = None
    draft_style_key: str | None = None
    skip_polish: bool = False
    failed: bool = False
    finalized: bool = False
    done: asyncio.Future = field(
        default_factory=lambda: asyncio.get_running_loop().create_future(), repr=False
    )
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def original(self) -> str:
        return self.fragment.content

    @property
    def current_content(self) -> str:
        return self.draft_content or self.fragment.content


@dataclass
class StageProgress:
    total: int = 0
    completed: int = 0


class PipelineProgress:
    """Per-stage totals and completed counts; completed never decreases."""

    def __init__(self):
        self._stages = {stage: StageProgress() for stage in Stage}

    def __getitem__(self, stage: Stage) -> StageProgress:
        return self._stages[stage]

    def set_total(self, stage: Stage, total: int) -> int:
        self._stages[stage].total = max(0, total)
        return self._stages[stage].total

    def add_total(self, stage: Stage, amount: int) -> int:
        return self.set_total(stage, self._stages[stage].total + amount)

    def advance(self, stage: Stage, amount: int = 1) -> int:
        if amount < 0:
            raise ValueError("completed counts only move forward")
        self._stages[stage].completed += amount
        return self._stages[stage].completed

    def snapshot(self) -> dict[str, dict[str, int]]:
        return {
            stage.value: {"total": p.total, "completed": p.completed}
            for stage, p in self._stages.items()
        }


@dataclass(frozen=True)
class PipelineOptions:
    translate: bool = True
    polish: bool = True
    format: bool = True

    @property
    def any_enabled(self) -> bool:
        return self.translate or self.polish or self.format

    @classmethod
    async def from_store(
        cls, store: SettingsStore, translate: bool = True
    ) -> "PipelineOptions":
        """Polish and format follow the auto-polish and auto-format toggles."""
        return cls(
            translate=translate,
            polish=await store.is_on(StorageKey.AUTO_POLISH),
            format=await store.is_on(StorageKey.AUTO_FORMAT),
        )


@dataclass
class PipelineReport:
    item_count: int = 0
    progress: dict[str, dict[str, int]] = field(default_factory=dict)
    failed_items: list[int] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    provider: str | None = None
    skipped_reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_count": self.item_count,
            "progress": self.progress,
            "failed_items": self.failed_items,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "provider": self.provider,
            "skipped_reason": self.skipped_reason,
        }
