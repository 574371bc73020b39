"""Batch pipeline: controller, progress events and shared types."""

from .controller import PipelineController
from .events import EventKind, PipelineEvent, ProgressChannel, RunScope
from .types import (
    ContentSource,
    PipelineOptions,
    PipelineProgress,
    PipelineReport,
    SourceFragment,
    Stage,
    WorkItem,
)

__all__ = [
    "ContentSource",
    "EventKind",
    "PipelineController",
    "PipelineEvent",
    "PipelineOptions",
    "PipelineProgress",
    "PipelineReport",
    "ProgressChannel",
    "RunScope",
    "SourceFragment",
    "Stage",
    "WorkItem",
]
