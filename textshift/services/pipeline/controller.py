"""
Pipeline Controller.

Drives a batch of work items through translate / polish / format and
writes every item back exactly once.

Flow for a run with translation enabled:

    items ──┬─ no translation needed ──────────────────────── format ─┐
            ├─ glossary hit (polish skipped) ──────────────── format ─┤
            └─ chunks ── translate ── polish (eligible) ───── format ─┴─ write-back

Chunks run concurrently and each chunk moves on to polish + format as soon
as its own translation returns. A failure on one item or chunk falls back
to the untransformed content for those items; the rest of the batch keeps
going.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from ...core.constants import Language, NotifyLevel, Platform, ProviderName
from ...core.exceptions import (
    FormatError,
    ProviderConfigurationError,
    ProviderUnavailableError,
    TextShiftError,
)
from ..format.formatter import format_content, formatted_style_key
from ..glossary import Glossary, default_glossary
from ..polish.polisher import ContentPolisher
from ..settings_store import SettingsStore, StorageKey
from ..translate.orchestrator import TranslationOrchestrator, needs_translation
from ..translate.providers import TranslationProvider
from ..usage import UsageRecorder
from .events import ProgressChannel, RunScope
from .types import (
    ContentSource,
    PipelineOptions,
    PipelineProgress,
    PipelineReport,
    Stage,
    WorkItem,
)

logger = logging.getLogger(__name__)

EMPTY_SELECTION_WARNING = "Please select at least one node"
NO_TASKS_WARNING = "No tasks to run"
CACHES_CLEARED_MESSAGE = "Local caches cleared"


@dataclass
class _RunContext:
    scope: RunScope
    source: ContentSource
    options: PipelineOptions
    target: Language
    platform: Platform
    progress: PipelineProgress
    report: PipelineReport

    def set_total(self, stage: Stage, total: int) -> None:
        self.scope.stage_total(stage, self.progress.set_total(stage, total))

    def add_total(self, stage: Stage, amount: int) -> None:
        self.scope.stage_total(stage, self.progress.add_total(stage, amount))

    def step(self, stage: Stage, amount: int = 1) -> None:
        self.scope.stage_step(stage, self.progress.advance(stage, amount))

    def mark_failed(self, item: WorkItem) -> None:
        if not item.failed:
            item.failed = True
            self.report.failed_items.append(item.index)


class PipelineController:
    def __init__(
        self,
        orchestrator: TranslationOrchestrator,
        polisher: ContentPolisher,
        store: SettingsStore,
        channel: ProgressChannel,
        glossary: Glossary = default_glossary,
        usage: UsageRecorder | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.orchestrator = orchestrator
        self.polisher = polisher
        self.store = store
        self.channel = channel
        self.glossary = glossary
        self.usage = usage
        self._clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(
        self, source: ContentSource, options: PipelineOptions | None = None
    ) -> PipelineReport:
        """
        Run one batch; the returned report summarizes what happened.

        Without explicit ``options`` the stages come from the store toggles.
        """
        if options is None:
            options = await PipelineOptions.from_store(self.store)
        with self.channel.open_scope() as scope:
            return await self._run(scope, source, options)

    async def clear_caches(self) -> None:
        await self.orchestrator.cache.clear()
        if self.polisher.cache is not self.orchestrator.cache:
            await self.polisher.cache.clear()
        self.channel.notify(NotifyLevel.POSITIVE, CACHES_CLEARED_MESSAGE)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def _run(
        self, scope: RunScope, source: ContentSource, options: PipelineOptions
    ) -> PipelineReport:
        started = self._clock()
        report = PipelineReport()

        fragments = await source.fetch_fragments()
        items = [
            WorkItem(index=i, fragment=fragment)
            for i, fragment in enumerate(fragments)
            if fragment.content
        ]
        report.item_count = len(items)

        if not items:
            scope.warning(EMPTY_SELECTION_WARNING)
            report.skipped_reason = "empty_selection"
            return report
        if not options.any_enabled:
            scope.warning(NO_TASKS_WARNING)
            report.skipped_reason = "no_tasks"
            return report

        target = Language(await self.store.get(StorageKey.TARGET_LANGUAGE))
        platform = Platform(await self.store.get(StorageKey.PLATFORM))
        ctx = _RunContext(
            scope=scope,
            source=source,
            options=options,
            target=target,
            platform=platform,
            progress=PipelineProgress(),
            report=report,
        )
        logger.info(
            f"[Pipeline] run {scope.run_id} begin: {len(items)} items, target={target.value}, "
            f"platform={platform.value}, stages={self._stage_names(options)}"
        )

        if self.usage is not None:
            self.usage.record_run(options.translate, options.format, len(items))

        scope.clear()
        scope.items_total(len(items))
        if not options.translate:
            ctx.set_total(Stage.TRANSLATE, 0)
        ctx.set_total(Stage.FORMAT, len(items) if options.format else 0)
        polish_upfront = options.polish and not options.translate
        ctx.set_total(
            Stage.POLISH,
            sum(1 for item in items if self.polisher.needs_polishing(item.original))
            if polish_upfront
            else 0,
        )

        tasks: list[asyncio.Future] = []
        remaining = items
        if options.translate:
            remaining, translate_tasks = await self._schedule_translation(ctx, items)
            tasks.extend(translate_tasks)

        tasks.extend(
            asyncio.ensure_future(self._finish_item(ctx, item, polish=polish_upfront))
            for item in remaining
        )

        await asyncio.gather(*tasks)
        await asyncio.gather(*(item.done for item in items))

        report.elapsed_seconds = self._clock() - started
        report.progress = ctx.progress.snapshot()
        logger.info(
            f"[Pipeline] run {scope.run_id} finished in {report.elapsed_seconds:.3f}s, "
            f"{len(report.failed_items)} failed"
        )
        scope.info(f"All tasks completed in {report.elapsed_seconds:.1f} seconds")
        scope.finished()
        return report

    @staticmethod
    def _stage_names(options: PipelineOptions) -> str:
        names = [
            stage.value
            for stage, on in (
                (Stage.TRANSLATE, options.translate),
                (Stage.POLISH, options.polish),
                (Stage.FORMAT, options.format),
            )
            if on
        ]
        return "+".join(names)

    # ------------------------------------------------------------------
    # Translate stage
    # ------------------------------------------------------------------

    async def _schedule_translation(
        self, ctx: _RunContext, items: list[WorkItem]
    ) -> tuple[list[WorkItem], list[asyncio.Future]]:
        """Partition items and start translation chunks.

        Returns the items that only need the later stages, plus the scheduled
        chunk and glossary tasks.
        """
        source_lang = ctx.target.counterpart
        remaining: list[WorkItem] = []
        glossary_hits: list[WorkItem] = []
        pending: list[WorkItem] = []

        for item in items:
            if not needs_translation(item.original, ctx.target):
                remaining.append(item)
                continue
            hit = self.glossary.lookup(item.original, source_lang, ctx.target)
            if hit:
                logger.debug(f"[Glossary] hit for item {item.index}")
                item.draft_content = hit
                item.skip_polish = True
                glossary_hits.append(item)
            else:
                pending.append(item)

        adapter: TranslationProvider | None = None
        if pending:
            adapter = await self._resolve_adapter(ctx)
            if adapter is None:
                remaining.extend(pending)
                pending = []

        ctx.set_total(Stage.TRANSLATE, len(pending))
        tasks = [
            asyncio.ensure_future(self._finish_item(ctx, item, polish=False))
            for item in glossary_hits
        ]
        if adapter is not None:
            glossary_mode = await self.store.is_on(StorageKey.TERMBASE)
            size = max(1, adapter.pipeline_chunk_size)
            for start in range(0, len(pending), size):
                chunk = pending[start : start + size]
                tasks.append(
                    asyncio.ensure_future(
                        self._translate_chunk(ctx, chunk, adapter, glossary_mode)
                    )
                )
        return remaining, tasks

    async def _resolve_adapter(self, ctx: _RunContext) -> TranslationProvider | None:
        """Pick the provider for this run, or None when translation must be skipped."""
        preferred = await self.store.get(StorageKey.TRANSLATION_PROVIDER)
        try:
            selection = await self.orchestrator.resolve_provider(ProviderName(preferred))
        except ValueError:
            logger.error(f"[Pipeline] unsupported translation provider: {preferred}")
            ctx.scope.error(f"Unsupported translation provider: {preferred}")
            return None
        except ProviderUnavailableError as e:
            logger.error(f"[Pipeline] {e.detail}")
            ctx.scope.error(e.detail)
            return None

        if selection.warning:
            ctx.scope.warning(selection.warning)
        try:
            await selection.provider.ensure_configured()
        except ProviderConfigurationError as e:
            logger.error(f"[Pipeline] {e.detail}")
            ctx.scope.error(e.detail)
            return None

        ctx.report.provider = selection.name.value
        return selection.provider

    async def _translate_chunk(
        self,
        ctx: _RunContext,
        chunk: list[WorkItem],
        adapter: TranslationProvider,
        glossary_mode: bool,
    ) -> None:
        translated_ok = True
        try:
            results = await self.orchestrator.translate_batch(
                [item.original for item in chunk], ctx.target, adapter, glossary_mode
            )
        except TextShiftError as e:
            translated_ok = False
            logger.error(
                f"[Pipeline] translation chunk of {len(chunk)} failed: {e.detail}"
            )
        except Exception as e:
            translated_ok = False
            logger.error(
                f"[Pipeline] translation chunk of {len(chunk)} failed: {e}", exc_info=True
            )
        else:
            for item, value in zip(chunk, results):
                item.draft_content = value or None

        if not translated_ok:
            for item in chunk:
                ctx.mark_failed(item)

        ctx.step(Stage.TRANSLATE, len(chunk))

        polish = ctx.options.polish and translated_ok
        if polish:
            eligible = sum(1 for item in chunk if self._wants_polish(item))
            if eligible:
                ctx.add_total(Stage.POLISH, eligible)

        await asyncio.gather(
            *(self._finish_item(ctx, item, polish=polish) for item in chunk)
        )

    # ------------------------------------------------------------------
    # Polish, format, write-back
    # ------------------------------------------------------------------

    def _wants_polish(self, item: WorkItem) -> bool:
        return not item.skip_polish and self.polisher.needs_polishing(item.current_content)

    async def _finish_item(self, ctx: _RunContext, item: WorkItem, polish: bool) -> None:
        try:
            if polish and self._wants_polish(item):
                try:
                    item.draft_content = await self.polisher.polish(
                        item.current_content, ctx.target
                    )
                except Exception as e:
                    ctx.mark_failed(item)
                    logger.error(f"[Pipeline] polish failed for item {item.index}: {e}")
                ctx.step(Stage.POLISH)

            if ctx.options.format:
                try:
                    self._apply_format(ctx, item)
                except FormatError as e:
                    ctx.mark_failed(item)
                    logger.error(f"[Pipeline] format failed for item {item.index}: {e}")
                ctx.step(Stage.FORMAT)
        finally:
            await self._write_back(ctx, item)

    def _apply_format(self, ctx: _RunContext, item: WorkItem) -> None:
        fragment = item.fragment
        try:
            formatted = format_content(
                item.current_content,
                ctx.target,
                fragment.node_name,
                fragment.parent_node_name,
            )
            style_key = formatted_style_key(
                fragment.font_style, fragment.font_size, ctx.target, ctx.platform
            )
        except Exception as e:
            raise FormatError(str(e), original_error=e, node_name=fragment.node_name) from e
        # Both must resolve, otherwise the item is left as it is
        if not formatted or not style_key:
            return
        item.draft_content = formatted
        item.draft_style_key = style_key

    async def _write_back(self, ctx: _RunContext, item: WorkItem) -> None:
        async with item.lock:
            if item.finalized:
                return
            item.finalized = True
            try:
                await ctx.source.write_back(
                    item.index, item.draft_content or None, item.draft_style_key or None
                )
            except Exception as e:
                ctx.mark_failed(item)
                logger.error(f"[Pipeline] write-back failed for item {item.index}: {e}")
            finally:
                ctx.scope.item_complete(item.index)
                if not item.done.done():
                    item.done.set_result(None)
