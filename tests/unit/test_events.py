"""Tests for the progress channel and run scopes."""

import pytest

from textshift.core.constants import NotifyLevel, SwitchMode
from textshift.services.pipeline.events import EventKind, ProgressChannel
from textshift.services.pipeline.types import PipelineOptions, PipelineProgress, Stage
from textshift.services.settings_store import InMemorySettingsStore, StorageKey


@pytest.fixture
def channel():
    return ProgressChannel()


class TestProgressChannel:
    def test_scope_events_reach_subscribers(self, channel):
        events = []
        channel.subscribe(events.append)

        scope = channel.open_scope()
        scope.stage_total(Stage.TRANSLATE, 3)
        scope.stage_step(Stage.TRANSLATE, 1)

        assert [(e.kind, e.stage, e.value) for e in events] == [
            (EventKind.STAGE_TOTAL, Stage.TRANSLATE, 3),
            (EventKind.STAGE_STEP, Stage.TRANSLATE, 1),
        ]
        assert all(e.run_id == scope.run_id for e in events)

    def test_superseded_scope_is_dropped(self, channel):
        events = []
        channel.subscribe(events.append)

        old = channel.open_scope()
        new = channel.open_scope()

        assert old.emit(EventKind.ITEM_COMPLETE, value=0) is False
        assert new.emit(EventKind.ITEM_COMPLETE, value=0) is True
        assert [e.run_id for e in events] == [new.run_id]
        assert channel.current_run == new.run_id

    def test_closed_scope_is_dropped(self, channel):
        events = []
        channel.subscribe(events.append)

        with channel.open_scope() as scope:
            scope.info("inside")
        scope.info("after close")

        assert [e.message for e in events] == ["inside"]
        assert not scope.active

    def test_notification_levels(self, channel):
        events = []
        channel.subscribe(events.append)
        scope = channel.open_scope()

        scope.info("i")
        scope.warning("w")
        scope.error("e")

        assert [e.level for e in events] == [
            NotifyLevel.INFO,
            NotifyLevel.WARNING,
            NotifyLevel.NEGATIVE,
        ]

    def test_channel_notify_outside_run(self, channel):
        events = []
        channel.subscribe(events.append)

        channel.notify(NotifyLevel.POSITIVE, "Local caches cleared")

        assert events[0].run_id == 0
        assert events[0].kind is EventKind.NOTIFY

    def test_unsubscribe(self, channel):
        events = []
        unsubscribe = channel.subscribe(events.append)
        unsubscribe()
        unsubscribe()

        channel.notify(NotifyLevel.INFO, "ignored")
        assert events == []

    def test_failing_subscriber_does_not_break_others(self, channel):
        events = []

        def broken(event):
            raise RuntimeError("display gone")

        channel.subscribe(broken)
        channel.subscribe(events.append)

        channel.open_scope().finished()

        assert [e.kind for e in events] == [EventKind.RUN_FINISHED]


class TestPipelineProgress:
    def test_totals_and_steps(self):
        progress = PipelineProgress()

        progress.set_total(Stage.POLISH, 2)
        progress.add_total(Stage.POLISH, 3)
        progress.advance(Stage.POLISH)

        assert progress[Stage.POLISH].total == 5
        assert progress[Stage.POLISH].completed == 1

    def test_total_never_negative(self):
        progress = PipelineProgress()
        assert progress.set_total(Stage.FORMAT, -1) == 0

    def test_completed_only_moves_forward(self):
        progress = PipelineProgress()
        with pytest.raises(ValueError):
            progress.advance(Stage.FORMAT, -1)

    def test_snapshot(self):
        progress = PipelineProgress()
        progress.set_total(Stage.TRANSLATE, 4)

        assert progress.snapshot()["translate"] == {"total": 4, "completed": 0}
        assert set(progress.snapshot()) == {"translate", "polish", "format"}


class TestPipelineOptions:
    @pytest.mark.asyncio
    async def test_defaults_enable_every_stage(self):
        options = await PipelineOptions.from_store(InMemorySettingsStore())

        assert options == PipelineOptions()

    @pytest.mark.asyncio
    async def test_toggles_switch_stages_off(self):
        store = InMemorySettingsStore(
            {
                StorageKey.AUTO_POLISH: SwitchMode.OFF.value,
                StorageKey.AUTO_FORMAT: SwitchMode.OFF.value,
            }
        )

        options = await PipelineOptions.from_store(store, translate=False)

        assert options == PipelineOptions(translate=False, polish=False, format=False)
        assert not options.any_enabled
