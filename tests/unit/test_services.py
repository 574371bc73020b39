"""Tests for usage counters, service wiring and the CLI file source."""

import json

import httpx
import pytest

from tests.conftest import mock_client
from textshift.core.config import Settings
from textshift.services.container import build_services
from textshift.services.usage import (
    FORMAT_COUNTER,
    PROCESS_NODES_COUNTER,
    TRANSLATE_COUNTER,
    UsageRecorder,
)
from textshift.cli import JsonFileSource, build_parser


@pytest.fixture
def counting_settings(monkeypatch):
    monkeypatch.setattr(Settings, "USAGE_COUNTER_URL", "https://counter.test/api/textshift")
    monkeypatch.setattr(Settings, "ENVIRONMENT", "production")
    return Settings()


class TestUsageRecorder:
    @pytest.mark.asyncio
    async def test_disabled_in_tests(self, settings):
        async with mock_client(lambda r: httpx.Response(200, json=1)) as client:
            recorder = UsageRecorder(client, settings)
            assert recorder.enabled is False
            assert await recorder.increment(TRANSLATE_COUNTER) is None

    @pytest.mark.asyncio
    async def test_record_run(self, counting_settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=7)

        async with mock_client(handler) as client:
            recorder = UsageRecorder(client, counting_settings)
            recorder.record_run(translate=True, format_=False, item_count=4)
            await recorder.drain()

        paths = sorted(r.url.path for r in seen)
        assert paths == [
            f"/api/textshift/{PROCESS_NODES_COUNTER}/incrementby/get",
            f"/api/textshift/{TRANSLATE_COUNTER}/incrementby/get",
        ]
        assert FORMAT_COUNTER not in "".join(paths)
        nodes = next(r for r in seen if PROCESS_NODES_COUNTER in r.url.path)
        assert nodes.url.params["value"] == "4"

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self, counting_settings):
        async with mock_client(lambda r: httpx.Response(500)) as client:
            recorder = UsageRecorder(client, counting_settings)
            assert await recorder.increment(TRANSLATE_COUNTER) is None


class TestBuildServices:
    @pytest.mark.asyncio
    async def test_wiring(self, settings, store):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        services = build_services(settings, store=store, client=client, retry_wait=0)
        try:
            assert services.controller.orchestrator is services.orchestrator
            assert services.orchestrator.cache is services.translation_cache
            assert services.polisher.cache is services.polish_cache
            assert services.translation_cache is not services.polish_cache
            assert services.owns_client is False
        finally:
            await services.aclose()
            await client.aclose()


class TestJsonFileSource:
    @pytest.mark.asyncio
    async def test_reads_and_records(self, tmp_path):
        path = tmp_path / "in.json"
        path.write_text(
            json.dumps(
                ["你好", {"content": "Title", "node_name": "H1", "font_style": "Bold", "font_size": 16}],
                ensure_ascii=False,
            ),
            encoding="utf-8",
        )
        source = JsonFileSource(path)

        fragments = await source.fetch_fragments()
        await source.write_back(0, "Hello", None)
        await source.write_back(1, None, "style-key")

        assert fragments[1].node_name == "H1"
        assert fragments[1].font_size == 16
        assert source.records[0]["content"] == "Hello"
        assert source.records[0]["original"] == "你好"
        assert source.records[1] == {"content": "Title", "style_key": "style-key", "original": "Title"}

        out = tmp_path / "out.json"
        source.dump(out)
        assert json.loads(out.read_text(encoding="utf-8"))[0]["content"] == "Hello"

    @pytest.mark.asyncio
    async def test_rejects_non_list(self, tmp_path):
        path = tmp_path / "in.json"
        path.write_text("{}", encoding="utf-8")

        with pytest.raises(ValueError):
            await JsonFileSource(path).fetch_fragments()


def test_parser_flags():
    args = build_parser().parse_args(["in.json", "--target", "zh", "--no-polish"])

    assert args.target == "zh"
    assert args.no_polish is True
    assert args.no_translate is False
