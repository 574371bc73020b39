"""Tests for translation provider adapters (httpx MockTransport)."""

import hashlib
import json
from unittest.mock import MagicMock
from urllib.parse import parse_qs

import httpx
import pytest

from tests.conftest import mock_client
from textshift.core.config import Settings
from textshift.core.constants import Language, ProviderName
from textshift.core.exceptions import (
    ProviderConfigurationError,
    ProviderError,
    ProviderResponseError,
)
from textshift.services.settings_store import InMemorySettingsStore, StorageKey
from textshift.services.translate.providers import (
    BaiduProvider,
    GoogleAdvancedProvider,
    GoogleBasicProvider,
    GoogleFreeProvider,
    build_providers,
)


def _query(request: httpx.Request) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(request.url.query.decode()).items()}


class TestGoogleBasic:
    @pytest.mark.asyncio
    async def test_batch_request(self, store, settings):
        seen = []

        def handler(request):
            seen.append(request)
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "data": {
                        "translations": [
                            {"translatedText": f"EN({q})"} for q in body["q"]
                        ]
                    }
                },
            )

        async with mock_client(handler) as client:
            provider = GoogleBasicProvider(client, store, settings, retry_wait=0)
            result = await provider.translate(
                ["你好", "世界"], Language.ZH, Language.EN
            )

        assert result == ["EN(你好)", "EN(世界)"]
        request = seen[0]
        assert request.method == "POST"
        assert _query(request)["key"] == "google-key"
        assert json.loads(request.content) == {
            "q": ["你好", "世界"],
            "target": "en",
            "source": "zh",
        }

    @pytest.mark.asyncio
    async def test_missing_key(self, empty_store, settings):
        async with mock_client(lambda r: httpx.Response(200)) as client:
            provider = GoogleBasicProvider(client, empty_store, settings)
            with pytest.raises(ProviderConfigurationError) as exc_info:
                await provider.translate(["你好"], Language.ZH, Language.EN)

        assert exc_info.value.missing == [StorageKey.GOOGLE_API_KEY.value]

    @pytest.mark.asyncio
    async def test_malformed_response(self, store, settings):
        async with mock_client(lambda r: httpx.Response(200, json={"foo": 1})) as client:
            provider = GoogleBasicProvider(client, store, settings, retry_wait=0)
            with pytest.raises(ProviderResponseError):
                await provider.translate(["你好"], Language.ZH, Language.EN)

    @pytest.mark.asyncio
    async def test_result_count_mismatch(self, store, settings):
        payload = {"data": {"translations": [{"translatedText": "only one"}]}}
        async with mock_client(lambda r: httpx.Response(200, json=payload)) as client:
            provider = GoogleBasicProvider(client, store, settings, retry_wait=0)
            with pytest.raises(ProviderResponseError):
                await provider.translate(["一", "二"], Language.ZH, Language.EN)

    @pytest.mark.asyncio
    async def test_oversized_batch_rejected(self, store, settings):
        async with mock_client(lambda r: httpx.Response(200)) as client:
            provider = GoogleBasicProvider(client, store, settings)
            with pytest.raises(ValueError):
                await provider.translate(
                    ["x"] * (provider.max_batch_size + 1), Language.EN, Language.ZH
                )


class TestGoogleAdvanced:
    @pytest.fixture
    def advanced_settings(self, monkeypatch):
        monkeypatch.setattr(Settings, "GOOGLE_PROJECT_ID", "proj")
        monkeypatch.setattr(Settings, "GOOGLE_GLOSSARY_ID", "ui-terms")
        return Settings()

    @pytest.mark.asyncio
    async def test_glossary_translations_win(self, store, advanced_settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "translations": [{"translatedText": "plain"}],
                    "glossaryTranslations": [{"translatedText": "glossary"}],
                },
            )

        async with mock_client(handler) as client:
            provider = GoogleAdvancedProvider(
                client, store, advanced_settings, retry_wait=0
            )
            result = await provider.translate(
                ["确定"], Language.ZH, Language.EN, glossary_mode=True
            )

        assert result == ["glossary"]
        request = seen[0]
        assert request.url.path.endswith("/projects/proj/locations/global:translateText")
        assert request.headers["Authorization"] == "Bearer google-token"
        body = json.loads(request.content)
        assert body["glossaryConfig"]["glossary"].endswith("/glossaries/ui-terms")

    @pytest.mark.asyncio
    async def test_without_glossary_mode(self, store, advanced_settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "translations": [{"translatedText": "plain"}],
                    "glossaryTranslations": [{"translatedText": "glossary"}],
                },
            )

        async with mock_client(handler) as client:
            provider = GoogleAdvancedProvider(
                client, store, advanced_settings, retry_wait=0
            )
            result = await provider.translate(["确定"], Language.ZH, Language.EN)

        assert result == ["plain"]
        assert "glossaryConfig" not in json.loads(seen[0].content)

    @pytest.mark.asyncio
    async def test_requires_project(self, store, monkeypatch):
        monkeypatch.setattr(Settings, "GOOGLE_PROJECT_ID", "")
        async with mock_client(lambda r: httpx.Response(200)) as client:
            provider = GoogleAdvancedProvider(client, store, Settings())
            with pytest.raises(ProviderConfigurationError):
                await provider.ensure_configured()


class TestGoogleFree:
    @pytest.mark.asyncio
    async def test_joins_segments(self, empty_store, settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200, json=[[["Hello, ", "你好，", None], ["world", "世界", None]], None, "zh"]
            )

        async with mock_client(handler) as client:
            provider = GoogleFreeProvider(client, empty_store, settings, retry_wait=0)
            result = await provider.translate(["你好，世界"], Language.ZH, Language.EN)

        assert result == ["Hello, world"]
        assert _query(seen[0]) == {
            "client": "gtx",
            "dt": "t",
            "sl": "zh",
            "tl": "en",
            "q": "你好，世界",
        }

    @pytest.mark.asyncio
    async def test_bad_shape(self, empty_store, settings):
        async with mock_client(lambda r: httpx.Response(200, json={"x": 1})) as client:
            provider = GoogleFreeProvider(client, empty_store, settings, retry_wait=0)
            with pytest.raises(ProviderResponseError):
                await provider.translate(["你好"], Language.ZH, Language.EN)

    def test_single_text_batches(self, empty_store, settings):
        provider = GoogleFreeProvider(MagicMock(spec=httpx.AsyncClient), empty_store, settings)
        assert provider.max_batch_size == 1


class TestBaidu:
    @pytest.mark.asyncio
    async def test_signed_request(self, store, settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "from": "zh",
                    "to": "en",
                    "trans_result": [
                        {"src": "你好", "dst": "Hello"},
                        {"src": "世界", "dst": "World"},
                    ],
                },
            )

        async with mock_client(handler) as client:
            provider = BaiduProvider(
                client, store, settings, retry_wait=0, salt_factory=lambda: 42
            )
            result = await provider.translate(
                ["你好", "世界"], Language.ZH, Language.EN, glossary_mode=True
            )

        assert result == ["Hello", "World"]
        query = _query(seen[0])
        assert query["q"] == "你好\n世界"
        assert query["from"] == "zh"
        assert query["to"] == "en"
        assert query["appid"] == "baidu-app"
        assert query["salt"] == "42"
        assert query["needIntervene"] == "1"
        assert query["sign"] == BaiduProvider.sign("baidu-app", "你好\n世界", 42, "baidu-secret")

    @pytest.mark.asyncio
    async def test_multiline_fragments_keep_their_lines(self, store, settings):
        seen = []

        def handler(request):
            seen.append(request)
            lines = _query(request)["q"].split("\n")
            return httpx.Response(
                200, json={"trans_result": [{"src": s, "dst": f"<{s}>"} for s in lines]}
            )

        async with mock_client(handler) as client:
            provider = BaiduProvider(client, store, settings, retry_wait=0)
            result = await provider.translate(
                ["你好", "第一行\n\n第二行", "世界"], Language.ZH, Language.EN
            )

        assert result == ["<你好>", "<第一行>\n\n<第二行>", "<世界>"]
        assert _query(seen[0])["q"] == "你好\n第一行\n第二行\n世界"

    @pytest.mark.asyncio
    async def test_line_count_mismatch(self, store, settings):
        payload = {"trans_result": [{"src": "你好", "dst": "Hello"}]}
        async with mock_client(lambda r: httpx.Response(200, json=payload)) as client:
            provider = BaiduProvider(client, store, settings, retry_wait=0)
            with pytest.raises(ProviderResponseError):
                await provider.translate(["你好", "世界"], Language.ZH, Language.EN)

    def test_sign_is_md5(self):
        expected = hashlib.md5(b"appq42secret").hexdigest()
        assert BaiduProvider.sign("app", "q", 42, "secret") == expected

    @pytest.mark.asyncio
    async def test_error_code(self, store, settings):
        payload = {"error_code": "54001", "error_msg": "Invalid Sign"}
        async with mock_client(lambda r: httpx.Response(200, json=payload)) as client:
            provider = BaiduProvider(client, store, settings, retry_wait=0)
            with pytest.raises(ProviderError) as exc_info:
                await provider.translate(["你好"], Language.ZH, Language.EN)

        assert "54001" in exc_info.value.detail
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_missing_credentials(self, settings):
        store = InMemorySettingsStore({StorageKey.BAIDU_APP_ID: "app"})
        async with mock_client(lambda r: httpx.Response(200)) as client:
            provider = BaiduProvider(client, store, settings)
            with pytest.raises(ProviderConfigurationError) as exc_info:
                await provider.ensure_configured()

        assert exc_info.value.missing == [StorageKey.BAIDU_SECRET.value]


def test_build_providers(store, settings):
    providers = build_providers(MagicMock(spec=httpx.AsyncClient), store, settings)

    assert set(providers) == set(ProviderName)
    assert all(providers[name].name is name for name in ProviderName)
