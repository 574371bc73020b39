"""
Translation provider adapters.

One adapter per backend. Each knows its request shape, how many texts fit in
one request, and how to pull translated strings out of the response. All of
them return exactly one output per input or raise.
"""

import hashlib
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from ...core.config import Settings
from ...core.constants import Language, ProviderName
from ...core.exceptions import (
    ProviderConfigurationError,
    ProviderError,
    ProviderResponseError,
)
from ...utils.http import json_body, parse_model, request_with_retry
from ..settings_store import SettingsStore, StorageKey

logger = logging.getLogger(__name__)


# =============================================================================
# RESPONSE MODELS
# =============================================================================


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TranslatedText(_Lenient):
    translatedText: str = ""


class TranslationList(_Lenient):
    translations: list[TranslatedText]


class GoogleBasicResponse(_Lenient):
    """v2 answers ``{data: {translations}}``; some proxies drop the envelope."""

    data: TranslationList | None = None
    translations: list[TranslatedText] | None = None

    def texts(self) -> list[str] | None:
        if self.data is not None:
            return [t.translatedText for t in self.data.translations]
        if self.translations is not None:
            return [t.translatedText for t in self.translations]
        return None


class GoogleAdvancedResponse(_Lenient):
    translations: list[TranslatedText] | None = None
    glossaryTranslations: list[TranslatedText] | None = None


class BaiduItem(_Lenient):
    src: str = ""
    dst: str


class BaiduResponse(_Lenient):
    trans_result: list[BaiduItem] | None = None
    error_code: str | int | None = None
    error_msg: str | None = None


# =============================================================================
# BASE ADAPTER
# =============================================================================


class TranslationProvider(ABC):
    """Base class for translation backends."""

    name: ProviderName
    max_batch_size: int = 1
    pipeline_chunk_size: int = 10

    def __init__(
        self,
        client: httpx.AsyncClient,
        store: SettingsStore,
        settings: Settings,
        retry_wait: float = 1.0,
    ):
        self.client = client
        self.store = store
        self.settings = settings
        self.retry_wait = retry_wait
        self.cache_ttl = settings.TRANSLATION_CACHE_TTL_SECONDS

    async def _require(self, *keys: StorageKey) -> list[str]:
        values = [await self.store.get(key) for key in keys]
        missing = [key.value for key, value in zip(keys, values) if not value]
        if missing:
            raise ProviderConfigurationError(self.name.value, missing)
        return values

    async def ensure_configured(self) -> None:
        """Raise ProviderConfigurationError if credentials are missing."""
        return None

    async def translate(
        self,
        texts: list[str],
        source: Language,
        target: Language,
        glossary_mode: bool = False,
    ) -> list[str]:
        if not texts:
            return []
        if len(texts) > self.max_batch_size:
            raise ValueError(
                f"{self.name.value} accepts at most {self.max_batch_size} texts per call"
            )
        await self.ensure_configured()
        results = await self._translate(texts, source, target, glossary_mode)
        if len(results) != len(texts):
            raise ProviderResponseError(
                f"expected {len(texts)} results, got {len(results)}", self.name.value
            )
        return results

    @abstractmethod
    async def _translate(
        self,
        texts: list[str],
        source: Language,
        target: Language,
        glossary_mode: bool,
    ) -> list[str]:
        pass

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await request_with_retry(
            self.client,
            method,
            url,
            provider=self.name.value,
            attempts=self.settings.PROVIDER_MAX_RETRIES,
            wait_min=self.retry_wait,
            timeout=self.settings.PROVIDER_REQUEST_TIMEOUT,
            **kwargs,
        )
        return json_body(response, self.name.value)


# =============================================================================
# ADAPTERS
# =============================================================================


class GoogleBasicProvider(TranslationProvider):
    """Cloud Translation v2 with an API key."""

    name = ProviderName.GOOGLE_BASIC

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.max_batch_size = self.settings.GOOGLE_BATCH_SIZE
        self.pipeline_chunk_size = self.settings.GOOGLE_CHUNK_SIZE

    async def ensure_configured(self) -> None:
        await self._require(StorageKey.GOOGLE_API_KEY)

    async def _translate(self, texts, source, target, glossary_mode):
        (api_key,) = await self._require(StorageKey.GOOGLE_API_KEY)
        payload = await self._request(
            "POST",
            self.settings.GOOGLE_BASIC_URL,
            params={"key": api_key},
            json={"q": texts, "target": target.value, "source": source.value},
        )
        translated = parse_model(GoogleBasicResponse, payload, self.name.value).texts()
        if translated is None:
            raise ProviderResponseError("missing translations", self.name.value)
        return translated


class GoogleAdvancedProvider(TranslationProvider):
    """Cloud Translation v3 with optional glossary enforcement."""

    name = ProviderName.GOOGLE_ADVANCED

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.max_batch_size = self.settings.GOOGLE_BATCH_SIZE
        self.pipeline_chunk_size = self.settings.GOOGLE_CHUNK_SIZE

    async def ensure_configured(self) -> None:
        await self._require(StorageKey.GOOGLE_ACCESS_TOKEN)
        if not self.settings.GOOGLE_PROJECT_ID:
            raise ProviderConfigurationError(self.name.value, ["GOOGLE_PROJECT_ID"])

    def _parent(self) -> str:
        return (
            f"projects/{self.settings.GOOGLE_PROJECT_ID}"
            f"/locations/{self.settings.GOOGLE_LOCATION}"
        )

    async def _translate(self, texts, source, target, glossary_mode):
        (token,) = await self._require(StorageKey.GOOGLE_ACCESS_TOKEN)
        body: dict[str, Any] = {
            "contents": texts,
            "sourceLanguageCode": source.value,
            "targetLanguageCode": target.value,
            "mimeType": "text/plain",
        }
        use_glossary = glossary_mode and bool(self.settings.GOOGLE_GLOSSARY_ID)
        if use_glossary:
            body["glossaryConfig"] = {
                "glossary": f"{self._parent()}/glossaries/{self.settings.GOOGLE_GLOSSARY_ID}"
            }

        payload = await self._request(
            "POST",
            f"{self.settings.GOOGLE_ADVANCED_URL}/{self._parent()}:translateText",
            headers={"Authorization": f"Bearer {token}"},
            json=body,
        )
        parsed = parse_model(GoogleAdvancedResponse, payload, self.name.value)
        chosen = parsed.translations
        if use_glossary and parsed.glossaryTranslations:
            chosen = parsed.glossaryTranslations
        if chosen is None:
            raise ProviderResponseError("missing translations", self.name.value)
        return [t.translatedText for t in chosen]


class GoogleFreeProvider(TranslationProvider):
    """Public single-string endpoint, no credentials."""

    name = ProviderName.GOOGLE_FREE

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.max_batch_size = self.settings.GOOGLE_FREE_BATCH_SIZE
        self.pipeline_chunk_size = self.settings.GOOGLE_FREE_CHUNK_SIZE

    async def _translate(self, texts, source, target, glossary_mode):
        results = []
        for text in texts:
            payload = await self._request(
                "GET",
                self.settings.GOOGLE_FREE_URL,
                params={
                    "client": "gtx",
                    "dt": "t",
                    "sl": source.value,
                    "tl": target.value,
                    "q": text,
                },
            )
            results.append(self._join_segments(payload))
        return results

    def _join_segments(self, payload: Any) -> str:
        # Response is a nested array: payload[0] == [[chunk, original, ...], ...]
        try:
            segments = payload[0]
            parts = [segment[0] for segment in segments]
        except (TypeError, IndexError, KeyError) as e:
            raise ProviderResponseError("unexpected segment array", self.name.value, e) from e
        if not all(isinstance(part, str) for part in parts):
            raise ProviderResponseError("non-string segment", self.name.value)
        return "".join(parts)


class BaiduProvider(TranslationProvider):
    """Signed-request provider; batches by joining lines with newlines."""

    name = ProviderName.BAIDU

    def __init__(
        self,
        *args: Any,
        salt_factory: Callable[[], int] | None = None,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.max_batch_size = self.settings.BAIDU_BATCH_SIZE
        self.pipeline_chunk_size = self.settings.BAIDU_CHUNK_SIZE
        self._salt_factory = salt_factory or (lambda: int(time.time() * 1000))

    async def ensure_configured(self) -> None:
        await self._require(StorageKey.BAIDU_APP_ID, StorageKey.BAIDU_SECRET)

    @staticmethod
    def sign(app_id: str, query: str, salt: int | str, secret: str) -> str:
        raw = f"{app_id}{query}{salt}{secret}".encode("utf-8")
        return hashlib.md5(raw, usedforsecurity=False).hexdigest()

    async def _translate(self, texts, source, target, glossary_mode):
        app_id, secret = await self._require(
            StorageKey.BAIDU_APP_ID, StorageKey.BAIDU_SECRET
        )
        # One trans_result entry comes back per non-blank line
        layouts = [text.split("\n") for text in texts]
        lines = [line for layout in layouts for line in layout if line.strip()]
        if not lines:
            return list(texts)
        query = "\n".join(lines)
        salt = self._salt_factory()
        payload = await self._request(
            "GET",
            self.settings.BAIDU_TRANSLATE_URL,
            params={
                "q": query,
                "from": source.value,
                "to": target.value,
                "appid": app_id,
                "salt": salt,
                "sign": self.sign(app_id, query, salt, secret),
                "needIntervene": 1 if glossary_mode else 0,
            },
        )
        parsed = parse_model(BaiduResponse, payload, self.name.value)
        if parsed.error_code not in (None, "", "52000", 52000):
            raise ProviderError(
                f"Baidu error {parsed.error_code}: {parsed.error_msg or 'unknown'}",
                provider=self.name.value,
                retryable=False,
            )
        if parsed.trans_result is None:
            raise ProviderResponseError("missing trans_result", self.name.value)
        if len(parsed.trans_result) != len(lines):
            raise ProviderResponseError(
                f"expected {len(lines)} lines, got {len(parsed.trans_result)}",
                self.name.value,
            )
        translated = iter(item.dst for item in parsed.trans_result)
        return [
            "\n".join(next(translated) if line.strip() else line for line in layout)
            for layout in layouts
        ]


PROVIDER_CLASSES: dict[ProviderName, type[TranslationProvider]] = {
    ProviderName.GOOGLE_ADVANCED: GoogleAdvancedProvider,
    ProviderName.GOOGLE_BASIC: GoogleBasicProvider,
    ProviderName.GOOGLE_FREE: GoogleFreeProvider,
    ProviderName.BAIDU: BaiduProvider,
}


def build_providers(
    client: httpx.AsyncClient,
    store: SettingsStore,
    settings: Settings,
    retry_wait: float = 1.0,
) -> dict[ProviderName, TranslationProvider]:
    return {
        name: cls(client, store, settings, retry_wait=retry_wait)
        for name, cls in PROVIDER_CLASSES.items()
    }
