"""
Content polisher backed by the Coze chat API.

A polish job is three calls: create a chat, poll its status until it
completes, then fetch the reply. Polishing is best-effort: whatever goes
wrong, the caller gets the original content back.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from ...cache.content_cache import ContentCache
from ...core.config import Settings
from ...core.constants import POLISH_PROVIDER, Language
from ...core.exceptions import PolishError, ProviderError
from ...core.rate_limiter import RateLimiter
from ...utils.http import json_body, parse_model, request_with_retry
from ..settings_store import SettingsStore, StorageKey

logger = logging.getLogger(__name__)

PROMPTS = {
    Language.ZH: "润色以下文本: ",
    Language.EN: "Polish following content: ",
}

TERMINAL_FAILURE_STATUSES = frozenset({"failed", "canceled"})

_LATIN_WORD = re.compile(r"\b[a-zA-Z]+\b", re.ASCII)
_CJK_CHAR = re.compile(r"[一-龥]")


def count_polish_tokens(text: str) -> int:
    """Latin words plus individual CJK characters."""
    return len(_LATIN_WORD.findall(text)) + len(_CJK_CHAR.findall(text))


def needs_polishing(text: str | None, min_tokens: int = 10) -> bool:
    if not text:
        return False
    return count_polish_tokens(text) > min_tokens


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ChatHandle(_Lenient):
    conversation_id: str
    id: str


class ChatCreated(_Lenient):
    data: ChatHandle


class ChatStatus(_Lenient):
    status: str = ""


class ChatRetrieved(_Lenient):
    data: ChatStatus


class ChatMessage(_Lenient):
    content: str = ""


class ChatMessages(_Lenient):
    data: list[ChatMessage]


class ContentPolisher:
    """Rate-limited, cached polish adapter."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        store: SettingsStore,
        cache: ContentCache,
        limiter: RateLimiter,
        settings: Settings,
        poll_interval: float | None = None,
        job_timeout: float | None = None,
        request_timeout: float | None = None,
        retry_wait: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.store = store
        self.cache = cache
        self.limiter = limiter
        self.settings = settings
        self.base_url = settings.COZE_BASE_URL.rstrip("/")
        self.poll_interval = (
            settings.POLISH_POLL_INTERVAL if poll_interval is None else poll_interval
        )
        self.job_timeout = (
            settings.POLISH_JOB_TIMEOUT if job_timeout is None else job_timeout
        )
        self.request_timeout = (
            settings.POLISH_REQUEST_TIMEOUT if request_timeout is None else request_timeout
        )
        self.retry_wait = retry_wait
        self.cache_ttl = settings.POLISH_CACHE_TTL_SECONDS
        self._sleep = sleep

    def needs_polishing(self, text: str | None) -> bool:
        return needs_polishing(text, self.settings.POLISH_MIN_TOKENS)

    async def polish(self, content: str, target: Language | str) -> str:
        """Return polished content, or ``content`` itself on any failure."""
        if not content or not target:
            raise ValueError("Content and target language must be provided")
        target = Language(target)

        cached = await self.cache.get(POLISH_PROVIDER, target.value, False, content)
        if cached is not None:
            return cached

        api_key = await self.store.get(StorageKey.COZE_API_KEY)
        if not api_key:
            logger.warning("[Polish] Coze API key not configured, skipping polish")
            return content

        try:
            async with self.limiter.slot():
                polished = await asyncio.wait_for(
                    self._run_job(PROMPTS[target] + content, api_key),
                    timeout=self.job_timeout,
                )
        except asyncio.TimeoutError:
            logger.error(
                f"[Polish] job exceeded {self.job_timeout}s, returning original content"
            )
            return content
        except (PolishError, ProviderError) as e:
            logger.error(f"[Polish] {e.detail}, returning original content")
            return content
        except Exception as e:
            logger.error(
                f"[Polish] unexpected failure, returning original content: {e}",
                exc_info=True,
            )
            return content

        if not polished:
            logger.warning("[Polish] empty reply, returning original content")
            return content

        await self.cache.set(
            POLISH_PROVIDER, target.value, False, content, polished, ttl=self.cache_ttl
        )
        return polished

    # ------------------------------------------------------------------
    # Coze protocol
    # ------------------------------------------------------------------

    def _headers(self, api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def _call(
        self, method: str, path: str, api_key: str, attempts: int | None = None, **kwargs: Any
    ) -> Any:
        response = await request_with_retry(
            self.client,
            method,
            f"{self.base_url}{path}",
            provider=POLISH_PROVIDER,
            attempts=self.settings.PROVIDER_MAX_RETRIES if attempts is None else attempts,
            wait_min=self.retry_wait,
            headers=self._headers(api_key),
            timeout=self.request_timeout,
            **kwargs,
        )
        return json_body(response, POLISH_PROVIDER)

    async def _run_job(self, prompt: str, api_key: str) -> str:
        handle = await self._create_chat(prompt, api_key)
        await self._wait_until_complete(handle, api_key)
        return await self._fetch_reply(handle, api_key)

    async def _create_chat(self, prompt: str, api_key: str) -> ChatHandle:
        payload = await self._call(
            "POST",
            "/v3/chat",
            api_key,
            json={
                "bot_id": self.settings.COZE_BOT_ID,
                "user_id": self.settings.COZE_USER_ID,
                "stream": False,
                "auto_save_history": True,
                "additional_messages": [
                    {"role": "user", "content": prompt, "content_type": "text"}
                ],
            },
        )
        return parse_model(ChatCreated, payload, POLISH_PROVIDER).data

    async def _wait_until_complete(self, handle: ChatHandle, api_key: str) -> None:
        params = {"conversation_id": handle.conversation_id, "chat_id": handle.id}
        while True:
            await self._sleep(self.poll_interval)
            try:
                payload = await self._call(
                    "GET", "/v3/chat/retrieve", api_key, attempts=1, params=params
                )
                status = parse_model(ChatRetrieved, payload, POLISH_PROVIDER).data.status
            except ProviderError as e:
                # A failed poll only means "not complete yet"
                logger.debug(f"[Polish] status poll failed: {e.detail}")
                continue
            logger.debug(f"[Polish] chat {handle.id} status={status}")
            if status == "completed":
                return
            if status in TERMINAL_FAILURE_STATUSES:
                raise PolishError(f"chat {handle.id} ended with status {status}")

    async def _fetch_reply(self, handle: ChatHandle, api_key: str) -> str:
        payload = await self._call(
            "GET",
            "/v3/chat/message/list",
            api_key,
            params={"conversation_id": handle.conversation_id, "chat_id": handle.id},
        )
        messages = parse_model(ChatMessages, payload, POLISH_PROVIDER).data
        if not messages:
            raise PolishError("chat returned no messages")
        return messages[0].content
