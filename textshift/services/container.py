"""
Service wiring.

Builds one shared HTTP client, the two caches, the per-provider-class rate
limiters and everything that hangs off them, and tears them down again.

Usage:
    services = build_services()
    try:
        report = await services.controller.run(source)
    finally:
        await services.aclose()
"""

import logging
from dataclasses import dataclass

import httpx

from ..cache.content_cache import ContentCache
from ..core.config import Settings, get_settings
from ..core.rate_limiter import RateLimiter
from .glossary import Glossary, default_glossary
from .pipeline.controller import PipelineController
from .pipeline.events import ProgressChannel
from .polish.polisher import ContentPolisher
from .settings_store import InMemorySettingsStore, SettingsStore
from .translate.orchestrator import TranslationOrchestrator
from .translate.probe import LivenessProbe
from .translate.providers import build_providers
from .usage import UsageRecorder

logger = logging.getLogger(__name__)


@dataclass
class PipelineServices:
    settings: Settings
    client: httpx.AsyncClient
    store: SettingsStore
    channel: ProgressChannel
    translation_cache: ContentCache
    polish_cache: ContentCache
    orchestrator: TranslationOrchestrator
    polisher: ContentPolisher
    usage: UsageRecorder
    controller: PipelineController
    owns_client: bool = True

    async def aclose(self) -> None:
        await self.usage.drain()
        self.translation_cache.close()
        self.polish_cache.close()
        if self.owns_client:
            await self.client.aclose()
        logger.info("[Services] closed")


def build_services(
    settings: Settings | None = None,
    store: SettingsStore | None = None,
    client: httpx.AsyncClient | None = None,
    glossary: Glossary = default_glossary,
    retry_wait: float = 1.0,
) -> PipelineServices:
    settings = settings or get_settings()
    store = store or InMemorySettingsStore()
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.PROVIDER_REQUEST_TIMEOUT),
            follow_redirects=True,
        )

    translation_cache = ContentCache.with_sqlite(
        "translation",
        settings.CACHE_DB_PATH,
        memory_size=settings.TRANSLATION_CACHE_MEMORY_SIZE,
        persisted_size=settings.TRANSLATION_CACHE_PERSISTED_SIZE,
        default_ttl=settings.TRANSLATION_CACHE_TTL_SECONDS,
    )
    polish_cache = ContentCache.with_sqlite(
        "polish",
        settings.CACHE_DB_PATH,
        memory_size=settings.POLISH_CACHE_MEMORY_SIZE,
        persisted_size=settings.POLISH_CACHE_PERSISTED_SIZE,
        default_ttl=settings.POLISH_CACHE_TTL_SECONDS,
    )

    translation_limiter = RateLimiter(
        "translation",
        settings.TRANSLATION_RATE_PER_SECOND,
        settings.TRANSLATION_MAX_CONCURRENCY,
        max_jitter=settings.RATE_LIMIT_MAX_JITTER_SECONDS,
    )
    polish_limiter = RateLimiter(
        "polish",
        settings.POLISH_RATE_PER_SECOND,
        settings.POLISH_MAX_CONCURRENCY,
        max_jitter=settings.RATE_LIMIT_MAX_JITTER_SECONDS,
    )

    probe = LivenessProbe(
        client,
        settings.LIVENESS_PROBE_URL,
        timeout=settings.LIVENESS_PROBE_TIMEOUT,
        ttl=settings.LIVENESS_PROBE_TTL_SECONDS,
    )
    orchestrator = TranslationOrchestrator(
        build_providers(client, store, settings, retry_wait=retry_wait),
        translation_cache,
        translation_limiter,
        probe=probe,
    )
    polisher = ContentPolisher(
        client, store, polish_cache, polish_limiter, settings, retry_wait=retry_wait
    )
    channel = ProgressChannel()
    usage = UsageRecorder(client, settings)
    controller = PipelineController(
        orchestrator, polisher, store, channel, glossary=glossary, usage=usage
    )

    logger.info(
        f"[Services] ready (cache={settings.CACHE_DB_PATH}, "
        f"usage_counters={'on' if usage.enabled else 'off'})"
    )
    return PipelineServices(
        settings=settings,
        client=client,
        store=store,
        channel=channel,
        translation_cache=translation_cache,
        polish_cache=polish_cache,
        orchestrator=orchestrator,
        polisher=polisher,
        usage=usage,
        controller=controller,
        owns_client=owns_client,
    )
