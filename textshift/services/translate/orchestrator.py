"""
Translation Orchestrator.

translate_batch pipeline:
    dedupe -> cache lookup -> chunk misses by provider batch size ->
    rate-limited provider calls (chunks in parallel) -> cache write -> expand

Provider errors propagate to the caller; deciding what to write back for a
failed chunk is the pipeline controller's job.
"""

import asyncio
import logging
import re
from dataclasses import dataclass

from ...cache.content_cache import ContentCache
from ...core.constants import SKIP_TRANSLATE_TOKENS, Language, ProviderName
from ...core.exceptions import ProviderUnavailableError, TextShiftError, TranslationError
from ...core.rate_limiter import RateLimiter
from ...utils.hashing import dedupe, expand
from .probe import LivenessProbe
from .providers import TranslationProvider

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Google Translation is unavailable, switching to Baidu Translation"

_SINGLE_LATIN_LETTER = re.compile(r"^[a-zA-Z]$")
_CJK = re.compile(r"[一-鿿]")
_LATIN = re.compile(r"[a-zA-Z]")


def needs_translation(
    content: str,
    target: Language | str,
    skip_tokens: frozenset[str] = SKIP_TRANSLATE_TOKENS,
) -> bool:
    """Whether a fragment carries text in the script opposite to ``target``."""
    if content in skip_tokens:
        return False
    target = Language(target)
    if target is Language.ZH and _SINGLE_LATIN_LETTER.match(content):
        return False
    if target is Language.EN:
        return bool(_CJK.search(content))
    return bool(_LATIN.search(content))


@dataclass
class ProviderSelection:
    """Outcome of provider resolution."""

    requested: ProviderName
    provider: TranslationProvider
    fell_back: bool = False
    warning: str | None = None

    @property
    def name(self) -> ProviderName:
        return self.provider.name


class TranslationOrchestrator:
    def __init__(
        self,
        providers: dict[ProviderName, TranslationProvider],
        cache: ContentCache,
        limiter: RateLimiter,
        probe: LivenessProbe | None = None,
        fallback: ProviderName = ProviderName.BAIDU,
    ):
        self.providers = providers
        self.cache = cache
        self.limiter = limiter
        self.probe = probe
        self.fallback = fallback

    def get_provider(self, name: ProviderName | str) -> TranslationProvider:
        return self.providers[ProviderName(name)]

    async def resolve_provider(self, preferred: ProviderName | str) -> ProviderSelection:
        """Apply the fallback policy: unreachable Google family -> Baidu."""
        name = ProviderName(preferred)
        # Every Google endpoint, GoogleFree included, sits behind the same probe
        if (
            name.is_google
            and self.probe is not None
            and not await self.probe.is_reachable()
        ):
            if self.fallback not in self.providers:
                raise ProviderUnavailableError(name.value)
            logger.warning(
                f"[Translate] {name.value} unreachable, falling back to {self.fallback.value}"
            )
            return ProviderSelection(
                requested=name,
                provider=self.providers[self.fallback],
                fell_back=True,
                warning=FALLBACK_WARNING,
            )
        return ProviderSelection(requested=name, provider=self.providers[name])

    async def translate_batch(
        self,
        texts: list[str],
        target: Language | str,
        provider: ProviderName | str | TranslationProvider,
        glossary_mode: bool = False,
    ) -> list[str]:
        """
        Translate ``texts`` into ``target``; output matches input length and order.

        ``provider`` may be a provider name (the fallback policy is applied)
        or an already-resolved adapter.
        """
        if not texts:
            return []

        if isinstance(provider, TranslationProvider):
            adapter = provider
        else:
            adapter = (await self.resolve_provider(provider)).provider

        target = Language(target)
        source = target.counterpart
        distinct, index = dedupe(texts)

        results: list[str | None] = [None] * len(distinct)
        misses: list[int] = []
        for pos, text in enumerate(distinct):
            cached = await self.cache.get(
                adapter.name.value, target.value, glossary_mode, text
            )
            if cached is None:
                misses.append(pos)
            else:
                results[pos] = cached

        size = max(1, adapter.max_batch_size)
        chunks = [misses[i : i + size] for i in range(0, len(misses), size)]
        logger.debug(
            f"[Translate] {adapter.name.value}: {len(texts)} texts, {len(distinct)} distinct, "
            f"{len(distinct) - len(misses)} cached, {len(chunks)} request(s)"
        )

        async def run_chunk(positions: list[int]) -> None:
            chunk = [distinct[p] for p in positions]
            async with self.limiter.slot():
                try:
                    translated = await adapter.translate(
                        chunk, source, target, glossary_mode
                    )
                except TextShiftError:
                    raise
                except Exception as e:
                    raise TranslationError(
                        f"{adapter.name.value} translation failed: {e}",
                        original_error=e,
                        source_lang=source.value,
                        target_lang=target.value,
                    ) from e
            for pos, text, value in zip(positions, chunk, translated):
                results[pos] = value
                await self.cache.set(
                    adapter.name.value,
                    target.value,
                    glossary_mode,
                    text,
                    value,
                    ttl=adapter.cache_ttl,
                )

        if chunks:
            await asyncio.gather(*(run_chunk(c) for c in chunks))

        return expand(results, index)
