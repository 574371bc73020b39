"""
Shared test fixtures.

Environment overrides are applied before textshift is imported so the
settings object is built for the test environment (in-memory cache, no log
files, usage counters off).
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["CACHE_DB_PATH"] = ":memory:"
os.environ["LOG_TO_FILE"] = "false"
os.environ["USAGE_COUNTER_URL"] = ""

import httpx
import pytest

from textshift.cache.content_cache import ContentCache
from textshift.core.config import get_settings
from textshift.core.exceptions import ProviderError
from textshift.core.rate_limiter import RateLimiter
from textshift.services.settings_store import InMemorySettingsStore, StorageKey
from textshift.services.translate.providers import TranslationProvider

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "slow: Slow running tests")


# =============================================================================
# HELPERS
# =============================================================================


class FakeClock:
    """Manually advanced clock for TTL and pacing tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records delays and advances a clock."""

    def __init__(self, clock: FakeClock | None = None):
        self.clock = clock
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if self.clock is not None:
            self.clock.advance(delay)


async def no_sleep(delay: float) -> None:
    return None


def mock_client(handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler(request)``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def store():
    """Settings store with every provider credential filled in."""
    return InMemorySettingsStore(
        {
            StorageKey.GOOGLE_API_KEY: "google-key",
            StorageKey.GOOGLE_ACCESS_TOKEN: "google-token",
            StorageKey.BAIDU_APP_ID: "baidu-app",
            StorageKey.BAIDU_SECRET: "baidu-secret",
            StorageKey.COZE_API_KEY: "coze-key",
        }
    )


@pytest.fixture
def empty_store():
    return InMemorySettingsStore()


@pytest.fixture
def memory_cache():
    return ContentCache("test", memory_size=100, default_ttl=3600)


@pytest.fixture
def fast_limiter():
    return RateLimiter("test", 1000, 10, max_jitter=0, sleep=no_sleep)


class FakeProvider(TranslationProvider):
    """Records batches and answers with a deterministic transform."""

    def __init__(self, name, settings, store, max_batch_size=3, fail=False):
        super().__init__(client=None, store=store, settings=settings)
        self.name = name
        self.max_batch_size = max_batch_size
        self.pipeline_chunk_size = max_batch_size
        self.fail = fail
        self.calls: list[list[str]] = []

    async def _translate(self, texts, source, target, glossary_mode):
        self.calls.append(list(texts))
        if self.fail:
            raise ProviderError("boom", provider=self.name.value)
        return [f"{target.value}:{t}" for t in texts]


class StaticProbe:
    def __init__(self, reachable):
        self.reachable = reachable
        self.calls = 0

    async def is_reachable(self):
        self.calls += 1
        return self.reachable
