"""
Settings / Secrets Store.

Async key-value access to user settings and provider credentials. Every key
has a default, so a read never comes back empty-handed for lack of a value.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from ..core.config import Settings
from ..core.constants import Language, Platform, ProviderName, SwitchMode

logger = logging.getLogger(__name__)


class StorageKey(str, Enum):
    TARGET_LANGUAGE = "targetLanguage"
    PLATFORM = "platform"
    TRANSLATION_PROVIDER = "translationModal"
    TERMBASE = "termbase"
    AUTO_FORMAT = "autoStylelintMode"
    AUTO_POLISH = "autoPolishing"
    GOOGLE_API_KEY = "googleAPIKey"
    BAIDU_APP_ID = "baiduAppID"
    BAIDU_SECRET = "baiduKey"
    COZE_API_KEY = "cozeAPIKey"
    GOOGLE_ACCESS_TOKEN = "googleAccessToken"


DEFAULTS: dict[StorageKey, Any] = {
    StorageKey.TARGET_LANGUAGE: Language.EN.value,
    StorageKey.PLATFORM: Platform.DESKTOP.value,
    StorageKey.TRANSLATION_PROVIDER: ProviderName.GOOGLE_BASIC.value,
    StorageKey.TERMBASE: SwitchMode.ON.value,
    StorageKey.AUTO_FORMAT: SwitchMode.ON.value,
    StorageKey.AUTO_POLISH: SwitchMode.ON.value,
    StorageKey.GOOGLE_API_KEY: "",
    StorageKey.BAIDU_APP_ID: "",
    StorageKey.BAIDU_SECRET: "",
    StorageKey.COZE_API_KEY: "",
    StorageKey.GOOGLE_ACCESS_TOKEN: "",
}

_SECRET_KEYS = frozenset(
    {
        StorageKey.GOOGLE_API_KEY,
        StorageKey.BAIDU_APP_ID,
        StorageKey.BAIDU_SECRET,
        StorageKey.COZE_API_KEY,
        StorageKey.GOOGLE_ACCESS_TOKEN,
    }
)


class SettingsStore(ABC):
    """Abstract settings store interface."""

    @abstractmethod
    async def get(self, key: StorageKey) -> Any:
        """Get value by key, falling back to the key's default."""
        pass

    @abstractmethod
    async def set(self, key: StorageKey, value: Any) -> None:
        """Persist a value."""
        pass

    async def is_on(self, key: StorageKey) -> bool:
        return (await self.get(key)) == SwitchMode.ON.value


class InMemorySettingsStore(SettingsStore):
    """Process-local store with a read-through default table."""

    def __init__(self, initial: dict[StorageKey, Any] | None = None):
        self._values: dict[StorageKey, Any] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def get(self, key: StorageKey) -> Any:
        async with self._lock:
            if key in self._values:
                return self._values[key]
        return DEFAULTS[key]

    async def set(self, key: StorageKey, value: Any) -> None:
        async with self._lock:
            self._values[key] = value
        shown = "***" if key in _SECRET_KEYS else value
        logger.debug(f"[Settings] {key.value} = {shown}")


async def bootstrap_secrets(store: SettingsStore, settings: Settings) -> list[StorageKey]:
    """
    Copy credentials from the environment into empty store slots.

    Returns the keys that were filled.
    """
    sources = {
        StorageKey.GOOGLE_API_KEY: settings.GOOGLE_API_KEY,
        StorageKey.BAIDU_APP_ID: settings.BAIDU_APP_ID,
        StorageKey.BAIDU_SECRET: settings.BAIDU_SECRET_KEY,
        StorageKey.COZE_API_KEY: settings.COZE_API_KEY,
        StorageKey.GOOGLE_ACCESS_TOKEN: settings.GOOGLE_ACCESS_TOKEN,
    }
    filled = []
    for key, value in sources.items():
        if value and not await store.get(key):
            await store.set(key, value)
            filled.append(key)
    if filled:
        logger.info(f"[Settings] seeded {len(filled)} credential(s) from environment")
    return filled
