"""
Content-Addressed Cache
=======================

Two tiers behind one async interface:

    Memory tier  - OrderedDict, bounded, checked first
    Persisted    - SQLite table, bounded independently, survives restarts

Keys are ``provider:lang:mode:digest``; raw content never appears in a key.
Entries carry an absolute expiry and are treated as absent once
``now >= expiry``. Nothing sweeps expired rows; only capacity eviction
removes entries, oldest-inserted first in each tier. Re-setting an existing
key refreshes its value and expiry but keeps its insertion position.
"""

import asyncio
import logging
import sqlite3
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..utils.hashing import content_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Composite cache key. Holds a digest of the content, never the content."""

    provider: str
    lang: str
    mode_flag: bool
    digest: str

    @classmethod
    def for_content(
        cls, provider: str, lang: str, mode_flag: bool, content: str
    ) -> "CacheKey":
        return cls(provider, lang, bool(mode_flag), content_hash(content))

    def render(self) -> str:
        return f"{self.provider}:{self.lang}:{1 if self.mode_flag else 0}:{self.digest}"


@dataclass
class CacheEntry:
    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


@dataclass
class CacheStats:
    """Cache statistics."""

    memory_hits: int = 0
    persisted_hits: int = 0
    misses: int = 0
    promotions: int = 0
    evictions: int = 0

    def to_dict(self) -> dict[str, Any]:
        total = self.memory_hits + self.persisted_hits + self.misses
        hits = self.memory_hits + self.persisted_hits
        return {
            "memory_hits": self.memory_hits,
            "persisted_hits": self.persisted_hits,
            "misses": self.misses,
            "promotions": self.promotions,
            "evictions": self.evictions,
            "hit_rate": f"{(hits / total if total else 0.0):.2%}",
        }


class MemoryTier:
    """Bounded in-memory map with insertion-order eviction."""

    def __init__(self, max_size: int):
        self.max_size = max_size
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> int:
        """Store an entry, returning how many keys were evicted."""
        with self._lock:
            # Plain assignment keeps an existing key's insertion position
            self._entries[key] = entry
            evicted = 0
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)
                evicted += 1
            return evicted

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def size(self) -> int:
        return len(self._entries)


class PersistedTier:
    """
    SQLite-backed tier.

    ``seq`` records insertion order; an upsert on an existing key leaves it
    untouched so re-set keys keep their eviction position. Blocking SQLite
    work runs on a dedicated executor thread.
    """

    def __init__(self, db_path: str, table: str, max_size: int):
        self.db_path = db_path
        self.table = table
        self.max_size = max_size
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"cache_{table}"
        )
        self._init_db()

    def _init_db(self) -> None:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        with self._lock:
            conn = self._get_conn()
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    key TEXT NOT NULL UNIQUE,
                    value TEXT NOT NULL,
                    expires_at REAL NOT NULL
                )
            """)

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=10.0,
                isolation_level=None,
            )
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode=WAL")
        return self._conn

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    async def get(self, key: str) -> CacheEntry | None:
        return await self._run(self.get_sync, key)

    def get_sync(self, key: str) -> CacheEntry | None:
        with self._lock:
            try:
                row = (
                    self._get_conn()
                    .execute(
                        f"SELECT value, expires_at FROM {self.table} WHERE key = ?",
                        (key,),
                    )
                    .fetchone()
                )
            except sqlite3.Error as e:
                logger.warning(f"[Cache] SQLite get error on {self.table}: {e}")
                return None
        if row is None:
            return None
        return CacheEntry(value=row[0], expires_at=row[1])

    async def set(self, key: str, entry: CacheEntry) -> int:
        return await self._run(self.set_sync, key, entry)

    def set_sync(self, key: str, entry: CacheEntry) -> int:
        with self._lock:
            try:
                conn = self._get_conn()
                conn.execute(
                    f"""
                    INSERT INTO {self.table} (key, value, expires_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        expires_at = excluded.expires_at
                    """,
                    (key, entry.value, entry.expires_at),
                )
                (count,) = conn.execute(
                    f"SELECT COUNT(*) FROM {self.table}"
                ).fetchone()
                overflow = count - self.max_size
                if overflow > 0:
                    conn.execute(
                        f"""
                        DELETE FROM {self.table} WHERE seq IN (
                            SELECT seq FROM {self.table} ORDER BY seq LIMIT ?
                        )
                        """,
                        (overflow,),
                    )
                    return overflow
                return 0
            except sqlite3.Error as e:
                logger.warning(f"[Cache] SQLite set error on {self.table}: {e}")
                return 0

    async def clear(self) -> None:
        await self._run(self.clear_sync)

    def clear_sync(self) -> None:
        with self._lock:
            try:
                self._get_conn().execute(f"DELETE FROM {self.table}")
            except sqlite3.Error as e:
                logger.warning(f"[Cache] SQLite clear error on {self.table}: {e}")

    def keys_sync(self) -> list[str]:
        with self._lock:
            rows = (
                self._get_conn()
                .execute(f"SELECT key FROM {self.table} ORDER BY seq")
                .fetchall()
            )
        return [row[0] for row in rows]

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
        self._executor.shutdown(wait=False)


class ContentCache:
    """Two-tier content-addressed cache used for translations and polish results."""

    def __init__(
        self,
        name: str,
        memory_size: int,
        persisted: PersistedTier | None = None,
        default_ttl: float = 24 * 3600,
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self.default_ttl = default_ttl
        self.memory = MemoryTier(memory_size)
        self.persisted = persisted
        self._clock = clock
        self.stats = CacheStats()

    @classmethod
    def with_sqlite(
        cls,
        name: str,
        db_path: str,
        memory_size: int,
        persisted_size: int,
        default_ttl: float,
        clock: Callable[[], float] = time.time,
    ) -> "ContentCache":
        tier = PersistedTier(db_path, table=f"{name}_cache", max_size=persisted_size)
        return cls(name, memory_size, tier, default_ttl=default_ttl, clock=clock)

    async def get(
        self, provider: str, lang: str, mode_flag: bool, content: str
    ) -> str | None:
        key = CacheKey.for_content(provider, lang, mode_flag, content).render()
        now = self._clock()

        entry = self.memory.get(key)
        if entry is not None and entry.is_valid(now):
            self.stats.memory_hits += 1
            return entry.value

        if self.persisted is not None:
            entry = await self.persisted.get(key)
            if entry is not None and entry.is_valid(now):
                self.stats.persisted_hits += 1
                self.stats.promotions += 1
                self.stats.evictions += self.memory.set(key, entry)
                logger.debug(f"[Cache:{self.name}] promoted {key}")
                return entry.value

        self.stats.misses += 1
        return None

    async def set(
        self,
        provider: str,
        lang: str,
        mode_flag: bool,
        content: str,
        value: str,
        ttl: float | None = None,
    ) -> None:
        key = CacheKey.for_content(provider, lang, mode_flag, content).render()
        entry = CacheEntry(
            value=value,
            expires_at=self._clock() + (self.default_ttl if ttl is None else ttl),
        )
        self.stats.evictions += self.memory.set(key, entry)
        if self.persisted is not None:
            self.stats.evictions += await self.persisted.set(key, entry)

    async def clear(self) -> None:
        self.memory.clear()
        if self.persisted is not None:
            await self.persisted.clear()
        logger.info(f"[Cache:{self.name}] cleared")

    def close(self) -> None:
        if self.persisted is not None:
            self.persisted.close()

    def get_stats(self) -> dict[str, Any]:
        stats = self.stats.to_dict()
        stats["memory_size"] = self.memory.size()
        return stats
