"""Two-tier content-addressed cache (memory + SQLite)."""

from .content_cache import CacheEntry, CacheKey, ContentCache, MemoryTier, PersistedTier

__all__ = ["CacheEntry", "CacheKey", "ContentCache", "MemoryTier", "PersistedTier"]
