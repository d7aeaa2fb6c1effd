"""Content-addressable cache for conversion results."""

from __future__ import annotations

from .keys import DEFAULT_KEY_PREFIX, cache_key, rolling_hash, to_base36
from .store import (
    ENTRY_SUFFIX,
    CacheEntry,
    CacheStore,
    FileCacheStore,
    MemoryCacheStore,
    current_timestamp,
)


__all__ = [
    "DEFAULT_KEY_PREFIX",
    "ENTRY_SUFFIX",
    "CacheEntry",
    "CacheStore",
    "FileCacheStore",
    "MemoryCacheStore",
    "cache_key",
    "current_timestamp",
    "rolling_hash",
    "to_base36",
]
