"""
Cache package for rendered template output.

This package provides:
- Key derivation (keys.py): digest directory names for (cache id, template) pairs
- Store interface (base.py): CacheStoreProtocol
- File cache (file_cache.py): filesystem-backed store with TTL freshness
"""

from viewcache.cache.base import CacheStoreProtocol
from viewcache.cache.file_cache import FileCacheStore
from viewcache.cache.keys import derive_cache_id, entry_path

__all__ = [
    "CacheStoreProtocol",
    "FileCacheStore",
    "derive_cache_id",
    "entry_path",
]
