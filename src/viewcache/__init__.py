"""viewcache - template rendering with a disk-backed output cache."""

from viewcache.cache import FileCacheStore, derive_cache_id
from viewcache.exceptions import (
    CacheClearError,
    CacheDirError,
    CacheError,
    CacheReadError,
    CacheWriteError,
    ConfigError,
    RenderError,
    ViewCacheError,
)
from viewcache.renderer import JinjaRenderer, Renderer
from viewcache.view import CacheConfig, TemplateCache

__version__ = "0.1.0"

__all__ = [
    "CacheClearError",
    "CacheConfig",
    "CacheDirError",
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    "ConfigError",
    "FileCacheStore",
    "JinjaRenderer",
    "RenderError",
    "Renderer",
    "TemplateCache",
    "ViewCacheError",
    "__version__",
    "derive_cache_id",
]
