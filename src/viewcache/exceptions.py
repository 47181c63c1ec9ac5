"""
Custom exception hierarchy for viewcache.

All exceptions inherit from ViewCacheError, which provides optional context
for structured error handling and logging.
"""

from __future__ import annotations

from typing import Any


class ViewCacheError(Exception):
    """Base exception for all viewcache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigError(ViewCacheError):
    """Raised when a template or cache directory is unusable at setup time.

    Examples:
        - Template directory does not exist
        - Cache directory cannot be created or is not writable
        - Negative cache lifetime
    """

    pass


class RenderError(ViewCacheError):
    """Raised when a template is missing or its execution fails.

    Context should include:
        - template: The template path that was being rendered
    """

    pass


class CacheError(ViewCacheError):
    """Base class for cache store failures.

    Context should include:
        - path: The filesystem path that caused the failure
    """

    @property
    def path(self) -> str | None:
        """Offending path, if one was recorded."""
        value = self.context.get("path")
        return str(value) if value is not None else None


class CacheDirError(CacheError):
    """Raised when the cache directory cannot be created or written to."""

    pass


class CacheReadError(CacheError):
    """Raised when a cache entry cannot be read (including when it is absent)."""

    pass


class CacheWriteError(CacheError):
    """Raised when a cache entry write does not complete."""

    pass


class CacheClearError(CacheError):
    """Raised when clearing the cache hits an entry that cannot be removed.

    The clear is aborted at that entry; earlier removals are not undone.
    """

    pass
