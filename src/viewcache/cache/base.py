"""
Base classes for the rendered-output cache.

CacheStoreProtocol is the interface TemplateCache talks to. Entries are
addressed by (template path, optional cache id) and carry no metadata beyond
the modification time of the backing storage.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class CacheStoreProtocol(ABC):
    """Abstract interface for rendered-output cache stores."""

    @abstractmethod
    def is_fresh(self, template_path: str | Path, cache_id: str | None = None) -> bool:
        """Check whether a fresh entry exists. Never raises."""
        ...

    @abstractmethod
    def read(self, template_path: str | Path, cache_id: str | None = None) -> bytes:
        """Read an entry, raising CacheReadError if it cannot be read."""
        ...

    @abstractmethod
    def write(
        self,
        content: bytes | str,
        template_path: str | Path,
        cache_id: str | None = None,
    ) -> Path:
        """Write an entry, replacing any previous content."""
        ...

    @abstractmethod
    def clear_all(self) -> int:
        """Remove every entry. Returns the number of removed filesystem entries."""
        ...
