"""
File-based cache for rendered template output.

Layout: ``<cache_dir>/<md5 digest>/<template basename>``, one file per
(cache id, template) pair. Freshness comes from the file's mtime compared
against ``clock() - lifetime``; stale entries are overwritten in place by
the next write and are never deleted individually.

Writes replace the entry file directly (no write-then-rename), so a reader
racing a writer can observe a partially written entry. There is no locking;
concurrent writers to the same key are last-writer-wins.
"""

from __future__ import annotations

import os
import stat
import time
from pathlib import Path
from typing import Callable

from viewcache.cache.base import CacheStoreProtocol
from viewcache.cache.keys import entry_path
from viewcache.exceptions import (
    CacheClearError,
    CacheDirError,
    CacheReadError,
    CacheWriteError,
)
from viewcache.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LIFETIME = 3000


class FileCacheStore(CacheStoreProtocol):
    """Filesystem-backed store for rendered template output.

    ``cache_dir`` and ``lifetime`` are plain attributes; changing them only
    affects calls made afterwards.
    """

    def __init__(
        self,
        cache_dir: str | Path,
        lifetime: int = DEFAULT_LIFETIME,
        clock: Callable[[], float] = time.time,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize FileCacheStore.

        Args:
            cache_dir: Root directory owning every cache entry.
            lifetime: Seconds an entry stays fresh after its last write.
            clock: Returns the current epoch time in seconds.
            encoding: Encoding used when ``write`` receives text.
        """
        self.cache_dir = Path(cache_dir)
        self.lifetime = lifetime
        self.clock = clock
        self.encoding = encoding

    def entry_path(self, template_path: str | Path, cache_id: str | None = None) -> Path:
        """Path of the entry for (template, cache id) under the current cache_dir."""
        return entry_path(self.cache_dir, template_path, cache_id)

    def is_fresh(self, template_path: str | Path, cache_id: str | None = None) -> bool:
        path = self.entry_path(template_path, cache_id)
        try:
            st = path.stat()
        except OSError:
            return False

        if not stat.S_ISREG(st.st_mode):
            return False

        return st.st_mtime > self.clock() - self.lifetime

    def read(self, template_path: str | Path, cache_id: str | None = None) -> bytes:
        path = self.entry_path(template_path, cache_id)
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error("Cache read failed", path=str(path), error=str(e))
            raise CacheReadError(
                "Unable to read cache entry", context={"path": str(path)}
            ) from e

    def get(self, template_path: str | Path, cache_id: str | None = None) -> bytes | None:
        """Read an entry, returning None when it does not exist.

        Raises:
            CacheReadError: If the entry exists but cannot be read.
        """
        path = self.entry_path(template_path, cache_id)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheReadError(
                "Unable to read cache entry", context={"path": str(path)}
            ) from e

    def ensure_directory(self) -> Path:
        """Create cache_dir if needed and check that it is writable.

        Raises:
            CacheDirError: If the directory can't be created or written to.
        """
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cache directory creation failed", path=str(self.cache_dir))
            raise CacheDirError(
                "Unable to create cache directory",
                context={"path": str(self.cache_dir)},
            ) from e

        if not os.access(self.cache_dir, os.W_OK | os.X_OK):
            logger.error("Cache directory not writable", path=str(self.cache_dir))
            raise CacheDirError(
                "Cache directory is not writable",
                context={"path": str(self.cache_dir)},
            )
        return self.cache_dir

    def write(
        self,
        content: bytes | str,
        template_path: str | Path,
        cache_id: str | None = None,
    ) -> Path:
        self.ensure_directory()

        path = self.entry_path(template_path, cache_id)
        data = content.encode(self.encoding) if isinstance(content, str) else content

        try:
            path.parent.mkdir(exist_ok=True)
        except OSError as e:
            logger.error("Cache key directory creation failed", path=str(path.parent))
            raise CacheDirError(
                "Unable to create cache key directory",
                context={"path": str(path.parent)},
            ) from e

        try:
            with open(path, "wb") as f:
                written = f.write(data)
        except OSError as e:
            logger.error("Cache write failed", path=str(path), error=str(e))
            raise CacheWriteError(
                "Unable to write to cache", context={"path": str(path)}
            ) from e

        if written != len(data):
            raise CacheWriteError(
                "Incomplete write to cache",
                context={"path": str(path), "expected": len(data), "written": written},
            )

        logger.info("Cached rendered output", path=str(path), size=len(data))
        return path

    def clear_all(self) -> int:
        """Remove everything under cache_dir, keeping cache_dir itself.

        Removal is depth-first: a directory is removed only after its
        children. The first entry that cannot be removed aborts the clear.

        Returns:
            Number of files and directories removed.

        Raises:
            CacheClearError: Naming the entry that could not be removed.
        """
        if not self.cache_dir.is_dir():
            logger.debug("Cache directory absent, nothing to clear", path=str(self.cache_dir))
            return 0

        removed = self._clear_dir(self.cache_dir)
        logger.info("Cleared cache", path=str(self.cache_dir), removed=removed)
        return removed

    def _clear_dir(self, directory: Path) -> int:
        removed = 0
        try:
            entries = list(os.scandir(directory))
        except OSError as e:
            raise CacheClearError(
                "Unable to list directory", context={"path": str(directory)}
            ) from e

        for entry in entries:
            path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                removed += self._clear_dir(path)
                try:
                    path.rmdir()
                except OSError as e:
                    logger.error("Unable to remove directory", path=str(path))
                    raise CacheClearError(
                        "Unable to remove directory", context={"path": str(path)}
                    ) from e
            else:
                try:
                    path.unlink()
                except OSError as e:
                    logger.error("Unable to unlink file", path=str(path))
                    raise CacheClearError(
                        "Unable to unlink file", context={"path": str(path)}
                    ) from e
            removed += 1

        return removed
