"""
TemplateCache: renders templates and caches the output on disk.

Flow for fetch():
1. Caching disabled -> render and return.
2. Caching enabled and entry fresh -> return cached text.
3. Otherwise -> render, write to the cache, return.

Configuration lives on an explicit CacheConfig held by each TemplateCache;
there is no module-level state.
"""

from __future__ import annotations

import math
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, TextIO

from viewcache.cache.file_cache import DEFAULT_LIFETIME, FileCacheStore
from viewcache.config import Settings, get_settings
from viewcache.exceptions import CacheReadError, ConfigError
from viewcache.logging import get_logger, log_context
from viewcache.renderer import JinjaRenderer, Renderer

logger = get_logger(__name__)


@dataclass
class CacheConfig:
    """Configuration for a TemplateCache."""

    cache_dir: Path
    template_dir: Path | None = None
    cache_lifetime: int = DEFAULT_LIFETIME
    caching: bool = False
    render_on_read_error: bool = False
    encoding: str = "utf-8"

    @classmethod
    def from_settings(cls, settings: Settings) -> CacheConfig:
        """Build a config from application settings."""
        return cls(
            cache_dir=settings.page_cache_dir,
            template_dir=settings.TEMPLATE_DIR,
            cache_lifetime=settings.CACHE_LIFETIME,
            caching=settings.CACHING,
            render_on_read_error=settings.RENDER_ON_READ_ERROR,
        )


class TemplateCache:
    """Renders template files, optionally serving output from a disk cache.

    Example:
        view = TemplateCache(CacheConfig(cache_dir=Path("/tmp/pages"), caching=True))
        view.set_template_dir("templates")
        html = view.fetch("home.html", cache_id="page1", variables={"title": "Home"})
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        renderer: Renderer | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize TemplateCache.

        Args:
            config: Explicit configuration. Built from settings if omitted.
            renderer: Template renderer. Defaults to JinjaRenderer.
            settings: Settings used for defaults (e.g. set_cache_dir() with no path).
            clock: Time source for freshness checks.
        """
        self._settings = settings
        self.config = config or CacheConfig.from_settings(self.settings)
        self.renderer = renderer or JinjaRenderer(encoding=self.config.encoding)
        self._store = FileCacheStore(
            self.config.cache_dir,
            lifetime=self.config.cache_lifetime,
            clock=clock,
            encoding=self.config.encoding,
        )
        self._variables: dict[str, Any] = {}

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def store(self) -> FileCacheStore:
        """Cache store, synced with the current config on every access."""
        self._store.cache_dir = Path(self.config.cache_dir)
        self._store.lifetime = self.config.cache_lifetime
        self._store.encoding = self.config.encoding
        return self._store

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_template_dir(self, path: str | Path) -> None:
        """Set the base directory for relative template paths.

        Raises:
            ConfigError: If the directory does not exist.
        """
        template_dir = Path(path).resolve()
        if not template_dir.is_dir():
            raise ConfigError(
                f"The template directory '{path}' does not exist",
                context={"path": str(path)},
            )
        self.config.template_dir = template_dir

    def set_cache_dir(self, path: str | Path | None = None) -> None:
        """Set the cache directory, creating it if needed.

        Args:
            path: Cache directory. Defaults to the settings' page cache directory.

        Raises:
            ConfigError: If the directory can't be created or isn't writable.
        """
        cache_dir = Path(path) if path is not None else self.settings.page_cache_dir

        if not cache_dir.is_dir():
            try:
                cache_dir.mkdir(parents=True)
            except OSError as e:
                raise ConfigError(
                    f"The cache directory '{cache_dir}' does not exist!",
                    context={"path": str(cache_dir)},
                ) from e

        if not os.access(cache_dir, os.W_OK | os.X_OK):
            raise ConfigError(
                f"The cache directory '{cache_dir}' is not writable",
                context={"path": str(cache_dir)},
            )

        self.config.cache_dir = cache_dir

    def set_cache_lifetime(self, seconds: Any = 0) -> None:
        """Set how long cache entries stay fresh. Non-numeric values become 0.

        Raises:
            ConfigError: If seconds is negative.
        """
        try:
            value = float(seconds)
        except (TypeError, ValueError):
            value = 0.0
        if isinstance(seconds, bool) or not math.isfinite(value):
            value = 0.0

        if value < 0:
            raise ConfigError(
                "Cache lifetime cannot be negative", context={"seconds": seconds}
            )

        self.config.cache_lifetime = int(value)

    def set_caching(self, enabled: bool = False) -> None:
        """Turn caching on or off."""
        self.config.caching = bool(enabled)

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def assign(self, name: str, value: Any) -> None:
        """Add a default variable available to every render."""
        self._variables[name] = value

    def assign_many(self, variables: Mapping[str, Any]) -> None:
        self._variables.update(variables)

    def variable_names(self) -> list[str]:
        """Names of all assigned default variables."""
        return list(self._variables)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def resolve(self, template_file: str | Path) -> Path:
        """Join template_file onto the template directory, if one is set."""
        if self.config.template_dir is not None:
            return Path(self.config.template_dir) / template_file
        return Path(template_file)

    def fetch(
        self,
        template_file: str | Path,
        cache_id: str | None = None,
        variables: Mapping[str, Any] | None = None,
    ) -> str:
        """Return the rendered output of a template.

        Args:
            template_file: Template path, relative to the template directory if set.
            cache_id: Optional id distinguishing cached variants of the template.
            variables: Per-call variables, overriding assigned defaults.

        Returns:
            Rendered (or cached) text.

        Raises:
            RenderError: If rendering fails.
            CacheReadError: If a fresh entry can't be read and
                render_on_read_error is off.
            CacheDirError, CacheWriteError: If persisting the output fails.
        """
        template_path = self.resolve(template_file)

        with log_context(template=template_path.name, cache_id=cache_id):
            if not self.config.caching:
                return self._render(template_path, variables)

            if self.store.is_fresh(template_path, cache_id):
                try:
                    text = self._read_text(template_path, cache_id)
                except CacheReadError:
                    if not self.config.render_on_read_error:
                        raise
                    logger.warning("Fresh cache entry unreadable, re-rendering")
                else:
                    logger.debug("Cache hit")
                    return text

            logger.debug("Cache miss")
            output = self._render(template_path, variables)
            self.store.write(output, template_path, cache_id)
            return output

    def render(
        self,
        template_file: str | Path,
        cache_id: str | None = None,
        variables: Mapping[str, Any] | None = None,
        out: TextIO | None = None,
    ) -> None:
        """Write the output of fetch() to ``out`` (stdout by default)."""
        output = self.fetch(template_file, cache_id, variables)
        (out or sys.stdout).write(output)

    def _render(self, template_path: Path, variables: Mapping[str, Any] | None) -> str:
        merged = {**self._variables, **(variables or {})}
        return self.renderer.render(template_path, merged)

    # ------------------------------------------------------------------
    # Cache access
    # ------------------------------------------------------------------

    def fetch_cache(self, template_file: str | Path, cache_id: str | None = None) -> str:
        """Return cached text without rendering, regardless of freshness.

        Raises:
            CacheReadError: If there is no readable entry.
        """
        return self._read_text(self.resolve(template_file), cache_id)

    def _read_text(self, template_path: Path, cache_id: str | None) -> str:
        store = self.store
        content = store.read(template_path, cache_id)
        try:
            return content.decode(self.config.encoding)
        except UnicodeDecodeError as e:
            path = store.entry_path(template_path, cache_id)
            logger.error("Cache entry is not valid text", path=str(path), error=str(e))
            raise CacheReadError(
                "Cache entry could not be decoded",
                context={"path": str(path), "encoding": self.config.encoding},
            ) from e

    def is_cached(self, template_file: str | Path, cache_id: str | None = None) -> bool:
        return self.store.is_fresh(self.resolve(template_file), cache_id)

    def clear_cache(self) -> int:
        """Delete every cache entry, keeping the cache directory itself."""
        return self.store.clear_all()
