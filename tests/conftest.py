"""
Pytest configuration and fixtures for viewcache tests.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Generator, Mapping
from unittest.mock import patch

import pytest

from viewcache.config import Settings, clear_settings_cache
from viewcache.renderer import Renderer
from viewcache.view import CacheConfig, TemplateCache


class CountingRenderer(Renderer):
    """Stub renderer that records every call."""

    def __init__(self, output: str = "rendered") -> None:
        self.output = output
        self.calls: list[tuple[Path, dict[str, Any]]] = []

    def render(self, template_path: str | Path, variables: Mapping[str, Any]) -> str:
        self.calls.append((Path(template_path), dict(variables)))
        return self.output

    @property
    def call_count(self) -> int:
        return len(self.calls)


class FakeClock:
    """Wall clock shifted by a controllable offset."""

    def __init__(self) -> None:
        self.offset = 0.0

    def __call__(self) -> float:
        return time.time() + self.offset

    def advance(self, seconds: float) -> None:
        self.offset += seconds


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def cache_dir(temp_dir: Path) -> Path:
    """Cache directory path (not created)."""
    return temp_dir / "cache"


@pytest.fixture
def template_dir(temp_dir: Path) -> Path:
    """Template directory with a few Jinja templates."""
    directory = temp_dir / "templates"
    directory.mkdir()
    (directory / "home.tmpl").write_text("<h1>{{ title }}</h1>\n", encoding="utf-8")
    (directory / "greeting.txt").write_text("Hello {{ name }}!", encoding="utf-8")
    (directory / "broken.tmpl").write_text("{% if %}", encoding="utf-8")
    return directory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def renderer() -> CountingRenderer:
    return CountingRenderer("<p>page</p>")


@pytest.fixture
def view(cache_dir: Path, renderer: CountingRenderer, clock: FakeClock) -> TemplateCache:
    """TemplateCache with caching enabled and a counting renderer."""
    config = CacheConfig(cache_dir=cache_dir, caching=True)
    return TemplateCache(config, renderer=renderer, clock=clock)


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock VIEWCACHE_* environment variables."""
    env_vars = {
        "VIEWCACHE_CACHE_DIR": str(temp_dir / "app_cache"),
        "VIEWCACHE_PAGE_CACHE_DIR": "views",
        "VIEWCACHE_CACHE_LIFETIME": "120",
        "VIEWCACHE_CACHING": "true",
        "VIEWCACHE_LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Settings:
    """Provide a Settings instance built from mock_env_vars."""
    return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
