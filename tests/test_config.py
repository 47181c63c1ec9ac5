"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from viewcache.config import Settings, clear_settings_cache, get_settings


class TestSettingsLoading:
    """Tests for loading Settings from the environment."""

    def test_settings_loads_from_env(self, mock_env_vars: dict[str, str]) -> None:
        settings = get_settings()

        assert settings.CACHE_DIR == Path(mock_env_vars["VIEWCACHE_CACHE_DIR"])
        assert settings.PAGE_CACHE_DIR == "views"
        assert settings.CACHE_LIFETIME == 120
        assert settings.CACHING is True
        assert settings.LOG_LEVEL == "DEBUG"

    def test_page_cache_dir_joins_pair(self, mock_settings: Settings) -> None:
        assert mock_settings.page_cache_dir == mock_settings.CACHE_DIR / "views"

    def test_get_settings_is_cached(self, mock_env_vars: dict[str, str]) -> None:
        assert get_settings() is get_settings()

    def test_clear_settings_cache_reloads(self, mock_env_vars: dict[str, str]) -> None:
        first = get_settings()
        with patch.dict(os.environ, {"VIEWCACHE_CACHE_LIFETIME": "5"}):
            clear_settings_cache()
            second = get_settings()
        assert first is not second
        assert second.CACHE_LIFETIME == 5


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.TEMPLATE_DIR is None
        assert settings.CACHE_DIR == Path(".cache")
        assert settings.PAGE_CACHE_DIR == "pages"
        assert settings.CACHE_LIFETIME == 3000
        assert settings.CACHING is False
        assert settings.RENDER_ON_READ_ERROR is False
        assert settings.LOG_LEVEL == "INFO"


class TestSettingsValidation:
    """Tests for Settings validation."""

    @pytest.mark.parametrize("value", ["a/b", "/abs", "..", ""])
    def test_page_cache_dir_must_be_single_segment(self, value: str) -> None:
        with patch.dict(os.environ, {"VIEWCACHE_PAGE_CACHE_DIR": value}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)
        assert "PAGE_CACHE_DIR" in str(exc_info.value)

    def test_negative_lifetime_rejected(self) -> None:
        with patch.dict(os.environ, {"VIEWCACHE_CACHE_LIFETIME": "-1"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_invalid_log_level_rejected(self) -> None:
        with patch.dict(os.environ, {"VIEWCACHE_LOG_LEVEL": "LOUD"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestRedactedDisplay:
    """Tests for the display dict."""

    def test_display_contains_all_settings(self, mock_settings: Settings) -> None:
        display = mock_settings.redacted_display()
        assert display["CACHE_LIFETIME"] == 120
        assert display["TEMPLATE_DIR"] is None
        assert display["CACHE_DIR"] == str(mock_settings.CACHE_DIR)
