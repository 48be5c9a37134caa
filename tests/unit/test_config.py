"""Unit tests for configuration defaults and overrides."""

from __future__ import annotations

from datetime import timedelta

import platformdirs
import pytest

from searchcache.config import _DEFAULT_DATA_DIR, _DEFAULT_DB_PATH, CacheSettings, Settings


class TestPlatformDefaults:
    def test_default_data_dir_matches_platformdirs(self) -> None:
        assert platformdirs.user_data_dir("searchcache") == _DEFAULT_DATA_DIR

    def test_default_db_path_under_data_dir(self) -> None:
        assert _DEFAULT_DB_PATH.startswith(_DEFAULT_DATA_DIR)
        assert _DEFAULT_DB_PATH.endswith("storage.db")

    def test_cache_settings_uses_platform_default(self) -> None:
        assert CacheSettings().db_path == _DEFAULT_DB_PATH


class TestCacheSettings:
    def test_default_windows(self) -> None:
        settings = CacheSettings()
        assert settings.session_ttl == timedelta(minutes=5)
        assert settings.recommendation_ttl == timedelta(hours=24)
        assert settings.history_limit == 5
        assert settings.max_entries is None

    def test_custom_windows(self) -> None:
        settings = CacheSettings(session_ttl_seconds=60, recommendation_ttl_hours=1)
        assert settings.session_ttl == timedelta(seconds=60)
        assert settings.recommendation_ttl == timedelta(hours=1)


class TestSettingsSources:
    def test_env_overrides_nested_field(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCHCACHE__CACHE__HISTORY_LIMIT", "8")
        monkeypatch.setenv("SEARCHCACHE__API__BASE_URL", "https://search.example.com")
        settings = Settings()
        assert settings.cache.history_limit == 8
        assert settings.api.base_url == "https://search.example.com"

    def test_init_args_win_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCHCACHE__LOGGING__LEVEL", "DEBUG")
        settings = Settings(logging={"level": "ERROR"})
        assert settings.logging.level == "ERROR"

    def test_ai_generation_defaults(self) -> None:
        ai = Settings().ai
        assert (ai.temperature, ai.top_k, ai.top_p, ai.max_output_tokens) == (0.7, 40, 0.95, 2000)
