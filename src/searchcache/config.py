"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (SEARCHCACHE__CACHE__SESSION_TTL_SECONDS=600)
  2. searchcache.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("searchcache")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "storage.db")


def _find_config_file() -> str | None:
    """Return the path of the first searchcache.yaml found, or None."""
    candidates = [
        Path("searchcache.yaml"),
        Path(platformdirs.user_config_dir("searchcache")) / "searchcache.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ApiSettings(BaseModel):
    base_url: str = "http://localhost:3001"
    timeout_seconds: float = 30.0


class AISettings(BaseModel):
    endpoint: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.5-flash:generateContent"
    )
    api_key: str = ""
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 2000
    timeout_seconds: float = 60.0


class CacheSettings(BaseModel):
    session_ttl_seconds: int = 300
    recommendation_ttl_hours: int = 24
    history_limit: int = 5
    # None keeps every entry until the storage is wiped
    max_entries: int | None = None
    db_path: str = _DEFAULT_DB_PATH

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(seconds=self.session_ttl_seconds)

    @property
    def recommendation_ttl(self) -> timedelta:
        return timedelta(hours=self.recommendation_ttl_hours)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: SEARCHCACHE__API__BASE_URL=...
        env_prefix="SEARCHCACHE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    api: ApiSettings = ApiSettings()
    ai: AISettings = AISettings()
    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
