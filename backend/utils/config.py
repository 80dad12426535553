"""Centralized runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    api_host: str
    api_port: int
    api_base_url: str
    allocation_truncate_on_exhaustion: bool
    max_districts: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once per process; call ``get_settings.cache_clear()`` to reload."""
    api_host = os.getenv("DRA_API_HOST", "127.0.0.1")
    api_port = _env_int("DRA_API_PORT", 8000)
    return Settings(
        app_name=os.getenv("DRA_APP_NAME", "Disaster Response Allocation"),
        app_version=os.getenv("DRA_APP_VERSION", "1.0.0"),
        log_level=os.getenv("DRA_LOG_LEVEL", "INFO"),
        api_host=api_host,
        api_port=api_port,
        api_base_url=os.getenv("DRA_API_BASE_URL", f"http://{api_host}:{api_port}"),
        allocation_truncate_on_exhaustion=_env_bool("DRA_ALLOCATION_TRUNCATE", False),
        max_districts=_env_int("DRA_MAX_DISTRICTS", 500),
    )
