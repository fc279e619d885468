"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class TrackerHTTPSettings:
    """
    HTTP behavior settings for the task-tracker connector.
    """

    token: str | None = None
    base_url: str = "https://api.clickup.com/api/v2"
    timeout_seconds: float = 15.0
    rate_limit_per_second: float = 5.0


@dataclass(frozen=True)
class TrackerSpaceSettings:
    """
    Tracker space identifiers, one per source team workspace.
    """

    playable_space_id: str | None = None
    art_space_id: str | None = None
    video_space_id: str | None = None
    concept_space_id: str | None = None


@dataclass(frozen=True)
class SyncSettings:
    """
    Runtime settings for the weekly completion sync.
    """

    batch_size: int = 500
    max_workers: int = 4
    persist_issues: bool = True


@dataclass(frozen=True)
class SchedulerSettings:
    """
    Weekly trigger times, expressed in the anchor timezone.
    """

    enabled: bool = True
    creative_day_of_week: str = "mon"
    creative_hour: int = 23
    creative_minute: int = 30
    production_day_of_week: str = "mon"
    production_hour: int = 23
    production_minute: int = 59


@lru_cache(maxsize=1)
def get_tracker_http_settings() -> TrackerHTTPSettings:
    """
    Return connector HTTP settings from environment variables.
    """

    return TrackerHTTPSettings(
        token=_get_optional_str_env("CLICKUP_TOKEN"),
        base_url=_get_str_env("CLICKUP_BASE_URL", "https://api.clickup.com/api/v2"),
        timeout_seconds=max(1.0, _get_float_env("TRACKER_HTTP_TIMEOUT_SECONDS", 15.0)),
        rate_limit_per_second=max(0.1, _get_float_env("TRACKER_HTTP_RATE_LIMIT_PER_SECOND", 5.0)),
    )


@lru_cache(maxsize=1)
def get_tracker_space_settings() -> TrackerSpaceSettings:
    """
    Return tracker space identifiers from environment variables.
    """

    return TrackerSpaceSettings(
        playable_space_id=_get_optional_str_env("CLICKUP_SPACE_ID_PLA"),
        art_space_id=_get_optional_str_env("CLICKUP_SPACE_ID_ART"),
        video_space_id=_get_optional_str_env("CLICKUP_SPACE_ID_VIDEO"),
        concept_space_id=_get_optional_str_env("CLICKUP_SPACE_ID_CONCEPT"),
    )


@lru_cache(maxsize=1)
def get_sync_settings() -> SyncSettings:
    """
    Return weekly sync settings from environment variables.
    """

    return SyncSettings(
        batch_size=max(1, _get_int_env("SYNC_BATCH_SIZE", 500)),
        max_workers=max(1, _get_int_env("SYNC_MAX_WORKERS", 4)),
        persist_issues=_get_bool_env("SYNC_PERSIST_ISSUES", True),
    )


@lru_cache(maxsize=1)
def get_scheduler_settings() -> SchedulerSettings:
    """
    Return weekly trigger settings from environment variables.
    """

    return SchedulerSettings(
        enabled=_get_bool_env("SCHEDULER_ENABLED", True),
        creative_day_of_week=_get_str_env("SCHEDULER_CREATIVE_DAY_OF_WEEK", "mon"),
        creative_hour=_get_int_env("SCHEDULER_CREATIVE_HOUR", 23),
        creative_minute=_get_int_env("SCHEDULER_CREATIVE_MINUTE", 30),
        production_day_of_week=_get_str_env("SCHEDULER_PRODUCTION_DAY_OF_WEEK", "mon"),
        production_hour=_get_int_env("SCHEDULER_PRODUCTION_HOUR", 23),
        production_minute=_get_int_env("SCHEDULER_PRODUCTION_MINUTE", 59),
    )
