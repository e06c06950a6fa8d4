"""
Central configuration for date parsing, formatting and autosuggest behaviour.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any


WEEK_START_CHOICES = (
    "locale-default",
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)


@dataclass(frozen=True)
class Settings:
    app_name: str
    date_format: str
    time_format: str
    separator: str
    week_start: str
    locale: str
    autosuggest_enabled: bool
    autosuggest_trigger_phrase: str
    autosuggest_toggle_link: bool
    use_markdown_links: bool
    cache_max_size: int
    cache_max_age_ms: int
    reference_refresh_seconds: int
    log_level: str

    def with_updates(self, **changes: Any) -> "Settings":
        clean = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **clean)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_week_start(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in WEEK_START_CHOICES:
        return raw
    return default


def get_settings() -> Settings:
    return Settings(
        app_name=os.getenv("APP_NAME", "nldates"),
        date_format=os.getenv("NLD_DATE_FORMAT", "%Y-%m-%d") or "%Y-%m-%d",
        time_format=os.getenv("NLD_TIME_FORMAT", "%H:%M") or "%H:%M",
        separator=os.getenv("NLD_SEPARATOR", " "),
        week_start=_env_week_start("NLD_WEEK_START", "locale-default"),
        locale=os.getenv("NLD_LOCALE", "en-us").strip().lower() or "en-us",
        autosuggest_enabled=_env_bool("NLD_AUTOSUGGEST", True),
        autosuggest_trigger_phrase=os.getenv("NLD_TRIGGER_PHRASE", "@") or "@",
        autosuggest_toggle_link=_env_bool("NLD_AUTOSUGGEST_LINK", True),
        use_markdown_links=_env_bool("NLD_MARKDOWN_LINKS", False),
        cache_max_size=max(1, _env_int("NLD_CACHE_MAX_SIZE", 100)),
        cache_max_age_ms=max(0, _env_int("NLD_CACHE_MAX_AGE_MS", 5 * 60 * 1000)),
        reference_refresh_seconds=max(0, _env_int("NLD_REFERENCE_REFRESH_SECONDS", 60)),
        log_level=os.getenv("LOG_LEVEL", "info").strip().lower() or "info",
    )
