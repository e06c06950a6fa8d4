"""
Date service layer:
- cache key composition (text, format, week start, calendar day)
- memoized resolution through the LRU cache
- formatting of resolved dates and of the current instant
- cache invalidation on settings changes
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable

from nldates.app.cache.lru import LRUCache
from nldates.app.core.config import Settings, get_settings
from nldates.app.observability.logging import log_event
from nldates.app.parsing.formatting import format_date, try_format
from nldates.app.parsing.models import INVALID_DATE, ResolvedDate, ResolverContext, WeekStart
from nldates.app.parsing.resolver import Resolver
from nldates.app.parsing.temporal import DateparserRecognizer


def build_cache_key(text: str, fmt: str, week_start: str, today: date) -> str:
    return f"{text}:{fmt}:{week_start}:{today.isoformat()}"


class DateService:
    def __init__(
        self,
        settings: Settings,
        resolver: Resolver | None = None,
        cache: LRUCache[ResolvedDate] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings
        self._clock = clock or datetime.now
        self.resolver = resolver or self._build_resolver(settings)
        self.cache: LRUCache[ResolvedDate] = cache or LRUCache(
            max_size=settings.cache_max_size,
            max_age_ms=settings.cache_max_age_ms,
        )

    def _build_resolver(self, settings: Settings) -> Resolver:
        return Resolver(
            recognizer=DateparserRecognizer(locale=settings.locale),
            clock=self._clock,
            locale_provider=lambda: self.settings.locale,
            refresh_seconds=settings.reference_refresh_seconds,
        )

    def parse(self, text: str, fmt: str) -> ResolvedDate:
        week_start = self.settings.week_start
        key = build_cache_key(text, fmt, week_start, self._clock().date())
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        context = ResolverContext(week_start=WeekStart.from_value(week_start))
        raw = self.resolver.resolve(text, context)
        formatted = try_format(raw, fmt)
        if formatted is None:
            # An unrenderable date is reported as unparseable.
            result = ResolvedDate(raw_date=None, formatted_string=INVALID_DATE)
        else:
            result = ResolvedDate(raw_date=raw, formatted_string=formatted)
        if not result.is_valid:
            log_event("date_unparseable", level="debug", text=text)

        self.cache.set(key, result)
        return result

    def parse_date(self, text: str) -> ResolvedDate:
        return self.parse(text, self.settings.date_format)

    def parse_time(self, text: str) -> ResolvedDate:
        return self.parse(text, self.settings.time_format)

    def now_string(self) -> str:
        fmt = f"{self.settings.date_format}{self.settings.separator}{self.settings.time_format}"
        return format_date(self._clock(), fmt)

    def today_string(self) -> str:
        return format_date(self._clock(), self.settings.date_format)

    def time_string(self) -> str:
        return format_date(self._clock(), self.settings.time_format)

    def update_settings(self, settings: Settings) -> None:
        locale_changed = settings.locale != self.settings.locale
        self.settings = settings
        if locale_changed and isinstance(self.resolver.recognizer, DateparserRecognizer):
            self.resolver.recognizer = DateparserRecognizer(locale=settings.locale)
        self.cache.clear()
        log_event("settings_updated", week_start=settings.week_start, locale=settings.locale)

    def close(self) -> None:
        self.cache.clear()


_date_service: DateService | None = None


def get_date_service() -> DateService:
    global _date_service
    if _date_service is None:
        _date_service = DateService(settings=get_settings())
    return _date_service


def reset_date_service() -> None:
    global _date_service
    if _date_service is not None:
        _date_service.close()
    _date_service = None
