"""
General-purpose natural language date recognition backed by dateparser.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Protocol

import dateparser
from dateparser.search import search_dates

from nldates.app.observability.logging import log_event


_ISO_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})\s*$")
_SLASHED_RE = re.compile(r"^\s*(\d{4})/(\d{1,2})/(\d{1,2})\s*$")

# Locales that write day before month.
_DAY_FIRST_LOCALES = {"en-gb", "en-au", "en-ie", "en-nz", "en-in"}


@dataclass(frozen=True)
class RecognizerOptions:
    forward_date: bool = False


class DateRecognizer(Protocol):
    def parse_date(self, text: str, reference: datetime, options: RecognizerOptions | None = None) -> datetime | None:
        ...


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _fast_numeric(source: str) -> datetime | None:
    for pattern in (_ISO_RE, _SLASHED_RE):
        m = pattern.match(source)
        if not m:
            continue
        y, mo, d = int(m.group(1)), int(m.group(2)), int(m.group(3))
        try:
            return datetime.combine(date(y, mo, d), time.min)
        except ValueError:
            return None
    return None


class DateparserRecognizer:
    """
    Recognizer over dateparser.

    Whole-text parsing is tried first, then a search for the first date
    embedded in the text.
    """

    def __init__(self, locale: str = "en-us", languages: list[str] | None = None):
        self.locale = (locale or "en-us").strip().lower().replace("_", "-")
        self.languages = list(languages or ["en"])

    def _settings(self, reference: datetime, options: RecognizerOptions) -> dict[str, Any]:
        return {
            "RELATIVE_BASE": reference,
            "PREFER_DATES_FROM": "future" if options.forward_date else "current_period",
            "RETURN_AS_TIMEZONE_AWARE": False,
            "DATE_ORDER": "DMY" if self.locale in _DAY_FIRST_LOCALES else "MDY",
        }

    def parse_date(self, text: str, reference: datetime, options: RecognizerOptions | None = None) -> datetime | None:
        source = (text or "").strip()
        if not source:
            return None

        fast = _fast_numeric(source)
        if fast is not None or _ISO_RE.match(source) or _SLASHED_RE.match(source):
            return fast

        settings = self._settings(reference, options or RecognizerOptions())
        try:
            dt = dateparser.parse(source, settings=settings, languages=self.languages)
            if dt is not None:
                return dt
            found = search_dates(source, settings=settings, languages=self.languages)
            if found:
                return found[0][1]
        except Exception as exc:
            log_event("date_recognizer_failed", level="warning", text=source, error=str(exc))
        return None
