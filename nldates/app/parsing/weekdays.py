"""
Week-start handling: weekday indices, locale defaults and week arithmetic.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta

from nldates.app.parsing.models import WeekStart


DAYS_OF_WEEK = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

# First day of week per locale tag (sunday=0). Unlisted tags fall back to
# their language, then to sunday.
LOCALE_FIRST_WEEKDAY: dict[str, int] = {
    "en": 0,
    "en-us": 0,
    "en-ca": 0,
    "en-in": 0,
    "en-gb": 1,
    "en-au": 1,
    "en-ie": 1,
    "en-nz": 1,
    "de": 1,
    "fr": 1,
    "fr-ca": 0,
    "es": 1,
    "es-us": 0,
    "it": 1,
    "nl": 1,
    "pt": 1,
    "pt-br": 0,
    "ru": 1,
    "uk": 1,
    "pl": 1,
    "cs": 1,
    "sv": 1,
    "da": 1,
    "nb": 1,
    "fi": 1,
    "tr": 1,
    "zh-cn": 1,
    "zh-tw": 1,
    "ja": 0,
    "ko": 0,
    "he": 0,
    "ar": 6,
    "fa": 6,
}


def week_number(day_name: str) -> int:
    """Index of a weekday name, sunday=0 .. saturday=6; -1 when unknown."""
    name = (day_name or "").strip().lower()
    if name not in DAYS_OF_WEEK:
        return -1
    return DAYS_OF_WEEK.index(name)


def locale_week_start(locale: str) -> str:
    tag = (locale or "").strip().lower().replace("_", "-")
    if tag in LOCALE_FIRST_WEEKDAY:
        return DAYS_OF_WEEK[LOCALE_FIRST_WEEKDAY[tag]]
    language = tag.split("-", 1)[0]
    return DAYS_OF_WEEK[LOCALE_FIRST_WEEKDAY.get(language, 0)]


def resolve_week_start(preference: WeekStart | str, locale: str) -> str:
    pref = WeekStart.from_value(preference)
    if pref is WeekStart.LOCALE_DEFAULT:
        return locale_week_start(locale)
    return pref.value


def _sunday_index(value: datetime) -> int:
    # datetime.weekday() is monday=0.
    return (value.weekday() + 1) % 7


def start_of_week(reference: datetime, week_start_index: int) -> datetime:
    offset = (_sunday_index(reference) - week_start_index) % 7
    return datetime.combine(reference.date() - timedelta(days=offset), time.min)


def next_weekday(reference: datetime, weekday_index: int) -> datetime:
    delta = (weekday_index - _sunday_index(reference)) % 7 or 7
    return datetime.combine(reference.date() + timedelta(days=delta), time.min)


def weekday_in_week(reference: datetime, weekday_index: int, week_start_index: int) -> datetime:
    start = start_of_week(reference, week_start_index)
    return start + timedelta(days=(weekday_index - week_start_index) % 7)


def previous_weekday(reference: datetime, weekday_index: int) -> datetime:
    delta = (_sunday_index(reference) - weekday_index) % 7 or 7
    return datetime.combine(reference.date() - timedelta(days=delta), time.min)
