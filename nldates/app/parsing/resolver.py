"""
Natural language date resolution.

Input text is matched against an ordered list of rules; the first rule whose
predicate matches produces the date. Everything that no custom rule claims is
handed to the general recognizer:

1. holiday names ("Christmas")
2. a standalone ordinal day ("first", "twenty-first", "31st", "15")
3. "this week"
4. "next week" / "next month" / "next year"
5. "last day of <X>" / "end of <X>"
6. "mid <X>"
7. "next friday" / "upcoming friday" / "this friday" / "last friday" / "friday"
8. general recognizer
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from nldates.app.observability.logging import log_event
from nldates.app.parsing.models import ResolverContext, WeekStart
from nldates.app.parsing.ordinals import match_ordinal_day
from nldates.app.parsing.temporal import DateparserRecognizer, DateRecognizer, RecognizerOptions, last_day_of_month
from nldates.app.parsing.weekdays import (
    DAYS_OF_WEEK,
    next_weekday,
    previous_weekday,
    resolve_week_start,
    start_of_week,
    week_number,
    weekday_in_week,
)


_CHRISTMAS_RE = re.compile(r"\bchristmas\b", re.I)
_THIS_RE = re.compile(r"this\s(\w+)", re.I)
_NEXT_RE = re.compile(r"next\s(\w+)", re.I)
_LAST_DAY_RE = re.compile(r"(last day of|end of)\s*([^\n\r]*)", re.I)
_MID_RE = re.compile(r"mid\s(\w+)", re.I)
_WEEKDAY_NAMES = "|".join(DAYS_OF_WEEK)
_WEEKDAY_RE = re.compile(rf"\b(?:(next|upcoming|this|last)\s+)?({_WEEKDAY_NAMES})\b", re.I)

_FORWARD = RecognizerOptions(forward_date=True)

DEFAULT_REFRESH_SECONDS = 60

# "end of end of ..." is followed this many levels deep.
MAX_NESTED_DEPTH = 2


@dataclass(frozen=True)
class ResolveRequest:
    text: str
    reference: datetime
    week_start: str
    recognizer: DateRecognizer
    resolve_nested: Callable[[str], datetime | None]
    depth: int = 0

    @property
    def week_start_index(self) -> int:
        return week_number(self.week_start)


@dataclass(frozen=True)
class Rule:
    name: str
    match: Callable[[ResolveRequest], Any]
    handle: Callable[[ResolveRequest, Any], datetime | None]


def _match_holiday(req: ResolveRequest) -> Any:
    return _CHRISTMAS_RE.search(req.text)


def _handle_holiday(req: ResolveRequest, _match: Any) -> datetime | None:
    return datetime(req.reference.year, 12, 25)


def _handle_ordinal_day(req: ResolveRequest, day: int) -> datetime | None:
    ref = req.reference
    if day > last_day_of_month(ref.year, ref.month):
        return None
    return datetime(ref.year, ref.month, day)


def _unit_matcher(pattern: re.Pattern[str], units: set[str]) -> Callable[[ResolveRequest], Any]:
    def _match(req: ResolveRequest) -> Any:
        m = pattern.search(req.text)
        if not m:
            return None
        unit = m.group(1).lower()
        return unit if unit in units else None

    return _match


def _handle_this_week(req: ResolveRequest, _unit: str) -> datetime | None:
    return start_of_week(req.reference, req.week_start_index)


def _handle_next(req: ResolveRequest, unit: str) -> datetime | None:
    if unit == "week":
        return next_weekday(req.reference, req.week_start_index)
    # The whole original text is re-read against the "this <unit>" anchor,
    # so "next month" lands one month past the anchor.
    anchor = req.recognizer.parse_date(f"this {unit}", req.reference, _FORWARD) or req.reference
    return req.recognizer.parse_date(req.text, anchor, _FORWARD)


def _match_last_day(req: ResolveRequest) -> Any:
    if req.depth >= MAX_NESTED_DEPTH:
        return None
    m = _LAST_DAY_RE.search(req.text)
    if not m:
        return None
    return req.resolve_nested(m.group(2).strip())


def _handle_last_day(req: ResolveRequest, inner: datetime) -> datetime | None:
    last_day = last_day_of_month(inner.year, inner.month)
    literal = f"{inner.year:04d}-{inner.month:02d}-{last_day:02d}"
    return req.recognizer.parse_date(literal, req.reference, _FORWARD)


def _match_mid(req: ResolveRequest) -> Any:
    m = _MID_RE.search(req.text)
    return m.group(1) if m else None


def _handle_mid(req: ResolveRequest, unit: str) -> datetime | None:
    return req.recognizer.parse_date(f"{unit} 15th", req.reference, _FORWARD)


def _match_weekday(req: ResolveRequest) -> Any:
    return _WEEKDAY_RE.search(req.text)


def _handle_weekday(req: ResolveRequest, m: re.Match[str]) -> datetime | None:
    qualifier = (m.group(1) or "next").lower()
    weekday = DAYS_OF_WEEK.index(m.group(2).lower())
    if qualifier == "this":
        day = weekday_in_week(req.reference, weekday, req.week_start_index)
    elif qualifier == "last":
        day = previous_weekday(req.reference, weekday)
    else:
        day = next_weekday(req.reference, weekday)
    if m.group(0).strip().lower() == req.text.strip().lower():
        return day
    # Surrounding words ("next friday at 5pm") are read against the computed day.
    rest = f"{req.text[:m.start()]}{day:%Y-%m-%d}{req.text[m.end():]}"
    return req.recognizer.parse_date(rest, req.reference) or day


def _handle_fallback(req: ResolveRequest, _match: Any) -> datetime | None:
    return req.recognizer.parse_date(req.text, req.reference, RecognizerOptions())


DEFAULT_RULES: tuple[Rule, ...] = (
    Rule("holiday", _match_holiday, _handle_holiday),
    Rule("ordinal_day", lambda req: match_ordinal_day(req.text), _handle_ordinal_day),
    Rule("this_week", _unit_matcher(_THIS_RE, {"week"}), _handle_this_week),
    Rule("next_unit", _unit_matcher(_NEXT_RE, {"week", "month", "year"}), _handle_next),
    Rule("last_day_of", _match_last_day, _handle_last_day),
    Rule("mid", _match_mid, _handle_mid),
    Rule("weekday", _match_weekday, _handle_weekday),
    Rule("fallback", lambda req: True, _handle_fallback),
)


class Resolver:
    """
    Maps free text to a datetime, or None when nothing confident comes out.

    The reference instant is cached and re-read from the clock only once it
    is more than `refresh_seconds` old.
    """

    def __init__(
        self,
        recognizer: DateRecognizer | None = None,
        clock: Callable[[], datetime] | None = None,
        locale_provider: Callable[[], str] | None = None,
        refresh_seconds: int = DEFAULT_REFRESH_SECONDS,
        rules: tuple[Rule, ...] = DEFAULT_RULES,
    ):
        self.recognizer = recognizer or DateparserRecognizer()
        self.rules = rules
        self.refresh_seconds = refresh_seconds
        self._clock = clock or datetime.now
        self._locale_provider = locale_provider or (lambda: "en-us")
        self._reference = self._clock()

    def reference_instant(self) -> datetime:
        now = self._clock()
        if (now - self._reference).total_seconds() > self.refresh_seconds:
            self._reference = now
        return self._reference

    def week_start_for(self, preference: WeekStart | str) -> str:
        return resolve_week_start(preference, self._locale_provider())

    def resolve(self, text: str, context: ResolverContext | None = None) -> datetime | None:
        return self._resolve(text, context or ResolverContext(), 0)

    def _resolve(self, text: str, ctx: ResolverContext, depth: int) -> datetime | None:
        reference = ctx.reference_instant or self.reference_instant()
        week_start = self.week_start_for(ctx.week_start)
        nested_ctx = ResolverContext(week_start=WeekStart(week_start), reference_instant=reference)

        request = ResolveRequest(
            text=text or "",
            reference=reference,
            week_start=week_start,
            recognizer=self.recognizer,
            resolve_nested=lambda inner: self._resolve(inner, nested_ctx, depth + 1),
            depth=depth,
        )
        for rule in self.rules:
            matched = rule.match(request)
            if matched is None:
                continue
            result = rule.handle(request, matched)
            log_event("date_rule_applied", level="debug", rule=rule.name, text=request.text, valid=result is not None)
            return result
        return None

    def get_parsed_date(self, text: str, week_start: WeekStart | str = WeekStart.LOCALE_DEFAULT) -> datetime | None:
        return self.resolve(text, ResolverContext(week_start=WeekStart.from_value(week_start)))
