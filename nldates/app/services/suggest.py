"""
Rule-based autocomplete for date phrases typed after a trigger phrase.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from nldates.app.core.config import Settings
from nldates.app.services.commands import generate_markdown_link
from nldates.app.services.date_service import DateService


TIME_PREFIX = "time:"

_TIME_RE = re.compile(r"^time")
_RELATIVE_WORD_RE = re.compile(r"(next|last|this)", re.I)
_IN_DELTA_RE = re.compile(r"^in ([+-]?\d+)", re.I)
_DELTA_RE = re.compile(r"^([+-]?\d+)", re.I)
_WORD_CHAR_RE = re.compile(r"[`a-zA-Z0-9]")

TIME_OFFSETS = ["now", "+15 minutes", "+1 hour", "-15 minutes", "-1 hour"]
RELATIVE_TARGETS = [
    "week",
    "month",
    "year",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
DEFAULT_LABELS = ["Today", "Yesterday", "Tomorrow"]


@dataclass(frozen=True)
class TriggerInfo:
    start: int
    end: int
    query: str


def _prefix_filter(labels: list[str], query: str) -> list[str]:
    lowered = query.lower()
    return [label for label in labels if label.lower().startswith(lowered)]


def get_date_suggestions(query: str) -> list[str]:
    if _TIME_RE.match(query):
        return _prefix_filter([f"{TIME_PREFIX}{val}" for val in TIME_OFFSETS], query)

    m = _RELATIVE_WORD_RE.search(query)
    if m:
        reference = m.group(1)
        return _prefix_filter([f"{reference} {val}" for val in RELATIVE_TARGETS], query)

    m = _IN_DELTA_RE.match(query) or _DELTA_RE.match(query)
    if m:
        delta = m.group(1)
        labels = [
            f"in {delta} minutes",
            f"in {delta} hours",
            f"in {delta} days",
            f"in {delta} weeks",
            f"in {delta} months",
            f"{delta} days ago",
            f"{delta} weeks ago",
            f"{delta} months ago",
        ]
        return _prefix_filter(labels, query)

    return _prefix_filter(DEFAULT_LABELS, query)


def get_suggestions(query: str) -> list[str]:
    suggestions = get_date_suggestions(query or "")
    if suggestions:
        return suggestions
    # Catch-all: offer the raw query itself.
    return [query or ""]


def detect_trigger(line: str, cursor: int, settings: Settings, start: int | None = None) -> TriggerInfo | None:
    """
    Locate an autosuggest query ending at `cursor` within `line`.

    `start` is the beginning of an already-open suggestion, if any.
    """
    if not settings.autosuggest_enabled:
        return None

    trigger = settings.autosuggest_trigger_phrase
    begin = start if start is not None else cursor - len(trigger)
    if begin < 0 or cursor > len(line):
        return None

    typed = line[begin:cursor]
    if not typed.startswith(trigger):
        return None

    # Ignore the trigger inside a word, e.g. an e-mail address.
    preceding = line[begin - 1] if begin > 0 else ""
    if preceding and _WORD_CHAR_RE.match(preceding):
        return None

    return TriggerInfo(start=begin, end=cursor, query=typed[len(trigger):])


def select_suggestion(service: DateService, label: str, include_alias: bool = False) -> str:
    settings = service.settings
    if label.startswith(TIME_PREFIX):
        return service.parse_time(label[len(TIME_PREFIX):]).formatted_string

    date_str = service.parse_date(label).formatted_string
    if not settings.autosuggest_toggle_link:
        return date_str
    return generate_markdown_link(
        date_str,
        alias=label if include_alias else None,
        use_markdown_links=settings.use_markdown_links,
    )
