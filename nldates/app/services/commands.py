"""
Text renderers for the parse/insert commands and the daily-note action.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from nldates.app.services.date_service import DateService


PARSE_MODES = ("replace", "link", "clean", "time")
MAX_DAY_PARAM_CHARS = 200

_TRUTHY = {"y", "yes", "1", "t", "true"}


def parse_truthy(flag: str) -> bool:
    return (flag or "").lower() in _TRUTHY


def normalize_path(path: str) -> str:
    text = (path or "").strip().replace("\\", "/")
    text = re.sub(r"/+", "/", text)
    return text.strip("/")


def _escape_link_text(text: str) -> str:
    return re.sub(r"([\[\]])", r"\\\1", text)


def _escape_link_url(url: str) -> str:
    return re.sub(r"([()])", r"\\\1", url.replace(" ", "%20"))


def generate_markdown_link(subpath: str, alias: str | None = None, use_markdown_links: bool = False) -> str:
    path = normalize_path(subpath)
    if use_markdown_links:
        text = alias if alias else subpath
        return f"[{_escape_link_text(text)}]({_escape_link_url(path)})"
    if alias:
        return f"[[{path}|{alias}]]"
    return f"[[{path}]]"


def render_parse_command(service: DateService, selected_text: str, mode: str = "replace") -> str | None:
    """
    Build the replacement for a selection.
    Returns None when nothing is selected or the selection is not a date.
    """
    if not selected_text or not selected_text.strip():
        return None

    parsed = service.parse_date(selected_text)
    if not parsed.is_valid:
        return None

    if mode == "link":
        return f"[{selected_text}]({parsed.formatted_string})"
    if mode == "clean":
        return parsed.formatted_string
    if mode == "time":
        parsed_time = service.parse_time(selected_text)
        if not parsed_time.is_valid:
            return None
        return parsed_time.formatted_string
    return f"[[{parsed.formatted_string}]]"


@dataclass(frozen=True)
class DailyNoteTarget:
    day: str
    date: datetime
    note_name: str
    new_pane: bool


def handle_open_action(service: DateService, day: str | None, new_pane: str | None = None) -> DailyNoteTarget | None:
    """
    Resolve the `day` parameter of an open-daily-note request.
    Raises ValueError for a missing or oversized parameter; returns None
    when the day does not parse.
    """
    if not day or len(day) > MAX_DAY_PARAM_CHARS:
        raise ValueError("Invalid date provided to nldates.")

    parsed = service.parse_date(day)
    if not parsed.is_valid or parsed.raw_date is None:
        return None
    return DailyNoteTarget(
        day=day,
        date=parsed.raw_date,
        note_name=parsed.formatted_string,
        new_pane=parse_truthy(new_pane or "yes"),
    )
