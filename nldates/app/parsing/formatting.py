from __future__ import annotations

from datetime import datetime

from nldates.app.parsing.models import INVALID_DATE


def try_format(value: datetime | None, pattern: str) -> str | None:
    """Render a resolved date with a strftime pattern; None when it cannot be rendered."""
    if value is None:
        return None
    try:
        return value.strftime(pattern)
    except ValueError:
        return None


def format_date(value: datetime | None, pattern: str) -> str:
    rendered = try_format(value, pattern)
    return INVALID_DATE if rendered is None else rendered
