"""
Value types shared by the resolver, the cache and the date service.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


INVALID_DATE = "Invalid date"


class WeekStart(str, Enum):
    LOCALE_DEFAULT = "locale-default"
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @classmethod
    def from_value(cls, raw: Any) -> "WeekStart":
        text = str(raw.value if isinstance(raw, WeekStart) else raw or "").strip().lower()
        try:
            return cls(text)
        except ValueError:
            return cls.LOCALE_DEFAULT


@dataclass(frozen=True)
class ResolverContext:
    week_start: WeekStart = WeekStart.LOCALE_DEFAULT
    reference_instant: datetime | None = None


@dataclass(frozen=True)
class ResolvedDate:
    raw_date: datetime | None
    formatted_string: str

    @property
    def is_valid(self) -> bool:
        return self.raw_date is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "formatted_string": self.formatted_string,
            "date": self.raw_date.isoformat() if self.raw_date else None,
            "is_valid": self.is_valid,
        }
