from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from nldates.app.core.config import Settings
from nldates.app.parsing.resolver import Resolver
from nldates.app.services.date_service import DateService


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeMillisClock:
    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class StubRecognizer:
    def __init__(self, answers: dict[str, datetime] | None = None):
        self.answers = dict(answers or {})
        self.calls: list[tuple] = []

    def parse_date(self, text, reference, options=None):
        self.calls.append((text, reference, options))
        return self.answers.get(text)


def make_settings(**overrides) -> Settings:
    base = Settings(
        app_name="nldates-test",
        date_format="%Y-%m-%d",
        time_format="%H:%M",
        separator=" ",
        week_start="monday",
        locale="en-us",
        autosuggest_enabled=True,
        autosuggest_trigger_phrase="@",
        autosuggest_toggle_link=True,
        use_markdown_links=False,
        cache_max_size=100,
        cache_max_age_ms=300_000,
        reference_refresh_seconds=60,
        log_level="info",
    )
    return base.with_updates(**overrides)


@pytest.fixture
def clock():
    # Wednesday.
    return FakeClock(datetime(2024, 1, 10, 9, 30))


@pytest.fixture
def recognizer(clock):
    return StubRecognizer(
        {
            "tomorrow": datetime(2024, 1, 11, 9, 30),
            "Tomorrow": datetime(2024, 1, 11, 9, 30),
            "now": datetime(2024, 1, 10, 9, 30),
        }
    )


@pytest.fixture
def service(clock, recognizer):
    settings = make_settings()
    resolver = Resolver(recognizer=recognizer, clock=clock, locale_provider=lambda: settings.locale)
    return DateService(settings=settings, resolver=resolver, clock=clock)
