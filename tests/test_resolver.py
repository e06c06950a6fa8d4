"""Rule-by-rule tests for Resolver."""

from datetime import datetime, timedelta

import pytest

from nldates.app.parsing.models import ResolverContext, WeekStart
from nldates.app.parsing.resolver import Resolver

from conftest import FakeClock, StubRecognizer


REFERENCE = datetime(2024, 1, 10, 9, 30)  # Wednesday


def _ctx(week_start=WeekStart.MONDAY, reference=REFERENCE):
    return ResolverContext(week_start=week_start, reference_instant=reference)


@pytest.fixture
def stub():
    return StubRecognizer()


@pytest.fixture
def resolver(stub):
    return Resolver(recognizer=stub, clock=FakeClock(REFERENCE))


class TestHoliday:
    def test_christmas_is_december_25_of_reference_year(self, resolver, stub):
        assert resolver.resolve("Christmas", _ctx(reference=datetime(2024, 3, 1))) == datetime(2024, 12, 25)
        assert stub.calls == []

    def test_case_insensitive_and_wins_over_later_rules(self, resolver):
        assert resolver.resolve("CHRISTMAS next week", _ctx()) == datetime(2024, 12, 25)


class TestOrdinalDay:
    @pytest.mark.parametrize("text", ["twenty-first", "21st", "21", "twenty first"])
    def test_ordinal_forms_agree(self, resolver, stub, text):
        assert resolver.resolve(text, _ctx()) == datetime(2024, 1, 21)
        assert stub.calls == []

    def test_first_and_fifteenth(self, resolver):
        assert resolver.resolve("first", _ctx()) == datetime(2024, 1, 1)
        assert resolver.resolve("15", _ctx()) == datetime(2024, 1, 15)
        assert resolver.resolve("31st", _ctx()) == datetime(2024, 1, 31)

    def test_day_missing_from_month_is_invalid(self, resolver):
        assert resolver.resolve("thirty-first", _ctx(reference=datetime(2023, 2, 10))) is None


class TestThisWeek:
    def test_start_of_week_monday(self, resolver, stub):
        assert resolver.resolve("this week", _ctx()) == datetime(2024, 1, 8)
        assert stub.calls == []

    def test_start_of_week_sunday(self, resolver):
        assert resolver.resolve("This Week", _ctx(week_start=WeekStart.SUNDAY)) == datetime(2024, 1, 7)

    def test_other_units_fall_through(self, resolver, stub):
        assert resolver.resolve("this month", _ctx()) is None
        text, reference, options = stub.calls[-1]
        assert text == "this month"
        assert reference == REFERENCE
        assert options.forward_date is False


class TestNext:
    def test_next_week_lands_on_week_start_after_reference(self, resolver):
        result = resolver.resolve("next week", _ctx())
        assert result == datetime(2024, 1, 15)
        assert result > REFERENCE
        assert result.weekday() == 0

    def test_next_week_on_week_start_day_skips_a_week(self, resolver):
        monday = datetime(2024, 1, 8, 8, 0)
        assert resolver.resolve("NEXT WEEK", _ctx(reference=monday)) == datetime(2024, 1, 15)

    def test_next_month_rereads_whole_text_from_anchor(self, stub, resolver):
        anchor = datetime(2024, 1, 10, 12, 0)
        stub.answers.update({"this month": anchor, "next month 15th": datetime(2024, 2, 15)})

        assert resolver.resolve("next month 15th", _ctx()) == datetime(2024, 2, 15)
        assert [c[0] for c in stub.calls] == ["this month", "next month 15th"]
        assert stub.calls[1][1] == anchor
        assert all(c[2].forward_date for c in stub.calls)

    def test_next_year_uses_reference_when_anchor_fails(self, stub, resolver):
        stub.answers["next year"] = datetime(2025, 1, 10)

        assert resolver.resolve("next year", _ctx()) == datetime(2025, 1, 10)
        assert [c[0] for c in stub.calls] == ["this year", "next year"]
        assert stub.calls[1][1] == REFERENCE


class TestWeekday:
    def test_next_weekday_is_strictly_after_reference(self, resolver):
        assert resolver.resolve("next friday", _ctx()) == datetime(2024, 1, 12)
        assert resolver.resolve("next Wednesday", _ctx()) == datetime(2024, 1, 17)
        assert resolver.resolve("next monday", _ctx()) == datetime(2024, 1, 15)
        assert resolver.resolve("upcoming friday", _ctx()) == datetime(2024, 1, 12)

    def test_bare_weekday_means_next_occurrence(self, resolver):
        assert resolver.resolve("Friday", _ctx()) == datetime(2024, 1, 12)
        assert resolver.resolve("tuesday", _ctx()) == datetime(2024, 1, 16)

    def test_this_weekday_stays_in_current_week(self, resolver):
        assert resolver.resolve("this friday", _ctx()) == datetime(2024, 1, 12)
        assert resolver.resolve("this monday", _ctx()) == datetime(2024, 1, 8)
        assert resolver.resolve("this sunday", _ctx()) == datetime(2024, 1, 14)

    def test_this_weekday_follows_week_start(self, resolver):
        assert resolver.resolve("this sunday", _ctx(week_start=WeekStart.SUNDAY)) == datetime(2024, 1, 7)
        assert resolver.resolve("this saturday", _ctx(week_start=WeekStart.SUNDAY)) == datetime(2024, 1, 13)

    def test_last_weekday_is_strictly_before_reference(self, resolver):
        assert resolver.resolve("last friday", _ctx()) == datetime(2024, 1, 5)
        assert resolver.resolve("last wednesday", _ctx()) == datetime(2024, 1, 3)

    def test_surrounding_words_read_against_computed_day(self, stub, resolver):
        stub.answers["2024-01-12 at 5pm"] = datetime(2024, 1, 12, 17, 0)

        assert resolver.resolve("next friday at 5pm", _ctx()) == datetime(2024, 1, 12, 17, 0)
        assert stub.calls[-1][0] == "2024-01-12 at 5pm"

    def test_unreadable_remainder_keeps_computed_day(self, resolver):
        assert resolver.resolve("next friday please", _ctx()) == datetime(2024, 1, 12)

    def test_weekday_inside_a_word_is_ignored(self, stub, resolver):
        assert resolver.resolve("fridays", _ctx()) is None
        assert stub.calls[-1][0] == "fridays"


class TestLastDayOf:
    def test_last_day_of_leap_february(self, stub, resolver):
        stub.answers.update({"February": datetime(2024, 2, 10), "2024-02-29": datetime(2024, 2, 29)})

        assert resolver.resolve("last day of February", _ctx()) == datetime(2024, 2, 29)
        literal_call = stub.calls[-1]
        assert literal_call[0] == "2024-02-29"
        assert literal_call[2].forward_date is True

    def test_end_of_non_leap_february(self, stub, resolver):
        stub.answers.update({"february": datetime(2023, 2, 10), "2023-02-28": datetime(2023, 2, 28)})

        assert resolver.resolve("end of february", _ctx(reference=datetime(2023, 1, 5))) == datetime(2023, 2, 28)

    def test_next_rule_claims_text_before_end_of(self, stub, resolver):
        resolver.resolve("end of next month", _ctx())
        assert [c[0] for c in stub.calls] == ["this month", "end of next month"]

    def test_nested_target_goes_through_resolver_rules(self, stub, resolver):
        stub.answers["2024-01-31"] = datetime(2024, 1, 31)

        assert resolver.resolve("last day of the 21st", _ctx()) is None
        assert resolver.resolve("last day of 21st", _ctx()) == datetime(2024, 1, 31)
        assert "21st" not in [c[0] for c in stub.calls]

    def test_nesting_stops_at_max_depth(self, stub, resolver):
        assert resolver.resolve("end of " * 400 + "March", _ctx()) is None
        assert len(stub.calls) < 10

    def test_two_levels_of_nesting_still_resolve(self, stub, resolver):
        stub.answers.update({"2024-01-31": datetime(2024, 1, 31)})

        assert resolver.resolve("end of end of 21st", _ctx()) == datetime(2024, 1, 31)

    def test_unresolvable_target_falls_through(self, stub, resolver):
        assert resolver.resolve("end of nothing", _ctx()) is None
        assert stub.calls[-1][0] == "end of nothing"
        assert stub.calls[-1][2].forward_date is False


class TestMid:
    def test_mid_month_asks_for_fifteenth(self, stub, resolver):
        stub.answers["June 15th"] = datetime(2024, 6, 15)

        assert resolver.resolve("mid June", _ctx()) == datetime(2024, 6, 15)
        assert stub.calls[0][0] == "June 15th"
        assert stub.calls[0][2].forward_date is True


class TestFallback:
    def test_text_and_reference_are_passed_unchanged(self, stub, resolver):
        resolver.resolve("in 3 days", _ctx(week_start=WeekStart.SATURDAY))
        text, reference, options = stub.calls[0]
        assert (text, reference) == ("in 3 days", REFERENCE)
        assert options.forward_date is False

    def test_unparseable_returns_none(self, resolver):
        assert resolver.resolve("gibberish", _ctx()) is None
        assert resolver.resolve("", _ctx()) is None


class TestWeekStartAndReference:
    def test_locale_default_is_rederived_each_call(self, stub):
        locale = ["en-gb"]
        resolver = Resolver(recognizer=stub, clock=FakeClock(REFERENCE), locale_provider=lambda: locale[0])
        ctx = _ctx(week_start=WeekStart.LOCALE_DEFAULT)

        assert resolver.resolve("this week", ctx) == datetime(2024, 1, 8)
        locale[0] = "en-us"
        assert resolver.resolve("this week", ctx) == datetime(2024, 1, 7)

    def test_reference_refreshes_only_when_stale(self, stub):
        clock = FakeClock(REFERENCE)
        resolver = Resolver(recognizer=stub, clock=clock)

        clock.advance(seconds=59)
        assert resolver.reference_instant() == REFERENCE
        clock.advance(seconds=2)
        assert resolver.reference_instant() == REFERENCE + timedelta(seconds=61)

    def test_cached_reference_used_without_context_instant(self, stub):
        clock = FakeClock(REFERENCE)
        resolver = Resolver(recognizer=stub, clock=clock)
        clock.advance(seconds=30)

        resolver.get_parsed_date("tomorrow", "monday")
        assert stub.calls[0][1] == REFERENCE


class TestWithDateparser:
    """Same rules over the default dateparser recognizer."""

    @pytest.fixture
    def real(self):
        return Resolver(clock=FakeClock(REFERENCE))

    def test_christmas(self, real):
        assert real.resolve("Christmas", _ctx()).date() == datetime(2024, 12, 25).date()

    def test_last_day_of_february_leap_and_common_year(self, real):
        assert real.resolve("last day of February", _ctx()).date() == datetime(2024, 2, 29).date()
        common = _ctx(reference=datetime(2023, 1, 10, 9, 30))
        assert real.resolve("last day of February", common).date() == datetime(2023, 2, 28).date()

    def test_mid_june(self, real):
        assert real.resolve("mid June", _ctx()).date() == datetime(2024, 6, 15).date()

    def test_next_week_monday(self, real):
        result = real.resolve("next week", _ctx())
        assert result > REFERENCE
        assert result.weekday() == 0

    def test_next_friday_is_after_reference(self, real):
        result = real.resolve("next friday", _ctx())
        assert result > REFERENCE
        assert result.date() == datetime(2024, 1, 12).date()

    def test_this_friday_with_monday_week_start(self, real):
        assert real.resolve("this friday", _ctx(week_start=WeekStart.MONDAY)).date() == datetime(2024, 1, 12).date()

    def test_relative_days(self, real):
        assert real.resolve("in 3 days", _ctx()).date() == datetime(2024, 1, 13).date()
