"""Tests for due date resolution."""

from datetime import date, datetime

import pytz

from taskcapture.services.dates import (
    DateResolver,
    add_months,
    is_weekend,
    last_day_of_month,
    move_to_next_monday,
)

# Wednesday
WEDNESDAY = date(2025, 1, 15)
FRIDAY = date(2025, 1, 17)
SATURDAY = date(2025, 1, 18)


class TestWeekendHelpers:
    def test_is_weekend(self):
        assert is_weekend(date(2025, 1, 18)) is True
        assert is_weekend(date(2025, 1, 19)) is True
        assert is_weekend(date(2025, 1, 20)) is False
        assert is_weekend(WEDNESDAY) is False

    def test_saturday_moves_two_days(self):
        assert move_to_next_monday(date(2025, 1, 18)) == date(2025, 1, 20)

    def test_sunday_moves_one_day(self):
        assert move_to_next_monday(date(2025, 1, 19)) == date(2025, 1, 20)

    def test_weekday_unchanged(self):
        assert move_to_next_monday(WEDNESDAY) == WEDNESDAY


class TestMonthArithmetic:
    def test_last_day_of_month(self):
        assert last_day_of_month(2025, 2) == date(2025, 2, 28)
        assert last_day_of_month(2024, 2) == date(2024, 2, 29)
        assert last_day_of_month(2025, 12) == date(2025, 12, 31)

    def test_add_months_keeps_day(self):
        assert add_months(date(2025, 1, 15), 1) == date(2025, 2, 15)

    def test_add_months_clamps_to_month_end(self):
        """Jan 31 + 1 month lands on the last day of February."""
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2025, 5, 31), 1) == date(2025, 6, 30)

    def test_add_months_crosses_year(self):
        assert add_months(date(2025, 12, 15), 1) == date(2026, 1, 15)


class TestAnchoredGrammars:
    """Grammars 1-7: returned as-is, even on a weekend."""

    def setup_method(self):
        self.resolver = DateResolver(timezone="UTC")

    def test_today(self):
        assert self.resolver.resolve("Do it today", WEDNESDAY) == WEDNESDAY

    def test_now(self):
        assert self.resolver.resolve("Fix the build now", WEDNESDAY) == WEDNESDAY

    def test_today_on_weekend_not_shifted(self):
        assert self.resolver.resolve("today", SATURDAY) == SATURDAY

    def test_tomorrow(self):
        assert self.resolver.resolve("Call dentist tomorrow", WEDNESDAY) == date(2025, 1, 16)

    def test_tomorrow_landing_on_saturday_not_shifted(self):
        assert self.resolver.resolve("tomorrow", FRIDAY) == SATURDAY

    def test_end_of_week(self):
        assert self.resolver.resolve("Finish report by end of the week", WEDNESDAY) == FRIDAY

    def test_by_friday(self):
        assert self.resolver.resolve("Send invoice by Friday", WEDNESDAY) == FRIDAY

    def test_this_friday_on_friday_is_next_week(self):
        assert self.resolver.resolve("this friday", FRIDAY) == date(2025, 1, 24)

    def test_end_of_month(self):
        assert self.resolver.resolve("Pay rent end of month", WEDNESDAY) == date(2025, 1, 31)

    def test_month_end(self):
        assert self.resolver.resolve("month end close", date(2025, 2, 3)) == date(2025, 2, 28)

    def test_weekday_next_week(self):
        assert self.resolver.resolve("Wednesday next week", WEDNESDAY) == date(2025, 1, 22)

    def test_monday_next_week(self):
        assert self.resolver.resolve("next week on monday", FRIDAY) == date(2025, 1, 20)

    def test_weekend_day_next_week_not_shifted(self):
        assert self.resolver.resolve("Saturday next week", WEDNESDAY) == date(2025, 1, 25)

    def test_next_week(self):
        assert self.resolver.resolve("Plan offsite next week", WEDNESDAY) == date(2025, 1, 22)

    def test_next_month(self):
        assert self.resolver.resolve("Renew license next month", WEDNESDAY) == date(2025, 2, 15)

    def test_next_month_clamps(self):
        assert self.resolver.resolve("next month", date(2025, 1, 31)) == date(2025, 2, 28)


class TestExplicitGrammars:
    """Grammars 8-13: weekend results move to Monday."""

    def setup_method(self):
        self.resolver = DateResolver(timezone="UTC")

    def test_numeric_date(self):
        assert self.resolver.resolve("Submit on 03/14/2025", WEDNESDAY) == date(2025, 3, 14)

    def test_numeric_date_with_dashes_and_short_year(self):
        assert self.resolver.resolve("due 3-14-25", WEDNESDAY) == date(2025, 3, 14)

    def test_numeric_date_on_saturday_moves_to_monday(self):
        assert self.resolver.resolve("due 01/18/2025", WEDNESDAY) == date(2025, 1, 20)

    def test_impossible_numeric_date_falls_through(self):
        assert self.resolver.resolve("ticket 13/40/2025", WEDNESDAY) is None

    def test_impossible_numeric_date_uses_later_grammar(self):
        assert self.resolver.resolve("ref 02/30/2025 in 2 days", WEDNESDAY) == FRIDAY

    def test_month_day(self):
        assert self.resolver.resolve("Launch on August 15th", WEDNESDAY) == date(2025, 8, 15)

    def test_month_day_today_stays_this_year(self):
        assert self.resolver.resolve("January 15", WEDNESDAY) == WEDNESDAY

    def test_month_day_in_past_rolls_to_next_year(self):
        # 2026-01-10 is a Saturday
        assert self.resolver.resolve("january 10", WEDNESDAY) == date(2026, 1, 12)

    def test_impossible_month_day_falls_through(self):
        assert self.resolver.resolve("February 30", WEDNESDAY) is None

    def test_mid_month_on_saturday(self):
        # 2025-03-15 is a Saturday
        assert self.resolver.resolve("mid March", WEDNESDAY) == date(2025, 3, 17)

    def test_early_month(self):
        assert self.resolver.resolve("early March", WEDNESDAY) == date(2025, 3, 5)

    def test_end_of_named_month(self):
        assert self.resolver.resolve("end of February", WEDNESDAY) == date(2025, 2, 28)

    def test_late_month(self):
        assert self.resolver.resolve("late June", WEDNESDAY) == date(2025, 6, 30)

    def test_beginning_of_past_month_rolls(self):
        assert self.resolver.resolve("beginning of January", WEDNESDAY) == date(2026, 1, 5)

    def test_bare_weekday(self):
        assert self.resolver.resolve("Call mom Friday", WEDNESDAY) == FRIDAY

    def test_bare_weekday_same_day_is_next_week(self):
        assert self.resolver.resolve("wednesday standup", WEDNESDAY) == date(2025, 1, 22)

    def test_bare_weekend_day_moves_to_monday(self):
        assert self.resolver.resolve("Clean garage saturday", WEDNESDAY) == date(2025, 1, 20)

    def test_in_days(self):
        assert self.resolver.resolve("in 2 days", WEDNESDAY) == FRIDAY

    def test_in_three_days_from_wednesday_is_monday(self):
        assert self.resolver.resolve("Follow up in 3 days", WEDNESDAY) == date(2025, 1, 20)

    def test_in_weeks(self):
        assert self.resolver.resolve("Review in 2 weeks", WEDNESDAY) == date(2025, 1, 29)

    def test_in_one_week(self):
        assert self.resolver.resolve("in 1 week", WEDNESDAY) == date(2025, 1, 22)

    def test_huge_offset_is_ignored(self):
        assert self.resolver.resolve("in 99999999999 days", WEDNESDAY) is None

    def test_offset_past_int_conversion_limit_is_ignored(self):
        digits = "1" * 5000
        assert self.resolver.resolve(f"in {digits} days", WEDNESDAY) is None
        assert self.resolver.resolve(f"in {digits} weeks", WEDNESDAY) is None

    def test_in_one_week_from_saturday_moves_to_monday(self):
        assert self.resolver.resolve("in 1 week", SATURDAY) == date(2025, 1, 27)

    def test_in_two_weeks_from_sunday_moves_to_monday(self):
        assert self.resolver.resolve("in 2 weeks", date(2025, 1, 19)) == date(2025, 1, 27)

    def test_in_days_from_saturday_moves_to_monday(self):
        assert self.resolver.resolve("in 7 days", SATURDAY) == date(2025, 1, 27)

    def test_in_days_from_sunday_landing_on_weekday(self):
        assert self.resolver.resolve("in 1 day", date(2025, 1, 19)) == date(2025, 1, 20)


class TestPrecedence:
    def setup_method(self):
        self.resolver = DateResolver(timezone="UTC")

    def test_first_grammar_wins(self):
        """'tomorrow' is checked before 'next week'."""
        assert self.resolver.resolve("tomorrow or next week", WEDNESDAY) == date(2025, 1, 16)

    def test_numeric_date_beats_weekday(self):
        assert self.resolver.resolve("Friday 03/05/2025", WEDNESDAY) == date(2025, 3, 5)

    def test_no_date(self):
        assert self.resolver.resolve("Buy milk", WEDNESDAY) is None

    def test_empty_text(self):
        assert self.resolver.resolve("", WEDNESDAY) is None

    def test_word_boundaries(self):
        assert self.resolver.resolve("Update the knowledge base", WEDNESDAY) is None


class TestTimezone:
    def test_uses_configured_timezone(self):
        resolver = DateResolver(timezone="America/Los_Angeles")
        assert resolver.timezone.zone == "America/Los_Angeles"

    def test_defaults_to_today_in_timezone(self):
        resolver = DateResolver(timezone="UTC")
        assert resolver.resolve("today") == datetime.now(pytz.utc).date()
