"""Due date resolution for Task Capture.

Turns a free-text task into a calendar date by checking an ordered list of
phrase grammars. The first grammar that matches wins; later grammars are
never consulted, even when they would be more specific.

Explicit and relative dates (numeric dates, month names, bare weekdays,
"in N days/weeks") are moved off the weekend to the following Monday.
Fixed anchors (today, tomorrow, end of week/month, next week/month) are
returned as-is.
"""

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, timedelta

import pytz
from dateutil.relativedelta import relativedelta

from taskcapture.config import settings

logger = logging.getLogger(__name__)

MONTHS = [
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
]

# Monday = 0, matching date.weekday()
WEEKDAYS = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]

FRIDAY = 4

_MONTH_ALTERNATION = "|".join(MONTHS)
_WEEKDAY_ALTERNATION = "|".join(WEEKDAYS)


def is_weekend(value: date) -> bool:
    """Check if a date falls on Saturday or Sunday."""
    return value.weekday() >= 5


def move_to_next_monday(value: date) -> date:
    """Shift a weekend date to the following Monday; weekdays are unchanged."""
    if value.weekday() == 5:
        return value + timedelta(days=2)
    if value.weekday() == 6:
        return value + timedelta(days=1)
    return value


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, 1) + relativedelta(day=31)


def add_months(value: date, months: int) -> date:
    """Advance a date by whole months, clamping to the target month's last day.

    Examples:
        add_months(date(2025, 1, 31), 1) -> date(2025, 2, 28)
        add_months(date(2025, 12, 15), 1) -> date(2026, 1, 15)
    """
    return value + relativedelta(months=months)


class DateResolver:
    """Resolves a due date from natural language text.

    Args:
        timezone: IANA timezone that defines "today". Defaults to
            settings.user_timezone.
    """

    TODAY_PATTERN = re.compile(r"\b(today|now)\b", re.IGNORECASE)
    TOMORROW_PATTERN = re.compile(r"\btomorrow\b", re.IGNORECASE)
    END_OF_WEEK_PATTERN = re.compile(r"\b(end of (the )?week|by friday|this friday)\b", re.IGNORECASE)
    END_OF_MONTH_PATTERN = re.compile(r"\b(end of (the )?month|month end)\b", re.IGNORECASE)
    NEXT_WEEK_PATTERN = re.compile(r"\bnext week\b", re.IGNORECASE)
    NEXT_MONTH_PATTERN = re.compile(r"\bnext month\b", re.IGNORECASE)
    NUMERIC_DATE_PATTERN = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\b")
    MONTH_DAY_PATTERN = re.compile(
        rf"\b({_MONTH_ALTERNATION})\s+(\d{{1,2}})(st|nd|rd|th)?\b", re.IGNORECASE
    )
    MONTH_REFERENCE_PATTERN = re.compile(
        rf"\b(early|mid|late|beginning of|end of)\s+({_MONTH_ALTERNATION})\b", re.IGNORECASE
    )
    WEEKDAY_PATTERN = re.compile(rf"\b({_WEEKDAY_ALTERNATION})\b", re.IGNORECASE)
    IN_DAYS_PATTERN = re.compile(r"\bin\s+(\d+)\s+days?\b", re.IGNORECASE)
    IN_WEEKS_PATTERN = re.compile(r"\bin\s+(\d+)\s+weeks?\b", re.IGNORECASE)

    def __init__(self, timezone: str | None = None):
        self.timezone = pytz.timezone(timezone or settings.user_timezone)

        # (name, grammar, avoid_weekend) in precedence order
        self.grammars: list[tuple[str, Callable[[str, date], date | None], bool]] = [
            ("today", self._today, False),
            ("tomorrow", self._tomorrow, False),
            ("end_of_week", self._end_of_week, False),
            ("end_of_month", self._end_of_month, False),
            ("weekday_next_week", self._weekday_next_week, False),
            ("next_week", self._next_week, False),
            ("next_month", self._next_month, False),
            ("numeric_date", self._numeric_date, True),
            ("month_day", self._month_day, True),
            ("month_reference", self._month_reference, True),
            ("weekday", self._weekday, True),
            ("in_days", self._in_days, True),
            ("in_weeks", self._in_weeks, True),
        ]

    def today(self) -> date:
        """Current calendar day in the configured timezone."""
        return datetime.now(self.timezone).date()

    def resolve(self, text: str, today: date | None = None) -> date | None:
        """Resolve the due date mentioned in text.

        Args:
            text: Task text
            today: Reference day. Defaults to today in the configured timezone.

        Returns:
            The resolved date, or None when no date phrase is present
        """
        today = today or self.today()

        for name, grammar, avoid_weekend in self.grammars:
            resolved = grammar(text, today)
            if resolved is None:
                continue
            if avoid_weekend and is_weekend(resolved):
                logger.debug(f"Moving weekend date {resolved} to Monday")
                resolved = move_to_next_monday(resolved)
            logger.debug(f"Resolved due date {resolved} via {name}")
            return resolved

        return None

    def _today(self, text: str, today: date) -> date | None:
        if self.TODAY_PATTERN.search(text):
            return today
        return None

    def _tomorrow(self, text: str, today: date) -> date | None:
        if self.TOMORROW_PATTERN.search(text):
            return today + timedelta(days=1)
        return None

    def _end_of_week(self, text: str, today: date) -> date | None:
        if self.END_OF_WEEK_PATTERN.search(text):
            days_until_friday = (FRIDAY - today.weekday()) % 7 or 7
            return today + timedelta(days=days_until_friday)
        return None

    def _end_of_month(self, text: str, today: date) -> date | None:
        if self.END_OF_MONTH_PATTERN.search(text):
            return last_day_of_month(today.year, today.month)
        return None

    def _weekday_next_week(self, text: str, today: date) -> date | None:
        weekday_match = self.WEEKDAY_PATTERN.search(text)
        if not weekday_match or not self.NEXT_WEEK_PATTERN.search(text):
            return None

        day_index = WEEKDAYS.index(weekday_match.group(1).lower())
        week_later = today + timedelta(days=7)
        monday_of_next_week = week_later - timedelta(days=week_later.weekday())
        return monday_of_next_week + timedelta(days=day_index)

    def _next_week(self, text: str, today: date) -> date | None:
        if self.NEXT_WEEK_PATTERN.search(text) and not self.WEEKDAY_PATTERN.search(text):
            return today + timedelta(days=7)
        return None

    def _next_month(self, text: str, today: date) -> date | None:
        if self.NEXT_MONTH_PATTERN.search(text):
            return add_months(today, 1)
        return None

    def _numeric_date(self, text: str, today: date) -> date | None:
        match = self.NUMERIC_DATE_PATTERN.search(text)
        if not match:
            return None

        month, day, year = match.groups()
        full_year = 2000 + int(year) if len(year) == 2 else int(year)
        try:
            return date(full_year, int(month), int(day))
        except ValueError:
            logger.debug(f"Ignoring impossible date: {match.group(0)}")
            return None

    def _month_day(self, text: str, today: date) -> date | None:
        match = self.MONTH_DAY_PATTERN.search(text)
        if not match:
            return None

        month = MONTHS.index(match.group(1).lower()) + 1
        day = int(match.group(2))
        try:
            target = date(today.year, month, day)
            if target < today:
                target = date(today.year + 1, month, day)
        except ValueError:
            logger.debug(f"Ignoring impossible date: {match.group(0)}")
            return None
        return target

    def _month_reference(self, text: str, today: date) -> date | None:
        match = self.MONTH_REFERENCE_PATTERN.search(text)
        if not match:
            return None

        reference = match.group(1).lower()
        month = MONTHS.index(match.group(2).lower()) + 1

        def day_in(year: int) -> date:
            if reference == "mid":
                return date(year, month, 15)
            if reference in ("late", "end of"):
                return last_day_of_month(year, month)
            return date(year, month, 5)

        target = day_in(today.year)
        if target < today:
            target = day_in(today.year + 1)
        return target

    def _weekday(self, text: str, today: date) -> date | None:
        match = self.WEEKDAY_PATTERN.search(text)
        if not match or self.NEXT_WEEK_PATTERN.search(text):
            return None

        day_index = WEEKDAYS.index(match.group(1).lower())
        days_until = (day_index - today.weekday()) % 7 or 7
        return today + timedelta(days=days_until)

    def _in_days(self, text: str, today: date) -> date | None:
        match = self.IN_DAYS_PATTERN.search(text)
        if match:
            return _offset(today, match.group(1))
        return None

    def _in_weeks(self, text: str, today: date) -> date | None:
        match = self.IN_WEEKS_PATTERN.search(text)
        if match:
            return _offset(today, match.group(1), days_per_unit=7)
        return None


def _offset(today: date, digits: str, days_per_unit: int = 1) -> date | None:
    """Add a spelled-out count of days to today; None when it cannot be a date."""
    try:
        return today + timedelta(days=int(digits) * days_per_unit)
    except (OverflowError, ValueError):
        # ValueError: digit strings past the int conversion limit
        logger.debug(f"Offset of {digits[:20]} x {days_per_unit} days is out of range")
        return None
