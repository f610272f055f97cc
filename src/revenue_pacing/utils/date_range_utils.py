#!/usr/bin/env python3
"""
Date Range Utilities for the revenue pacing dashboard.

The single parse/format boundary for YYYY-MM-DD calendar dates, plus the
week, month and quarter arithmetic shared by every calculation module.
"""

import calendar
import re
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DateParseError(ValueError):
    """Raised when a date string is not a valid YYYY-MM-DD calendar date."""
    pass


class DateRangeUtils:
    """Utility class for parsing and handling calendar date ranges."""

    @staticmethod
    def is_iso_format(value) -> bool:
        """True when the value has the YYYY-MM-DD shape (validity not checked)."""
        return isinstance(value, str) and bool(_ISO_DATE_PATTERN.match(value))

    @staticmethod
    def parse_date(value) -> date:
        """
        Parse a canonical YYYY-MM-DD string into a date.

        Raises:
            DateParseError: If the value is not a string in YYYY-MM-DD form
                or does not name a real calendar day

        Examples:
            >>> DateRangeUtils.parse_date("2025-03-07")
            datetime.date(2025, 3, 7)
        """
        if not DateRangeUtils.is_iso_format(value):
            raise DateParseError(f"Invalid date format: {value!r} (expected YYYY-MM-DD)")
        year, month, day = (int(part) for part in value.split("-"))
        try:
            return date(year, month, day)
        except ValueError as e:
            raise DateParseError(f"Invalid calendar date: {value!r}") from e

    @staticmethod
    def try_parse_date(value) -> Optional[date]:
        """Parse like parse_date but return None instead of raising."""
        if isinstance(value, date):
            return value
        try:
            return DateRangeUtils.parse_date(value)
        except DateParseError:
            return None

    @staticmethod
    def format_date(value: date) -> str:
        """Format a date as YYYY-MM-DD."""
        return value.strftime("%Y-%m-%d")

    @staticmethod
    def yesterday(today: date) -> date:
        return today - timedelta(days=1)

    @staticmethod
    def week_bounds(day: date) -> Tuple[date, date]:
        """Monday and Sunday of the ISO week containing day."""
        monday = day - timedelta(days=day.weekday())
        return monday, monday + timedelta(days=6)

    @staticmethod
    def month_bounds(year: int, month: int) -> Tuple[date, date]:
        """First and last day of a month (month is 1-12)."""
        return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])

    @staticmethod
    def quarter_bounds(day: date) -> Tuple[date, date]:
        """First and last day of the calendar quarter containing day."""
        first_month = 3 * ((day.month - 1) // 3) + 1
        start, _ = DateRangeUtils.month_bounds(day.year, first_month)
        _, end = DateRangeUtils.month_bounds(day.year, first_month + 2)
        return start, end

    @staticmethod
    def iter_days(start: date, end: date) -> Iterator[date]:
        """Yield every date in the closed interval [start, end]."""
        current = start
        while current <= end:
            yield current
            current += timedelta(days=1)
