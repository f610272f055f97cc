"""
Working Days Calendar Utility

Counts business (working) days for pacing calculations.
Supports per-month working-day overrides from the target configuration.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional
import calendar

from revenue_pacing.models.entities import TargetConfiguration
from revenue_pacing.utils.date_range_utils import DateRangeUtils


def is_business_day(day: date) -> bool:
    """Mon-Fri rule."""
    return day.weekday() < 5  # Mon=0, Fri=4


def count_business_days(start: date, end: date) -> int:
    """Count weekdays (Mon-Fri) between start and end inclusive."""
    if start > end:
        return 0

    count = 0
    current = start
    while current <= end:
        if is_business_day(current):
            count += 1
        current += timedelta(days=1)

    return count


def business_days_in_month(year: int, month: int) -> List[int]:
    """Day-of-month numbers of the weekdays in a month (month is 1-12)."""
    last = calendar.monthrange(year, month)[1]
    return [d for d in range(1, last + 1) if is_business_day(date(year, month, d))]


def is_working_day(day: date, config: Optional[TargetConfiguration]) -> bool:
    """
    A non-empty monthly working-day list replaces the weekday rule for its month;
    otherwise Mon-Fri are working days.
    """
    adjustment = config.adjustment_for(day) if config is not None else None
    if adjustment is not None and adjustment.has_working_days:
        return day.day in adjustment.working_days
    return is_business_day(day)


@dataclass
class BusinessDaysInfo:
    """Working days breakdown for a month."""
    year: int
    month: int  # 1-12

    total: int
    elapsed: int
    remaining: int

    # True when a monthly working-day list drove the counts
    uses_adjustment: bool

    @property
    def is_month_complete(self) -> bool:
        """True if no working days remain."""
        return self.remaining == 0

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "total": self.total,
            "elapsed": self.elapsed,
            "remaining": self.remaining,
            "uses_adjustment": self.uses_adjustment,
        }


class WorkingDaysCalendar:
    """
    Calculator for working days honoring monthly overrides.

    Usage:
        cal = WorkingDaysCalendar(target_config)
        info = cal.get_business_days(2026, 1, as_of=date(2026, 1, 15))
        print(f"{info.remaining} days left")
    """

    def __init__(self, config: Optional[TargetConfiguration] = None):
        self._config = config

    def is_working_day(self, day: date) -> bool:
        return is_working_day(day, self._config)

    def working_days_in_month(self, year: int, month: int) -> List[int]:
        """Working day-of-month numbers for a month (month is 1-12)."""
        adjustment = self._config.find_adjustment(year, month - 1) if self._config else None
        if adjustment is not None and adjustment.has_working_days:
            return sorted(adjustment.working_days)
        return business_days_in_month(year, month)

    def get_business_days(
        self,
        year: int,
        month: int,
        as_of: Optional[date] = None
    ) -> BusinessDaysInfo:
        """
        Calculate working days for a month.

        Elapsed days are the working days strictly before as_of; the as_of
        day itself is still in progress and counts as remaining.

        Args:
            year: The year
            month: The month (1-12)
            as_of: Calculate elapsed/remaining as of this date (default: today)

        Returns:
            BusinessDaysInfo with all calculations
        """
        if as_of is None:
            as_of = date.today()

        first_day, last_day = DateRangeUtils.month_bounds(year, month)
        adjustment = self._config.find_adjustment(year, month - 1) if self._config else None
        uses_adjustment = adjustment is not None and adjustment.has_working_days
        working_days = self.working_days_in_month(year, month)

        total = len(working_days)
        if as_of <= first_day:
            elapsed = 0
        elif as_of > last_day:
            elapsed = total
        else:
            elapsed = len([d for d in working_days if d < as_of.day])

        return BusinessDaysInfo(
            year=year,
            month=month,
            total=total,
            elapsed=elapsed,
            remaining=total - elapsed,
            uses_adjustment=uses_adjustment,
        )

    def count_working_days(self, start: date, end: date) -> int:
        """Count working days in [start, end] day by day, honoring each month's override."""
        if start > end:
            return 0
        return sum(1 for day in DateRangeUtils.iter_days(start, end) if self.is_working_day(day))

    def working_dates(self, start: date, end: date) -> List[date]:
        if start > end:
            return []
        return [day for day in DateRangeUtils.iter_days(start, end) if self.is_working_day(day)]


def get_month_business_days(
    year: int,
    month: int,
    config: Optional[TargetConfiguration] = None,
    as_of: Optional[date] = None
) -> BusinessDaysInfo:
    """Convenience function for month working days."""
    return WorkingDaysCalendar(config).get_business_days(year, month, as_of)
