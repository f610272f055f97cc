"""
Period filter - selects the revenue records belonging to a reporting window.

Every window is anchored on a local calendar "today". The current day is
considered incomplete, so the rolling windows end yesterday:

    This Week   Monday .. Sunday of today's week
    MTD         1st of the month .. today
    last30      yesterday - 29 .. yesterday
    last90      yesterday - 89 .. yesterday
    YTD         Jan 1 .. yesterday
    custom      start_date .. end_date (a missing or malformed bound selects nothing)
    all         everything up to yesterday
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from revenue_pacing.models.entities import RevenueRecord, TargetConfiguration
from revenue_pacing.models.enums import Location, TimeFrame
from revenue_pacing.services.target_resolver import calculate_attainment, resolve_target
from revenue_pacing.utils.date_range_utils import DateRangeUtils

logger = logging.getLogger(__name__)

DateLike = Union[date, str, None]


@dataclass(frozen=True)
class TimeFrameWindow:
    """Closed date interval; start None means unbounded."""
    start: Optional[date]
    end: date

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        return day <= self.end


@dataclass(frozen=True)
class AttainmentThreshold:
    """Inclusive daily attainment range, in percent."""
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    @classmethod
    def from_value(cls, value: Any) -> Optional["AttainmentThreshold"]:
        """
        Accept an AttainmentThreshold, a {"min", "max"} mapping or a (min, max) pair.
        A missing or null bound is open on that side.

        Raises:
            ValueError: for any other shape or a non-numeric bound
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            low, high = value.get("min"), value.get("max")
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) == 2:
            low, high = value
        else:
            raise ValueError(f"Attainment threshold must be a {{min, max}} object or a pair, got {value!r}")

        try:
            return cls(
                min=float(low) if low is not None else 0.0,
                max=float(high) if high is not None else float("inf"),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid attainment threshold bound: {e}") from e


def resolve_time_frame_window(
    time_frame: Union[TimeFrame, str],
    today: Optional[date] = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> Optional[TimeFrameWindow]:
    """
    Date window for a time frame.

    Returns:
        TimeFrameWindow, or None when the window selects nothing (custom
        range with a missing or malformed bound, or start after end)
    """
    time_frame = TimeFrame.parse(time_frame)
    today = today or date.today()
    yesterday = DateRangeUtils.yesterday(today)

    if time_frame is TimeFrame.THIS_WEEK:
        monday, sunday = DateRangeUtils.week_bounds(today)
        return TimeFrameWindow(monday, sunday)

    if time_frame is TimeFrame.MTD:
        return TimeFrameWindow(today.replace(day=1), today)

    if time_frame is TimeFrame.LAST_30:
        return TimeFrameWindow(yesterday - timedelta(days=29), yesterday)

    if time_frame is TimeFrame.LAST_90:
        return TimeFrameWindow(yesterday - timedelta(days=89), yesterday)

    if time_frame is TimeFrame.YTD:
        return TimeFrameWindow(date(today.year, 1, 1), yesterday)

    if time_frame is TimeFrame.CUSTOM:
        start = DateRangeUtils.try_parse_date(start_date)
        end = DateRangeUtils.try_parse_date(end_date)
        if start is None or end is None:
            logger.warning(
                "Custom time frame needs valid start and end dates (got %r, %r)",
                start_date, end_date
            )
            return None
        if start > end:
            logger.warning("Custom time frame start %s is after end %s", start, end)
            return None
        return TimeFrameWindow(start, end)

    return TimeFrameWindow(None, yesterday)


def apply_location(records: Iterable[RevenueRecord], location: Union[Location, str, None]) -> List[RevenueRecord]:
    """Zero the other location's amount when a single location is requested."""
    location = Location.parse(location)
    if location is Location.AUSTIN:
        return [replace(r, charlotte=0.0) for r in records]
    if location is Location.CHARLOTTE:
        return [replace(r, austin=0.0) for r in records]
    return list(records)


def _within_threshold(
    record: RevenueRecord,
    threshold: AttainmentThreshold,
    config: Optional[TargetConfiguration],
) -> bool:
    targets = resolve_target(record.date, config)
    attainments = (
        calculate_attainment(record.austin, targets.austin),
        calculate_attainment(record.charlotte, targets.charlotte),
        calculate_attainment(record.combined, targets.combined),
    )
    return any(threshold.contains(value) for value in attainments)


def filter_by_time_frame(
    records: Iterable[RevenueRecord],
    time_frame: Union[TimeFrame, str],
    attainment_threshold: Any = None,
    config: Optional[TargetConfiguration] = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
    location: Union[Location, str, None] = None,
    today: Optional[date] = None,
) -> List[RevenueRecord]:
    """
    Records in the time frame, location-adjusted, optionally threshold-filtered.

    The input is never mutated; single-location requests get new records
    with the other location zeroed. Result is sorted by date ascending.
    """
    window = resolve_time_frame_window(time_frame, today, start_date, end_date)
    if window is None:
        return []

    located = apply_location(records, location)
    selected = [r for r in located if window.contains(r.date)]

    threshold = AttainmentThreshold.from_value(attainment_threshold)
    if threshold is not None:
        selected = [r for r in selected if _within_threshold(r, threshold, config)]

    selected.sort(key=lambda r: r.date)
    logger.debug(
        "Filtered %d records to %d for %s (location=%s)",
        len(located), len(selected), time_frame, location
    )
    return selected


def window_bounds(window: Optional[TimeFrameWindow], records: List[RevenueRecord]) -> Optional[Tuple[date, date]]:
    """Concrete bounds for a window; an unbounded start becomes the earliest record date."""
    if window is None:
        return None
    start = window.start
    if start is None:
        if not records:
            return None
        start = min(r.date for r in records)
    if start > window.end:
        return None
    return start, window.end
