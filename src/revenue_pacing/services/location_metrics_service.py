"""
Location Metrics Service - revenue versus on-pace targets per location.

One aggregator serves both views of the dashboard. The period it reports
against comes from a PeriodResolution strategy:

- CurrentMonthPeriod: elapsed/total working days of the current calendar
  month, target = month daily target x days (the classic MTD card)
- ExplicitRangePeriod: any closed date range; targets are summed day by day
  from the target resolver over working days, so ranges spanning several
  months honor each month's adjustment

Over the current month both strategies give the same numbers.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Protocol, Sequence, Union

from revenue_pacing.models.entities import (
    DailyTargetPair,
    RevenueRecord,
    TargetConfiguration,
    ZERO_TARGETS,
)
from revenue_pacing.models.enums import Location, TimeFrame
from revenue_pacing.models.report_data import (
    DailyTargetEntry,
    LocationMetrics,
    LocationMetricsReport,
    PeriodInfo,
)
from revenue_pacing.services.period_filter import resolve_time_frame_window, window_bounds
from revenue_pacing.services.target_resolver import ensure_config, resolve_target
from revenue_pacing.utils.calendar import WorkingDaysCalendar
from revenue_pacing.utils.date_range_utils import DateRangeUtils

logger = logging.getLogger(__name__)


# ============================================================================
# Period resolution
# ============================================================================

@dataclass
class ResolvedPeriod:
    """Working-day counts and per-location targets for a reporting period."""
    start_date: Optional[date]
    end_date: Optional[date]
    period_type: str
    total_days: int = 0
    elapsed_days: int = 0
    austin_on_pace: float = 0.0
    charlotte_on_pace: float = 0.0
    austin_full: float = 0.0
    charlotte_full: float = 0.0
    daily_targets: DailyTargetPair = ZERO_TARGETS
    relevant_month: int = 0  # 0-based
    relevant_year: int = 0
    has_monthly_adjustment: bool = False
    daily_breakdown: List[DailyTargetEntry] = field(default_factory=list)

    @property
    def remaining_days(self) -> int:
        return self.total_days - self.elapsed_days


class PeriodResolution(Protocol):
    """Strategy resolving the period a metrics report is measured against."""
    period_type: str

    def resolve(self, config: TargetConfiguration, today: date) -> ResolvedPeriod:
        ...


def month_daily_targets(config: TargetConfiguration, year: int, month_index: int) -> DailyTargetPair:
    """Daily target pair for a month: adjustment overrides, else the defaults."""
    adjustment = config.find_adjustment(year, month_index)
    defaults = config.daily_targets
    if adjustment is None:
        return defaults
    return DailyTargetPair(
        austin=adjustment.austin if adjustment.austin is not None else defaults.austin,
        charlotte=adjustment.charlotte if adjustment.charlotte is not None else defaults.charlotte,
    )


def _breakdown(calendar: WorkingDaysCalendar, config: TargetConfiguration,
               start: date, end: date) -> List[DailyTargetEntry]:
    entries = []
    for day in DateRangeUtils.iter_days(start, end):
        working = calendar.is_working_day(day)
        targets = resolve_target(day, config) if working else ZERO_TARGETS
        entries.append(DailyTargetEntry(day, targets.austin, targets.charlotte, working))
    return entries


class CurrentMonthPeriod:
    """The calendar month containing today."""

    def __init__(self, period_type: str = TimeFrame.MTD.value):
        self.period_type = period_type

    def resolve(self, config: TargetConfiguration, today: date) -> ResolvedPeriod:
        calendar = WorkingDaysCalendar(config)
        info = calendar.get_business_days(today.year, today.month, as_of=today)
        daily = month_daily_targets(config, today.year, today.month - 1)
        first_day, last_day = DateRangeUtils.month_bounds(today.year, today.month)

        return ResolvedPeriod(
            start_date=first_day,
            end_date=last_day,
            period_type=self.period_type,
            total_days=info.total,
            elapsed_days=info.elapsed,
            austin_on_pace=daily.austin * info.elapsed,
            charlotte_on_pace=daily.charlotte * info.elapsed,
            austin_full=daily.austin * info.total,
            charlotte_full=daily.charlotte * info.total,
            daily_targets=daily,
            relevant_month=today.month - 1,
            relevant_year=today.year,
            has_monthly_adjustment=config.find_adjustment(today.year, today.month - 1) is not None,
            daily_breakdown=_breakdown(calendar, config, first_day, last_day),
        )


class ExplicitRangePeriod:
    """A closed date range; working days before today count as elapsed."""

    def __init__(self, start: date, end: date, period_type: str = TimeFrame.CUSTOM.value):
        self.start = start
        self.end = end
        self.period_type = period_type

    def resolve(self, config: TargetConfiguration, today: date) -> ResolvedPeriod:
        calendar = WorkingDaysCalendar(config)
        breakdown = _breakdown(calendar, config, self.start, self.end)
        working = [entry for entry in breakdown if entry.is_working_day]
        elapsed = [entry for entry in working if entry.date < today]

        months = {(entry.date.year, entry.date.month - 1) for entry in breakdown}

        return ResolvedPeriod(
            start_date=self.start,
            end_date=self.end,
            period_type=self.period_type,
            total_days=len(working),
            elapsed_days=len(elapsed),
            austin_on_pace=sum(entry.austin for entry in elapsed),
            charlotte_on_pace=sum(entry.charlotte for entry in elapsed),
            austin_full=sum(entry.austin for entry in working),
            charlotte_full=sum(entry.charlotte for entry in working),
            daily_targets=month_daily_targets(config, self.end.year, self.end.month - 1),
            relevant_month=self.end.month - 1,
            relevant_year=self.end.year,
            has_monthly_adjustment=any(config.find_adjustment(y, m) is not None for y, m in months),
            daily_breakdown=breakdown,
        )


class EmptyPeriod:
    """A window that selects no days."""

    def __init__(self, period_type: str = TimeFrame.CUSTOM.value):
        self.period_type = period_type

    def resolve(self, config: TargetConfiguration, today: date) -> ResolvedPeriod:
        return ResolvedPeriod(start_date=None, end_date=None, period_type=self.period_type)


# ============================================================================
# Aggregation
# ============================================================================

def _location_filtered(location: Location, austin: float, charlotte: float) -> float:
    if location is Location.AUSTIN:
        return austin
    if location is Location.CHARLOTTE:
        return charlotte
    return austin + charlotte


def _pace_needed(full_target: float, revenue: float, remaining: int) -> float:
    if remaining <= 0:
        return 0.0
    return (full_target - revenue) / remaining


def _empty_report(period_type: str) -> LocationMetricsReport:
    period_info = PeriodInfo(start_date=None, end_date=None, period_type=period_type)
    return LocationMetricsReport(
        austin=LocationMetrics(period_info=period_info),
        charlotte=LocationMetrics(period_info=period_info),
        total=LocationMetrics(period_info=period_info),
    )


def aggregate_location_metrics(
    records: Sequence[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
    location: Union[Location, str, None] = None,
    period: Optional[PeriodResolution] = None,
    today: Optional[date] = None,
) -> LocationMetricsReport:
    """
    Per-location revenue, on-pace and full-period targets for a record set.

    Args:
        records: Already filtered records
        config: Target configuration (None uses the defaults from settings)
        location: Single-location request; zeroes the other location's
            contribution to the total row's full-period target
        period: Period strategy (default: current month)
        today: Reference date (default: date.today())

    Returns:
        LocationMetricsReport with austin, charlotte and total rows sharing
        one PeriodInfo. Empty input returns an all-zero report.
    """
    period = period or CurrentMonthPeriod()
    if not records:
        return _empty_report(period.period_type)

    config = ensure_config(config)
    location = Location.parse(location)
    today = today or date.today()

    resolved = period.resolve(config, today)
    remaining = resolved.remaining_days

    austin_revenue = sum(r.austin or 0 for r in records)
    charlotte_revenue = sum(r.charlotte or 0 for r in records)

    austin_pace = _pace_needed(resolved.austin_full, austin_revenue, remaining)
    charlotte_pace = _pace_needed(resolved.charlotte_full, charlotte_revenue, remaining)

    dates = sorted(r.date for r in records)
    period_info = PeriodInfo(
        start_date=resolved.start_date or dates[0],
        end_date=resolved.end_date or dates[-1],
        period_type=resolved.period_type,
        working_days_in_period=resolved.total_days,
        actual_data_days=len(records),
        daily_targets=resolved.daily_targets,
        relevant_month=resolved.relevant_month,
        relevant_year=resolved.relevant_year,
        has_monthly_adjustment=resolved.has_monthly_adjustment,
        elapsed_days=resolved.elapsed_days,
        remaining_days=remaining,
        daily_breakdown=resolved.daily_breakdown,
    )

    def row(revenue, on_pace, full, pace):
        return LocationMetrics(
            revenue=revenue,
            on_pace_target=on_pace,
            full_period_target=full,
            elapsed_business_days=resolved.elapsed_days,
            total_business_days=resolved.total_days,
            remaining_business_days=remaining,
            daily_pace_needed=pace,
            period_info=period_info,
        )

    report = LocationMetricsReport(
        austin=row(austin_revenue, resolved.austin_on_pace, resolved.austin_full, austin_pace),
        charlotte=row(charlotte_revenue, resolved.charlotte_on_pace, resolved.charlotte_full, charlotte_pace),
        total=row(
            austin_revenue + charlotte_revenue,
            resolved.austin_on_pace + resolved.charlotte_on_pace,
            _location_filtered(location, resolved.austin_full, resolved.charlotte_full),
            _location_filtered(location, austin_pace, charlotte_pace),
        ),
    )

    logger.debug(
        "Metrics for %s: revenue=%.2f on_pace=%.2f attainment=%.1f%% (%d/%d days)",
        resolved.period_type, report.total.revenue, report.total.on_pace_target,
        report.total.attainment_percent, resolved.elapsed_days, resolved.total_days
    )
    return report


def calculate_location_metrics(
    records: Sequence[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
    location: Union[Location, str, None] = None,
    time_frame: Union[TimeFrame, str] = TimeFrame.MTD,
    today: Optional[date] = None,
) -> LocationMetricsReport:
    """Metrics against the current calendar month, whatever the time frame."""
    time_frame = TimeFrame.parse(time_frame)
    return aggregate_location_metrics(
        records, config, location, CurrentMonthPeriod(time_frame.value), today
    )


def period_for_time_frame(
    time_frame: Union[TimeFrame, str],
    records: Sequence[RevenueRecord],
    start_date=None,
    end_date=None,
    today: Optional[date] = None,
) -> PeriodResolution:
    """Pick the period strategy for a time frame; MTD keeps current-month semantics."""
    time_frame = TimeFrame.parse(time_frame)
    if time_frame is TimeFrame.MTD:
        return CurrentMonthPeriod(time_frame.value)

    window = resolve_time_frame_window(time_frame, today or date.today(), start_date, end_date)
    bounds = window_bounds(window, list(records))
    if bounds is None:
        return EmptyPeriod(time_frame.value)
    return ExplicitRangePeriod(bounds[0], bounds[1], time_frame.value)


def calculate_period_metrics(
    records: Sequence[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
    location: Union[Location, str, None] = None,
    time_frame: Union[TimeFrame, str] = TimeFrame.MTD,
    start_date=None,
    end_date=None,
    today: Optional[date] = None,
) -> LocationMetricsReport:
    """Metrics against the requested time frame's own date range."""
    today = today or date.today()
    period = period_for_time_frame(time_frame, records, start_date, end_date, today)
    return aggregate_location_metrics(records, config, location, period, today)
