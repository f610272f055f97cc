"""
Period summaries - totals, weekly buckets, monthly trends and moving averages.

All attainment here is measured against the sum of per-day resolved targets
for the days that have data, so a non-working day adds revenue but no target.
"""

import logging
from collections import OrderedDict
from datetime import date, timedelta
from typing import Iterable, List, Optional

from revenue_pacing.models.entities import RevenueRecord, TargetConfiguration
from revenue_pacing.models.report_data import (
    MonthlyTrendPoint,
    MovingAveragePoint,
    PeriodBucketMetrics,
    PeriodSummary,
    TimePeriodMetrics,
)
from revenue_pacing.services.target_resolver import ensure_config, resolve_target

logger = logging.getLogger(__name__)


def _sorted(records: Iterable[RevenueRecord]) -> List[RevenueRecord]:
    return sorted(records, key=lambda r: r.date)


def calculate_period_summary(
    records: Iterable[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
) -> PeriodSummary:
    """
    Revenue totals and attainment for a record set.

    Only days with a non-zero resolved target contribute target amounts and
    count toward total_days; days_above_target counts those whose combined
    attainment reached 100%.
    """
    config = ensure_config(config)
    summary = PeriodSummary()

    for record in records:
        summary.austin_revenue += record.austin or 0
        summary.charlotte_revenue += record.charlotte or 0

        targets = resolve_target(record.date, config)
        if targets.austin > 0 or targets.charlotte > 0:
            summary.austin_target += targets.austin
            summary.charlotte_target += targets.charlotte
            summary.total_days += 1
            if targets.combined > 0 and record.combined >= targets.combined:
                summary.days_above_target += 1

    return summary


def _bucket(label: str, start: date, end: date, records: List[RevenueRecord],
            config: TargetConfiguration) -> PeriodBucketMetrics:
    bucket = PeriodBucketMetrics(label=label, start_date=start, end_date=end)
    for record in records:
        targets = resolve_target(record.date, config)
        bucket.austin_revenue += record.austin or 0
        bucket.charlotte_revenue += record.charlotte or 0
        bucket.austin_target += targets.austin
        bucket.charlotte_target += targets.charlotte
    return bucket


def calculate_time_period_metrics(
    records: Iterable[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
) -> TimePeriodMetrics:
    """
    Consecutive 7-day buckets starting at the first data date, plus one
    overall row for the whole record set. Buckets without data are skipped.
    """
    config = ensure_config(config)
    ordered = _sorted(records)
    if not ordered:
        return TimePeriodMetrics()

    first, last = ordered[0].date, ordered[-1].date
    weekly = []
    week_start = first
    while week_start <= last:
        week_end = min(week_start + timedelta(days=6), last)
        week_records = [r for r in ordered if week_start <= r.date <= week_end]
        if week_records:
            label = f"{week_start.strftime('%b')} {week_start.day}-{week_end.strftime('%b')} {week_end.day}"
            weekly.append(_bucket(label, week_start, week_end, week_records, config))
        week_start = week_end + timedelta(days=1)

    monthly = _bucket(first.strftime("%B %Y"), first, last, ordered, config)
    return TimePeriodMetrics(weekly=weekly, monthly=monthly)


def calculate_monthly_trends(
    records: Iterable[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
    today: Optional[date] = None,
) -> List[MonthlyTrendPoint]:
    """
    One point per calendar month with data, in date order. The month total
    is repeated under current_year_revenue or previous_year_revenue when
    the month falls in today's year or the one before.
    """
    config = ensure_config(config)
    today = today or date.today()

    months = OrderedDict()
    for record in _sorted(records):
        key = (record.date.year, record.date.month)
        if key not in months:
            months[key] = MonthlyTrendPoint(
                year=record.date.year,
                month=record.date.month,
                label=record.date.strftime("%b"),
            )
        point = months[key]
        targets = resolve_target(record.date, config)
        point.austin_revenue += record.austin or 0
        point.charlotte_revenue += record.charlotte or 0
        point.austin_target += targets.austin
        point.charlotte_target += targets.charlotte

    for point in months.values():
        if point.year == today.year:
            point.current_year_revenue = point.combined_revenue
        elif point.year == today.year - 1:
            point.previous_year_revenue = point.combined_revenue

    return list(months.values())


def calculate_moving_average(trends: List[MonthlyTrendPoint], periods: int) -> List[MovingAveragePoint]:
    """Trailing moving average of per-location attainment; early points use a shorter window."""
    if periods < 1:
        raise ValueError("periods must be at least 1")

    result = []
    for index, point in enumerate(trends):
        window = trends[max(0, index - periods + 1):index + 1]
        result.append(MovingAveragePoint(
            label=point.label,
            austin=sum(p.austin_attainment for p in window) / len(window),
            charlotte=sum(p.charlotte_attainment for p in window) / len(window),
        ))
    return result
