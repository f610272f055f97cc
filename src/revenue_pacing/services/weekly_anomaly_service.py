"""
Weekly anomaly detection - current week versus the aligned previous week.

Weeks start on Monday. For each location the week totals are compared, and
each weekday is compared with the same weekday one week earlier.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from revenue_pacing.models.entities import RevenueRecord, TargetConfiguration
from revenue_pacing.models.enums import AlertSeverity, Location
from revenue_pacing.models.report_data import DailyAlert, WeeklyAnomalyReport, WeeklyComparison
from revenue_pacing.services.target_resolver import calculate_attainment, ensure_config, resolve_target
from revenue_pacing.utils.date_range_utils import DateRangeUtils

logger = logging.getLogger(__name__)

WEEK_DROP_THRESHOLD = -7.0
DAY_DROP_THRESHOLD = 7.0

SEVERE_CHANGE = 20.0
MODERATE_CHANGE = 10.0

LOCATIONS = (Location.AUSTIN, Location.CHARLOTTE, Location.COMBINED)


def classify_severity(change_percent: float) -> AlertSeverity:
    """Display band for a week-over-week change, by magnitude only."""
    magnitude = abs(change_percent)
    if magnitude > SEVERE_CHANGE:
        return AlertSeverity.SEVERE
    if magnitude > MODERATE_CHANGE:
        return AlertSeverity.MODERATE
    return AlertSeverity.INFORMATIONAL


def location_amount(record: RevenueRecord, location: Location) -> float:
    if location is Location.AUSTIN:
        return record.austin or 0
    if location is Location.CHARLOTTE:
        return record.charlotte or 0
    return record.combined


def location_target(day: date, location: Location, config: TargetConfiguration) -> float:
    targets = resolve_target(day, config)
    if location is Location.AUSTIN:
        return targets.austin
    if location is Location.CHARLOTTE:
        return targets.charlotte
    return targets.combined


class WeeklyAnomalyDetector:
    """Flags locations whose revenue dropped against the previous week."""

    def __init__(self, config: Optional[TargetConfiguration] = None):
        self.config = ensure_config(config)
        self.logger = logging.getLogger(self.__class__.__name__)

    def detect(self, records: Iterable[RevenueRecord], today: Optional[date] = None) -> WeeklyAnomalyReport:
        today = today or date.today()
        current_start, _ = DateRangeUtils.week_bounds(today)
        previous_start = current_start - timedelta(days=7)

        by_date: Dict[date, RevenueRecord] = {r.date: r for r in records}

        comparisons = []
        for location in LOCATIONS:
            comparison = self._compare(by_date, location, current_start, previous_start)
            if comparison.change_percent < WEEK_DROP_THRESHOLD or comparison.daily_alerts:
                comparisons.append(comparison)

        comparisons.sort(key=lambda c: c.change_percent)
        if comparisons:
            self.logger.info(
                "Weekly anomalies for week of %s: %s",
                current_start, ", ".join(c.location.value for c in comparisons)
            )
        return WeeklyAnomalyReport(
            current_week_start=current_start,
            previous_week_start=previous_start,
            comparisons=comparisons,
        )

    def _compare(
        self,
        by_date: Dict[date, RevenueRecord],
        location: Location,
        current_start: date,
        previous_start: date,
    ) -> WeeklyComparison:
        current_total = previous_total = 0.0
        current_target = previous_target = 0.0
        alerts: List[DailyAlert] = []

        for offset in range(7):
            current_day = current_start + timedelta(days=offset)
            previous_day = previous_start + timedelta(days=offset)
            current = by_date.get(current_day)
            previous = by_date.get(previous_day)

            if current is not None:
                current_total += location_amount(current, location)
                current_target += location_target(current_day, location, self.config)
            if previous is not None:
                previous_total += location_amount(previous, location)
                previous_target += location_target(previous_day, location, self.config)

            if current is None or previous is None:
                continue

            current_revenue = location_amount(current, location)
            previous_revenue = location_amount(previous, location)
            if previous_revenue <= 0:
                continue

            drop_percent = (previous_revenue - current_revenue) / previous_revenue * 100
            if drop_percent > DAY_DROP_THRESHOLD:
                alerts.append(DailyAlert(
                    date=current_day,
                    location=location,
                    current_revenue=current_revenue,
                    previous_revenue=previous_revenue,
                    drop_percent=drop_percent,
                    current_attainment=calculate_attainment(
                        current_revenue, location_target(current_day, location, self.config)),
                    previous_attainment=calculate_attainment(
                        previous_revenue, location_target(previous_day, location, self.config)),
                ))

        change_percent = 0.0
        if previous_total > 0:
            change_percent = (current_total - previous_total) / previous_total * 100

        return WeeklyComparison(
            location=location,
            current_week_total=current_total,
            previous_week_total=previous_total,
            change_percent=change_percent,
            current_week_attainment=calculate_attainment(current_total, current_target),
            previous_week_attainment=calculate_attainment(previous_total, previous_target),
            daily_alerts=alerts,
            severity=classify_severity(change_percent),
        )


def detect_weekly_anomalies(
    records: Iterable[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
    today: Optional[date] = None,
) -> WeeklyAnomalyReport:
    """Convenience wrapper around WeeklyAnomalyDetector."""
    return WeeklyAnomalyDetector(config).detect(records, today)
