"""
Data consistency check - runs the filter and metrics pipeline for a set of
dashboard filters and reports anything that does not add up.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from revenue_pacing.models.entities import RevenueRecord, TargetConfiguration
from revenue_pacing.models.enums import Location, TimeFrame
from revenue_pacing.services.location_metrics_service import calculate_location_metrics, month_daily_targets
from revenue_pacing.services.period_filter import filter_by_time_frame
from revenue_pacing.services.target_resolver import ensure_config
from revenue_pacing.utils.calendar import count_business_days

logger = logging.getLogger(__name__)

GAP_TOLERANCE = 0.8
MAX_PLAUSIBLE_ATTAINMENT = 1000.0


@dataclass
class ConsistencySummary:
    total_records: int = 0
    filtered_records: int = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    monthly_goal_consistency: bool = False
    target_calculation_accuracy: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_records": self.total_records,
            "filtered_records": self.filtered_records,
            "date_range": {
                "start": self.start_date.isoformat() if self.start_date else None,
                "end": self.end_date.isoformat() if self.end_date else None,
            },
            "monthly_goal_consistency": self.monthly_goal_consistency,
            "target_calculation_accuracy": self.target_calculation_accuracy,
        }


@dataclass
class ConsistencyReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: ConsistencySummary = field(default_factory=ConsistencySummary)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "summary": self.summary.to_dict(),
        }


def check_data_consistency(
    records: Sequence[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
    time_frame: Union[TimeFrame, str] = TimeFrame.MTD,
    location: Union[Location, str, None] = None,
    start_date=None,
    end_date=None,
    today: Optional[date] = None,
) -> ConsistencyReport:
    """
    Cross-check filtered data and computed metrics.

    Errors: location filter leaking the other location's revenue, monthly
    targets disagreeing with the month's adjustment. Warnings: fewer records
    than 80% of the business days spanned, attainment outside [0, 1000].
    """
    report = ConsistencyReport()
    if not records:
        report.errors.append("No revenue data available")
        return report

    config = ensure_config(config)
    location = Location.parse(location)
    today = today or date.today()

    filtered = filter_by_time_frame(
        records, time_frame, None, config, start_date, end_date, location, today
    )
    metrics = calculate_location_metrics(filtered, config, location, time_frame, today)

    summary = report.summary
    summary.total_records = len(records)
    summary.filtered_records = len(filtered)
    summary.monthly_goal_consistency = True
    summary.target_calculation_accuracy = True
    if filtered:
        summary.start_date = filtered[0].date
        summary.end_date = filtered[-1].date

    if len(filtered) > 1:
        expected = count_business_days(summary.start_date, summary.end_date)
        if len(filtered) < expected * GAP_TOLERANCE:
            report.warnings.append(
                f"Potential data gaps detected: {len(filtered)} records vs "
                f"{expected} expected business days"
            )

    period_info = metrics.period_info
    if period_info is not None and period_info.has_monthly_adjustment:
        daily = month_daily_targets(config, period_info.relevant_year, period_info.relevant_month)
        days = period_info.working_days_in_period
        for label, row, daily_target in (
            ("Austin", metrics.austin, daily.austin),
            ("Charlotte", metrics.charlotte, daily.charlotte),
        ):
            expected_target = daily_target * days
            if abs(row.full_period_target - expected_target) > 0.01:
                report.errors.append(
                    f"{label} monthly target mismatch: calculated {row.full_period_target}, "
                    f"expected {expected_target}"
                )
                summary.monthly_goal_consistency = False

    for label, row in (("Austin", metrics.austin), ("Charlotte", metrics.charlotte)):
        attainment = row.attainment_percent
        if row.on_pace_target > 0 and not 0 <= attainment <= MAX_PLAUSIBLE_ATTAINMENT:
            report.warnings.append(f"{label} attainment percentage seems unusual: {attainment:.1f}%")
            summary.target_calculation_accuracy = False

    negative = [r for r in filtered if (r.austin or 0) < 0 or (r.charlotte or 0) < 0]
    if negative:
        report.warnings.append(f"Found {len(negative)} records with negative revenue values")

    if location is Location.AUSTIN and any((r.charlotte or 0) > 0 for r in filtered):
        report.errors.append("Austin location filter not working correctly - Charlotte revenue found")
    elif location is Location.CHARLOTTE and any((r.austin or 0) > 0 for r in filtered):
        report.errors.append("Charlotte location filter not working correctly - Austin revenue found")

    if not report.is_valid:
        logger.warning("Consistency check found %d error(s): %s", len(report.errors), report.errors)
    return report
