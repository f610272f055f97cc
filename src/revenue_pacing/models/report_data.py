# src/revenue_pacing/models/report_data.py
"""
Data models for dashboard reports.
Provides structured data transfer objects for every derived metric the
calculation services produce. All of them are recomputed from scratch on
each call and serialize to plain dictionaries for the web layer.
"""
from typing import List, Dict, Any, Optional
from datetime import date
from dataclasses import dataclass, field

from .entities import DailyTargetPair, ZERO_TARGETS
from .enums import AlertSeverity, Location


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _pct(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


# ============================================================================
# Location metrics
# ============================================================================

@dataclass
class DailyTargetEntry:
    """Resolved targets for one calendar day of a period."""
    date: date
    austin: float
    charlotte: float
    is_working_day: bool

    @property
    def combined(self) -> float:
        return self.austin + self.charlotte

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "austin": self.austin,
            "charlotte": self.charlotte,
            "combined": self.combined,
            "is_working_day": self.is_working_day,
        }


@dataclass
class PeriodInfo:
    """Resolved boundaries and target context for a metrics period."""
    start_date: Optional[date]
    end_date: Optional[date]
    period_type: str
    working_days_in_period: int = 0
    actual_data_days: int = 0
    daily_targets: DailyTargetPair = ZERO_TARGETS
    relevant_month: int = 0  # 0-based
    relevant_year: int = 0
    has_monthly_adjustment: bool = False
    elapsed_days: int = 0
    remaining_days: int = 0
    daily_breakdown: List[DailyTargetEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_date": _iso(self.start_date),
            "end_date": _iso(self.end_date),
            "period_type": self.period_type,
            "working_days_in_period": self.working_days_in_period,
            "actual_data_days": self.actual_data_days,
            "daily_targets": self.daily_targets.to_dict(),
            "relevant_month": self.relevant_month,
            "relevant_year": self.relevant_year,
            "has_monthly_adjustment": self.has_monthly_adjustment,
            "elapsed_days": self.elapsed_days,
            "remaining_days": self.remaining_days,
            "daily_breakdown": [entry.to_dict() for entry in self.daily_breakdown],
        }


@dataclass
class LocationMetrics:
    """Revenue against on-pace and full-period targets for one location row."""
    revenue: float = 0.0
    on_pace_target: float = 0.0
    full_period_target: float = 0.0
    elapsed_business_days: int = 0
    total_business_days: int = 0
    remaining_business_days: int = 0
    daily_pace_needed: float = 0.0
    period_info: Optional[PeriodInfo] = None

    @property
    def attainment_percent(self) -> float:
        """Revenue / on-pace target; 0 when the target is not positive."""
        return _pct(self.revenue, self.on_pace_target)

    def to_dict(self, include_period_info: bool = True) -> Dict[str, Any]:
        result = {
            "revenue": self.revenue,
            "on_pace_target": self.on_pace_target,
            "full_period_target": self.full_period_target,
            "attainment_percent": self.attainment_percent,
            "elapsed_business_days": self.elapsed_business_days,
            "total_business_days": self.total_business_days,
            "remaining_business_days": self.remaining_business_days,
            "daily_pace_needed": self.daily_pace_needed,
        }
        if include_period_info and self.period_info is not None:
            result["period_info"] = self.period_info.to_dict()
        return result


@dataclass
class LocationMetricsReport:
    """Austin, Charlotte and combined rows sharing one period."""
    austin: LocationMetrics
    charlotte: LocationMetrics
    total: LocationMetrics

    @property
    def period_info(self) -> Optional[PeriodInfo]:
        return self.total.period_info

    def for_location(self, location: Location) -> LocationMetrics:
        if location is Location.AUSTIN:
            return self.austin
        if location is Location.CHARLOTTE:
            return self.charlotte
        return self.total

    def to_dict(self) -> Dict[str, Any]:
        # period info is shared; emit it once
        return {
            "austin": self.austin.to_dict(include_period_info=False),
            "charlotte": self.charlotte.to_dict(include_period_info=False),
            "total": self.total.to_dict(include_period_info=False),
            "period_info": self.period_info.to_dict() if self.period_info else None,
        }


# ============================================================================
# Weekly anomalies
# ============================================================================

@dataclass
class DailyAlert:
    """A same-weekday revenue drop between the current and previous week."""
    date: date
    location: Location
    current_revenue: float
    previous_revenue: float
    drop_percent: float
    current_attainment: float
    previous_attainment: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "location": self.location.value,
            "current_revenue": self.current_revenue,
            "previous_revenue": self.previous_revenue,
            "drop_percent": self.drop_percent,
            "current_attainment": self.current_attainment,
            "previous_attainment": self.previous_attainment,
        }


@dataclass
class WeeklyComparison:
    """Current week versus the aligned previous week for one location."""
    location: Location
    current_week_total: float
    previous_week_total: float
    change_percent: float
    current_week_attainment: float
    previous_week_attainment: float
    daily_alerts: List[DailyAlert] = field(default_factory=list)
    severity: AlertSeverity = AlertSeverity.INFORMATIONAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.value,
            "current_week_total": self.current_week_total,
            "previous_week_total": self.previous_week_total,
            "change_percent": self.change_percent,
            "current_week_attainment": self.current_week_attainment,
            "previous_week_attainment": self.previous_week_attainment,
            "severity": self.severity.value,
            "daily_alerts": [alert.to_dict() for alert in self.daily_alerts],
        }


@dataclass
class WeeklyAnomalyReport:
    """Alert-worthy weekly comparisons, worst drop first."""
    current_week_start: date
    previous_week_start: date
    comparisons: List[WeeklyComparison] = field(default_factory=list)

    @property
    def has_alerts(self) -> bool:
        return len(self.comparisons) > 0

    def for_location(self, location: Location) -> Optional[WeeklyComparison]:
        for comparison in self.comparisons:
            if comparison.location is location:
                return comparison
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_week_start": self.current_week_start.isoformat(),
            "previous_week_start": self.previous_week_start.isoformat(),
            "has_alerts": self.has_alerts,
            "comparisons": [c.to_dict() for c in self.comparisons],
        }


# ============================================================================
# Missing data
# ============================================================================

@dataclass
class MissingDataReport:
    """Working days between the last record and yesterday that have no record."""
    missing_dates: List[date] = field(default_factory=list)
    last_data_date: Optional[date] = None

    @property
    def missing_days(self) -> int:
        return len(self.missing_dates)

    @property
    def total_expected_days(self) -> int:
        # Only days after the last record are expected here
        return len(self.missing_dates)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "missing_days": self.missing_days,
            "total_expected_days": self.total_expected_days,
            "missing_dates": [d.isoformat() for d in self.missing_dates],
            "last_data_date": _iso(self.last_data_date),
        }


# ============================================================================
# Period summaries
# ============================================================================

@dataclass
class PeriodSummary:
    """Totals and attainment against summed per-day resolved targets."""
    austin_revenue: float = 0.0
    charlotte_revenue: float = 0.0
    austin_target: float = 0.0
    charlotte_target: float = 0.0
    days_above_target: int = 0
    total_days: int = 0

    @property
    def total_revenue(self) -> float:
        return self.austin_revenue + self.charlotte_revenue

    @property
    def austin_attainment(self) -> float:
        return _pct(self.austin_revenue, self.austin_target)

    @property
    def charlotte_attainment(self) -> float:
        return _pct(self.charlotte_revenue, self.charlotte_target)

    @property
    def combined_attainment(self) -> float:
        return _pct(self.total_revenue, self.austin_target + self.charlotte_target)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_revenue": self.total_revenue,
            "austin_revenue": self.austin_revenue,
            "charlotte_revenue": self.charlotte_revenue,
            "austin_attainment": self.austin_attainment,
            "charlotte_attainment": self.charlotte_attainment,
            "combined_attainment": self.combined_attainment,
            "days_above_target": self.days_above_target,
            "total_days": self.total_days,
        }


@dataclass
class PeriodBucketMetrics:
    """Revenue and targets for one bucket (a 7-day block or a whole month)."""
    label: str
    start_date: date
    end_date: date
    austin_revenue: float = 0.0
    charlotte_revenue: float = 0.0
    austin_target: float = 0.0
    charlotte_target: float = 0.0

    @property
    def combined_revenue(self) -> float:
        return self.austin_revenue + self.charlotte_revenue

    @property
    def combined_target(self) -> float:
        return self.austin_target + self.charlotte_target

    @property
    def austin_attainment(self) -> float:
        return _pct(self.austin_revenue, self.austin_target)

    @property
    def charlotte_attainment(self) -> float:
        return _pct(self.charlotte_revenue, self.charlotte_target)

    @property
    def combined_attainment(self) -> float:
        return _pct(self.combined_revenue, self.combined_target)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "austin_revenue": self.austin_revenue,
            "charlotte_revenue": self.charlotte_revenue,
            "combined_revenue": self.combined_revenue,
            "austin_target": self.austin_target,
            "charlotte_target": self.charlotte_target,
            "combined_target": self.combined_target,
            "austin_attainment": self.austin_attainment,
            "charlotte_attainment": self.charlotte_attainment,
            "combined_attainment": self.combined_attainment,
        }


@dataclass
class TimePeriodMetrics:
    weekly: List[PeriodBucketMetrics] = field(default_factory=list)
    monthly: Optional[PeriodBucketMetrics] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekly": [w.to_dict() for w in self.weekly],
            "monthly": self.monthly.to_dict() if self.monthly else None,
        }


@dataclass
class MonthlyTrendPoint:
    """Revenue and attainment for one calendar month of data."""
    year: int
    month: int  # 1-12
    label: str
    austin_revenue: float = 0.0
    charlotte_revenue: float = 0.0
    austin_target: float = 0.0
    charlotte_target: float = 0.0
    current_year_revenue: Optional[float] = None
    previous_year_revenue: Optional[float] = None

    @property
    def combined_revenue(self) -> float:
        return self.austin_revenue + self.charlotte_revenue

    @property
    def austin_attainment(self) -> float:
        return _pct(self.austin_revenue, self.austin_target)

    @property
    def charlotte_attainment(self) -> float:
        return _pct(self.charlotte_revenue, self.charlotte_target)

    @property
    def combined_attainment(self) -> float:
        return _pct(self.combined_revenue, self.austin_target + self.charlotte_target)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "label": self.label,
            "combined_revenue": self.combined_revenue,
            "current_year": self.current_year_revenue,
            "previous_year": self.previous_year_revenue,
            "austin_attainment": self.austin_attainment,
            "charlotte_attainment": self.charlotte_attainment,
            "combined_attainment": self.combined_attainment,
        }


@dataclass(frozen=True)
class MovingAveragePoint:
    label: str
    austin: float
    charlotte: float

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "austin": self.austin, "charlotte": self.charlotte}
