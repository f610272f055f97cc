"""
Business Intelligence Service - advanced reporting metrics over a record set.

Works on a pandas DataFrame built from the records (one row per day) with
the resolved daily targets alongside each row.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from revenue_pacing.models.entities import RevenueRecord, TargetConfiguration
from revenue_pacing.services.target_resolver import ensure_config, resolve_target

logger = logging.getLogger(__name__)

GROWTH_WINDOW = 7
LOCATION_GROWTH_GAP = 5.0
PEAK_FACTOR = 1.2


# ============================================================================
# Domain Models
# ============================================================================

@dataclass(frozen=True)
class PerformanceMetrics:
    average_daily_revenue: float = 0.0
    peak_day_revenue: float = 0.0
    consistency_score: float = 0.0
    growth_rate: float = 0.0
    efficiency: float = 0.0


@dataclass(frozen=True)
class LocationAnalysis:
    contribution: float = 0.0
    growth: float = 0.0
    consistency: float = 0.0
    efficiency: float = 0.0


@dataclass(frozen=True)
class WeeklyTrend:
    week: str
    revenue: float
    attainment: float
    growth: float


@dataclass(frozen=True)
class DayOfMonthPattern:
    day_of_month: int
    average_revenue: float
    attainment_rate: float


@dataclass(frozen=True)
class PredictiveIndicators:
    probability_of_target: float = 0.0
    expected_variance: float = 0.0
    risk_factors: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BusinessIntelligenceReport:
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    austin: LocationAnalysis = field(default_factory=LocationAnalysis)
    charlotte: LocationAnalysis = field(default_factory=LocationAnalysis)
    weekly_trends: List[WeeklyTrend] = field(default_factory=list)
    monthly_patterns: List[DayOfMonthPattern] = field(default_factory=list)
    indicators: PredictiveIndicators = field(default_factory=PredictiveIndicators)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "performance_metrics": asdict(self.performance),
            "location_analysis": {
                "austin": asdict(self.austin),
                "charlotte": asdict(self.charlotte),
            },
            "time_series_analysis": {
                "weekly_trends": [asdict(t) for t in self.weekly_trends],
                "monthly_patterns": [asdict(p) for p in self.monthly_patterns],
            },
            "predictive_indicators": {
                "probability_of_target": self.indicators.probability_of_target,
                "expected_variance": self.indicators.expected_variance,
                "risk_factors": list(self.indicators.risk_factors),
                "opportunities": list(self.indicators.opportunities),
            },
        }


# ============================================================================
# Helpers
# ============================================================================

def _pct(numerator: float, denominator: float) -> float:
    return float(numerator / denominator * 100) if denominator > 0 else 0.0


def _consistency(series: pd.Series) -> float:
    """(1 - coefficient of variation) x 100 within [0, 100]; 0 for short or zero-mean series."""
    if len(series) < 2:
        return 0.0
    avg = series.mean()
    if avg == 0:
        return 0.0
    cv = series.std(ddof=0) / avg
    return float(min(100.0, max(0.0, (1 - cv) * 100)))


def _growth(series: pd.Series) -> float:
    """Average of the last seven values against the first seven, in percent."""
    if len(series) < 2:
        return 0.0
    first = series.head(GROWTH_WINDOW).mean()
    last = series.tail(GROWTH_WINDOW).mean()
    return _pct(last - first, first)


class BusinessIntelligenceService:
    """Computes business-intelligence metrics for a record set."""

    def __init__(self, config: Optional[TargetConfiguration] = None):
        self.config = ensure_config(config)
        self.logger = logging.getLogger(self.__class__.__name__)

    def build_frame(self, records: Iterable[RevenueRecord]) -> pd.DataFrame:
        """One row per record, sorted by date, with resolved targets."""
        rows = []
        for record in records:
            targets = resolve_target(record.date, self.config)
            rows.append({
                "date": pd.Timestamp(record.date),
                "austin": float(record.austin or 0),
                "charlotte": float(record.charlotte or 0),
                "austin_target": targets.austin,
                "charlotte_target": targets.charlotte,
            })
        frame = pd.DataFrame(rows, columns=["date", "austin", "charlotte", "austin_target", "charlotte_target"])
        frame = frame.sort_values("date").reset_index(drop=True)
        frame["combined"] = frame["austin"] + frame["charlotte"]
        frame["combined_target"] = frame["austin_target"] + frame["charlotte_target"]
        return frame

    def calculate(self, records: Iterable[RevenueRecord]) -> BusinessIntelligenceReport:
        frame = self.build_frame(records)
        if frame.empty:
            return BusinessIntelligenceReport()

        combined = frame["combined"]
        total_revenue = float(combined.sum())
        consistency = _consistency(combined)
        growth_rate = _growth(combined)

        performance = PerformanceMetrics(
            average_daily_revenue=float(combined.mean()),
            peak_day_revenue=float(combined.max()),
            consistency_score=consistency,
            growth_rate=growth_rate,
            efficiency=_pct(total_revenue, frame["combined_target"].sum()),
        )

        austin = LocationAnalysis(
            contribution=_pct(frame["austin"].sum(), total_revenue),
            growth=_growth(frame["austin"]),
            consistency=_consistency(frame["austin"]),
            efficiency=_pct(frame["austin"].sum(), frame["austin_target"].sum()),
        )
        charlotte = LocationAnalysis(
            contribution=_pct(frame["charlotte"].sum(), total_revenue),
            growth=_growth(frame["charlotte"]),
            consistency=_consistency(frame["charlotte"]),
            efficiency=_pct(frame["charlotte"].sum(), frame["charlotte_target"].sum()),
        )

        self.logger.debug(
            "BI over %d days: avg=%.2f consistency=%.1f growth=%.1f",
            len(frame), performance.average_daily_revenue, consistency, growth_rate
        )

        return BusinessIntelligenceReport(
            performance=performance,
            austin=austin,
            charlotte=charlotte,
            weekly_trends=self._weekly_trends(frame),
            monthly_patterns=self._monthly_patterns(frame),
            indicators=self._indicators(frame, austin, charlotte, consistency, growth_rate),
        )

    def _weekly_trends(self, frame: pd.DataFrame) -> List[WeeklyTrend]:
        """Consecutive blocks of seven records, each compared with the block before."""
        blocks = frame.groupby(frame.index // GROWTH_WINDOW)
        trends = []
        previous_revenue = 0.0
        for number, block in blocks:
            revenue = float(block["combined"].sum())
            trends.append(WeeklyTrend(
                week=f"Week {number + 1}",
                revenue=revenue,
                attainment=_pct(revenue, block["combined_target"].sum()),
                growth=_pct(revenue - previous_revenue, previous_revenue),
            ))
            previous_revenue = revenue
        return trends

    def _monthly_patterns(self, frame: pd.DataFrame) -> List[DayOfMonthPattern]:
        grouped = frame.groupby(frame["date"].dt.day).agg(
            average_revenue=("combined", "mean"),
            average_target=("combined_target", "mean"),
        )
        return [
            DayOfMonthPattern(
                day_of_month=int(day),
                average_revenue=float(row.average_revenue),
                attainment_rate=_pct(row.average_revenue, row.average_target),
            )
            for day, row in grouped.sort_index().iterrows()
        ]

    def _indicators(
        self,
        frame: pd.DataFrame,
        austin: LocationAnalysis,
        charlotte: LocationAnalysis,
        consistency: float,
        growth_rate: float,
    ) -> PredictiveIndicators:
        combined = frame["combined"]
        working = frame[frame["combined_target"] > 0]
        average_target = float(working["combined_target"].mean()) if not working.empty else 0.0
        efficiency = _pct(combined.mean(), average_target)

        risk_factors = []
        if consistency < 70:
            risk_factors.append("High performance variability")
        if growth_rate < 0:
            risk_factors.append("Declining performance trend")
        if efficiency < 90:
            risk_factors.append("Below-target efficiency")

        opportunities = []
        if average_target > 0 and combined.max() > average_target * PEAK_FACTOR:
            opportunities.append("Replicate peak performance strategies")
        if austin.growth > charlotte.growth + LOCATION_GROWTH_GAP:
            opportunities.append("Apply Austin growth strategies to Charlotte")
        if charlotte.growth > austin.growth + LOCATION_GROWTH_GAP:
            opportunities.append("Apply Charlotte growth strategies to Austin")

        return PredictiveIndicators(
            probability_of_target=min(100.0, max(0.0, efficiency)),
            expected_variance=float(combined.std(ddof=0)),
            risk_factors=risk_factors,
            opportunities=opportunities,
        )


def calculate_business_intelligence(
    records: Iterable[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
) -> BusinessIntelligenceReport:
    """Convenience wrapper around BusinessIntelligenceService."""
    return BusinessIntelligenceService(config).calculate(records)
