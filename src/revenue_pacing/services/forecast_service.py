"""
Forecast Service - trend, month-end projection, confidence and risk.

Builds the executive insights shown on the leadership view from the
month-to-date records:

- velocity: % change of the average daily revenue between the first five
  and the remaining records of the last ten
- projection: revenue so far + weighted daily average x trend multiplier x
  remaining working days, the weighted average blending 70% of the last five
  records with 30% of the whole month
- confidence: 100 - remaining share x 30 + stability x 0.3 + accuracy x 0.4,
  clamped to [30, 95]
- risk: LOW, MEDIUM or HIGH from ordered threshold checks
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from statistics import mean, pstdev
from typing import Any, Dict, Iterable, List, Optional, Sequence

from revenue_pacing.models.entities import RevenueRecord, TargetConfiguration
from revenue_pacing.models.enums import (
    BenchmarkComparison,
    InsightsFailureReason,
    ResourceAction,
    RiskLevel,
    Sustainability,
    TrendDirection,
)
from revenue_pacing.services.location_metrics_service import (
    ExplicitRangePeriod,
    calculate_location_metrics,
)
from revenue_pacing.services.target_resolver import calculate_attainment, ensure_config, resolve_target
from revenue_pacing.utils.date_range_utils import DateRangeUtils

logger = logging.getLogger(__name__)

RECENT_DAYS = 5
VELOCITY_WINDOW = 10
RECENT_WEIGHT = 0.7
HISTORICAL_WEIGHT = 0.3
VELOCITY_CAP = 10.0

MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 95
ACCURACY_MIN_DAYS = 10
DEFAULT_ACCURACY = 80.0

PEAK_DAY_ATTAINMENT = 110.0
UNDERPERFORMING_DAY_ATTAINMENT = 80.0


# ============================================================================
# Domain Models
# ============================================================================

@dataclass(frozen=True)
class ExecutiveSummary:
    current_performance: float
    monthly_projection: float
    risk_level: RiskLevel
    key_insight: str
    action_required: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_performance": self.current_performance,
            "monthly_projection": self.monthly_projection,
            "risk_level": self.risk_level.value,
            "key_insight": self.key_insight,
            "action_required": self.action_required,
        }


@dataclass(frozen=True)
class MonthEndProjection:
    austin: float
    charlotte: float
    combined: float
    confidence: int
    attainment: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "austin": self.austin,
            "charlotte": self.charlotte,
            "combined": self.combined,
            "confidence": self.confidence,
            "attainment": self.attainment,
        }


@dataclass(frozen=True)
class QuarterProjection:
    revenue: float
    target: float
    attainment: float
    confidence: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue": self.revenue,
            "target": self.target,
            "attainment": self.attainment,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class TrendAnalysis:
    direction: TrendDirection
    velocity: float
    sustainability: Sustainability

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction.value,
            "velocity": self.velocity,
            "sustainability": self.sustainability.value,
        }


@dataclass(frozen=True)
class RiskAnalysis:
    revenue_at_risk: float
    days_to_recovery: int
    critical_factors: List[str]
    mitigation: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue_at_risk": self.revenue_at_risk,
            "days_to_recovery": self.days_to_recovery,
            "critical_factors": list(self.critical_factors),
            "mitigation": list(self.mitigation),
        }


@dataclass(frozen=True)
class CompetitivePositioning:
    austin_share: float
    charlotte_share: float
    growth_rate: float
    benchmark: BenchmarkComparison

    def to_dict(self) -> Dict[str, Any]:
        return {
            "market_share": {"austin": self.austin_share, "charlotte": self.charlotte_share},
            "growth_rate": self.growth_rate,
            "benchmark_comparison": self.benchmark.value,
        }


@dataclass(frozen=True)
class OperationalEfficiency:
    revenue_per_day: float
    consistency: float
    peak_performance_days: List[date] = field(default_factory=list)
    underperforming_days: List[date] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue_per_day": self.revenue_per_day,
            "consistency": self.consistency,
            "peak_performance_days": [d.isoformat() for d in self.peak_performance_days],
            "underperforming_days": [d.isoformat() for d in self.underperforming_days],
        }


@dataclass(frozen=True)
class ResourceAllocation:
    austin: ResourceAction
    charlotte: ResourceAction
    reasoning: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "austin": self.austin.value,
            "charlotte": self.charlotte.value,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class StrategicRecommendations:
    immediate: List[str]
    short_term: List[str]
    long_term: List[str]
    resource_allocation: ResourceAllocation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "immediate": list(self.immediate),
            "short_term": list(self.short_term),
            "long_term": list(self.long_term),
            "resource_allocation": self.resource_allocation.to_dict(),
        }


@dataclass(frozen=True)
class ExecutiveInsights:
    """Everything the executive view renders for the current month."""
    summary: ExecutiveSummary
    month_end_projection: MonthEndProjection
    quarter_projection: QuarterProjection
    trend: TrendAnalysis
    risk: RiskAnalysis
    positioning: CompetitivePositioning
    efficiency: OperationalEfficiency
    recommendations: StrategicRecommendations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "executive_summary": self.summary.to_dict(),
            "performance_forecasting": {
                "month_end_projection": self.month_end_projection.to_dict(),
                "quarter_projection": self.quarter_projection.to_dict(),
                "trend_analysis": self.trend.to_dict(),
            },
            "risk_analysis": self.risk.to_dict(),
            "competitive_positioning": self.positioning.to_dict(),
            "operational_efficiency": self.efficiency.to_dict(),
            "strategic_recommendations": self.recommendations.to_dict(),
        }


@dataclass(frozen=True)
class InsightsResult:
    """Either insights, or the reason they could not be produced."""
    insights: Optional[ExecutiveInsights] = None
    reason: Optional[InsightsFailureReason] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.insights is not None

    @classmethod
    def success(cls, insights: ExecutiveInsights) -> "InsightsResult":
        return cls(insights=insights)

    @classmethod
    def failure(cls, reason: InsightsFailureReason, message: str) -> "InsightsResult":
        return cls(reason=reason, message=message)

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "insights": self.insights.to_dict()}
        return {"ok": False, "reason": self.reason.value, "message": self.message}


# Default recommendation lists per risk level
RECOMMENDATION_TEMPLATES: Dict[RiskLevel, Dict[str, List[str]]] = {
    RiskLevel.LOW: {
        "immediate": ["Maintain current performance levels"],
        "short_term": ["Continue monitoring trends"],
        "long_term": ["Develop long-term growth strategy"],
        "mitigation": ["Keep daily performance monitoring in place"],
    },
    RiskLevel.MEDIUM: {
        "immediate": ["Review daily results against pace each morning"],
        "short_term": ["Continue monitoring trends"],
        "long_term": ["Develop long-term growth strategy"],
        "mitigation": [
            "Increase daily performance monitoring",
            "Implement targeted improvement initiatives",
        ],
    },
    RiskLevel.HIGH: {
        "immediate": ["Escalate the revenue gap to location leadership"],
        "short_term": ["Develop performance recovery strategy"],
        "long_term": ["Develop long-term growth strategy"],
        "mitigation": [
            "Increase daily performance monitoring",
            "Implement targeted improvement initiatives",
            "Optimize resource allocation",
        ],
    },
}


# ============================================================================
# Building blocks
# ============================================================================

def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _average(values: Sequence[float]) -> float:
    return mean(values) if values else 0.0


def _attainment_of(records: Sequence[RevenueRecord], config: TargetConfiguration) -> float:
    revenue = sum(r.combined for r in records)
    target = sum(resolve_target(r.date, config).combined for r in records)
    return calculate_attainment(revenue, target)


def calculate_trend(records: Sequence[RevenueRecord], config: Optional[TargetConfiguration] = None) -> TrendDirection:
    """
    Compare combined attainment of the two halves of the last five records.

    A gap of more than 5 points either way is a trend; fewer than two
    records is always stable.
    """
    ordered = sorted(records, key=lambda r: r.date)
    if len(ordered) < 2:
        return TrendDirection.STABLE

    config = ensure_config(config)
    recent = ordered[-RECENT_DAYS:]
    half = len(recent) // 2
    first = _attainment_of(recent[:half], config)
    second = _attainment_of(recent[half:], config)

    if second - first > 5:
        return TrendDirection.IMPROVING
    if first - second > 5:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def calculate_velocity(records: Sequence[RevenueRecord]) -> float:
    """Percent change of average combined revenue across the last ten records."""
    window = list(records)[-VELOCITY_WINDOW:]
    first_avg = _average([r.combined for r in window[:5]])
    second_avg = _average([r.combined for r in window[5:]])
    if first_avg <= 0:
        return 0.0
    return (second_avg - first_avg) / first_avg * 100


def trend_multiplier(velocity: float) -> float:
    return 1 + _clamp(velocity, -VELOCITY_CAP, VELOCITY_CAP) / 100


def calculate_stability(records: Sequence[RevenueRecord]) -> float:
    """(1 - coefficient of variation) x 100 of daily combined revenue, within [0, 100]."""
    if len(records) < 2:
        return 0.0
    revenues = [r.combined for r in records]
    avg = mean(revenues)
    if avg == 0:
        return 0.0
    cv = pstdev(revenues) / avg
    return _clamp((1 - cv) * 100, 0.0, 100.0)


def calculate_historical_accuracy(records: Sequence[RevenueRecord]) -> float:
    """
    How well "tomorrow equals today" would have predicted each day.

    Fewer than ten records gives the default of 80. A zero previous day
    counts as a complete miss.
    """
    if len(records) < ACCURACY_MIN_DAYS:
        return DEFAULT_ACCURACY

    scores = []
    for previous, actual in zip(records, records[1:]):
        if previous.combined <= 0:
            scores.append(0.0)
            continue
        error = min(abs(previous.combined - actual.combined) / previous.combined, 1.0)
        scores.append((1 - error) * 100)
    return _clamp(mean(scores), 0.0, 100.0)


def calculate_confidence(remaining_days: int, total_days: int, stability: float, accuracy: float) -> int:
    remaining_share = remaining_days / total_days if total_days > 0 else 0.0
    raw = 100 - remaining_share * 30 + stability * 0.3 + accuracy * 0.4
    return int(_clamp(round(raw), MIN_CONFIDENCE, MAX_CONFIDENCE))


def determine_risk_level(current: float, projected: float, stability: float, confidence: float) -> RiskLevel:
    """Ordered checks, first match wins."""
    if current >= 95 and projected >= 100 and stability >= 70 and confidence >= 80:
        return RiskLevel.LOW
    if current >= 85 and projected >= 90 and stability >= 50 and confidence >= 60:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def determine_sustainability(stability: float, confidence: float) -> Sustainability:
    score = (stability + confidence) / 2
    if score >= 75:
        return Sustainability.HIGH
    if score >= 50:
        return Sustainability.MEDIUM
    return Sustainability.LOW


def direction_from_velocity(velocity: float) -> TrendDirection:
    if velocity > 2:
        return TrendDirection.IMPROVING
    if velocity < -2:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def benchmark_comparison(performance: float) -> BenchmarkComparison:
    if performance > 105:
        return BenchmarkComparison.ABOVE
    if performance > 95:
        return BenchmarkComparison.AT
    return BenchmarkComparison.BELOW


def generate_key_insight(risk: RiskLevel, velocity: float) -> str:
    if risk is RiskLevel.LOW:
        trend = "upward" if velocity > 0 else "stable"
        return f"Strong performance trending {trend} with high confidence in projections."
    if risk is RiskLevel.MEDIUM:
        trend = "positive" if velocity > 0 else "concerning"
        return f"Moderate performance with {trend} trends requiring attention."
    return "Performance below target with significant risks requiring immediate action."


def weighted_daily_average(records: Sequence[RevenueRecord], attr: str) -> float:
    """70% of the last five records' average plus 30% of the full average."""
    values = [getattr(r, attr) or 0 for r in records]
    recent = values[-RECENT_DAYS:]
    return _average(recent) * RECENT_WEIGHT + _average(values) * HISTORICAL_WEIGHT


def project_quarter(
    records: Iterable[RevenueRecord],
    config: TargetConfiguration,
    today: date,
    daily_average: float,
    multiplier: float,
    month_confidence: int,
) -> QuarterProjection:
    """
    Quarter-to-date revenue plus the trend-adjusted daily average for every
    remaining working day of the quarter. Confidence shrinks with the share
    of the quarter still ahead.
    """
    start, end = DateRangeUtils.quarter_bounds(today)
    period = ExplicitRangePeriod(start, end, "quarter").resolve(config, today)
    to_date = sum(r.combined for r in records if start <= r.date <= today)

    revenue = to_date + daily_average * multiplier * period.remaining_days
    target = period.austin_full + period.charlotte_full
    elapsed_share = period.elapsed_days / period.total_days if period.total_days > 0 else 0.0
    confidence = int(_clamp(round(month_confidence * elapsed_share), MIN_CONFIDENCE, MAX_CONFIDENCE))

    return QuarterProjection(
        revenue=revenue,
        target=target,
        attainment=calculate_attainment(revenue, target),
        confidence=confidence,
    )


# ============================================================================
# Executive insights
# ============================================================================

class ForecastService:
    """Builds executive insights for the current month."""

    def __init__(self, config: Optional[TargetConfiguration] = None):
        self.config = ensure_config(config)
        self.logger = logging.getLogger(self.__class__.__name__)

    def build_insights(self, records: Iterable[RevenueRecord], today: Optional[date] = None) -> InsightsResult:
        records = list(records)
        today = today or date.today()

        if not records:
            return InsightsResult.failure(InsightsFailureReason.NO_DATA, "No data available for analysis")

        mtd = sorted(
            (r for r in records
             if r.date.year == today.year and r.date.month == today.month and r.date <= today),
            key=lambda r: r.date,
        )
        if not mtd:
            return InsightsResult.failure(
                InsightsFailureReason.NO_CURRENT_MONTH_DATA, "No data available for current month"
            )

        try:
            insights = self._build(records, mtd, today)
        except (ArithmeticError, ValueError, TypeError) as e:
            self.logger.exception("Executive insights computation failed")
            return InsightsResult.failure(InsightsFailureReason.COMPUTATION_FAILED, str(e))

        return InsightsResult.success(insights)

    def _build(self, records: List[RevenueRecord], mtd: List[RevenueRecord], today: date) -> ExecutiveInsights:
        metrics = calculate_location_metrics(mtd, self.config, today=today)
        total = metrics.total
        current_performance = total.attainment_percent
        remaining = total.remaining_business_days

        velocity = calculate_velocity(mtd)
        multiplier = trend_multiplier(velocity)

        weighted_austin = weighted_daily_average(mtd, "austin")
        weighted_charlotte = weighted_daily_average(mtd, "charlotte")
        projected_austin = metrics.austin.revenue + weighted_austin * multiplier * remaining
        projected_charlotte = metrics.charlotte.revenue + weighted_charlotte * multiplier * remaining
        projected_combined = projected_austin + projected_charlotte
        projected_attainment = calculate_attainment(projected_combined, total.full_period_target)

        stability = calculate_stability(mtd)
        accuracy = calculate_historical_accuracy(mtd)
        confidence = calculate_confidence(remaining, total.total_business_days, stability, accuracy)

        risk = determine_risk_level(current_performance, projected_attainment, stability, confidence)
        self.logger.debug(
            "Forecast: current=%.1f projected=%.1f stability=%.1f accuracy=%.1f confidence=%d risk=%s",
            current_performance, projected_attainment, stability, accuracy, confidence, risk.value
        )

        daily_average = _average([r.combined for r in mtd])
        gap = 100 - current_performance
        revenue_at_risk = total.full_period_target * (gap / 100) if gap > 0 else 0.0
        days_to_recovery = (
            math.ceil(revenue_at_risk / daily_average)
            if revenue_at_risk > 0 and daily_average > 0 else 0
        )

        austin_attainment = metrics.austin.attainment_percent
        charlotte_attainment = metrics.charlotte.attainment_percent

        critical = []
        if current_performance < 85:
            critical.append("Performance significantly below target")
        if velocity < -5:
            critical.append("Declining performance trend")
        if confidence < 60:
            critical.append("High performance variability")
        if austin_attainment < 80:
            critical.append("Austin location underperforming")
        if charlotte_attainment < 80:
            critical.append("Charlotte location underperforming")

        peak_days, weak_days = self._day_extremes(mtd)

        return ExecutiveInsights(
            summary=ExecutiveSummary(
                current_performance=current_performance,
                monthly_projection=projected_attainment,
                risk_level=risk,
                key_insight=generate_key_insight(risk, velocity),
                action_required=risk is not RiskLevel.LOW,
            ),
            month_end_projection=MonthEndProjection(
                austin=projected_austin,
                charlotte=projected_charlotte,
                combined=projected_combined,
                confidence=confidence,
                attainment=projected_attainment,
            ),
            quarter_projection=project_quarter(
                records, self.config, today,
                weighted_austin + weighted_charlotte, multiplier, confidence
            ),
            trend=TrendAnalysis(
                direction=direction_from_velocity(velocity),
                velocity=velocity,
                sustainability=determine_sustainability(stability, confidence),
            ),
            risk=RiskAnalysis(
                revenue_at_risk=revenue_at_risk,
                days_to_recovery=days_to_recovery,
                critical_factors=critical or ["Performance on track"],
                mitigation=list(RECOMMENDATION_TEMPLATES[risk]["mitigation"]),
            ),
            positioning=CompetitivePositioning(
                austin_share=calculate_attainment(metrics.austin.revenue, total.revenue),
                charlotte_share=calculate_attainment(metrics.charlotte.revenue, total.revenue),
                growth_rate=velocity,
                benchmark=benchmark_comparison(current_performance),
            ),
            efficiency=OperationalEfficiency(
                revenue_per_day=daily_average,
                consistency=stability,
                peak_performance_days=peak_days,
                underperforming_days=weak_days,
            ),
            recommendations=self._recommendations(
                risk, current_performance, velocity, austin_attainment, charlotte_attainment
            ),
        )

    def _day_extremes(self, mtd: List[RevenueRecord]):
        peak, weak = [], []
        for record in mtd:
            target = resolve_target(record.date, self.config).combined
            if target <= 0:
                continue
            attainment = calculate_attainment(record.combined, target)
            if attainment >= PEAK_DAY_ATTAINMENT:
                peak.append(record.date)
            elif attainment < UNDERPERFORMING_DAY_ATTAINMENT:
                weak.append(record.date)
        return peak, weak

    def _recommendations(
        self,
        risk: RiskLevel,
        current_performance: float,
        velocity: float,
        austin_attainment: float,
        charlotte_attainment: float,
    ) -> StrategicRecommendations:
        template = RECOMMENDATION_TEMPLATES[risk]
        immediate, short_term = [], []
        long_term = list(template["long_term"]) + [
            "Establish predictive analytics for proactive management",
            "Develop location-specific optimization strategies",
        ]

        if current_performance < 90:
            immediate.append("Implement daily performance reviews")
            immediate.append("Focus on high-impact revenue opportunities")
        if velocity < -3:
            immediate.append("Investigate root causes of declining performance")
            short_term.append("Develop performance recovery strategy")
        if austin_attainment < charlotte_attainment - 10:
            short_term.append("Analyze and address Austin location performance gaps")
        if charlotte_attainment < austin_attainment - 10:
            short_term.append("Analyze and address Charlotte location performance gaps")

        allocation = ResourceAllocation(
            austin=(ResourceAction.INCREASE if austin_attainment < charlotte_attainment - 15
                    else ResourceAction.MAINTAIN),
            charlotte=(ResourceAction.INCREASE if charlotte_attainment < austin_attainment - 15
                       else ResourceAction.MAINTAIN),
            reasoning=("Strong performance across both locations" if current_performance > 100
                       else "Focus resources on underperforming areas"),
        )
        return StrategicRecommendations(
            immediate=immediate or list(template["immediate"]),
            short_term=short_term or list(template["short_term"]),
            long_term=long_term,
            resource_allocation=allocation,
        )


def build_executive_insights(
    records: Iterable[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
    today: Optional[date] = None,
) -> InsightsResult:
    """Convenience wrapper around ForecastService."""
    return ForecastService(config).build_insights(records, today)
