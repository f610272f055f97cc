"""
Data models for the revenue pacing dashboard.
"""

from .entities import (
    ValidationError,
    ValidationResult,
    RevenueRecord,
    DailyTargetPair,
    MonthlyAdjustment,
    TargetConfiguration,
    ZERO_TARGETS,
    records_from_dicts,
)
from .enums import (
    Location,
    TimeFrame,
    TrendDirection,
    RiskLevel,
    Sustainability,
    AlertSeverity,
    ResourceAction,
    BenchmarkComparison,
    InsightsFailureReason,
)
from .report_data import (
    DailyTargetEntry,
    PeriodInfo,
    LocationMetrics,
    LocationMetricsReport,
    DailyAlert,
    WeeklyComparison,
    WeeklyAnomalyReport,
    MissingDataReport,
    PeriodSummary,
    PeriodBucketMetrics,
    TimePeriodMetrics,
    MonthlyTrendPoint,
    MovingAveragePoint,
)

__all__ = [
    'ValidationError',
    'ValidationResult',
    'RevenueRecord',
    'DailyTargetPair',
    'MonthlyAdjustment',
    'TargetConfiguration',
    'ZERO_TARGETS',
    'records_from_dicts',
    'Location',
    'TimeFrame',
    'TrendDirection',
    'RiskLevel',
    'Sustainability',
    'AlertSeverity',
    'ResourceAction',
    'BenchmarkComparison',
    'InsightsFailureReason',
    'DailyTargetEntry',
    'PeriodInfo',
    'LocationMetrics',
    'LocationMetricsReport',
    'DailyAlert',
    'WeeklyComparison',
    'WeeklyAnomalyReport',
    'MissingDataReport',
    'PeriodSummary',
    'PeriodBucketMetrics',
    'TimePeriodMetrics',
    'MonthlyTrendPoint',
    'MovingAveragePoint',
]
