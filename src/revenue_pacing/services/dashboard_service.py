"""
Dashboard Service - single entry point over the pacing computations.

Accepts the raw shapes the dashboard sends (record dicts, a target settings
dict, time frame and location names, ISO date strings) and returns report
objects. The web API and the CLI both go through this class.
"""

import logging
from datetime import date
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from revenue_pacing.models.entities import (
    DailyTargetPair,
    RevenueRecord,
    TargetConfiguration,
    ValidationResult,
)
from revenue_pacing.models.enums import Location, TimeFrame
from revenue_pacing.models.report_data import (
    LocationMetricsReport,
    MissingDataReport,
    MonthlyTrendPoint,
    MovingAveragePoint,
    PeriodSummary,
    TimePeriodMetrics,
    WeeklyAnomalyReport,
)
from revenue_pacing.models.validators import DataIntegrityValidator
from revenue_pacing.services.business_intelligence_service import (
    BusinessIntelligenceReport,
    BusinessIntelligenceService,
)
from revenue_pacing.services.consistency_service import ConsistencyReport, check_data_consistency
from revenue_pacing.services.forecast_service import ForecastService, InsightsResult
from revenue_pacing.services.location_metrics_service import (
    calculate_location_metrics,
    calculate_period_metrics,
)
from revenue_pacing.services.missing_data_service import calculate_missing_data_days
from revenue_pacing.services.period_filter import filter_by_time_frame
from revenue_pacing.services.period_summary_service import (
    calculate_moving_average,
    calculate_monthly_trends,
    calculate_period_summary,
    calculate_time_period_metrics,
)
from revenue_pacing.services.target_resolver import resolve_target
from revenue_pacing.services.weekly_anomaly_service import WeeklyAnomalyDetector
from revenue_pacing.utils.calendar import BusinessDaysInfo, WorkingDaysCalendar
from revenue_pacing.utils.date_range_utils import DateParseError, DateRangeUtils

logger = logging.getLogger(__name__)

RecordsInput = Iterable[Union[RevenueRecord, Mapping[str, Any]]]
TargetsInput = Union[TargetConfiguration, Mapping[str, Any], None]


class DashboardInputError(ValueError):
    """Raised when a dashboard request carries records or settings that cannot be parsed."""
    pass


class DashboardService:
    """
    Facade over the pacing services.

    Every method takes an optional ``targets`` (configuration or raw dict;
    None uses the default configuration) and an optional ``today``.
    """

    def __init__(
        self,
        default_targets: TargetConfiguration,
        clock: Optional[Callable[[], date]] = None,
    ):
        self.default_targets = default_targets
        self.clock = clock or date.today
        self.validator = DataIntegrityValidator()
        self.logger = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------ inputs

    def parse_records(self, records: RecordsInput) -> List[RevenueRecord]:
        """
        Convert raw rows to records.

        Raises:
            DashboardInputError: If any row has a malformed date or amount
        """
        parsed = []
        for index, row in enumerate(records or []):
            if isinstance(row, RevenueRecord):
                parsed.append(row)
                continue
            if not isinstance(row, Mapping):
                raise DashboardInputError(f"records[{index}] is not an object")
            try:
                parsed.append(RevenueRecord.from_dict(row))
            except (DateParseError, TypeError, ValueError) as e:
                raise DashboardInputError(f"records[{index}]: {e}") from e
        return parsed

    def parse_targets(self, targets: TargetsInput) -> TargetConfiguration:
        """Raises DashboardInputError for a malformed settings dict."""
        if targets is None:
            return self.default_targets
        if isinstance(targets, TargetConfiguration):
            return targets
        try:
            return TargetConfiguration.from_dict(targets)
        except (AttributeError, TypeError, ValueError) as e:
            raise DashboardInputError(f"Invalid target settings: {e}") from e

    def resolve_today(self, today: Union[date, str, None] = None) -> date:
        if today is None:
            return self.clock()
        if isinstance(today, date):
            return today
        try:
            return DateRangeUtils.parse_date(today)
        except DateParseError as e:
            raise DashboardInputError(str(e)) from e

    # ------------------------------------------------------- operations

    def daily_targets(self, day: Union[date, str], targets: TargetsInput = None) -> DailyTargetPair:
        if not isinstance(day, date):
            try:
                day = DateRangeUtils.parse_date(day)
            except DateParseError as e:
                raise DashboardInputError(str(e)) from e
        return resolve_target(day, self.parse_targets(targets))

    def business_days(
        self,
        year: int,
        month: int,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> BusinessDaysInfo:
        calendar = WorkingDaysCalendar(self.parse_targets(targets))
        return calendar.get_business_days(year, month, self.resolve_today(today))

    def filter_records(
        self,
        records: RecordsInput,
        time_frame: Union[TimeFrame, str] = TimeFrame.MTD,
        location: Union[Location, str, None] = None,
        attainment_threshold: Any = None,
        start_date=None,
        end_date=None,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> List[RevenueRecord]:
        return filter_by_time_frame(
            self.parse_records(records),
            time_frame,
            attainment_threshold,
            self.parse_targets(targets),
            start_date,
            end_date,
            location,
            self.resolve_today(today),
        )

    def location_metrics(
        self,
        records: RecordsInput,
        location: Union[Location, str, None] = None,
        time_frame: Union[TimeFrame, str] = TimeFrame.MTD,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> LocationMetricsReport:
        return calculate_location_metrics(
            self.parse_records(records), self.parse_targets(targets),
            location, time_frame, self.resolve_today(today),
        )

    def period_metrics(
        self,
        records: RecordsInput,
        location: Union[Location, str, None] = None,
        time_frame: Union[TimeFrame, str] = TimeFrame.MTD,
        start_date=None,
        end_date=None,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> LocationMetricsReport:
        return calculate_period_metrics(
            self.parse_records(records), self.parse_targets(targets),
            location, time_frame, start_date, end_date, self.resolve_today(today),
        )

    def weekly_anomalies(
        self,
        records: RecordsInput,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> WeeklyAnomalyReport:
        detector = WeeklyAnomalyDetector(self.parse_targets(targets))
        return detector.detect(self.parse_records(records), self.resolve_today(today))

    def missing_data(
        self,
        records: RecordsInput,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> MissingDataReport:
        return calculate_missing_data_days(
            self.parse_records(records), self.parse_targets(targets), self.resolve_today(today)
        )

    def validate(
        self,
        records: Iterable[Any],
        targets: Any = None,
        today: Union[date, str, None] = None,
    ) -> ValidationResult:
        """Validate raw rows; malformed rows are findings here, not exceptions."""
        if targets is None:
            targets = self.default_targets
        return self.validator.validate(list(records or []), targets, self.resolve_today(today))

    def executive_insights(
        self,
        records: RecordsInput,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> InsightsResult:
        service = ForecastService(self.parse_targets(targets))
        return service.build_insights(self.parse_records(records), self.resolve_today(today))

    def period_summary(self, records: RecordsInput, targets: TargetsInput = None) -> PeriodSummary:
        return calculate_period_summary(self.parse_records(records), self.parse_targets(targets))

    def time_period_metrics(self, records: RecordsInput, targets: TargetsInput = None) -> TimePeriodMetrics:
        return calculate_time_period_metrics(self.parse_records(records), self.parse_targets(targets))

    def monthly_trends(
        self,
        records: RecordsInput,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> List[MonthlyTrendPoint]:
        return calculate_monthly_trends(
            self.parse_records(records), self.parse_targets(targets), self.resolve_today(today)
        )

    def moving_average(
        self,
        records: RecordsInput,
        periods: int = 3,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> List[MovingAveragePoint]:
        trends = self.monthly_trends(records, targets, today)
        try:
            return calculate_moving_average(trends, periods)
        except ValueError as e:
            raise DashboardInputError(str(e)) from e

    def business_intelligence(
        self,
        records: RecordsInput,
        targets: TargetsInput = None,
    ) -> BusinessIntelligenceReport:
        service = BusinessIntelligenceService(self.parse_targets(targets))
        return service.calculate(self.parse_records(records))

    def consistency(
        self,
        records: RecordsInput,
        time_frame: Union[TimeFrame, str] = TimeFrame.MTD,
        location: Union[Location, str, None] = None,
        start_date=None,
        end_date=None,
        targets: TargetsInput = None,
        today: Union[date, str, None] = None,
    ) -> ConsistencyReport:
        return check_data_consistency(
            self.parse_records(records), self.parse_targets(targets),
            time_frame, location, start_date, end_date, self.resolve_today(today),
        )
