from datetime import date

import pytest

from revenue_pacing.models.entities import RevenueRecord
from revenue_pacing.models.enums import Location, TimeFrame
from revenue_pacing.services.location_metrics_service import (
    CurrentMonthPeriod,
    EmptyPeriod,
    ExplicitRangePeriod,
    aggregate_location_metrics,
    calculate_location_metrics,
    calculate_period_metrics,
    month_daily_targets,
    period_for_time_frame,
)
from revenue_pacing.services.period_filter import filter_by_time_frame


class TestCurrentMonthMetrics:
    def test_on_target_month(self, march_records, targets, today):
        report = calculate_location_metrics(march_records, targets, today=today)

        assert report.austin.revenue == 10000.0
        assert report.austin.on_pace_target == 10000.0
        assert report.austin.full_period_target == 21000.0
        assert report.austin.daily_pace_needed == pytest.approx(1000.0)
        assert report.austin.attainment_percent == pytest.approx(100.0)

        assert report.charlotte.on_pace_target == 20000.0
        assert report.charlotte.full_period_target == 42000.0

        total = report.total
        assert total.revenue == 30000.0
        assert total.on_pace_target == 30000.0
        assert total.full_period_target == 63000.0
        assert total.daily_pace_needed == pytest.approx(3000.0)
        assert total.elapsed_business_days == 10
        assert total.total_business_days == 21
        assert total.remaining_business_days == 11

    def test_period_info(self, march_records, targets, today):
        info = calculate_location_metrics(march_records, targets, today=today).period_info
        assert info.start_date == date(2024, 3, 1)
        assert info.end_date == date(2024, 3, 31)
        assert info.period_type == "MTD"
        assert info.working_days_in_period == 21
        assert info.actual_data_days == 10
        assert info.relevant_month == 2
        assert info.relevant_year == 2024
        assert not info.has_monthly_adjustment
        assert len(info.daily_breakdown) == 31
        assert sum(1 for e in info.daily_breakdown if e.is_working_day) == 21

    def test_single_location_total_row(self, march_records, targets, today):
        filtered = filter_by_time_frame(march_records, "MTD", config=targets, location="Austin", today=today)
        report = calculate_location_metrics(filtered, targets, Location.AUSTIN, today=today)

        assert report.total.revenue == 10000.0
        # on-pace stays the sum of both locations
        assert report.total.on_pace_target == 30000.0
        assert report.total.full_period_target == 21000.0
        assert report.total.daily_pace_needed == pytest.approx(1000.0)

    def test_adjusted_month(self, adjusted_targets, today):
        records = [RevenueRecord(date(2024, 3, d), 1500.0, 2000.0) for d in (4, 5, 6, 7, 8)]
        report = calculate_location_metrics(records, adjusted_targets, today=today)

        assert report.austin.on_pace_target == 7500.0
        assert report.austin.full_period_target == 7500.0
        assert report.total.remaining_business_days == 0
        assert report.total.daily_pace_needed == 0
        assert report.period_info.has_monthly_adjustment
        assert report.period_info.daily_targets.austin == 1500.0

    def test_empty_records(self, targets, today):
        report = calculate_location_metrics([], targets, today=today)
        assert report.total.revenue == 0
        assert report.total.attainment_percent == 0
        assert report.period_info.start_date is None

    def test_time_frame_label_kept(self, march_records, targets, today):
        report = calculate_location_metrics(march_records, targets, time_frame="last30", today=today)
        assert report.period_info.period_type == "last30"
        assert report.total.total_business_days == 21

    def test_to_dict_emits_period_info_once(self, march_records, targets, today):
        data = calculate_location_metrics(march_records, targets, today=today).to_dict()
        assert "period_info" not in data["austin"]
        assert data["period_info"]["working_days_in_period"] == 21
        assert data["total"]["attainment_percent"] == pytest.approx(100.0)


class TestPeriodMetrics:
    def test_mtd_matches_explicit_range_over_current_month(self, march_records, adjusted_targets, targets, today):
        for config in (targets, adjusted_targets):
            current = aggregate_location_metrics(march_records, config, period=CurrentMonthPeriod(), today=today)
            explicit = aggregate_location_metrics(
                march_records, config,
                period=ExplicitRangePeriod(date(2024, 3, 1), date(2024, 3, 31)), today=today,
            )
            for name in ("austin", "charlotte", "total"):
                a, b = getattr(current, name), getattr(explicit, name)
                assert a.on_pace_target == pytest.approx(b.on_pace_target)
                assert a.full_period_target == pytest.approx(b.full_period_target)
                assert a.elapsed_business_days == b.elapsed_business_days
                assert a.total_business_days == b.total_business_days

    def test_last30_spans_months(self, make_records, targets, today):
        records = make_records(date(2024, 2, 14), date(2024, 3, 14))
        filtered = filter_by_time_frame(records, "last30", config=targets, today=today)
        report = calculate_period_metrics(filtered, targets, time_frame="last30", today=today)

        info = report.period_info
        assert info.start_date == date(2024, 2, 14)
        assert info.end_date == date(2024, 3, 14)
        assert info.working_days_in_period == 22
        assert info.elapsed_days == 22
        assert report.austin.on_pace_target == 22000.0
        assert report.austin.attainment_percent == pytest.approx(100.0)
        assert info.relevant_month == 2

    def test_range_honors_each_months_adjustment(self, adjusted_targets, today):
        records = [RevenueRecord(date(2024, 2, 29), 1000.0, 2000.0), RevenueRecord(date(2024, 3, 4), 1500.0, 2000.0)]
        report = calculate_period_metrics(
            records, adjusted_targets, time_frame="custom",
            start_date="2024-02-26", end_date="2024-03-31", today=today,
        )
        # 4 Feb weekdays at 1000 plus 5 listed March days at 1500
        assert report.austin.full_period_target == 4 * 1000.0 + 5 * 1500.0
        assert report.period_info.has_monthly_adjustment

    def test_future_days_remain(self, targets):
        records = [RevenueRecord(date(2024, 3, 4), 1000.0, 2000.0)]
        report = calculate_period_metrics(
            records, targets, time_frame="custom",
            start_date="2024-03-04", end_date="2024-03-08", today=date(2024, 3, 6),
        )
        assert report.total.elapsed_business_days == 2
        assert report.total.remaining_business_days == 3
        assert report.austin.daily_pace_needed == pytest.approx((5000.0 - 1000.0) / 3)

    def test_period_strategy_selection(self, march_records, today):
        assert isinstance(period_for_time_frame(TimeFrame.MTD, march_records, today=today), CurrentMonthPeriod)
        assert isinstance(period_for_time_frame("YTD", march_records, today=today), ExplicitRangePeriod)
        assert isinstance(
            period_for_time_frame("custom", march_records, "bad", "2024-03-01", today=today), EmptyPeriod
        )

    def test_month_daily_targets(self, adjusted_targets):
        pair = month_daily_targets(adjusted_targets, 2024, 2)
        assert (pair.austin, pair.charlotte) == (1500.0, 2000.0)
        assert month_daily_targets(adjusted_targets, 2024, 3).austin == 1000.0
