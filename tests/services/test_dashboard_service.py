from datetime import date

import pytest

from revenue_pacing.models.entities import DailyTargetPair, RevenueRecord, TargetConfiguration
from revenue_pacing.services.dashboard_service import DashboardInputError, DashboardService

RAW_TARGETS = {
    "dailyTargets": {"austin": 1000, "charlotte": 2000},
    "monthlyAdjustments": [{"month": 2, "year": 2024, "workingDays": [4, 5, 6, 7, 8], "austin": 1500}],
}


@pytest.fixture
def service(targets, today):
    return DashboardService(targets, clock=lambda: today)


@pytest.fixture
def raw_march():
    return [
        {"date": f"2024-03-{day:02d}", "austin": 1000, "charlotte": 2000}
        for day in (1, 4, 5, 6, 7, 8, 11, 12, 13, 14)
    ]


class TestInputs:
    def test_parse_records_mixed(self, service):
        records = service.parse_records([
            {"date": "2024-03-04", "austin": "1000", "charlotte": 2000},
            RevenueRecord(date(2024, 3, 5), 1.0, 2.0),
        ])
        assert records[0] == RevenueRecord(date(2024, 3, 4), 1000.0, 2000.0)
        assert records[1].austin == 1.0

    @pytest.mark.parametrize("row", [
        {"date": "2024-13-01", "austin": 1, "charlotte": 1},
        {"date": "2024-03-04", "austin": "lots", "charlotte": 1},
        "2024-03-04",
    ])
    def test_parse_records_rejects_bad_rows(self, service, row):
        with pytest.raises(DashboardInputError, match=r"records\[0\]"):
            service.parse_records([row])

    def test_parse_targets(self, service, targets):
        assert service.parse_targets(None) is targets
        parsed = service.parse_targets(RAW_TARGETS)
        assert isinstance(parsed, TargetConfiguration)
        assert parsed.monthly_adjustments[0].austin == 1500.0
        with pytest.raises(DashboardInputError):
            service.parse_targets({"dailyTargets": {"austin": "x"}})

    def test_resolve_today(self, service, today):
        assert service.resolve_today() == today
        assert service.resolve_today("2024-01-02") == date(2024, 1, 2)
        with pytest.raises(DashboardInputError):
            service.resolve_today("yesterday")


class TestOperations:
    def test_daily_targets(self, service):
        assert service.daily_targets("2024-03-04", RAW_TARGETS) == DailyTargetPair(1500.0, 2000.0)
        assert service.daily_targets(date(2024, 3, 11), RAW_TARGETS) == DailyTargetPair(0.0, 0.0)
        with pytest.raises(DashboardInputError):
            service.daily_targets("March 4")

    def test_business_days(self, service):
        info = service.business_days(2024, 3)
        assert (info.total, info.elapsed, info.remaining) == (21, 10, 11)

    def test_filter_records(self, service, raw_march):
        records = service.filter_records(raw_march, "last30", location="Austin")
        assert len(records) == 10
        assert all(r.charlotte == 0 for r in records)

    def test_filter_records_unknown_time_frame(self, service, raw_march):
        with pytest.raises(ValueError):
            service.filter_records(raw_march, "fortnight")

    def test_location_metrics(self, service, raw_march):
        report = service.location_metrics(raw_march)
        assert report.total.revenue == 30000.0
        assert report.total.attainment_percent == pytest.approx(100.0)

    def test_period_metrics_custom(self, service, raw_march):
        report = service.period_metrics(
            raw_march, time_frame="custom", start_date="2024-03-04", end_date="2024-03-08", today="2024-03-09"
        )
        assert report.austin.full_period_target == 5000.0

    def test_validate_uses_default_targets(self, service, raw_march):
        assert service.validate(raw_march).is_valid()
        result = service.validate([{"date": "bad", "austin": 1, "charlotte": 1}])
        assert [e.code for e in result.errors] == ["INVALID_FORMAT"]

    def test_missing_data(self, service, raw_march):
        assert service.missing_data(raw_march[:-2]).missing_days == 2

    def test_weekly_anomalies(self, service, raw_march):
        records = raw_march + [{"date": "2024-03-15", "austin": 1000, "charlotte": 2000}]
        report = service.weekly_anomalies(records, today="2024-03-16")
        assert not report.has_alerts
        assert report.current_week_start == date(2024, 3, 11)

    def test_weekly_anomalies_partial_week(self, service, raw_march):
        report = service.weekly_anomalies(raw_march, today="2024-03-15")
        assert [c.change_percent for c in report.comparisons] == [pytest.approx(-20.0)] * 3

    def test_executive_insights(self, service, raw_march):
        assert service.executive_insights(raw_march).ok

    def test_summaries(self, service, raw_march):
        assert service.period_summary(raw_march).total_days == 10
        assert len(service.time_period_metrics(raw_march).weekly) == 2
        assert [p.label for p in service.monthly_trends(raw_march)] == ["Mar"]

    def test_moving_average(self, service, raw_march):
        assert service.moving_average(raw_march, periods=2)[0].austin == pytest.approx(100.0)
        with pytest.raises(DashboardInputError):
            service.moving_average(raw_march, periods=0)

    def test_business_intelligence(self, service, raw_march):
        assert service.business_intelligence(raw_march).performance.efficiency == pytest.approx(100.0)

    def test_consistency(self, service, raw_march):
        assert service.consistency(raw_march, location="Austin").is_valid
