from datetime import date

import pytest

from revenue_pacing.models.entities import RevenueRecord
from revenue_pacing.models.enums import TimeFrame
from revenue_pacing.services.period_filter import (
    AttainmentThreshold,
    TimeFrameWindow,
    filter_by_time_frame,
    resolve_time_frame_window,
)


@pytest.fixture
def spread_records():
    """Records scattered across the year, unsorted, including today."""
    days = [
        date(2024, 3, 15), date(2023, 12, 29), date(2024, 1, 2), date(2024, 2, 13),
        date(2024, 2, 14), date(2024, 3, 1), date(2024, 3, 11), date(2024, 3, 14),
    ]
    return [RevenueRecord(d, 1000.0, 2000.0) for d in days]


class TestResolveTimeFrameWindow:
    @pytest.mark.parametrize("time_frame,expected", [
        (TimeFrame.THIS_WEEK, TimeFrameWindow(date(2024, 3, 11), date(2024, 3, 17))),
        (TimeFrame.MTD, TimeFrameWindow(date(2024, 3, 1), date(2024, 3, 15))),
        (TimeFrame.LAST_30, TimeFrameWindow(date(2024, 2, 14), date(2024, 3, 14))),
        (TimeFrame.LAST_90, TimeFrameWindow(date(2023, 12, 16), date(2024, 3, 14))),
        (TimeFrame.YTD, TimeFrameWindow(date(2024, 1, 1), date(2024, 3, 14))),
        (TimeFrame.ALL, TimeFrameWindow(None, date(2024, 3, 14))),
    ])
    def test_named_windows(self, time_frame, expected, today):
        assert resolve_time_frame_window(time_frame, today) == expected

    def test_custom_window(self, today):
        window = resolve_time_frame_window("custom", today, "2024-02-01", "2024-02-29")
        assert window == TimeFrameWindow(date(2024, 2, 1), date(2024, 2, 29))

    @pytest.mark.parametrize("start,end", [
        (None, "2024-02-29"),
        ("2024-02-01", None),
        ("02/01/2024", "2024-02-29"),
        ("2024-03-01", "2024-02-01"),
    ])
    def test_custom_window_selects_nothing(self, start, end, today):
        assert resolve_time_frame_window(TimeFrame.CUSTOM, today, start, end) is None


class TestFilterByTimeFrame:
    def test_mtd_includes_today_and_sorts(self, spread_records, targets, today):
        result = filter_by_time_frame(spread_records, "MTD", config=targets, today=today)
        assert [r.date for r in result] == [date(2024, 3, 1), date(2024, 3, 11), date(2024, 3, 14), date(2024, 3, 15)]

    def test_rolling_windows_end_yesterday(self, spread_records, targets, today):
        result = filter_by_time_frame(spread_records, "last30", config=targets, today=today)
        assert [r.date for r in result] == [
            date(2024, 2, 14), date(2024, 3, 1), date(2024, 3, 11), date(2024, 3, 14)
        ]

    def test_ytd_and_all(self, spread_records, targets, today):
        ytd = filter_by_time_frame(spread_records, "YTD", config=targets, today=today)
        assert ytd[0].date == date(2024, 1, 2)
        assert ytd[-1].date == date(2024, 3, 14)

        everything = filter_by_time_frame(spread_records, "all", config=targets, today=today)
        assert len(everything) == 7
        assert everything[0].date == date(2023, 12, 29)

    def test_custom_with_bad_bound_is_empty(self, spread_records, targets, today):
        assert filter_by_time_frame(
            spread_records, "custom", config=targets, start_date="nope", end_date="2024-03-01", today=today
        ) == []

    def test_location_zeroes_other_location_without_mutating(self, spread_records, targets, today):
        result = filter_by_time_frame(spread_records, "MTD", config=targets, location="Austin", today=today)
        assert all(r.charlotte == 0 for r in result)
        assert all(r.austin == 1000.0 for r in result)
        assert all(r.charlotte == 2000.0 for r in spread_records)

    def test_attainment_threshold_any_series(self, targets, today):
        records = [
            RevenueRecord(date(2024, 3, 4), 500.0, 2000.0),  # charlotte 100%
            RevenueRecord(date(2024, 3, 5), 100.0, 100.0),   # all far below
            RevenueRecord(date(2024, 3, 6), 1000.0, 1000.0),  # austin 100%
        ]
        result = filter_by_time_frame(
            records, "MTD", {"min": 90, "max": 110}, config=targets, today=today
        )
        assert [r.date for r in result] == [date(2024, 3, 4), date(2024, 3, 6)]

    def test_zero_target_day_has_zero_attainment(self, adjusted_targets, today):
        records = [RevenueRecord(date(2024, 3, 11), 1000.0, 2000.0)]  # not a listed working day
        assert filter_by_time_frame(records, "MTD", (0, 0), config=adjusted_targets, today=today) == records
        assert filter_by_time_frame(records, "MTD", (1, 500), config=adjusted_targets, today=today) == []

    def test_threshold_parsing(self):
        assert AttainmentThreshold.from_value(None) is None
        assert AttainmentThreshold.from_value((80, 120)) == AttainmentThreshold(80.0, 120.0)
        assert AttainmentThreshold.from_value({"min": 50}).max == float("inf")
        assert AttainmentThreshold.from_value({"min": None, "max": 120}) == AttainmentThreshold(0.0, 120.0)
        assert AttainmentThreshold.from_value([10, None]).max == float("inf")

    @pytest.mark.parametrize("value", ["50", 75, (1, 2, 3), {"min": "lots"}, [None, "x"]])
    def test_threshold_rejects_bad_shapes(self, value):
        with pytest.raises(ValueError):
            AttainmentThreshold.from_value(value)

    @pytest.mark.parametrize("time_frame", [tf for tf in TimeFrame])
    @pytest.mark.parametrize("location", [None, "Austin", "Charlotte"])
    def test_filtering_twice_changes_nothing(self, spread_records, targets, today, time_frame, location):
        kwargs = dict(
            attainment_threshold={"min": 40, "max": 150},
            config=targets,
            start_date="2024-01-01",
            end_date="2024-03-15",
            location=location,
            today=today,
        )
        once = filter_by_time_frame(spread_records, time_frame, **kwargs)
        assert filter_by_time_frame(once, time_frame, **kwargs) == once
