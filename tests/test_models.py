from datetime import date

import pytest

from revenue_pacing.models.entities import (
    MonthlyAdjustment,
    RevenueRecord,
    TargetConfiguration,
    ValidationResult,
    records_from_dicts,
)
from revenue_pacing.models.enums import Location, TimeFrame
from revenue_pacing.utils.date_range_utils import DateParseError, DateRangeUtils


class TestDateRangeUtils:
    def test_parse_and_format(self):
        assert DateRangeUtils.parse_date("2024-03-07") == date(2024, 3, 7)
        assert DateRangeUtils.format_date(date(2024, 3, 7)) == "2024-03-07"

    @pytest.mark.parametrize("value", ["2024/03/07", "2024-3-7", "", None, "2024-02-30"])
    def test_parse_rejects_bad_values(self, value):
        with pytest.raises(DateParseError):
            DateRangeUtils.parse_date(value)

    def test_try_parse(self):
        assert DateRangeUtils.try_parse_date("bad") is None
        assert DateRangeUtils.try_parse_date(date(2024, 1, 2)) == date(2024, 1, 2)

    def test_week_bounds_start_monday(self):
        assert DateRangeUtils.week_bounds(date(2024, 3, 17)) == (date(2024, 3, 11), date(2024, 3, 17))

    def test_quarter_bounds(self):
        assert DateRangeUtils.quarter_bounds(date(2024, 3, 15)) == (date(2024, 1, 1), date(2024, 3, 31))
        assert DateRangeUtils.quarter_bounds(date(2024, 11, 2)) == (date(2024, 10, 1), date(2024, 12, 31))


class TestEntities:
    def test_record_from_dict(self):
        record = RevenueRecord.from_dict({"date": "2024-03-04", "austin": 10, "charlotte": None})
        assert record == RevenueRecord(date(2024, 3, 4), 10.0, 0.0)
        assert record.combined == 10.0
        assert record.to_dict() == {"date": "2024-03-04", "austin": 10.0, "charlotte": 0.0}

    def test_record_from_dict_bad_date(self):
        with pytest.raises(DateParseError):
            records_from_dicts([{"date": "03/04/2024", "austin": 1, "charlotte": 1}])

    def test_target_configuration_accepts_camel_case(self):
        config = TargetConfiguration.from_dict({
            "dailyTargets": {"austin": 53000, "charlotte": 62500},
            "monthlyAdjustments": [{"month": 2, "year": 2024, "workingDays": [4, 5], "charlotte": 70000}],
        })
        assert config.daily_targets.austin == 53000.0
        adjustment = config.monthly_adjustments[0]
        assert adjustment == MonthlyAdjustment(month=2, year=2024, working_days=frozenset({4, 5}), charlotte=70000.0)
        assert config.find_adjustment(2024, 2) is adjustment
        assert config.adjustment_for(date(2024, 4, 1)) is None

    def test_target_configuration_round_trip_shape(self, adjusted_targets):
        data = adjusted_targets.to_dict()
        assert data["dailyTargets"] == {"austin": 1000.0, "charlotte": 2000.0}
        assert data["monthlyAdjustments"][0]["workingDays"] == [4, 5, 6, 7, 8]
        assert "charlotte" not in data["monthlyAdjustments"][0]

    def test_validation_result(self):
        result = ValidationResult()
        result.add_warning("records[0]", "odd", "UNUSUAL_ATTAINMENT")
        assert result.is_valid()
        assert result.has_warnings()
        result.add_error("records", "none", "NO_DATA")
        assert not result.is_valid()
        assert result.to_dict()["errors"][0]["code"] == "NO_DATA"


class TestEnums:
    @pytest.mark.parametrize("value,expected", [
        (None, Location.COMBINED),
        ("", Location.COMBINED),
        ("austin", Location.AUSTIN),
        ("Charlotte", Location.CHARLOTTE),
        (Location.AUSTIN, Location.AUSTIN),
    ])
    def test_location_parse(self, value, expected):
        assert Location.parse(value) is expected

    def test_location_parse_unknown(self):
        with pytest.raises(ValueError):
            Location.parse("Dallas")

    def test_time_frame_parse(self):
        assert TimeFrame.parse("last30") is TimeFrame.LAST_30
        assert TimeFrame.parse("This Week") is TimeFrame.THIS_WEEK
        assert TimeFrame.parse("ytd") is TimeFrame.YTD
        with pytest.raises(ValueError):
            TimeFrame.parse("fortnight")
