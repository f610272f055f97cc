"""
Business rule validators for the revenue pacing dashboard.
Separated from data models for clean architecture.
"""

import math
from datetime import date
from numbers import Real
from typing import Any, Iterable, Mapping, Optional, Union

from .entities import RevenueRecord, TargetConfiguration, ValidationResult
from revenue_pacing.services.target_resolver import calculate_attainment, resolve_target
from revenue_pacing.utils.date_range_utils import DateRangeUtils

HIGH_ATTAINMENT_WARNING = 200.0
LOW_ATTAINMENT_WARNING = 10.0
EXPECTED_YEAR_RANGE = (2020, 2030)

RecordLike = Union[RevenueRecord, Mapping[str, Any]]
ConfigLike = Union[TargetConfiguration, Mapping[str, Any], None]


def _is_amount(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


class TargetConfigurationValidator:
    """Validates daily targets and monthly adjustments."""

    def validate(self, config: ConfigLike, result: Optional[ValidationResult] = None) -> ValidationResult:
        result = result if result is not None else ValidationResult()

        if config is None:
            result.add_error("targets", "Daily targets not configured", "MISSING_TARGETS")
            return result

        if isinstance(config, Mapping):
            try:
                config = TargetConfiguration.from_dict(config)
            except (AttributeError, TypeError, ValueError) as e:
                result.add_error("targets", f"Target configuration is malformed: {e}", "INVALID_TARGET_CONFIG")
                return result
        elif not isinstance(config, TargetConfiguration):
            result.add_error("targets", "Target configuration must be an object", "INVALID_TARGET_CONFIG")
            return result

        self._validate_daily_targets(config, result)
        for index, adjustment in enumerate(config.monthly_adjustments):
            self._validate_adjustment(index, adjustment, result)
        return result

    def _validate_daily_targets(self, config: TargetConfiguration, result: ValidationResult):
        daily = config.daily_targets
        if daily is None:
            result.add_error("targets.daily_targets", "Daily targets not configured", "MISSING_TARGETS")
            return
        if daily.austin <= 0:
            result.add_error("targets.daily_targets.austin",
                             "Austin daily target must be greater than 0", "INVALID_TARGET")
        if daily.charlotte <= 0:
            result.add_error("targets.daily_targets.charlotte",
                             "Charlotte daily target must be greater than 0", "INVALID_TARGET")

    def _validate_adjustment(self, index: int, adjustment, result: ValidationResult):
        field_name = f"targets.monthly_adjustments[{index}]"

        if not 0 <= adjustment.month <= 11:
            result.add_error(f"{field_name}.month",
                             f"Invalid month in adjustment {index}: {adjustment.month}",
                             "INVALID_ADJUSTMENT")

        low, high = EXPECTED_YEAR_RANGE
        if not low <= adjustment.year <= high:
            result.add_warning(f"{field_name}.year",
                               f"Unusual year in adjustment {index}: {adjustment.year}",
                               "UNUSUAL_YEAR")

        if not adjustment.working_days:
            result.add_error(f"{field_name}.working_days",
                             f"No working days specified in adjustment {index}",
                             "INVALID_ADJUSTMENT")
        for day in sorted(adjustment.working_days):
            if not 1 <= day <= 31:
                result.add_error(f"{field_name}.working_days",
                                 f"Invalid working day in adjustment {index}: {day}",
                                 "INVALID_ADJUSTMENT")

        if adjustment.austin is not None and adjustment.austin <= 0:
            result.add_error(f"{field_name}.austin",
                             f"Invalid Austin target in adjustment {index}: {adjustment.austin}",
                             "INVALID_ADJUSTMENT")
        if adjustment.charlotte is not None and adjustment.charlotte <= 0:
            result.add_error(f"{field_name}.charlotte",
                             f"Invalid Charlotte target in adjustment {index}: {adjustment.charlotte}",
                             "INVALID_ADJUSTMENT")


class DataIntegrityValidator:
    """
    Validates a revenue record set together with its target configuration.

    Records may be RevenueRecord instances or raw mappings straight from an
    import ({"date": "YYYY-MM-DD", "austin": .., "charlotte": ..}); raw
    mappings are checked field by field before anything is converted.
    Warnings never affect validity.
    """

    def __init__(self, target_validator: Optional[TargetConfigurationValidator] = None):
        self.target_validator = target_validator or TargetConfigurationValidator()

    def validate(
        self,
        records: Iterable[RecordLike],
        config: ConfigLike = None,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """Validate records and config and return validation result."""
        result = ValidationResult()
        records = list(records or [])
        today = today or date.today()

        if not records:
            result.add_error("records", "No data provided for validation", "NO_DATA")
            return result

        resolved_config = self._coerce_config(config)

        seen = set()
        for index, record in enumerate(records):
            if not isinstance(record, (RevenueRecord, Mapping)):
                result.add_error(f"records[{index}]",
                                 f"Record at index {index} is not an object", "INVALID_FORMAT")
                continue
            raw_date, austin, charlotte = self._fields(record)

            # Duplicates are keyed on the raw value so bad dates are still caught
            key = raw_date.isoformat() if isinstance(raw_date, date) else str(raw_date)
            if key in seen:
                result.add_error(f"records[{index}].date", f"Duplicate date found: {key}", "DUPLICATE_DATE")
            seen.add(key)

            record_date = self._validate_date(index, raw_date, result)
            if record_date is None:
                continue

            amounts_ok = self._validate_amounts(index, austin, charlotte, result)

            if record_date > today:
                result.add_warning(f"records[{index}].date",
                                   f"Future date found at index {index}: {key}", "FUTURE_DATE")

            if amounts_ok:
                self._check_attainment(index, record_date, austin + charlotte, resolved_config, result)

        self.target_validator.validate(config, result)
        return result

    @staticmethod
    def _fields(record: RecordLike):
        if isinstance(record, RevenueRecord):
            return record.date, record.austin, record.charlotte
        return record.get("date"), record.get("austin"), record.get("charlotte")

    @staticmethod
    def _coerce_config(config: ConfigLike) -> Optional[TargetConfiguration]:
        if isinstance(config, Mapping):
            try:
                return TargetConfiguration.from_dict(config)
            except (AttributeError, TypeError, ValueError):
                return None
        if not isinstance(config, TargetConfiguration) or config.daily_targets is None:
            return None
        return config

    def _validate_date(self, index: int, raw_date: Any, result: ValidationResult) -> Optional[date]:
        if isinstance(raw_date, date):
            return raw_date
        if not DateRangeUtils.is_iso_format(raw_date):
            result.add_error(f"records[{index}].date",
                             f"Invalid date format at index {index}: {raw_date}", "INVALID_FORMAT")
            return None
        parsed = DateRangeUtils.try_parse_date(raw_date)
        if parsed is None:
            result.add_error(f"records[{index}].date",
                             f"Invalid date at index {index}: {raw_date}", "INVALID_DATE")
        return parsed

    def _validate_amounts(self, index: int, austin: Any, charlotte: Any, result: ValidationResult) -> bool:
        ok = True
        for name, label, value in (("austin", "Austin", austin), ("charlotte", "Charlotte", charlotte)):
            if not _is_amount(value) or value < 0:
                result.add_error(f"records[{index}].{name}",
                                 f"Invalid {label} revenue at index {index}: {value}", "INVALID_REVENUE")
                ok = False
        return ok

    def _check_attainment(self, index: int, record_date: date, revenue: float,
                          config: Optional[TargetConfiguration], result: ValidationResult):
        targets = resolve_target(record_date, config)
        if targets.combined <= 0:
            return

        attainment = calculate_attainment(revenue, targets.combined)
        if attainment > HIGH_ATTAINMENT_WARNING:
            result.add_warning(f"records[{index}]",
                               f"Unusually high attainment ({attainment:.1f}%) on {record_date.isoformat()}",
                               "UNUSUAL_ATTAINMENT")
        if attainment < LOW_ATTAINMENT_WARNING and revenue > 0:
            result.add_warning(f"records[{index}]",
                               f"Unusually low attainment ({attainment:.1f}%) on {record_date.isoformat()}",
                               "UNUSUAL_ATTAINMENT")


def validate_data_integrity(
    records: Iterable[RecordLike],
    config: ConfigLike = None,
    today: Optional[date] = None,
) -> ValidationResult:
    """Convenience function for DataIntegrityValidator."""
    return DataIntegrityValidator().validate(records, config, today)
