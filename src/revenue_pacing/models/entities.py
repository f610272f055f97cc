"""
Pure data models (entities) for the revenue pacing dashboard.
No business logic - just data structures with type hints and
parse/serialize boundaries.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, List, Tuple, FrozenSet, Mapping, Any, Iterable

from revenue_pacing.utils.date_range_utils import DateRangeUtils


# ===================================================================
# VALIDATION INFRASTRUCTURE
# ===================================================================

@dataclass
class ValidationError:
    """Represents a validation error with context."""
    field: str
    message: str
    code: str
    severity: str = "error"  # error, warning, info

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "message": self.message,
            "code": self.code,
            "severity": self.severity,
        }


@dataclass
class ValidationResult:
    """Container for validation results with errors and warnings."""
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return len(self.errors) == 0

    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return len(self.warnings) > 0

    def add_error(self, field: str, message: str, code: str = "VALIDATION_ERROR"):
        """Add an error to the validation result."""
        self.errors.append(ValidationError(field, message, code, "error"))

    def add_warning(self, field: str, message: str, code: str = "VALIDATION_WARNING"):
        """Add a warning to the validation result."""
        self.warnings.append(ValidationError(field, message, code, "warning"))

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid(),
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


# ===================================================================
# PURE DATA MODELS (No business logic)
# ===================================================================

@dataclass(frozen=True)
class RevenueRecord:
    """
    One day of revenue for both locations.
    The date is the unique key of a record set.
    """
    date: date
    austin: float = 0.0
    charlotte: float = 0.0

    @property
    def combined(self) -> float:
        return (self.austin or 0) + (self.charlotte or 0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RevenueRecord":
        """
        Build a record from a raw mapping ({"date": "YYYY-MM-DD", "austin": .., "charlotte": ..}).

        Raises:
            DateParseError: if the date is not a valid YYYY-MM-DD string
            ValueError: if an amount is not numeric
        """
        raw_date = data.get("date")
        record_date = raw_date if isinstance(raw_date, date) else DateRangeUtils.parse_date(raw_date)
        return cls(
            date=record_date,
            austin=float(data.get("austin") or 0),
            charlotte=float(data.get("charlotte") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "date": DateRangeUtils.format_date(self.date),
            "austin": self.austin,
            "charlotte": self.charlotte,
        }


@dataclass(frozen=True)
class DailyTargetPair:
    """Per-location daily revenue goal."""
    austin: float
    charlotte: float

    @property
    def combined(self) -> float:
        return self.austin + self.charlotte

    def to_dict(self) -> dict:
        return {"austin": self.austin, "charlotte": self.charlotte}


ZERO_TARGETS = DailyTargetPair(austin=0.0, charlotte=0.0)


@dataclass(frozen=True)
class MonthlyAdjustment:
    """
    Override for one month: explicit working days and optional target overrides.
    month is 0-based (0 = January).
    """
    month: int
    year: int
    working_days: FrozenSet[int] = frozenset()
    austin: Optional[float] = None
    charlotte: Optional[float] = None

    def matches(self, year: int, month_index: int) -> bool:
        return self.month == month_index and self.year == year

    @property
    def has_working_days(self) -> bool:
        return len(self.working_days) > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MonthlyAdjustment":
        working_days = data.get("workingDays", data.get("working_days")) or []
        austin = data.get("austin")
        charlotte = data.get("charlotte")
        return cls(
            month=int(data.get("month")),
            year=int(data.get("year")),
            working_days=frozenset(int(day) for day in working_days),
            austin=float(austin) if austin is not None else None,
            charlotte=float(charlotte) if charlotte is not None else None,
        )

    def to_dict(self) -> dict:
        result = {
            "month": self.month,
            "year": self.year,
            "workingDays": sorted(self.working_days),
        }
        if self.austin is not None:
            result["austin"] = self.austin
        if self.charlotte is not None:
            result["charlotte"] = self.charlotte
        return result


@dataclass(frozen=True)
class TargetConfiguration:
    """Daily targets plus ordered monthly adjustments. Read-only for every computation."""
    daily_targets: DailyTargetPair
    monthly_adjustments: Tuple[MonthlyAdjustment, ...] = ()

    def find_adjustment(self, year: int, month_index: int) -> Optional[MonthlyAdjustment]:
        """First adjustment matching (month, year); later duplicates are ignored."""
        for adjustment in self.monthly_adjustments:
            if adjustment.matches(year, month_index):
                return adjustment
        return None

    def adjustment_for(self, day: date) -> Optional[MonthlyAdjustment]:
        return self.find_adjustment(day.year, day.month - 1)

    def with_adjustments(self, adjustments: Iterable[MonthlyAdjustment]) -> "TargetConfiguration":
        return TargetConfiguration(self.daily_targets, tuple(adjustments))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TargetConfiguration":
        daily = data.get("dailyTargets", data.get("daily_targets")) or {}
        adjustments = data.get("monthlyAdjustments", data.get("monthly_adjustments")) or []
        return cls(
            daily_targets=DailyTargetPair(
                austin=float(daily.get("austin", 0)),
                charlotte=float(daily.get("charlotte", 0)),
            ),
            monthly_adjustments=tuple(MonthlyAdjustment.from_dict(adj) for adj in adjustments),
        )

    def to_dict(self) -> dict:
        return {
            "dailyTargets": self.daily_targets.to_dict(),
            "monthlyAdjustments": [adj.to_dict() for adj in self.monthly_adjustments],
        }


def records_from_dicts(rows: Iterable[Mapping[str, Any]]) -> List[RevenueRecord]:
    """Convert raw rows to records; rows that fail to parse raise."""
    return [RevenueRecord.from_dict(row) for row in rows]
