"""
Enums for type safety in the revenue pacing dashboard.
"""

from enum import Enum
from typing import Optional


class Location(Enum):
    """Business locations plus the combined view."""
    AUSTIN = "Austin"
    CHARLOTTE = "Charlotte"
    COMBINED = "Combined"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Location":
        """Parse a location name case-insensitively; empty means Combined."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.COMBINED
        text = str(value).strip().lower()
        if not text:
            return cls.COMBINED
        for member in cls:
            if member.value.lower() == text or member.name.lower() == text:
                return member
        raise ValueError(f"Unknown location: {value}")

    @property
    def is_single(self) -> bool:
        return self is not Location.COMBINED


class TimeFrame(Enum):
    """Named reporting windows."""
    THIS_WEEK = "This Week"
    MTD = "MTD"
    LAST_30 = "last30"
    LAST_90 = "last90"
    YTD = "YTD"
    CUSTOM = "custom"
    ALL = "all"

    @classmethod
    def parse(cls, value) -> "TimeFrame":
        """Parse a time frame from its display value or enum name."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        raise ValueError(f"Unknown time frame: {value}")


class TrendDirection(Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Sustainability(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AlertSeverity(Enum):
    """Display banding for week-over-week changes."""
    SEVERE = "severe"
    MODERATE = "moderate"
    INFORMATIONAL = "informational"


class ResourceAction(Enum):
    INCREASE = "increase"
    MAINTAIN = "maintain"
    DECREASE = "decrease"


class BenchmarkComparison(Enum):
    ABOVE = "above"
    AT = "at"
    BELOW = "below"


class InsightsFailureReason(Enum):
    """Why executive insights could not be produced."""
    NO_DATA = "NO_DATA"
    NO_CURRENT_MONTH_DATA = "NO_CURRENT_MONTH_DATA"
    COMPUTATION_FAILED = "COMPUTATION_FAILED"
