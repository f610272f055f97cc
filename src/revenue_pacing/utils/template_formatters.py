# src/revenue_pacing/utils/template_formatters.py
"""
Formatters for consistent data presentation.
Provides utilities for currency and percentage formatting plus JSON
serialization of report payloads.
"""

from typing import Union, Any
from decimal import Decimal
from datetime import date, datetime
from enum import Enum
import json


def format_currency(
    amount: Union[Decimal, float, int, None],
    include_cents: bool = False,
    null_display: str = "-",
) -> str:
    """
    Format currency values for display.

    Args:
        amount: Amount to format
        include_cents: Whether to include cents in display
        null_display: What to display for null values

    Returns:
        Formatted currency string, e.g. "$1,234" or "-$50.25"
    """
    if amount is None:
        return null_display

    if isinstance(amount, Decimal):
        amount = float(amount)

    is_negative = amount < 0
    amount = abs(amount)

    if include_cents:
        formatted = f"${amount:,.2f}"
    else:
        formatted = f"${amount:,.0f}"

    if is_negative:
        formatted = f"-{formatted}"

    return formatted


def format_percentage(
    value: Union[float, Decimal, None], decimal_places: int = 1, null_display: str = "-"
) -> str:
    """
    Format an attainment-style percentage (95.5 = 95.5%).
    """
    if value is None:
        return null_display

    if isinstance(value, Decimal):
        value = float(value)

    return f"{value:.{decimal_places}f}%"


def serialize_for_javascript(data: Any) -> str:
    """
    Serialize data for JavaScript consumption.
    Handles Decimal, date and Enum values.

    Args:
        data: Data to serialize

    Returns:
        JSON string safe for JavaScript
    """

    def default_handler(obj):
        if isinstance(obj, Decimal):
            return float(obj)
        elif isinstance(obj, (date, datetime)):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, (set, frozenset)):
            return sorted(obj)
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

    return json.dumps(data, default=default_handler, ensure_ascii=False)
