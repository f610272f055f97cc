"""
Target resolution and attainment math.

Resolves the effective per-location daily target for a calendar date under
the layered override rules: default daily target, then a monthly adjustment
for that month, whose working-day list zeroes every day it does not name.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from revenue_pacing.config.settings import default_target_configuration
from revenue_pacing.models.entities import DailyTargetPair, TargetConfiguration, ZERO_TARGETS
from revenue_pacing.utils.calendar import business_days_in_month

logger = logging.getLogger(__name__)


def ensure_config(config: Optional[TargetConfiguration]) -> TargetConfiguration:
    """Return config, or the settings-driven default when none was supplied."""
    if config is not None:
        return config
    logger.debug("No target configuration supplied, using defaults from settings")
    return default_target_configuration()


def resolve_target(day: date, config: Optional[TargetConfiguration] = None) -> DailyTargetPair:
    """
    Effective daily target pair for a date.

    Args:
        day: Calendar date to resolve
        config: Target configuration; None falls back to the default configuration

    Returns:
        DailyTargetPair; both amounts are zero on a day an adjustment excludes
    """
    config = ensure_config(config)

    adjustment = config.adjustment_for(day)
    if adjustment is None:
        return config.daily_targets

    if day.day not in adjustment.working_days:
        return ZERO_TARGETS

    defaults = config.daily_targets
    return DailyTargetPair(
        austin=adjustment.austin if adjustment.austin is not None else defaults.austin,
        charlotte=adjustment.charlotte if adjustment.charlotte is not None else defaults.charlotte,
    )


def calculate_attainment(actual: float, target: float) -> float:
    """Attainment percentage; a non-positive target maps to 0 instead of dividing."""
    if not target or target <= 0:
        return 0.0
    return (actual / target) * 100


def recalculate_monthly_working_days(
    config: TargetConfiguration,
    today: Optional[date] = None,
    force: bool = False,
) -> TargetConfiguration:
    """
    Fill the current month's adjustment with its weekdays.

    Only an adjustment for today's month is touched, and only when its
    working-day list is empty or ``force`` is set. Returns a new
    configuration; the input is left as is.
    """
    today = today or date.today()
    month_index = today.month - 1
    updated = []
    matched = changed = False
    for adjustment in config.monthly_adjustments:
        if not matched and adjustment.matches(today.year, month_index):
            matched = True
            if force or not adjustment.has_working_days:
                adjustment = replace(
                    adjustment, working_days=frozenset(business_days_in_month(today.year, today.month))
                )
                changed = True
        updated.append(adjustment)

    if changed:
        logger.info("Recalculated working days for %d-%02d", today.year, today.month)
    return config.with_adjustments(updated)
