"""
Missing data detection.

Lists the working days after the most recent record, up to and including
yesterday, that have no record. Today is never expected since the day is
not over.
"""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from revenue_pacing.models.entities import RevenueRecord, TargetConfiguration
from revenue_pacing.models.report_data import MissingDataReport
from revenue_pacing.utils.calendar import is_working_day
from revenue_pacing.utils.date_range_utils import DateRangeUtils

logger = logging.getLogger(__name__)


def calculate_missing_data_days(
    records: Iterable[RevenueRecord],
    config: Optional[TargetConfiguration] = None,
    today: Optional[date] = None,
) -> MissingDataReport:
    """
    Find working days without data between the last record and yesterday.

    A day is expected when it is a working day: listed in its month's
    adjustment when that list is non-empty, else Monday through Friday.

    Returns:
        MissingDataReport; empty when there are no records or the last
        record is from yesterday or later
    """
    records = list(records)
    if not records:
        return MissingDataReport()

    today = today or date.today()
    yesterday = DateRangeUtils.yesterday(today)
    existing = {r.date for r in records}
    last_date = max(existing)

    if last_date >= yesterday:
        return MissingDataReport(last_data_date=last_date)

    missing = [
        day for day in DateRangeUtils.iter_days(last_date + timedelta(days=1), yesterday)
        if is_working_day(day, config) and day not in existing
    ]

    if missing:
        logger.info(
            "%d working day(s) missing since %s (first: %s)",
            len(missing), last_date, missing[0]
        )
    return MissingDataReport(missing_dates=missing, last_data_date=last_date)
