"""Shared pytest fixtures for the test suite."""

import os
from datetime import date, timedelta

import pytest

# Pin the environment and default targets BEFORE any app code imports.
os.environ["APP_ENV"] = "test"
os.environ["DEFAULT_AUSTIN_DAILY_TARGET"] = "53000"
os.environ["DEFAULT_CHARLOTTE_DAILY_TARGET"] = "62500"

from revenue_pacing.models.entities import (  # noqa: E402
    DailyTargetPair,
    MonthlyAdjustment,
    RevenueRecord,
    TargetConfiguration,
)
from revenue_pacing.services.container import reset_container  # noqa: E402

# Friday, March 15 2024. March 2024 has 21 weekdays, 10 of them before the 15th.
TODAY = date(2024, 3, 15)


def weekdays(start: date, end: date):
    day = start
    while day <= end:
        if day.weekday() < 5:
            yield day
        day += timedelta(days=1)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def targets():
    """Default daily targets with no monthly adjustments."""
    return TargetConfiguration(daily_targets=DailyTargetPair(austin=1000.0, charlotte=2000.0))


@pytest.fixture
def adjusted_targets():
    """March 2024 limited to five working days with a raised Austin target."""
    return TargetConfiguration(
        daily_targets=DailyTargetPair(austin=1000.0, charlotte=2000.0),
        monthly_adjustments=(
            MonthlyAdjustment(month=2, year=2024, working_days=frozenset({4, 5, 6, 7, 8}), austin=1500.0),
        ),
    )


@pytest.fixture
def make_records():
    """Build one record per weekday in [start, end] with fixed amounts."""
    def _make(start: date, end: date, austin: float = 1000.0, charlotte: float = 2000.0):
        return [RevenueRecord(date=d, austin=austin, charlotte=charlotte) for d in weekdays(start, end)]
    return _make


@pytest.fixture
def march_records(make_records):
    """On-target weekday records for March 1-14 2024 (10 days)."""
    return make_records(date(2024, 3, 1), date(2024, 3, 14))


@pytest.fixture(autouse=True)
def fresh_container():
    """Each test starts with an empty service container."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def app():
    from revenue_pacing.web.app import create_app

    app = create_app("testing")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
