"""Shared fixtures for the HabitLens test-suite."""

import os
import sys
from datetime import datetime, timedelta

import pytest

# Add project root to path for imports (file lives in tests/)
_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _ROOT)

# Sunday evening; every analyzer call in the suite pins its clock here.
NOW = datetime(2024, 1, 7, 20, 0)


def make_entry(at: datetime, habit_id: str = "h1", entry_id: str = None, **extra) -> dict:
    """Entry record in the storage layer's camelCase shape."""
    record = {
        "id": entry_id or f"{habit_id}-{at.isoformat()}",
        "habitId": habit_id,
        "date": at.date().isoformat(),
        "createdAt": at.isoformat(),
    }
    record.update(extra)
    return record


def daily_entries(first: datetime, count: int, habit_id: str = "h1", step_days: int = 1) -> list:
    return [make_entry(first + timedelta(days=i * step_days), habit_id) for i in range(count)]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def daily_week():
    """One entry a day at 08:00, Monday 2024-01-01 through Sunday 2024-01-07."""
    return daily_entries(datetime(2024, 1, 1, 8, 0), 7)


@pytest.fixture
def stale_pair():
    """Two entries on consecutive days, ten days before NOW."""
    return daily_entries(datetime(2023, 12, 27, 8, 0), 2, habit_id="h2")


@pytest.fixture
def every_other_day():
    """Ten entries 48 hours apart, ending 2024-01-07 08:00."""
    return daily_entries(datetime(2023, 12, 20, 8, 0), 10, step_days=2)


@pytest.fixture
def habits():
    return [
        {"id": "h1", "name": "Read", "color": "#8b5cf6"},
        {"id": "h2", "name": "Run", "color": "#f59e0b"},
    ]
