"""
Pytest configuration and fixtures for BPTracker tests.
"""

from datetime import datetime, timezone

import pytest

from bptracker.app import app as flask_app
from tests.factories import (
    BloodPressureReadingFactory,
    ExerciseLogFactory,
    health_data,
)


@pytest.fixture
def app():
    """Flask app configured for testing."""
    flask_app.config['TESTING'] = True
    yield flask_app


@pytest.fixture
def client(app):
    """Create a test client for the Flask app."""
    return app.test_client()


@pytest.fixture
def now():
    """Fixed reference time for window-based calculations."""
    return datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def rest_day_data():
    """
    Six days of readings; exercise on days 0, 2 and 4.

    Exercise days read 120/80, rest days 140/90.
    """
    bp = []
    for day in range(6):
        exercised = day % 2 == 0
        bp.extend(BloodPressureReadingFactory.build_daily(
            [120 if exercised else 140],
            start_day=day,
            diastolic=80 if exercised else 90,
        ))
    exercise = ExerciseLogFactory.build_on_days([0, 2, 4])
    return health_data(bp=bp, exercise=exercise)
