"""
Pytest configuration and fixtures for analytics engine tests.

This module provides reusable fixtures for testing.
"""
import os
from datetime import date, timedelta

import pytest

from habit_analytics.conf import ENV_PREFIX
from habit_analytics.tests.factories import make_habit


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Tests never see HABIT_ANALYTICS_* overrides from the shell."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)


@pytest.fixture
def today():
    """A fixed reference day."""
    return date(2025, 6, 15)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def habit():
    """Creates and returns a test habit."""
    return make_habit(habit_id='habit-1', name='Read', category='learning')


@pytest.fixture
def habits():
    """Three active habits across two categories plus one inactive habit."""
    return [
        make_habit(habit_id='h-run', name='Run', category='fitness', order=1),
        make_habit(habit_id='h-read', name='Read', category='learning', order=0),
        make_habit(habit_id='h-walk', name='Walk', category='fitness', order=2),
        make_habit(habit_id='h-old', name='Old', category='health', is_active=False),
    ]
