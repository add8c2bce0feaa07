"""
Habit analytics and streak engine.

Pure computation over habits and completion records: streaks, completion
statistics, calendar heatmaps, bucketed trends, and rule-based insights.
"""
from habit_analytics.exceptions import (
    HabitAnalyticsException,
    HabitNotFoundError,
    InvalidDateRangeError,
    MalformedRecordError,
    ValidationError,
)
from habit_analytics.models import AnalyticsWindow, CompletionRecord, Habit
from habit_analytics.schemas import load_habits, load_records
from habit_analytics.services import AnalyticsService

__version__ = '1.0.0'

__all__ = [
    'AnalyticsService',
    'AnalyticsWindow',
    'CompletionRecord',
    'Habit',
    'load_habits',
    'load_records',
    'HabitAnalyticsException',
    'HabitNotFoundError',
    'InvalidDateRangeError',
    'MalformedRecordError',
    'ValidationError',
]
