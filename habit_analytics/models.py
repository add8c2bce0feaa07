"""
Data model for the analytics engine.

Plain immutable value objects. Persistence and validation of raw input live
with the caller; these types are what every service computes over.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from habit_analytics.exceptions import InvalidDateRangeError
from habit_analytics.utils.constants import (
    DEFAULT_CATEGORY, DEFAULT_COLOR, DEFAULT_STREAK_TARGET,
    FREQUENCY_DAILY, WEEKDAY_NAMES,
)


@dataclass(frozen=True)
class Habit:
    """
    A habit as seen by the engine (read-only).

    Only category, color, name and streak_target feed the computations;
    the remaining fields are carried through for serialization.
    """
    habit_id: str
    name: str
    category: str = DEFAULT_CATEGORY
    color: str = DEFAULT_COLOR
    streak_target: int = DEFAULT_STREAK_TARGET
    is_active: bool = True
    created_at: Optional[datetime] = None
    description: Optional[str] = None
    frequency: str = FREQUENCY_DAILY
    goal: Optional[str] = None
    target_days: Tuple[str, ...] = tuple(WEEKDAY_NAMES)
    reminder_time: Optional[str] = None
    order: int = 0

    def __post_init__(self):
        # Any iterable of weekday names is stored as a tuple so habits stay hashable.
        object.__setattr__(self, 'target_days', tuple(self.target_days))

    @property
    def category_key(self) -> str:
        return self.category or DEFAULT_CATEGORY


@dataclass(frozen=True)
class CompletionRecord:
    """One tracked day for one habit. At most one per (habit, day)."""
    habit_id: str
    date: date
    completed: bool = False
    notes: Optional[str] = None
    value: Optional[float] = None
    mood: Optional[int] = None
    difficulty: Optional[int] = None


@dataclass(frozen=True)
class AnalyticsWindow:
    """
    Half-open calendar-day range: start_date inclusive, end_date exclusive.

    Use time_utils.resolve_window() to build one from request parameters;
    constructing it directly with start_date > end_date is a programming
    error.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise InvalidDateRangeError(self.start_date, self.end_date)

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days

    @property
    def last_day(self) -> date:
        """Last calendar day inside the window (inclusive)."""
        return self.end_date - timedelta(days=1)

    def contains(self, day: date) -> bool:
        return self.start_date <= day < self.end_date

    def to_dict(self) -> dict:
        return {
            'days': self.days,
            'startDate': self.start_date.isoformat(),
            'endDate': self.last_day.isoformat(),
        }
