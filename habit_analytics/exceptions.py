"""
Custom Exception Classes

Provides specific exception types for the analytics engine. Most input
problems are absorbed by documented fallbacks, so these are raised only at
the strict edges (schema loading, direct window construction, record checks).
"""


class HabitAnalyticsException(Exception):
    """Base exception for all analytics engine errors"""
    pass


class HabitNotFoundError(HabitAnalyticsException):
    """Raised when a habit lookup by id fails"""
    def __init__(self, habit_id: str):
        self.habit_id = habit_id
        super().__init__(f"Habit '{habit_id}' not found")


class InvalidDateRangeError(HabitAnalyticsException):
    """Raised when date range is invalid (e.g., start > end)"""
    def __init__(self, start_date, end_date):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(f"Invalid date range: {start_date} to {end_date}")


class MalformedRecordError(HabitAnalyticsException):
    """Raised when a completion record violates the record invariants"""
    def __init__(self, field: str, value, habit_id: str = None):
        self.field = field
        self.value = value
        self.habit_id = habit_id
        super().__init__(
            f"Malformed completion record for habit '{habit_id}': "
            f"{field}={value!r}"
        )


class ValidationError(HabitAnalyticsException):
    """Raised when strict payload validation fails"""
    def __init__(self, field: str, message: str, details: dict = None):
        self.field = field
        self.message = message
        self.details = details or {}
        super().__init__(f"Validation error for '{field}': {message}")
