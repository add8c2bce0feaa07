"""
Time utility functions for the analytics engine.

This module normalizes timestamps to calendar days and partitions date
ranges into the fixed-size buckets used by trend aggregation. It also owns
the default-substitution rules for window parameters (days, period, groupBy),
so every service sees an already-resolved AnalyticsWindow.

All dates are local calendar days; there is no time-zone-aware scheduling.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Iterator, List, NamedTuple, Optional, Tuple, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from habit_analytics.models import AnalyticsWindow
from habit_analytics.utils.constants import (
    DEFAULT_WINDOW_DAYS, PERIOD_DAYS, DEFAULT_PERIOD,
    GROUP_SIZES, FALLBACK_GROUP_BY,
)

logger = logging.getLogger(__name__)

Timestamp = Union[date, datetime, str]


class Bucket(NamedTuple):
    """Half-open [start, end) range of calendar days."""
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end


def normalize_to_day(timestamp: Timestamp) -> date:
    """
    Drop the time of day from a timestamp.

    Args:
        timestamp: date, datetime or ISO-8601 string. Aware datetimes are
            converted to the server's local zone before the date is taken.

    Returns:
        date: The calendar day the timestamp falls on.

    Raises:
        ValueError: If a string cannot be parsed
        TypeError: For any other input type

    Examples:
        >>> normalize_to_day(datetime(2025, 12, 3, 18, 45))
        date(2025, 12, 3)
        >>> normalize_to_day('2025-12-03T07:15:00')
        date(2025, 12, 3)
    """
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone()
        return timestamp.date()

    if isinstance(timestamp, date):
        return timestamp

    if isinstance(timestamp, str):
        return normalize_to_day(date_parser.isoparse(timestamp.strip()))

    raise TypeError(f"Cannot normalize {type(timestamp).__name__} to a calendar day")


def partition(start_date: date, end_date: date, bucket_size: Union[str, int]) -> List[Bucket]:
    """
    Split [start_date, end_date) into consecutive fixed-size buckets.

    Buckets are generated forward from start_date; the final bucket is
    clipped to end_date and may be shorter than bucket_size.

    Args:
        start_date: First day (inclusive)
        end_date: Range end (exclusive)
        bucket_size: 'day', 'week', 'month' (1/7/30 days) or a day count.
            Unknown names fall back to 30-day buckets.

    Returns:
        List[Bucket]: Ordered, non-overlapping buckets. Empty when
        start_date >= end_date.

    Example:
        >>> partition(date(2025, 1, 1), date(2025, 1, 15), 'week')
        [Bucket(2025-01-01, 2025-01-08), Bucket(2025-01-08, 2025-01-15)]
    """
    if isinstance(bucket_size, int):
        size = bucket_size if bucket_size > 0 else GROUP_SIZES[FALLBACK_GROUP_BY]
    else:
        _, size = resolve_group_by(bucket_size)

    buckets = []
    current = start_date
    step = timedelta(days=size)
    while current < end_date:
        bucket_end = min(current + step, end_date)
        buckets.append(Bucket(current, bucket_end))
        current = bucket_end
    return buckets


def iter_days(start_date: date, end_date: date) -> Iterator[date]:
    """Yield every calendar day in [start_date, end_date)."""
    current = start_date
    while current < end_date:
        yield current
        current += timedelta(days=1)


# =============================================================================
# PARAMETER RESOLUTION (default substitution, never raises)
# =============================================================================

def resolve_days(days) -> int:
    """
    Resolve a `days` parameter to a positive day count.

    Accepts ints or numeric strings (query parameters). Anything
    non-positive or unparseable falls back to DEFAULT_WINDOW_DAYS (30).
    """
    if isinstance(days, bool):
        return DEFAULT_WINDOW_DAYS
    try:
        value = int(days)
    except (TypeError, ValueError):
        logger.debug("Unparseable days=%r, using %s", days, DEFAULT_WINDOW_DAYS)
        return DEFAULT_WINDOW_DAYS
    if value <= 0:
        logger.debug("Non-positive days=%r, using %s", days, DEFAULT_WINDOW_DAYS)
        return DEFAULT_WINDOW_DAYS
    return value


def resolve_period(period: Optional[str]) -> Tuple[str, int]:
    """
    Map a trend period name to (name, day count).

    week=7, month=30, quarter=90, year=365. Unknown values resolve to month.
    """
    key = (period or '').strip().lower()
    if key in PERIOD_DAYS:
        return key, PERIOD_DAYS[key]
    return DEFAULT_PERIOD, PERIOD_DAYS[DEFAULT_PERIOD]


def resolve_group_by(group_by: Optional[str]) -> Tuple[str, int]:
    """
    Map a groupBy name to (name, bucket size in days).

    day=1, week=7, month=30. Unknown values resolve to month (30 days).
    """
    key = (group_by or '').strip().lower()
    if key in GROUP_SIZES:
        return key, GROUP_SIZES[key]
    return FALLBACK_GROUP_BY, GROUP_SIZES[FALLBACK_GROUP_BY]


def resolve_window(
    days=None,
    start_date: Optional[Timestamp] = None,
    end_date: Optional[Timestamp] = None,
    today: Optional[date] = None
) -> AnalyticsWindow:
    """
    Build the half-open window an analytics request covers.

    An explicit start/end pair (both inclusive calendar days) wins over
    `days`. Otherwise the window is the `days` calendar days ending with
    today. A reversed or unparseable explicit pair falls back to the
    default-sized window ending today.

    Args:
        days: Window length (resolved with resolve_days)
        start_date: Optional explicit first day
        end_date: Optional explicit last day (inclusive)
        today: Reference day, defaults to date.today()

    Returns:
        AnalyticsWindow
    """
    today = today or date.today()

    if start_date is not None and end_date is not None:
        try:
            start = normalize_to_day(start_date)
            last = normalize_to_day(end_date)
        except (TypeError, ValueError):
            logger.debug("Unparseable window %r..%r, using defaults", start_date, end_date)
        else:
            if start <= last:
                return AnalyticsWindow(start, last + timedelta(days=1))
            logger.debug("Reversed window %s..%s, using defaults", start, last)
        days = None

    span = resolve_days(days)
    end = today + timedelta(days=1)
    if span > (end - date.min).days:
        logger.debug("days=%r reaches before %s, using %s", days, date.min, DEFAULT_WINDOW_DAYS)
        span = DEFAULT_WINDOW_DAYS
    return AnalyticsWindow(end - timedelta(days=span), end)


def resolve_year(year, today: Optional[date] = None) -> int:
    """Resolve a heatmap year parameter; unparseable values mean the current year."""
    today = today or date.today()
    if isinstance(year, bool) or year is None:
        return today.year
    try:
        value = int(year)
    except (TypeError, ValueError):
        return today.year
    return value if date.min.year <= value <= date.max.year - 1 else today.year


def year_bounds(year: int) -> AnalyticsWindow:
    """
    Window covering a full calendar year.

    Example:
        >>> year_bounds(2024).days
        366
    """
    start = date(year, 1, 1)
    return AnalyticsWindow(start, start + relativedelta(years=1))


def month_bounds(year: int, month: int) -> AnalyticsWindow:
    """
    Window covering one calendar month.

    Example:
        >>> w = month_bounds(2024, 2)
        >>> (w.start_date, w.last_day)
        (date(2024, 2, 1), date(2024, 2, 29))
    """
    start = date(year, month, 1)
    return AnalyticsWindow(start, start + relativedelta(months=1))
