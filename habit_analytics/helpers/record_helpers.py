"""
Record helper functions.

Filtering and grouping of completion records, plus the malformed-record
guard every service runs its input through.
"""
import logging
import numbers
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from habit_analytics.exceptions import MalformedRecordError
from habit_analytics.models import AnalyticsWindow, CompletionRecord
from habit_analytics.utils.constants import RATING_MIN, RATING_MAX
from habit_analytics.utils.time_utils import normalize_to_day

logger = logging.getLogger(__name__)


def _is_rating(value) -> bool:
    return (
        isinstance(value, numbers.Integral)
        and not isinstance(value, bool)
        and RATING_MIN <= value <= RATING_MAX
    )


def validate_record(record: CompletionRecord) -> CompletionRecord:
    """
    Check a record against the CompletionRecord invariants.

    Raises:
        MalformedRecordError: On the first violated field
    """
    habit_id = getattr(record, 'habit_id', None)

    day = getattr(record, 'date', None)
    if not isinstance(day, date) or isinstance(day, datetime):
        raise MalformedRecordError('date', day, habit_id)
    if not isinstance(record.completed, bool):
        raise MalformedRecordError('completed', record.completed, habit_id)
    if record.mood is not None and not _is_rating(record.mood):
        raise MalformedRecordError('mood', record.mood, habit_id)
    if record.difficulty is not None and not _is_rating(record.difficulty):
        raise MalformedRecordError('difficulty', record.difficulty, habit_id)
    if record.value is not None:
        if isinstance(record.value, bool) or not isinstance(record.value, numbers.Real) or record.value < 0:
            raise MalformedRecordError('value', record.value, habit_id)
    return record


def clean_records(records: Iterable[CompletionRecord]) -> List[CompletionRecord]:
    """
    Drop malformed records so one bad row cannot sink a whole computation.

    Upstream validation is expected to reject these; anything that slips
    through is excluded from all counts and averages. Timestamps carrying a
    time of day are normalized to their calendar day first.
    """
    cleaned = []
    for record in records:
        try:
            day = getattr(record, 'date', None)
            if day is not None and (isinstance(day, (datetime, str)) or not isinstance(day, date)):
                try:
                    record = replace(record, date=normalize_to_day(day))
                except (TypeError, ValueError):
                    raise MalformedRecordError('date', day, getattr(record, 'habit_id', None))
            cleaned.append(validate_record(record))
        except MalformedRecordError as e:
            logger.debug("Excluding record: %s", e)
    return cleaned


def records_in_window(
    records: Iterable[CompletionRecord],
    window: Optional[AnalyticsWindow]
) -> List[CompletionRecord]:
    """Records whose day falls inside the window (all records when window is None)."""
    if window is None:
        return list(records)
    return [r for r in records if window.contains(r.date)]


def sort_records(records: Iterable[CompletionRecord], descending: bool = False) -> List[CompletionRecord]:
    """Records ordered by day."""
    return sorted(records, key=lambda r: r.date, reverse=descending)


def records_by_habit(records: Iterable[CompletionRecord]) -> Dict[str, List[CompletionRecord]]:
    """Group records by habit id."""
    grouped = defaultdict(list)
    for record in records:
        grouped[record.habit_id].append(record)
    return dict(grouped)


def records_by_date(records: Iterable[CompletionRecord]) -> Dict[date, List[CompletionRecord]]:
    """Group records by calendar day."""
    grouped = defaultdict(list)
    for record in records:
        grouped[record.date].append(record)
    return dict(grouped)
