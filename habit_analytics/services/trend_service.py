"""
Trend Service

Bucketed completion trends across all of a user's habits, with a per-category
breakdown for each bucket.
"""
import logging
from collections import Counter
from typing import Dict, Iterable, List

from habit_analytics.helpers import metric_helpers
from habit_analytics.helpers.record_helpers import clean_records, records_in_window
from habit_analytics.models import AnalyticsWindow, CompletionRecord, Habit
from habit_analytics.utils import time_utils

logger = logging.getLogger(__name__)


class TrendService:
    """Aggregate completion trends over fixed-size buckets."""

    @staticmethod
    def aggregate_trends(
        habits: Iterable[Habit],
        records: Iterable[CompletionRecord],
        window: AnalyticsWindow,
        group_by: str = 'week'
    ) -> List[Dict]:
        """
        Partition the window into buckets and count entries per bucket.

        Every record inside the window lands in exactly one bucket, so the
        bucket totalEntries add up to the number of records in the window.
        The category breakdown only covers the supplied habits: `total` is
        the number of those habits in the category and `completed` the
        completed entries they logged in the bucket.

        Args:
            habits: The user's active habits
            records: Records of the user's habits
            window: Range to cover
            group_by: 'day', 'week' or 'month' (unknown -> 'month')

        Returns:
            [
                {
                    'period': str,
                    'startDate': str,
                    'endDate': str (exclusive),
                    'totalEntries': int,
                    'completedEntries': int,
                    'completionRate': float (0-100),
                    'categoryBreakdown': {category: {'total': int, 'completed': int}}
                },
                ...
            ]
        """
        group_name, size = time_utils.resolve_group_by(group_by)
        habit_map = {h.habit_id: h for h in habits}
        habits_per_category = Counter(h.category_key for h in habit_map.values())

        in_window = records_in_window(clean_records(records), window)
        buckets = time_utils.partition(window.start_date, window.end_date, size)

        trends = []
        for bucket in buckets:
            bucket_records = [r for r in in_window if bucket.contains(r.date)]
            completed = [r for r in bucket_records if r.completed]

            breakdown = {
                category: {'total': count, 'completed': 0}
                for category, count in habits_per_category.items()
            }
            for record in completed:
                habit = habit_map.get(record.habit_id)
                if habit is not None:
                    breakdown[habit.category_key]['completed'] += 1

            trends.append({
                'period': group_name,
                'startDate': bucket.start.isoformat(),
                'endDate': bucket.end.isoformat(),
                'totalEntries': len(bucket_records),
                'completedEntries': len(completed),
                'completionRate': metric_helpers.safe_percentage(len(completed), len(bucket_records)),
                'categoryBreakdown': breakdown
            })

        logger.debug(
            "Aggregated %s records into %s %s buckets",
            len(in_window), len(trends), group_name
        )
        return trends

    @staticmethod
    def summarize_habits(habits: Iterable[Habit]) -> List[Dict]:
        """Habit legend for the trends response."""
        return [
            {
                'id': h.habit_id,
                'name': h.name,
                'category': h.category_key,
                'color': h.color
            }
            for h in habits
        ]
