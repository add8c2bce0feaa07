"""
Completion Statistics Service

Completion rates, tracked/completed counts and mood/difficulty averages
over an analytics window.

Two completion-rate definitions coexist and must not be merged:
- per habit: of the days that have a record, how many were completed
- overview: of every (active habit x window day) slot, how many were completed
"""
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from habit_analytics.helpers import metric_helpers
from habit_analytics.helpers.record_helpers import clean_records, records_in_window
from habit_analytics.models import AnalyticsWindow, CompletionRecord
from habit_analytics.services.streak_service import StreakService
from habit_analytics.utils import time_utils


class StatisticsService:
    """Compute completion statistics for habits."""

    @staticmethod
    def completion_counts(records: Iterable[CompletionRecord]) -> Tuple[int, int]:
        """Return (tracked, completed) counts."""
        records = list(records)
        return len(records), sum(1 for r in records if r.completed)

    @staticmethod
    def habit_completion_rate(
        records: Iterable[CompletionRecord],
        window: Optional[AnalyticsWindow] = None
    ) -> float:
        """
        Per-habit completion rate (0-100).

        Formula: completed_records / records_present_in_window * 100.
        The window's calendar span is deliberately not the denominator.
        Returns 0.0 when no record is present.
        """
        in_window = records_in_window(clean_records(records), window)
        tracked, completed = StatisticsService.completion_counts(in_window)
        return metric_helpers.safe_percentage(completed, tracked)

    @staticmethod
    def overview_completion_rate(
        records: Iterable[CompletionRecord],
        habit_count: int,
        window_days: int,
        window: Optional[AnalyticsWindow] = None
    ) -> float:
        """
        Multi-habit completion rate (0-100).

        Formula: completed_records / (habit_count * window_days) * 100.
        Every calendar day counts as a possible slot per active habit,
        whether or not a record exists. Returns 0.0 when there are no slots.
        """
        in_window = records_in_window(clean_records(records), window)
        _, completed = StatisticsService.completion_counts(in_window)
        return metric_helpers.safe_percentage(completed, habit_count * window_days)

    @staticmethod
    def _average_field(records: Iterable[CompletionRecord], field: str) -> Optional[float]:
        values = [
            getattr(r, field) for r in clean_records(records)
            if r.completed and getattr(r, field) is not None
        ]
        return metric_helpers.mean_or_none(values)

    @staticmethod
    def average_mood(records: Iterable[CompletionRecord]) -> Optional[float]:
        """Mean mood of completed records that carry one; None when there are none."""
        return StatisticsService._average_field(records, 'mood')

    @staticmethod
    def average_difficulty(records: Iterable[CompletionRecord]) -> Optional[float]:
        """Mean difficulty of completed records that carry one; None when there are none."""
        return StatisticsService._average_field(records, 'difficulty')

    @staticmethod
    def summarize_habit(
        records: Iterable[CompletionRecord],
        window: AnalyticsWindow,
        today: date = None
    ) -> Dict:
        """
        Summary block for one habit.

        The current streak is computed over every supplied record; all other
        figures only over the records inside the window.

        Returns:
            {
                'totalDays': int,
                'trackedDays': int,
                'completedDays': int,
                'completionRate': int (0-100, rounded),
                'currentStreak': int,
                'longestStreak': int,
                'averageMood': float | None,
                'averageDifficulty': float | None
            }
        """
        today = today or date.today()
        records = clean_records(records)
        in_window = records_in_window(records, window)

        tracked, completed = StatisticsService.completion_counts(in_window)
        rate = metric_helpers.safe_percentage(completed, tracked)
        average_mood = StatisticsService.average_mood(in_window)
        average_difficulty = StatisticsService.average_difficulty(in_window)

        return {
            'totalDays': window.days,
            'trackedDays': tracked,
            'completedDays': completed,
            'completionRate': metric_helpers.round_half_up(rate),
            'currentStreak': StreakService.current_streak(records, today),
            'longestStreak': StreakService.longest_streak(in_window, window),
            'averageMood': metric_helpers.round_half_up(average_mood, 1) if average_mood is not None else None,
            'averageDifficulty': (
                metric_helpers.round_half_up(average_difficulty, 1)
                if average_difficulty is not None else None
            ),
        }

    @staticmethod
    def daily_data(records: Iterable[CompletionRecord], window: AnalyticsWindow) -> List[Dict]:
        """One row per calendar day of the window, oldest first."""
        by_day = {r.date: r for r in records_in_window(clean_records(records), window)}

        rows = []
        for day in time_utils.iter_days(window.start_date, window.end_date):
            record = by_day.get(day)
            rows.append({
                'date': day.isoformat(),
                'completed': record.completed if record else False,
                'value': record.value if record else None,
                'mood': record.mood if record else None,
                'difficulty': record.difficulty if record else None,
            })
        return rows

    @staticmethod
    def weekly_data(records: Iterable[CompletionRecord], window: AnalyticsWindow) -> List[Dict]:
        """
        7-day buckets over the window.

        completionRate is relative to the records present in the bucket,
        like the per-habit rate.
        """
        in_window = records_in_window(clean_records(records), window)

        weeks = []
        buckets = time_utils.partition(window.start_date, window.end_date, 'week')
        for index, bucket in enumerate(buckets, start=1):
            bucket_records = [r for r in in_window if bucket.contains(r.date)]
            tracked, completed = StatisticsService.completion_counts(bucket_records)
            weeks.append({
                'week': index,
                'startDate': bucket.start.isoformat(),
                'endDate': bucket.end.isoformat(),
                'completedDays': completed,
                'totalDays': tracked,
                'completionRate': metric_helpers.safe_percentage(completed, tracked),
            })
        return weeks
