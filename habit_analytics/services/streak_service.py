from datetime import date, timedelta
from typing import Iterable, NamedTuple, Optional

from habit_analytics.helpers import metric_helpers
from habit_analytics.helpers.record_helpers import clean_records, records_in_window
from habit_analytics.models import AnalyticsWindow, CompletionRecord


class StreakResult(NamedTuple):
    current_streak: int
    longest_streak: int
    streak_active: bool
    last_completed_date: Optional[date]


class StreakService:
    """Calculate habit streaks from completion records."""

    @staticmethod
    def current_streak(records: Iterable[CompletionRecord], today: date = None) -> int:
        """
        Count consecutive completed days ending today (or yesterday).

        Today not yet being marked does not break a streak: when today has
        no completed record the walk starts from yesterday. The walk stops
        at the first day that has no record or has completed=False.

        Args:
            records: All records for one habit, any order
            today: Reference day (default: today)

        Returns:
            Streak length in days (>= 0)
        """
        today = today or date.today()

        completed_days = {r.date for r in clean_records(records) if r.completed}
        if not completed_days:
            return 0

        cursor = today if today in completed_days else today - timedelta(days=1)

        streak = 0
        while cursor in completed_days:
            streak += 1
            cursor -= timedelta(days=1)
        return streak

    @staticmethod
    def longest_streak(
        records: Iterable[CompletionRecord],
        window: Optional[AnalyticsWindow] = None
    ) -> int:
        """
        Longest run of consecutive completed days within a window.

        Days are scanned in ascending order. A day without a record counts
        as not completed, so gaps break a run even when the supplier only
        sends completed rows. Without a window the scan covers the first to
        the last record.

        Args:
            records: Records for one habit, any order
            window: Optional half-open window to restrict the scan

        Returns:
            Longest streak in days (>= 0)
        """
        in_window = records_in_window(clean_records(records), window)
        if not in_window:
            return 0

        completion_data = {}
        for record in in_window:
            completion_data[record.date] = completion_data.get(record.date, False) or record.completed

        series = metric_helpers.build_completion_series(
            completion_data,
            window.start_date if window else None,
            window.end_date if window else None
        )
        return metric_helpers.detect_streaks_numpy(series)['longest_streak']

    @staticmethod
    def calculate_streak(
        records: Iterable[CompletionRecord],
        today: date = None,
        window: Optional[AnalyticsWindow] = None
    ) -> StreakResult:
        """
        Calculate current and longest streak for one habit.

        Args:
            records: All records for the habit
            today: Reference day (default: today)
            window: Restricts the longest-streak scan

        Returns:
            StreakResult with current, longest, and status
        """
        today = today or date.today()
        records = clean_records(records)

        current = StreakService.current_streak(records, today)
        completed_dates = [r.date for r in records if r.completed and r.date <= today]

        return StreakResult(
            current_streak=current,
            longest_streak=StreakService.longest_streak(records, window),
            streak_active=current > 0,
            last_completed_date=max(completed_dates) if completed_dates else None
        )
