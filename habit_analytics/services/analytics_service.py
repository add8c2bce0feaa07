"""
Analytics Service

Generate analytics and insights for a user's habits.

Callers pass in the habits and completion records they already loaded; every
method returns plain JSON-serializable dicts and never touches storage.
"""
import logging
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from habit_analytics.behavioral import insights_engine
from habit_analytics.exceptions import HabitNotFoundError, ValidationError
from habit_analytics.helpers import metric_helpers
from habit_analytics.helpers.record_helpers import (
    clean_records, records_by_date, records_by_habit, records_in_window,
)
from habit_analytics.models import CompletionRecord, Habit
from habit_analytics.schemas import dump_habit, dump_record
from habit_analytics.services.heatmap_service import HeatmapService
from habit_analytics.services.statistics_service import StatisticsService
from habit_analytics.services.streak_service import StreakService
from habit_analytics.services.trend_service import TrendService
from habit_analytics.utils import time_utils
from habit_analytics.utils.constants import (
    DEFAULT_GROUP_BY, DEFAULT_PERIOD, DEFAULT_WINDOW_DAYS, OVERVIEW_TREND_DAYS,
)
from habit_analytics.utils.logging_utils import log_function_call

logger = logging.getLogger(__name__)


def _active(habits: Iterable[Habit]) -> List[Habit]:
    return [h for h in habits if h.is_active]


class AnalyticsService:
    """Generate analytics and insights."""

    @staticmethod
    def find_habit(habits: Iterable[Habit], habit_id: str) -> Habit:
        """
        Look up a habit by id.

        Raises:
            HabitNotFoundError: If no habit has that id
        """
        for habit in habits:
            if habit.habit_id == habit_id:
                return habit
        raise HabitNotFoundError(habit_id)

    @staticmethod
    @log_function_call()
    def get_overview(
        habits: Iterable[Habit],
        records: Iterable[CompletionRecord],
        days=DEFAULT_WINDOW_DAYS,
        today: date = None
    ) -> Dict:
        """
        Cross-habit dashboard summary.

        The completion rate counts every (active habit x window day) slot,
        so days without any record lower the rate.

        Args:
            habits: The user's habits; inactive ones are ignored
            records: The user's completion records
            days: Window length (non-positive or unparseable -> 30)
            today: Reference day (default: today)

        Returns:
            {'overview': {...}}, plus 'message' when there are no active habits
        """
        today = today or date.today()
        habits = _active(habits)

        if not habits:
            return {
                'message': 'No active habits found',
                'overview': {
                    'totalHabits': 0,
                    'completionRate': 0,
                    'totalStreaks': 0,
                    'averageStreak': 0,
                    'categoriesBreakdown': {},
                    'weeklyTrends': [],
                    'bestDay': None,
                    'longestStreak': 0
                }
            }

        window = time_utils.resolve_window(days, today=today)
        habit_ids = {h.habit_id for h in habits}
        records = [r for r in clean_records(records) if r.habit_id in habit_ids]
        in_window = records_in_window(records, window)
        logger.debug(
            "Overview: %s habits, %s records in %s..%s",
            len(habits), len(in_window), window.start_date, window.last_day
        )

        completion_rate = StatisticsService.overview_completion_rate(
            in_window, len(habits), window.days, window
        )

        grouped = records_by_habit(records)
        streaks = [
            StreakService.current_streak(grouped.get(h.habit_id, []), today)
            for h in habits
        ]
        total_streaks = sum(streaks)

        weekly_trends = AnalyticsService._trailing_trends(in_window, len(habits), today)

        best_day = weekly_trends[0]
        for day in weekly_trends[1:]:
            if day['completionRate'] > best_day['completionRate']:
                best_day = day

        return {
            'overview': {
                'totalHabits': len(habits),
                'completionRate': metric_helpers.round_half_up(completion_rate),
                'totalStreaks': total_streaks,
                'averageStreak': metric_helpers.round_half_up(total_streaks / len(habits), 1),
                'categoriesBreakdown': dict(Counter(h.category_key for h in habits)),
                'weeklyTrends': weekly_trends,
                'bestDay': best_day,
                'longestStreak': max(streaks, default=0),
                'period': window.to_dict()
            }
        }

    @staticmethod
    def _trailing_trends(records: List[CompletionRecord], habit_count: int, today: date) -> List[Dict]:
        """Completed habits per day for the last few days, oldest first."""
        completed_by_day = Counter(r.date for r in records if r.completed)
        trends = []
        for offset in range(OVERVIEW_TREND_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            completed = completed_by_day.get(day, 0)
            trends.append({
                'date': day.isoformat(),
                'completedHabits': completed,
                'completionRate': metric_helpers.safe_percentage(completed, habit_count)
            })
        return trends

    @staticmethod
    @log_function_call()
    def get_habit_analytics(
        habit: Habit,
        records: Iterable[CompletionRecord],
        days=DEFAULT_WINDOW_DAYS,
        today: date = None
    ) -> Dict:
        """
        Detailed analytics for one habit.

        Records of other habits are ignored. The current streak looks at
        every record; everything else only at the window.

        Returns:
            {'habit': {...}, 'analytics': {period, summary, dailyData,
             weeklyData, predictions, insights}}
        """
        today = today or date.today()
        window = time_utils.resolve_window(days, today=today)
        records = [r for r in clean_records(records) if r.habit_id == habit.habit_id]
        in_window = records_in_window(records, window)

        summary = StatisticsService.summarize_habit(records, window, today)
        completion_rate = StatisticsService.habit_completion_rate(in_window, window)

        return {
            'habit': dump_habit(habit),
            'analytics': {
                'period': window.to_dict(),
                'summary': summary,
                'dailyData': StatisticsService.daily_data(in_window, window),
                'weeklyData': StatisticsService.weekly_data(in_window, window),
                'predictions': insights_engine.generate_predictions(
                    in_window, habit, summary['currentStreak'], today
                ),
                'insights': insights_engine.get_insights(
                    completion_rate, summary['currentStreak'], in_window
                )
            }
        }

    @staticmethod
    @log_function_call()
    def get_heatmap_data(
        habits: Iterable[Habit],
        records: Iterable[CompletionRecord],
        year=None,
        today: date = None
    ) -> Dict:
        """
        Full-year heatmap across active habits.

        Args:
            year: Calendar year (unparseable -> current year)

        Returns:
            {'heatmapData': {iso_date: cell}, 'habits': [...], 'year': int}
        """
        year = time_utils.resolve_year(year, today)
        habits = _active(habits)

        return {
            'heatmapData': HeatmapService.build_heatmap(year, habits, records),
            'habits': HeatmapService.summarize_habits(habits),
            'year': year
        }

    @staticmethod
    @log_function_call()
    def get_trends(
        habits: Iterable[Habit],
        records: Iterable[CompletionRecord],
        period: str = DEFAULT_PERIOD,
        group_by: str = DEFAULT_GROUP_BY,
        today: date = None
    ) -> Dict:
        """
        Bucketed trends over a named period ending today.

        Args:
            period: 'week', 'month', 'quarter' or 'year' (unknown -> 'month')
            group_by: 'day', 'week' or 'month' (unknown -> 'month')

        Returns:
            {'trends': [...], 'period': str, 'groupBy': str, 'habits': [...]}
        """
        today = today or date.today()
        period_name, period_days = time_utils.resolve_period(period)
        group_name, _ = time_utils.resolve_group_by(group_by)
        window = time_utils.resolve_window(period_days, today=today)
        habits = _active(habits)

        return {
            'trends': TrendService.aggregate_trends(habits, records, window, group_name),
            'period': period_name,
            'groupBy': group_name,
            'habits': TrendService.summarize_habits(habits)
        }

    @staticmethod
    @log_function_call()
    def get_habits_with_stats(
        habits: Iterable[Habit],
        records: Iterable[CompletionRecord],
        today: date = None
    ) -> List[Dict]:
        """
        Active habits with their current streak and 30-day completion rate.

        Ordered by `order`, then creation time.
        """
        today = today or date.today()
        window = time_utils.resolve_window(DEFAULT_WINDOW_DAYS, today=today)
        grouped = records_by_habit(clean_records(records))

        def sort_key(habit):
            created = habit.created_at.timestamp() if habit.created_at else 0.0
            return (habit.order, habit.created_at is None, created)

        results = []
        for habit in sorted(_active(habits), key=sort_key):
            habit_records = grouped.get(habit.habit_id, [])
            rate = StatisticsService.habit_completion_rate(habit_records, window)
            habit_data = dump_habit(habit)
            habit_data['currentStreak'] = StreakService.current_streak(habit_records, today)
            habit_data['completionRate'] = metric_helpers.round_half_up(rate)
            results.append(habit_data)
        return results

    @staticmethod
    def get_streak(habit: Habit, records: Iterable[CompletionRecord], today: date = None) -> Dict:
        """Current streak of one habit."""
        records = [r for r in clean_records(records) if r.habit_id == habit.habit_id]
        return {
            'habitId': habit.habit_id,
            'currentStreak': StreakService.current_streak(records, today)
        }

    @staticmethod
    @log_function_call()
    def get_calendar(records: Iterable[CompletionRecord], year, month) -> Dict:
        """
        Records of one calendar month grouped by ISO date.

        Raises:
            ValidationError: If year or month is missing or invalid
        """
        if year is None or month is None:
            raise ValidationError('year', 'Year and month are required')
        try:
            year, month = int(year), int(month)
            window = time_utils.month_bounds(year, month)
        except (TypeError, ValueError) as e:
            raise ValidationError('month', f'Invalid calendar month: {year}-{month}') from e

        grouped = records_by_date(records_in_window(clean_records(records), window))
        return {
            'entriesByDate': {
                day.isoformat(): [dump_record(r) for r in day_records]
                for day, day_records in sorted(grouped.items())
            },
            'startDate': window.start_date.isoformat(),
            'endDate': window.last_day.isoformat()
        }

    @staticmethod
    def get_streak_details(
        habit: Habit,
        records: Iterable[CompletionRecord],
        days: Optional[int] = None,
        today: date = None
    ) -> Dict:
        """Current and longest streak with status; longest over the window when days is given."""
        today = today or date.today()
        records = [r for r in clean_records(records) if r.habit_id == habit.habit_id]
        window = time_utils.resolve_window(days, today=today) if days is not None else None
        result = StreakService.calculate_streak(records, today, window)
        return {
            'habitId': habit.habit_id,
            'currentStreak': result.current_streak,
            'longestStreak': result.longest_streak,
            'streakActive': result.streak_active,
            'lastCompletedDate': result.last_completed_date.isoformat() if result.last_completed_date else None
        }
