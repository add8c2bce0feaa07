"""
Heatmap Service

Full-year, gap-free per-day completion cells across all of a user's active
habits, for calendar heatmap visualization.
"""
import logging
from typing import Dict, Iterable, List

from habit_analytics.helpers import metric_helpers
from habit_analytics.helpers.record_helpers import clean_records, records_in_window
from habit_analytics.models import CompletionRecord, Habit
from habit_analytics.utils import time_utils

logger = logging.getLogger(__name__)


class HeatmapService:
    """Build calendar heatmap data."""

    @staticmethod
    def _empty_cell(day_key: str, total_habits: int) -> Dict:
        return {
            'date': day_key,
            'totalHabits': total_habits,
            'completedHabits': 0,
            'completionRate': 0.0,
            'level': 0,
            'habits': []
        }

    @staticmethod
    def build_heatmap(
        year: int,
        habits: Iterable[Habit],
        records: Iterable[CompletionRecord]
    ) -> Dict[str, Dict]:
        """
        Build one cell per calendar day of `year`.

        Every day is initialized to the zero state before records are
        folded in, so the result always has 365 (366 in leap years)
        contiguous entries no matter how sparse the data is.

        Args:
            year: Target calendar year
            habits: The user's active habits
            records: Records overlapping the year; records of habits that
                are not in `habits` are ignored

        Returns:
            {
                'YYYY-MM-DD': {
                    'date': str,
                    'totalHabits': int,
                    'completedHabits': int,
                    'completionRate': float (0-100),
                    'level': int (0-4),
                    'habits': [{habitId, name, color, category, completed}, ...]
                },
                ...
            }
        """
        window = time_utils.year_bounds(year)
        habit_map = {h.habit_id: h for h in habits}
        total_habits = len(habit_map)

        heatmap = {
            day.isoformat(): HeatmapService._empty_cell(day.isoformat(), total_habits)
            for day in time_utils.iter_days(window.start_date, window.end_date)
        }

        skipped = 0
        for record in sorted(records_in_window(clean_records(records), window), key=lambda r: r.date):
            habit = habit_map.get(record.habit_id)
            if habit is None:
                skipped += 1
                continue

            cell = heatmap[record.date.isoformat()]
            cell['habits'].append({
                'habitId': habit.habit_id,
                'name': habit.name,
                'color': habit.color,
                'category': habit.category_key,
                'completed': record.completed
            })
            if record.completed:
                cell['completedHabits'] += 1

        for cell in heatmap.values():
            cell['completionRate'] = metric_helpers.safe_percentage(cell['completedHabits'], cell['totalHabits'])
            cell['level'] = HeatmapService.get_activity_level(cell['completedHabits'], cell['totalHabits'])

        if skipped:
            logger.debug("Heatmap %s: ignored %s records of inactive or unknown habits", year, skipped)

        return heatmap

    @staticmethod
    def get_activity_level(done: int, total: int) -> int:
        """Get 0-4 activity level for heatmap."""
        if total == 0:
            return 0
        rate = done / total
        if rate >= 0.9:
            return 4
        elif rate >= 0.7:
            return 3
        elif rate >= 0.5:
            return 2
        elif rate > 0:
            return 1
        return 0

    @staticmethod
    def summarize_habits(habits: Iterable[Habit]) -> List[Dict]:
        """Legend entries for the heatmap response."""
        return [
            {
                'id': h.habit_id,
                'name': h.name,
                'color': h.color,
                'category': h.category_key
            }
            for h in habits
        ]
