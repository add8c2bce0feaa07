"""
Tests for the AnalyticsService facade.
"""
import json
from datetime import date, datetime, timedelta

import pytest
from freezegun import freeze_time

from habit_analytics.exceptions import HabitNotFoundError, ValidationError
from habit_analytics.services import AnalyticsService
from habit_analytics.tests.factories import create_streak_data, make_habit, make_record


@pytest.fixture
def overview_records(today):
    return [
        make_record('h-run', today),
        make_record('h-run', today - timedelta(days=1)),
        make_record('h-run', today - timedelta(days=2)),
        make_record('h-read', today),
        make_record('h-walk', today - timedelta(days=3)),
        make_record('h-old', today),
    ]


class TestGetOverview:

    def test_no_active_habits(self, today):
        inactive = make_habit(is_active=False)
        result = AnalyticsService.get_overview([inactive], [], today=today)
        assert result == {
            'message': 'No active habits found',
            'overview': {
                'totalHabits': 0,
                'completionRate': 0,
                'totalStreaks': 0,
                'averageStreak': 0,
                'categoriesBreakdown': {},
                'weeklyTrends': [],
                'bestDay': None,
                'longestStreak': 0,
            }
        }

    def test_overview(self, habits, overview_records, today):
        overview = AnalyticsService.get_overview(habits, overview_records, days=7, today=today)['overview']

        assert overview['totalHabits'] == 3
        assert overview['completionRate'] == 24
        assert overview['totalStreaks'] == 4
        assert overview['averageStreak'] == 1.3
        assert overview['longestStreak'] == 3
        assert overview['categoriesBreakdown'] == {'fitness': 2, 'learning': 1}
        assert overview['period'] == {
            'days': 7,
            'startDate': (today - timedelta(days=6)).isoformat(),
            'endDate': today.isoformat(),
        }

    def test_weekly_trends_and_best_day(self, habits, overview_records, today):
        overview = AnalyticsService.get_overview(habits, overview_records, days=7, today=today)['overview']
        trends = overview['weeklyTrends']

        assert [t['date'] for t in trends] == [
            (today - timedelta(days=offset)).isoformat() for offset in range(6, -1, -1)
        ]
        assert [t['completedHabits'] for t in trends] == [0, 0, 0, 1, 1, 1, 2]
        assert trends[-1]['completionRate'] == pytest.approx(200 / 3)
        assert overview['bestDay'] == trends[-1]

    def test_best_day_keeps_first_of_ties(self, habit, today):
        records = [make_record(habit, today - timedelta(days=5)), make_record(habit, today - timedelta(days=2))]
        overview = AnalyticsService.get_overview([habit], records, days=7, today=today)['overview']
        assert overview['bestDay']['date'] == (today - timedelta(days=5)).isoformat()

    def test_half_of_all_slots(self, today):
        habits = [make_habit(habit_id=f'h{i}') for i in range(10)]
        records = [
            make_record(h, today - timedelta(days=offset), completed=offset < 15)
            for h in habits for offset in range(30)
        ]
        overview = AnalyticsService.get_overview(habits, records, days=30, today=today)['overview']
        assert overview['completionRate'] == 50

    def test_invalid_days_falls_back_to_thirty(self, habit, today):
        overview = AnalyticsService.get_overview([habit], [], days=-3, today=today)['overview']
        assert overview['period']['days'] == 30
        assert overview['completionRate'] == 0

    def test_days_beyond_calendar_start_falls_back_to_thirty(self, habit, today):
        overview = AnalyticsService.get_overview(
            [habit], [make_record(habit, today)], days=1000000, today=today
        )['overview']
        assert overview['period']['days'] == 30
        assert overview['period']['endDate'] == today.isoformat()
        assert overview['longestStreak'] == 1

    def test_result_is_json_serializable(self, habits, overview_records, today):
        json.dumps(AnalyticsService.get_overview(habits, overview_records, today=today))


class TestGetHabitAnalytics:

    def test_five_day_streak(self, habit, today):
        records = create_streak_data(habit, today, 5) + [make_record('other', today)]
        result = AnalyticsService.get_habit_analytics(habit, records, today=today)
        analytics = result['analytics']

        assert result['habit']['id'] == 'habit-1'
        assert result['habit']['streakTarget'] == 7
        assert analytics['period']['days'] == 30
        assert analytics['summary']['currentStreak'] == 5
        assert analytics['summary']['longestStreak'] == 5
        assert analytics['summary']['trackedDays'] == 5
        assert analytics['summary']['completionRate'] == 100
        assert analytics['predictions']['streakTarget']['daysRemaining'] == 2
        assert analytics['predictions']['nextMilestone'] == {'days': 7, 'remaining': 2}
        assert len(analytics['dailyData']) == 30
        assert len(analytics['weeklyData']) == 5
        assert [i['rule'] for i in analytics['insights']] == ['completion_rate', 'consistency']

    def test_no_records(self, habit, today):
        analytics = AnalyticsService.get_habit_analytics(habit, [], days=14, today=today)['analytics']

        assert analytics['summary']['currentStreak'] == 0
        assert analytics['summary']['completionRate'] == 0
        assert analytics['predictions'] == {
            'streakTarget': None,
            'nextMilestone': None,
            'probabilityOfSuccess': 0,
        }
        assert all(not row['completed'] for row in analytics['dailyData'])
        assert [i['type'] for i in analytics['insights']] == ['danger', 'info']

    def test_current_streak_looks_beyond_window(self, habit, today):
        records = create_streak_data(habit, today, 10)
        summary = AnalyticsService.get_habit_analytics(habit, records, days=7, today=today)['analytics']['summary']
        assert summary['currentStreak'] == 10
        assert summary['longestStreak'] == 7

    def test_days_beyond_calendar_start_falls_back_to_thirty(self, habit, today):
        records = create_streak_data(habit, today, 3)
        analytics = AnalyticsService.get_habit_analytics(habit, records, days='1000000', today=today)['analytics']
        assert analytics['period']['days'] == 30
        assert len(analytics['dailyData']) == 30
        assert analytics['summary']['currentStreak'] == 3

    def test_is_idempotent(self, habit, today):
        records = create_streak_data(habit, today, 4)
        first = AnalyticsService.get_habit_analytics(habit, records, today=today)
        assert AnalyticsService.get_habit_analytics(habit, records, today=today) == first


class TestGetHeatmapData:

    def test_heatmap_response(self, habits):
        records = [make_record('h-run', date(2024, 2, 29)), make_record('h-old', date(2024, 2, 29))]
        result = AnalyticsService.get_heatmap_data(habits, records, year=2024)

        assert result['year'] == 2024
        assert len(result['heatmapData']) == 366
        assert result['heatmapData']['2024-02-29']['completedHabits'] == 1
        assert result['heatmapData']['2024-02-29']['totalHabits'] == 3
        assert [h['id'] for h in result['habits']] == ['h-run', 'h-read', 'h-walk']

    @freeze_time('2023-08-01')
    def test_invalid_year_uses_current_year(self):
        result = AnalyticsService.get_heatmap_data([], [], year='next')
        assert result['year'] == 2023
        assert len(result['heatmapData']) == 365


class TestGetTrends:

    def test_trends_response(self, habits, today):
        records = [make_record('h-run', today - timedelta(days=i)) for i in range(10)]
        result = AnalyticsService.get_trends(habits, records, period='week', group_by='day', today=today)

        assert result['period'] == 'week'
        assert result['groupBy'] == 'day'
        assert len(result['trends']) == 7
        assert sum(t['totalEntries'] for t in result['trends']) == 7
        assert [h['id'] for h in result['habits']] == ['h-run', 'h-read', 'h-walk']

    def test_unknown_parameters_fall_back(self, habits, today):
        result = AnalyticsService.get_trends(habits, [], period='eon', group_by='hour', today=today)
        assert result['period'] == 'month'
        assert result['groupBy'] == 'month'
        assert len(result['trends']) == 1

    def test_default_weekly_buckets_over_a_month(self, habits, today):
        result = AnalyticsService.get_trends(habits, [], today=today)
        assert [t['period'] for t in result['trends']] == ['week'] * 5
        assert result['trends'][-1]['endDate'] == (today + timedelta(days=1)).isoformat()


class TestSupplementaryOperations:

    def test_habits_with_stats(self, habits, today):
        records = create_streak_data('h-run', today, 3) + [make_record('h-walk', today, completed=False)]
        result = AnalyticsService.get_habits_with_stats(habits, records, today=today)

        assert [h['id'] for h in result] == ['h-read', 'h-run', 'h-walk']
        run = result[1]
        assert run['currentStreak'] == 3
        assert run['completionRate'] == 100
        assert result[2]['completionRate'] == 0

    def test_habits_with_stats_ties_ordered_by_creation(self, today):
        newer = make_habit(habit_id='newer', created_at=datetime(2025, 2, 1))
        older = make_habit(habit_id='older', created_at=datetime(2025, 1, 1))
        undated = make_habit(habit_id='undated')
        result = AnalyticsService.get_habits_with_stats([undated, newer, older], [], today=today)
        assert [h['id'] for h in result] == ['older', 'newer', 'undated']

    def test_get_streak(self, habit, today):
        records = create_streak_data(habit, today, 2) + create_streak_data('other', today, 9)
        assert AnalyticsService.get_streak(habit, records, today) == {
            'habitId': 'habit-1',
            'currentStreak': 2,
        }

    def test_get_streak_details(self, habit, today):
        records = create_streak_data(habit, today - timedelta(days=10), 6) + create_streak_data(habit, today, 2)
        details = AnalyticsService.get_streak_details(habit, records, today=today)
        assert details == {
            'habitId': 'habit-1',
            'currentStreak': 2,
            'longestStreak': 6,
            'streakActive': True,
            'lastCompletedDate': today.isoformat(),
        }
        windowed = AnalyticsService.get_streak_details(habit, records, days=7, today=today)
        assert windowed['longestStreak'] == 2

    def test_get_calendar(self, habit):
        records = [
            make_record(habit, date(2025, 6, 1), mood=4),
            make_record('other', date(2025, 6, 1), completed=False),
            make_record(habit, date(2025, 6, 30)),
            make_record(habit, date(2025, 7, 1)),
        ]
        calendar = AnalyticsService.get_calendar(records, 2025, '6')

        assert calendar['startDate'] == '2025-06-01'
        assert calendar['endDate'] == '2025-06-30'
        assert list(calendar['entriesByDate']) == ['2025-06-01', '2025-06-30']
        assert len(calendar['entriesByDate']['2025-06-01']) == 2
        assert calendar['entriesByDate']['2025-06-01'][0] == {
            'habitId': 'habit-1',
            'date': '2025-06-01',
            'completed': True,
            'notes': None,
            'value': None,
            'mood': 4,
            'difficulty': None,
        }

    @pytest.mark.parametrize('year, month', [(None, 6), (2025, None), (2025, 13), ('abc', 1)])
    def test_get_calendar_rejects_bad_month(self, year, month):
        with pytest.raises(ValidationError):
            AnalyticsService.get_calendar([], year, month)

    def test_find_habit(self, habits):
        assert AnalyticsService.find_habit(habits, 'h-walk').name == 'Walk'
        with pytest.raises(HabitNotFoundError) as exc_info:
            AnalyticsService.find_habit(habits, 'missing')
        assert exc_info.value.habit_id == 'missing'
