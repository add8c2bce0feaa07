"""
Tests for payload loading and serialization.
"""
from datetime import date, datetime

import pytest

from habit_analytics.exceptions import ValidationError
from habit_analytics.models import CompletionRecord, Habit
from habit_analytics.schemas import dump_habit, dump_record, load_habits, load_records


class TestHabitSchema:

    def test_load_habit_with_defaults(self):
        habits = load_habits([{'id': 'h1', 'name': 'Run', 'unknownField': True}])
        habit = habits[0]

        assert isinstance(habit, Habit)
        assert habit.habit_id == 'h1'
        assert habit.category == 'other'
        assert habit.color == '#3B82F6'
        assert habit.streak_target == 7
        assert habit.is_active is True
        assert habit.target_days == (
            'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
        )

    def test_load_camel_case_fields(self):
        habit = load_habits([{
            'id': 'h1',
            'name': 'Read',
            'category': 'learning',
            'streakTarget': 21,
            'isActive': False,
            'createdAt': '2025-01-01T08:00:00',
            'targetDays': ['monday', 'friday'],
        }])[0]

        assert habit.streak_target == 21
        assert habit.is_active is False
        assert habit.created_at == datetime(2025, 1, 1, 8, 0)
        assert habit.target_days == ('monday', 'friday')

    @pytest.mark.parametrize('payload', [
        {'name': 'Missing id'},
        {'id': 'h1', 'name': 'Run', 'category': 'hobbies'},
        {'id': 'h1', 'name': 'Run', 'streakTarget': 0},
        {'id': 'h1', 'name': ''},
    ])
    def test_invalid_habit_raises(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            load_habits([payload])
        assert exc_info.value.field == 'habits'
        assert exc_info.value.details

    def test_dump_habit(self):
        habit = Habit(habit_id='h1', name='Run', category='fitness')
        data = dump_habit(habit)
        assert data['id'] == 'h1'
        assert data['streakTarget'] == 7
        assert data['isActive'] is True
        assert data['createdAt'] is None
        assert data['targetDays'][:2] == ['monday', 'tuesday']
        assert 'habit_id' not in data

    def test_loaded_habits_are_hashable(self):
        payload = {'id': 'h1', 'name': 'Run', 'targetDays': ['monday', 'friday']}
        first, second = load_habits([payload, dict(payload)])

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_target_days_list_is_stored_as_tuple(self):
        habit = Habit(habit_id='h1', name='Run', target_days=['monday'])
        assert habit.target_days == ('monday',)
        assert habit in {Habit(habit_id='h1', name='Run', target_days=('monday',))}


class TestCompletionRecordSchema:

    def test_load_records(self):
        records = load_records([
            {'habitId': 'h1', 'date': '2025-06-01', 'completed': True, 'mood': 4},
            {'habitId': 'h1', 'date': '2025-06-02T21:15:00', 'completed': False, 'value': 1.5},
        ])

        assert all(isinstance(r, CompletionRecord) for r in records)
        assert records[0].mood == 4
        assert records[1].date == date(2025, 6, 2)
        assert records[1].value == 1.5

    def test_lenient_loading_drops_invalid_rows(self):
        records = load_records([
            {'habitId': 'h1', 'date': '2025-06-01', 'completed': True},
            {'habitId': 'h1', 'date': '2025-06-02', 'mood': 6},
            {'habitId': 'h1', 'date': '2025-06-03', 'difficulty': 0},
            {'habitId': 'h1', 'date': '2025-06-04', 'value': -2},
            {'habitId': 'h1', 'date': 'someday'},
            {'date': '2025-06-05'},
        ])
        assert [r.date for r in records] == [date(2025, 6, 1)]

    def test_strict_loading_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            load_records([{'habitId': 'h1', 'date': '2025-06-02', 'mood': 6}], strict=True)
        assert exc_info.value.field == 'records'

    def test_mood_must_be_integer(self):
        assert load_records([{'habitId': 'h1', 'date': '2025-06-02', 'mood': 3.5}]) == []

    def test_dump_record(self):
        record = CompletionRecord(habit_id='h1', date=date(2025, 6, 1), completed=True, notes='ok')
        assert dump_record(record) == {
            'habitId': 'h1',
            'date': '2025-06-01',
            'completed': True,
            'notes': 'ok',
            'value': None,
            'mood': None,
            'difficulty': None,
        }
