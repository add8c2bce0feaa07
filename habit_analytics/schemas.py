"""
Marshmallow schemas for the engine's input and output.

Payloads use the camelCase keys of the habit tracker API; the dataclasses in
habit_analytics.models use snake_case attributes.
"""
import logging
from typing import Dict, Iterable, List

from marshmallow import EXCLUDE, Schema, fields, post_load, validate
from marshmallow import ValidationError as SchemaValidationError

from habit_analytics.exceptions import ValidationError
from habit_analytics.models import CompletionRecord, Habit
from habit_analytics.utils.constants import (
    CATEGORY_CHOICES, DEFAULT_CATEGORY, DEFAULT_COLOR, DEFAULT_STREAK_TARGET,
    FREQUENCY_CHOICES, FREQUENCY_DAILY, RATING_MIN, RATING_MAX, WEEKDAY_NAMES,
)
from habit_analytics.utils.time_utils import normalize_to_day

logger = logging.getLogger(__name__)


class DayField(fields.Field):
    """Calendar day; accepts dates, datetimes and ISO-8601 strings."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return value.isoformat()

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return normalize_to_day(value)
        except (TypeError, ValueError) as e:
            raise SchemaValidationError(f"Not a valid date: {value!r}") from e


class HabitSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    habit_id = fields.Str(required=True, data_key='id')
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=500))
    category = fields.Str(load_default=DEFAULT_CATEGORY, validate=validate.OneOf(CATEGORY_CHOICES))
    color = fields.Str(load_default=DEFAULT_COLOR)
    frequency = fields.Str(load_default=FREQUENCY_DAILY, validate=validate.OneOf(FREQUENCY_CHOICES))
    target_days = fields.List(
        fields.Str(validate=validate.OneOf(WEEKDAY_NAMES)),
        data_key='targetDays',
        load_default=lambda: list(WEEKDAY_NAMES)
    )
    goal = fields.Str(load_default=None, allow_none=True)
    reminder_time = fields.Str(data_key='reminderTime', load_default=None, allow_none=True)
    streak_target = fields.Int(
        data_key='streakTarget',
        load_default=DEFAULT_STREAK_TARGET,
        validate=validate.Range(min=1)
    )
    is_active = fields.Bool(data_key='isActive', load_default=True)
    order = fields.Int(load_default=0)
    created_at = fields.DateTime(data_key='createdAt', load_default=None, allow_none=True)

    @post_load
    def make_habit(self, data, **kwargs):
        return Habit(**data)


class CompletionRecordSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    habit_id = fields.Str(required=True, data_key='habitId')
    date = DayField(required=True)
    completed = fields.Bool(load_default=False)
    notes = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=500))
    value = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=0))
    mood = fields.Int(
        strict=True, load_default=None, allow_none=True,
        validate=validate.Range(min=RATING_MIN, max=RATING_MAX)
    )
    difficulty = fields.Int(
        strict=True, load_default=None, allow_none=True,
        validate=validate.Range(min=RATING_MIN, max=RATING_MAX)
    )

    @post_load
    def make_record(self, data, **kwargs):
        return CompletionRecord(**data)


habit_schema = HabitSchema()
habits_schema = HabitSchema(many=True)
record_schema = CompletionRecordSchema()
records_schema = CompletionRecordSchema(many=True)


def load_habits(payload: Iterable[Dict]) -> List[Habit]:
    """
    Load habits from API payloads.

    Raises:
        ValidationError: If any habit is invalid
    """
    try:
        return habits_schema.load(list(payload))
    except SchemaValidationError as e:
        raise ValidationError('habits', 'Invalid habit payload', details=e.messages) from e


def load_records(payload: Iterable[Dict], strict: bool = False) -> List[CompletionRecord]:
    """
    Load completion records from API payloads.

    Args:
        payload: Raw record dicts
        strict: Raise on the first invalid batch instead of dropping rows

    Returns:
        Loaded records; invalid rows are skipped unless strict

    Raises:
        ValidationError: In strict mode, if any row is invalid
    """
    rows = list(payload)
    if strict:
        try:
            return records_schema.load(rows)
        except SchemaValidationError as e:
            raise ValidationError('records', 'Invalid completion record payload', details=e.messages) from e

    records = []
    for index, row in enumerate(rows):
        try:
            records.append(record_schema.load(row))
        except SchemaValidationError as e:
            logger.debug("Dropping completion record %s: %s", index, e.messages)
    return records


def dump_habit(habit: Habit) -> Dict:
    """Serialize a habit with API keys."""
    return habit_schema.dump(habit)


def dump_record(record: CompletionRecord) -> Dict:
    """Serialize a completion record with API keys."""
    return record_schema.dump(record)
