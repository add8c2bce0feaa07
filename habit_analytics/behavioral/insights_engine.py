"""
Behavioral Insights Engine

Rule-based insights and streak predictions for a single habit.
Generates actionable messages from the habit's completion statistics.

No AI/ML - purely deterministic threshold rules.
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from habit_analytics.helpers import metric_helpers
from habit_analytics.helpers.record_helpers import clean_records, sort_records
from habit_analytics.models import CompletionRecord, Habit
from habit_analytics.utils.constants import (
    RATE_SUCCESS_THRESHOLD, RATE_WARNING_THRESHOLD, RATE_DANGER_THRESHOLD,
    STREAK_SUCCESS_THRESHOLD, RECENT_RECORDS_COUNT, RECENT_CONSISTENCY_RATIO,
    STREAK_MILESTONES,
)


class InsightLevel(Enum):
    """Presentation level of an insight"""
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
    INFO = "info"


class InsightType(Enum):
    """Rule that produced an insight"""
    COMPLETION_RATE = "completion_rate"
    STREAK = "streak"
    CONSISTENCY = "consistency"


@dataclass
class Insight:
    """
    A rule-based insight about one habit.

    Attributes:
        insight_type: Rule that fired (from InsightType enum)
        level: success, warning, danger or info
        message: User-facing text
        actionable: Whether the user is expected to change something
        evidence: Raw figures the rule looked at
    """
    insight_type: InsightType
    level: InsightLevel
    message: str
    actionable: bool
    evidence: Dict = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'type': self.level.value,
            'rule': self.insight_type.value,
            'message': self.message,
            'actionable': self.actionable,
            'evidence': self.evidence
        }


class InsightsEngine:
    """
    Generates insights from one habit's statistics.

    Rules run in a fixed order and each may fire independently:
    completion rate, current streak, then recent consistency.

    Example usage:
        engine = InsightsEngine(completion_rate=85.0, current_streak=9, records=records)
        for insight in engine.generate_insights():
            print(insight.message)
    """

    def __init__(
        self,
        completion_rate: float,
        current_streak: int,
        records: Iterable[CompletionRecord]
    ):
        self.completion_rate = completion_rate
        self.current_streak = current_streak
        self.records = sort_records(clean_records(records))
        self.insights: List[Insight] = []

    def generate_insights(self) -> List[Insight]:
        """
        Run every rule against the loaded statistics.

        Returns:
            List of Insight objects in rule order
        """
        self.insights = []

        self._check_completion_rate()
        self._check_streak()
        self._check_recent_consistency()

        return self.insights

    def _check_completion_rate(self):
        """Band the completion rate; 40-60% produces nothing."""
        rate = self.completion_rate
        shown = metric_helpers.round_half_up(rate)
        evidence = {'completion_rate': shown}

        if rate >= RATE_SUCCESS_THRESHOLD:
            self.insights.append(Insight(
                insight_type=InsightType.COMPLETION_RATE,
                level=InsightLevel.SUCCESS,
                message=f"Excellent! You have an {shown}% completion rate for this habit.",
                actionable=False,
                evidence=evidence
            ))
        elif rate >= RATE_WARNING_THRESHOLD:
            self.insights.append(Insight(
                insight_type=InsightType.COMPLETION_RATE,
                level=InsightLevel.WARNING,
                message=(
                    f"Good progress with {shown}% completion rate. "
                    f"Consider what's preventing the remaining completions."
                ),
                actionable=True,
                evidence=evidence
            ))
        elif rate < RATE_DANGER_THRESHOLD:
            self.insights.append(Insight(
                insight_type=InsightType.COMPLETION_RATE,
                level=InsightLevel.DANGER,
                message=(
                    f"Your completion rate is {shown}%. "
                    f"Consider adjusting your habit or schedule to make it more achievable."
                ),
                actionable=True,
                evidence=evidence
            ))

    def _check_streak(self):
        """Celebrate long streaks, nudge when there is none."""
        streak = self.current_streak
        evidence = {'current_streak': streak}

        if streak >= STREAK_SUCCESS_THRESHOLD:
            self.insights.append(Insight(
                insight_type=InsightType.STREAK,
                level=InsightLevel.SUCCESS,
                message=f"Amazing! You're on a {streak}-day streak. Keep the momentum going!",
                actionable=False,
                evidence=evidence
            ))
        elif streak == 0:
            self.insights.append(Insight(
                insight_type=InsightType.STREAK,
                level=InsightLevel.INFO,
                message="Start building your streak today! Consistency is key to forming lasting habits.",
                actionable=True,
                evidence=evidence
            ))

    def _check_recent_consistency(self):
        """Look at the last few records in ascending day order."""
        recent = self.records[-RECENT_RECORDS_COUNT:]
        if not recent:
            return

        completed = sum(1 for r in recent if r.completed)
        if completed > RECENT_CONSISTENCY_RATIO * len(recent):
            self.insights.append(Insight(
                insight_type=InsightType.CONSISTENCY,
                level=InsightLevel.SUCCESS,
                message=f"You've been very consistent this week with {completed}/{len(recent)} completions!",
                actionable=False,
                evidence={'completed': completed, 'records': len(recent)}
            ))

    def to_dict(self) -> List[Dict]:
        """Convert insights to dictionary format for JSON serialization."""
        return [insight.to_dict() for insight in self.insights]


# =============================================================================
# PREDICTIONS
# =============================================================================

def get_next_milestone(streak: int) -> Optional[Dict]:
    """
    Smallest milestone strictly above the streak.

    Returns:
        {'days': int, 'remaining': int}, or None past the last milestone
    """
    for milestone in STREAK_MILESTONES:
        if milestone > streak:
            return {'days': milestone, 'remaining': milestone - streak}
    return None


def generate_predictions(
    records: Iterable[CompletionRecord],
    habit: Habit,
    current_streak: int,
    today: date = None
) -> Dict:
    """
    Streak-target and milestone projections for one habit.

    Args:
        records: Records the prediction is based on
        habit: Supplies the streak target
        current_streak: Streak as computed by StreakService
        today: Reference day (default: today)

    Returns:
        {
            'streakTarget': {target, current, daysRemaining, estimatedDate} | None,
            'nextMilestone': {days, remaining} | None,
            'probabilityOfSuccess': int (0-100)
        }
    """
    today = today or date.today()
    records = clean_records(records)
    completed = sum(1 for r in records if r.completed)

    if completed == 0:
        return {
            'streakTarget': None,
            'nextMilestone': None,
            'probabilityOfSuccess': 0
        }

    days_remaining = max(0, habit.streak_target - current_streak)
    estimated = today + timedelta(days=days_remaining) if days_remaining > 0 else None

    return {
        'streakTarget': {
            'target': habit.streak_target,
            'current': current_streak,
            'daysRemaining': days_remaining,
            'estimatedDate': estimated.isoformat() if estimated else None
        },
        'nextMilestone': get_next_milestone(current_streak),
        'probabilityOfSuccess': metric_helpers.round_half_up(
            metric_helpers.safe_percentage(completed, len(records))
        )
    }


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def get_insights(
    completion_rate: float,
    current_streak: int,
    records: Iterable[CompletionRecord]
) -> List[Dict]:
    """
    Generate insights for a habit.

    Returns:
        List of insight dictionaries
    """
    engine = InsightsEngine(completion_rate, current_streak, records)
    engine.generate_insights()
    return engine.to_dict()


def get_top_insight(
    completion_rate: float,
    current_streak: int,
    records: Iterable[CompletionRecord]
) -> Optional[Dict]:
    """First actionable insight, else the first insight, else None."""
    insights = get_insights(completion_rate, current_streak, records)
    for insight in insights:
        if insight['actionable']:
            return insight
    return insights[0] if insights else None
