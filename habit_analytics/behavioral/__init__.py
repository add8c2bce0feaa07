"""
Behavioral Insights Engine Package

Rule-based insights and streak predictions for a single habit.

No AI/ML - purely deterministic threshold rules.
"""
from habit_analytics.behavioral.insights_engine import (
    InsightsEngine,
    InsightType,
    InsightLevel,
    Insight,
    generate_predictions,
    get_next_milestone,
    get_insights,
    get_top_insight,
)

__all__ = [
    'InsightsEngine',
    'InsightType',
    'InsightLevel',
    'Insight',
    'generate_predictions',
    'get_next_milestone',
    'get_insights',
    'get_top_insight',
]
