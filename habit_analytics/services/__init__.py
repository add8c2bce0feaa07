"""
Services package for the analytics engine.

Computation layer, one service per concern:
- streak_service: Current and longest streak calculation
- statistics_service: Completion rates, averages, daily/weekly rows
- heatmap_service: Full-year calendar heatmap cells
- trend_service: Bucketed trends with category breakdown
- analytics_service: Facade assembling the API responses
"""

# Explicit imports for convenience
from .streak_service import StreakService, StreakResult
from .statistics_service import StatisticsService
from .heatmap_service import HeatmapService
from .trend_service import TrendService
from .analytics_service import AnalyticsService

__all__ = [
    'StreakService',
    'StreakResult',
    'StatisticsService',
    'HeatmapService',
    'TrendService',
    'AnalyticsService',
]
