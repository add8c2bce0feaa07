"""
Helpers package for the analytics engine.

Helper functions for specific domains:
- metric_helpers: Streak detection, percentages, rounding
- record_helpers: Record validation, filtering and grouping
"""
