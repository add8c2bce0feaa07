import pytest
from datetime import date

import pandas as pd

from habit_analytics.helpers import metric_helpers


class TestMetricHelpersUnit:

    @pytest.mark.parametrize('value, digits, expected', [
        (2.5, 0, 3),
        (0.5, 0, 1),
        (66.6667, 0, 67),
        (49.4, 0, 49),
        (3.25, 1, 3.3),
        (4.0, 1, 4.0),
    ])
    def test_round_half_up(self, value, digits, expected):
        assert metric_helpers.round_half_up(value, digits) == expected

    def test_round_half_up_returns_int_without_digits(self):
        assert isinstance(metric_helpers.round_half_up(12.4), int)

    def test_safe_percentage(self):
        assert metric_helpers.safe_percentage(150, 300) == 50.0
        assert metric_helpers.safe_percentage(3, 4) == 75.0

    def test_safe_percentage_zero_denominator(self):
        assert metric_helpers.safe_percentage(5, 0) == 0.0
        assert metric_helpers.safe_percentage(0, 0) == 0.0

    def test_safe_percentage_is_clamped(self):
        assert metric_helpers.safe_percentage(12, 10) == 100.0
        assert metric_helpers.safe_percentage(-1, 10) == 0.0

    def test_mean_or_none(self):
        assert metric_helpers.mean_or_none([]) is None
        assert metric_helpers.mean_or_none([3, 4]) == 3.5
        assert metric_helpers.mean_or_none(iter([5])) == 5.0

    def test_build_completion_series_fills_gaps(self):
        series = metric_helpers.build_completion_series({
            date(2025, 1, 1): True,
            date(2025, 1, 3): True,
        })
        assert list(series.index) == [date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3)]
        assert list(series.values) == [True, False, True]

    def test_build_completion_series_explicit_range(self):
        series = metric_helpers.build_completion_series(
            {date(2025, 1, 2): True}, date(2025, 1, 1), date(2025, 1, 5)
        )
        assert len(series) == 4
        assert series.sum() == 1

    def test_build_completion_series_empty(self):
        assert metric_helpers.build_completion_series({}).empty

    def test_detect_streaks_numpy(self):
        series = pd.Series(
            [True, True, False, True],
            index=[date(2025, 1, d) for d in range(1, 5)]
        )
        result = metric_helpers.detect_streaks_numpy(series)
        assert result == {'current_streak': 1, 'longest_streak': 2, 'total_days': 4}

    def test_detect_streaks_numpy_sorts_index(self):
        series = pd.Series(
            [False, True, True],
            index=[date(2025, 1, 3), date(2025, 1, 1), date(2025, 1, 2)]
        )
        result = metric_helpers.detect_streaks_numpy(series)
        assert result['longest_streak'] == 2
        assert result['current_streak'] == 0

    def test_detect_streaks_numpy_empty(self):
        result = metric_helpers.detect_streaks_numpy(pd.Series([], dtype=bool))
        assert result == {'current_streak': 0, 'longest_streak': 0, 'total_days': 0}
