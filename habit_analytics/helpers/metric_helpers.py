"""
Metric helper functions for habit analytics.
Implements the numeric building blocks: run-length streak detection,
gap-filled completion series, bounded percentages and half-up rounding.

Uses NumPy/Pandas only - no scipy/statsmodels.
"""
import math
from datetime import date, timedelta
from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd

from habit_analytics.utils.time_utils import iter_days


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with .5 going up (Python's round() is banker's rounding).

    >>> round_half_up(2.5)
    3
    >>> round_half_up(3.25, 1)
    3.3
    """
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def safe_percentage(numerator: float, denominator: float) -> float:
    """
    numerator / denominator * 100, bounded to [0, 100].

    Returns 0.0 when the denominator is zero; never NaN.
    """
    if not denominator or denominator <= 0:
        return 0.0
    pct = (numerator / denominator) * 100
    if math.isnan(pct):
        return 0.0
    return float(min(100.0, max(0.0, pct)))


def mean_or_none(values: Iterable[float]) -> Optional[float]:
    """Arithmetic mean, or None when there is nothing to average."""
    arr = np.fromiter(values, dtype=float)
    if arr.size == 0:
        return None
    return float(np.mean(arr))


def build_completion_series(
    completion_data: Dict[date, bool],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> pd.Series:
    """
    Build a date-indexed boolean Series with every day present.

    Days without data are filled with False, so a missing day always breaks
    a run.

    Args:
        completion_data: {day: completed}
        start_date: First day (inclusive); defaults to the earliest key
        end_date: Range end (exclusive); defaults to the day after the latest key

    Returns:
        Boolean Series indexed by date, sorted ascending
    """
    series = pd.Series(completion_data, dtype=bool)
    if series.empty and (start_date is None or end_date is None):
        return series

    if start_date is None:
        start_date = min(completion_data)
    if end_date is None:
        end_date = max(completion_data) + timedelta(days=1)

    days = list(iter_days(start_date, end_date))
    return series.reindex(days, fill_value=False).astype(bool)


def detect_streaks_numpy(completion_series: pd.Series) -> Dict[str, int]:
    """
    Detects trailing and longest runs of True using NumPy run-length encoding.

    Args:
        completion_series: Boolean pandas Series indexed by date, True = completed

    Returns:
        {
            'current_streak': int,  # run ending at the last element
            'longest_streak': int,
            'total_days': int
        }
    """
    if completion_series.empty:
        return {'current_streak': 0, 'longest_streak': 0, 'total_days': 0}

    completion_series = completion_series.sort_index()
    completed = completion_series.values.astype(bool)

    # Run-length encoding: +1 where a run starts, -1 where it ends
    changes = np.diff(np.concatenate(([False], completed, [False])).astype(int))
    run_starts = np.where(changes == 1)[0]
    run_ends = np.where(changes == -1)[0]
    run_lengths = run_ends - run_starts

    longest_streak = int(run_lengths.max()) if len(run_lengths) > 0 else 0

    current_streak = 0
    if len(run_lengths) > 0 and run_ends[-1] == len(completed):
        current_streak = int(run_lengths[-1])

    return {
        'current_streak': current_streak,
        'longest_streak': longest_streak,
        'total_days': len(completed)
    }
