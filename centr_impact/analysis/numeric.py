"""
Numeric Utilities

Scaling, aggregation and inequality helpers shared by all three analyzers.

    normalize            - min-max scaling to [0, 1] (ties collapse to 0)
    gini_balance         - 1 - Gini coefficient
    geometric_mean       - NaN-skipping geometric mean
    interpolated_median  - grouped-data median for tied ratings
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

import numpy as np

from ..core.records import is_missing


def _as_float_array(values: Iterable[Any]) -> np.ndarray:
    return np.array(
        [np.nan if is_missing(v) else float(v) for v in values],
        dtype=float,
    )


def _present(values: Iterable[Any]) -> np.ndarray:
    arr = _as_float_array(values)
    return arr[~np.isnan(arr)]


def finite_or_none(value: Any, digits: Optional[int] = None) -> Optional[float]:
    """JSON-friendly float: None for missing or non-finite values."""
    if is_missing(value):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return round(value, digits) if digits is not None else value


def normalize(values: Iterable[Any]) -> np.ndarray:
    """
    Min-max scale values to [0, 1].

    Missing entries are ignored when finding the range and stay NaN in the
    output. When every finite value is equal (or there are none) the result
    is an all-zero vector of the same length.

    Example:
        normalize([10, 20, 30, 40, 50]) -> [0.0, 0.25, 0.5, 0.75, 1.0]
    """
    arr = _as_float_array(values)
    finite = arr[np.isfinite(arr)]

    if finite.size == 0:
        return np.zeros(arr.size)

    low, high = finite.min(), finite.max()
    if low == high:
        return np.zeros(arr.size)

    return (arr - low) / (high - low)


def gini_balance(values: Iterable[Any]) -> float:
    """
    Balance score, 1 - Gini coefficient.

    0 is completely unbalanced, 1 is perfectly balanced. Missing and
    negative values are dropped. An empty set scores 0; a set of zeros
    scores 1.

    Example:
        gini_balance([25, 25, 25, 25]) -> 1.0
        gini_balance([90, 5, 3, 2])     -> 0.335
    """
    arr = _present(values)
    arr = np.sort(arr[arr >= 0])

    if arr.size == 0:
        return 0.0

    total = arr.sum()
    if total == 0:
        return 1.0

    n = arr.size
    ranks = np.arange(1, n + 1)
    gini = (2.0 * np.sum(ranks * arr)) / (n * total) - (n + 1) / n
    gini = min(1.0, max(0.0, gini))

    return float(1.0 - gini)


def geometric_mean(values: Iterable[Any]) -> float:
    """
    Geometric mean of the non-missing values.

    Returns NaN when nothing is left, 0 when any operand is zero and NaN
    when any operand is negative.
    """
    arr = _present(values)
    if arr.size == 0:
        return float("nan")

    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.exp(np.mean(np.log(arr))))


def interpolated_median(values: Iterable[Any], width: float = 1.0) -> float:
    """
    Interpolated median for ratings with ties.

    When the median is an observed value m, the ties at m are spread evenly
    over the class [m - width/2, m + width/2]:

        m - width/2 + width * (n/2 - below) / at

    where ``below`` counts the values under m and ``at`` the values equal
    to m. A single untied median comes back unchanged. With an even count
    and two distinct middle values the median is their linear
    interpolation.

    Args:
        values: Ratings (missing values are skipped)
        width: Class width of the rating scale

    Returns:
        Interpolated median, or NaN for an empty input
    """
    arr = np.sort(_present(values))
    n = arr.size
    if n == 0:
        return float("nan")

    median = float(np.median(arr))
    at = int(np.sum(arr == median))
    if at == 0:
        return median

    below = int(np.sum(arr < median))
    return float(median - width / 2.0 + width * (n / 2.0 - below) / at)
