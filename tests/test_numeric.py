"""
Unit Tests for centr_impact.analysis.numeric

Tests for:
    - normalize: min-max scaling and tie handling
    - gini_balance: 1 - Gini on edge-case inputs
    - geometric_mean: missing values and zeros
    - interpolated_median: tied and untied ratings
"""

import math

import numpy as np
import pytest

from centr_impact.analysis.numeric import (
    finite_or_none,
    geometric_mean,
    gini_balance,
    interpolated_median,
    normalize,
)


class TestNormalize:

    def test_scales_to_unit_range(self):
        result = normalize([10, 20, 30, 40, 50])
        np.testing.assert_allclose(result, [0.0, 0.25, 0.5, 0.75, 1.0])

    def test_equal_values_collapse_to_zero(self):
        result = normalize([3, 3, 3])
        assert result.tolist() == [0.0, 0.0, 0.0]

    def test_missing_values_stay_missing(self):
        result = normalize([1, None, 3])
        assert result[0] == 0.0
        assert math.isnan(result[1])
        assert result[2] == 1.0

    def test_no_finite_values(self):
        assert normalize([np.nan, np.nan]).tolist() == [0.0, 0.0]
        assert normalize([]).size == 0

    def test_negative_values(self):
        result = normalize([-2, 0, 2])
        np.testing.assert_allclose(result, [0.0, 0.5, 1.0])


class TestGiniBalance:

    def test_perfect_equality(self):
        assert gini_balance([25, 25, 25, 25]) == pytest.approx(1.0)

    def test_concentrated(self):
        assert gini_balance([90, 5, 3, 2]) == pytest.approx(0.335)

    def test_empty_is_zero(self):
        assert gini_balance([]) == 0.0

    def test_all_zero_is_balanced(self):
        assert gini_balance([0, 0, 0]) == 1.0

    def test_single_value(self):
        assert gini_balance([0.42]) == pytest.approx(1.0)

    def test_drops_missing_and_negative(self):
        assert gini_balance([None, -1, 5, np.nan]) == pytest.approx(1.0)

    def test_order_invariant(self):
        assert gini_balance([1, 2, 7]) == pytest.approx(gini_balance([7, 1, 2]))

    def test_bounded(self):
        score = gini_balance([0, 0, 0, 100])
        assert 0.0 <= score <= 1.0


class TestGeometricMean:

    def test_basic(self):
        assert geometric_mean([1, 4]) == pytest.approx(2.0)

    def test_skips_missing(self):
        assert geometric_mean([2, None, 8]) == pytest.approx(4.0)

    def test_empty_is_nan(self):
        assert math.isnan(geometric_mean([]))
        assert math.isnan(geometric_mean([None, np.nan]))

    def test_zero_operand(self):
        assert geometric_mean([0.0, 5.0]) == 0.0


class TestInterpolatedMedian:

    def test_untied_single_value(self):
        assert interpolated_median([0.7]) == pytest.approx(0.7)

    def test_all_tied(self):
        assert interpolated_median([1.0, 1.0]) == pytest.approx(1.0)
        assert interpolated_median([0.0, 0.0]) == pytest.approx(0.0)

    def test_odd_count(self):
        assert interpolated_median([1, 2, 3]) == pytest.approx(2.0)

    def test_ties_shift_the_median(self):
        # 2 - 0.5 + (3 - 1) / 3
        assert interpolated_median([1, 2, 2, 2, 3, 3]) == pytest.approx(2.0 + 1.0 / 6.0)

    def test_width(self):
        # 2 - 0.25 + 0.5 * (3 - 1) / 3
        assert interpolated_median([1, 2, 2, 2, 3, 3], width=0.5) == pytest.approx(2.0 + 1.0 / 12.0)

    def test_unobserved_median(self):
        assert interpolated_median([1, 2]) == pytest.approx(1.5)

    def test_empty_is_nan(self):
        assert math.isnan(interpolated_median([]))

    def test_skips_missing(self):
        assert interpolated_median([None, 0.4]) == pytest.approx(0.4)


class TestFiniteOrNone:

    def test_values(self):
        assert finite_or_none(1.23456, 2) == 1.23
        assert finite_or_none(np.float64(0.5)) == 0.5
        assert finite_or_none(None) is None
        assert finite_or_none(float("nan")) is None
        assert finite_or_none(float("inf")) is None
