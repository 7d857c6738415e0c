"""
Unit tests for the statistical primitives.
"""

import numpy as np
import pandas as pd
import pytest

from eventmetrics.analytics.base_models import Trend
from eventmetrics.analytics.math_utils import (
    average,
    classify_trend,
    detect_anomalies,
    median,
    pearson_correlation,
    percentage_change,
    round_to_decimals,
    standard_deviation,
)


class TestPercentageChange:
    """Test Suite for percentage_change."""

    def test_positive_change(self):
        assert percentage_change(100, 120) == 20

    def test_negative_change(self):
        assert percentage_change(100, 80) == -20

    @pytest.mark.parametrize("value", [1, -3.5, 42, 1e6])
    def test_no_change_is_zero(self, value):
        assert percentage_change(value, value) == 0

    def test_zero_to_zero_is_zero(self):
        assert percentage_change(0, 0) == 0

    def test_zero_base_is_one_hundred(self):
        """A zero base yields 100 by convention, whatever the new value."""
        assert percentage_change(0, 100) == 100
        assert percentage_change(0, 5) == 100
        assert percentage_change(0, -5) == 100


class TestAverageMedianStd:
    """Test Suite for average, median and standard_deviation."""

    def test_average_empty_is_zero(self):
        assert average([]) == 0

    def test_average_single_value(self):
        assert average([7.5]) == 7.5

    def test_average_is_order_invariant(self):
        assert average([1, 2, 3, 4]) == average([4, 3, 1, 2]) == 2.5

    def test_average_accepts_generators_and_arrays(self):
        assert average(v for v in [2, 4]) == 3
        assert average(np.array([2.0, 4.0])) == 3
        assert average(pd.Series([2, 4])) == 3

    def test_median_odd_length(self):
        assert median([3, 1, 2]) == 2

    def test_median_even_length_averages_middle(self):
        assert median([4, 1, 3, 2]) == 2.5

    def test_median_empty_is_zero(self):
        assert median([]) == 0

    def test_std_of_constant_series_is_zero(self):
        assert standard_deviation([5, 5, 5, 5]) == 0

    def test_std_is_population(self):
        """Divides by N, not N-1."""
        assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_std_empty_is_zero(self):
        assert standard_deviation([]) == 0


class TestPearsonCorrelation:
    """Test Suite for pearson_correlation."""

    def test_perfect_positive(self):
        x = [1, 2, 3, 4, 5]
        assert pearson_correlation(x, [2 * v for v in x]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        x = [1, 2, 3, 4, 5]
        assert pearson_correlation(x, [-v for v in x]) == pytest.approx(-1.0)

    def test_mismatched_lengths_is_zero(self):
        assert pearson_correlation([1, 2, 3], [1, 2]) == 0

    def test_empty_is_zero(self):
        assert pearson_correlation([], []) == 0

    def test_constant_series_is_zero(self):
        assert pearson_correlation([1, 2, 3], [4, 4, 4]) == 0

    def test_result_is_bounded(self):
        r = pearson_correlation([1, 3, 2, 5, 4], [2, 1, 4, 3, 6])
        assert -1 <= r <= 1


class TestDetectAnomalies:
    """Test Suite for detect_anomalies."""

    def test_detects_single_spike(self):
        assert detect_anomalies([10, 12, 11, 13, 50, 12, 11], 2) == [50]

    def test_normal_data_has_no_anomalies(self):
        assert detect_anomalies([10, 12, 11, 13, 12, 11, 10], 2) == []

    def test_empty_input(self):
        assert detect_anomalies([]) == []

    def test_constant_series_has_no_anomalies(self):
        assert detect_anomalies([3, 3, 3, 3]) == []

    def test_repeated_anomalies_are_each_reported(self):
        values = [0] * 9 + [100, 100]
        assert detect_anomalies(values, 2) == [100, 100]

    def test_lower_threshold_flags_more(self):
        values = [10, 12, 11, 13, 50, 12, 11]
        assert len(detect_anomalies(values, 0.5)) > len(detect_anomalies(values, 2))


class TestClassifyTrend:
    """Test Suite for classify_trend."""

    def test_increasing(self):
        assert classify_trend([10, 15, 20, 25, 30]) == Trend.INCREASING

    def test_decreasing(self):
        assert classify_trend([30, 25, 20, 15, 10]) == Trend.DECREASING

    def test_stable(self):
        assert classify_trend([20, 21, 19, 20, 21]) == Trend.STABLE

    def test_only_first_and_last_matter(self):
        assert classify_trend([100, 10, 500, 101]) == Trend.STABLE

    def test_threshold_is_exclusive(self):
        assert classify_trend([100, 105]) == Trend.STABLE
        assert classify_trend([100, 106]) == Trend.INCREASING
        assert classify_trend([100, 94]) == Trend.DECREASING

    def test_custom_threshold(self):
        assert classify_trend([100, 104], threshold_percent=1) == Trend.INCREASING

    def test_short_series_is_stable(self):
        assert classify_trend([]) == Trend.STABLE
        assert classify_trend([5]) == Trend.STABLE

    def test_zero_start_uses_sign_of_end(self):
        assert classify_trend([0, 3]) == Trend.INCREASING
        assert classify_trend([0, -3]) == Trend.DECREASING
        assert classify_trend([0, 0]) == Trend.STABLE

    def test_negative_series_keeps_direction(self):
        """-10 -> -5 is a rise even though the percent change is negative."""
        assert classify_trend([-10, -5]) == Trend.INCREASING
        assert classify_trend([-5, -10]) == Trend.DECREASING


class TestRoundToDecimals:
    """Test Suite for round_to_decimals."""

    def test_half_up(self):
        assert round_to_decimals(2.345, 2) == 2.35
        assert round_to_decimals(1.005, 2) == 1.01
        assert round_to_decimals(0.5, 0) == 1.0

    def test_ties_round_away_from_zero(self):
        assert round_to_decimals(-2.5, 0) == -3.0

    def test_regular_rounding(self):
        assert round_to_decimals(19.047619, 2) == 19.05
        assert round_to_decimals(0.123456, 4) == 0.1235

    def test_many_decimals_on_large_value(self):
        assert round_to_decimals(123456789012.5, 20) == 123456789012.5

    def test_very_large_values(self):
        assert round_to_decimals(1e300, 2) == 1e300
        assert round_to_decimals(-9.87654321e20, 4) == -9.87654321e20

    def test_non_finite_passthrough(self):
        assert round_to_decimals(float("inf"), 2) == float("inf")
