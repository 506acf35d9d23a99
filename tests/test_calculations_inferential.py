"""
Tests for inferential statistics: correlation, regression, intervals and tests
"""

import math

import pytest

from bptracker.calculations import (
    calculate_pearson_correlation,
    cohens_d,
    confidence_interval,
    detect_outliers,
    exponential_moving_average,
    filter_outliers,
    interpret_effect_size,
    linear_regression,
    moving_average,
    pearson_correlation,
    t_critical_value,
    two_tailed_p_value,
    welch_t_test,
    z_score,
)


class TestPValues:
    """Test t-distribution helpers"""

    def test_critical_value_known(self):
        """t(0.975, 10) is 2.228"""
        assert t_critical_value(0.025, 10) == pytest.approx(2.228, abs=1e-3)

    def test_critical_value_large_df_approaches_normal(self):
        assert t_critical_value(0.025, 10000) == pytest.approx(1.96, abs=1e-2)

    def test_critical_value_clamps_df(self):
        """Degrees of freedom below 1 are treated as 1"""
        assert t_critical_value(0.025, 0) == pytest.approx(t_critical_value(0.025, 1))

    def test_p_value_at_critical_value(self):
        assert two_tailed_p_value(2.228, 10) == pytest.approx(0.05, abs=1e-3)

    def test_p_value_zero_t(self):
        assert two_tailed_p_value(0, 5) == pytest.approx(1.0)

    def test_p_value_symmetric_in_t(self):
        assert two_tailed_p_value(-2.5, 8) == pytest.approx(two_tailed_p_value(2.5, 8))

    def test_p_value_no_degrees_of_freedom(self):
        assert two_tailed_p_value(3.0, 0) == 1.0

    def test_p_value_never_zero(self):
        """Extreme statistics are floored above zero"""
        p = two_tailed_p_value(1e6, 50)
        assert 0 < p <= 1


class TestPearsonCorrelation:
    """Test both correlation implementations"""

    def test_perfect_positive(self):
        assert pearson_correlation([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_moderate_correlation(self):
        r = pearson_correlation([1, 2, 3, 4, 5], [3, 1, 4, 2, 5])
        assert r == pytest.approx(0.5)

    def test_mismatched_lengths(self):
        assert pearson_correlation([1, 2, 3], [1, 2]) == 0

    def test_too_few_pairs(self):
        assert pearson_correlation([1], [2]) == 0

    def test_zero_variance(self):
        assert pearson_correlation([1, 2, 3], [5, 5, 5]) == 0

    def test_running_sum_version_matches(self):
        x = [1, 2, 3, 4, 5]
        y = [3, 1, 4, 2, 5]
        assert calculate_pearson_correlation(x, y) == pytest.approx(pearson_correlation(x, y))

    def test_running_sum_version_bounded(self):
        r = calculate_pearson_correlation([1, 2, 3, 4, 5], [3, 1, 4, 2, 5])
        assert abs(r) <= 0.6

    def test_running_sum_zero_variance(self):
        assert calculate_pearson_correlation([130, 130, 130], [10, 20, 30]) == 0

    def test_running_sum_mismatched_lengths(self):
        assert calculate_pearson_correlation([1, 2, 3], [1, 2]) == 0

    def test_running_sum_empty(self):
        assert calculate_pearson_correlation([], []) == 0


class TestLinearRegression:
    """Test ordinary least squares"""

    def test_perfect_fit(self):
        fit = linear_regression([0, 1, 2, 3], [1, 3, 5, 7])
        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(1.0)
        assert fit.r_squared == pytest.approx(1.0)
        assert fit.correlation_coefficient == pytest.approx(1.0)
        assert fit.degrees_of_freedom == 2
        assert fit.predictions == pytest.approx((1.0, 3.0, 5.0, 7.0))
        assert all(abs(r) < 1e-9 for r in fit.residuals)

    def test_noisy_fit_is_significant(self):
        x = list(range(1, 11))
        y = [2 * xi + (0.5 if xi % 2 else -0.5) for xi in x]
        fit = linear_regression(x, y)
        assert fit.slope == pytest.approx(2.0, abs=0.1)
        assert fit.r_squared > 0.95
        assert fit.adjusted_r_squared <= fit.r_squared
        assert fit.slope_standard_error > 0
        assert fit.p_value < 0.05

    def test_flat_fit(self):
        fit = linear_regression([1, 2, 3, 4], [5, 5, 5, 5])
        assert fit.slope == 0
        assert fit.intercept == pytest.approx(5.0)
        assert fit.r_squared == 0

    def test_constant_x(self):
        """No spread in x is degenerate: all-zero result with p_value 1"""
        fit = linear_regression([3, 3, 3], [1, 2, 3])
        assert fit.slope == 0
        assert fit.intercept == 0
        assert fit.r_squared == 0
        assert fit.adjusted_r_squared == 0
        assert fit.residual_standard_error == 0
        assert fit.degrees_of_freedom == 0
        assert fit.p_value == 1.0
        assert fit.predictions == ()
        assert fit.residuals == ()

    def test_too_few_points(self):
        fit = linear_regression([1], [2])
        assert fit.slope == 0
        assert fit.p_value == 1.0
        assert fit.predictions == ()

    def test_mismatched_lengths(self):
        fit = linear_regression([1, 2, 3], [1, 2])
        assert fit.slope == 0
        assert fit.degrees_of_freedom == 0

    def test_two_points(self):
        fit = linear_regression([0, 1], [10, 12])
        assert fit.slope == pytest.approx(2.0)
        assert fit.degrees_of_freedom == 0
        assert fit.p_value == 1.0

    def test_to_dict_lists(self):
        result = linear_regression([0, 1, 2], [1, 2, 3]).to_dict()
        assert isinstance(result['predictions'], list)
        assert isinstance(result['residuals'], list)


class TestConfidenceInterval:
    """Test t-based confidence intervals"""

    def test_typical(self):
        ci = confidence_interval([120, 124, 128])
        margin = 4.303 * 4 / math.sqrt(3)
        assert ci.estimate == pytest.approx(124.0)
        assert ci.margin_of_error == pytest.approx(margin, rel=1e-3)
        assert ci.lower == pytest.approx(124.0 - margin, rel=1e-3)
        assert ci.upper == pytest.approx(124.0 + margin, rel=1e-3)
        assert ci.confidence_level == 0.95

    def test_higher_confidence_is_wider(self):
        values = [118, 122, 125, 130, 127]
        assert (
            confidence_interval(values, 0.99).margin_of_error
            > confidence_interval(values, 0.90).margin_of_error
        )

    def test_single_value(self):
        """One value collapses the interval to a point"""
        ci = confidence_interval([130])
        assert ci.lower == ci.estimate == ci.upper == 130
        assert ci.margin_of_error == 0

    def test_empty(self):
        ci = confidence_interval([])
        assert ci.estimate == 0
        assert ci.margin_of_error == 0


class TestWelchTTest:
    """Test Welch's two-sample t-test"""

    def test_clear_difference(self):
        result = welch_t_test([10, 11, 12, 13], [1, 2, 3, 4])
        assert result.t_statistic > 0
        assert result.degrees_of_freedom == pytest.approx(6.0)
        assert result.p_value < 0.001
        assert result.significant is True

    def test_identical_samples(self):
        result = welch_t_test([1, 2, 3], [1, 2, 3])
        assert result.t_statistic == 0
        assert result.p_value == pytest.approx(1.0)
        assert result.significant is False

    def test_zero_standard_error(self):
        result = welch_t_test([5, 5], [5, 5, 5])
        assert result.p_value == 1.0
        assert result.degrees_of_freedom == 3

    def test_too_small(self):
        result = welch_t_test([1], [1, 2])
        assert result.t_statistic == 0
        assert result.p_value == 1.0
        assert result.degrees_of_freedom == 0


class TestEffectSize:
    """Test Cohen's d and its interpretation"""

    def test_cohens_d(self):
        assert cohens_d([5, 6, 7], [1, 2, 3]) == pytest.approx(4.0)

    def test_cohens_d_sign(self):
        assert cohens_d([1, 2, 3], [5, 6, 7]) == pytest.approx(-4.0)

    def test_cohens_d_too_small(self):
        assert cohens_d([1], [2, 3]) == 0

    def test_cohens_d_zero_spread(self):
        assert cohens_d([5, 5], [7, 7]) == 0

    @pytest.mark.parametrize("d,label", [
        (0.1, "negligible"),
        (0.3, "small"),
        (0.6, "medium"),
        (0.8, "large"),
        (-0.9, "large"),
        (-0.25, "small"),
    ])
    def test_interpretation(self, d, label):
        assert interpret_effect_size(d) == label


class TestOutliers:
    """Test Tukey fence outlier detection"""

    def test_detects_high_outlier(self):
        result = detect_outliers([1, 2, 3, 4, 100])
        assert result.outliers == (100,)
        assert result.outlier_indices == (4,)
        assert result.lower_bound == pytest.approx(-1.0)
        assert result.upper_bound == pytest.approx(7.0)

    def test_custom_multiplier(self):
        """A wider fence keeps the value"""
        result = detect_outliers([1, 2, 3, 4, 10], k=3.0)
        assert result.outliers == ()

    def test_small_sample_has_no_fences(self):
        result = detect_outliers([1, 2, 100])
        assert result.outliers == ()
        assert result.lower_bound == float("-inf")
        assert result.upper_bound == float("inf")

    def test_infinite_bounds_serialize_as_none(self):
        result = detect_outliers([1, 2, 100]).to_dict()
        assert result['lower_bound'] is None
        assert result['upper_bound'] is None

    def test_filter_outliers(self):
        assert filter_outliers([1, 2, 3, 4, 100]) == [1, 2, 3, 4]

    def test_filter_keeps_order(self):
        assert filter_outliers([4, -100, 3, 2, 1]) == [4, 3, 2, 1]


class TestSmoothing:
    """Test moving averages and z-scores"""

    def test_moving_average(self):
        assert moving_average([1, 2, 3, 4, 5], 3) == [2.0, 3.0, 4.0]

    def test_moving_average_window_too_large(self):
        assert moving_average([1, 2], 3) == [1, 2]

    def test_moving_average_invalid_window(self):
        assert moving_average([1, 2, 3], 0) == [1, 2, 3]

    def test_exponential_moving_average(self):
        assert exponential_moving_average([10, 20], alpha=0.5) == [10, 15.0]

    def test_exponential_moving_average_empty(self):
        assert exponential_moving_average([]) == []

    def test_exponential_moving_average_alpha_one(self):
        """alpha=1 tracks the input exactly"""
        assert exponential_moving_average([1, 5, 3], alpha=1.0) == [1, 5, 3]

    def test_z_score(self):
        assert z_score(130, 120, 5) == 2.0

    def test_z_score_zero_std(self):
        assert z_score(130, 120, 0) == 0
