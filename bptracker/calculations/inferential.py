"""
Inferential Statistics

Handles hypothesis testing and relationship metrics:
- Pearson correlation
- Ordinary least squares regression with slope significance
- t-based confidence intervals
- Welch's two-sample t-test and Cohen's d
- Tukey outlier fences
- Moving and exponential moving averages, z-scores

Degenerate input (empty, mismatched lengths, zero variance) yields a neutral
result rather than an exception.
"""

import math
from typing import List, Sequence

from scipy import stats as scipy_stats

from bptracker.models import (
    ConfidenceInterval,
    LinearRegressionResult,
    OutlierResult,
    TTestResult,
)

from .constants import (
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_EMA_ALPHA,
    EFFECT_SIZE_LARGE,
    EFFECT_SIZE_MEDIUM,
    EFFECT_SIZE_SMALL,
    MIN_OUTLIER_SAMPLE,
    MIN_P_VALUE,
    OUTLIER_IQR_MULTIPLIER,
    SIGNIFICANCE_ALPHA,
)
from .descriptive import mean, percentile, standard_deviation, variance


# ============================================================================
# t-distribution
# ============================================================================


def two_tailed_p_value(t_statistic: float, degrees_of_freedom: float) -> float:
    """
    Two-tailed p-value of a t statistic.

    Uses the Student t survival function, so the result shrinks monotonically
    as |t| grows for a fixed df. Clamped into (0, 1].

    Examples:
        >>> two_tailed_p_value(0.0, 10)
        1.0
        >>> two_tailed_p_value(5.0, 10) < 0.001
        True
    """
    if degrees_of_freedom <= 0:
        return 1.0
    p_value = 2 * float(scipy_stats.t.sf(abs(t_statistic), degrees_of_freedom))
    return min(1.0, max(MIN_P_VALUE, p_value))


def t_critical_value(alpha: float, degrees_of_freedom: float) -> float:
    """
    Critical t value leaving ``alpha`` in the upper tail.

    Pass alpha / 2 for a two-sided interval. Smaller alpha or fewer degrees of
    freedom give a larger critical value.

    Examples:
        >>> round(t_critical_value(0.025, 10), 3)
        2.228
    """
    return float(scipy_stats.t.ppf(1 - alpha, max(degrees_of_freedom, 1)))


# ============================================================================
# Correlation and regression
# ============================================================================


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient between two paired samples.

    Returns 0 for mismatched lengths, fewer than 2 pairs, or a series with
    zero variance.

    Examples:
        >>> pearson_correlation([1, 2, 3, 4], [2, 4, 6, 8])
        1.0
        >>> pearson_correlation([1, 2, 3], [])
        0
    """
    if len(x) != len(y) or len(x) < 2:
        return 0

    mean_x = mean(x)
    mean_y = mean(y)

    numerator = 0.0
    denom_x = 0.0
    denom_y = 0.0
    for xi, yi in zip(x, y):
        dx = xi - mean_x
        dy = yi - mean_y
        numerator += dx * dy
        denom_x += dx * dx
        denom_y += dy * dy

    denominator = math.sqrt(denom_x * denom_y)
    if denominator == 0:
        return 0

    return numerator / denominator


def calculate_pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation from running sums, as used by the insight engine.

    Same contract as pearson_correlation: mismatched or empty input and
    zero-variance series give 0.

    Examples:
        >>> round(calculate_pearson_correlation([1, 2, 3, 4, 5], [2, 4, 6, 8, 10]), 2)
        1.0
    """
    if len(x) != len(y) or len(x) == 0:
        return 0

    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(xi * yi for xi, yi in zip(x, y))
    sum_x2 = sum(xi * xi for xi in x)
    sum_y2 = sum(yi * yi for yi in y)

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    # Rounding can push a zero spread slightly negative
    if spread <= 0:
        return 0

    correlation = numerator / math.sqrt(spread)
    return max(-1.0, min(1.0, correlation))


def linear_regression(x: Sequence[float], y: Sequence[float]) -> LinearRegressionResult:
    """
    Simple linear regression by ordinary least squares.

    Args:
        x: Independent variable values
        y: Dependent variable values (same length as x)

    Returns:
        LinearRegressionResult with the fit, standard errors, slope t-test and
        per-point predictions and residuals. Fewer than 2 points, mismatched
        lengths or no spread in x give an all-zero result with p_value 1.

    Examples:
        >>> fit = linear_regression([0, 1, 2, 3], [1, 3, 5, 7])
        >>> fit.slope, fit.intercept, fit.r_squared
        (2.0, 1.0, 1.0)
    """
    n = len(x)
    if n < 2 or len(x) != len(y):
        return LinearRegressionResult()

    mean_x = mean(x)
    mean_y = mean(y)

    sxx = sum((xi - mean_x) ** 2 for xi in x)
    if sxx == 0:
        return LinearRegressionResult()

    sxy = sum((xi - mean_x) * (yi - mean_y) for xi, yi in zip(x, y))
    slope = sxy / sxx
    intercept = mean_y - slope * mean_x

    predictions = tuple(slope * xi + intercept for xi in x)
    residuals = tuple(yi - predicted for yi, predicted in zip(y, predictions))

    ss_total = sum((yi - mean_y) ** 2 for yi in y)
    ss_residual = sum(r * r for r in residuals)
    r_squared = 1 - ss_residual / ss_total if ss_total != 0 else 0.0
    if n > 2:
        adjusted_r_squared = 1 - ((1 - r_squared) * (n - 1)) / (n - 2)
    else:
        adjusted_r_squared = r_squared

    df = n - 2
    mse = ss_residual / df if df > 0 else 0.0
    residual_standard_error = math.sqrt(mse)

    slope_standard_error = residual_standard_error / math.sqrt(sxx)
    sum_x2 = sum(xi * xi for xi in x)
    intercept_standard_error = residual_standard_error * math.sqrt(sum_x2 / (n * sxx))

    t_statistic = slope / slope_standard_error if slope_standard_error != 0 else 0.0
    p_value = two_tailed_p_value(t_statistic, df) if df > 0 else 1.0

    return LinearRegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        adjusted_r_squared=adjusted_r_squared,
        correlation_coefficient=pearson_correlation(x, y),
        slope_standard_error=slope_standard_error,
        intercept_standard_error=intercept_standard_error,
        residual_standard_error=residual_standard_error,
        t_statistic=t_statistic,
        p_value=p_value,
        degrees_of_freedom=max(df, 0),
        predictions=predictions,
        residuals=residuals,
    )


# ============================================================================
# Intervals and tests
# ============================================================================


def confidence_interval(
    values: Sequence[float],
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
) -> ConfidenceInterval:
    """
    Confidence interval for the mean using the t-distribution.

    Fewer than 2 values collapse the interval to a point at the single value
    (or 0 for an empty sample).

    Examples:
        >>> ci = confidence_interval([120, 124, 128])
        >>> ci.estimate
        124.0
        >>> ci.lower < ci.estimate < ci.upper
        True
    """
    n = len(values)
    if n < 2:
        point = values[0] if n == 1 else 0
        return ConfidenceInterval(
            estimate=point,
            lower=point,
            upper=point,
            confidence_level=confidence_level,
            margin_of_error=0,
        )

    avg = mean(values)
    se = standard_deviation(values) / math.sqrt(n)
    alpha = 1 - confidence_level
    margin = t_critical_value(alpha / 2, n - 1) * se

    return ConfidenceInterval(
        estimate=avg,
        lower=avg - margin,
        upper=avg + margin,
        confidence_level=confidence_level,
        margin_of_error=margin,
    )


def welch_t_test(sample1: Sequence[float], sample2: Sequence[float]) -> TTestResult:
    """
    Welch's two-sample t-test (unequal variances).

    Degrees of freedom follow the Welch-Satterthwaite equation. Samples with
    fewer than 2 values, or a zero combined standard error, are not testable
    and return t=0, p=1.
    """
    n1 = len(sample1)
    n2 = len(sample2)
    if n1 < 2 or n2 < 2:
        return TTestResult()

    v1 = variance(sample1) / n1
    v2 = variance(sample2) / n2
    se = math.sqrt(v1 + v2)
    if se == 0:
        return TTestResult(degrees_of_freedom=n1 + n2 - 2)

    t_statistic = (mean(sample1) - mean(sample2)) / se
    df = (v1 + v2) ** 2 / (v1 ** 2 / (n1 - 1) + v2 ** 2 / (n2 - 1))
    p_value = two_tailed_p_value(t_statistic, df)

    return TTestResult(
        t_statistic=t_statistic,
        p_value=p_value,
        degrees_of_freedom=df,
        significant=p_value < SIGNIFICANCE_ALPHA,
    )


def cohens_d(sample1: Sequence[float], sample2: Sequence[float]) -> float:
    """
    Cohen's d effect size with a pooled standard deviation.

    Examples:
        >>> round(cohens_d([5, 6, 7], [1, 2, 3]), 2)
        4.0
        >>> cohens_d([1], [2, 3])
        0
    """
    n1 = len(sample1)
    n2 = len(sample2)
    if n1 < 2 or n2 < 2:
        return 0

    pooled_variance = ((n1 - 1) * variance(sample1) + (n2 - 1) * variance(sample2)) / (n1 + n2 - 2)
    pooled_sd = math.sqrt(pooled_variance)
    if pooled_sd == 0:
        return 0

    return (mean(sample1) - mean(sample2)) / pooled_sd


def interpret_effect_size(d: float) -> str:
    """
    Classify |d| as negligible, small, medium or large.

    Examples:
        >>> interpret_effect_size(-0.6)
        'medium'
    """
    magnitude = abs(d)
    if magnitude < EFFECT_SIZE_SMALL:
        return "negligible"
    if magnitude < EFFECT_SIZE_MEDIUM:
        return "small"
    if magnitude < EFFECT_SIZE_LARGE:
        return "medium"
    return "large"


# ============================================================================
# Outliers
# ============================================================================


def detect_outliers(
    values: Sequence[float],
    k: float = OUTLIER_IQR_MULTIPLIER
) -> OutlierResult:
    """
    Detect outliers with Tukey's fences [Q1 - k*IQR, Q3 + k*IQR].

    Samples smaller than 4 have no fences: infinite bounds and no outliers.

    Examples:
        >>> detect_outliers([1, 2, 3, 4, 100]).outliers
        (100,)
    """
    if len(values) < MIN_OUTLIER_SAMPLE:
        return OutlierResult(
            outliers=(),
            outlier_indices=(),
            lower_bound=float("-inf"),
            upper_bound=float("inf"),
        )

    q1 = percentile(values, 25)
    q3 = percentile(values, 75)
    iqr = q3 - q1
    lower_bound = q1 - k * iqr
    upper_bound = q3 + k * iqr

    flagged = [
        (index, value) for index, value in enumerate(values)
        if value < lower_bound or value > upper_bound
    ]

    return OutlierResult(
        outliers=tuple(value for _, value in flagged),
        outlier_indices=tuple(index for index, _ in flagged),
        lower_bound=lower_bound,
        upper_bound=upper_bound,
    )


def filter_outliers(values: Sequence[float], k: float = OUTLIER_IQR_MULTIPLIER) -> List[float]:
    """
    Remove outliers from a sample.

    Examples:
        >>> filter_outliers([1, 2, 3, 4, 100])
        [1, 2, 3, 4]
    """
    flagged = set(detect_outliers(values, k).outlier_indices)
    return [value for index, value in enumerate(values) if index not in flagged]


# ============================================================================
# Smoothing
# ============================================================================


def moving_average(values: Sequence[float], window: int) -> List[float]:
    """
    Simple sliding-window mean.

    A window larger than the sample, or smaller than 1, returns the values
    unchanged.

    Examples:
        >>> moving_average([1, 2, 3, 4, 5], 3)
        [2.0, 3.0, 4.0]
    """
    if len(values) < window or window < 1:
        return list(values)

    return [mean(values[i - window + 1:i + 1]) for i in range(window - 1, len(values))]


def exponential_moving_average(
    values: Sequence[float],
    alpha: float = DEFAULT_EMA_ALPHA
) -> List[float]:
    """
    Exponential smoothing seeded with the first value.

    Examples:
        >>> exponential_moving_average([10, 20], alpha=0.5)
        [10, 15.0]
    """
    if not values:
        return []

    smoothed = [values[0]]
    for value in values[1:]:
        smoothed.append(alpha * value + (1 - alpha) * smoothed[-1])
    return smoothed


def z_score(value: float, avg: float, std: float) -> float:
    """Standard score of ``value``; 0 when ``std`` is 0."""
    if std == 0:
        return 0
    return (value - avg) / std
