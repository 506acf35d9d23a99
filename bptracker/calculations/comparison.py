"""
Period Comparison

Before/after comparison of two samples (e.g. last month vs this month of
systolic readings) combining descriptive and inferential results.
"""

import math
from typing import Sequence

from bptracker.models import ConfidenceInterval, PeriodComparisonResult

from .constants import DEFAULT_CONFIDENCE_LEVEL
from .descriptive import calculate_descriptive_statistics
from .inferential import cohens_d, interpret_effect_size, t_critical_value, welch_t_test


def compare_periods(
    period1: Sequence[float],
    period2: Sequence[float]
) -> PeriodComparisonResult:
    """
    Compare two periods statistically.

    The mean difference, effect size and t statistic are signed as
    period2 - period1; swapping the arguments flips their sign and leaves the
    p-value unchanged.

    Args:
        period1: Values from the earlier (baseline) period
        period2: Values from the later period

    Returns:
        PeriodComparisonResult with both snapshots, mean difference, percent
        change vs period1, Cohen's d and its label, a 95% CI of the
        difference and a Welch t-test

    Examples:
        >>> result = compare_periods([140, 142, 138], [130, 132, 128])
        >>> result.mean_difference
        -10.0
        >>> result.effect_size_interpretation
        'large'
    """
    stats1 = calculate_descriptive_statistics(period1)
    stats2 = calculate_descriptive_statistics(period2)

    mean_difference = stats2.mean - stats1.mean
    if stats1.mean != 0:
        percent_change = mean_difference / abs(stats1.mean) * 100
    else:
        percent_change = 0

    effect_size = cohens_d(period2, period1)
    t_test = welch_t_test(period2, period1)

    se_difference = math.sqrt(stats1.standard_error ** 2 + stats2.standard_error ** 2)
    df = max(min(stats1.n - 1, stats2.n - 1), 1)
    alpha = 1 - DEFAULT_CONFIDENCE_LEVEL
    margin = t_critical_value(alpha / 2, df) * se_difference

    return PeriodComparisonResult(
        period1=stats1,
        period2=stats2,
        mean_difference=mean_difference,
        percent_change=percent_change,
        effect_size=effect_size,
        effect_size_interpretation=interpret_effect_size(effect_size),
        difference_ci=ConfidenceInterval(
            estimate=mean_difference,
            lower=mean_difference - margin,
            upper=mean_difference + margin,
            confidence_level=DEFAULT_CONFIDENCE_LEVEL,
            margin_of_error=margin,
        ),
        t_test=t_test,
    )
