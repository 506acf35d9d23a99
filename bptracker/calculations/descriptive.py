"""
Descriptive Statistics

Handles summary statistics for a numeric sample:
- Central tendency (mean, median)
- Dispersion (variance, standard deviation, IQR, coefficient of variation)
- Shape (skewness, kurtosis)
- Percentiles by linear interpolation

Every function is total: empty or tiny samples return 0 instead of raising.
"""

import math
import statistics as stats_module
from typing import List, Sequence

from bptracker.models import DescriptiveStatistics


def mean(values: Sequence[float]) -> float:
    """
    Arithmetic mean.

    Examples:
        >>> mean([1, 2, 3, 4])
        2.5
        >>> mean([])
        0
    """
    if not values:
        return 0
    return stats_module.fmean(values)


def median(values: Sequence[float]) -> float:
    """
    Median of the sample; the average of the two middle values for even lengths.

    Examples:
        >>> median([3, 1, 2])
        2
        >>> median([4, 1, 3, 2])
        2.5
    """
    if not values:
        return 0
    return _median_sorted(sorted(values))


def variance(values: Sequence[float]) -> float:
    """
    Sample variance with Bessel's correction (divisor n - 1).

    Examples:
        >>> variance([2, 4, 4, 4, 5, 5, 7, 9])
        4.571428571428571
        >>> variance([5])
        0
    """
    if len(values) < 2:
        return 0
    avg = mean(values)
    return sum((value - avg) ** 2 for value in values) / (len(values) - 1)


def standard_deviation(values: Sequence[float]) -> float:
    """Sample standard deviation."""
    return math.sqrt(variance(values))


def percentile(values: Sequence[float], p: float) -> float:
    """
    Percentile by linear interpolation between closest ranks.

    Args:
        values: Numeric sample (any order)
        p: Percentile between 0 and 100

    Returns:
        Interpolated percentile; 0 for an empty sample and the single value
        for a one-element sample regardless of ``p``

    Examples:
        >>> percentile([1, 2, 3, 4, 5], 25)
        2
        >>> percentile([10], 90)
        10
    """
    if not values:
        return 0
    if len(values) == 1:
        return values[0]
    return _percentile_sorted(sorted(values), p)


def quartiles(values: Sequence[float]) -> dict:
    """
    First and third quartile plus the interquartile range.

    Examples:
        >>> quartiles([1, 2, 3, 4, 5])
        {'q1': 2, 'q3': 4, 'iqr': 2}
    """
    q1 = percentile(values, 25)
    q3 = percentile(values, 75)
    return {"q1": q1, "q3": q3, "iqr": q3 - q1}


def skewness(values: Sequence[float]) -> float:
    """
    Sample skewness with Fisher's adjustment.

    Needs at least 3 values and a non-zero standard deviation, otherwise 0.
    """
    n = len(values)
    if n < 3:
        return 0
    avg = mean(values)
    std = standard_deviation(values)
    if std == 0:
        return 0
    m3 = sum(((value - avg) / std) ** 3 for value in values) / n
    adjustment = math.sqrt(n * (n - 1)) / (n - 2)
    return adjustment * m3


def kurtosis(values: Sequence[float]) -> float:
    """
    Sample excess kurtosis with Fisher's adjustment.

    Needs at least 4 values and a non-zero standard deviation, otherwise 0.
    """
    n = len(values)
    if n < 4:
        return 0
    avg = mean(values)
    std = standard_deviation(values)
    if std == 0:
        return 0
    m4 = sum(((value - avg) / std) ** 4 for value in values) / n
    return ((n - 1) / ((n - 2) * (n - 3))) * ((n + 1) * m4 - 3 * (n - 1))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """
    Standard deviation as a percentage of |mean|; 0 when the mean is 0.

    Examples:
        >>> round(coefficient_of_variation([90, 100, 110]), 1)
        10.0
    """
    avg = mean(values)
    if avg == 0:
        return 0
    return standard_deviation(values) / abs(avg) * 100


def standard_error(values: Sequence[float]) -> float:
    """Standard error of the mean; 0 for an empty sample."""
    if not values:
        return 0
    return standard_deviation(values) / math.sqrt(len(values))


def calculate_descriptive_statistics(values: Sequence[float]) -> DescriptiveStatistics:
    """
    Calculate a full descriptive snapshot of a sample.

    Sorts a single copy of the input; the caller's sequence is never mutated.

    Args:
        values: Numeric sample

    Returns:
        DescriptiveStatistics; all fields are 0 for an empty sample

    Examples:
        >>> stats = calculate_descriptive_statistics([120, 125, 130, 135, 140])
        >>> stats.mean, stats.median, stats.iqr
        (130.0, 130, 10)
    """
    if not values:
        return DescriptiveStatistics()

    ordered: List[float] = sorted(values)
    n = len(ordered)
    avg = mean(ordered)
    var = variance(ordered)
    std = math.sqrt(var)

    if n == 1:
        q1 = q3 = ordered[0]
    else:
        q1 = _percentile_sorted(ordered, 25)
        q3 = _percentile_sorted(ordered, 75)

    return DescriptiveStatistics(
        n=n,
        mean=avg,
        median=_median_sorted(ordered),
        standard_deviation=std,
        variance=var,
        min=ordered[0],
        max=ordered[-1],
        range=ordered[-1] - ordered[0],
        q1=q1,
        q3=q3,
        iqr=q3 - q1,
        coefficient_of_variation=(std / abs(avg) * 100) if avg != 0 else 0,
        skewness=skewness(ordered),
        kurtosis=kurtosis(ordered),
        standard_error=std / math.sqrt(n),
    )


def _median_sorted(ordered: Sequence[float]) -> float:
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def _percentile_sorted(ordered: Sequence[float], p: float) -> float:
    index = (p / 100) * (len(ordered) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return ordered[lower]
    fraction = index - lower
    return ordered[lower] * (1 - fraction) + ordered[upper] * fraction
