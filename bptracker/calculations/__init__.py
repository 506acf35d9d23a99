"""
BPTracker Calculation Module

Consolidated statistics for blood pressure analytics: descriptive summaries,
inferential tests, period comparisons and reading classification.

This module is the single source of truth for the numeric core; the insight
services build on it and never reimplement a formula.

Usage:
    from bptracker.calculations import calculate_descriptive_statistics, linear_regression
    from bptracker.calculations.constants import SIGNIFICANT_BP_DIFFERENCE
"""

# Descriptive statistics
from .descriptive import (
    calculate_descriptive_statistics,
    coefficient_of_variation,
    kurtosis,
    mean,
    median,
    percentile,
    quartiles,
    skewness,
    standard_deviation,
    standard_error,
    variance,
)

# Inferential statistics
from .inferential import (
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

# Period comparison
from .comparison import compare_periods

# Blood pressure
from .blood_pressure import (
    classify_blood_pressure,
    get_classification_label,
    is_high_reading,
    mean_arterial_pressure,
)

__all__ = [
    # Descriptive
    "mean",
    "median",
    "variance",
    "standard_deviation",
    "percentile",
    "quartiles",
    "skewness",
    "kurtosis",
    "coefficient_of_variation",
    "standard_error",
    "calculate_descriptive_statistics",
    # Inferential
    "pearson_correlation",
    "calculate_pearson_correlation",
    "linear_regression",
    "confidence_interval",
    "welch_t_test",
    "cohens_d",
    "interpret_effect_size",
    "detect_outliers",
    "filter_outliers",
    "moving_average",
    "exponential_moving_average",
    "z_score",
    "two_tailed_p_value",
    "t_critical_value",
    # Comparison
    "compare_periods",
    # Blood pressure
    "classify_blood_pressure",
    "get_classification_label",
    "mean_arterial_pressure",
    "is_high_reading",
]
