"""
Property-based tests using Hypothesis.

These tests generate many inputs to check invariants of the statistics core
and insight engine that should always hold true.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from hypothesis import HealthCheck, assume, given, settings, strategies as st

from bptracker.calculations import (
    calculate_descriptive_statistics,
    calculate_pearson_correlation,
    compare_periods,
    confidence_interval,
    detect_outliers,
    linear_regression,
    mean,
    pearson_correlation,
    t_critical_value,
    two_tailed_p_value,
)
from bptracker.models import CorrelationInsight
from bptracker.services.correlation_service import calculate_exercise_bp_correlation
from bptracker.services.data_quality_service import calculate_data_quality_score
from bptracker.services.insight_service import CONFIDENCE_ORDER, TYPE_ORDER, rank_insights
from bptracker.services.streak_service import calculate_streak
from tests.factories import (
    BloodPressureReadingFactory,
    DietLogFactory,
    ExerciseLogFactory,
    MedicationDoseFactory,
    at,
    health_data,
)

values_strategy = st.lists(st.integers(min_value=-1000, max_value=1000), min_size=1, max_size=50)
sample_strategy = st.lists(st.integers(min_value=60, max_value=220), min_size=2, max_size=30)


# ============================================================================
# Descriptive Statistics Property Tests
# ============================================================================

class TestDescriptiveProperties:
    """Property-based tests for descriptive statistics."""

    @given(values_strategy)
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_quartiles_ordered(self, values):
        """
        Property: min <= q1 <= median <= q3 <= max.
        """
        stats = calculate_descriptive_statistics(values)
        assert stats.min <= stats.q1 <= stats.median <= stats.q3 <= stats.max
        assert stats.iqr >= 0
        assert stats.range >= 0

    @given(values_strategy)
    def test_mean_within_bounds(self, values):
        """
        Property: The mean lies between the minimum and maximum.
        """
        assert min(values) <= mean(values) <= max(values)

    @given(values_strategy)
    def test_mean_order_invariant(self, values):
        """
        Property: Reordering a sample does not change its mean.
        """
        assert mean(values) == mean(sorted(values))
        assert mean(values) == mean(list(reversed(values)))

    @given(values_strategy, st.integers(min_value=2, max_value=5))
    def test_mean_replication_invariant(self, values, copies):
        """
        Property: Repeating the sample does not change its mean.
        """
        assert mean(values * copies) == pytest.approx(mean(values))

    @given(values_strategy)
    def test_spread_non_negative(self, values):
        stats = calculate_descriptive_statistics(values)
        assert stats.variance >= 0
        assert stats.standard_deviation >= 0
        assert stats.standard_error >= 0


# ============================================================================
# Correlation and Regression Property Tests
# ============================================================================

class TestCorrelationProperties:
    """Property-based tests for correlation and regression."""

    @given(st.lists(st.integers(min_value=-500, max_value=500), min_size=2, max_size=40))
    def test_self_correlation(self, x):
        """
        Property: A series correlates perfectly with itself and its negation.
        """
        assume(len(set(x)) > 1)
        negated = [-value for value in x]
        assert pearson_correlation(x, x) == pytest.approx(1.0)
        assert pearson_correlation(x, negated) == pytest.approx(-1.0)
        assert calculate_pearson_correlation(x, x) == pytest.approx(1.0)
        assert calculate_pearson_correlation(x, negated) == pytest.approx(-1.0)

    @given(st.lists(st.tuples(st.integers(-500, 500), st.integers(-500, 500)), min_size=2, max_size=40))
    def test_correlation_bounded(self, pairs):
        """
        Property: Correlation always lies in [-1, 1].
        """
        x = [a for a, _ in pairs]
        y = [b for _, b in pairs]
        assert -1.0 - 1e-9 <= pearson_correlation(x, y) <= 1.0 + 1e-9
        assert -1.0 <= calculate_pearson_correlation(x, y) <= 1.0

    @given(
        st.lists(st.integers(min_value=-100, max_value=100), min_size=3, max_size=30),
        st.integers(min_value=-10, max_value=10),
        st.integers(min_value=-200, max_value=200),
    )
    @settings(suppress_health_check=[HealthCheck.too_slow, HealthCheck.filter_too_much])
    def test_regression_recovers_line(self, x, slope, intercept):
        """
        Property: Regression on collinear points recovers the line exactly.
        """
        assume(len(set(x)) > 1)
        y = [slope * xi + intercept for xi in x]
        fit = linear_regression(x, y)
        assert fit.slope == pytest.approx(slope, abs=1e-6)
        assert fit.intercept == pytest.approx(intercept, abs=1e-6)
        if slope != 0:
            assert fit.r_squared == pytest.approx(1.0, abs=1e-6)


# ============================================================================
# Inference Property Tests
# ============================================================================

class TestInferenceProperties:
    """Property-based tests for intervals, tests and outliers."""

    @given(sample_strategy, st.sampled_from([0.8, 0.9, 0.95, 0.99]))
    def test_confidence_interval_symmetric(self, values, level):
        """
        Property: The interval is centered on the mean and contains it.
        """
        ci = confidence_interval(values, level)
        assert ci.lower <= ci.estimate <= ci.upper
        assert ci.estimate - ci.lower == pytest.approx(ci.upper - ci.estimate, abs=1e-9)
        assert ci.margin_of_error >= 0

    @given(sample_strategy, sample_strategy)
    def test_compare_periods_swap_symmetry(self, period1, period2):
        """
        Property: Swapping periods negates the difference and keeps the p-value.
        """
        forward = compare_periods(period1, period2)
        backward = compare_periods(period2, period1)
        assert backward.mean_difference == pytest.approx(-forward.mean_difference, abs=1e-9)
        assert backward.effect_size == pytest.approx(-forward.effect_size, abs=1e-9)
        assert backward.t_test.p_value == pytest.approx(forward.t_test.p_value)

    @given(st.floats(min_value=0, max_value=50), st.floats(min_value=0, max_value=50), st.integers(1, 100))
    def test_p_value_monotonic(self, t1, t2, df):
        """
        Property: Larger |t| never gives a larger p-value, and p stays in (0, 1].
        """
        low, high = sorted((t1, t2))
        p_low = two_tailed_p_value(low, df)
        p_high = two_tailed_p_value(high, df)
        assert 0 < p_high <= 1
        assert p_high <= p_low + 1e-12

    @given(
        st.integers(min_value=1, max_value=500),
        st.integers(min_value=1, max_value=500),
        st.sampled_from([0.005, 0.025, 0.05, 0.1]),
    )
    def test_critical_value_shrinks_with_df(self, df1, df2, alpha):
        """
        Property: Fewer degrees of freedom give a larger critical value.
        """
        assume(df1 != df2)
        low, high = sorted((df1, df2))
        assert t_critical_value(alpha, low) > t_critical_value(alpha, high)

    @given(st.integers(min_value=1, max_value=500))
    def test_critical_value_shrinks_with_alpha(self, df):
        """
        Property: A smaller tail probability gives a larger critical value.
        """
        assert t_critical_value(0.025, df) > t_critical_value(0.05, df) > 0

    @given(st.lists(st.integers(-1000, 1000), max_size=3))
    def test_small_samples_have_no_outliers(self, values):
        """
        Property: Fewer than 4 values never produce outliers.
        """
        assert detect_outliers(values).outliers == ()

    @given(st.lists(st.integers(-1000, 1000), min_size=4, max_size=50))
    def test_outliers_outside_fences(self, values):
        """
        Property: Flagged values lie outside the fences, the rest inside.
        """
        result = detect_outliers(values)
        flagged = set(result.outlier_indices)
        for index, value in enumerate(values):
            outside = value < result.lower_bound or value > result.upper_bound
            assert outside == (index in flagged)


# ============================================================================
# Insight Engine Property Tests
# ============================================================================

insight_strategy = st.builds(
    CorrelationInsight,
    type=st.sampled_from(["positive", "negative", "neutral"]),
    title=st.text(min_size=1, max_size=20),
    description=st.just(""),
    confidence=st.sampled_from(["high", "medium", "low"]),
)


class TestInsightEngineProperties:
    """Property-based tests for ranking, streaks and scores."""

    @given(st.lists(insight_strategy, max_size=20))
    def test_ranking_sorted_permutation(self, insights):
        """
        Property: Ranking reorders without adding or dropping insights.
        """
        ranked = rank_insights(insights)
        assert sorted(map(repr, ranked)) == sorted(map(repr, insights))
        keys = [(TYPE_ORDER[i.type], CONFIDENCE_ORDER[i.confidence]) for i in ranked]
        assert keys == sorted(keys)

    @given(st.sets(st.integers(min_value=0, max_value=60), max_size=40))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_streak_bounds(self, offsets):
        """
        Property: Current streak never exceeds the longest, and progress is a percentage.
        """
        today = date(2024, 3, 15)
        readings = [
            BloodPressureReadingFactory.build(
                measured_at=datetime(2024, 3, 15, 9, tzinfo=timezone.utc) - timedelta(days=offset)
            )
            for offset in offsets
        ]
        streak = calculate_streak(readings, today=today)
        assert 0 <= streak.current_streak <= streak.longest_streak or not readings
        assert 0 <= streak.milestone_progress <= 100
        assert streak.days_until_milestone >= 0

    @given(
        st.integers(0, 40),
        st.integers(0, 40),
        st.integers(0, 120),
        st.lists(st.booleans(), max_size=40),
        st.integers(1, 30),
    )
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_quality_score_is_percentage(self, bp_days, exercise_days, meals, taken, window):
        """
        Property: The quality score and every component stay within 0-100.
        """
        data = health_data(
            bp=BloodPressureReadingFactory.build_daily([150] * bp_days),
            exercise=ExerciseLogFactory.build_on_days(range(exercise_days)),
            diet=[DietLogFactory.build(logged_at=at(i // 3, 8 + i % 3)) for i in range(meals)],
            doses=[MedicationDoseFactory.build(scheduled_time=at(i), was_taken=flag) for i, flag in enumerate(taken)],
        )
        score = calculate_data_quality_score(data, days=window)
        assert 0 <= score.overall <= 100
        assert all(0 <= value <= 100 for value in score.breakdown.values())

    @given(
        st.lists(st.integers(90, 200), min_size=5, max_size=20),
        st.lists(st.integers(0, 120), min_size=3, max_size=20),
    )
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_exercise_correlation_bounded(self, systolic, minutes):
        """
        Property: Sparse or noisy data never raises and r stays in [-1, 1].
        """
        bp = BloodPressureReadingFactory.build_daily(systolic)
        exercise = [
            ExerciseLogFactory.build(duration_minutes=value, logged_at=at(day, 7))
            for day, value in enumerate(minutes)
        ]
        result = calculate_exercise_bp_correlation(bp, exercise)
        assert -1.0 <= result.correlation <= 1.0
        if result.insight is not None:
            assert result.insight.type in ("positive", "negative", "neutral")
            assert result.insight.confidence in ("high", "medium", "low")
