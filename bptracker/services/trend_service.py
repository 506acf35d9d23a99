"""
Trend Service for BPTracker

Linear trend of systolic BP over time, week-over-week deltas and the
dashboard summary.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from bptracker.calculations import linear_regression, mean
from bptracker.calculations.constants import (
    DAYS_PER_WEEK,
    MIN_BP_READINGS,
    PROJECTION_DAYS,
    TREND_HIGH_MIN_READINGS,
    TREND_HIGH_R_SQUARED,
    TREND_MEDIUM_MIN_READINGS,
    TREND_MEDIUM_R_SQUARED,
    TREND_STABLE_BAND,
)
from bptracker.models import (
    AnalyticsSummary,
    BloodPressureReading,
    BPTrend,
    CorrelationInsight,
    DietLog,
    ExerciseLog,
    HealthData,
    WeekOverWeekComparison,
    WeekSummary,
)
from bptracker.utils.time_utils import days_between, ensure_utc, utc_now

logger = logging.getLogger(__name__)


def calculate_bp_trend(readings: Sequence[BloodPressureReading]) -> BPTrend:
    """
    Fit systolic BP against days elapsed since the first reading.

    Direction uses a +/-2 mmHg/week stable band. Confidence:
    - high: R^2 > 0.7 and at least 14 readings
    - medium: R^2 > 0.4 and at least 7 readings
    - low: otherwise

    Returns:
        BPTrend; fewer than 5 readings give a stable, low-confidence trend

    Examples:
        >>> calculate_bp_trend([]).direction
        'stable'
    """
    if len(readings) < MIN_BP_READINGS:
        return BPTrend()

    ordered = sorted(readings, key=lambda reading: ensure_utc(reading.measured_at))
    first = ordered[0].measured_at
    x = [days_between(first, reading.measured_at) for reading in ordered]
    y = [reading.systolic for reading in ordered]

    regression = linear_regression(x, y)
    slope = regression.slope
    weekly_change = slope * DAYS_PER_WEEK

    if weekly_change < -TREND_STABLE_BAND:
        direction = "improving"
    elif weekly_change > TREND_STABLE_BAND:
        direction = "worsening"
    else:
        direction = "stable"

    n = len(ordered)
    if regression.r_squared > TREND_HIGH_R_SQUARED and n >= TREND_HIGH_MIN_READINGS:
        confidence = "high"
    elif regression.r_squared > TREND_MEDIUM_R_SQUARED and n >= TREND_MEDIUM_MIN_READINGS:
        confidence = "medium"
    else:
        confidence = "low"

    return BPTrend(
        slope=slope,
        direction=direction,
        weekly_change=weekly_change,
        confidence=confidence,
        projected_change_30_days=slope * PROJECTION_DAYS,
    )


def trend_insight(trend: BPTrend) -> Optional[CorrelationInsight]:
    """Insight for a non-stable trend; None when stable."""
    if trend.direction == "stable":
        return None

    return CorrelationInsight(
        type="positive" if trend.direction == "improving" else "negative",
        title=f"BP Trend: {trend.direction.capitalize()}",
        description=(
            f"Your BP is {trend.direction} by {abs(trend.weekly_change):.1f} mmHg per week. "
            f"At this rate, your BP could change by {abs(trend.projected_change_30_days):.0f} "
            f"mmHg in {PROJECTION_DAYS} days."
        ),
        confidence=trend.confidence,
        metric=trend.weekly_change,
    )


def _summarize_week(
    readings: Sequence[BloodPressureReading],
    exercise: Sequence[ExerciseLog],
    diet: Sequence[DietLog],
    start: datetime,
    end: datetime
) -> WeekSummary:
    def in_window(dt):
        return start < ensure_utc(dt) <= end

    week_readings = [reading for reading in readings if in_window(reading.measured_at)]
    week_exercise = [session for session in exercise if in_window(session.logged_at)]
    week_meals = [meal for meal in diet if in_window(meal.logged_at)]

    return WeekSummary(
        avg_systolic=round(mean([r.systolic for r in week_readings]), 1),
        avg_diastolic=round(mean([r.diastolic for r in week_readings]), 1),
        avg_pulse=round(mean([r.pulse for r in week_readings]), 1),
        exercise_minutes=sum(session.duration_minutes for session in week_exercise),
        meal_count=len(week_meals),
        reading_count=len(week_readings),
    )


def calculate_week_over_week_comparison(
    readings: Sequence[BloodPressureReading],
    exercise: Sequence[ExerciseLog],
    diet: Sequence[DietLog],
    now: Optional[datetime] = None
) -> WeekOverWeekComparison:
    """
    Compare the last 7 days with the 7 days before.

    Windows relative to ``now`` (defaults to current UTC time):
    this week (now-7d, now], last week (now-14d, now-7d].

    Args:
        readings: BP readings
        exercise: Exercise sessions
        diet: Meals
        now: Reference time

    Returns:
        WeekOverWeekComparison with both summaries and signed deltas
        (this week - last week); empty windows average to 0
    """
    reference = ensure_utc(now) if now else utc_now()
    week = timedelta(days=DAYS_PER_WEEK)

    this_week = _summarize_week(readings, exercise, diet, reference - week, reference)
    last_week = _summarize_week(readings, exercise, diet, reference - 2 * week, reference - week)

    changes = {
        "systolic": round(this_week.avg_systolic - last_week.avg_systolic, 1),
        "diastolic": round(this_week.avg_diastolic - last_week.avg_diastolic, 1),
        "pulse": round(this_week.avg_pulse - last_week.avg_pulse, 1),
        "exercise_minutes": this_week.exercise_minutes - last_week.exercise_minutes,
        "meal_count": this_week.meal_count - last_week.meal_count,
        "reading_count": this_week.reading_count - last_week.reading_count,
    }

    return WeekOverWeekComparison(this_week=this_week, last_week=last_week, changes=changes)


def calculate_analytics_summary(data: HealthData) -> AnalyticsSummary:
    """Dashboard summary: rounded averages, totals and adherence."""
    readings = data.blood_pressure
    doses = data.medication_doses

    taken = sum(1 for dose in doses if dose.taken)
    adherence = taken / len(doses) * 100 if doses else 0

    return AnalyticsSummary(
        avg_systolic=round(mean([r.systolic for r in readings])),
        avg_diastolic=round(mean([r.diastolic for r in readings])),
        total_exercise_minutes=sum(session.duration_minutes for session in data.exercise),
        total_meals=len(data.diet),
        medication_adherence=round(adherence),
        data_points=data.data_points,
    )
