"""
Correlation Service for BPTracker

Day-bucketed correlations between blood pressure and lifestyle series:
exercise minutes, meal counts and medication adherence. Each analysis
returns a CorrelationResult with at most one insight; sparse data yields an
empty result rather than an error.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from bptracker.calculations import calculate_pearson_correlation, mean, mean_arterial_pressure
from bptracker.calculations.constants import (
    AFTERNOON_START_HOUR,
    DIET_CORRELATION_THRESHOLD,
    EVENING_MEAL_HOUR,
    EVENING_START_HOUR,
    HIGH_SODIUM_MG,
    LARGE_BP_DIFFERENCE,
    LOW_ADHERENCE_PERCENT,
    MIN_BP_READINGS,
    MIN_COMMON_DAYS,
    MIN_DIET_ENTRIES,
    MIN_EXERCISE_ENTRIES,
    MIN_GROUP_DAYS,
    MIN_GROUP_READINGS,
    MIN_MEDICATION_DOSES,
    MODERATE_CORRELATION,
    MORNING_START_HOUR,
    POST_EXERCISE_WINDOW_HOURS,
    SIGNIFICANT_BP_DIFFERENCE,
    STRONG_CORRELATION,
)
from bptracker.models import (
    BloodPressureReading,
    CorrelationInsight,
    CorrelationResult,
    DietLog,
    ExerciseLog,
    MedicationDose,
)
from bptracker.utils.time_utils import day_key, ensure_utc, hour_of_day, next_day_key

logger = logging.getLogger(__name__)

TIME_OF_DAY_BUCKETS = ("morning", "afternoon", "evening")


# ============================================================================
# Bucketing
# ============================================================================


def time_of_day(dt: datetime) -> str:
    """
    Bucket a timestamp into morning (05-12h), afternoon (12-17h) or evening.

    Night hours fall into the evening bucket.
    """
    hour = hour_of_day(dt)
    if MORNING_START_HOUR <= hour < AFTERNOON_START_HOUR:
        return "morning"
    if AFTERNOON_START_HOUR <= hour < EVENING_START_HOUR:
        return "afternoon"
    return "evening"


def bucket_bp_by_day(readings: Iterable[BloodPressureReading]) -> Dict[str, dict]:
    """
    Average systolic, diastolic and pulse per calendar day.

    Returns:
        {day_key: {"systolic", "diastolic", "pulse", "count"}} in ascending day order
    """
    totals = defaultdict(lambda: {"systolic": 0.0, "diastolic": 0.0, "pulse": 0.0, "count": 0})
    for reading in readings:
        bucket = totals[day_key(reading.measured_at)]
        bucket["systolic"] += reading.systolic
        bucket["diastolic"] += reading.diastolic
        bucket["pulse"] += reading.pulse
        bucket["count"] += 1

    return {
        day: {
            "systolic": bucket["systolic"] / bucket["count"],
            "diastolic": bucket["diastolic"] / bucket["count"],
            "pulse": bucket["pulse"] / bucket["count"],
            "count": bucket["count"],
        }
        for day, bucket in sorted(totals.items())
    }


def daily_map_composite(readings: Iterable[BloodPressureReading]) -> Dict[str, float]:
    """MAP-like composite of each day's average systolic and diastolic."""
    return {
        day: mean_arterial_pressure(bucket["systolic"], bucket["diastolic"])
        for day, bucket in bucket_bp_by_day(readings).items()
    }


def daily_systolic(readings: Iterable[BloodPressureReading]) -> Dict[str, float]:
    """Average systolic per day."""
    return {day: bucket["systolic"] for day, bucket in bucket_bp_by_day(readings).items()}


def bucket_exercise_minutes(exercise: Iterable[ExerciseLog]) -> Dict[str, float]:
    """Total exercise minutes per day."""
    totals: Dict[str, float] = defaultdict(float)
    for session in exercise:
        totals[day_key(session.logged_at)] += session.duration_minutes
    return dict(sorted(totals.items()))


def bucket_meal_counts(diet: Iterable[DietLog]) -> Dict[str, int]:
    """Number of logged meals per day."""
    counts: Dict[str, int] = defaultdict(int)
    for meal in diet:
        counts[day_key(meal.logged_at)] += 1
    return dict(sorted(counts.items()))


def bucket_adherence(doses: Iterable[MedicationDose]) -> Dict[str, dict]:
    """
    Taken/total doses per scheduled day.

    Returns:
        {day_key: {"taken", "total", "percent"}} in ascending day order
    """
    totals = defaultdict(lambda: {"taken": 0, "total": 0})
    for dose in doses:
        bucket = totals[day_key(dose.scheduled_time)]
        bucket["taken"] += 1 if dose.taken else 0
        bucket["total"] += 1

    return {
        day: {**bucket, "percent": bucket["taken"] / bucket["total"] * 100}
        for day, bucket in sorted(totals.items())
    }


def common_days(first: Dict[str, object], second: Dict[str, object]) -> List[str]:
    """Ascending days present in both buckets."""
    return sorted(set(first) & set(second))


def group_difference(
    values_by_day: Dict[str, float],
    group_days: Iterable[str],
    other_days: Iterable[str],
    min_days: int = MIN_GROUP_DAYS
) -> Optional[float]:
    """
    Mean of ``group_days`` minus mean of ``other_days``.

    Only days present in ``values_by_day`` count; None unless both sides have
    at least ``min_days``.
    """
    group = [values_by_day[day] for day in group_days if day in values_by_day]
    other = [values_by_day[day] for day in other_days if day in values_by_day]
    if len(group) < min_days or len(other) < min_days:
        return None
    return mean(group) - mean(other)


# ============================================================================
# Exercise
# ============================================================================


def calculate_exercise_bp_correlation(
    bp: Sequence[BloodPressureReading],
    exercise: Sequence[ExerciseLog]
) -> CorrelationResult:
    """
    Correlate daily BP (MAP composite) with daily exercise minutes.

    Findings:
        rest_day_difference: mean MAP on rest days minus exercise days
        post_exercise_elevation: systolic within 4h after a session minus other readings
        best_time_of_day: session bucket whose days show the lowest MAP

    Returns:
        CorrelationResult; the insight favours a large rest-day effect over
        the correlation narrative
    """
    if len(bp) < MIN_BP_READINGS or len(exercise) < MIN_EXERCISE_ENTRIES:
        return CorrelationResult()

    map_by_day = daily_map_composite(bp)
    minutes_by_day = bucket_exercise_minutes(exercise)
    days = common_days(map_by_day, minutes_by_day)
    if len(days) < MIN_COMMON_DAYS:
        return CorrelationResult(common_days=len(days))

    bp_values = [map_by_day[day] for day in days]
    exercise_values = [minutes_by_day[day] for day in days]
    correlation = calculate_pearson_correlation(bp_values, exercise_values)

    exercise_days = [day for day in map_by_day if minutes_by_day.get(day, 0) > 0]
    rest_days = [day for day in map_by_day if minutes_by_day.get(day, 0) <= 0]

    findings = {
        "rest_day_difference": group_difference(map_by_day, rest_days, exercise_days),
        "post_exercise_elevation": _post_exercise_elevation(bp, exercise),
        "best_time_of_day": _best_time_of_day(map_by_day, exercise),
    }

    insight = _select_exercise_insight(correlation, findings, exercise_values)
    logger.debug(
        f"Exercise correlation r={correlation:.3f} over {len(days)} days, "
        f"insight={insight.title if insight else None}"
    )
    return CorrelationResult(
        correlation=correlation,
        insight=insight,
        common_days=len(days),
        findings=findings,
    )


def _post_exercise_elevation(
    bp: Sequence[BloodPressureReading],
    exercise: Sequence[ExerciseLog]
) -> Optional[float]:
    window = timedelta(hours=POST_EXERCISE_WINDOW_HOURS)
    session_starts = [ensure_utc(session.logged_at) for session in exercise]

    post_exercise = []
    other = []
    for reading in bp:
        measured = ensure_utc(reading.measured_at)
        if any(start <= measured <= start + window for start in session_starts):
            post_exercise.append(reading.systolic)
        else:
            other.append(reading.systolic)

    if len(post_exercise) < MIN_GROUP_READINGS or len(other) < MIN_GROUP_READINGS:
        return None
    return mean(post_exercise) - mean(other)


def _best_time_of_day(
    map_by_day: Dict[str, float],
    exercise: Sequence[ExerciseLog]
) -> Optional[str]:
    days_by_bucket = defaultdict(set)
    for session in exercise:
        day = day_key(session.logged_at)
        if day in map_by_day:
            days_by_bucket[time_of_day(session.logged_at)].add(day)

    bucket_means = {
        bucket: mean([map_by_day[day] for day in days_by_bucket[bucket]])
        for bucket in TIME_OF_DAY_BUCKETS
        if days_by_bucket.get(bucket)
    }
    if len(bucket_means) < 2:
        return None
    return min(bucket_means, key=bucket_means.get)


def _select_exercise_insight(
    correlation: float,
    findings: dict,
    exercise_values: List[float]
) -> Optional[CorrelationInsight]:
    rest_day_difference = findings["rest_day_difference"]
    best_time = findings["best_time_of_day"]

    if rest_day_difference is not None and rest_day_difference > SIGNIFICANT_BP_DIFFERENCE:
        description = (
            f"Your blood pressure averages {rest_day_difference:.1f} mmHg lower on days "
            f"you exercise than on rest days."
        )
        if best_time:
            description += f" Your best days follow {best_time} workouts."
        return CorrelationInsight(
            type="positive",
            title="Exercise Days Show Lower Blood Pressure",
            description=description,
            confidence="high" if rest_day_difference > LARGE_BP_DIFFERENCE else "medium",
            metric=rest_day_difference,
        )

    if correlation < -MODERATE_CORRELATION:
        avg_exercise = mean(exercise_values)
        return CorrelationInsight(
            type="positive",
            title="Exercise Reduces Blood Pressure",
            description=(
                f"Your data shows exercise is associated with lower blood pressure. On days "
                f"with {round(avg_exercise)} minutes of exercise, your BP tends to be lower."
            ),
            confidence="high" if abs(correlation) > STRONG_CORRELATION else "medium",
            metric=abs(correlation),
        )

    if correlation > MODERATE_CORRELATION:
        return CorrelationInsight(
            type="neutral",
            title="Exercise Timing May Matter",
            description=(
                "Your BP readings after exercise show temporary elevation, which is normal. "
                "Consider measuring BP before exercise or several hours after."
            ),
            confidence="medium",
            metric=correlation,
        )

    return None


# ============================================================================
# Rest days
# ============================================================================


def systolic_rest_day_difference(
    bp: Sequence[BloodPressureReading],
    exercise: Sequence[ExerciseLog]
) -> Optional[float]:
    """
    Mean daily systolic on rest days minus exercise days.

    None unless both groups have at least 2 BP days.
    """
    systolic_by_day = daily_systolic(bp)
    minutes_by_day = bucket_exercise_minutes(exercise)
    exercise_days = [day for day in systolic_by_day if minutes_by_day.get(day, 0) > 0]
    rest_days = [day for day in systolic_by_day if minutes_by_day.get(day, 0) <= 0]
    return group_difference(systolic_by_day, rest_days, exercise_days)


def calculate_rest_day_impact(
    bp: Sequence[BloodPressureReading],
    exercise: Sequence[ExerciseLog]
) -> Optional[CorrelationInsight]:
    """
    Compare systolic BP on exercise days with rest days.

    Reports only a difference of at least 5 mmHg between groups of 2+ days.
    """
    difference = systolic_rest_day_difference(bp, exercise)
    if difference is None or abs(difference) < SIGNIFICANT_BP_DIFFERENCE:
        return None

    if difference > 0:
        return CorrelationInsight(
            type="negative",
            title="Rest Days Raise Your Blood Pressure",
            description=(
                f"Your systolic BP averages {difference:.0f} mmHg higher on days without "
                f"exercise. Light activity such as a short walk may help on rest days."
            ),
            confidence="high" if difference >= LARGE_BP_DIFFERENCE else "medium",
            metric=difference,
        )

    return CorrelationInsight(
        type="neutral",
        title="BP Higher on Exercise Days",
        description=(
            f"Your systolic BP averages {abs(difference):.0f} mmHg higher on days you "
            f"exercise. Readings taken soon after a workout run high; try measuring "
            f"before exercising."
        ),
        confidence="medium",
        metric=difference,
    )


# ============================================================================
# Diet
# ============================================================================


def calculate_diet_bp_correlation(
    bp: Sequence[BloodPressureReading],
    diet: Sequence[DietLog]
) -> CorrelationResult:
    """
    Correlate daily systolic BP with daily meal counts.

    Findings:
        meal_type_differences: per meal type, systolic on days with that
            meal minus other logged days
        evening_meal_difference: days with a meal at or after 17h minus other days
        sodium_next_day_impact: see analyze_sodium_next_day_impact

    Selection order: meal-type effect, late-meal effect, logging pattern.
    """
    if len(bp) < MIN_BP_READINGS or len(diet) < MIN_DIET_ENTRIES:
        return CorrelationResult()

    systolic_by_day = daily_systolic(bp)
    meals_by_day = bucket_meal_counts(diet)
    days = common_days(systolic_by_day, meals_by_day)
    if len(days) < MIN_COMMON_DAYS:
        return CorrelationResult(common_days=len(days))

    bp_values = [systolic_by_day[day] for day in days]
    meal_counts = [meals_by_day[day] for day in days]
    correlation = calculate_pearson_correlation(bp_values, meal_counts)

    findings = {
        "meal_type_differences": _meal_type_differences(systolic_by_day, diet, days),
        "evening_meal_difference": _evening_meal_difference(systolic_by_day, diet, days),
        "sodium_next_day_impact": analyze_sodium_next_day_impact(bp, diet),
    }

    insight = _select_diet_insight(correlation, findings, meal_counts)
    return CorrelationResult(
        correlation=correlation,
        insight=insight,
        common_days=len(days),
        findings=findings,
    )


def _meal_type_differences(
    systolic_by_day: Dict[str, float],
    diet: Sequence[DietLog],
    days: List[str]
) -> Dict[str, float]:
    days_by_type = defaultdict(set)
    for meal in diet:
        days_by_type[meal.meal_type.strip().lower()].add(day_key(meal.logged_at))

    differences = {}
    for meal_type in sorted(days_by_type):
        with_meal = [day for day in days if day in days_by_type[meal_type]]
        without_meal = [day for day in days if day not in days_by_type[meal_type]]
        difference = group_difference(systolic_by_day, with_meal, without_meal)
        if difference is not None:
            differences[meal_type] = difference
    return differences


def _evening_meal_difference(
    systolic_by_day: Dict[str, float],
    diet: Sequence[DietLog],
    days: List[str]
) -> Optional[float]:
    evening_days = {
        day_key(meal.logged_at) for meal in diet
        if hour_of_day(meal.logged_at) >= EVENING_MEAL_HOUR
    }
    with_evening = [day for day in days if day in evening_days]
    without_evening = [day for day in days if day not in evening_days]
    return group_difference(systolic_by_day, with_evening, without_evening)


def _select_diet_insight(
    correlation: float,
    findings: dict,
    meal_counts: List[int]
) -> Optional[CorrelationInsight]:
    meal_type_differences = findings["meal_type_differences"]
    if meal_type_differences:
        meal_type, difference = max(meal_type_differences.items(), key=lambda item: item[1])
        if difference >= SIGNIFICANT_BP_DIFFERENCE:
            label = meal_type.replace("_", " ").title()
            return CorrelationInsight(
                type="negative",
                title=f"{label} Days Linked to Higher BP",
                description=(
                    f"Your systolic BP is {difference:.0f} mmHg higher on days you log "
                    f"{label.lower()}. Look at what those meals have in common, "
                    f"especially salt content."
                ),
                confidence="high" if difference >= LARGE_BP_DIFFERENCE else "medium",
                metric=difference,
            )

    evening_difference = findings["evening_meal_difference"]
    if evening_difference is not None and evening_difference >= SIGNIFICANT_BP_DIFFERENCE:
        return CorrelationInsight(
            type="negative",
            title="Late Meals May Raise Your BP",
            description=(
                f"On days with a meal after {EVENING_MEAL_HOUR}:00 your systolic BP is "
                f"{evening_difference:.0f} mmHg higher. Eating earlier in the evening may help."
            ),
            confidence="medium",
            metric=evening_difference,
        )

    if correlation > DIET_CORRELATION_THRESHOLD:
        return CorrelationInsight(
            type="neutral",
            title="Diet Logging Patterns Detected",
            description=(
                f"You log an average of {mean(meal_counts):.1f} meals per day. Consistent "
                f"tracking helps identify patterns. Consider noting sodium content in your meals."
            ),
            confidence="medium",
            metric=correlation,
        )

    return None


def analyze_sodium_next_day_impact(
    bp: Sequence[BloodPressureReading],
    diet: Sequence[DietLog]
) -> Optional[dict]:
    """
    Next-day systolic after high-sodium days vs other sodium-tracked days.

    Inert until meals carry ``sodium_mg``: returns None when no entry has it.
    A day is high-sodium when its logged total reaches 2300 mg.
    """
    tracked = [meal for meal in diet if meal.sodium_mg is not None]
    if not tracked:
        return None

    sodium_by_day: Dict[str, float] = defaultdict(float)
    for meal in tracked:
        sodium_by_day[day_key(meal.logged_at)] += meal.sodium_mg

    high_days = [day for day, total in sodium_by_day.items() if total >= HIGH_SODIUM_MG]
    other_days = [day for day, total in sodium_by_day.items() if total < HIGH_SODIUM_MG]

    systolic_by_day = daily_systolic(bp)
    difference = group_difference(
        systolic_by_day,
        [next_day_key(day) for day in high_days],
        [next_day_key(day) for day in other_days],
    )

    return {
        "high_sodium_days": len(high_days),
        "other_days": len(other_days),
        "next_day_difference": difference,
    }


# ============================================================================
# Medication
# ============================================================================


def calculate_medication_bp_correlation(
    bp: Sequence[BloodPressureReading],
    doses: Sequence[MedicationDose]
) -> CorrelationResult:
    """
    Correlate daily systolic BP with daily adherence percentage.

    A weak correlation with average adherence under 80% still raises an
    adherence warning.
    """
    if len(bp) < MIN_BP_READINGS or len(doses) < MIN_MEDICATION_DOSES:
        return CorrelationResult()

    systolic_by_day = daily_systolic(bp)
    adherence_by_day = bucket_adherence(doses)
    days = common_days(systolic_by_day, adherence_by_day)
    if len(days) < MIN_COMMON_DAYS:
        return CorrelationResult(common_days=len(days))

    bp_values = [systolic_by_day[day] for day in days]
    adherence_values = [adherence_by_day[day]["percent"] for day in days]
    correlation = calculate_pearson_correlation(bp_values, adherence_values)

    avg_adherence = mean(adherence_values)
    taken_doses = sum(bucket["taken"] for bucket in adherence_by_day.values())
    total_doses = sum(bucket["total"] for bucket in adherence_by_day.values())

    insight = None
    if correlation < -MODERATE_CORRELATION:
        insight = CorrelationInsight(
            type="positive",
            title="Medication Adherence Helps",
            description=(
                f"Your data shows {avg_adherence:.0f}% medication adherence is associated "
                f"with better blood pressure control. Keep up the great work!"
            ),
            confidence="high" if abs(correlation) > STRONG_CORRELATION else "medium",
            metric=avg_adherence,
        )
    elif correlation > MODERATE_CORRELATION:
        insight = CorrelationInsight(
            type="neutral",
            title="Medication Effectiveness",
            description=(
                f"You've taken {taken_doses} of {total_doses} doses. If your BP isn't "
                f"improving as expected, consult your doctor about dosage or timing adjustments."
            ),
            confidence="medium",
            metric=avg_adherence,
        )
    elif avg_adherence < LOW_ADHERENCE_PERCENT:
        insight = CorrelationInsight(
            type="negative",
            title="Improve Medication Adherence",
            description=(
                f"Your adherence rate is {avg_adherence:.0f}%. Consistent medication use is "
                f"crucial for blood pressure control. Set reminders to help."
            ),
            confidence="high",
            metric=avg_adherence,
        )

    return CorrelationResult(
        correlation=correlation,
        insight=insight,
        common_days=len(days),
        findings={
            "average_adherence": avg_adherence,
            "taken_doses": taken_doses,
            "total_doses": total_doses,
        },
    )
