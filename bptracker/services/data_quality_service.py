"""
Data Quality Service for BPTracker

Scores how complete and useful a user's logging is over a window of days,
and turns the gaps into improvement suggestions.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from bptracker.calculations import is_high_reading
from bptracker.calculations.constants import (
    BP_LOGGING_TARGET_PERCENT,
    CONTEXT_NOTES_TARGET_PERCENT,
    DATA_QUALITY_WINDOW_DAYS,
    DIET_LOGGING_TARGET_PERCENT,
    EXERCISE_LOGGING_TARGET_PERCENT,
    LOW_ADHERENCE_PERCENT,
    MAX_PERCENTAGE,
    MIN_CONTEXT_NOTE_LENGTH,
    MISSING_CONTEXT_DAY_RATIO,
    QUALITY_WEIGHTS,
    TARGET_MEALS_PER_DAY,
)
from bptracker.models import (
    BloodPressureReading,
    DataCompleteness,
    DataQualityScore,
    DietLog,
    ExerciseLog,
    HealthData,
    MedicationDose,
)
from bptracker.utils.time_utils import day_key, ensure_utc, utc_now

logger = logging.getLogger(__name__)


def _has_context_note(reading: BloodPressureReading) -> bool:
    return bool(reading.notes) and len(reading.notes.strip()) >= MIN_CONTEXT_NOTE_LENGTH


def find_high_bp_without_notes(
    readings: Sequence[BloodPressureReading]
) -> List[BloodPressureReading]:
    """High readings (>=140/90) lacking a note of at least 10 characters."""
    return [
        reading for reading in readings
        if is_high_reading(reading.systolic, reading.diastolic) and not _has_context_note(reading)
    ]


def find_bp_without_context(
    readings: Sequence[BloodPressureReading],
    diet: Sequence[DietLog],
    exercise: Sequence[ExerciseLog]
) -> List[str]:
    """
    Day keys of readings with no diet or exercise logged the same day.

    One entry per reading, so a day with two bare readings appears twice.
    """
    context_days = {day_key(meal.logged_at) for meal in diet}
    context_days.update(day_key(session.logged_at) for session in exercise)
    return [
        day_key(reading.measured_at) for reading in readings
        if day_key(reading.measured_at) not in context_days
    ]


def find_missed_medications(
    doses: Sequence[MedicationDose],
    now: Optional[datetime] = None
) -> List[MedicationDose]:
    """Doses scheduled before ``now`` that were not taken."""
    reference = ensure_utc(now) if now else utc_now()
    return [
        dose for dose in doses
        if ensure_utc(dose.scheduled_time) < reference and not dose.taken
    ]


def _unique_days(timestamps) -> int:
    return len({day_key(ts) for ts in timestamps})


def calculate_data_quality_score(
    data: HealthData,
    days: int = DATA_QUALITY_WINDOW_DAYS
) -> DataQualityScore:
    """
    Weighted 0-100 quality score.

    Components (weight):
    - bp_logging (0.3): days with a reading / window
    - exercise_logging (0.2): days with exercise / window
    - diet_logging (0.2): meals / (window * 3)
    - medication_adherence (0.2): taken / scheduled, 100 with no doses
    - bp_context_notes (0.1): high readings with notes, 100 with none

    Args:
        data: Health data for the window
        days: Window length in days

    Returns:
        DataQualityScore with the rounded overall score and breakdown
    """
    bp_logging = min(MAX_PERCENTAGE, _unique_days(r.measured_at for r in data.blood_pressure) / days * 100)
    exercise_logging = min(MAX_PERCENTAGE, _unique_days(e.logged_at for e in data.exercise) / days * 100)
    diet_logging = min(MAX_PERCENTAGE, len(data.diet) / (days * TARGET_MEALS_PER_DAY) * 100)

    doses = data.medication_doses
    if doses:
        medication_adherence = sum(1 for dose in doses if dose.taken) / len(doses) * 100
    else:
        medication_adherence = MAX_PERCENTAGE

    high_readings = [r for r in data.blood_pressure if is_high_reading(r.systolic, r.diastolic)]
    if high_readings:
        noted = sum(1 for reading in high_readings if _has_context_note(reading))
        bp_context_notes = noted / len(high_readings) * 100
    else:
        bp_context_notes = MAX_PERCENTAGE

    components = {
        "bp_logging": bp_logging,
        "exercise_logging": exercise_logging,
        "diet_logging": diet_logging,
        "medication_adherence": medication_adherence,
        "bp_context_notes": bp_context_notes,
    }
    overall = sum(components[name] * weight for name, weight in QUALITY_WEIGHTS.items())

    return DataQualityScore(
        overall=round(overall),
        breakdown={name: round(score) for name, score in components.items()},
    )


def get_data_completeness(
    data: HealthData,
    days: int = DATA_QUALITY_WINDOW_DAYS
) -> DataCompleteness:
    """Distinct logging days per series and their share of the window."""
    bp_days = _unique_days(r.measured_at for r in data.blood_pressure)
    exercise_days = _unique_days(e.logged_at for e in data.exercise)
    diet_days = _unique_days(m.logged_at for m in data.diet)

    return DataCompleteness(
        bp_days=bp_days,
        exercise_days=exercise_days,
        diet_days=diet_days,
        total_days=days,
        bp_percentage=round(bp_days / days * 100),
        exercise_percentage=round(exercise_days / days * 100),
        diet_percentage=round(diet_days / days * 100),
    )


def get_improvement_suggestions(
    data: HealthData,
    days: int = DATA_QUALITY_WINDOW_DAYS
) -> List[str]:
    """Plain-language suggestions for each quality gap."""
    suggestions = []
    completeness = get_data_completeness(data, days)
    quality = calculate_data_quality_score(data, days)

    if completeness.bp_percentage < BP_LOGGING_TARGET_PERCENT:
        suggestions.append(
            f"Log your blood pressure more consistently. You've logged {completeness.bp_days} "
            f"out of {days} days ({completeness.bp_percentage}%). Aim for daily readings."
        )

    if completeness.exercise_percentage < EXERCISE_LOGGING_TARGET_PERCENT:
        suggestions.append(
            f"Track your exercise regularly. You've logged {completeness.exercise_days} out of "
            f"{days} days. Regular activity tracking helps identify BP patterns."
        )

    if completeness.diet_percentage < DIET_LOGGING_TARGET_PERCENT:
        suggestions.append(
            f"Log your meals more frequently. You've logged {completeness.diet_days} days of "
            f"meals. Try to log at least 2-3 meals per day."
        )

    adherence = quality.breakdown["medication_adherence"]
    if adherence < LOW_ADHERENCE_PERCENT:
        suggestions.append(
            f"Improve medication adherence (currently {adherence}%). Consistent medication "
            f"use is crucial for BP control."
        )

    if quality.breakdown["bp_context_notes"] < CONTEXT_NOTES_TARGET_PERCENT:
        suggestions.append(
            "Add notes to high BP readings (≥140/90) to help identify triggers and patterns."
        )

    missing_context = find_bp_without_context(data.blood_pressure, data.diet, data.exercise)
    if len(missing_context) > days * MISSING_CONTEXT_DAY_RATIO:
        suggestions.append(
            "Add context to your BP readings by logging diet and exercise on the same day."
        )

    logger.debug(f"Data quality {quality.overall} with {len(suggestions)} suggestions")
    return suggestions
