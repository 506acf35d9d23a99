"""
Prediction Service for BPTracker

Forward-looking, heuristic insights built on the correlation findings:
- Skipping exercise for a week
- Missing morning medication
- Salty meals and next-day BP

Every prediction is worded as "could/may" and never reported above medium
confidence.
"""

import logging
from collections import defaultdict
from typing import Callable, Iterable, List, Optional

from bptracker.calculations.constants import (
    HIGH_SODIUM_KEYWORDS,
    LARGE_BP_DIFFERENCE,
    MIN_BP_READINGS,
    MORNING_DOSE_CUTOFF_HOUR,
    SIGNIFICANT_BP_DIFFERENCE,
    SKIP_EXERCISE_MULTIPLIER,
)
from bptracker.models import CorrelationInsight, HealthData
from bptracker.services.correlation_service import (
    daily_systolic,
    group_difference,
    systolic_rest_day_difference,
)
from bptracker.utils.time_utils import day_key, hour_of_day, next_day_key

logger = logging.getLogger(__name__)

# text -> True when the meal looks high in sodium
SodiumClassifier = Callable[[str], bool]


class KeywordSodiumClassifier:
    """
    Case-insensitive substring match against a keyword list.

    Usage:
        classifier = KeywordSodiumClassifier()
        classifier("Pepperoni pizza")  # True
    """

    def __init__(self, keywords: Iterable[str] = HIGH_SODIUM_KEYWORDS):
        self.keywords = tuple(keyword.lower() for keyword in keywords)

    def __call__(self, text: str) -> bool:
        if not text:
            return False
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.keywords)


def generate_predictive_insights(
    data: HealthData,
    sodium_classifier: Optional[SodiumClassifier] = None
) -> List[CorrelationInsight]:
    """
    Build predictive insights from the bundled health data.

    Args:
        data: All four record series
        sodium_classifier: Meal text classifier; defaults to KeywordSodiumClassifier

    Returns:
        Zero or more negative insights, in a fixed order (exercise,
        medication, sodium)
    """
    if len(data.blood_pressure) < MIN_BP_READINGS:
        return []

    classifier = sodium_classifier or KeywordSodiumClassifier()
    candidates = (
        _skip_exercise_prediction(data),
        _missed_morning_medication_prediction(data),
        _sodium_keyword_prediction(data, classifier),
    )
    return [insight for insight in candidates if insight is not None]


def _skip_exercise_prediction(data: HealthData) -> Optional[CorrelationInsight]:
    effect = systolic_rest_day_difference(data.blood_pressure, data.exercise)
    if effect is None or effect < SIGNIFICANT_BP_DIFFERENCE:
        return None

    projected = effect * SKIP_EXERCISE_MULTIPLIER
    return CorrelationInsight(
        type="negative",
        title="Prediction: Skipping Exercise Could Raise Your BP",
        description=(
            f"Your systolic BP runs {effect:.0f} mmHg higher on rest days. Skipping exercise "
            f"for a full week could raise it by about {projected:.0f} mmHg."
        ),
        confidence="medium",
        metric=projected,
    )


def _missed_morning_medication_prediction(data: HealthData) -> Optional[CorrelationInsight]:
    morning_doses = defaultdict(list)
    for dose in data.medication_doses:
        if hour_of_day(dose.scheduled_time) < MORNING_DOSE_CUTOFF_HOUR:
            morning_doses[day_key(dose.scheduled_time)].append(dose.taken)

    missed_days = [day for day, taken in morning_doses.items() if not all(taken)]
    adherent_days = [day for day, taken in morning_doses.items() if all(taken)]

    difference = group_difference(daily_systolic(data.blood_pressure), missed_days, adherent_days)
    if difference is None or difference < SIGNIFICANT_BP_DIFFERENCE:
        return None

    return CorrelationInsight(
        type="negative",
        title="Prediction: Missing Morning Doses May Raise Your BP",
        description=(
            f"On days you missed a morning dose your systolic BP averaged {difference:.0f} mmHg "
            f"higher. Missing tomorrow's dose may have a similar effect."
        ),
        confidence="medium" if difference >= LARGE_BP_DIFFERENCE else "low",
        metric=difference,
    )


def _sodium_keyword_prediction(
    data: HealthData,
    classifier: SodiumClassifier
) -> Optional[CorrelationInsight]:
    diet_days = set()
    salty_days = set()
    for meal in data.diet:
        day = day_key(meal.logged_at)
        diet_days.add(day)
        if classifier(meal.text):
            salty_days.add(day)

    other_days = diet_days - salty_days
    difference = group_difference(
        daily_systolic(data.blood_pressure),
        [next_day_key(day) for day in sorted(salty_days)],
        [next_day_key(day) for day in sorted(other_days)],
    )
    if difference is None or difference < SIGNIFICANT_BP_DIFFERENCE:
        return None

    return CorrelationInsight(
        type="negative",
        title="Prediction: Salty Meals May Raise Next-Day BP",
        description=(
            f"The day after meals that look high in sodium, your systolic BP averaged "
            f"{difference:.0f} mmHg higher. Cutting back on salt may help."
        ),
        confidence="low",
        metric=difference,
    )
