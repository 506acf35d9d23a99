"""
Insight Service for BPTracker

Orchestrates the correlation, trend and predictive analyses into one ranked
list of insights. The branches share no state, so they can run on a thread
pool when INSIGHT_MAX_WORKERS is above 1.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from bptracker.calculations import classify_blood_pressure
from bptracker.calculations.constants import MIN_BP_READINGS
from bptracker.config import Config
from bptracker.exceptions import ConfigurationError
from bptracker.models import CorrelationInsight, HealthData
from bptracker.services.correlation_service import (
    calculate_diet_bp_correlation,
    calculate_exercise_bp_correlation,
    calculate_medication_bp_correlation,
    calculate_rest_day_impact,
)
from bptracker.services.prediction_service import SodiumClassifier, generate_predictive_insights
from bptracker.services.trend_service import calculate_bp_trend, trend_insight
from bptracker.utils.wide_events import track_operation

logger = logging.getLogger(__name__)

TYPE_ORDER = {"negative": 0, "positive": 1, "neutral": 2}
CONFIDENCE_ORDER = {"high": 0, "medium": 1, "low": 2}

START_TRACKING_BP = CorrelationInsight(
    type="neutral",
    title="Start Tracking Blood Pressure",
    description=(
        "Regular BP monitoring is essential. Try to measure at the same time each day "
        "for consistent data."
    ),
    confidence="high",
)

ADD_EXERCISE_TRACKING = CorrelationInsight(
    type="neutral",
    title="Add Exercise Tracking",
    description=(
        "Regular physical activity can help lower blood pressure. Start logging your "
        "exercise to see the impact."
    ),
    confidence="high",
)

Branch = Tuple[str, Callable[[], List[CorrelationInsight]]]


def rank_insights(insights: Sequence[CorrelationInsight]) -> List[CorrelationInsight]:
    """
    Most important first: negative, positive, neutral; then high, medium, low.

    The sort is stable, so ties keep their generation order.
    """
    return sorted(
        insights,
        key=lambda insight: (
            TYPE_ORDER.get(insight.type, len(TYPE_ORDER)),
            CONFIDENCE_ORDER.get(insight.confidence, len(CONFIDENCE_ORDER)),
        ),
    )


def _resolve_workers(max_workers: Optional[int]) -> int:
    workers = Config.INSIGHT_MAX_WORKERS if max_workers is None else max_workers
    if workers < 0:
        raise ConfigurationError(
            f"max_workers must be zero or positive, got {workers}",
            config_key="INSIGHT_MAX_WORKERS",
        )
    return workers


def _build_branches(
    data: HealthData,
    sodium_classifier: Optional[SodiumClassifier]
) -> List[Branch]:
    bp = data.blood_pressure

    def exercise():
        insight = calculate_exercise_bp_correlation(bp, data.exercise).insight
        return [insight] if insight else []

    def rest_day():
        insight = calculate_rest_day_impact(bp, data.exercise)
        return [insight] if insight else []

    def diet():
        insight = calculate_diet_bp_correlation(bp, data.diet).insight
        return [insight] if insight else []

    def medication():
        insight = calculate_medication_bp_correlation(bp, data.medication_doses).insight
        return [insight] if insight else []

    def trend():
        if len(bp) < MIN_BP_READINGS:
            return []
        insight = trend_insight(calculate_bp_trend(bp))
        return [insight] if insight else []

    def predictive():
        return generate_predictive_insights(data, sodium_classifier)

    return [
        ("exercise", exercise),
        ("rest_day", rest_day),
        ("diet", diet),
        ("medication", medication),
        ("trend", trend),
        ("predictive", predictive),
    ]


def _timed(branch: Callable[[], List[CorrelationInsight]]) -> Tuple[List[CorrelationInsight], float]:
    start = time.time()
    insights = branch()
    return insights, (time.time() - start) * 1000


def generate_correlation_insights(
    data: HealthData,
    now: Optional[datetime] = None,
    max_workers: Optional[int] = None,
    sodium_classifier: Optional[SodiumClassifier] = None
) -> List[CorrelationInsight]:
    """
    Generate every insight for the given health data, ranked by importance.

    Args:
        data: All four record series for one user and date range
        now: Reference time recorded on the run's wide event
        max_workers: Thread pool size for the analysis branches; 0 or 1 runs
            them in order on the calling thread. Defaults to
            Config.INSIGHT_MAX_WORKERS.
        sodium_classifier: Optional meal text classifier for predictions

    Returns:
        Ranked list of insights with duplicate titles removed

    Raises:
        ConfigurationError: If max_workers is negative
    """
    workers = _resolve_workers(max_workers)
    branches = _build_branches(data, sodium_classifier)

    with track_operation(
        "insight_generation",
        bp_readings=len(data.blood_pressure),
        exercise_entries=len(data.exercise),
        diet_entries=len(data.diet),
        medication_doses=len(data.medication_doses),
        max_workers=workers,
        reference_time=now.isoformat() if now else None,
    ) as event:
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [(name, executor.submit(_timed, branch)) for name, branch in branches]
                outcomes = [(name, future.result()) for name, future in futures]
        else:
            outcomes = [(name, _timed(branch)) for name, branch in branches]

        insights: List[CorrelationInsight] = []
        for name, (branch_insights, duration_ms) in outcomes:
            event.record_timing(name, duration_ms)
            insights.extend(branch_insights)

        if not data.blood_pressure:
            insights.append(START_TRACKING_BP)
        if not data.exercise:
            insights.append(ADD_EXERCISE_TRACKING)

        seen_titles = set()
        unique = []
        for insight in insights:
            if insight.title in seen_titles:
                continue
            seen_titles.add(insight.title)
            unique.append(insight)

        ranked = rank_insights(unique)

        crisis_readings = sum(
            1 for reading in data.blood_pressure
            if classify_blood_pressure(reading.systolic, reading.diastolic) == "hypertensive_crisis"
        )
        event.add_business_metric("insights", len(ranked))
        event.add_business_metric("negative_insights", sum(1 for i in ranked if i.type == "negative"))
        event.add_business_metric("crisis_readings", crisis_readings)

    logger.info(f"Generated {len(ranked)} insights from {data.data_points} data points")
    return ranked
