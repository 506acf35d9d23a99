"""
Blood Pressure Calculations

Classification of a single reading and the MAP-like composite used to fold
systolic and diastolic into one signal.
"""

from .constants import (
    CRISIS_DIASTOLIC,
    CRISIS_SYSTOLIC,
    ELEVATED_SYSTOLIC,
    STAGE_1_DIASTOLIC,
    STAGE_1_SYSTOLIC,
    STAGE_2_DIASTOLIC,
    STAGE_2_SYSTOLIC,
)

CLASSIFICATION_LABELS = {
    "normal": "Normal",
    "elevated": "Elevated",
    "high_stage_1": "High (Stage 1)",
    "high_stage_2": "High (Stage 2)",
    "hypertensive_crisis": "Hypertensive Crisis",
}


def classify_blood_pressure(systolic: float, diastolic: float) -> str:
    """
    Classify a reading into an AHA-style category.

    Examples:
        >>> classify_blood_pressure(118, 76)
        'normal'
        >>> classify_blood_pressure(124, 78)
        'elevated'
        >>> classify_blood_pressure(128, 85)
        'high_stage_1'
        >>> classify_blood_pressure(185, 100)
        'hypertensive_crisis'
    """
    if systolic >= CRISIS_SYSTOLIC or diastolic >= CRISIS_DIASTOLIC:
        return "hypertensive_crisis"
    if systolic >= STAGE_2_SYSTOLIC or diastolic >= STAGE_2_DIASTOLIC:
        return "high_stage_2"
    if systolic >= STAGE_1_SYSTOLIC or diastolic >= STAGE_1_DIASTOLIC:
        return "high_stage_1"
    if systolic >= ELEVATED_SYSTOLIC and diastolic < STAGE_1_DIASTOLIC:
        return "elevated"
    return "normal"


def get_classification_label(classification: str) -> str:
    """Human-readable label for a classification key."""
    return CLASSIFICATION_LABELS.get(classification, classification)


def mean_arterial_pressure(systolic: float, diastolic: float) -> float:
    """
    MAP-like composite: diastolic + (systolic - diastolic) / 3.

    Examples:
        >>> mean_arterial_pressure(120, 81)
        94.0
    """
    return diastolic + (systolic - diastolic) / 3


def is_high_reading(systolic: float, diastolic: float) -> bool:
    """Stage 2 or above on either number."""
    return systolic >= STAGE_2_SYSTOLIC or diastolic >= STAGE_2_DIASTOLIC
