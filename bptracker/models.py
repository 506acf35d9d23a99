"""
Domain records and result value objects for BPTracker.

Records (readings, exercise sessions, meals, medication doses) arrive from the
data access layer already validated. Results are immutable snapshots built
fresh on every call; nothing here holds state between calls.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from bptracker.exceptions import RecordParsingError
from bptracker.utils.time_utils import parse_datetime


def _require(payload: Dict[str, Any], key: str) -> Any:
    if not isinstance(payload, dict):
        raise RecordParsingError("Record must be a JSON object", value=payload)
    if payload.get(key) is None:
        raise RecordParsingError(f"Missing required field '{key}'", field=key)
    return payload[key]


def _number(payload: Dict[str, Any], key: str, cast=float):
    raw = _require(payload, key)
    if isinstance(raw, bool):
        raise RecordParsingError(f"Field '{key}' must be numeric", field=key, value=raw)
    try:
        return cast(raw)
    except (TypeError, ValueError):
        raise RecordParsingError(f"Field '{key}' must be numeric", field=key, value=raw)


def _optional_bool(payload: Dict[str, Any], key: str) -> Optional[bool]:
    raw = payload.get(key)
    if raw is None:
        return None
    if not isinstance(raw, bool):
        raise RecordParsingError(f"Field '{key}' must be true or false", field=key, value=raw)
    return raw


def _timestamp(payload: Dict[str, Any], key: str) -> datetime:
    raw = _require(payload, key)
    parsed = parse_datetime(raw)
    if parsed is None:
        raise RecordParsingError(f"Invalid timestamp in '{key}'", field=key, value=raw)
    return parsed


def _optional_timestamp(payload: Dict[str, Any], key: str) -> Optional[datetime]:
    if payload.get(key) is None:
        return None
    return _timestamp(payload, key)


# ============================================================================
# Domain records
# ============================================================================


@dataclass(frozen=True)
class BloodPressureReading:
    systolic: float
    diastolic: float
    pulse: float
    measured_at: datetime
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "BloodPressureReading":
        return cls(
            systolic=_number(payload, "systolic"),
            diastolic=_number(payload, "diastolic"),
            pulse=_number(payload, "pulse"),
            measured_at=_timestamp(payload, "measured_at"),
            notes=payload.get("notes"),
        )

    def to_dict(self):
        return {
            'systolic': self.systolic,
            'diastolic': self.diastolic,
            'pulse': self.pulse,
            'measured_at': self.measured_at.isoformat(),
            'notes': self.notes,
        }


@dataclass(frozen=True)
class ExerciseLog:
    activity_type: str
    duration_minutes: float
    logged_at: datetime
    intensity: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ExerciseLog":
        return cls(
            activity_type=str(payload.get("activity_type") or "other") if isinstance(payload, dict) else "other",
            duration_minutes=_number(payload, "duration_minutes"),
            logged_at=_timestamp(payload, "logged_at"),
            intensity=payload.get("intensity"),
            notes=payload.get("notes"),
        )

    def to_dict(self):
        return {
            'activity_type': self.activity_type,
            'duration_minutes': self.duration_minutes,
            'logged_at': self.logged_at.isoformat(),
            'intensity': self.intensity,
            'notes': self.notes,
        }


@dataclass(frozen=True)
class DietLog:
    meal_type: str
    description: str
    logged_at: datetime
    notes: Optional[str] = None
    sodium_level: Optional[str] = None
    sodium_mg: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DietLog":
        sodium_mg = None
        if isinstance(payload, dict) and payload.get("sodium_mg") is not None:
            sodium_mg = _number(payload, "sodium_mg")
        return cls(
            meal_type=str(_require(payload, "meal_type")),
            description=str(payload.get("description") or ""),
            logged_at=_timestamp(payload, "logged_at"),
            notes=payload.get("notes"),
            sodium_level=payload.get("sodium_level"),
            sodium_mg=sodium_mg,
        )

    @property
    def text(self) -> str:
        """Free text the sodium heuristics look at."""
        return " ".join(part for part in (self.description, self.notes) if part)

    def to_dict(self):
        return {
            'meal_type': self.meal_type,
            'description': self.description,
            'logged_at': self.logged_at.isoformat(),
            'notes': self.notes,
            'sodium_level': self.sodium_level,
            'sodium_mg': self.sodium_mg,
        }


@dataclass(frozen=True)
class MedicationDose:
    scheduled_time: datetime
    was_taken: Optional[bool] = None
    taken_at: Optional[datetime] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "MedicationDose":
        return cls(
            scheduled_time=_timestamp(payload, "scheduled_time"),
            was_taken=_optional_bool(payload, "was_taken"),
            taken_at=_optional_timestamp(payload, "taken_at"),
            notes=payload.get("notes"),
        )

    @property
    def taken(self) -> bool:
        return bool(self.was_taken)

    def to_dict(self):
        return {
            'scheduled_time': self.scheduled_time.isoformat(),
            'was_taken': self.was_taken,
            'taken_at': self.taken_at.isoformat() if self.taken_at else None,
            'notes': self.notes,
        }


@dataclass(frozen=True)
class HealthData:
    """Unified bundle of the four record series for one user and date range."""

    blood_pressure: Tuple[BloodPressureReading, ...] = ()
    exercise: Tuple[ExerciseLog, ...] = ()
    diet: Tuple[DietLog, ...] = ()
    medication_doses: Tuple[MedicationDose, ...] = ()

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "HealthData":
        if not isinstance(payload, dict):
            raise RecordParsingError("Health data must be a JSON object", value=payload)

        def _series(key, record_cls):
            items = payload.get(key) or []
            if not isinstance(items, list):
                raise RecordParsingError(f"Field '{key}' must be a list", field=key)
            return tuple(record_cls.from_dict(item) for item in items)

        return cls(
            blood_pressure=_series("blood_pressure", BloodPressureReading),
            exercise=_series("exercise", ExerciseLog),
            diet=_series("diet", DietLog),
            medication_doses=_series("medication_doses", MedicationDose),
        )

    @property
    def data_points(self) -> int:
        return (
            len(self.blood_pressure)
            + len(self.exercise)
            + len(self.diet)
            + len(self.medication_doses)
        )


# ============================================================================
# Statistical results
# ============================================================================


@dataclass(frozen=True)
class DescriptiveStatistics:
    n: int = 0
    mean: float = 0.0
    median: float = 0.0
    standard_deviation: float = 0.0
    variance: float = 0.0
    min: float = 0.0
    max: float = 0.0
    range: float = 0.0
    q1: float = 0.0
    q3: float = 0.0
    iqr: float = 0.0
    coefficient_of_variation: float = 0.0
    skewness: float = 0.0
    kurtosis: float = 0.0
    standard_error: float = 0.0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class ConfidenceInterval:
    estimate: float
    lower: float
    upper: float
    confidence_level: float
    margin_of_error: float

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class LinearRegressionResult:
    slope: float = 0.0
    intercept: float = 0.0
    r_squared: float = 0.0
    adjusted_r_squared: float = 0.0
    correlation_coefficient: float = 0.0
    slope_standard_error: float = 0.0
    intercept_standard_error: float = 0.0
    residual_standard_error: float = 0.0
    t_statistic: float = 0.0
    p_value: float = 1.0
    degrees_of_freedom: int = 0
    predictions: Tuple[float, ...] = ()
    residuals: Tuple[float, ...] = ()

    def to_dict(self):
        result = asdict(self)
        result["predictions"] = list(self.predictions)
        result["residuals"] = list(self.residuals)
        return result


@dataclass(frozen=True)
class TTestResult:
    t_statistic: float = 0.0
    p_value: float = 1.0
    degrees_of_freedom: float = 0.0
    significant: bool = False

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class PeriodComparisonResult:
    period1: DescriptiveStatistics
    period2: DescriptiveStatistics
    mean_difference: float
    percent_change: float
    effect_size: float
    effect_size_interpretation: str
    difference_ci: ConfidenceInterval
    t_test: TTestResult

    def to_dict(self):
        return {
            'period1': self.period1.to_dict(),
            'period2': self.period2.to_dict(),
            'mean_difference': self.mean_difference,
            'percent_change': self.percent_change,
            'effect_size': self.effect_size,
            'effect_size_interpretation': self.effect_size_interpretation,
            'difference_ci': self.difference_ci.to_dict(),
            't_test': self.t_test.to_dict(),
        }


@dataclass(frozen=True)
class OutlierResult:
    outliers: Tuple[float, ...]
    outlier_indices: Tuple[int, ...]
    lower_bound: float
    upper_bound: float

    def to_dict(self):
        # JSON has no infinity; unbounded fences become None
        return {
            'outliers': list(self.outliers),
            'outlier_indices': list(self.outlier_indices),
            'lower_bound': self.lower_bound if self.lower_bound != float("-inf") else None,
            'upper_bound': self.upper_bound if self.upper_bound != float("inf") else None,
        }


# ============================================================================
# Insight engine results
# ============================================================================


@dataclass(frozen=True)
class CorrelationInsight:
    type: str  # positive | negative | neutral
    title: str
    description: str
    confidence: str  # high | medium | low
    metric: Optional[float] = None

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class CorrelationResult:
    correlation: float = 0.0
    insight: Optional[CorrelationInsight] = None
    common_days: int = 0
    findings: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self):
        return {
            'correlation': self.correlation,
            'insight': self.insight.to_dict() if self.insight else None,
            'common_days': self.common_days,
            'findings': dict(self.findings),
        }


@dataclass(frozen=True)
class BPTrend:
    slope: float = 0.0
    direction: str = "stable"  # improving | stable | worsening
    weekly_change: float = 0.0
    confidence: str = "low"
    projected_change_30_days: float = 0.0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class WeekSummary:
    avg_systolic: float = 0.0
    avg_diastolic: float = 0.0
    avg_pulse: float = 0.0
    exercise_minutes: float = 0.0
    meal_count: int = 0
    reading_count: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class WeekOverWeekComparison:
    this_week: WeekSummary
    last_week: WeekSummary
    changes: Dict[str, float]

    def to_dict(self):
        return {
            'this_week': self.this_week.to_dict(),
            'last_week': self.last_week.to_dict(),
            'changes': dict(self.changes),
        }


@dataclass(frozen=True)
class AnalyticsSummary:
    avg_systolic: int = 0
    avg_diastolic: int = 0
    total_exercise_minutes: float = 0.0
    total_meals: int = 0
    medication_adherence: int = 0
    data_points: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class DataQualityScore:
    overall: int
    breakdown: Dict[str, int]

    def to_dict(self):
        return {'overall': self.overall, 'breakdown': dict(self.breakdown)}


@dataclass(frozen=True)
class DataCompleteness:
    bp_days: int
    exercise_days: int
    diet_days: int
    total_days: int
    bp_percentage: int
    exercise_percentage: int
    diet_percentage: int

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class StreakData:
    current_streak: int = 0
    longest_streak: int = 0
    last_log_date: Optional[datetime] = None
    next_milestone: int = 0
    days_until_milestone: int = 0
    milestone_progress: int = 0

    def to_dict(self):
        result = asdict(self)
        result["last_log_date"] = self.last_log_date.isoformat() if self.last_log_date else None
        return result


@dataclass(frozen=True)
class MilestoneBadge:
    emoji: str
    title: str
    description: str
    color: str

    def to_dict(self):
        return asdict(self)


def insights_to_dicts(insights: List[CorrelationInsight]) -> List[Dict[str, Any]]:
    return [insight.to_dict() for insight in insights]
