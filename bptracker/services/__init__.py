"""
Services module for BPTracker insight logic.

Pure analyses over in-memory health records, kept separate from the Flask
route handlers.
"""

from bptracker.services.correlation_service import (
    calculate_diet_bp_correlation,
    calculate_exercise_bp_correlation,
    calculate_medication_bp_correlation,
    calculate_rest_day_impact,
)
from bptracker.services.trend_service import (
    calculate_analytics_summary,
    calculate_bp_trend,
    calculate_week_over_week_comparison,
)
from bptracker.services.prediction_service import (
    KeywordSodiumClassifier,
    generate_predictive_insights,
)
from bptracker.services.insight_service import (
    generate_correlation_insights,
    rank_insights,
)
from bptracker.services.data_quality_service import (
    calculate_data_quality_score,
    get_data_completeness,
    get_improvement_suggestions,
)
from bptracker.services.streak_service import (
    calculate_streak,
    get_milestone_badge,
    get_motivational_message,
)

__all__ = [
    # Correlations
    'calculate_exercise_bp_correlation',
    'calculate_diet_bp_correlation',
    'calculate_medication_bp_correlation',
    'calculate_rest_day_impact',
    # Trends
    'calculate_bp_trend',
    'calculate_week_over_week_comparison',
    'calculate_analytics_summary',
    # Predictions
    'KeywordSodiumClassifier',
    'generate_predictive_insights',
    # Orchestration
    'generate_correlation_insights',
    'rank_insights',
    # Data quality
    'calculate_data_quality_score',
    'get_data_completeness',
    'get_improvement_suggestions',
    # Streaks
    'calculate_streak',
    'get_milestone_badge',
    'get_motivational_message',
]
