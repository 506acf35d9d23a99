"""
Analytics Routes - Health insights over posted records

Stateless endpoints: the caller posts the health records for one user and
date range and receives computed insights, trends and quality scores.
Nothing is stored.
"""

import logging

from flask import Blueprint, jsonify, request

from bptracker.calculations.constants import DATA_QUALITY_WINDOW_DAYS
from bptracker.exceptions import RecordParsingError
from bptracker.models import HealthData, insights_to_dicts
from bptracker.services import (
    calculate_analytics_summary,
    calculate_bp_trend,
    calculate_data_quality_score,
    calculate_diet_bp_correlation,
    calculate_exercise_bp_correlation,
    calculate_medication_bp_correlation,
    calculate_rest_day_impact,
    calculate_streak,
    calculate_week_over_week_comparison,
    generate_correlation_insights,
    get_data_completeness,
    get_improvement_suggestions,
    get_milestone_badge,
    get_motivational_message,
)
from bptracker.services.data_quality_service import find_high_bp_without_notes, find_missed_medications
from bptracker.services.trend_service import trend_insight
from bptracker.utils.time_utils import parse_datetime

logger = logging.getLogger(__name__)

analytics_bp = Blueprint("analytics", __name__)


def _payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise RecordParsingError("Request body must be a JSON object")
    return payload


def _reference_time(payload: dict, key: str = "now"):
    if payload.get(key) is None:
        return None
    parsed = parse_datetime(payload[key])
    if parsed is None:
        raise RecordParsingError(f"Invalid timestamp in '{key}'", field=key, value=payload[key])
    return parsed


def _window_days(payload: dict) -> int:
    days = payload.get("days", DATA_QUALITY_WINDOW_DAYS)
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise ValueError("days must be a positive integer")
    return days


def _error_response(error: Exception, operation: str):
    if isinstance(error, RecordParsingError):
        return jsonify({"error": error.message, "details": error.details}), 400
    if isinstance(error, ValueError):
        return jsonify({"error": str(error)}), 400
    logger.error(f"Error in {operation}: {error}", exc_info=True)
    return jsonify({"error": "Internal server error"}), 500


@analytics_bp.route("/api/analytics/insights", methods=["POST"])
def get_insights():
    """
    Ranked correlation, trend and predictive insights.

    Body:
        blood_pressure, exercise, diet, medication_doses: record lists
        now: optional reference time

    Returns:
        JSON with insights (most important first) and count
    """
    try:
        payload = _payload()
        data = HealthData.from_dict(payload)
        insights = generate_correlation_insights(data, now=_reference_time(payload))
        return jsonify({"insights": insights_to_dicts(insights), "count": len(insights)})
    except Exception as e:
        return _error_response(e, "insight generation")


@analytics_bp.route("/api/analytics/correlations", methods=["POST"])
def get_correlations():
    """Raw correlation results per lifestyle series, including findings."""
    try:
        data = HealthData.from_dict(_payload())
        bp = data.blood_pressure
        rest_day = calculate_rest_day_impact(bp, data.exercise)
        return jsonify({
            "exercise": calculate_exercise_bp_correlation(bp, data.exercise).to_dict(),
            "diet": calculate_diet_bp_correlation(bp, data.diet).to_dict(),
            "medication": calculate_medication_bp_correlation(bp, data.medication_doses).to_dict(),
            "rest_day": rest_day.to_dict() if rest_day else None,
        })
    except Exception as e:
        return _error_response(e, "correlation analysis")


@analytics_bp.route("/api/analytics/trend", methods=["POST"])
def get_trend():
    """Systolic BP trend with weekly change and 30-day projection."""
    try:
        data = HealthData.from_dict(_payload())
        trend = calculate_bp_trend(data.blood_pressure)
        insight = trend_insight(trend)
        return jsonify({
            "trend": trend.to_dict(),
            "insight": insight.to_dict() if insight else None,
            "reading_count": len(data.blood_pressure),
        })
    except Exception as e:
        return _error_response(e, "trend calculation")


@analytics_bp.route("/api/analytics/week-over-week", methods=["POST"])
def get_week_over_week():
    """This week vs last week, relative to the optional 'now' in the body."""
    try:
        payload = _payload()
        data = HealthData.from_dict(payload)
        comparison = calculate_week_over_week_comparison(
            data.blood_pressure,
            data.exercise,
            data.diet,
            now=_reference_time(payload),
        )
        return jsonify(comparison.to_dict())
    except Exception as e:
        return _error_response(e, "week-over-week comparison")


@analytics_bp.route("/api/analytics/summary", methods=["POST"])
def get_summary():
    try:
        data = HealthData.from_dict(_payload())
        return jsonify(calculate_analytics_summary(data).to_dict())
    except Exception as e:
        return _error_response(e, "analytics summary")


@analytics_bp.route("/api/analytics/data-quality", methods=["POST"])
def get_data_quality():
    """
    Data quality score, completeness and suggestions.

    Body:
        record lists, plus optional days (window, default 21) and now
    """
    try:
        payload = _payload()
        data = HealthData.from_dict(payload)
        days = _window_days(payload)
        missed = find_missed_medications(data.medication_doses, now=_reference_time(payload))
        return jsonify({
            "score": calculate_data_quality_score(data, days).to_dict(),
            "completeness": get_data_completeness(data, days).to_dict(),
            "suggestions": get_improvement_suggestions(data, days),
            "missed_medications": [dose.to_dict() for dose in missed],
            "high_bp_without_notes": len(find_high_bp_without_notes(data.blood_pressure)),
        })
    except Exception as e:
        return _error_response(e, "data quality check")


@analytics_bp.route("/api/analytics/streak", methods=["POST"])
def get_streak():
    """Logging streak with milestone badge and message."""
    try:
        payload = _payload()
        data = HealthData.from_dict(payload)
        today = _reference_time(payload, "today")
        streak = calculate_streak(data.blood_pressure, today=today.date() if today else None)
        return jsonify({
            "streak": streak.to_dict(),
            "badge": get_milestone_badge(streak.current_streak).to_dict(),
            "message": get_motivational_message(streak.days_until_milestone),
        })
    except Exception as e:
        return _error_response(e, "streak calculation")
