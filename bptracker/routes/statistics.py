"""
Statistics routes.

Direct access to the numeric core for ad-hoc analysis views:
- Descriptive summaries and confidence intervals
- Regression and before/after period comparison
- Outlier detection and smoothing
"""

import logging

from flask import Blueprint, jsonify, request

from bptracker.calculations import (
    calculate_descriptive_statistics,
    compare_periods,
    confidence_interval,
    detect_outliers,
    exponential_moving_average,
    linear_regression,
    moving_average,
)
from bptracker.calculations.constants import (
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_EMA_ALPHA,
    OUTLIER_IQR_MULTIPLIER,
)
from bptracker.utils.wide_events import log_statistics_request

logger = logging.getLogger(__name__)

statistics_bp = Blueprint("statistics", __name__)


def _numbers(payload, key):
    """Pull a list of finite-looking numbers out of the body or raise ValueError."""
    values = payload.get(key)
    if not isinstance(values, list):
        raise ValueError(f"'{key}' must be a list of numbers")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"'{key}' must be a list of numbers")
    return values


def _number(payload, key, default):
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' must be a number")
    return value


def _body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    return payload


def _run(endpoint, compute):
    """Run a statistics computation, mapping bad input to 400."""
    try:
        result, sample_size = compute(_body())
    except ValueError as e:
        log_statistics_request(endpoint, 0, success=False, error=str(e))
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error in statistics/{endpoint}: {e}", exc_info=True)
        log_statistics_request(endpoint, 0, success=False, error=str(e))
        return jsonify({"error": "Internal server error"}), 500

    log_statistics_request(endpoint, sample_size, success=True)
    return jsonify(result)


@statistics_bp.route("/api/statistics/descriptive", methods=["POST"])
def descriptive():
    """
    Descriptive statistics for a sample.

    Body:
        values: list of numbers
    """
    def compute(payload):
        values = _numbers(payload, "values")
        return calculate_descriptive_statistics(values).to_dict(), len(values)

    return _run("descriptive", compute)


@statistics_bp.route("/api/statistics/confidence-interval", methods=["POST"])
def mean_confidence_interval():
    """
    t-based confidence interval for the mean.

    Body:
        values: list of numbers
        confidence_level: optional, between 0 and 1 (default 0.95)
    """
    def compute(payload):
        values = _numbers(payload, "values")
        level = _number(payload, "confidence_level", DEFAULT_CONFIDENCE_LEVEL)
        if not 0 < level < 1:
            raise ValueError("'confidence_level' must be between 0 and 1")
        return confidence_interval(values, level).to_dict(), len(values)

    return _run("confidence_interval", compute)


@statistics_bp.route("/api/statistics/regression", methods=["POST"])
def regression():
    """
    Ordinary least squares fit of y on x.

    Body:
        x, y: equal-length lists of numbers
    """
    def compute(payload):
        x = _numbers(payload, "x")
        y = _numbers(payload, "y")
        return linear_regression(x, y).to_dict(), len(x)

    return _run("regression", compute)


@statistics_bp.route("/api/statistics/compare", methods=["POST"])
def compare():
    """
    Before/after comparison.

    Body:
        period1: baseline values
        period2: comparison values
    """
    def compute(payload):
        period1 = _numbers(payload, "period1")
        period2 = _numbers(payload, "period2")
        return compare_periods(period1, period2).to_dict(), len(period1) + len(period2)

    return _run("compare", compute)


@statistics_bp.route("/api/statistics/outliers", methods=["POST"])
def outliers():
    """
    Tukey outlier detection.

    Body:
        values: list of numbers
        k: optional IQR multiplier (default 1.5)
    """
    def compute(payload):
        values = _numbers(payload, "values")
        k = _number(payload, "k", OUTLIER_IQR_MULTIPLIER)
        return detect_outliers(values, k).to_dict(), len(values)

    return _run("outliers", compute)


@statistics_bp.route("/api/statistics/moving-average", methods=["POST"])
def smoothing():
    """
    Simple and exponential moving averages.

    Body:
        values: list of numbers
        window: window size for the simple average
        alpha: optional smoothing factor (default 0.3)
    """
    def compute(payload):
        values = _numbers(payload, "values")
        window = payload.get("window")
        if isinstance(window, bool) or not isinstance(window, int):
            raise ValueError("'window' must be an integer")
        alpha = _number(payload, "alpha", DEFAULT_EMA_ALPHA)
        if not 0 < alpha <= 1:
            raise ValueError("'alpha' must be in (0, 1]")
        result = {
            "moving_average": moving_average(values, window),
            "exponential_moving_average": exponential_moving_average(values, alpha),
        }
        return result, len(values)

    return _run("moving_average", compute)
