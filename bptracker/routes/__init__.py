"""
Routes module for BPTracker Flask blueprints.
"""

from bptracker.routes.analytics import analytics_bp
from bptracker.routes.statistics import statistics_bp

__all__ = [
    "analytics_bp",
    "statistics_bp",
]


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(analytics_bp)
    app.register_blueprint(statistics_bp)
