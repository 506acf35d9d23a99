"""
BPTracker Analytics - Flask Application

Stateless JSON API over the blood pressure analytics engine. Callers post
health records and receive computed statistics and insights.
"""

import logging

from flask import Flask, jsonify

from bptracker import __version__
from bptracker.config import Config
from bptracker.routes import register_blueprints

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config.from_object(Config)
app.json.ensure_ascii = False

register_blueprints(app)


@app.route('/health')
def health_check():
    """Liveness probe."""
    return jsonify({'status': 'healthy', 'version': __version__})


@app.errorhandler(404)
def not_found(error):
    return jsonify({'error': 'Not found'}), 404


@app.errorhandler(405)
def method_not_allowed(error):
    return jsonify({'error': 'Method not allowed'}), 405


if __name__ == '__main__':
    logger.info(f"Starting BPTracker analytics API on {Config.FLASK_HOST}:{Config.FLASK_PORT}")
    app.run(host=Config.FLASK_HOST, port=Config.FLASK_PORT, debug=Config.DEBUG)
