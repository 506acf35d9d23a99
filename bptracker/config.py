import os


class Config:
    """Application configuration from environment variables."""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    FLASK_ENV = os.environ.get('FLASK_ENV', 'production')
    DEBUG = FLASK_ENV == 'development'
    FLASK_HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
    FLASK_PORT = int(os.environ.get('FLASK_PORT', 8080))

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    WIDE_EVENT_SAMPLE_RATE = float(os.environ.get('WIDE_EVENT_SAMPLE_RATE', 0.05))

    # Insight engine
    # 0 or 1 runs the correlation branches sequentially
    INSIGHT_MAX_WORKERS = int(os.environ.get('INSIGHT_MAX_WORKERS', 0))

    # Statistical defaults
    DEFAULT_CONFIDENCE_LEVEL = float(os.environ.get('DEFAULT_CONFIDENCE_LEVEL', 0.95))
    OUTLIER_IQR_MULTIPLIER = float(os.environ.get('OUTLIER_IQR_MULTIPLIER', 1.5))
    EMA_ALPHA = float(os.environ.get('EMA_ALPHA', 0.3))

    # Data quality
    DATA_QUALITY_WINDOW_DAYS = int(os.environ.get('DATA_QUALITY_WINDOW_DAYS', 21))
