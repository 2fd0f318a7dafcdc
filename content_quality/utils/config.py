"""
Configuration management for Content Quality.

This module loads settings from the environment (and a .env file)
for the API, the Celery workers and the quality pipeline.
"""

import os
from typing import Optional, List
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() == 'true'


@dataclass
class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY: str = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG: bool = _env_bool('DEBUG')
    TESTING: bool = _env_bool('TESTING')

    # API settings
    API_TITLE: str = 'Content Quality'
    API_VERSION: str = '1.0.0'

    # Rate limiting
    RATELIMIT_STORAGE_URL: str = os.environ.get('RATELIMIT_STORAGE_URL', 'memory://')
    RATELIMIT_DEFAULT: str = os.environ.get('RATELIMIT_DEFAULT', '1000 per hour')
    RATELIMIT_ENABLED: bool = _env_bool('RATELIMIT_ENABLED', 'true')

    # Logging
    LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE: str = os.environ.get('LOG_FILE', 'logs/app.log')
    LOG_MAX_BYTES: int = int(os.environ.get('LOG_MAX_BYTES', 10485760))  # 10MB
    LOG_BACKUP_COUNT: int = int(os.environ.get('LOG_BACKUP_COUNT', 5))
    LOG_REQUESTS: bool = _env_bool('LOG_REQUESTS', 'true')

    # Quality pipeline
    QUALITY_MIN_SCORE: int = int(os.environ.get('QUALITY_MIN_SCORE', '50'))
    QUALITY_PASS_SCORE: int = int(os.environ.get('QUALITY_PASS_SCORE', '70'))
    PLACEHOLDER_IMAGE: str = os.environ.get('PLACEHOLDER_IMAGE', '/images/placeholder-article.jpg')
    DEFAULT_IMAGE_ALT: str = os.environ.get('DEFAULT_IMAGE_ALT', 'Image')
    SITE_HOST: str = os.environ.get('SITE_HOST', '')  # absolute links to this host count as internal

    # Remote enhancer
    REMOTE_ENHANCER_ENABLED: bool = _env_bool('REMOTE_ENHANCER_ENABLED')
    REMOTE_ENHANCER_PROVIDER: str = os.environ.get('REMOTE_ENHANCER_PROVIDER', 'openai')
    REMOTE_ENHANCER_MODEL: str = os.environ.get('REMOTE_ENHANCER_MODEL', 'gpt-4o-mini')
    REMOTE_ENHANCER_API_KEY: Optional[str] = (
        os.environ.get('REMOTE_ENHANCER_API_KEY') or os.environ.get('OPENAI_API_KEY')
    )
    REMOTE_ENHANCER_BASE_URL: Optional[str] = os.environ.get('REMOTE_ENHANCER_BASE_URL')
    REMOTE_ENHANCER_TIMEOUT: int = int(os.environ.get('REMOTE_ENHANCER_TIMEOUT', '30'))
    REMOTE_ENHANCER_MAX_RETRIES: int = int(os.environ.get('REMOTE_ENHANCER_MAX_RETRIES', '2'))
    REMOTE_ENHANCER_RATE_LIMIT: int = int(os.environ.get('REMOTE_ENHANCER_RATE_LIMIT', '60'))  # per minute

    # Batch monitor
    MONITOR_BATCH_DELAY: float = float(os.environ.get('MONITOR_BATCH_DELAY', '1.0'))
    MONITOR_ALERT_THRESHOLD: int = int(os.environ.get('MONITOR_ALERT_THRESHOLD', '50'))
    MONITOR_LOW_QUALITY_LIMIT: int = int(os.environ.get('MONITOR_LOW_QUALITY_LIMIT', '100'))

    # Celery configuration
    CELERY_BROKER_URL: str = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/0')
    CELERY_RESULT_BACKEND: str = os.environ.get('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0')
    CELERY_TASK_TIME_LIMIT: int = int(os.environ.get('CELERY_TASK_TIME_LIMIT', '1800'))  # 30 minutes
    CELERY_TASK_SOFT_TIME_LIMIT: int = int(os.environ.get('CELERY_TASK_SOFT_TIME_LIMIT', '1700'))
    CELERY_WORKER_PREFETCH_MULTIPLIER: int = int(os.environ.get('CELERY_WORKER_PREFETCH_MULTIPLIER', '1'))
    CELERY_WORKER_MAX_TASKS_PER_CHILD: int = int(os.environ.get('CELERY_WORKER_MAX_TASKS_PER_CHILD', '1000'))

    # Request settings
    MAX_CONTENT_LENGTH: int = int(os.environ.get('MAX_CONTENT_LENGTH', 2097152))  # 2MB

    # CORS settings
    CORS_ORIGINS: List[str] = field(default_factory=lambda: os.environ.get('CORS_ORIGINS', '*').split(','))


@dataclass
class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG: bool = True
    LOG_LEVEL: str = 'DEBUG'
    RATELIMIT_DEFAULT: str = '5000 per hour'


@dataclass
class ProductionConfig(Config):
    """Production configuration."""
    DEBUG: bool = False
    LOG_LEVEL: str = 'WARNING'


@dataclass
class TestingConfig(Config):
    """Testing configuration."""
    TESTING: bool = True
    DEBUG: bool = True
    LOG_LEVEL: str = 'CRITICAL'
    LOG_FILE: str = ''
    RATELIMIT_ENABLED: bool = False
    REMOTE_ENHANCER_ENABLED: bool = False
    MONITOR_BATCH_DELAY: float = 0.0
    CELERY_BROKER_URL: str = 'memory://'
    CELERY_RESULT_BACKEND: str = 'cache+memory://'


def get_config(config_name: str = None) -> Config:
    """
    Get configuration based on environment.

    Args:
        config_name: Configuration name (development, production, testing)

    Returns:
        Configuration object
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development').lower()

    config_map = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    config_class = config_map.get(config_name, DevelopmentConfig)
    return config_class()


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors
    """
    errors = []

    if config.SECRET_KEY == 'dev-secret-key-change-in-production' and config.DEBUG is False:
        errors.append("SECRET_KEY must be changed in production")

    if not 0 <= config.QUALITY_MIN_SCORE <= 100:
        errors.append("QUALITY_MIN_SCORE must be between 0 and 100")

    if not 0 <= config.QUALITY_PASS_SCORE <= 100:
        errors.append("QUALITY_PASS_SCORE must be between 0 and 100")

    if config.REMOTE_ENHANCER_ENABLED and not config.REMOTE_ENHANCER_API_KEY \
            and config.REMOTE_ENHANCER_PROVIDER != 'ollama':
        errors.append("REMOTE_ENHANCER_API_KEY (or OPENAI_API_KEY) is required when the remote enhancer is enabled")

    if config.REMOTE_ENHANCER_TIMEOUT <= 0:
        errors.append("REMOTE_ENHANCER_TIMEOUT must be positive")

    if config.MONITOR_BATCH_DELAY < 0:
        errors.append("MONITOR_BATCH_DELAY must not be negative")

    if not config.CELERY_BROKER_URL:
        errors.append("CELERY_BROKER_URL must be configured")

    if not config.CELERY_RESULT_BACKEND:
        errors.append("CELERY_RESULT_BACKEND must be configured")

    return errors
