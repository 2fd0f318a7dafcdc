"""
Logging setup for the API and the Celery workers.

Everything logs through the standard library: modules declare
``logger = logging.getLogger(__name__)`` and setup_logging wires the
root logger once per process. Content bodies are never logged, only
lengths and ids.
"""

import logging
import logging.handlers
import os
from datetime import datetime, timezone
from typing import Mapping, Any


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

THIRD_PARTY_LEVELS = {
    'werkzeug': logging.WARNING,
    'litellm': logging.WARNING,
    'LiteLLM': logging.WARNING,
    'httpx': logging.WARNING,
    'celery': logging.INFO,
}


def setup_logging(config: Mapping[str, Any]):
    """
    Configure the root logger.

    Args:
        config: Mapping with the LOG_* settings; Flask's app.config works.
            An empty LOG_FILE disables the rotating file handler.
    """
    level_name = str(config.get('LOG_LEVEL', 'INFO')).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers = [logging.StreamHandler()]

    log_file = config.get('LOG_FILE', 'logs/content_quality.log')
    if log_file:
        os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.get('LOG_MAX_BYTES', 10485760),
            backupCount=config.get('LOG_BACKUP_COUNT', 5)
        ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name, third_party_level in THIRD_PARTY_LEVELS.items():
        logging.getLogger(name).setLevel(third_party_level)


class StructuredLogger:
    """Passes keyword context to the record through ``extra``."""

    def __init__(self, name: str, **context):
        self.logger = logging.getLogger(name)
        self.context = context

    def bind(self, **context) -> 'StructuredLogger':
        """Copy of this logger with more context attached."""
        return StructuredLogger(self.logger.name, **{**self.context, **context})

    def log(self, level: int, message: str, **kwargs):
        extra = {'logged_at': datetime.now(timezone.utc).isoformat(), **self.context, **kwargs}
        self.logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs):
        self.log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self.log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self.log(logging.ERROR, message, **kwargs)


def get_logger(name: str, **context) -> StructuredLogger:
    return StructuredLogger(name, **context)


class TaskLogger:
    """Start/progress/completion/error lines for batch tasks."""

    def __init__(self, name: str = 'content_quality.tasks'):
        self.logger = get_logger(name)

    def log_task_start(self, task_id: str, task_name: str, **kwargs):
        self.logger.info(f"Task started: {task_name} ({task_id})", task_id=task_id, task_name=task_name, **kwargs)

    def log_task_progress(self, task_id: str, progress: int, status: str, **kwargs):
        self.logger.info(f"Task {task_id} at {progress}%: {status}", task_id=task_id, progress=progress, **kwargs)

    def log_task_complete(self, task_id: str, task_name: str, duration: float, **kwargs):
        self.logger.info(
            f"Task completed: {task_name} ({task_id}) in {duration:.2f}s",
            task_id=task_id,
            task_name=task_name,
            duration=round(duration, 3),
            **kwargs
        )

    def log_task_error(self, task_id: str, task_name: str, error: str, **kwargs):
        self.logger.error(f"Task failed: {task_name} ({task_id}): {error}", task_id=task_id, task_name=task_name, **kwargs)
