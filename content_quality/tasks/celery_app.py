"""
Celery application for Content Quality.

Batch assessment and improvement run on the 'quality' queue:

    celery -A content_quality.tasks.celery_app worker -Q quality
"""

from celery import Celery
from ..utils.config import Config, get_config

QUALITY_QUEUE = 'quality'


def create_celery_app(config: Config) -> Celery:
    """Celery app wired to the broker, limits and routes in config."""
    app = Celery('content_quality')

    app.conf.update(
        broker_url=config.CELERY_BROKER_URL,
        result_backend=config.CELERY_RESULT_BACKEND,
        task_serializer='json',
        result_serializer='json',
        accept_content=['json'],
        timezone='UTC',
        enable_utc=True,
        task_track_started=True,
        # a batch can hold hundreds of items; hand it back if the worker dies
        task_acks_late=True,
        task_time_limit=config.CELERY_TASK_TIME_LIMIT,
        task_soft_time_limit=config.CELERY_TASK_SOFT_TIME_LIMIT,
        worker_prefetch_multiplier=config.CELERY_WORKER_PREFETCH_MULTIPLIER,
        worker_max_tasks_per_child=config.CELERY_WORKER_MAX_TASKS_PER_CHILD,
        task_default_queue=QUALITY_QUEUE,
        task_routes={'content_quality.tasks.quality.*': {'queue': QUALITY_QUEUE}},
        imports=('content_quality.tasks.quality',)
    )

    return app


config = get_config()
celery_app = create_celery_app(config)
