"""
Quality tasks for Content Quality.

This module contains Celery tasks that assess and improve batches of
stored items. Tasks return JSON-ready write-back payloads; persisting
them is left to the caller.
"""

import asyncio
import logging
import time
from typing import Dict, Any, List, Optional

from .celery_app import celery_app, config
from ..core.models.errors import TaskError
from ..core.models.improvement import ImproveOptions
from ..core.services import build_services
from ..utils.logging import TaskLogger

logger = logging.getLogger(__name__)
task_logger = TaskLogger()

_services: Optional[Dict[str, Any]] = None


def get_services() -> Dict[str, Any]:
    """Pipeline services for this worker process, built on first use."""
    global _services
    if _services is None:
        _services = build_services(config)
    return _services


@celery_app.task(bind=True, name='content_quality.tasks.quality.assess_batch_task')
def assess_batch_task(self, records: List[Dict[str, Any]], check_duplicates: bool = False) -> Dict[str, Any]:
    """
    Assess a batch of stored items.

    Args:
        records: Items shaped {id, title, slug, content, ...}
        check_duplicates: Compare each item with the rest of the batch

    Returns:
        Write-back records and the batch report
    """
    task_id = self.request.id
    started = time.time()

    try:
        task_logger.log_task_start(task_id, 'assess_batch_task', items=len(records))

        monitor = get_services()['monitor']
        monitor.check_duplicates = check_duplicates
        results = monitor.assess_batch(records)
        report = monitor.build_report(results)

        task_logger.log_task_complete(task_id, 'assess_batch_task', time.time() - started)

        return {
            'status': 'completed',
            'task_id': task_id,
            'records': [r.model_dump(mode='json') for r in results],
            'report': report.model_dump(mode='json')
        }

    except Exception as e:
        error_msg = f"Batch assessment failed: {str(e)}"
        logger.error(error_msg, exc_info=True)
        task_logger.log_task_error(task_id, 'assess_batch_task', error_msg)
        raise TaskError(message=error_msg, task_id=task_id, records=len(records)) from e


@celery_app.task(bind=True, name='content_quality.tasks.quality.improve_batch_task')
def improve_batch_task(self, records: List[Dict[str, Any]], options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Improve a batch of stored items one by one.

    Progress is reported through the PROGRESS state after each item.

    Args:
        records: Items shaped {id, title, slug, content, ...}
        options: ImproveOptions fields

    Returns:
        One improvement record per item
    """
    task_id = self.request.id
    started = time.time()

    try:
        task_logger.log_task_start(task_id, 'improve_batch_task', items=len(records))

        improve_options = ImproveOptions(**(options or {}))
        monitor = get_services()['monitor']
        total = len(records)
        results = []

        for index, record in enumerate(records, start=1):
            results.extend(asyncio.run(monitor.improve_batch([record], improve_options)))

            progress = int(index * 100 / total)
            self.update_state(
                state='PROGRESS',
                meta={
                    'current': index,
                    'total': total,
                    'progress_percent': progress,
                    'item_id': str(record.get('id', ''))
                }
            )
            task_logger.log_task_progress(task_id, progress, f"improved {index}/{total}")

            if index < total and monitor.delay_between_items > 0 and monitor.improver.enhancer is not None:
                time.sleep(monitor.delay_between_items)

        task_logger.log_task_complete(task_id, 'improve_batch_task', time.time() - started)

        return {
            'status': 'completed',
            'task_id': task_id,
            'records': [r.model_dump(mode='json') for r in results],
            'improved': sum(1 for r in results if r.improved_score > r.original_score),
            'failed': sum(1 for r in results if r.error)
        }

    except Exception as e:
        error_msg = f"Batch improvement failed: {str(e)}"
        logger.error(error_msg, exc_info=True)
        task_logger.log_task_error(task_id, 'improve_batch_task', error_msg)
        raise TaskError(message=error_msg, task_id=task_id, records=len(records)) from e


def get_task_status(task_id: str) -> Optional[Dict[str, Any]]:
    """
    Get task status.

    Args:
        task_id: Task ID

    Returns:
        Task status or None if it cannot be read
    """
    try:
        task = celery_app.AsyncResult(task_id)
        info = task.info if isinstance(task.info, dict) else {}

        return {
            'status': task.status,
            'ready': task.ready(),
            'result': task.result if task.successful() else None,
            'progress_percent': info.get('progress_percent', 0),
            'current': info.get('current', 0),
            'total': info.get('total', 0)
        }

    except Exception as e:
        logger.error(f"Error getting task status: {str(e)}")
        return None
