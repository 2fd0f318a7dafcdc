"""
Service wiring.

Builds the remote enhancer once per process and injects it into the
improver, the quality service and the batch monitor. Used by the
Flask app factory and the Celery worker.
"""

import logging
from typing import Any, Dict

from ..integrations.llm.enhancer import create_remote_enhancer
from .improvement.improver import ContentImprover
from .improvement.quality_service import ContentQualityService
from .monitoring.monitor import QualityMonitor


logger = logging.getLogger(__name__)


def build_services(config) -> Dict[str, Any]:
    """
    Create the pipeline services for one process.

    Args:
        config: Config object

    Returns:
        Dict with enhancer (or None), improver, quality_service and monitor
    """
    enhancer = create_remote_enhancer(config)
    improver = ContentImprover(enhancer=enhancer, placeholder_src=config.PLACEHOLDER_IMAGE)

    monitor = QualityMonitor(
        improver=improver,
        alert_threshold=config.MONITOR_ALERT_THRESHOLD,
        pass_score=config.QUALITY_PASS_SCORE,
        delay_between_items=config.MONITOR_BATCH_DELAY,
        low_quality_limit=config.MONITOR_LOW_QUALITY_LIMIT
    )

    logger.info(f"Pipeline services ready (remote enhancer: {'on' if enhancer else 'off'})")

    return {
        'enhancer': enhancer,
        'improver': improver,
        'quality_service': ContentQualityService(enhancer=enhancer),
        'monitor': monitor
    }
