"""
Health check endpoints for Content Quality.

This module provides health check endpoints for load balancers and
orchestrators. The pipeline itself has no external dependencies; the
only optional component is the remote enhancer.
"""

import logging
import time
from datetime import datetime, timezone
from flask import Blueprint, jsonify, current_app

from ...core.scoring.aggregator import assess_quality


logger = logging.getLogger(__name__)

# Create blueprint
health_bp = Blueprint('health', __name__, url_prefix='/api/v1')

SERVICE_NAME = "content-quality"
SMOKE_TEST_HTML = "<h2>Health</h2><p>The pipeline is able to score this short paragraph.</p>"

STARTED_AT = time.time()


def enhancer_status() -> dict:
    """Remote enhancer state: configured, or disabled with a reason."""
    enhancer = current_app.extensions['content_quality'].get('enhancer')
    if enhancer is not None:
        llm = getattr(enhancer, 'llm_client', None)
        return {
            "status": "configured",
            "provider": getattr(llm, 'default_provider', None),
            "model": getattr(llm, 'default_model', None),
            "timeout": getattr(enhancer, 'timeout', None)
        }

    if not current_app.config.get('REMOTE_ENHANCER_ENABLED'):
        reason = "disabled by configuration"
    else:
        reason = "no API key configured"
    return {"status": "disabled", "reason": reason}


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Basic health check endpoint.

    Returns:
        Service health status
    """
    return jsonify({
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": current_app.config.get('API_VERSION', '1.0.0'),
        "service": SERVICE_NAME
    }), 200


@health_bp.route('/health/detailed', methods=['GET'])
def detailed_health_check():
    """
    Detailed health check endpoint.

    Runs the local scorer on a fixed snippet and reports the remote
    enhancer state. A missing enhancer is not a failure: scoring falls
    back to the local pipeline.
    """
    components = {"remote_enhancer": enhancer_status()}

    started = time.time()
    try:
        score = assess_quality(SMOKE_TEST_HTML, "Health check")
        components["pipeline"] = {
            "status": "healthy",
            "smoke_score": score.overall,
            "duration_ms": round((time.time() - started) * 1000, 1)
        }
    except Exception as e:
        logger.error(f"Pipeline smoke test failed: {str(e)}", exc_info=True)
        components["pipeline"] = {"status": "unhealthy", "error": str(e)}

    overall_status = "healthy" if components["pipeline"]["status"] == "healthy" else "unhealthy"

    return jsonify({
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": current_app.config.get('API_VERSION', '1.0.0'),
        "service": SERVICE_NAME,
        "components": components
    }), 200 if overall_status == "healthy" else 503


@health_bp.route('/health/ready', methods=['GET'])
def readiness_check():
    """Ready once create_app has built the pipeline services."""
    services = current_app.extensions.get('content_quality')
    if not services or services.get('improver') is None:
        return jsonify({
            "status": "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }), 503

    return jsonify({
        "status": "ready",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }), 200


@health_bp.route('/health/live', methods=['GET'])
def liveness_check():
    """Liveness check endpoint."""
    return jsonify({
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.time() - STARTED_AT, 1)
    }), 200
