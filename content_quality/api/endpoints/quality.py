"""
Quality API endpoints for Content Quality.

This module provides the endpoints that score content, improve it,
run the remote-or-local quality check and build batch reports.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional, Tuple, Type

from flask import Blueprint, request, jsonify, current_app
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ...core.models.errors import ErrorResponse
from ...core.models.improvement import ImproveOptions
from ...core.models.monitor import QualityRecord
from ...core.scoring.aggregator import assess_quality
from ..limiter import limiter
from ..middleware.logging import LoggingMiddleware
from ..schemas.quality import (
    AssessRequestSchema,
    ImproveRequestSchema,
    CheckRequestSchema,
    StatsRequestSchema,
    validation_error_response
)


logger = logging.getLogger(__name__)

# Create blueprint
quality_bp = Blueprint('quality', __name__, url_prefix='/api/v1')


def services() -> Dict[str, Any]:
    """Improver, quality service, monitor and enhancer built by create_app."""
    return current_app.extensions['content_quality']


def load_body(schema: Type[BaseModel]) -> Tuple[Optional[BaseModel], Optional[Tuple[Any, int]]]:
    """
    Validate the JSON body against a schema.

    Returns:
        (parsed, None) on success, (None, error response) otherwise
    """
    if not request.is_json:
        return None, (jsonify(ErrorResponse(
            error="invalid_content_type",
            message="Content-Type must be application/json",
            error_code="INVALID_CONTENT_TYPE",
            status=400
        ).model_dump(mode='json')), 400)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, (jsonify(ErrorResponse(
            error="invalid_request",
            message="Request body must be a JSON object",
            error_code="INVALID_REQUEST",
            status=400
        ).model_dump(mode='json')), 400)

    try:
        return schema(**data), None
    except PydanticValidationError as e:
        return None, (jsonify(validation_error_response(e).model_dump(mode='json')), 400)


@quality_bp.route('/quality/assess', methods=['POST'])
@limiter.limit("120 per minute")
def assess():
    """
    Score content.

    Expected JSON body:
    {
        "content": "HTML, Markdown or plain text",
        "title": "Content title",
        "meta": {"description": "...", "keywords": ["..."]},
        "corpus": [{"id": "1", "title": "...", "content": "..."}],
        "site_host": "example.com"
    }
    """
    body, error = load_body(AssessRequestSchema)
    if error:
        return error

    started = time.time()
    score = assess_quality(
        body.content,
        body.title,
        meta=body.meta,
        corpus=body.corpus,
        site_host=body.site_host or current_app.config.get('SITE_HOST') or None
    )
    LoggingMiddleware.log_performance('assess_quality', time.time() - started, {'chars': len(body.content)})

    return jsonify(score.model_dump(mode='json')), 200


@quality_bp.route('/quality/improve', methods=['POST'])
@limiter.limit("30 per minute")
def improve():
    """
    Improve content locally, and remotely when it stays below the threshold.

    Expected JSON body:
    {
        "content": "HTML, Markdown or plain text",
        "title": "Content title",
        "options": {"use_remote": true, "min_score": 50}
    }
    """
    body, error = load_body(ImproveRequestSchema)
    if error:
        return error

    improver = services()['improver']
    options = body.options or ImproveOptions(min_score=current_app.config.get('QUALITY_MIN_SCORE', 50))

    started = time.time()
    result = asyncio.run(improver.improve(body.content, body.title, options))
    LoggingMiddleware.log_performance(
        'improve_content',
        time.time() - started,
        {'remote': result.used_remote_enhancer, 'delta': result.score_delta}
    )

    return jsonify(result.model_dump(mode='json')), 200


@quality_bp.route('/quality/check', methods=['POST'])
@limiter.limit("30 per minute")
def check():
    """Quality report from the remote enhancer, or the local scorers when it is unavailable."""
    body, error = load_body(CheckRequestSchema)
    if error:
        return error

    service = services()['quality_service']
    report = asyncio.run(service.check_content_quality(body.content, body.title, body.context()))

    return jsonify(report.model_dump(mode='json')), 200


@quality_bp.route('/quality/stats', methods=['POST'])
@limiter.limit("30 per minute")
def stats():
    """
    Batch report: statistics, worst items, alerts and trend.

    Records without a quality_score are assessed first.
    """
    body, error = load_body(StatsRequestSchema)
    if error:
        return error

    monitor = services()['monitor']
    unscored = [r for r in body.records if 'quality_score' not in r]

    try:
        scored = [QualityRecord(**r) for r in body.records if 'quality_score' in r]
    except PydanticValidationError as e:
        return jsonify(validation_error_response(e).model_dump(mode='json')), 400

    if unscored:
        scored.extend(monitor.assess_batch(unscored))

    report = monitor.build_report(scored)
    logger.info(f"Built quality report for {report.stats.total} items")

    return jsonify(report.model_dump(mode='json')), 200
