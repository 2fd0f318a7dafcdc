"""
Request logging middleware for Content Quality.

This module logs each request with an id, its duration and the
status of the response. Request bodies are summarized by field
sizes only; content is never written to the log.
"""

import logging
import time
import uuid
from flask import request, g


logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = frozenset(['api_key', 'llm_key', 'password', 'token'])


def summarize_body(data) -> dict:
    """Field name -> size summary of a JSON body."""
    if not isinstance(data, dict):
        return {'type': type(data).__name__}

    summary = {}
    for key, value in data.items():
        if key in SENSITIVE_FIELDS:
            summary[key] = '***'
        elif isinstance(value, (str, list, dict)):
            summary[key] = f"len={len(value)}"
        else:
            summary[key] = value
    return summary


class LoggingMiddleware:
    """Request/response logging."""

    @staticmethod
    def before_request():
        g.start_time = time.time()
        g.request_id = f"req_{uuid.uuid4().hex[:12]}"

        logger.info(
            f"Request started: {g.request_id} - {request.method} {request.path} "
            f"from {request.remote_addr}"
        )

        if request.method == 'POST' and request.is_json:
            data = request.get_json(silent=True)
            logger.debug(f"Request body: {summarize_body(data)}")

    @staticmethod
    def after_request(response):
        if hasattr(g, 'start_time'):
            duration = time.time() - g.start_time

            logger.info(
                f"Request completed: {g.request_id} - {response.status_code} "
                f"in {duration:.3f}s"
            )

            if response.status_code >= 400:
                logger.warning(
                    f"Error response: {g.request_id} - {response.status_code} "
                    f"for {request.method} {request.path}"
                )

            response.headers['X-Request-ID'] = g.request_id

        return response

    @staticmethod
    def log_performance(operation: str, duration: float, details: dict = None):
        """
        Log how long a pipeline operation took.

        Args:
            operation: Operation name
            duration: Duration in seconds
            details: Additional details
        """
        request_id = getattr(g, 'request_id', 'unknown')

        logger.info(
            f"Performance: {operation} took {duration:.3f}s",
            extra={
                'request_id': request_id,
                'operation': operation,
                'duration': duration,
                'details': details or {}
            }
        )
