"""
Error handling middleware for Content Quality.

Pipeline exceptions become ErrorResponse JSON bodies; werkzeug HTTP
errors keep their status; anything else is a generic 500.
"""

import logging
from flask import jsonify, g
from werkzeug.exceptions import HTTPException

from ...core.models.errors import (
    ContentQualityError,
    ErrorResponse,
    ValidationError,
    LLMError,
    RemoteServiceError,
    TaskError,
    ConfigurationError,
    RateLimitError
)


logger = logging.getLogger(__name__)

# exception type -> (error name, HTTP status, log level)
ERROR_STATUS = {
    ValidationError: ("validation_error", 400, logging.WARNING),
    RemoteServiceError: ("remote_service_error", 503, logging.ERROR),
    TaskError: ("task_error", 500, logging.ERROR),
    ConfigurationError: ("configuration_error", 500, logging.ERROR),
    RateLimitError: ("rate_limit_error", 429, logging.WARNING),
}


def error_json(response: ErrorResponse):
    """JSON body and status for an ErrorResponse."""
    response.request_id = response.request_id or getattr(g, 'request_id', None)
    return jsonify(response.model_dump(mode='json')), response.status


class ErrorHandler:
    """Centralized error handling for the API."""

    @staticmethod
    def register_handlers(app):
        """Register error handlers with Flask app."""

        @app.errorhandler(LLMError)
        def handle_llm_error(error):
            return ErrorHandler.handle_llm_error(error)

        @app.errorhandler(ContentQualityError)
        def handle_pipeline_error(error):
            return ErrorHandler.handle_pipeline_error(error)

        @app.errorhandler(HTTPException)
        def handle_http_error(error):
            return ErrorHandler.handle_http_error(error)

        @app.errorhandler(Exception)
        def handle_generic_error(error):
            return ErrorHandler.handle_generic_error(error)

    @staticmethod
    def handle_pipeline_error(error: ContentQualityError):
        name, status, level = "content_quality_error", 500, logging.ERROR
        for error_type, mapping in ERROR_STATUS.items():
            if isinstance(error, error_type):
                name, status, level = mapping
                break

        logger.log(level, f"{type(error).__name__}: {error.message}")

        response = ErrorResponse.from_exception(error, status=status)
        response.error = name
        return error_json(response)

    @staticmethod
    def handle_llm_error(error: LLMError):
        """Retryable provider failures are a 503; the rest are bad requests."""
        logger.error(f"LLM error from {error.provider or 'unknown provider'}: {error.message}")

        response = ErrorResponse.from_exception(error, status=503 if error.retryable else 400)
        response.error = "llm_error"
        return error_json(response)

    @staticmethod
    def handle_http_error(error: HTTPException):
        """Werkzeug errors (404, 405, 413, 429 from the limiter) keep their status."""
        status = error.code or 500

        return error_json(ErrorResponse(
            error=(error.name or "http_error").lower().replace(' ', '_'),
            message=error.description or error.name or "HTTP error",
            error_code=f"HTTP_{status}",
            status=status
        ))

    @staticmethod
    def handle_generic_error(error: Exception):
        request_id = getattr(g, 'request_id', 'unknown')

        logger.error(
            f"Unhandled error in request {request_id}: {str(error)}",
            exc_info=True
        )

        return error_json(ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred",
            error_code="INTERNAL_SERVER_ERROR",
            status=500,
            details={
                "request_id": request_id,
                "error_type": type(error).__name__
            }
        ))
