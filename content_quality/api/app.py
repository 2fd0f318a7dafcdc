"""
Main Flask application for Content Quality.

This module creates and configures the Flask application
with middleware, blueprints, error handlers and the pipeline services.
"""

import logging
from datetime import datetime, timezone
from flask import Flask, jsonify
from flask_cors import CORS

from .endpoints import quality_bp, content_bp, health_bp
from .limiter import limiter
from .middleware.logging import LoggingMiddleware
from .middleware.error_handler import ErrorHandler, error_json
from ..core.models.errors import ErrorResponse
from ..core.services import build_services
from ..utils.config import get_config, validate_config
from ..utils.logging import setup_logging


def create_app(config_name: str = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config_name: Configuration name (development, production, testing)

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    # Load configuration
    config = get_config(config_name)
    app.config.from_object(config)
    app.config['RATELIMIT_STORAGE_URI'] = config.RATELIMIT_STORAGE_URL

    setup_logging(app.config)
    logger = logging.getLogger(__name__)

    for problem in validate_config(config):
        logger.warning(f"Configuration problem: {problem}")

    # Initialize extensions
    CORS(app, origins=app.config.get('CORS_ORIGINS', ['*']))
    limiter.init_app(app)

    app.extensions['content_quality'] = build_services(config)

    # Register middleware
    if app.config.get('LOG_REQUESTS', True):
        app.before_request(LoggingMiddleware.before_request)
        app.after_request(LoggingMiddleware.after_request)

    # Register blueprints
    app.register_blueprint(quality_bp)
    app.register_blueprint(content_bp)
    app.register_blueprint(health_bp)

    ErrorHandler.register_handlers(app)

    @app.errorhandler(404)
    def not_found(error):
        return error_json(ErrorResponse(
            error="not_found",
            message="The requested resource was not found",
            error_code="NOT_FOUND",
            status=404
        ))

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_json(ErrorResponse(
            error="method_not_allowed",
            message="The method is not allowed for the requested URL",
            error_code="METHOD_NOT_ALLOWED",
            status=405
        ))

    @app.route('/')
    def root():
        return jsonify({
            "service": "content-quality",
            "version": app.config.get('API_VERSION'),
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "health": "/api/v1/health",
                "assess": "/api/v1/quality/assess",
                "docs": "/api/v1/docs"
            }
        })

    @app.route('/api/v1/docs')
    def api_docs():
        return jsonify({
            "title": f"{app.config.get('API_TITLE')} API",
            "version": app.config.get('API_VERSION'),
            "description": "Normalizes, sanitizes, scores and improves article content",
            "endpoints": {
                "quality": {
                    "assess": {
                        "method": "POST",
                        "path": "/api/v1/quality/assess",
                        "description": "Score content for readability, SEO, engagement, uniqueness and AI patterns"
                    },
                    "improve": {
                        "method": "POST",
                        "path": "/api/v1/quality/improve",
                        "description": "Apply local fixes, then a remote rewrite if the score stays low"
                    },
                    "check": {
                        "method": "POST",
                        "path": "/api/v1/quality/check",
                        "description": "Remote quality check with local fallback"
                    },
                    "stats": {
                        "method": "POST",
                        "path": "/api/v1/quality/stats",
                        "description": "Batch statistics, low-quality items, alerts and trend"
                    }
                },
                "content": {
                    "sanitize": {
                        "method": "POST",
                        "path": "/api/v1/content/sanitize",
                        "description": "Allow-list HTML sanitizer"
                    },
                    "render": {
                        "method": "POST",
                        "path": "/api/v1/content/render",
                        "description": "Render HTML, escaped HTML, Markdown or plain text to display HTML"
                    },
                    "validate": {
                        "method": "POST",
                        "path": "/api/v1/content/validate",
                        "description": "Structural HTML validation"
                    }
                },
                "health": {
                    "basic": {"method": "GET", "path": "/api/v1/health"},
                    "detailed": {"method": "GET", "path": "/api/v1/health/detailed"},
                    "ready": {"method": "GET", "path": "/api/v1/health/ready"},
                    "live": {"method": "GET", "path": "/api/v1/health/live"}
                }
            },
            "rate_limiting": {
                "default": app.config.get('RATELIMIT_DEFAULT'),
                "improve_and_check": "30 requests per minute",
                "content": "300 requests per minute"
            }
        })

    logger.info(f"Flask application created with config: {config_name}")

    return app


def run_app(host: str = '0.0.0.0', port: int = 5001, debug: bool = False):
    """
    Run the Flask application.

    Args:
        host: Host to bind to
        port: Port to bind to
        debug: Enable debug mode
    """
    app = create_app()

    logger = logging.getLogger(__name__)
    logger.info(f"Starting Content Quality on {host}:{port}")

    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_app()
