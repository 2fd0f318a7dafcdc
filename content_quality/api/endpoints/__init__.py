"""
API endpoints for Content Quality.

This module contains all the REST API endpoints for the service.
"""

from .quality import quality_bp
from .content import content_bp
from .health import health_bp

__all__ = [
    'quality_bp',
    'content_bp',
    'health_bp'
]
