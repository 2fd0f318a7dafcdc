"""
Middleware components for Content Quality.

This module contains middleware for request logging and error handling.
"""

from .logging import LoggingMiddleware
from .error_handler import ErrorHandler

__all__ = [
    'LoggingMiddleware',
    'ErrorHandler'
]
