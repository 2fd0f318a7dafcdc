"""
HTTP API for Content Quality.
"""

from .app import create_app, run_app

__all__ = ['create_app', 'run_app']
