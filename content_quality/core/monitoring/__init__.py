"""
Quality monitoring for Content Quality.
"""

from .monitor import QualityMonitor

__all__ = ['QualityMonitor']
