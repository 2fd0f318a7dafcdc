"""
Content improvement for Content Quality.
"""

from .fallback import score_with_fallback
from .improver import ContentImprover, improve_content
from .quality_service import ContentQualityService

__all__ = [
    'score_with_fallback',
    'ContentImprover',
    'improve_content',
    'ContentQualityService'
]
