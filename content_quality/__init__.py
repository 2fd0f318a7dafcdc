"""
Content Quality - Normalization and Scoring Pipeline

A pipeline that detects the format of raw article/listing text, repairs and
sanitizes its markup, scores it for AI-likeness, SEO, readability, engagement
and uniqueness, and optionally rewrites it with a remote language model.
"""

__version__ = "1.0.0"
__author__ = "Content Quality Team"

from .core.processing.format_detector import detect_format
from .core.processing.entities import decode_entities, escape_unsafe_html
from .core.processing.tag_repair import repair_tags
from .core.processing.structure import normalize_structure
from .core.processing.sanitizer import sanitize_html
from .core.processing.converter import to_html
from .core.processing.cleaner import clean_content
from .core.processing.renderer import render_content, process_html
from .core.processing.article import normalize_article_content, normalize_article_metadata
from .core.scoring.aggregator import assess_quality
from .core.scoring.html_validation import validate_html_structure
from .core.improvement.improver import ContentImprover, improve_content
from .core.improvement.quality_service import ContentQualityService
from .core.monitoring.monitor import QualityMonitor

__all__ = [
    'detect_format',
    'decode_entities',
    'repair_tags',
    'normalize_structure',
    'sanitize_html',
    'escape_unsafe_html',
    'to_html',
    'clean_content',
    'render_content',
    'process_html',
    'normalize_article_content',
    'normalize_article_metadata',
    'assess_quality',
    'validate_html_structure',
    'ContentImprover',
    'improve_content',
    'ContentQualityService',
    'QualityMonitor'
]
