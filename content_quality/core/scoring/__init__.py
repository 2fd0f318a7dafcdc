"""
Quality scorers for Content Quality.

AI-pattern detection, readability, SEO, engagement, duplicate
detection, HTML validation and the aggregate score.
"""

from .ai_patterns import detect_ai_patterns, AI_PATTERN_RULES
from .readability import calculate_readability
from .seo import check_seo_compliance
from .engagement import calculate_engagement
from .duplicates import detect_duplicate_content
from .html_validation import validate_html_structure
from .aggregator import assess_quality

__all__ = [
    'detect_ai_patterns',
    'AI_PATTERN_RULES',
    'calculate_readability',
    'check_seo_compliance',
    'calculate_engagement',
    'detect_duplicate_content',
    'validate_html_structure',
    'assess_quality'
]
