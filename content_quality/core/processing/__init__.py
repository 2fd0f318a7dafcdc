"""
Processing stages for Content Quality.

Format detection, entity decoding, conversion, tag repair, structure
normalization, sanitizing and cleaning.
"""

from .format_detector import detect_format
from .entities import decode_entities, escape_unsafe_html
from .converter import to_html, markdown_to_html, plain_to_html
from .tag_repair import repair_tags
from .structure import normalize_structure
from .sanitizer import sanitize_html
from .cleaner import clean_content, remove_repetitive_content, clean_ai_placeholders
from .renderer import process_html, render_content

__all__ = [
    'detect_format',
    'decode_entities',
    'escape_unsafe_html',
    'to_html',
    'markdown_to_html',
    'plain_to_html',
    'repair_tags',
    'normalize_structure',
    'sanitize_html',
    'clean_content',
    'remove_repetitive_content',
    'clean_ai_placeholders',
    'process_html',
    'render_content'
]
