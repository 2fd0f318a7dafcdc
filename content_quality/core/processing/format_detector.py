"""
Content format detection.

This module classifies raw text as HTML, HTML-escaped markup, Markdown
or plain text. The checks run in a fixed priority order: escaped
markup is tested before raw markup, and both before Markdown, so that
"&lt;h2&gt;Title&lt;/h2&gt;" is never mistaken for Markdown.
"""

import logging
import re

from ..models.content import ContentFormat


logger = logging.getLogger(__name__)

ENTITY_MARKERS = ('&lt;', '&gt;', '&amp;')

ESCAPED_TAG_PATTERN = re.compile(r'&lt;/?[a-z][a-z0-9]*\b.*?&gt;', re.IGNORECASE | re.DOTALL)
RAW_TAG_PATTERN = re.compile(r'</?[a-z][a-z0-9]*\b[^>]*>', re.IGNORECASE)

MARKDOWN_PATTERNS = [
    re.compile(r'^#{1,6}\s+\S', re.MULTILINE),                        # ATX heading
    re.compile(r'^\s*[-*+]\s+\S', re.MULTILINE),                      # bullet list
    re.compile(r'^\s*\d+[.)]\s+\S', re.MULTILINE),                    # numbered list
    re.compile(r'\*\*[^*\n]+\*\*'),                                   # bold
    re.compile(r'__[^_\n]+__'),                                       # bold
    re.compile(r'(?<![*\w])\*[^*\s][^*\n]*\*(?![*\w])'),              # italic
    re.compile(r'(?<!\w)_[^_\s][^_\n]*_(?!\w)'),                      # italic
    re.compile(r'\[[^\]\n]+\]\([^)\s]+\)'),                           # link
    re.compile(r'^\s*\|.*\|\s*\n\s*\|?\s*:?-{3,}', re.MULTILINE),    # table with separator row
]


def is_html_escaped(text: str) -> bool:
    """True when text carries entity-escaped tags."""
    if not any(marker in text for marker in ENTITY_MARKERS):
        return False
    return bool(ESCAPED_TAG_PATTERN.search(text))


def is_html(text: str) -> bool:
    """True when text contains at least one raw tag."""
    return bool(RAW_TAG_PATTERN.search(text))


def is_markdown(text: str) -> bool:
    """True when any Markdown signal is present."""
    return any(pattern.search(text) for pattern in MARKDOWN_PATTERNS)


def detect_format(text: str) -> ContentFormat:
    """
    Classify raw content.

    Args:
        text: Raw content

    Returns:
        One of HTML_ESCAPED, HTML, MARKDOWN or PLAIN (never AUTO)
    """
    if not text or not text.strip():
        return ContentFormat.PLAIN

    if is_html_escaped(text):
        detected = ContentFormat.HTML_ESCAPED
    elif is_html(text):
        detected = ContentFormat.HTML
    elif is_markdown(text):
        detected = ContentFormat.MARKDOWN
    else:
        detected = ContentFormat.PLAIN

    logger.debug(f"Detected content format: {detected.value} ({len(text)} chars)")
    return detected
