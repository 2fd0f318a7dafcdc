"""
HTML entity decoding and escaping.
"""

import html
import logging


logger = logging.getLogger(__name__)


def decode_entities(text: str) -> str:
    """
    Reverse HTML-entity escaping.

    Decoding never fails the pipeline: on any error the input is
    returned unchanged.

    Args:
        text: Possibly entity-escaped text

    Returns:
        Decoded text
    """
    if not text:
        return ''

    try:
        return html.unescape(text)
    except Exception as e:
        logger.warning(f"Entity decoding failed, keeping input: {str(e)}")
        return text


def escape_unsafe_html(text: str) -> str:
    """Escape markup so it displays as text."""
    if not text:
        return ''

    return (
        text.replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
        .replace("'", '&#x27;')
        .replace('/', '&#x2F;')
    )
