"""
Structure normalization for repaired HTML.
"""

import logging
import re


logger = logging.getLogger(__name__)

EMPTY_ELEMENT_PATTERN = re.compile(r'<(p|div|li)(?:\s[^>]*)?>\s*</\1\s*>', re.IGNORECASE)
EXCESS_NEWLINES_PATTERN = re.compile(r'\n{3,}')
TAG_TRAILING_SPACE_PATTERN = re.compile(r'<(\w+)([^>]*?)\s+>')
NESTED_PARAGRAPH_PATTERN = re.compile(r'(<p\b[^>]*>)([^<]*)<p\b[^>]*>', re.IGNORECASE)
H1_TOKEN_PATTERN = re.compile(r'<(/?)h1\b([^>]*)>', re.IGNORECASE)
BLOCK_TAG_PATTERN = re.compile(
    r'<(?:p|div|h[1-6]|ul|ol|li|table|blockquote|pre|section|article|figure|hr)\b',
    re.IGNORECASE
)

MAX_PASSES = 10


def normalize_structure(html: str) -> str:
    """
    Normalize the block structure of repaired HTML.

    Args:
        html: Repaired HTML

    Returns:
        Normalized HTML
    """
    if not html:
        return ''

    normalized = remove_empty_elements(html)
    normalized = EXCESS_NEWLINES_PATTERN.sub('\n\n', normalized)
    normalized = TAG_TRAILING_SPACE_PATTERN.sub(r'<\1\2>', normalized)
    normalized = wrap_leading_text(normalized)
    normalized = flatten_nested_paragraphs(normalized)
    normalized = demote_extra_h1(normalized)

    return normalized.strip()


def remove_empty_elements(html: str) -> str:
    """Drop p/div/li pairs holding only whitespace, including ones emptied by earlier removals."""
    for _ in range(MAX_PASSES):
        cleaned = EMPTY_ELEMENT_PATTERN.sub('', html)
        if cleaned == html:
            break
        html = cleaned
    return html


def wrap_leading_text(html: str) -> str:
    """Wrap text that precedes the first block-level tag in a paragraph."""
    stripped = html.lstrip()
    if not stripped or stripped.startswith('<') and BLOCK_TAG_PATTERN.match(stripped):
        return html

    block = BLOCK_TAG_PATTERN.search(stripped)
    leading = stripped[:block.start()] if block else stripped
    rest = stripped[block.start():] if block else ''

    if not leading.strip():
        return html

    return f"<p>{leading.strip()}</p>{rest}"


def flatten_nested_paragraphs(html: str) -> str:
    """Drop a <p> opened directly inside another paragraph's text."""
    for _ in range(MAX_PASSES):
        flattened = NESTED_PARAGRAPH_PATTERN.sub(r'\1\2', html)
        if flattened == html:
            break
        html = flattened
    return html


def demote_extra_h1(html: str) -> str:
    """Keep the first <h1>, turn every later one into <h2>."""
    counts = {'open': 0, 'close': 0}

    def _demote(match) -> str:
        kind = 'close' if match.group(1) else 'open'
        counts[kind] += 1
        if counts[kind] == 1:
            return match.group(0)
        return f"<{match.group(1)}h2{match.group(2)}>"

    return H1_TOKEN_PATTERN.sub(_demote, html)
