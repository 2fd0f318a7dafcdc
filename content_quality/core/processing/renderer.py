"""
Top-level rendering for raw content.

This module chains the processing passes: format detection,
conversion, tag repair, structure normalization, sanitizing and a
final layout cleanup. Every caller, whether it pre-renders content in
a batch or renders it on request, goes through process_html so the
two paths always produce identical markup.
"""

import logging
import re
from typing import Optional

from ..models.content import ContentFormat, RenderOptions, SanitizeOptions
from .converter import to_html
from .format_detector import detect_format
from .sanitizer import sanitize_html
from .structure import normalize_structure
from .tag_repair import DEFAULT_IMAGE_ALT, DEFAULT_PLACEHOLDER_SRC, repair_tags


logger = logging.getLogger(__name__)

TABLE_WRAPPER_CLASS = 'table-scroll overflow-x-auto'

CODE_FENCE_PATTERN = re.compile(r'^\s*```[a-zA-Z]*\s*\n(.*?)\n?\s*```\s*$', re.DOTALL)
PRE_BLOCK_PATTERN = re.compile(r'<pre\b.*?</pre>', re.IGNORECASE | re.DOTALL)
PRE_STASH_PATTERN = re.compile(r'\x00PRE(\d+)\x00')
WHITESPACE_RUN_PATTERN = re.compile(r'\s+')
BLOCK_TAGS = r'(?:p|div|h[1-6]|ul|ol|li|table|thead|tbody|tr|th|td|blockquote|pre|section|article|figure|hr)'
BLOCK_GAP_PATTERN = re.compile(r'(</?' + BLOCK_TAGS + r'\b[^>]*>)\s+(?=</?' + BLOCK_TAGS + r'\b)', re.IGNORECASE)
BLOCK_BREAK_PATTERN = re.compile(r'\s*(<(?:p|div|h[1-6]|ul|ol|table|blockquote|pre|section|article|figure|hr)\b)', re.IGNORECASE)
EMPTY_ATTRIBUTE_PATTERN = re.compile(r'\s+(?!alt=)[a-zA-Z-]+=""')
TABLE_PATTERN = re.compile(r'<table\b.*?</table>', re.IGNORECASE | re.DOTALL)
EMPTIED_ELEMENT_PATTERN = re.compile(r'<(p|div|li|span|h[1-6])\b[^>]*>\s*</\1\s*>', re.IGNORECASE)

MAX_PASSES = 10


def strip_code_fences(text: str) -> str:
    """Unwrap content an AI writer returned inside a ``` fence."""
    match = CODE_FENCE_PATTERN.match(text or '')
    return match.group(1) if match else (text or '')


def cleanup_layout(html: str) -> str:
    """
    Collapse whitespace and put block-level tags on their own line.

    Whitespace inside <pre> is left alone.
    """
    if not html:
        return ''

    blocks = []

    def _stash(match) -> str:
        blocks.append(match.group(0))
        return f"\x00PRE{len(blocks) - 1}\x00"

    cleaned = PRE_BLOCK_PATTERN.sub(_stash, html)
    cleaned = WHITESPACE_RUN_PATTERN.sub(' ', cleaned)
    cleaned = BLOCK_GAP_PATTERN.sub(r'\1', cleaned)
    cleaned = BLOCK_BREAK_PATTERN.sub(r'\n\1', cleaned)
    cleaned = EMPTY_ATTRIBUTE_PATTERN.sub('', cleaned)
    cleaned = PRE_STASH_PATTERN.sub(lambda m: blocks[int(m.group(1))], cleaned)

    return cleaned.strip()


def process_html(
    html: str,
    options: Optional[SanitizeOptions] = None,
    placeholder_src: str = DEFAULT_PLACEHOLDER_SRC,
    default_alt: str = DEFAULT_IMAGE_ALT
) -> str:
    """
    Repair, normalize, sanitize and tidy HTML.

    Args:
        html: HTML of any quality
        options: Sanitizer allow-list switches
        placeholder_src: Image path for images without a source
        default_alt: Alt text for repaired images

    Returns:
        Safe, balanced HTML
    """
    if not html or not html.strip():
        return ''

    processed = repair_tags(html.strip(), placeholder_src=placeholder_src, default_alt=default_alt)
    processed = normalize_structure(processed)
    processed = sanitize_html(processed, options)
    # the sanitizer can empty elements or expose bare text
    processed = remove_emptied_elements(normalize_structure(processed))
    return cleanup_layout(processed)


def remove_emptied_elements(html: str) -> str:
    """Drop p/div/li/span/h1-6 pairs holding only whitespace, repeatedly."""
    for _ in range(MAX_PASSES):
        cleaned = EMPTIED_ELEMENT_PATTERN.sub('', html)
        if cleaned == html:
            break
        html = cleaned
    return html


def wrap_tables(html: str) -> str:
    """Put every table in a horizontally scrollable container."""
    if not html:
        return ''

    wrapper_open = f'<div class="{TABLE_WRAPPER_CLASS}">'

    def _wrap(match) -> str:
        if html[:match.start()].endswith(wrapper_open):
            return match.group(0)
        return f"{wrapper_open}{match.group(0)}</div>"

    return TABLE_PATTERN.sub(_wrap, html)


def render_content(raw: str, options: Optional[RenderOptions] = None) -> str:
    """
    Turn raw stored content into display-ready HTML.

    Args:
        raw: Raw content in any supported format
        options: Render options

    Returns:
        Display-ready HTML; empty string for empty input
    """
    if not raw or not raw.strip():
        return ''

    options = options or RenderOptions()
    text = strip_code_fences(raw)

    fmt = ContentFormat(options.format)
    if fmt == ContentFormat.AUTO:
        fmt = detect_format(text)

    html = to_html(text, fmt)

    if options.sanitize:
        html = process_html(html, options.sanitize_options())

    if options.wrap_tables:
        html = wrap_tables(html)

    logger.debug(f"Rendered {fmt.value} content ({len(raw)} -> {len(html)} chars)")
    return html
