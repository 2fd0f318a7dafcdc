"""
HTML structure validation.

This module reports structural problems without changing the input.
When errors are found it also offers the fully processed version of
the markup as a suggested fix.
"""

import re
from typing import List

from ..models.quality import HTMLValidationResult
from ..processing.renderer import process_html
from ..processing.tag_repair import TAG_TOKEN_PATTERN, find_unbalanced_tags


IMG_PATTERN = re.compile(r'<img\b[^>]*>', re.IGNORECASE)
IMG_SRC_PATTERN = re.compile(r'''(?<![\w-])src\s*=\s*(?:"[^"]*\S[^"]*"|'[^']*\S[^']*'|[^\s"'>]+)''', re.IGNORECASE)
EMPTY_ELEMENT_PATTERN = re.compile(r'<(p|div|span|h[1-6])\b[^>]*>\s*</\1\s*>', re.IGNORECASE)
SCRIPT_PATTERN = re.compile(r'<script\b', re.IGNORECASE)
IFRAME_PATTERN = re.compile(r'<iframe\b', re.IGNORECASE)


def count_nested_paragraphs(html: str) -> int:
    """Count <p> openers that appear while another <p> is still open."""
    depth = 0
    nested = 0

    for match in TAG_TOKEN_PATTERN.finditer(html or ''):
        if match.group(2).lower() != 'p':
            continue
        if match.group(1) == '/':
            depth = max(0, depth - 1)
        else:
            if depth:
                nested += 1
            depth += 1

    return nested


def validate_html_structure(html: str) -> HTMLValidationResult:
    """
    Validate markup structure.

    Args:
        html: HTML to check

    Returns:
        HTMLValidationResult; fixed_html is set only when errors exist
    """
    if not html or not html.strip():
        return HTMLValidationResult(is_valid=True)

    errors: List[str] = []
    warnings: List[str] = []

    unclosed, orphans = find_unbalanced_tags(html)
    if unclosed:
        errors.append(f"Unclosed tags: {', '.join(unclosed)}")
    if orphans:
        warnings.append(f"Closing tags without an opener: {', '.join(orphans)}")

    broken_images = [tag for tag in IMG_PATTERN.findall(html) if not IMG_SRC_PATTERN.search(tag)]
    if broken_images:
        errors.append(f"{len(broken_images)} image tags without a source")

    nested = count_nested_paragraphs(html)
    if nested:
        errors.append(f"{nested} paragraphs nested inside another paragraph")

    if SCRIPT_PATTERN.search(html):
        errors.append("Script elements are not allowed")

    empty = EMPTY_ELEMENT_PATTERN.findall(html)
    if empty:
        warnings.append(f"{len(empty)} empty elements")

    if IFRAME_PATTERN.search(html):
        warnings.append("Embedded frames will be removed")

    return HTMLValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        fixed_html=process_html(html) if errors else None
    )
