"""
Engagement scoring from structural richness.
"""

import re
from typing import Optional
from urllib.parse import urlparse


BASE_SCORE = 50

QUESTION_PATTERN = re.compile(r'\?')
LIST_PATTERN = re.compile(r'<(?:ul|ol)\b[^>]*>', re.IGNORECASE)
IMAGE_PATTERN = re.compile(r'<img\b[^>]*>', re.IGNORECASE)
BLOCKQUOTE_PATTERN = re.compile(r'<blockquote\b[^>]*>', re.IGNORECASE)
TABLE_PATTERN = re.compile(r'<table\b[^>]*>', re.IGNORECASE)
HREF_PATTERN = re.compile(r'''<a\b[^>]*\bhref\s*=\s*["']([^"']*)["']''', re.IGNORECASE)


def is_internal_href(href: str, site_host: Optional[str] = None) -> bool:
    """Relative links count as internal; absolute ones only on site_host."""
    href = (href or '').strip()
    if not href:
        return False
    if href.startswith(('/', '#', './', '../')) and not href.startswith('//'):
        return True

    parsed = urlparse(href)
    if not parsed.scheme and not parsed.netloc:
        return True
    if site_host and parsed.netloc:
        return parsed.netloc.lower().split(':')[0] == site_host.lower()
    return False


def calculate_engagement(html: str, word_count: int, site_host: Optional[str] = None) -> int:
    """
    Score content richness.

    Args:
        html: Content HTML
        word_count: Body word count
        site_host: Host name whose absolute links count as internal

    Returns:
        Engagement score in [50, 100]
    """
    html = html or ''
    score = BASE_SCORE

    if QUESTION_PATTERN.search(html):
        score += 10
    if LIST_PATTERN.search(html):
        score += 10
    if IMAGE_PATTERN.search(html):
        score += 10
    if BLOCKQUOTE_PATTERN.search(html):
        score += 5
    if TABLE_PATTERN.search(html):
        score += 5

    if 800 <= word_count <= 2000:
        score += 10
    elif 300 <= word_count < 800:
        score += 5

    if any(is_internal_href(href, site_host) for href in HREF_PATTERN.findall(html)):
        score += 5

    return min(100, score)
