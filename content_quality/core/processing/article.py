"""
Article normalization for stored content.

This module prepares legacy or freshly generated article records for
display: it unwraps raw AI JSON answers, fixes image URLs, runs the
cleaning and processing passes, and fills in missing excerpts and
meta descriptions.
"""

import json
import logging
import re
from typing import Optional, Dict, Any
from urllib.parse import urlparse

from .cleaner import clean_content
from .renderer import process_html
from .tag_repair import DEFAULT_PLACEHOLDER_SRC
from .text import plain_text


logger = logging.getLogger(__name__)

EMPTY_CONTENT_HTML = '<p>This article has no content yet.</p>'
DEFAULT_AUTHOR = 'Editorial Team'
IMAGE_FALLBACK_ALT = 'Article image'

IMG_WITH_SRC_PATTERN = re.compile(r'<img\b([^>]*?)\bsrc=["\']([^"\']*)["\']([^>]*?)>', re.IGNORECASE)
ASSET_ID_PATTERN = re.compile(r'^[a-zA-Z0-9_/\-]+$')
PARAGRAPH_SPLIT_PATTERN = re.compile(r'\n\n+')


def _is_absolute_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def is_valid_image_url(url: str) -> bool:
    """True for http(s) URLs, relative paths and bare asset ids."""
    if not url or not url.strip():
        return False

    trimmed = url.strip()
    if trimmed.startswith(('http://', 'https://')):
        return _is_absolute_http_url(trimmed)
    if trimmed.startswith(('/', './')):
        return True
    return bool(ASSET_ID_PATTERN.match(trimmed))


def extract_json_content(content: str) -> str:
    """Return the "content" field when content is a raw AI JSON answer."""
    stripped = content.strip()
    if not stripped.startswith('{') or '"content"' not in stripped:
        return content

    try:
        parsed = json.loads(stripped)
    except ValueError:
        logger.debug("Content looks like JSON but does not parse; keeping it")
        return content

    if isinstance(parsed, dict) and isinstance(parsed.get('content'), str) and parsed['content'].strip():
        logger.warning("Extracted HTML from a raw AI JSON answer")
        return parsed['content'].strip()

    return content


def fix_image_sources(html: str, placeholder_src: str = DEFAULT_PLACEHOLDER_SRC) -> str:
    """Replace invalid image URLs, add alt text and lazy loading."""

    def _fix(match) -> str:
        before, src, after = match.group(1), match.group(2), match.group(3)
        tag = match.group(0)
        has_alt = 'alt=' in tag
        has_loading = 'loading=' in tag

        if not is_valid_image_url(src):
            src = placeholder_src

        extra = ''
        if not has_alt:
            extra += f' alt="{IMAGE_FALLBACK_ALT}"'
        if not has_loading:
            extra += ' loading="lazy"'

        return f'<img{before}src="{src}"{after.rstrip("/").rstrip()}{extra}>'

    return IMG_WITH_SRC_PATTERN.sub(_fix, html)


def normalize_article_content(
    content: Optional[str],
    sanitize: bool = True,
    clean: bool = True,
    title: Optional[str] = None
) -> str:
    """
    Normalize stored article content for display.

    Args:
        content: Stored content, possibly None or a raw AI JSON answer
        sanitize: Run the repair/normalize/sanitize pass
        clean: Run the placeholder and repetition cleaner
        title: Article title, used only for the quality log line

    Returns:
        Display-ready HTML; a short notice paragraph when there is no content
    """
    if not content or not content.strip():
        return EMPTY_CONTENT_HTML

    normalized = extract_json_content(content.strip())

    if clean:
        normalized = clean_content(normalized)

    normalized = re.sub(r'<p>\s*</p>', '', normalized, flags=re.IGNORECASE)
    normalized = fix_image_sources(normalized)

    if sanitize:
        normalized = process_html(normalized)

    if '<' not in normalized and normalized.strip():
        paragraphs = [p.strip() for p in PARAGRAPH_SPLIT_PATTERN.split(normalized) if p.strip()]
        normalized = '\n'.join(f"<p>{p}</p>" for p in paragraphs)

    if title:
        # scoring imports processing
        from ..scoring.aggregator import assess_quality
        score = assess_quality(normalized, title)
        if score.overall < 50:
            logger.info(f"Low quality content detected for '{title}' (score: {score.overall})")

    return normalized or EMPTY_CONTENT_HTML


def generate_excerpt(content: Optional[str], max_length: int = 160) -> str:
    """Plain-text excerpt ending at a sentence boundary when one is close enough."""
    if not content:
        return ''

    text = plain_text(content)
    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_end = max(truncated.rfind('.'), truncated.rfind('!'), truncated.rfind('?'))
    if last_end > max_length * 0.5:
        return text[:last_end + 1]

    return truncated + '...'


def normalize_featured_image(url: Optional[str]) -> Optional[str]:
    """Keep absolute http(s) URLs and bare asset ids, drop anything else."""
    if not url or not isinstance(url, str) or not url.strip():
        return None

    trimmed = url.strip()
    if trimmed.startswith(('http://', 'https://')):
        return trimmed if _is_absolute_http_url(trimmed) else None
    if ASSET_ID_PATTERN.match(trimmed):
        return trimmed
    return None


def normalize_article_metadata(article: Dict[str, Any], sanitize: bool = True, clean: bool = True) -> Dict[str, Any]:
    """Normalize content and fill excerpt, meta description, author and tags."""
    content = normalize_article_content(
        article.get('content'),
        sanitize=sanitize,
        clean=clean,
        title=article.get('title') or None
    )

    excerpt = (article.get('excerpt') or '').strip() or generate_excerpt(content, 200)
    meta_description = (
        (article.get('meta_description') or '').strip()
        or excerpt
        or generate_excerpt(content, 160)
    )

    tags = article.get('tags')
    if isinstance(tags, list):
        tags = [tag for tag in tags if isinstance(tag, str) and tag.strip()] or None
    else:
        tags = None

    return {
        'content': content,
        'excerpt': excerpt,
        'meta_description': meta_description,
        'featured_image': normalize_featured_image(article.get('featured_image')),
        'author': (article.get('author') or '').strip() or DEFAULT_AUTHOR,
        'category': (article.get('category') or '').strip() or None,
        'tags': tags,
    }


def is_legacy_article(article: Dict[str, Any]) -> bool:
    """True when an article has no body, or neither excerpt nor meta description."""
    has_content = bool((article.get('content') or '').strip())
    has_excerpt = bool((article.get('excerpt') or '').strip())
    has_meta = bool((article.get('meta_description') or '').strip())

    return not has_content or (not has_excerpt and not has_meta)
