"""
Allow-list HTML sanitizer.

This module strips every element and attribute that is not on the
allow-list. Script-capable elements are removed together with their
content; other disallowed elements are unwrapped so their text
survives. Event-handler attributes and URLs with executable schemes
are always removed.

The output depends only on the input and the options: the same
markup always serializes to the same bytes, and sanitizing already
sanitized output returns it unchanged.
"""

import logging
import re
from typing import Optional, Set, FrozenSet

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction, Tag

from ..models.content import SanitizeOptions


logger = logging.getLogger(__name__)

PARSER = 'html.parser'

BASE_TAGS = frozenset([
    'p', 'br', 'hr', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'strong', 'b', 'em', 'i', 'u', 's', 'mark', 'small', 'sub', 'sup', 'span',
    'div', 'section', 'article', 'figure', 'figcaption',
    'ul', 'ol', 'li', 'dl', 'dt', 'dd', 'a'
])
IMAGE_TAGS = frozenset(['img'])
TABLE_TAGS = frozenset(['table', 'thead', 'tbody', 'tfoot', 'tr', 'th', 'td', 'caption', 'colgroup', 'col'])
BLOCKQUOTE_TAGS = frozenset(['blockquote', 'q', 'cite'])
CODE_TAGS = frozenset(['pre', 'code', 'kbd', 'samp'])
STRICT_TAGS = frozenset(['p', 'br', 'h2', 'h3', 'h4', 'strong', 'b', 'em', 'i', 'ul', 'ol', 'li', 'a'])

# Removed together with everything inside them
DROP_WITH_CONTENT = frozenset([
    'script', 'style', 'iframe', 'frame', 'frameset', 'object', 'embed', 'applet',
    'noscript', 'template', 'svg', 'math', 'form', 'input', 'button', 'textarea',
    'select', 'option', 'link', 'meta', 'base', 'title', 'head'
])

GLOBAL_ATTRIBUTES = frozenset(['class', 'id', 'title', 'lang', 'dir'])
TAG_ATTRIBUTES = {
    'a': frozenset(['href', 'title', 'rel', 'target']),
    'img': frozenset(['src', 'alt', 'title', 'width', 'height', 'loading']),
    'th': frozenset(['colspan', 'rowspan', 'scope']),
    'td': frozenset(['colspan', 'rowspan']),
    'col': frozenset(['span']),
    'colgroup': frozenset(['span']),
    'ol': frozenset(['start', 'type', 'reversed']),
    'blockquote': frozenset(['cite']),
    'q': frozenset(['cite']),
}
STRICT_TAG_ATTRIBUTES = {
    'a': frozenset(['href', 'title']),
}

URL_ATTRIBUTES = frozenset(['href', 'src', 'cite'])
SAFE_URL_SCHEMES = frozenset(['http', 'https', 'mailto', 'tel'])

URL_SCHEME_PATTERN = re.compile(r'^([a-z][a-z0-9+.\-]*):', re.IGNORECASE)
CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x20\x7f]+')


def allowed_tags(options: SanitizeOptions) -> FrozenSet[str]:
    """Tag allow-list for the given options."""
    if options.strict:
        tags: Set[str] = set(STRICT_TAGS)
        if options.allow_images:
            tags |= IMAGE_TAGS
        return frozenset(tags)

    tags = set(BASE_TAGS)
    if options.allow_images:
        tags |= IMAGE_TAGS
    if options.allow_tables:
        tags |= TABLE_TAGS
    if options.allow_blockquotes:
        tags |= BLOCKQUOTE_TAGS
    if options.allow_code:
        tags |= CODE_TAGS
    return frozenset(tags)


def is_safe_url(value: str) -> bool:
    """True for relative URLs, fragments and http(s)/mailto/tel URLs."""
    compact = CONTROL_CHARS_PATTERN.sub('', value or '')
    match = URL_SCHEME_PATTERN.match(compact)
    if not match:
        return True
    return match.group(1).lower() in SAFE_URL_SCHEMES


def _allowed_attributes(tag_name: str, options: SanitizeOptions) -> FrozenSet[str]:
    if options.strict:
        if tag_name == 'img':
            return TAG_ATTRIBUTES['img']
        return STRICT_TAG_ATTRIBUTES.get(tag_name, frozenset())
    return GLOBAL_ATTRIBUTES | TAG_ATTRIBUTES.get(tag_name, frozenset())


def _clean_attributes(tag: Tag, options: SanitizeOptions):
    permitted = _allowed_attributes(tag.name, options)
    cleaned = {}

    for name, value in tag.attrs.items():
        name = name.lower()
        if name.startswith('on') or name not in permitted:
            continue
        if isinstance(value, list):
            value = ' '.join(value)
        if name in URL_ATTRIBUTES and not is_safe_url(value):
            logger.debug(f"Removed unsafe {name} on <{tag.name}>")
            continue
        cleaned[name] = value

    if tag.name == 'a' and cleaned.get('target') == '_blank':
        cleaned['rel'] = 'noopener noreferrer'

    tag.attrs = cleaned


def sanitize_html(html: str, options: Optional[SanitizeOptions] = None) -> str:
    """
    Sanitize HTML against the allow-list.

    Args:
        html: Untrusted HTML
        options: Allow-list switches (permissive but safe by default)

    Returns:
        Safe HTML with no script elements, event handlers or
        executable URLs
    """
    if not html or not html.strip():
        return ''

    options = options or SanitizeOptions()
    permitted = allowed_tags(options)

    soup = BeautifulSoup(html, PARSER)

    for node in soup.find_all(string=lambda s: isinstance(s, (CData, Comment, Declaration, Doctype, ProcessingInstruction))):
        node.extract()

    for tag in soup.find_all(sorted(DROP_WITH_CONTENT)):
        if not tag.decomposed:
            tag.decompose()

    removed = 0
    for tag in soup.find_all(True):
        if tag.decomposed:
            continue
        if tag.name not in permitted:
            tag.unwrap()
            removed += 1
            continue
        _clean_attributes(tag, options)

    if removed:
        logger.debug(f"Sanitizer unwrapped {removed} disallowed elements")

    return soup.decode(formatter='minimal').strip()
