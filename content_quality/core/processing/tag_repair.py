"""
Tag repair for malformed HTML.

This module balances unclosed and orphaned tags without building a
DOM, closes trailing blocks cut off at end of input, wraps orphan
list items, and fixes broken image and link attributes.
"""

import logging
import re
from typing import List, Tuple


logger = logging.getLogger(__name__)

VOID_TAGS = frozenset([
    'br', 'hr', 'img', 'input', 'meta', 'link', 'area',
    'base', 'col', 'embed', 'source', 'track', 'wbr'
])

DEFAULT_PLACEHOLDER_SRC = '/images/placeholder-article.jpg'
DEFAULT_IMAGE_ALT = 'Image'

TAG_TOKEN_PATTERN = re.compile(r'<(/?)([a-zA-Z][a-zA-Z0-9]*)\b[^>]*>')
TRAILING_BLOCK_PATTERN = re.compile(r'<(h[1-6]|li|p)(\s[^>]*)?>([^<]*?)\s*$', re.IGNORECASE)

LIST_TAGS = frozenset(['ul', 'ol', 'menu'])

IMG_PATTERN = re.compile(r'<img\b([^>]*?)(/?)>', re.IGNORECASE)
SRC_ATTR_PATTERN = re.compile(
    r'(?<![\w-])src\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'>]+))',
    re.IGNORECASE
)
ALT_ATTR_PATTERN = re.compile(r'(?<![\w-])alt\s*=', re.IGNORECASE)
LOADING_ATTR_PATTERN = re.compile(r'(?<![\w-])loading\s*=', re.IGNORECASE)

ANCHOR_PATTERN = re.compile(r'<a\b([^>]*)>', re.IGNORECASE)
EMPTY_HREF_PATTERN = re.compile(r'(?<![\w-])href\s*=\s*(?:""|\'\')', re.IGNORECASE)
UNQUOTED_HREF_PATTERN = re.compile(r'(?<![\w-])href\s*=\s*([^\s"\'>]+)', re.IGNORECASE)
BARE_HREF_PATTERN = re.compile(r'(?<![\w-])href(?!\s*=)(?=\s|/|$)', re.IGNORECASE)


def repair_tags(
    html: str,
    placeholder_src: str = DEFAULT_PLACEHOLDER_SRC,
    default_alt: str = DEFAULT_IMAGE_ALT
) -> str:
    """
    Repair broken markup.

    Args:
        html: Possibly malformed HTML
        placeholder_src: Image path used for images without a source
        default_alt: Alt text added to repaired images that have none

    Returns:
        HTML in which every opened non-void tag is closed
    """
    if not html:
        return ''

    repaired = close_trailing_block(html)
    repaired = balance_tags(repaired)
    repaired = wrap_orphan_list_items(repaired)
    repaired = fix_images(repaired, placeholder_src, default_alt)
    repaired = fix_links(repaired)

    if repaired != html:
        logger.debug(f"Tag repair changed content ({len(html)} -> {len(repaired)} chars)")

    return repaired


def close_trailing_block(html: str) -> str:
    """Close a heading, list item or paragraph left open at end of input."""
    match = TRAILING_BLOCK_PATTERN.search(html)
    if not match or not match.group(3).strip():
        return html

    tag = match.group(1)
    attrs = match.group(2) or ''
    text = match.group(3).strip()
    return f"{html[:match.start()]}<{tag}{attrs}>{text}</{tag.lower()}>"


def balance_tags(html: str) -> str:
    """
    Balance open and close tags in a single left-to-right pass.

    A closer whose name is open pops through to the most recent
    matching entry, closing whatever was opened after it. Orphan
    closers are dropped. Whatever is still open at the end is closed
    in LIFO order.
    """
    out: List[str] = []
    stack: List[str] = []
    pos = 0

    for match in TAG_TOKEN_PATTERN.finditer(html):
        out.append(html[pos:match.start()])
        pos = match.end()

        token = match.group(0)
        closing = match.group(1) == '/'
        name = match.group(2).lower()

        if name in VOID_TAGS or (not closing and token.endswith('/>')):
            out.append(token)
            continue

        if not closing:
            stack.append(name)
            out.append(token)
            continue

        if name not in stack:
            logger.debug(f"Dropping orphan closing tag </{name}>")
            continue

        index = len(stack) - 1 - stack[::-1].index(name)
        while len(stack) > index + 1:
            out.append(f"</{stack.pop()}>")
        stack.pop()
        out.append(token)

    out.append(html[pos:])

    while stack:
        out.append(f"</{stack.pop()}>")

    return ''.join(out)


def find_unbalanced_tags(html: str) -> Tuple[List[str], List[str]]:
    """
    Report unclosed tags and orphan closers without changing anything.

    Unlike balance_tags, a closer only consumes its own most recent
    opener, so tags left open inside it are still reported.

    Returns:
        (unclosed tag names, orphan closer names)
    """
    open_tags: List[str] = []
    orphans: List[str] = []

    for match in TAG_TOKEN_PATTERN.finditer(html or ''):
        name = match.group(2).lower()
        if name in VOID_TAGS or (match.group(1) != '/' and match.group(0).endswith('/>')):
            continue

        if match.group(1) == '/':
            if name in open_tags:
                index = len(open_tags) - 1 - open_tags[::-1].index(name)
                del open_tags[index]
            else:
                orphans.append(name)
        else:
            open_tags.append(name)

    return open_tags, orphans


def wrap_orphan_list_items(html: str) -> str:
    """
    Wrap runs of <li> that sit outside any list in a <ul>.

    Items are counted tag by tag, so a list nested inside an orphan
    item stays inside it and the added </ul> follows the run's last
    closing </li>.
    """
    out: List[str] = []
    list_depth = 0
    open_items = 0
    wrapping = False
    pos = 0

    for match in TAG_TOKEN_PATTERN.finditer(html):
        text = html[pos:match.start()]
        closing = match.group(1) == '/'
        name = match.group(2).lower()
        pos = match.end()

        if wrapping and open_items == 0 and (text.strip() or name != 'li' or closing):
            out.append('</ul>')
            wrapping = False
        out.append(text)

        if name in LIST_TAGS:
            list_depth = max(0, list_depth + (-1 if closing else 1))
        elif name == 'li' and list_depth == 0:
            if closing:
                open_items = max(0, open_items - 1)
            else:
                if not wrapping:
                    out.append('<ul>')
                    wrapping = True
                open_items += 1

        out.append(match.group(0))

    rest = html[pos:]
    if wrapping and open_items == 0 and rest.strip():
        out.append('</ul>')
        wrapping = False
    out.append(rest)
    if wrapping:
        out.append('</ul>')

    return ''.join(out)


def fix_images(
    html: str,
    placeholder_src: str = DEFAULT_PLACEHOLDER_SRC,
    default_alt: str = DEFAULT_IMAGE_ALT
) -> str:
    """Give <img> tags without a usable src a placeholder, alt text and lazy loading."""

    def _fix(match) -> str:
        attrs, self_closing = match.group(1), match.group(2)
        src = SRC_ATTR_PATTERN.search(attrs)

        if src:
            value = next(group for group in src.groups() if group is not None)
            if value.strip():
                return match.group(0)
            attrs = attrs[:src.start()] + attrs[src.end():]

        attrs = attrs.strip()
        parts = [f'src="{placeholder_src}"']
        if attrs:
            parts.append(attrs)
        if not ALT_ATTR_PATTERN.search(attrs):
            parts.append(f'alt="{default_alt}"')
        if not LOADING_ATTR_PATTERN.search(attrs):
            parts.append('loading="lazy"')

        return f"<img {' '.join(parts)}{' /' if self_closing else ''}>"

    return IMG_PATTERN.sub(_fix, html)


def fix_links(html: str) -> str:
    """Quote unquoted href values and point empty ones at '#'."""

    def _fix(match) -> str:
        attrs = match.group(1)
        attrs = EMPTY_HREF_PATTERN.sub('href="#"', attrs)
        attrs = UNQUOTED_HREF_PATTERN.sub(lambda m: f'href="{m.group(1)}"', attrs)
        attrs = BARE_HREF_PATTERN.sub('href="#"', attrs)
        return f"<a{attrs}>"

    return ANCHOR_PATTERN.sub(_fix, html)
