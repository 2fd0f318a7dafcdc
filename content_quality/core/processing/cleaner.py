"""
Placeholder, repetition and cliché cleaning.

This module removes the debris AI writers leave behind: image and
alt-text placeholders, bracketed tokens, TODO markers, near-duplicate
sentences and repeated stock openers. The patterns cover both Turkish
and English content.
"""

import logging
import re
from typing import List, Set, Tuple

from .structure import flatten_nested_paragraphs, wrap_leading_text
from .tag_repair import wrap_orphan_list_items
from .text import TAG_PATTERN, jaccard, word_set


logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERNS = [
    re.compile(r'\[\s*(?:image|img|photo|görsel|resim)\b[^\]]*\]', re.IGNORECASE),
    re.compile(r'\(\s*(?:image|img|photo|görsel|resim)\b[^)]*\)', re.IGNORECASE),
    re.compile(r'\[\s*(?:alt text|görsel açıklaması)\s*\]', re.IGNORECASE),
    re.compile(r'\b(?:image idea|görsel fikri)\b:?', re.IGNORECASE),
    # Any other short bracketed token that is not a Markdown link label
    re.compile(r'(?<!!)\[[^\[\]\n]{1,80}\](?!\()'),
]

MARKER_PATTERNS = [
    re.compile(r'\*\*:\*\*'),
    re.compile(r'<!--.*?-->', re.DOTALL),
    re.compile(r'\b(?:TODO|FIXME|NOTE)\s*:'),
]

# each match is the whole sentence holding the phrase
STOCK_PHRASE_PATTERNS = [
    re.compile(r'[^.!?<>]*\b' + phrase + r'\b[^.!?<]*[.!?]', re.IGNORECASE)
    for phrase in (
        r'günümüzde',
        r'son yıllarda',
        r'bu yazıda',
        r'bu makalede',
        r"in today's world",
        r'in recent years',
        r'in this article',
        r'nowadays',
    )
]

CONCLUSION_PATTERN = re.compile(
    r'(?:sonuç olarak|özetlemek gerekirse|in conclusion|to sum up)[^.!?<]*[.!?]',
    re.IGNORECASE
)
CALL_TO_ACTION_PATTERN = re.compile(
    r'(?:yorumlarınızı bekliyoruz|düşünceleriniz neler|görüşlerinizi paylaşın|'
    r'share your thoughts in the comments|let us know in the comments)[^.!?<]*[.!?]?',
    re.IGNORECASE
)
LEADING_TRANSITION_PATTERN = re.compile(r'\b(?:Furthermore|Moreover|Additionally),\s+(\w)')

EMPTY_SECTION_PATTERN = re.compile(
    r'<(p|div|li|span|h[1-6]|section|blockquote)(?:\s[^>]*)?>(?:\s|&nbsp;|\xa0)*</\1\s*>',
    re.IGNORECASE
)
H3_PATTERN = re.compile(r'<h3\b([^>]*)>(.*?)</h3>', re.IGNORECASE | re.DOTALL)
BLOCK_GAP_PATTERN = re.compile(
    r'(</(?:p|h[1-6]|ul|ol|table|blockquote)>)\s*(?=<(?:p|h[1-6]|ul|ol|table|blockquote)\b)',
    re.IGNORECASE
)

SENTENCE_SPAN_PATTERN = re.compile(r'[^.!?]+[.!?]*|[.!?]+')
STASH_PATTERN = re.compile(r'\x00(\d+)\x00')
SPACE_RUN_PATTERN = re.compile(r'[ \t]{2,}')
EXCESS_NEWLINES_PATTERN = re.compile(r'\n{3,}')

DUPLICATE_THRESHOLD = 0.8
MIN_SENTENCE_LENGTH = 10
MAX_PASSES = 10


def clean_ai_placeholders(text: str) -> str:
    """Remove placeholder tokens, AI markers and TODO/FIXME/NOTE markers."""
    if not text:
        return ''

    cleaned = text
    for pattern in PLACEHOLDER_PATTERNS + MARKER_PATTERNS:
        cleaned = pattern.sub('', cleaned)

    return SPACE_RUN_PATTERN.sub(' ', cleaned).strip()


def _protect_tags(text: str) -> Tuple[str, List[str]]:
    """Swap tags for opaque tokens so sentence splitting never cuts through one."""
    tags: List[str] = []

    def _stash(match) -> str:
        tags.append(match.group(0))
        return f"\x00{len(tags) - 1}\x00"

    return TAG_PATTERN.sub(_stash, text), tags


def _restore_tags(text: str, tags: List[str]) -> str:
    return STASH_PATTERN.sub(lambda m: tags[int(m.group(1))], text)


def remove_repetitive_content(text: str) -> str:
    """
    Drop sentences that nearly repeat an earlier one.

    A candidate sentence (longer than 10 characters once trimmed) is a
    duplicate when the Jaccard similarity of its significant-word set
    with an already kept sentence exceeds 0.8. The first occurrence
    is kept and order is preserved. Markup inside a dropped sentence
    is kept so the surrounding structure stays intact.
    """
    if not text:
        return ''

    protected, tags = _protect_tags(text)
    kept: List[Set[str]] = []
    out: List[str] = []
    removed = 0

    for match in SENTENCE_SPAN_PATTERN.finditer(protected):
        span = match.group(0)
        sentence = STASH_PATTERN.sub(' ', span).strip().rstrip('.!?').strip()

        if len(sentence) > MIN_SENTENCE_LENGTH:
            words = word_set(sentence)
            if words and any(jaccard(words, previous) > DUPLICATE_THRESHOLD for previous in kept):
                out.append(''.join(m.group(0) for m in STASH_PATTERN.finditer(span)))
                removed += 1
                continue
            kept.append(words)

        out.append(span)

    if removed:
        logger.debug(f"Removed {removed} repeated sentences")

    return _restore_tags(''.join(out), tags)


def collapse_stock_phrases(text: str) -> str:
    """Keep the first sentence holding each stock phrase, drop later ones whole."""
    if not text:
        return ''

    for pattern in STOCK_PHRASE_PATTERNS:
        seen = {'first': False}

        def _keep_first(match) -> str:
            if seen['first']:
                return ''
            seen['first'] = True
            return match.group(0)

        text = pattern.sub(_keep_first, text)

    return SPACE_RUN_PATTERN.sub(' ', text)


def remove_empty_sections(html: str) -> str:
    """Remove elements that hold nothing but whitespace or &nbsp;."""
    if not html:
        return ''

    for _ in range(MAX_PASSES):
        cleaned = EMPTY_SECTION_PATTERN.sub('', html)
        if cleaned == html:
            break
        html = cleaned

    return EXCESS_NEWLINES_PATTERN.sub('\n\n', html)


def improve_content_structure(html: str) -> str:
    """Fix heading order, wrap stray text and list items, space out blocks."""
    if not html:
        return ''

    if H3_PATTERN.search(html) and not re.search(r'<h2\b', html, re.IGNORECASE):
        html = H3_PATTERN.sub(r'<h2\1>\2</h2>', html, count=1)

    html = wrap_leading_text(html)
    html = wrap_orphan_list_items(html)
    html = flatten_nested_paragraphs(html)
    return BLOCK_GAP_PATTERN.sub(r'\1\n', html)


def enhance_natural_language(text: str) -> str:
    """Drop templated conclusions and comment bait, tone down punctuation."""
    if not text:
        return ''

    text = CONCLUSION_PATTERN.sub('', text)
    text = CALL_TO_ACTION_PATTERN.sub('', text)
    text = LEADING_TRANSITION_PATTERN.sub(lambda m: m.group(1).upper(), text)
    text = re.sub(r'!{2,}', '!', text)
    text = re.sub(r'\.{4,}', '...', text)
    return SPACE_RUN_PATTERN.sub(' ', text)


def clean_content(text: str) -> str:
    """
    Run every cleaning pass.

    Args:
        text: Raw or HTML content

    Returns:
        Cleaned content
    """
    if not text:
        return ''

    cleaned = clean_ai_placeholders(text)
    cleaned = remove_repetitive_content(cleaned)
    cleaned = collapse_stock_phrases(cleaned)
    cleaned = remove_empty_sections(cleaned)
    cleaned = improve_content_structure(cleaned)
    cleaned = enhance_natural_language(cleaned)

    return cleaned.strip()
