"""
Text helpers shared by the processing and scoring stages.
"""

import re
from typing import List, Set


TAG_PATTERN = re.compile(r'<[^>]*>')
WHITESPACE_PATTERN = re.compile(r'\s+')
WORD_PATTERN = re.compile(r'\w+')
SENTENCE_SPLIT_PATTERN = re.compile(r'[.!?]+')


def strip_tags(text: str) -> str:
    """Replace every tag with a space."""
    if not text:
        return ''
    return TAG_PATTERN.sub(' ', text)


def plain_text(text: str) -> str:
    """Tag-free text with whitespace collapsed."""
    return WHITESPACE_PATTERN.sub(' ', strip_tags(text)).strip()


def count_words(text: str) -> int:
    """Whitespace-delimited word count of the tag-free text."""
    stripped = plain_text(text)
    return len(stripped.split()) if stripped else 0


def split_sentences(text: str, min_length: int = 0) -> List[str]:
    """Split on sentence terminators, keeping trimmed pieces longer than min_length."""
    if not text:
        return []
    return [
        s.strip() for s in SENTENCE_SPLIT_PATTERN.split(text)
        if s.strip() and len(s.strip()) > min_length
    ]


def word_set(text: str) -> Set[str]:
    """Lowercase significant words (longer than two characters)."""
    if not text:
        return set()
    return {w for w in WORD_PATTERN.findall(strip_tags(text).lower()) if len(w) > 2}


def jaccard(a: Set[str], b: Set[str]) -> float:
    """Jaccard similarity of two sets; 0 when both are empty."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)
