"""
AI-likeness pattern detection.

This module scans text against a table of weighted rules (generic
openers, templated conclusions, transition and call-to-action
clichés, placeholder tokens) and reports every match. Sentences that
keep coming back with the same opening are reported as repetition.
Rules cover Turkish and English content.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Pattern

from ..models.quality import AIPatternMatch, PatternCategory
from ..processing.text import SENTENCE_SPLIT_PATTERN


logger = logging.getLogger(__name__)

REPETITION_PREFIX_LENGTH = 50
REPETITION_MIN_SENTENCE_LENGTH = 10
REPETITION_MIN_COUNT = 3


@dataclass(frozen=True)
class AIPatternRule:
    """One detection rule: a matcher, its category and base confidence."""
    pattern: Pattern
    category: PatternCategory
    confidence: float


def _rule(expression: str, category: PatternCategory, confidence: float) -> AIPatternRule:
    return AIPatternRule(re.compile(expression, re.IGNORECASE), category, confidence)


AI_PATTERN_RULES: List[AIPatternRule] = [
    # Generic openers
    _rule(r'bu yazıda|bu makalede|bu içerikte|in this article|in this post',
          PatternCategory.GENERIC_PHRASE, 0.6),
    _rule(r"günümüz dünyasında|günümüzde|son yıllarda|in today's world|in recent years|nowadays",
          PatternCategory.GENERIC_PHRASE, 0.5),
    _rule(r'hayalinizdeki|düşlediğiniz|arzuladığınız|dream home',
          PatternCategory.GENERIC_PHRASE, 0.7),
    _rule(r'tatil cenneti|eşsiz fırsat|kaçırılmayacak|once-in-a-lifetime|unmissable|hidden gem',
          PatternCategory.GENERIC_PHRASE, 0.8),

    # Templated conclusions
    _rule(r'in conclusion|sonuç olarak|özetlemek gerekirse|to sum up|in summary',
          PatternCategory.CONCLUSION, 0.9),

    # Transition clichés
    _rule(r'\bfurthermore\b|\bmoreover\b|\badditionally\b|\bayrıca\b|bunun yanı sıra',
          PatternCategory.TRANSITION, 0.4),

    # Call-to-action clichés
    _rule(r'yorumlarınızı bekliyoruz|düşünceleriniz neler|görüşlerinizi paylaşın|'
          r'share your thoughts|let us know in the comments',
          PatternCategory.GENERIC_PHRASE, 0.8),

    # Placeholder tokens
    _rule(r'\[image[^\]]*\]', PatternCategory.PLACEHOLDER, 0.95),
    _rule(r'\(image[^)]*\)', PatternCategory.PLACEHOLDER, 0.95),
    _rule(r'\[alt text\]|\[görsel açıklaması\]', PatternCategory.PLACEHOLDER, 0.9),
    _rule(r'image idea|görsel fikri', PatternCategory.PLACEHOLDER, 0.9),
]


def detect_ai_patterns(text: str) -> List[AIPatternMatch]:
    """
    Find AI-likeness signals in text.

    Args:
        text: Raw or HTML content

    Returns:
        One match per rule hit, in rule order, followed by repetition
        matches; empty list for empty input
    """
    if not text or not text.strip():
        return []

    matches: List[AIPatternMatch] = []

    for rule in AI_PATTERN_RULES:
        for match in rule.pattern.finditer(text):
            matches.append(AIPatternMatch(
                pattern=match.group(0),
                category=rule.category,
                confidence=rule.confidence,
                location=match.start()
            ))

    matches.extend(detect_repetition(text))

    if matches:
        logger.debug(f"Detected {len(matches)} AI patterns")

    return matches


def detect_repetition(text: str) -> List[AIPatternMatch]:
    """Report sentence openings (first 50 characters) seen more than twice."""
    prefixes = Counter(
        sentence.strip().lower()[:REPETITION_PREFIX_LENGTH]
        for sentence in SENTENCE_SPLIT_PATTERN.split(text or '')
        if len(sentence.strip()) > REPETITION_MIN_SENTENCE_LENGTH
    )

    return [
        AIPatternMatch(
            pattern=prefix,
            category=PatternCategory.REPETITIVE,
            confidence=min(0.9, count * 0.3)
        )
        for prefix, count in prefixes.items()
        if count >= REPETITION_MIN_COUNT
    ]


def ai_probability(matches: List[AIPatternMatch]) -> float:
    """Mean confidence of the matches; 0 when there are none."""
    if not matches:
        return 0.0
    return min(1.0, sum(match.confidence for match in matches) / len(matches))
