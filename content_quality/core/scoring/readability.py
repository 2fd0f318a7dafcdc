"""
Readability scoring.

Flesch reading ease with syllables approximated by vowel count, so
Turkish words (which have one vowel per syllable) are counted
correctly.
"""

import re

from ..models.quality import ReadabilityResult
from ..processing.text import split_sentences, strip_tags


VOWEL_PATTERN = re.compile(r'[aeıioöuüâîû]', re.IGNORECASE)

GRADE_BANDS = [
    (30, 'Very hard'),
    (50, 'Hard'),
    (70, 'Medium'),
    (90, 'Easy'),
]
TOP_GRADE = 'Very easy'

MAX_AVG_SENTENCE_LENGTH = 20
MAX_AVG_SYLLABLES = 3


def count_syllables(word: str) -> int:
    """One syllable per vowel, at least one per word."""
    return max(1, len(VOWEL_PATTERN.findall(word)))


def grade_for(score: int) -> str:
    for upper, label in GRADE_BANDS:
        if score < upper:
            return label
    return TOP_GRADE


def calculate_readability(text: str) -> ReadabilityResult:
    """
    Score how easy text is to read.

    Args:
        text: Raw or HTML content

    Returns:
        Score in [0, 100] (higher is easier), grade label and issues
    """
    clean = strip_tags(text or '').strip()
    sentences = split_sentences(clean)
    words = clean.split()

    if not sentences or not words:
        return ReadabilityResult(
            score=0,
            grade=GRADE_BANDS[0][1],
            issues=['Content is empty or too short to score']
        )

    syllables = sum(count_syllables(word) for word in words)
    avg_sentence_length = len(words) / len(sentences)
    avg_syllables = syllables / len(words)

    raw = 206.835 - 1.015 * avg_sentence_length - 84.6 * avg_syllables
    score = max(0, min(100, round(raw)))

    issues = []
    if score < 30:
        issues.append('Sentences are too long or words too complex')
    elif score < 50:
        issues.append('Consider shorter sentences and simpler words')

    if avg_sentence_length > MAX_AVG_SENTENCE_LENGTH:
        issues.append(f'Average sentence length is over {MAX_AVG_SENTENCE_LENGTH} words')

    if avg_syllables > MAX_AVG_SYLLABLES:
        issues.append('Words are too complex, prefer simpler alternatives')

    return ReadabilityResult(score=score, grade=grade_for(score), issues=issues)
