"""
Quality aggregation.

This module runs every scorer over a piece of content and combines
them into one QualityScore. It is the main entry point of the scoring
branch: batch drivers, the improver and the HTTP API all call
assess_quality.
"""

import logging
from typing import Optional, Union, Iterable, Dict, Any, List

from ..models.content import CorpusItem, SEOMeta
from ..models.quality import IssueType, QualityIssue, QualityScore, Severity
from ..processing.text import count_words
from .ai_patterns import ai_probability, detect_ai_patterns
from .duplicates import detect_duplicate_content
from .engagement import calculate_engagement
from .html_validation import validate_html_structure
from .readability import calculate_readability
from .seo import check_seo_compliance


logger = logging.getLogger(__name__)

WEIGHTS = {
    'readability': 0.25,
    'seo': 0.30,
    'engagement': 0.20,
    'uniqueness': 0.15,
    'human_likeness': 0.10,
}

HIGH_CONFIDENCE = 0.7
UNIQUE_SCORE = 100
SIMILAR_SCORE = 50


def combine_scores(
    readability: int,
    seo: int,
    engagement: int,
    uniqueness: int,
    ai_probability_value: float
) -> int:
    """Weighted overall score, rounded and clamped to [0, 100]."""
    overall = (
        readability * WEIGHTS['readability']
        + seo * WEIGHTS['seo']
        + engagement * WEIGHTS['engagement']
        + uniqueness * WEIGHTS['uniqueness']
        + (1 - ai_probability_value) * 100 * WEIGHTS['human_likeness']
    )
    return max(0, min(100, round(overall)))


def assess_quality(
    content: str,
    title: str,
    meta: Union[SEOMeta, Dict[str, Any], None] = None,
    corpus: Optional[Iterable[Union[CorpusItem, Dict[str, Any]]]] = None,
    site_host: Optional[str] = None
) -> QualityScore:
    """
    Score content on every quality axis.

    Args:
        content: Raw or HTML content
        title: Content title
        meta: Meta description and keywords for the SEO check
        corpus: Existing items to check uniqueness against
        site_host: Host whose absolute links count as internal

    Returns:
        QualityScore with sub-scores, issues and deduplicated suggestions
    """
    content = content or ''
    title = title or ''

    word_count = count_words(content)
    readability = calculate_readability(content)
    seo = check_seo_compliance(content, title, meta)
    engagement = calculate_engagement(content, word_count, site_host=site_host)
    patterns = detect_ai_patterns(content)
    probability = ai_probability(patterns)

    uniqueness = UNIQUE_SCORE
    duplicates = None
    if corpus is not None:
        duplicates = detect_duplicate_content(content, corpus)
        if duplicates.similarity > 0:
            uniqueness = SIMILAR_SCORE

    issues: List[QualityIssue] = []
    suggestions: List[str] = list(seo.suggestions)

    high_confidence = [p for p in patterns if p.confidence > HIGH_CONFIDENCE]
    if high_confidence:
        issues.append(QualityIssue(
            type=IssueType.AI_PATTERN,
            severity=Severity.HIGH,
            message=f"{len(high_confidence)} high-confidence AI patterns detected",
            suggestion="Make the content more natural and original",
            location=high_confidence[0].location
        ))

    if readability.score < 30:
        issues.append(QualityIssue(
            type=IssueType.READABILITY,
            severity=Severity.HIGH,
            message="Content is very hard to read",
            suggestion="Use shorter sentences and simpler words"
        ))
        suggestions.append("Shorten sentences and simplify complex words")

    if seo.score < 50:
        issues.append(QualityIssue(
            type=IssueType.SEO,
            severity=Severity.MEDIUM,
            message="SEO optimization is insufficient",
            suggestion=', '.join(seo.suggestions) or None
        ))

    if engagement < 50:
        issues.append(QualityIssue(
            type=IssueType.ENGAGEMENT,
            severity=Severity.MEDIUM,
            message="Content is not engaging enough",
            suggestion="Add images, lists, questions and examples"
        ))
        suggestions.append("Add images, lists and interactive elements")

    if duplicates is not None and duplicates.is_duplicate:
        top = duplicates.similar_articles[0]
        issues.append(QualityIssue(
            type=IssueType.UNIQUENESS,
            severity=Severity.HIGH,
            message=f"Content is {round(duplicates.similarity * 100)}% similar to '{top.title or top.id}'",
            suggestion="Rewrite the content or merge it with the existing item"
        ))

    validation = validate_html_structure(content)
    if not validation.is_valid:
        issues.append(QualityIssue(
            type=IssueType.HTML_STRUCTURE,
            severity=Severity.HIGH,
            message="HTML structure has problems",
            suggestion="Fix the HTML tags"
        ))

    overall = combine_scores(readability.score, seo.score, engagement, uniqueness, probability)

    logger.debug(
        f"Assessed content ({word_count} words): overall={overall}, "
        f"readability={readability.score}, seo={seo.score}, engagement={engagement}"
    )

    return QualityScore(
        overall=overall,
        readability=readability.score,
        seo=seo.score,
        engagement=engagement,
        uniqueness=uniqueness,
        ai_probability=probability,
        issues=issues,
        suggestions=list(dict.fromkeys(suggestions)),
        ai_patterns=patterns,
        word_count=word_count,
        duplicate_check_performed=corpus is not None
    )
