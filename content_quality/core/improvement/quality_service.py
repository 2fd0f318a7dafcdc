"""
Remote-backed quality checks with local fallback.

This module offers the three checks the admin tools run on demand:
an overall quality report, an SEO report and a human-likeness verdict.
Each asks the remote enhancer first and falls back to the local
scorers when it is not configured or fails.
"""

import logging
import re
from collections import Counter
from typing import Optional, Dict, Any, Union

from ..models.content import SEOMeta
from ..models.quality import HumanLikeScore, PatternCategory, RemoteQualityReport, SEOReport
from ..processing.text import plain_text, split_sentences
from ..scoring.ai_patterns import detect_ai_patterns
from ..scoring.aggregator import assess_quality
from ..scoring.seo import check_seo_compliance
from .fallback import score_with_fallback


logger = logging.getLogger(__name__)

PASS_SCORE = 70
AI_GENERATED_THRESHOLD = 0.7

GENERIC_CATEGORIES = (
    PatternCategory.GENERIC_PHRASE.value,
    PatternCategory.CONCLUSION.value,
    PatternCategory.TRANSITION.value,
)
REPEATED_WORD_LIMIT = 5
LONG_SENTENCE_AVERAGE = 25
WORD_PATTERN = re.compile(r'\w+')


def local_quality_report(content: str, title: str) -> RemoteQualityReport:
    """Quality report built from the local aggregate score."""
    score = assess_quality(content, title)
    return RemoteQualityReport(
        score=score.overall,
        passed=score.overall >= PASS_SCORE,
        issues=score.issues,
        suggestions=score.suggestions,
        ai_generated=score.ai_probability > AI_GENERATED_THRESHOLD,
        human_like_score=round((1 - score.ai_probability) * 100),
        seo_score=score.seo,
        source="local"
    )


def local_human_like_score(content: str) -> HumanLikeScore:
    """
    Human-likeness from local signals.

    Starts at 100 and deducts for generic phrases, words used more
    than five times and long average sentences.
    """
    text = plain_text(content or '')
    indicators = []
    score = 100

    generic = [p for p in detect_ai_patterns(text) if p.category in GENERIC_CATEGORIES]
    if generic:
        score -= min(40, 10 * len(generic))
        indicators.append(f"{len(generic)} generic phrases")

    counts = Counter(w for w in WORD_PATTERN.findall(text.lower()) if len(w) > 3)
    repeated = sorted(word for word, count in counts.items() if count > REPEATED_WORD_LIMIT)
    if repeated:
        score -= min(30, 5 * len(repeated))
        indicators.append(f"Overused words: {', '.join(repeated[:5])}")

    sentences = split_sentences(text)
    if sentences:
        average = len(text.split()) / len(sentences)
        if average > LONG_SENTENCE_AVERAGE:
            score -= 15
            indicators.append(f"Long sentences (average {average:.0f} words)")

    score = max(0, score)
    return HumanLikeScore(score=score, is_human_like=score >= PASS_SCORE, indicators=indicators, source="local")


class ContentQualityService:
    """
    Quality checks that prefer the remote enhancer.
    """

    def __init__(self, enhancer=None):
        self.enhancer = enhancer

    def _remote(self, method: str, *args):
        if self.enhancer is None:
            return None
        return lambda: getattr(self.enhancer, method)(*args)

    async def check_content_quality(
        self,
        content: str,
        title: str,
        context: Optional[Dict[str, Any]] = None
    ) -> RemoteQualityReport:
        """
        Overall quality report.

        Args:
            content: Content HTML
            title: Content title
            context: Optional category and keywords for the remote check

        Returns:
            RemoteQualityReport with source "remote" or "local"
        """
        report, _ = await score_with_fallback(
            self._remote("check_quality", content, title, context or {}),
            lambda: local_quality_report(content, title),
            operation="Remote quality check"
        )
        return report

    async def validate_seo_compliance(
        self,
        content: str,
        title: str,
        meta: Union[SEOMeta, Dict[str, Any], None] = None
    ) -> SEOReport:
        """SEO report, remote when available."""
        report, _ = await score_with_fallback(
            self._remote("check_seo", content, title, meta),
            lambda: check_seo_compliance(content, title, meta),
            operation="Remote SEO check"
        )
        return report

    async def verify_human_like_writing(self, content: str) -> HumanLikeScore:
        """Human-likeness verdict, remote when available."""
        verdict, _ = await score_with_fallback(
            self._remote("check_human_like", content),
            lambda: local_human_like_score(content),
            operation="Remote human-likeness check"
        )
        return verdict
