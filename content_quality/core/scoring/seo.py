"""
SEO compliance checking.

This module scores content against the on-page conventions the site
follows: title and meta description length, keyword use, heading
structure, body length, image alt text and links. Scoring starts at
50 and each satisfied rule adds to it; unmet rules produce issues and
suggestions instead of penalties.
"""

import logging
import re
from typing import Optional, Union, Dict, Any, List

from ..models.content import SEOMeta
from ..models.quality import IssueType, QualityIssue, SEOReport, Severity
from ..processing.text import plain_text


logger = logging.getLogger(__name__)

BASE_SCORE = 50
PASS_SCORE = 70

TITLE_MIN, TITLE_MAX = 30, 60
META_MIN, META_MAX = 120, 155
WORDS_MIN, WORDS_MAX = 300, 2000
H2_MIN, H2_MAX = 2, 8
KEYWORD_DENSITY_MIN = 50.0

H2_PATTERN = re.compile(r'<h2\b[^>]*>', re.IGNORECASE)
H3_PATTERN = re.compile(r'<h3\b[^>]*>', re.IGNORECASE)
IMG_PATTERN = re.compile(r'<img\b[^>]*>', re.IGNORECASE)
IMG_WITH_ALT_PATTERN = re.compile(r'''<img\b[^>]*\balt\s*=\s*(?:"[^"]*\S[^"]*"|'[^']*\S[^']*')[^>]*>''', re.IGNORECASE)
LINK_PATTERN = re.compile(r'''<a\b[^>]*\bhref\s*=\s*(?:"[^"]+"|'[^']+')''', re.IGNORECASE)


def _seo_issue(severity: Severity, message: str, suggestion: Optional[str] = None) -> QualityIssue:
    return QualityIssue(type=IssueType.SEO, severity=severity, message=message, suggestion=suggestion)


def _coerce_meta(meta: Union[SEOMeta, Dict[str, Any], None]) -> SEOMeta:
    if meta is None:
        return SEOMeta()
    if isinstance(meta, SEOMeta):
        return meta
    return SEOMeta(**meta)


def check_seo_compliance(
    html: str,
    title: str,
    meta: Union[SEOMeta, Dict[str, Any], None] = None
) -> SEOReport:
    """
    Check content against SEO conventions.

    Args:
        html: Content HTML
        title: Page title
        meta: Meta description and target keywords

    Returns:
        SEOReport with score, pass flag, issues and suggestions
    """
    html = html or ''
    title = title or ''
    meta = _coerce_meta(meta)

    issues: List[QualityIssue] = []
    suggestions: List[str] = []
    score = BASE_SCORE

    body = plain_text(html).lower()
    word_count = len(body.split())

    # Title
    title_length = len(title)
    if title_length < TITLE_MIN:
        issues.append(_seo_issue(
            Severity.MEDIUM,
            f'Title is too short (under {TITLE_MIN} characters)',
            f'Make the title {TITLE_MIN}-{TITLE_MAX} characters long'
        ))
        suggestions.append(f'Make the title {TITLE_MIN}-{TITLE_MAX} characters long')
    elif title_length > TITLE_MAX:
        issues.append(_seo_issue(
            Severity.LOW,
            f'Title is too long (over {TITLE_MAX} characters)',
            f'Shorten the title below {TITLE_MAX} characters'
        ))
    else:
        score += 10

    # Meta description
    meta_length = len((meta.description or '').strip())
    if meta_length == 0:
        issues.append(_seo_issue(
            Severity.HIGH,
            'Meta description is missing',
            f'Add a {META_MIN}-{META_MAX} character meta description'
        ))
        suggestions.append(f'Add a meta description ({META_MIN}-{META_MAX} characters)')
    elif meta_length < META_MIN:
        issues.append(_seo_issue(
            Severity.MEDIUM,
            'Meta description is too short',
            f'Make the meta description {META_MIN}-{META_MAX} characters long'
        ))
    elif meta_length > META_MAX:
        issues.append(_seo_issue(
            Severity.LOW,
            'Meta description is too long',
            f'Shorten the meta description below {META_MAX} characters'
        ))
    else:
        score += 10

    # Keywords
    keywords = [kw.lower() for kw in meta.keywords if kw and kw.strip()]
    keyword_density = 0.0
    if keywords:
        if any(kw in title.lower() for kw in keywords):
            score += 10

        found = sum(1 for kw in keywords if kw in body)
        keyword_density = found / len(keywords) * 100
        if keyword_density < KEYWORD_DENSITY_MIN:
            issues.append(_seo_issue(
                Severity.MEDIUM,
                'Keywords are not used enough in the content',
                'Work the keywords into the content naturally'
            ))
        else:
            score += 10

    # Headings
    h2_count = len(H2_PATTERN.findall(html))
    if h2_count == 0:
        issues.append(_seo_issue(
            Severity.HIGH,
            'Missing H2 headings',
            'Add at least 2-3 H2 headings'
        ))
        suggestions.append('Add H2 headings')
    elif H2_MIN <= h2_count <= H2_MAX:
        score += 5

    if H3_PATTERN.search(html):
        score += 5

    # Length
    if WORDS_MIN <= word_count <= WORDS_MAX:
        score += 10
    elif word_count < WORDS_MIN:
        issues.append(_seo_issue(
            Severity.HIGH,
            f'Content is too short (under {WORDS_MIN} words)',
            f'Expand the content to at least {WORDS_MIN} words'
        ))
        suggestions.append(f'Expand the content to at least {WORDS_MIN} words')

    # Images
    image_count = len(IMG_PATTERN.findall(html))
    if image_count:
        with_alt = len(IMG_WITH_ALT_PATTERN.findall(html))
        if with_alt >= image_count:
            score += 5
        else:
            issues.append(_seo_issue(
                Severity.MEDIUM,
                f'{image_count - with_alt} images are missing alt text',
                'Add alt text to every image'
            ))

    # Links
    if LINK_PATTERN.search(html):
        score += 5
    else:
        suggestions.append('Add internal links')

    score = max(0, min(100, score))
    logger.debug(f"SEO score {score} ({len(issues)} issues)")

    return SEOReport(
        score=score,
        passed=score >= PASS_SCORE,
        issues=issues,
        suggestions=suggestions,
        keyword_density=round(keyword_density, 1),
        meta_description_length=meta_length,
        title_length=title_length
    )
