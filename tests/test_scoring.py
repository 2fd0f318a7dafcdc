"""
Tests for the scoring stages and the quality aggregator.
"""

import pytest

from content_quality.core.models.content import CorpusItem, SEOMeta
from content_quality.core.models.quality import IssueType, PatternCategory, QualityIssue
from content_quality.core.scoring.aggregator import WEIGHTS, assess_quality, combine_scores
from content_quality.core.scoring.ai_patterns import ai_probability, detect_ai_patterns, detect_repetition
from content_quality.core.scoring.duplicates import detect_duplicate_content
from content_quality.core.scoring.engagement import calculate_engagement, is_internal_href
from content_quality.core.scoring.html_validation import validate_html_structure
from content_quality.core.scoring.readability import calculate_readability, count_syllables
from content_quality.core.scoring.seo import check_seo_compliance


FEATURES = [
    "apartment", "balcony", "kitchen", "garden", "parking",
    "elevator", "heating", "terrace", "storage", "sunlight"
]


def paragraph(words: int) -> str:
    """A paragraph of exactly `words` words in short, varied sentences."""
    tokens = [f"word{i}" for i in range(words)]
    sentences = [' '.join(tokens[i:i + 8]) + '.' for i in range(0, words, 8)]
    return f"<p>{' '.join(sentences)}</p>"


def rich_article() -> str:
    """Well-structured article that satisfies most SEO and engagement rules."""
    sentences = ' '.join(
        f"Room {i} has a wide window facing the quiet street." for i in range(36)
    )
    return (
        "<h2>Choosing a flat in Kadikoy</h2>"
        f"<p>{sentences}</p>"
        "<h2>What should you check before signing?</h2>"
        "<ul><li>Heating</li><li>Parking</li></ul>"
        "<h3>Documents</h3>"
        '<p><img src="/images/flat.jpg" alt="Flat"> Read our <a href="/guides/rent">rent guide</a>.</p>'
    )


def test_seo_short_title_missing_meta_and_h2():
    """Test short title, missing meta description, short body and no H2."""
    title = "Garden Flat Tip"
    assert len(title) == 15

    report = check_seo_compliance(paragraph(120), title)
    messages = [issue.message for issue in report.issues]

    assert report.score < 70
    assert report.passed is False
    assert "Title is too short (under 30 characters)" in messages
    assert "Missing H2 headings" in messages
    assert "Meta description is missing" in messages
    assert "Content is too short (under 300 words)" in messages
    assert "Add H2 headings" in report.suggestions
    assert "Add internal links" in report.suggestions


def test_seo_rich_article_passes():
    """Test an article that follows the conventions passes."""
    meta = SEOMeta(
        description="A practical guide to renting a flat in Kadikoy, with the checks to make before signing "
                    "and the documents landlords ask for.",
        keywords="flat, kadikoy"
    )
    report = check_seo_compliance(rich_article(), "Renting a flat in Kadikoy: what to check first", meta)

    assert 120 <= report.meta_description_length <= 155
    assert report.keyword_density == 100.0
    assert report.score == 100
    assert report.passed is True
    assert report.issues == []


def test_seo_images_without_alt():
    """Test missing alt text is counted."""
    html = '<p><img src="/a.jpg"><img src="/b.jpg" alt="b"><img src="/c.jpg" alt=""></p>'
    report = check_seo_compliance(html, "Title")

    assert "2 images are missing alt text" in [issue.message for issue in report.issues]


def test_seo_accepts_dict_meta():
    """Test meta may be given as a dict with a keyword string."""
    report = check_seo_compliance("<p>kadikoy flat</p>", "Kadikoy", {"keywords": "kadikoy, moda"})
    assert report.keyword_density == 50.0


def test_readability():
    """Test readability score and grade."""
    empty = calculate_readability("")
    assert empty.score == 0
    assert empty.grade == "Very hard"
    assert empty.issues

    easy = calculate_readability("<p>The cat sat. The dog ran.</p>")
    assert easy.score == 100
    assert easy.grade == "Very easy"

    hard = calculate_readability(
        "Comprehensive administrative documentation necessitates extraordinarily meticulous "
        "consideration regarding organizational responsibilities, "
        "interdepartmental communication and institutional accountability."
    )
    assert hard.score == 0
    assert any("sentence length" in issue or "complex" in issue for issue in hard.issues)


def test_count_syllables_uses_extended_vowels():
    """Test Turkish vowels count as syllables."""
    assert count_syllables("güneşli") == 3
    assert count_syllables("rhythm") == 1


def test_ai_pattern_detection():
    """Test rule matches carry category, confidence and location."""
    text = "Nice flat. In conclusion, this is a dream home. [image: kitchen]"
    matches = detect_ai_patterns(text)
    by_category = {m.category for m in matches}

    assert PatternCategory.CONCLUSION.value in by_category
    assert PatternCategory.PLACEHOLDER.value in by_category
    assert PatternCategory.GENERIC_PHRASE.value in by_category

    conclusion = next(m for m in matches if m.category == PatternCategory.CONCLUSION.value)
    assert conclusion.confidence == 0.9
    assert conclusion.location == text.index("In conclusion")

    assert detect_ai_patterns("") == []


def test_transition_rule_is_word_bounded():
    """Test transitions only match whole words."""
    assert detect_ai_patterns("Moreover, the rent is low.")
    assert not any(
        m.category == PatternCategory.TRANSITION.value
        for m in detect_ai_patterns("Furthermoreish is not a word.")
    )


def test_repetition_detection():
    """Test a sentence opening seen three times is reported."""
    text = "The flat is bright and airy. " * 3
    matches = detect_repetition(text)

    assert len(matches) == 1
    assert matches[0].category == PatternCategory.REPETITIVE.value
    assert matches[0].confidence == pytest.approx(0.9)

    assert detect_repetition("The flat is bright and airy. " * 2) == []


def test_ai_probability():
    """Test mean confidence."""
    assert ai_probability([]) == 0.0
    matches = detect_ai_patterns("In conclusion, nowadays it is fine.")
    assert ai_probability(matches) == pytest.approx((0.9 + 0.5) / 2)


def test_engagement():
    """Test engagement bonuses."""
    assert calculate_engagement("", 0) == 50
    assert calculate_engagement("<p>Is it worth it?</p>", 10) == 60
    assert calculate_engagement("<ul><li>a</li></ul><img src='/x.jpg'>", 400) == 75
    assert calculate_engagement('<p><a href="/guides">guide</a></p>', 900) == 65
    assert calculate_engagement(rich_article(), 400) <= 100


def test_internal_links():
    """Test internal link detection."""
    assert is_internal_href("/guides/rent")
    assert is_internal_href("#section")
    assert is_internal_href("guides/rent")
    assert not is_internal_href("https://other.com/page")
    assert is_internal_href("https://example.com/page", site_host="example.com")
    assert not is_internal_href("//cdn.example.com/x")
    assert not is_internal_href("")


def test_duplicates_above_threshold():
    """Test two items sharing most significant words are duplicates."""
    candidate = ' '.join(FEATURES)
    corpus = [
        {"id": "1", "title": "Near copy", "slug": "near-copy", "content": ' '.join(FEATURES[:9] + ["doorman"])},
        {"id": "2", "title": "Unrelated", "slug": "unrelated", "content": "stock market bonds inflation"},
    ]
    report = detect_duplicate_content(candidate, corpus)

    assert report.is_duplicate is True
    assert report.similarity > 0.7
    assert [item.id for item in report.similar_articles] == ["1"]


def test_duplicates_keep_top_five_sorted():
    """Test only the five most similar items above 0.3 are kept."""
    candidate = ' '.join(FEATURES)
    corpus = [
        CorpusItem(id=i, content=' '.join(FEATURES[:4 + i]))
        for i in range(7)
    ]
    report = detect_duplicate_content(candidate, corpus)
    similarities = [item.similarity for item in report.similar_articles]

    assert len(report.similar_articles) == 5
    assert similarities == sorted(similarities, reverse=True)
    assert all(s > 0.3 for s in similarities)
    assert report.similar_articles[0].id == "6"


def test_duplicates_empty_input():
    """Test empty candidate or corpus."""
    assert detect_duplicate_content("", [{"id": "1", "content": "x"}]).is_duplicate is False
    assert detect_duplicate_content(' '.join(FEATURES), []).similarity == 0.0


def test_html_validation():
    """Test structural errors and warnings."""
    valid = validate_html_structure("<p>Fine</p>")
    assert valid.is_valid
    assert valid.fixed_html is None

    broken = validate_html_structure('<p>Text<p>nested</p><img alt="x"><script>x()</script>')
    assert not broken.is_valid
    assert any("Unclosed" in error for error in broken.errors)
    assert any("without a source" in error for error in broken.errors)
    assert any("nested" in error for error in broken.errors)
    assert any("Script" in error for error in broken.errors)
    assert "<script" not in broken.fixed_html

    warned = validate_html_structure('<p>a</p></div><p></p><iframe src="x"></iframe>')
    assert warned.is_valid
    assert len(warned.warnings) == 3

    assert validate_html_structure("").is_valid


def test_html_validation_ignores_data_src():
    """Test data-src does not count as a source."""
    result = validate_html_structure('<img data-src="/lazy.jpg" alt="x">')
    assert not result.is_valid


def test_combine_scores():
    """Test the fixed weights."""
    assert sum(WEIGHTS.values()) == pytest.approx(1.0)
    assert combine_scores(100, 100, 100, 100, 0.0) == 100
    assert combine_scores(0, 0, 0, 0, 1.0) == 0
    assert combine_scores(40, 50, 50, 100, 0.0) == 60


def test_assess_quality_bounds_and_fields():
    """Test scores stay in range and the overall score matches the weights."""
    for content in ["", "<p>Short.</p>", rich_article(), "In conclusion [image] [image] " * 20]:
        score = assess_quality(content, "A title")

        assert 0 <= score.overall <= 100
        for value in (score.readability, score.seo, score.engagement, score.uniqueness):
            assert 0 <= value <= 100
        assert 0.0 <= score.ai_probability <= 1.0
        assert score.overall == combine_scores(
            score.readability, score.seo, score.engagement, score.uniqueness, score.ai_probability
        )


def test_assess_quality_issues_and_suggestions():
    """Test aggregated issues and deduplicated suggestions."""
    score = assess_quality("<p>In conclusion, this [image] is unclosed", "Short")
    types = {issue.type for issue in score.issues}

    assert IssueType.AI_PATTERN.value in types
    assert IssueType.HTML_STRUCTURE.value in types
    assert len(score.suggestions) == len(set(score.suggestions))
    assert score.duplicate_check_performed is False


def test_assess_quality_uniqueness_band():
    """Test uniqueness is 100 without similar items and 50 with them."""
    candidate = f"<p>{' '.join(FEATURES)}</p>"

    assert assess_quality(candidate, "t").uniqueness == 100
    assert assess_quality(candidate, "t", corpus=[]).uniqueness == 100
    assert assess_quality(candidate, "t", corpus=[]).duplicate_check_performed is True

    similar = assess_quality(candidate, "t", corpus=[{"id": "9", "content": ' '.join(FEATURES)}])
    assert similar.uniqueness == 50
    assert IssueType.UNIQUENESS.value in {issue.type for issue in similar.issues}


def test_uniqueness_band_starts_below_duplicate_threshold():
    """Test a partly similar item lowers uniqueness without flagging a duplicate."""
    candidate = f"<p>{' '.join(FEATURES)}</p>"
    corpus = [{"id": "4", "content": ' '.join(FEATURES[:5])}]

    report = detect_duplicate_content(candidate, corpus)
    assert report.similarity == 0.5
    assert report.is_duplicate is False

    score = assess_quality(candidate, "t", corpus=corpus)
    assert score.uniqueness == 50
    assert IssueType.UNIQUENESS.value not in {issue.type for issue in score.issues}


def test_quality_issue_is_frozen():
    """Test issues cannot be changed after creation."""
    issue = QualityIssue(type="ai-pattern", severity="high", message="x")
    assert issue.type == IssueType.AI_PATTERN.value

    with pytest.raises(Exception):
        issue.message = "changed"
