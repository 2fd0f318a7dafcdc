"""
Quality scoring data models.

This module defines the value objects produced by the scoring
stages: issues, AI-pattern matches, the per-axis reports and the
aggregate quality score.
"""

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class IssueType(str, Enum):
    """Quality issue types."""
    AI_PATTERN = "ai_pattern"
    HTML_STRUCTURE = "html_structure"
    SEO = "seo"
    READABILITY = "readability"
    ENGAGEMENT = "engagement"
    UNIQUENESS = "uniqueness"
    STRUCTURE = "structure"


class Severity(str, Enum):
    """Issue severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PatternCategory(str, Enum):
    """AI-pattern categories."""
    GENERIC_PHRASE = "generic_phrase"
    REPETITIVE = "repetitive"
    PLACEHOLDER = "placeholder"
    CONCLUSION = "conclusion"
    TRANSITION = "transition"


class QualityIssue(BaseModel):
    """A single quality finding. Immutable once created."""

    type: IssueType = Field(..., description="Issue type")
    severity: Severity = Field(..., description="Issue severity")
    message: str = Field(..., description="Human-readable message")
    suggestion: Optional[str] = Field(None, description="How to fix it")
    location: Optional[int] = Field(None, ge=0, description="Character offset")

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    @field_validator('type', mode='before')
    @classmethod
    def normalize_type(cls, v):
        """Accept hyphenated type names (ai-pattern)."""
        if isinstance(v, str):
            return v.strip().lower().replace('-', '_')
        return v


class AIPatternMatch(BaseModel):
    """One match of an AI-likeness rule."""

    pattern: str = Field(..., description="Matched text")
    category: PatternCategory = Field(..., description="Pattern category")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Rule confidence")
    location: Optional[int] = Field(None, ge=0, description="Character offset")

    model_config = ConfigDict(frozen=True, use_enum_values=True)


class ReadabilityResult(BaseModel):
    """Flesch-style readability result."""

    score: int = Field(..., ge=0, le=100, description="Readability score")
    grade: str = Field(..., description="Grade label")
    issues: List[str] = Field(default_factory=list, description="Readability issues")


class SEOReport(BaseModel):
    """SEO compliance report."""

    score: int = Field(..., ge=0, le=100, description="SEO score")
    passed: bool = Field(..., description="score >= 70")
    issues: List[QualityIssue] = Field(default_factory=list, description="SEO issues")
    suggestions: List[str] = Field(default_factory=list, description="SEO suggestions")
    keyword_density: float = Field(default=0.0, ge=0.0, le=100.0, description="Percent of keywords found in body")
    meta_description_length: int = Field(default=0, ge=0, description="Meta description length")
    title_length: int = Field(default=0, ge=0, description="Title length")


class SimilarItem(BaseModel):
    """A corpus item similar to the candidate."""

    id: str = Field(..., description="Item identifier")
    title: str = Field(default="", description="Item title")
    slug: str = Field(default="", description="Item slug")
    similarity: float = Field(..., ge=0.0, le=1.0, description="Jaccard similarity")


class DuplicateReport(BaseModel):
    """Duplicate detection result."""

    is_duplicate: bool = Field(default=False, description="Top similarity > 0.7")
    similarity: float = Field(default=0.0, ge=0.0, le=1.0, description="Top similarity")
    similar_articles: List[SimilarItem] = Field(default_factory=list, description="Top 5 similar items")


class HTMLValidationResult(BaseModel):
    """HTML structure validation result."""

    is_valid: bool = Field(..., description="No errors found")
    errors: List[str] = Field(default_factory=list, description="Structural errors")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal findings")
    fixed_html: Optional[str] = Field(None, description="Repaired HTML when errors were found")


class QualityScore(BaseModel):
    """Aggregate quality score."""

    overall: int = Field(..., ge=0, le=100, description="Weighted overall score")
    readability: int = Field(..., ge=0, le=100, description="Readability score")
    seo: int = Field(..., ge=0, le=100, description="SEO score")
    engagement: int = Field(..., ge=0, le=100, description="Engagement score")
    uniqueness: int = Field(..., ge=0, le=100, description="Uniqueness band (100 or 50)")
    ai_probability: float = Field(..., ge=0.0, le=1.0, description="Mean AI-pattern confidence")

    issues: List[QualityIssue] = Field(default_factory=list, description="Aggregated issues")
    suggestions: List[str] = Field(default_factory=list, description="Deduplicated suggestions")

    ai_patterns: List[AIPatternMatch] = Field(default_factory=list, description="Raw AI-pattern matches")
    word_count: int = Field(default=0, ge=0, description="Body word count")
    duplicate_check_performed: bool = Field(default=False, description="A corpus was supplied")


class RemoteQualityReport(BaseModel):
    """Quality check result, from the remote enhancer or the local fallback."""

    score: int = Field(..., ge=0, le=100, description="Quality score")
    passed: bool = Field(..., description="Content passed the check")
    issues: List[QualityIssue] = Field(default_factory=list, description="Issues")
    suggestions: List[str] = Field(default_factory=list, description="Suggestions")
    ai_generated: bool = Field(default=False, description="Content looks machine-written")
    human_like_score: int = Field(default=0, ge=0, le=100, description="Human-likeness score")
    seo_score: int = Field(default=0, ge=0, le=100, description="SEO score")
    source: str = Field(default="local", description="remote or local")


class HumanLikeScore(BaseModel):
    """Human-likeness verdict."""

    score: int = Field(..., ge=0, le=100, description="Human-likeness score")
    is_human_like: bool = Field(..., description="score >= 70")
    indicators: List[str] = Field(default_factory=list, description="Signals that lowered the score")
    source: str = Field(default="local", description="remote or local")
