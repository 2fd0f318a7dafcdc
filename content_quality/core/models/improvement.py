"""
Content improvement data models.
"""

from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from .quality import QualityScore


class ImprovementStage(str, Enum):
    """States the improver passes through."""
    EVALUATE = "evaluate"
    ALREADY_GOOD = "already_good"
    LOCAL_FIX_APPLIED = "local_fix_applied"
    MEETS_THRESHOLD = "meets_threshold"
    STILL_LOW = "still_low"
    REMOTE_REWRITE = "remote_rewrite"
    RESCORED = "rescored"
    DONE = "done"


class ImproveOptions(BaseModel):
    """Options for a single improvement call."""

    use_remote: bool = Field(default=True, description="Allow the remote enhancer")
    min_score: int = Field(default=50, ge=0, le=100, description="Target overall score")
    fix_readability: bool = Field(default=True, description="Normalize paragraphs and whitespace")
    fix_seo: bool = Field(default=True, description="Insert a heading when none exists")
    remove_ai_patterns: bool = Field(default=True, description="Clean placeholders, repetition and clichés")

    # Remote context
    category: Optional[str] = Field(None, description="Content category passed to the enhancer")
    keywords: List[str] = Field(default_factory=list, description="Keywords passed to the enhancer")

    def context(self) -> Dict[str, Any]:
        """Request context sent to the remote enhancer."""
        context: Dict[str, Any] = {}
        if self.category:
            context["category"] = self.category
        if self.keywords:
            context["keywords"] = list(self.keywords)
        return context


class ImprovedContent(BaseModel):
    """Result of one improvement call."""

    content: str = Field(..., description="Resulting content")
    original_score: QualityScore = Field(..., description="Score before improvement")
    improved_score: QualityScore = Field(..., description="Score after improvement")
    improvements: List[str] = Field(default_factory=list, description="Human-readable improvement notes")
    used_remote_enhancer: bool = Field(default=False, description="Remote rewrite was kept")

    stages: List[ImprovementStage] = Field(default_factory=list, description="States visited")

    model_config = ConfigDict(use_enum_values=True)

    @property
    def score_delta(self) -> int:
        """Change in overall score."""
        return self.improved_score.overall - self.original_score.overall
