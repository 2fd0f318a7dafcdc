"""
Quality monitoring data models.

This module defines the write-back payloads, statistics, alerts and
reports produced by the batch quality monitor.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from .quality import QualityIssue, Severity


class QualityRecord(BaseModel):
    """Per-item result a batch driver writes back to storage."""

    id: str = Field(..., description="Item identifier")
    title: str = Field(default="", description="Item title")
    slug: str = Field(default="", description="Item slug")
    type: str = Field(default="article", description="Item type (article, listing, news)")
    quality_score: int = Field(..., ge=0, le=100, description="Overall quality score")
    quality_issues: List[QualityIssue] = Field(default_factory=list, description="Quality issues")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Assessment timestamp")
    error: Optional[str] = Field(None, description="Assessment failure, if any")

    model_config = ConfigDict(coerce_numbers_to_str=True)

    def to_storage(self) -> Dict[str, Any]:
        """Fields persisted by the caller."""
        return {
            "quality_score": self.quality_score,
            "quality_issues": [issue.model_dump() for issue in self.quality_issues],
            "updated_at": self.updated_at.isoformat()
        }


class QualityStats(BaseModel):
    """Score distribution over a batch."""

    total: int = Field(default=0, ge=0, description="Items considered")
    high_quality: int = Field(default=0, ge=0, description="Score >= 70")
    medium_quality: int = Field(default=0, ge=0, description="Score 50-69")
    low_quality: int = Field(default=0, ge=0, description="Score < 50")
    average_score: float = Field(default=0.0, ge=0.0, le=100.0, description="Mean of non-zero scores")
    needs_review: int = Field(default=0, ge=0, description="Items below the pass score")


class QualityAlert(BaseModel):
    """Alert raised by the monitor."""

    severity: Severity = Field(..., description="Alert severity")
    message: str = Field(..., description="Alert message")
    item_id: Optional[str] = Field(None, description="Item that triggered the alert")
    score: Optional[float] = Field(None, description="Score that triggered the alert")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Alert timestamp")

    model_config = ConfigDict(use_enum_values=True)


class QualityTrend(BaseModel):
    """Change of the average score between the last two snapshots."""

    current_average: float = Field(default=0.0, description="Latest snapshot average")
    previous_average: Optional[float] = Field(None, description="Previous snapshot average")
    delta: float = Field(default=0.0, description="current - previous")
    direction: str = Field(default="flat", description="up, down or flat")
    snapshots: int = Field(default=0, ge=0, description="Snapshots recorded")


class MonitorReport(BaseModel):
    """Batch quality report."""

    stats: QualityStats = Field(..., description="Score distribution")
    low_quality_items: List[QualityRecord] = Field(default_factory=list, description="Items needing attention")
    alerts: List[QualityAlert] = Field(default_factory=list, description="Raised alerts")
    trend: QualityTrend = Field(default_factory=QualityTrend, description="Score trend")
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Report timestamp")


class ImprovementRecord(BaseModel):
    """Per-item result of a batch improvement run."""

    id: str = Field(..., description="Item identifier")
    title: str = Field(default="", description="Item title")
    slug: str = Field(default="", description="Item slug")
    content: Optional[str] = Field(None, description="Improved content; None when the item failed")
    original_score: int = Field(default=0, ge=0, le=100, description="Score before improvement")
    improved_score: int = Field(default=0, ge=0, le=100, description="Score after improvement")
    improvements: List[str] = Field(default_factory=list, description="Improvement notes")
    used_remote_enhancer: bool = Field(default=False, description="Remote rewrite was kept")
    error: Optional[str] = Field(None, description="Improvement failure, if any")

    model_config = ConfigDict(coerce_numbers_to_str=True)
