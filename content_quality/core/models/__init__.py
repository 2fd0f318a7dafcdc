"""
Data models and schemas for Content Quality.

This module contains all the data models, validation schemas, and
type definitions used throughout the pipeline.
"""

from .content import (
    ContentFormat,
    SanitizeOptions,
    RenderOptions,
    CorpusItem,
    SEOMeta
)

from .quality import (
    IssueType,
    Severity,
    PatternCategory,
    QualityIssue,
    AIPatternMatch,
    ReadabilityResult,
    SEOReport,
    SimilarItem,
    DuplicateReport,
    HTMLValidationResult,
    QualityScore,
    RemoteQualityReport,
    HumanLikeScore
)

from .improvement import (
    ImprovementStage,
    ImproveOptions,
    ImprovedContent
)

from .monitor import (
    QualityRecord,
    QualityStats,
    QualityAlert,
    QualityTrend,
    MonitorReport,
    ImprovementRecord
)

from .llm import (
    LLMProvider,
    LLMModel,
    LLMConfig,
    LLMResponse
)

from .errors import (
    ContentQualityError,
    ValidationError,
    LLMError,
    RemoteServiceError,
    TaskError,
    ConfigurationError,
    RateLimitError
)

__all__ = [
    # Content models
    'ContentFormat',
    'SanitizeOptions',
    'RenderOptions',
    'CorpusItem',
    'SEOMeta',

    # Quality models
    'IssueType',
    'Severity',
    'PatternCategory',
    'QualityIssue',
    'AIPatternMatch',
    'ReadabilityResult',
    'SEOReport',
    'SimilarItem',
    'DuplicateReport',
    'HTMLValidationResult',
    'QualityScore',
    'RemoteQualityReport',
    'HumanLikeScore',

    # Improvement models
    'ImprovementStage',
    'ImproveOptions',
    'ImprovedContent',

    # Monitor models
    'QualityRecord',
    'QualityStats',
    'QualityAlert',
    'QualityTrend',
    'MonitorReport',
    'ImprovementRecord',

    # LLM models
    'LLMProvider',
    'LLMModel',
    'LLMConfig',
    'LLMResponse',

    # Error models
    'ContentQualityError',
    'ValidationError',
    'LLMError',
    'RemoteServiceError',
    'TaskError',
    'ConfigurationError',
    'RateLimitError'
]
