"""
Quality API schemas.

This module contains Pydantic schemas for the quality and content
endpoints, and the helper that turns schema failures into a
ValidationErrorResponse.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from ...core.models.content import CorpusItem, RenderOptions, SanitizeOptions, SEOMeta
from ...core.models.errors import ValidationErrorResponse
from ...core.models.improvement import ImproveOptions


MAX_CONTENT_CHARS = 500000


class AssessRequestSchema(BaseModel):
    """Schema for quality assessment requests."""

    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_CHARS)
    title: str = Field("", max_length=500)
    meta: Optional[SEOMeta] = Field(None)
    corpus: Optional[List[CorpusItem]] = Field(None)
    site_host: Optional[str] = Field(None, max_length=255)


class ImproveRequestSchema(BaseModel):
    """Schema for improvement requests."""

    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_CHARS)
    title: str = Field("", max_length=500)
    options: Optional[ImproveOptions] = Field(None)


class CheckRequestSchema(BaseModel):
    """Schema for remote-or-local quality check requests."""

    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_CHARS)
    title: str = Field("", max_length=500)
    category: Optional[str] = Field(None, max_length=100)
    keywords: List[str] = Field(default_factory=list)

    @field_validator('keywords', mode='before')
    @classmethod
    def split_keywords(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [k.strip() for k in v.split(',') if k.strip()]
        return v

    def context(self) -> Dict[str, Any]:
        context: Dict[str, Any] = {}
        if self.category:
            context['category'] = self.category
        if self.keywords:
            context['keywords'] = self.keywords
        return context


class SanitizeRequestSchema(BaseModel):
    """Schema for sanitize requests."""

    html: str = Field(..., max_length=MAX_CONTENT_CHARS)
    options: Optional[SanitizeOptions] = Field(None)


class RenderRequestSchema(BaseModel):
    """Schema for render requests."""

    content: str = Field(..., max_length=MAX_CONTENT_CHARS)
    options: Optional[RenderOptions] = Field(None)


class ValidateRequestSchema(BaseModel):
    """Schema for HTML validation requests."""

    html: str = Field(..., max_length=MAX_CONTENT_CHARS)


class StatsRequestSchema(BaseModel):
    """
    Schema for batch report requests.

    Records either carry a quality_score already or carry content to be
    assessed first.
    """

    records: List[Dict[str, Any]] = Field(..., min_length=1, max_length=1000)

    @field_validator('records')
    @classmethod
    def require_ids(cls, v):
        for index, record in enumerate(v):
            if record.get('id') in (None, ''):
                raise ValueError(f"record {index} has no id")
            if 'quality_score' not in record and 'content' not in record:
                raise ValueError(f"record {index} needs quality_score or content")
        return v


def validation_error_response(error: PydanticValidationError) -> ValidationErrorResponse:
    """Flatten pydantic errors into a ValidationErrorResponse."""
    response = ValidationErrorResponse()
    for item in error.errors():
        field = '.'.join(str(part) for part in item.get('loc', ())) or 'request_data'
        response.add_validation_error(field, item.get('msg', 'Invalid value'))
    return response
