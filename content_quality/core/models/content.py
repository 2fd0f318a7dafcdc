"""
Content-related data models.

This module defines the input-side structures of the pipeline: the
detected content format, sanitizer and renderer options, and the
corpus items used for duplicate detection.
"""

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentFormat(str, Enum):
    """Content format classification."""
    HTML = "html"
    HTML_ESCAPED = "html_escaped"
    MARKDOWN = "markdown"
    PLAIN = "plain"
    AUTO = "auto"


class SanitizeOptions(BaseModel):
    """Allow-list switches for the sanitizer."""

    allow_images: bool = Field(default=True, description="Keep <img> elements")
    allow_tables: bool = Field(default=True, description="Keep table elements")
    allow_blockquotes: bool = Field(default=True, description="Keep <blockquote>/<q>/<cite>")
    allow_code: bool = Field(default=True, description="Keep <pre>/<code>")
    strict: bool = Field(default=False, description="Minimal tag set, no global attributes")

    model_config = ConfigDict(frozen=True)


class RenderOptions(BaseModel):
    """Options for the top-level render entry point."""

    format: ContentFormat = Field(default=ContentFormat.AUTO, description="Input format, auto-detected by default")
    sanitize: bool = Field(default=True, description="Run the sanitize-and-repair pass")
    allow_images: bool = Field(default=True, description="Keep images")
    allow_tables: bool = Field(default=True, description="Keep tables")
    allow_code: bool = Field(default=True, description="Keep code blocks")
    wrap_tables: bool = Field(default=True, description="Wrap tables in a horizontal scroll container")

    model_config = ConfigDict(use_enum_values=True)

    def sanitize_options(self) -> SanitizeOptions:
        """Derive sanitizer options from render options."""
        return SanitizeOptions(
            allow_images=self.allow_images,
            allow_tables=self.allow_tables,
            allow_code=self.allow_code
        )


class CorpusItem(BaseModel):
    """An existing item the candidate is compared against."""

    id: str = Field(..., description="Item identifier")
    title: str = Field(default="", description="Item title")
    slug: str = Field(default="", description="Item slug")
    content: str = Field(default="", description="Item body")

    model_config = ConfigDict(coerce_numbers_to_str=True)


class SEOMeta(BaseModel):
    """Meta information checked by the SEO scorer."""

    description: Optional[str] = Field(None, description="Meta description")
    keywords: List[str] = Field(default_factory=list, description="Target keywords")

    @field_validator('keywords', mode='before')
    @classmethod
    def split_keywords(cls, v):
        """Accept a comma-separated keyword string."""
        if v is None:
            return []
        if isinstance(v, str):
            return [k.strip() for k in v.split(',') if k.strip()]
        return v
