"""
Models for the remote enhancer's LLM calls.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class LLMProvider(str, Enum):
    """Providers the enhancer can be pointed at (litellm prefixes)."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"
    MISTRAL = "mistral"
    OLLAMA = "ollama"


class LLMModel(BaseModel):
    """Which model to call and how."""

    provider: LLMProvider = Field(..., description="LLM provider")
    model_name: str = Field(..., description="Model name without the provider prefix")
    api_key: Optional[str] = Field(None, description="API key; the client default is used when empty")
    base_url: Optional[str] = Field(None, description="API base URL")

    # scoring answers want low variance, rewrites a little more
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: Optional[int] = Field(None, ge=1, le=100000, description="Maximum tokens")
    top_p: float = Field(default=1.0, ge=0.0, le=1.0, description="Top-p sampling")
    response_format: Optional[Dict[str, Any]] = Field(None, description="e.g. {'type': 'json_object'}")

    model_config = ConfigDict(use_enum_values=True, protected_namespaces=())

    @property
    def litellm_name(self) -> str:
        return f"{self.provider}/{self.model_name}"


class LLMConfig(BaseModel):
    """One prompt sent to one model."""

    model: LLMModel = Field(..., description="LLM model configuration")
    system_prompt: Optional[str] = Field(None, description="System prompt")
    user_prompt: str = Field(..., description="User prompt")

    temperature: Optional[float] = Field(None, ge=0.0, le=2.0, description="Override temperature")
    max_tokens: Optional[int] = Field(None, ge=1, le=100000, description="Override max tokens")

    request_id: Optional[str] = Field(None, description="Request ID for log correlation")

    model_config = ConfigDict(use_enum_values=True, protected_namespaces=())


class LLMResponse(BaseModel):
    content: str = Field(..., description="Answer text")
    finish_reason: Optional[str] = Field(None, description="Reason for completion")

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    model: str = Field(..., description="Model used")
    provider: LLMProvider = Field(..., description="Provider used")

    request_id: Optional[str] = Field(None, description="Request ID")
    response_time: float = Field(default=0.0, ge=0.0, description="Seconds, including retries")

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(use_enum_values=True, protected_namespaces=())
