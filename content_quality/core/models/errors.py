"""
Exceptions and error payloads.

Pipeline passes never raise for empty input. These exceptions cover
bad requests, remote enhancer failures, background tasks and
configuration. The HTTP layer turns them into ErrorResponse bodies.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field


class ContentQualityError(Exception):
    """Base exception; carries a machine-readable code and details."""

    default_code = "CONTENT_QUALITY_ERROR"

    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = {k: v for k, v in (details or {}).items() if v is not None}
        super().__init__(message)


class ValidationError(ContentQualityError):
    """A request or record failed validation."""

    default_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str = None, value: Any = None):
        self.field = field
        self.value = value
        # the rejected value stays off the payload; it may be a whole article body
        super().__init__(message, details={"field": field})


class LLMError(ContentQualityError):
    """The LLM provider call failed."""

    default_code = "LLM_ERROR"

    def __init__(self, message: str, provider: str = None, model: str = None, retryable: bool = True):
        self.provider = provider
        self.model = model
        self.retryable = retryable
        super().__init__(message, details={"provider": provider, "model": model, "retryable": retryable})


class RemoteServiceError(ContentQualityError):
    """The remote enhancer answered with something unusable."""

    default_code = "REMOTE_SERVICE_ERROR"

    def __init__(self, message: str, service: str = None, status_code: int = None):
        self.service = service
        self.status_code = status_code
        super().__init__(message, details={"service": service, "status_code": status_code})


class TaskError(ContentQualityError):
    """A batch task failed as a whole."""

    default_code = "TASK_ERROR"

    def __init__(self, message: str, task_id: str = None, records: int = None):
        self.task_id = task_id
        self.records = records
        super().__init__(message, details={"task_id": task_id, "records": records})


class ConfigurationError(ContentQualityError):
    default_code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, config_key: str = None):
        self.config_key = config_key
        super().__init__(message, details={"config_key": config_key})


class RateLimitError(ContentQualityError):
    default_code = "RATE_LIMIT_ERROR"

    def __init__(self, message: str, retry_after: int = None, limit: int = None):
        self.retry_after = retry_after
        self.limit = limit
        super().__init__(message, details={"retry_after": retry_after, "limit": limit})


class ErrorResponse(BaseModel):
    """JSON body for every API error."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable message")
    error_code: str = Field(default="UNKNOWN_ERROR", description="Machine-readable code")
    status: int = Field(..., description="HTTP status code")

    details: Optional[Dict[str, Any]] = Field(None, description="Error details")
    field: Optional[str] = Field(None, description="Offending request field")

    request_id: Optional[str] = Field(None, description="Request ID")
    task_id: Optional[str] = Field(None, description="Background task ID")

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp")

    @classmethod
    def from_exception(cls, exc: ContentQualityError, status: int = 500) -> 'ErrorResponse':
        return cls(
            error=exc.__class__.__name__,
            message=exc.message,
            error_code=exc.error_code,
            status=status,
            details=exc.details or None,
            field=getattr(exc, 'field', None),
            task_id=getattr(exc, 'task_id', None)
        )


class ValidationErrorResponse(BaseModel):
    """400 body listing every rejected request field."""

    error: str = Field(default="validation_error", description="Error type")
    message: str = Field(default="Request validation failed", description="Error message")
    status: int = Field(default=400, description="HTTP status code")

    validation_errors: List[Dict[str, str]] = Field(default_factory=list, description="Field errors")

    request_id: Optional[str] = Field(None, description="Request ID")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp")

    def add_validation_error(self, field: str, message: str):
        self.validation_errors.append({"field": field, "message": message})

    def has_errors(self) -> bool:
        return bool(self.validation_errors)
