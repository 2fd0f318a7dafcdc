"""
Request schemas for the Content Quality API.
"""

from .quality import (
    AssessRequestSchema,
    ImproveRequestSchema,
    CheckRequestSchema,
    SanitizeRequestSchema,
    RenderRequestSchema,
    ValidateRequestSchema,
    StatsRequestSchema,
    validation_error_response
)

__all__ = [
    'AssessRequestSchema',
    'ImproveRequestSchema',
    'CheckRequestSchema',
    'SanitizeRequestSchema',
    'RenderRequestSchema',
    'ValidateRequestSchema',
    'StatsRequestSchema',
    'validation_error_response'
]
