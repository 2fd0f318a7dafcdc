"""
LLM integration module.

This module provides the remote enhancer and the LLM plumbing it is
built on: a LiteLLM wrapper, retries with backoff and rate limiting.
"""

from .client import LLMClient
from .litellm_client import LiteLLMClient
from .retry_handler import RetryHandler
from .rate_limiter import RateLimiter
from .enhancer import RemoteEnhancer, create_remote_enhancer

__all__ = [
    'LLMClient',
    'LiteLLMClient',
    'RetryHandler',
    'RateLimiter',
    'RemoteEnhancer',
    'create_remote_enhancer'
]
