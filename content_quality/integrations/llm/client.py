"""
Main LLM client for Content Quality.

This module combines the LiteLLM wrapper with rate limiting and
retries behind a single generate() call.
"""

import logging
import time
import uuid
from typing import Optional, Dict, Any

from ...core.models.errors import LLMError
from ...core.models.llm import LLMConfig, LLMModel, LLMResponse
from .litellm_client import LiteLLMClient
from .retry_handler import RetryHandler
from .rate_limiter import RateLimiter


logger = logging.getLogger(__name__)


class LLMClient:
    """
    Unified interface for LLM requests.

    This client handles:
    - Provider access through LiteLLM
    - Retries with exponential backoff
    - Rate limiting
    """

    def __init__(
        self,
        default_provider: str = "openai",
        default_model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = 60,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        rate_limit_per_minute: int = 60,
        litellm_client: Optional[LiteLLMClient] = None
    ):
        """
        Initialize LLM client.

        Args:
            default_provider: Default LLM provider
            default_model: Default model name
            api_key: API key for the provider
            base_url: Base URL for the provider API
            timeout: Per-request timeout in seconds
            max_retries: Maximum number of retries
            retry_delay: Delay before the first retry in seconds
            rate_limit_per_minute: Requests allowed per minute
            litellm_client: Preconfigured transport, mainly for tests
        """
        self.default_provider = default_provider
        self.default_model = default_model
        self.api_key = api_key
        self.base_url = base_url

        self.litellm_client = litellm_client or LiteLLMClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout
        )
        self.retry_handler = RetryHandler(max_retries=max_retries, base_delay=retry_delay)
        self.rate_limiter = RateLimiter(requests_per_minute=rate_limit_per_minute)

        logger.info(f"LLMClient initialized with provider: {default_provider}, model: {default_model}")

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> LLMResponse:
        """
        Generate text using the default provider and model.

        Args:
            prompt: User prompt
            system_prompt: System prompt
            temperature: Temperature for generation
            max_tokens: Maximum tokens
            response_format: Structured output format, e.g. {"type": "json_object"}

        Returns:
            LLMResponse with generated content

        Raises:
            LLMError: If generation fails
        """
        config = LLMConfig(
            model=LLMModel(
                provider=self.default_provider,
                model_name=self.default_model,
                api_key=self.api_key,
                base_url=self.base_url,
                response_format=response_format
            ),
            system_prompt=system_prompt,
            user_prompt=prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            request_id=uuid.uuid4().hex
        )

        await self.rate_limiter.wait_if_needed()

        start_time = time.time()
        try:
            response = await self.retry_handler.execute_with_retry(
                self.litellm_client.generate,
                config
            )
        except LLMError:
            raise
        except Exception as e:
            logger.error(f"LLM generation failed: {str(e)}")
            raise LLMError(
                message=f"LLM generation failed: {str(e)}",
                provider=self.default_provider,
                model=self.default_model,
                retryable=False
            )

        response.response_time = time.time() - start_time
        logger.debug(
            f"LLM request {config.request_id} completed in {response.response_time:.2f}s "
            f"({response.total_tokens} tokens)"
        )
        return response
