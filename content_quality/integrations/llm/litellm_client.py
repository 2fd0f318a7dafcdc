"""
LiteLLM transport for the remote enhancer.

Sends one chat completion through litellm.acompletion and turns the
provider exceptions litellm raises into LLMError, flagged retryable or
not for the RetryHandler.
"""

import logging
import time
from typing import Optional, Dict, Any, List

from litellm import acompletion
from litellm.exceptions import (
    AuthenticationError,
    RateLimitError,
    APIError,
    Timeout,
    ServiceUnavailableError
)

from ...core.models.errors import LLMError
from ...core.models.llm import LLMConfig, LLMResponse


logger = logging.getLogger(__name__)

# Checked in order; APIError is the base of several others and goes last.
PROVIDER_ERRORS = (
    (AuthenticationError, "Authentication failed", False),
    (RateLimitError, "Rate limit exceeded", True),
    (Timeout, "Request timeout", True),
    (ServiceUnavailableError, "Service unavailable", True),
    (APIError, "API error", True),
)


class LiteLLMClient:
    """
    Thin async wrapper around litellm.

    Credentials and the API base travel with every request instead of
    being set on the litellm module, so clients with different keys can
    share a process.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = 60
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

        logger.info(f"LiteLLMClient initialized with timeout: {timeout}s")

    def build_params(self, config: LLMConfig) -> Dict[str, Any]:
        """Keyword arguments for acompletion."""
        messages: List[Dict[str, str]] = []
        if config.system_prompt:
            messages.append({"role": "system", "content": config.system_prompt})
        messages.append({"role": "user", "content": config.user_prompt})

        model = config.model
        params: Dict[str, Any] = {
            "model": model.litellm_name,
            "messages": messages,
            "temperature": model.temperature if config.temperature is None else config.temperature,
            "top_p": model.top_p,
            "timeout": self.timeout
        }

        optional = {
            "max_tokens": config.max_tokens or model.max_tokens,
            "response_format": model.response_format,
            "api_key": model.api_key or self.api_key,
            "api_base": model.base_url or self.base_url,
        }
        params.update({key: value for key, value in optional.items() if value})

        return params

    async def generate(self, config: LLMConfig) -> LLMResponse:
        """
        Run one completion.

        Raises:
            LLMError: For any provider failure; retryable unless the
                credentials are wrong or the failure is unrecognized
        """
        provider = config.model.provider
        model = config.model.model_name

        started = time.time()
        try:
            response = await acompletion(**self.build_params(config))
        except Exception as e:
            message, retryable = "Unexpected error", False
            for error_type, label, is_retryable in PROVIDER_ERRORS:
                if isinstance(e, error_type):
                    message, retryable = label, is_retryable
                    break

            log = logger.warning if retryable else logger.error
            log(f"{message} from {provider}/{model}: {str(e)}")
            raise LLMError(
                message=f"{message}: {str(e)}",
                provider=provider,
                model=model,
                retryable=retryable
            ) from e

        choice = response.choices[0]
        usage = getattr(response, "usage", None)

        return LLMResponse(
            content=choice.message.content or "",
            finish_reason=choice.finish_reason,
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(usage, "total_tokens", 0) or 0,
            model=model,
            provider=provider,
            request_id=config.request_id,
            response_time=time.time() - started
        )
