"""
Retries for remote enhancer calls.

Transient failures (rate limits, timeouts, dropped connections) are
retried with exponential backoff and jitter. Anything else, including
LLMError flagged non-retryable, is raised on the first attempt.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Iterable, Optional, TypeVar

from ...core.models.errors import LLMError


logger = logging.getLogger(__name__)

T = TypeVar('T')

TRANSIENT_ERROR_NAMES = frozenset({
    "RateLimitError",
    "TimeoutError",
    "ConnectionError",
    "ServiceUnavailableError",
})
TRANSIENT_MESSAGE_HINTS = ("rate limit", "timeout", "connection", "service unavailable", "temporary")


class RetryHandler:
    """Exponential backoff around a coroutine function."""

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        backoff_multiplier: float = 2.0,
        jitter: bool = True,
        transient_errors: Optional[Iterable[str]] = None
    ):
        """
        Args:
            max_retries: Attempts after the first one
            base_delay: Seconds before the first retry
            max_delay: Cap for a single delay
            backoff_multiplier: Growth factor between attempts
            jitter: Spread each delay by up to 10% either way
            transient_errors: Exception class names that are always retried
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_multiplier = backoff_multiplier
        self.jitter = jitter
        self.transient_errors = frozenset(transient_errors or TRANSIENT_ERROR_NAMES)

    async def execute_with_retry(self, func: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        """
        Await func(*args, **kwargs), retrying transient failures.

        Raises:
            LLMError: When every attempt failed
            Exception: The first non-transient error, unchanged
        """
        attempt = 0
        while True:
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                if not self.is_retryable(e):
                    raise

                if attempt >= self.max_retries:
                    logger.error(f"Giving up after {attempt + 1} attempts: {str(e)}")
                    if isinstance(e, LLMError):
                        raise
                    raise LLMError(
                        message=f"All retries exhausted. Last error: {str(e)}",
                        retryable=False
                    ) from e

                delay = self.calculate_delay(attempt)
                logger.warning(f"Attempt {attempt + 1} failed ({str(e)}), retrying in {delay:.2f}s")
                await asyncio.sleep(delay)
                attempt += 1
                continue

            if attempt:
                logger.info(f"Request succeeded after {attempt} retries")
            return result

    def is_retryable(self, error: Exception) -> bool:
        if isinstance(error, LLMError):
            return error.retryable
        if type(error).__name__ in self.transient_errors:
            return True

        message = str(error).lower()
        return any(hint in message for hint in TRANSIENT_MESSAGE_HINTS)

    def calculate_delay(self, attempt: int) -> float:
        """Seconds to wait after the zero-based attempt that just failed; at least 0.1."""
        delay = min(self.base_delay * self.backoff_multiplier ** attempt, self.max_delay)

        if self.jitter:
            delay += random.uniform(-0.1, 0.1) * delay

        return max(0.1, delay)
