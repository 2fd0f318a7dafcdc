"""
Remote-or-local combinator.

Every remote-backed operation goes through score_with_fallback: the
remote call is attempted once, and any failure yields the local
result instead. Cancellation is not a failure and propagates.
"""

import logging
from typing import Awaitable, Callable, Optional, Tuple, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar('T')


async def score_with_fallback(
    primary: Optional[Callable[[], Awaitable[T]]],
    fallback: Callable[[], T],
    operation: str = "remote call"
) -> Tuple[T, bool]:
    """
    Run the remote operation, or the local one if it is missing or fails.

    Args:
        primary: Zero-argument coroutine factory, or None when no remote is configured
        fallback: Zero-argument local function
        operation: Name used in log messages

    Returns:
        (result, used_remote)
    """
    if primary is None:
        return fallback(), False

    try:
        result = await primary()
    except Exception as e:
        logger.warning(f"{operation} unavailable, using local result: {type(e).__name__}: {e}")
        return fallback(), False

    return result, True
