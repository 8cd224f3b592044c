"""
Retry decorator with exponential backoff for idempotent remote calls.
"""

import functools
import logging
import time
from typing import Any, Callable, Tuple, Type

logger = logging.getLogger(__name__)


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable:
    """
    Retry the wrapped function with exponential backoff.

    Args:
        max_attempts: Total attempts including the first call
        base_delay: Sleep before the second attempt, in seconds
        max_delay: Upper bound for any single sleep
        backoff_factor: Multiplier applied to the delay after each failure
        retryable: Exception types that trigger a retry; others propagate

    Returns:
        Decorator
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = base_delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if attempt >= max_attempts:
                        logger.error(
                            "%s failed after %d attempts: %s", fn.__qualname__, max_attempts, exc
                        )
                        raise
                    logger.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        fn.__qualname__,
                        attempt,
                        max_attempts,
                        exc,
                        delay,
                    )
                    time.sleep(min(delay, max_delay))
                    delay *= backoff_factor

        return wrapper

    return decorator
