"""
Retry helpers for model provider calls.

Only transport-level failures are retried here; what a model says is the
attempt loop's business, not this module's.
"""
import logging
import time
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Patterns that suggest transient/temporary errors
TRANSIENT_ERROR_PATTERNS = [
    "timeout", "timed out", "temporarily unavailable",
    "connection", "overloaded", "rate limit", "ratelimit", "too many requests",
    "429", "500", "502", "503", "504",
    "connection reset", "broken pipe",
]


def is_transient_error_like(msg: str) -> bool:
    """
    Check if an error message suggests a transient/temporary failure.

    Args:
        msg: The error message to check

    Returns:
        True if error appears transient
    """
    error_lower = (msg or "").lower()
    return any(pattern in error_lower for pattern in TRANSIENT_ERROR_PATTERNS)


def call_with_retries(
    fn: Callable[[], T],
    max_retries: int = 3,
    backoff_factor: float = 2.0,
    initial_delay: float = 1.0,
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """
    Calls fn, retrying transient failures with exponential backoff.

    Non-transient errors and the last transient error are re-raised.
    """
    sleep = sleep or time.sleep
    delay = initial_delay
    attempt = 0
    while True:
        attempt += 1
        try:
            return fn()
        except Exception as exc:
            if attempt >= max_retries or not is_transient_error_like(f"{type(exc).__name__} {exc}"):
                raise
            logger.warning(
                "LLM_RETRY attempt=%s/%s delay=%.1fs error=%s message=%s",
                attempt,
                max_retries,
                delay,
                type(exc).__name__,
                str(exc)[:200],
            )
            sleep(delay)
            delay *= backoff_factor
