"""
Module: llm.retry

Purpose:
    Retry contract for language-model calls made by consumers of the
    question bank (question generation, answer feedback). Rate-limit
    signals are retried with exponential backoff and jitter; every other
    error fails fast.

Key Functions:
    - is_rate_limited(): Classify an exception as a rate-limit signal
    - create_retry_decorator(): tenacity decorator for a completion callable
    - complete_with_retry(): Call a completion function under the retry policy

Key Classes:
    - RateLimitError: Raised by completion adapters on a rate-limit response

Dependencies:
    - tenacity: Retry strategies (stop, wait, predicate)

Used By:
    - Completion adapters wrapping a provider SDK
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 60.0

RATE_LIMIT_STATUS = 429

_RATE_LIMIT_PHRASES = (
    "rate limit",
    "rate_limit",
    "too many requests",
    "quota exceeded",
)


class RateLimitError(RuntimeError):
    """
    Provider reported a rate limit.

    Attributes:
        retry_after: Seconds the provider asked to wait, if stated
    """

    def __init__(self, message: str = "rate limit exceeded", retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


def _status_code(exception: BaseException) -> Optional[int]:
    """HTTP status carried by common SDK exception shapes."""
    for attr in ("status_code", "status", "code"):
        value = getattr(exception, attr, None)
        if isinstance(value, int) and value >= 100:
            return value
    response = getattr(exception, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def is_rate_limited(exception: BaseException) -> bool:
    """
    True if `exception` signals a rate limit.

    Recognized: RateLimitError, HTTP 429 on the exception or its response,
    and provider messages mentioning a rate limit or quota.

    Example:
        >>> is_rate_limited(RateLimitError())
        True
        >>> is_rate_limited(ValueError("bad prompt"))
        False
    """
    if isinstance(exception, RateLimitError):
        return True
    if _status_code(exception) == RATE_LIMIT_STATUS:
        return True
    message = str(exception).lower()
    return any(phrase in message for phrase in _RATE_LIMIT_PHRASES)


def _log_retry(retry_state: RetryCallState) -> None:
    """Log each retry with the wait before the next attempt."""
    fn_name = getattr(retry_state.fn, "__name__", "unknown")
    wait_time = retry_state.next_action.sleep if retry_state.next_action else 0
    exc = retry_state.outcome.exception() if retry_state.outcome else None

    logger.warning(
        f"Rate limited, retry attempt {retry_state.attempt_number} for {fn_name}",
        extra={
            "function": fn_name,
            "attempt": retry_state.attempt_number,
            "wait_seconds": round(wait_time, 2),
            "error": str(exc) if exc else None,
        },
    )


def create_retry_decorator(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
) -> Callable:
    """
    Create a retry decorator for rate-limited calls.

    Args:
        max_attempts: Total attempts including the first call
        base_delay: Initial backoff in seconds (also the jitter range)
        max_delay: Backoff cap in seconds

    Returns:
        Configured tenacity retry decorator; the last exception is
        re-raised once attempts are exhausted

    Raises:
        ValueError: If max_attempts < 1 or a delay is negative.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1: {max_attempts}")
    if base_delay < 0 or max_delay < 0:
        raise ValueError(f"Delays must be non-negative: {base_delay}, {max_delay}")

    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential_jitter(initial=base_delay, max=max_delay, jitter=base_delay),
        retry=retry_if_exception(is_rate_limited),
        before_sleep=_log_retry,
        reraise=True,
    )


def complete_with_retry(
    complete: Callable[[str], str],
    prompt: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
) -> str:
    """
    Call `complete(prompt)` under the rate-limit retry policy.

    Example:
        >>> complete_with_retry(lambda p: p.upper(), "define ram")
        'DEFINE RAM'
    """
    decorator = create_retry_decorator(max_attempts, base_delay, max_delay)
    return decorator(complete)(prompt)
