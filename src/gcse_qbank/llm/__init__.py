"""
Module: llm

Purpose:
    Helpers for language-model consumers of the question bank: the
    rate-limit retry contract and few-shot example formatting.
"""

from .examples import format_unit_examples
from .retry import RateLimitError, complete_with_retry, create_retry_decorator, is_rate_limited

__all__ = [
    "RateLimitError",
    "complete_with_retry",
    "create_retry_decorator",
    "format_unit_examples",
    "is_rate_limited",
]
