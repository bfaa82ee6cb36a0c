"""
Tests for the language-model retry contract.

All decorators are built with zero delays so retries do not sleep.
"""

import pytest

from gcse_qbank.llm.retry import (
    RateLimitError,
    complete_with_retry,
    create_retry_decorator,
    is_rate_limited,
)


class _StatusError(Exception):
    def __init__(self, status_code):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class _Response:
    status_code = 429


class _ResponseError(Exception):
    response = _Response()


class TestIsRateLimited:

    @pytest.mark.parametrize("exc", [
        RateLimitError(),
        _StatusError(429),
        _ResponseError("upstream"),
        RuntimeError("Rate limit reached for requests"),
        RuntimeError("429 Too Many Requests"),
        RuntimeError("Quota exceeded for this month"),
    ])
    def test_is_rate_limited_when_signal_then_true(self, exc):
        assert is_rate_limited(exc)

    @pytest.mark.parametrize("exc", [
        ValueError("bad prompt"),
        _StatusError(400),
        _StatusError(500),
        KeyError("choices"),
    ])
    def test_is_rate_limited_when_other_error_then_false(self, exc):
        assert not is_rate_limited(exc)


class TestCreateRetryDecorator:

    def test_retry_when_rate_limited_then_retries_until_success(self):
        # Arrange
        calls = []

        @create_retry_decorator(max_attempts=3, base_delay=0, max_delay=0)
        def complete():
            calls.append(1)
            if len(calls) < 3:
                raise RateLimitError()
            return "ok"

        # Act
        result = complete()

        # Assert
        assert result == "ok"
        assert len(calls) == 3

    def test_retry_when_attempts_exhausted_then_reraises(self):
        calls = []

        @create_retry_decorator(max_attempts=2, base_delay=0, max_delay=0)
        def complete():
            calls.append(1)
            raise RateLimitError("still limited")

        with pytest.raises(RateLimitError, match="still limited"):
            complete()
        assert len(calls) == 2

    def test_retry_when_other_error_then_fails_fast(self):
        calls = []

        @create_retry_decorator(max_attempts=5, base_delay=0, max_delay=0)
        def complete():
            calls.append(1)
            raise ValueError("bad prompt")

        with pytest.raises(ValueError):
            complete()
        assert len(calls) == 1

    def test_retry_when_retrying_then_logs_warning(self, caplog):
        attempts = iter([RateLimitError(), None])

        @create_retry_decorator(max_attempts=2, base_delay=0, max_delay=0)
        def complete():
            exc = next(attempts)
            if exc:
                raise exc
            return "done"

        with caplog.at_level("WARNING"):
            complete()
        assert "retry attempt 1 for complete" in caplog.text

    @pytest.mark.parametrize("kwargs", [
        {"max_attempts": 0},
        {"base_delay": -1},
        {"max_delay": -1},
    ])
    def test_create_when_invalid_then_raises_value_error(self, kwargs):
        with pytest.raises(ValueError):
            create_retry_decorator(**kwargs)


class TestCompleteWithRetry:

    def test_complete_when_rate_limited_once_then_returns_result(self):
        state = {"calls": 0}

        def complete(prompt):
            state["calls"] += 1
            if state["calls"] == 1:
                raise RateLimitError()
            return f"Question about {prompt}"

        result = complete_with_retry(complete, "RAM", base_delay=0, max_delay=0)

        assert result == "Question about RAM"
        assert state["calls"] == 2
