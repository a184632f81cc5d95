r"""Unit tests for RetryDecider."""

from __future__ import annotations

import httpx
import pytest

from w3r.retry import RetryDecider


@pytest.fixture
def decider() -> RetryDecider:
    return RetryDecider(max_retries=2)


def test_retry_decider_max_retries(decider: RetryDecider) -> None:
    assert decider.max_retries == 2


@pytest.mark.parametrize("status_code", [408, 429, 500, 503])
def test_retry_decider_retryable_status(decider: RetryDecider, status_code: int) -> None:
    assert decider.should_retry_response(status_code, attempt=0) == (
        True,
        f"status {status_code}",
    )


def test_retry_decider_retryable_status_last_attempt(decider: RetryDecider) -> None:
    assert decider.should_retry_response(503, attempt=2) == (False, "max retries exhausted")


@pytest.mark.parametrize("status_code", [200, 301, 400, 404])
def test_retry_decider_terminal_status(decider: RetryDecider, status_code: int) -> None:
    should_retry, reason = decider.should_retry_response(status_code, attempt=0)
    assert not should_retry
    assert reason == f"status {status_code} is not retryable"


@pytest.mark.parametrize(
    "exception",
    [
        httpx.ConnectError("Connection refused"),
        httpx.ConnectTimeout("timed out"),
        httpx.ReadError("reset"),
    ],
)
def test_retry_decider_transport_error(decider: RetryDecider, exception: Exception) -> None:
    assert decider.should_retry_exception(exception, attempt=1) == (
        True,
        type(exception).__name__,
    )


def test_retry_decider_transport_error_last_attempt(decider: RetryDecider) -> None:
    assert decider.should_retry_exception(httpx.ConnectError("x"), attempt=2) == (
        False,
        "max retries exhausted",
    )


def test_retry_decider_other_exception(decider: RetryDecider) -> None:
    assert decider.should_retry_exception(ValueError("boom"), attempt=0) == (
        False,
        "ValueError is not a transport error",
    )
