r"""Retry decision predicates.

The retry policy is status based: server errors, ``408 Request Timeout``
and ``429 Too Many Requests`` are retried, every other status is a
terminal outcome for the retry engine.
"""

from __future__ import annotations

__all__ = ["is_retryable_status", "should_retry_exception", "should_retry_response"]

from w3r.core.config import RETRY_EXTRA_STATUS_CODES, RETRY_STATUS_RANGE


def is_retryable_status(status_code: int) -> bool:
    """Indicate whether a HTTP status code asks for a retry.

    Args:
        status_code: The HTTP status code.

    Returns:
        ``True`` for 500-599, 408 and 429, ``False`` otherwise.

    Example:
        ```pycon
        >>> from w3r.core.retry_logic import is_retryable_status
        >>> is_retryable_status(503)
        True
        >>> is_retryable_status(429)
        True
        >>> is_retryable_status(404)
        False

        ```
    """
    low, high = RETRY_STATUS_RANGE
    return low <= status_code <= high or status_code in RETRY_EXTRA_STATUS_CODES


def should_retry_response(status_code: int, attempt: int, max_retries: int) -> tuple[bool, str]:
    """Determine if a response should trigger a retry.

    Args:
        status_code: The HTTP status code of the response.
        attempt: Current attempt number (0-indexed).
        max_retries: Maximum number of retries.

    Returns:
        Tuple of (should_retry, reason).
    """
    if not is_retryable_status(status_code):
        return (False, f"status {status_code} is not retryable")
    if attempt >= max_retries:
        return (False, "max retries exhausted")
    return (True, f"status {status_code}")


def should_retry_exception(exception: Exception, attempt: int, max_retries: int) -> tuple[bool, str]:
    """Determine if a transport error should trigger a retry.

    Args:
        exception: The transport error.
        attempt: Current attempt number (0-indexed).
        max_retries: Maximum number of retries.

    Returns:
        Tuple of (should_retry, reason).
    """
    if attempt >= max_retries:
        return (False, "max retries exhausted")
    return (True, f"{type(exception).__name__}")
