r"""Retry decision logic for the attempt loop.

This module provides the RetryDecider class that decides, after each
attempt, whether the loop moves to a backoff wait or terminates.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging

import httpx

from w3r.core.retry_logic import should_retry_exception, should_retry_response

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether an attempt outcome leads to another attempt.

    Args:
        max_retries: Maximum number of retries.

    Example:
        ```pycon
        >>> from w3r.retry import RetryDecider
        >>> decider = RetryDecider(max_retries=1)
        >>> decider.should_retry_response(503, attempt=0)
        (True, 'status 503')
        >>> decider.should_retry_response(503, attempt=1)
        (False, 'max retries exhausted')
        >>> decider.should_retry_response(404, attempt=0)
        (False, 'status 404 is not retryable')

        ```
    """

    def __init__(self, max_retries: int) -> None:
        self.max_retries = max_retries

    def should_retry_response(self, status_code: int, attempt: int) -> tuple[bool, str]:
        """Determine if a response should trigger a retry.

        Only 5xx, 408 and 429 are retried; every other status is a
        terminal outcome.

        Args:
            status_code: The HTTP status code.
            attempt: Current attempt number (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        return should_retry_response(status_code, attempt, self.max_retries)

    def should_retry_exception(self, exception: Exception, attempt: int) -> tuple[bool, str]:
        """Determine if an exception should trigger a retry.

        Only ``httpx.RequestError`` (connection failures, timeouts, DNS
        errors, ...) is retried.

        Args:
            exception: The exception raised by the attempt.
            attempt: Current attempt number (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if not isinstance(exception, httpx.RequestError):
            return (False, f"{type(exception).__name__} is not a transport error")
        return should_retry_exception(exception, attempt, self.max_retries)
