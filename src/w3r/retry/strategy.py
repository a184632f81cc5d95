r"""Retry strategy for calculating backoff delays.

This module provides the RetryStrategy class for calculating retry
delays.
"""

from __future__ import annotations

__all__ = ["RetryStrategy"]

from w3r.backoff.exponential import ExponentialBackoff
from w3r.utils.sleep import calculate_sleep_time


class RetryStrategy:
    """Strategy for calculating delays between attempts.

    The delay before attempt ``n + 1`` (``n`` attempts made) is
    ``retry_delay * 2 ** (n - 1)``, identical for transport errors and
    retryable status codes.

    Args:
        retry_delay: Delay before the first retry in seconds.
        max_wait_time: Optional maximum wait time cap in seconds.

    Attributes:
        backoff_strategy: The exponential backoff strategy.
        max_wait_time: Optional maximum wait time cap in seconds.

    Example:
        ```pycon
        >>> from w3r.retry import RetryStrategy
        >>> strategy = RetryStrategy(retry_delay=0.5)
        >>> [strategy.calculate_delay(attempt) for attempt in range(4)]
        [0.5, 1.0, 2.0, 4.0]

        ```
    """

    def __init__(self, retry_delay: float, max_wait_time: float | None = None) -> None:
        self.backoff_strategy = ExponentialBackoff(base_delay=retry_delay)
        self.max_wait_time = max_wait_time

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay before the next attempt.

        Args:
            attempt: Current attempt number (0-indexed).

        Returns:
            Sleep time in seconds.
        """
        return calculate_sleep_time(
            attempt=attempt,
            backoff_strategy=self.backoff_strategy,
            max_wait_time=self.max_wait_time,
        )
