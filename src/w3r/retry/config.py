r"""Configuration dataclasses for retry behavior.

This module provides configuration objects for retry logic and
callbacks.
"""

from __future__ import annotations

__all__ = ["CallbackConfig", "RetryConfig"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

from w3r.core.config import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY
from w3r.core.validation import validate_retry_params

if TYPE_CHECKING:
    from collections.abc import Callable

    from w3r.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo
    from w3r.core.config import RequestSpec


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Maximum number of retries. Total attempts are
            ``max_retries + 1``.
        retry_delay: Delay before the first retry in seconds, doubled for
            every following retry.
        max_wait_time: Optional cap on each delay. ``None`` keeps the
            unbounded exponential growth.

    Example:
        ```pycon
        >>> from w3r.retry import RetryConfig
        >>> RetryConfig(max_retries=2).max_attempts
        3

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    max_wait_time: float | None = None

    def __post_init__(self) -> None:
        validate_retry_params(
            retry=self.max_retries,
            retry_delay=self.retry_delay,
            max_backoff=self.max_wait_time,
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @classmethod
    def from_spec(cls, spec: RequestSpec) -> RetryConfig:
        """Create the retry configuration of a request specification."""
        return cls(
            max_retries=spec.retry,
            retry_delay=spec.retry_delay,
            max_wait_time=spec.max_backoff,
        )


@dataclass
class CallbackConfig:
    """Configuration for callbacks.

    Attributes:
        on_request: Optional callback invoked before each request attempt.
        on_retry: Optional callback invoked before each backoff wait.
        on_success: Optional callback invoked on a terminal response.
        on_failure: Optional callback invoked when transport errors
            exhausted every attempt.
    """

    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[ResponseInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None
