r"""Parameter validation for request specifications.

This module provides validation functions for the numeric parameters of a
request specification so that invalid values are rejected before any
client is built.
"""

from __future__ import annotations

__all__ = ["validate_request_params", "validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds for one attempt. Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from w3r.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    retry: int,
    retry_delay: float,
    max_backoff: float | None = None,
) -> None:
    """Validate retry parameters.

    Args:
        retry: Number of retries after the first attempt. Must be >= 0.
            A value of 0 means a single attempt.
        retry_delay: Base backoff delay in seconds. Must be >= 0.
        max_backoff: Optional cap on each backoff delay. Must be > 0 if
            provided.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from w3r.core.validation import validate_retry_params
        >>> validate_retry_params(retry=3, retry_delay=1.0)
        >>> validate_retry_params(retry=3, retry_delay=0.5, max_backoff=5.0)

        ```
    """
    if retry < 0:
        msg = f"retry must be >= 0, got {retry}"
        raise ValueError(msg)
    if retry_delay < 0:
        msg = f"retry_delay must be >= 0, got {retry_delay}"
        raise ValueError(msg)
    if max_backoff is not None and max_backoff <= 0:
        msg = f"max_backoff must be > 0, got {max_backoff}"
        raise ValueError(msg)


def validate_request_params(
    timeout: float,
    retry: int,
    retry_delay: float,
    max_backoff: float | None = None,
) -> None:
    """Validate all numeric parameters of a request specification.

    Raises:
        ValueError: If any parameter is out of range.
    """
    validate_timeout(timeout)
    validate_retry_params(retry=retry, retry_delay=retry_delay, max_backoff=max_backoff)
