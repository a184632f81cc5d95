r"""Callback types for observing the retry lifecycle.

The retry executor exposes four hooks:

- on_request: called before each attempt
- on_retry: called before each backoff wait
- on_success: called when a terminal response was received
- on_failure: called when transport errors exhausted every attempt

The verbose retry trace of the command-line tool is implemented with
``on_request`` and ``on_retry``.

Example:
    ```pycon
    >>> from w3r.callbacks import RetryInfo
    >>> from w3r.retry import CallbackConfig
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"attempt {info.attempt} in {info.wait_time}s")
    ...
    >>> callbacks = CallbackConfig(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = ["FailureInfo", "RequestInfo", "ResponseInfo", "RetryInfo"]

from dataclasses import dataclass


@dataclass
class RequestInfo:
    """Information passed to on_request callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The current attempt number (1-indexed). First attempt is 1.
        max_retries: Maximum number of retry attempts configured.
    """

    url: str
    method: str
    attempt: int
    max_retries: int


@dataclass
class RetryInfo:
    """Information passed to on_retry callback.

    Exactly one of ``error`` and ``status_code`` is set.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The number of the upcoming attempt (1-indexed). The first
            retry is attempt 2.
        max_retries: Maximum number of retry attempts configured.
        wait_time: The backoff delay in seconds before the next attempt.
        error: The transport error that triggered the retry (if any).
        status_code: The HTTP status code that triggered the retry (if any).
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    wait_time: float
    error: Exception | None
    status_code: int | None


@dataclass
class ResponseInfo:
    """Information passed to on_success callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt number that produced the response (1-indexed).
        max_retries: Maximum number of retry attempts configured.
        status_code: The HTTP status code of the terminal response.
        total_time: Seconds from the start of the first attempt until the
            body was read.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    status_code: int
    total_time: float


@dataclass
class FailureInfo:
    """Information passed to on_failure callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The final attempt number (1-indexed).
        max_retries: Maximum number of retry attempts configured.
        error: The final transport error.
        total_time: Seconds spent on all attempts including backoff.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    error: Exception
    total_time: float
