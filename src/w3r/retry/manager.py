r"""Callback manager for the retry lifecycle.

This module provides the CallbackManager class that converts the
executor's internal, 0-indexed attempt counter into the 1-indexed
values reported to user callbacks.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

import time

from w3r.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo
from w3r.retry.config import CallbackConfig


class CallbackManager:
    """Manages callback invocations during the retry lifecycle.

    Attributes:
        callbacks: Configuration containing callback functions for lifecycle events.
    """

    def __init__(self, callbacks: CallbackConfig | None = None) -> None:
        self.callbacks = callbacks if callbacks is not None else CallbackConfig()

    def on_request(self, url: str, method: str, attempt: int, max_retries: int) -> None:
        """Invoke on_request callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: Current attempt number (0-indexed).
            max_retries: Maximum number of retries.
        """
        if self.callbacks.on_request:
            self.callbacks.on_request(
                RequestInfo(url=url, method=method, attempt=attempt + 1, max_retries=max_retries)
            )

    def on_retry(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        sleep_time: float,
        error: Exception | None,
        status_code: int | None,
    ) -> None:
        """Invoke on_retry callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: Attempt number that just failed (0-indexed). The
                callback receives the number of the upcoming attempt
                (1-indexed), i.e. ``attempt + 2``.
            max_retries: Maximum number of retries.
            sleep_time: Sleep time before retry.
            error: Exception that triggered retry (if any).
            status_code: Status code that triggered retry (if any).
        """
        if self.callbacks.on_retry:
            self.callbacks.on_retry(
                RetryInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 2,
                    max_retries=max_retries,
                    wait_time=sleep_time,
                    error=error,
                    status_code=status_code,
                )
            )

    def on_success(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        status_code: int,
        start_time: float,
    ) -> None:
        """Invoke on_success callback.

        Args:
            url: The URL that was requested.
            method: The HTTP method.
            attempt: Attempt number of the terminal response (0-indexed).
            max_retries: Maximum number of retries.
            status_code: The terminal status code.
            start_time: ``time.perf_counter()`` value at the first attempt.
        """
        if self.callbacks.on_success:
            self.callbacks.on_success(
                ResponseInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    status_code=status_code,
                    total_time=time.perf_counter() - start_time,
                )
            )

    def on_failure(
        self,
        url: str,
        method: str,
        attempt: int,
        max_retries: int,
        error: Exception,
        start_time: float,
    ) -> None:
        """Invoke on_failure callback.

        Args:
            url: The URL that was requested.
            method: The HTTP method.
            attempt: Final attempt number (0-indexed).
            max_retries: Maximum number of retries.
            error: The error that caused failure.
            start_time: ``time.perf_counter()`` value at the first attempt.
        """
        if self.callbacks.on_failure:
            self.callbacks.on_failure(
                FailureInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    error=error,
                    total_time=time.perf_counter() - start_time,
                )
            )
