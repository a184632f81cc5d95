r"""Backoff delay calculation and the cancellable wait between attempts.

This module provides the functions used by the retry engine to compute
the delay before the next attempt and to wait for it. The wait is the
only suspension point of an invocation; it can be interrupted through a
``threading.Event``.
"""

from __future__ import annotations

__all__ = ["calculate_sleep_time", "wait"]

import logging
import time
from typing import TYPE_CHECKING

from w3r.backoff.exponential import ExponentialBackoff
from w3r.exceptions import RequestCancelledError

if TYPE_CHECKING:
    import threading

    from w3r.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_sleep_time(
    attempt: int,
    backoff_strategy: BaseBackoffStrategy | None = None,
    max_wait_time: float | None = None,
) -> float:
    """Calculate sleep time before the next attempt.

    The sleep time is calculated as follows:
    1. ``backoff_strategy.calculate(attempt)``
    2. Apply max_wait_time cap (if max_wait_time is set):
       ``sleep_time = min(sleep_time, max_wait_time)``

    Args:
        attempt: The current attempt number (0-indexed). For example,
            attempt=0 is the wait after the first attempt.
        backoff_strategy: BaseBackoffStrategy instance or None.
            Defaults to ExponentialBackoff with base_delay=1.0.
        max_wait_time: Optional maximum delay cap in seconds.

    Returns:
        The calculated sleep time in seconds.

    Example:
        ```pycon
        >>> from w3r.utils.sleep import calculate_sleep_time
        >>> calculate_sleep_time(attempt=0)
        1.0
        >>> calculate_sleep_time(attempt=3)
        8.0
        >>> calculate_sleep_time(attempt=3, max_wait_time=5.0)
        5.0

        ```
    """
    if backoff_strategy is None:
        backoff_strategy = ExponentialBackoff()
    sleep_time = backoff_strategy.calculate(attempt)

    if max_wait_time is not None and sleep_time > max_wait_time:
        logger.debug(
            f"Capping sleep time from {sleep_time:.2f}s to {max_wait_time:.2f}s "
            f"(max_wait_time={max_wait_time:.2f}s)"
        )
        sleep_time = max_wait_time
    return sleep_time


def wait(seconds: float, cancel_event: threading.Event | None = None) -> None:
    """Block the calling thread for the backoff delay.

    Args:
        seconds: The delay in seconds.
        cancel_event: Optional event. When it is set (before or during the
            wait) the wait stops early.

    Raises:
        RequestCancelledError: If ``cancel_event`` was set.
    """
    logger.debug(f"Waiting {seconds:.2f}s before retry")
    if cancel_event is None:
        time.sleep(seconds)
        return
    if cancel_event.wait(seconds):
        msg = f"Request cancelled during a {seconds:.2f}s backoff wait"
        raise RequestCancelledError(msg)
