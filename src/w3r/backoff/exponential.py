r"""Doubling backoff used between attempts."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from w3r.backoff.base import BaseBackoffStrategy
from w3r.core.config import BACKOFF_MULTIPLIER, DEFAULT_RETRY_DELAY


class ExponentialBackoff(BaseBackoffStrategy):
    """Backoff doubling the delay after every attempt.

    The delay after attempt ``n`` (0-indexed) is
    ``base_delay * 2 ** n``. The strategy itself is unbounded; an
    optional cap is applied by ``calculate_sleep_time``.

    Args:
        base_delay: The delay before the first retry in seconds.

    Example:
        ```pycon
        >>> from w3r.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5)
        >>> [backoff.calculate(attempt) for attempt in range(4)]
        [0.5, 1.0, 2.0, 4.0]

        ```
    """

    def __init__(self, base_delay: float = DEFAULT_RETRY_DELAY) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        self.base_delay = base_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_delay={self.base_delay})"

    def calculate(self, attempt: int) -> float:
        return self.base_delay * (BACKOFF_MULTIPLIER**attempt)
