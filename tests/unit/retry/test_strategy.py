r"""Unit tests for RetryStrategy."""

from __future__ import annotations

from w3r.backoff import ExponentialBackoff
from w3r.retry import RetryStrategy


def test_retry_strategy_backoff_strategy() -> None:
    strategy = RetryStrategy(retry_delay=2.0)
    assert isinstance(strategy.backoff_strategy, ExponentialBackoff)
    assert strategy.backoff_strategy.base_delay == 2.0
    assert strategy.max_wait_time is None


def test_retry_strategy_doubles_delay() -> None:
    strategy = RetryStrategy(retry_delay=1.0)
    assert [strategy.calculate_delay(attempt) for attempt in range(5)] == [
        1.0,
        2.0,
        4.0,
        8.0,
        16.0,
    ]


def test_retry_strategy_zero_delay() -> None:
    strategy = RetryStrategy(retry_delay=0.0)
    assert strategy.calculate_delay(0) == 0.0
    assert strategy.calculate_delay(4) == 0.0


def test_retry_strategy_max_wait_time() -> None:
    strategy = RetryStrategy(retry_delay=1.0, max_wait_time=3.0)
    assert [strategy.calculate_delay(attempt) for attempt in range(4)] == [1.0, 2.0, 3.0, 3.0]
