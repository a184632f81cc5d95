r"""Retry package implementing class-based composition pattern.

Public API:
    - RetryConfig: Configuration for retry behavior
    - CallbackConfig: Configuration for callbacks
    - RetryStrategy: Strategy for calculating retry delays
    - RetryDecider: Logic for deciding whether to retry
    - CallbackManager: Manager for callback invocations
    - RetryExecutor: Synchronous retry executor
    - ResponseRecord: Terminal response of the executor
"""

from __future__ import annotations

__all__ = [
    "CallbackConfig",
    "CallbackManager",
    "ResponseRecord",
    "RetryConfig",
    "RetryDecider",
    "RetryExecutor",
    "RetryStrategy",
]

from w3r.retry.config import CallbackConfig, RetryConfig
from w3r.retry.decider import RetryDecider
from w3r.retry.executor import ResponseRecord, RetryExecutor
from w3r.retry.manager import CallbackManager
from w3r.retry.strategy import RetryStrategy
