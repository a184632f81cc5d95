r"""Utility functions for retry waits and structured logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "calculate_sleep_time",
    "configure_logging",
    "log_structured",
    "wait",
]

from w3r.utils.sleep import calculate_sleep_time, wait
from w3r.utils.structured_logging import StructuredFormatter, configure_logging, log_structured
