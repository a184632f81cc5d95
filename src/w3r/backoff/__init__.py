r"""Backoff strategies for retry delays."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from w3r.backoff.base import BaseBackoffStrategy
from w3r.backoff.exponential import ExponentialBackoff
