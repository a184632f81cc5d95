r"""Request specification, defaults, validation and retry policy."""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_METHOD",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT",
    "BasicAuthConfig",
    "ProxyConfig",
    "RequestSpec",
    "is_retryable_status",
    "should_retry_exception",
    "should_retry_response",
    "validate_request_params",
    "validate_retry_params",
    "validate_timeout",
]

from w3r.core.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_METHOD,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    BasicAuthConfig,
    ProxyConfig,
    RequestSpec,
)
from w3r.core.retry_logic import (
    is_retryable_status,
    should_retry_exception,
    should_retry_response,
)
from w3r.core.validation import (
    validate_request_params,
    validate_retry_params,
    validate_timeout,
)
