r"""w3r - command-line HTTP request tool with automatic retry logic.

w3r issues one HTTP request built from a ``RequestSpec``, retries it on
transient failures with exponential backoff, and renders the response
(status, headers, timing, body) to the terminal or to a file. It is built
on top of httpx.

Key Features:
    - Retry of transport errors and of 5xx, 408 and 429 responses
    - Exponential backoff (base_delay * 2 ** attempt), optional cap
    - Cancellable backoff waits
    - Raw form, form field and JSON request bodies, Basic auth, cookies,
      proxy with optional authentication
    - JSON path filter (``data.items[0].name``) and pretty printing
    - Verbose request/response trace and timing report
    - TOML presets merged with invocation values

Example:
    ```pycon
    >>> from w3r import RequestSpec, execute_request
    >>> spec = RequestSpec(
    ...     url="https://api.example.com/items",
    ...     retry=3,
    ...     json_filter="items[0]",
    ...     pretty_json=True,
    ... )
    >>> result = execute_request(spec)  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "BasicAuthConfig",
    "ConfigurationError",
    "ExecutionResult",
    "OutputError",
    "ProxyConfig",
    "RequestBuildError",
    "RequestCancelledError",
    "RequestFailedError",
    "RequestSpec",
    "ResponseReadError",
    "W3rError",
    "__version__",
    "execute_request",
]

from importlib.metadata import PackageNotFoundError, version

from w3r.core.config import BasicAuthConfig, ProxyConfig, RequestSpec
from w3r.engine import ExecutionResult, execute_request
from w3r.exceptions import (
    ConfigurationError,
    OutputError,
    RequestBuildError,
    RequestCancelledError,
    RequestFailedError,
    ResponseReadError,
    W3rError,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
