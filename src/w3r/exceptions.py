r"""Exception hierarchy raised by the request execution engine.

Every fatal condition of an invocation is reported through a subclass of
``W3rError`` so that callers (most notably the command-line front end) can
terminate with a single ``except`` clause. Retryable HTTP statuses are never
errors: once retries are exhausted the last response is returned normally.
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "OutputError",
    "RequestBuildError",
    "RequestCancelledError",
    "RequestFailedError",
    "ResponseReadError",
    "W3rError",
]


class W3rError(Exception):
    """Base class for all w3r errors."""


class ConfigurationError(W3rError):
    """Raised for invalid presets, a missing target URL or an invalid
    transport setup.

    Configuration errors are detected before any request is attempted and
    are never retried.
    """


class RequestBuildError(W3rError):
    """Raised when the request cannot be assembled (unknown method,
    invalid URL, unserializable body)."""


class RequestFailedError(W3rError):
    """Raised when every attempt ended with a transport-level error.

    The message is the text of the last transport error, unchanged. The
    original ``httpx`` exception is chained as ``__cause__``.

    Args:
        message: The transport error text.
        method: The HTTP method of the request.
        url: The URL of the request.
        attempts: The number of attempts that were made.

    Example:
        ```pycon
        >>> from w3r.exceptions import RequestFailedError
        >>> error = RequestFailedError(
        ...     "All connection attempts failed",
        ...     method="GET",
        ...     url="https://api.example.com",
        ...     attempts=3,
        ... )
        >>> str(error)
        'All connection attempts failed'
        >>> error.attempts
        3

        ```
    """

    def __init__(self, message: str, *, method: str, url: str, attempts: int) -> None:
        super().__init__(message)
        self.message = message
        self.method = method
        self.url = url
        self.attempts = attempts


class RequestCancelledError(W3rError):
    """Raised when a backoff wait is interrupted by a cancellation
    signal."""


class ResponseReadError(W3rError):
    """Raised when the response body cannot be read."""


class OutputError(W3rError):
    """Raised when the rendered body cannot be written to its output
    target."""
