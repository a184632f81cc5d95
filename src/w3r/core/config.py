r"""Request specification dataclasses, defaults and policy constants.

This module centralizes every default value and every threshold used by
the request execution engine (status ranges, backoff multiplier, content
types, ...) together with the immutable ``RequestSpec`` consumed by the
engine.
"""

from __future__ import annotations

__all__ = [
    "BACKOFF_MULTIPLIER",
    "BASIC_AUTH_PLACEHOLDER",
    "BYTES_PER_KB",
    "CONTENT_TYPE_FORM",
    "CONTENT_TYPE_JSON",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_METHOD",
    "DEFAULT_PROXY_SCHEME",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT",
    "JSON_PATH_ROOT",
    "RETRY_EXTRA_STATUS_CODES",
    "RETRY_STATUS_RANGE",
    "USER_AGENT",
    "BasicAuthConfig",
    "ProxyConfig",
    "RequestSpec",
]

from dataclasses import dataclass, fields, replace
from typing import Any

from w3r.core.validation import validate_request_params

USER_AGENT = "w3r/1.0"

DEFAULT_METHOD = "GET"

# Seconds, applies to the whole attempt (connect + read)
DEFAULT_TIMEOUT = 30.0

# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 0

# Wait time before attempt n+1 = retry_delay * BACKOFF_MULTIPLIER ** (n - 1)
DEFAULT_RETRY_DELAY = 1.0
BACKOFF_MULTIPLIER = 2

# HTTP status codes that trigger a retry:
# 500-599: server errors
# 408: Request Timeout
# 429: Too Many Requests
RETRY_STATUS_RANGE = (500, 599)
RETRY_EXTRA_STATUS_CODES = (408, 429)

CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_JSON = "application/json; charset=utf-8"

BASIC_AUTH_PLACEHOLDER = "Basic <credentials>"

DEFAULT_PROXY_SCHEME = "http"

JSON_PATH_ROOT = "."

BYTES_PER_KB = 1024.0

_SEQUENCE_FIELDS = ("headers", "form", "cookies")


@dataclass(frozen=True)
class BasicAuthConfig:
    """HTTP Basic credentials applied to the request.

    Attributes:
        user: The user name.
        password: The password.
    """

    user: str
    password: str


@dataclass(frozen=True)
class ProxyConfig:
    """HTTP proxy descriptor.

    Proxy authentication is only applied when both ``user`` and
    ``password`` are set; partial credentials are ignored.

    Attributes:
        host: The proxy host name.
        port: The proxy port.
        user: Optional proxy user name.
        password: Optional proxy password.
        scheme: The scheme used to reach the proxy.
    """

    host: str
    port: str
    user: str | None = None
    password: str | None = None
    scheme: str = DEFAULT_PROXY_SCHEME

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def credentials(self) -> tuple[str, str] | None:
        if self.user is None or self.password is None:
            return None
        return (self.user, self.password)


@dataclass(frozen=True)
class RequestSpec:
    """Fully-resolved description of one request invocation.

    Only one body variant is applied, in the order ``form_data`` >
    ``form`` > ``json``.

    Args:
        url: The target URL.
        method: The HTTP method, one of GET, POST, PUT, DELETE, HEAD, PATCH.
        headers: ``"Name: Value"`` entries, duplicates permitted.
        form_data: Raw form-encoded body sent verbatim.
        form: ``"key=value"`` entries encoded as a form body.
        json: A JSON value serialized as the body. ``None`` means no
            JSON body.
        basic_auth: Optional HTTP Basic credentials.
        cookies: Cookie strings bound to the target host.
        proxy: Optional proxy descriptor.
        timeout: Timeout in seconds for each attempt. Must be > 0.
        retry: Number of retries after the first attempt. Must be >= 0.
        retry_delay: Base backoff delay in seconds. Must be >= 0.
        max_backoff: Optional cap on each backoff delay in seconds. Must
            be > 0 if provided. ``None`` keeps the unbounded growth.
        dry_run: Build everything but do not send the request.
        verbose: Print the request and response trace.
        timing: Print the timing report.
        silent: Do not print the body on standard output.
        pretty_json: Indent JSON bodies.
        json_filter: Optional path query applied to JSON bodies.
        output: Optional file receiving the rendered body.

    Example:
        ```pycon
        >>> from w3r.core.config import RequestSpec
        >>> spec = RequestSpec(url="https://api.example.com")
        >>> spec.method
        'GET'
        >>> spec.merge(method="POST", retry=None).method
        'POST'

        ```
    """

    url: str = ""
    method: str = DEFAULT_METHOD
    headers: tuple[str, ...] = ()
    form_data: str | None = None
    form: tuple[str, ...] | None = None
    json: Any = None
    basic_auth: BasicAuthConfig | None = None
    cookies: tuple[str, ...] = ()
    proxy: ProxyConfig | None = None
    timeout: float = DEFAULT_TIMEOUT
    retry: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    max_backoff: float | None = None
    dry_run: bool = False
    verbose: bool = False
    timing: bool = False
    silent: bool = False
    pretty_json: bool = False
    json_filter: str | None = None
    output: str | None = None

    def __post_init__(self) -> None:
        """Normalize sequence fields and validate numeric parameters.

        Raises:
            ValueError: If any parameter fails validation.
        """
        for name in _SEQUENCE_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))
        validate_request_params(
            timeout=self.timeout,
            retry=self.retry,
            retry_delay=self.retry_delay,
            max_backoff=self.max_backoff,
        )

    def merge(self, **overrides: Any) -> RequestSpec:
        """Create a new spec with the non-``None`` overrides applied.

        Args:
            **overrides: Field values to override. ``None`` values keep
                the current value.

        Returns:
            A new ``RequestSpec``.

        Raises:
            TypeError: If an override does not name a field.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            msg = f"Unknown request spec field(s): {', '.join(unknown)}"
            raise TypeError(msg)
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
