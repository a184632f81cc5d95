r"""Transport builder: assemble the reusable ``httpx.Client`` of an
invocation.

The client owns every transport-level option of a request specification
(timeout, user agent, proxy, cookie store and static headers). It is
built once per invocation and only used read-only afterwards, so every
attempt of the retry loop shares it.

Two values are derived from the same specification: the headers installed
on the client, and ``default_headers``, the set of headers the client
attaches silently. The latter is used only to report those headers in the
verbose request trace without listing them twice.
"""

from __future__ import annotations

__all__ = [
    "TransportBundle",
    "build_client",
    "build_cookie_jar",
    "build_default_headers",
    "build_proxy",
    "parse_header_entries",
]

import logging
import re
from dataclasses import dataclass
from http.cookies import CookieError, SimpleCookie
from typing import TYPE_CHECKING

import httpx

from w3r.core.config import USER_AGENT
from w3r.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType
    from typing import Self

    from w3r.core.config import ProxyConfig, RequestSpec

logger: logging.Logger = logging.getLogger(__name__)

# RFC 9110 token
_TOKEN_PATTERN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# Visible ASCII, space and horizontal tab
_HEADER_VALUE_PATTERN = re.compile(r"^[\t\x20-\x7e]*$")


@dataclass(frozen=True)
class TransportBundle:
    r"""The client of an invocation and the headers it attaches silently.

    The bundle is a context manager closing the client on exit.

    Attributes:
        client: The configured ``httpx.Client``.
        default_headers: User-Agent plus every valid static header.

    Example:
        ```pycon
        >>> from w3r.core.config import RequestSpec
        >>> from w3r.transport import build_client
        >>> spec = RequestSpec(url="https://api.example.com", headers=("X-Team: core",))
        >>> with build_client(spec) as bundle:
        ...     sorted(bundle.default_headers.keys())
        ...
        ['user-agent', 'x-team']

        ```
    """

    client: httpx.Client
    default_headers: httpx.Headers

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.client.close()


def parse_header_entries(entries: Iterable[str]) -> httpx.Headers:
    """Parse ``"Name: Value"`` entries into a header set.

    Each entry is split on its first colon and the value is trimmed.
    Entries without a colon, whose name is not a valid HTTP token, or
    whose value holds characters that cannot be sent are skipped. A later
    entry replaces an earlier entry with the same name.

    Args:
        entries: The header entries.

    Returns:
        The parsed headers.

    Example:
        ```pycon
        >>> from w3r.transport import parse_header_entries
        >>> headers = parse_header_entries(["Accept: application/json", "NoColonHere"])
        >>> dict(headers)
        {'accept': 'application/json'}

        ```
    """
    headers = httpx.Headers()
    for entry in entries:
        name, sep, value = entry.partition(":")
        if not sep:
            logger.debug(f"Skipping header entry without a colon: {entry!r}")
            continue
        if not _TOKEN_PATTERN.match(name):
            logger.debug(f"Skipping header entry with an invalid name: {entry!r}")
            continue
        value = value.strip()
        if not _HEADER_VALUE_PATTERN.match(value):
            logger.debug(f"Skipping header entry with an invalid value: {entry!r}")
            continue
        headers[name] = value
    return headers


def build_default_headers(spec: RequestSpec) -> httpx.Headers:
    """Return the headers the client attaches to every request.

    Args:
        spec: The request specification.

    Returns:
        User-Agent followed by the valid static headers of ``spec``.
    """
    headers = httpx.Headers({"User-Agent": USER_AGENT})
    headers.update(parse_header_entries(spec.headers))
    return headers


def build_proxy(proxy: ProxyConfig) -> httpx.Proxy:
    """Create the proxy target of the client.

    Proxy authentication is attached only when both the user and the
    password are set.

    Args:
        proxy: The proxy descriptor.

    Returns:
        The ``httpx.Proxy``.

    Raises:
        ConfigurationError: If the proxy URL is invalid.

    Example:
        ```pycon
        >>> from w3r.core.config import ProxyConfig
        >>> from w3r.transport import build_proxy
        >>> build_proxy(ProxyConfig(host="proxy.local", port="3128")).url
        URL('http://proxy.local:3128')

        ```
    """
    try:
        return httpx.Proxy(proxy.url, auth=proxy.credentials)
    except (httpx.InvalidURL, ValueError) as exc:
        msg = f"Invalid proxy URL {proxy.url!r}: {exc}"
        raise ConfigurationError(msg) from exc


def build_cookie_jar(cookies: Iterable[str], url: str) -> httpx.Cookies:
    """Parse cookie strings and bind them to the host of the target URL.

    A cookie string that cannot be parsed is dropped.

    Args:
        cookies: Cookie strings such as ``"session=abc; Path=/"``.
        url: The target URL.

    Returns:
        The cookie store of the client.
    """
    jar = httpx.Cookies()
    cookies = list(cookies)
    if not cookies:
        return jar
    try:
        host = httpx.URL(url).host
    except httpx.InvalidURL:
        host = ""
    if not host:
        logger.debug(f"Skipping {len(cookies)} cookie(s): no host in {url!r}")
        return jar

    for cookie_str in cookies:
        parsed: SimpleCookie = SimpleCookie()
        try:
            parsed.load(cookie_str)
        except CookieError:
            logger.debug(f"Dropping malformed cookie: {cookie_str!r}")
            continue
        if not parsed:
            logger.debug(f"Dropping malformed cookie: {cookie_str!r}")
            continue
        for name, morsel in parsed.items():
            jar.set(name, morsel.value, domain=host, path=morsel["path"] or "/")
    return jar


def build_client(
    spec: RequestSpec, *, transport: httpx.BaseTransport | None = None
) -> TransportBundle:
    """Build the client of an invocation.

    Args:
        spec: The request specification.
        transport: Optional transport replacing the network transport
            (for example ``httpx.MockTransport``).

    Returns:
        The client and its default headers.

    Raises:
        ConfigurationError: If the proxy or the client cannot be built.
    """
    default_headers = build_default_headers(spec)
    proxy = build_proxy(spec.proxy) if spec.proxy is not None else None
    cookies = build_cookie_jar(spec.cookies, spec.url)
    try:
        client = httpx.Client(
            timeout=spec.timeout,
            headers=default_headers,
            proxy=proxy,
            cookies=cookies,
            follow_redirects=True,
            transport=transport,
        )
    except (httpx.InvalidURL, ValueError, OSError) as exc:
        msg = f"Failed to build the HTTP client: {exc}"
        raise ConfigurationError(msg) from exc
    logger.debug(
        f"Built HTTP client (timeout={spec.timeout}s, proxy={proxy.url if proxy else None}, "
        f"cookies={len(cookies.jar)})"
    )
    return TransportBundle(client=client, default_headers=default_headers)
