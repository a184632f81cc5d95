r"""Request assembler: turn a request specification into a replayable
request descriptor.

``PreparedRequest`` is resolved once, before any client exists, and
re-materializes a fresh ``httpx.Request`` for every attempt. Nothing is
consumed by sending, so retries never need to clone a request object.
"""

from __future__ import annotations

__all__ = ["SUPPORTED_METHODS", "PreparedRequest", "assemble_request", "parse_form_params"]

import base64
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import httpx

from w3r.core.config import CONTENT_TYPE_FORM, CONTENT_TYPE_JSON
from w3r.exceptions import ConfigurationError, RequestBuildError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from w3r.core.config import BasicAuthConfig, RequestSpec

logger: logging.Logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE", "HEAD", "PATCH")


@dataclass(frozen=True)
class PreparedRequest:
    r"""Fully-resolved request: method, URL, request-level headers and
    body.

    ``headers`` only holds the headers set by the request itself
    (Content-Type, Authorization). The headers attached by the client are
    merged in by ``build``.

    Attributes:
        method: The HTTP method.
        url: The target URL.
        headers: Request-level headers as ``(name, value)`` pairs.
        content: The body bytes (empty when there is no body).

    Example:
        ```pycon
        >>> import httpx
        >>> from w3r.assembler import PreparedRequest
        >>> prepared = PreparedRequest(method="GET", url="https://api.example.com/items")
        >>> with httpx.Client() as client:
        ...     first = prepared.build(client)
        ...     second = prepared.build(client)
        ...
        >>> first is second
        False
        >>> first.url == second.url
        True

        ```
    """

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    content: bytes = b""

    def build(self, client: httpx.Client) -> httpx.Request:
        """Create a new ``httpx.Request`` for one attempt.

        Args:
            client: The client whose default headers and cookies are merged
                into the request.

        Returns:
            A new request, byte-identical for every call.
        """
        return client.build_request(
            self.method,
            self.url,
            headers=list(self.headers),
            content=self.content or None,
        )


def parse_form_params(form_params: Iterable[str]) -> list[tuple[str, str]]:
    """Split ``"key=value"`` entries on their first ``=``.

    Entries without ``=`` are dropped.

    Example:
        ```pycon
        >>> from w3r.assembler import parse_form_params
        >>> parse_form_params(["name=w3r", "broken", "expr=a=b"])
        [('name', 'w3r'), ('expr', 'a=b')]

        ```
    """
    pairs = []
    for param in form_params:
        key, sep, value = param.partition("=")
        if not sep:
            logger.debug(f"Dropping form entry without '=': {param!r}")
            continue
        pairs.append((key, value))
    return pairs


def _check_method(method: str) -> str:
    if method not in SUPPORTED_METHODS:
        msg = f"Unknown HTTP method: {method!r}"
        raise RequestBuildError(msg)
    return method


def _check_url(url: str) -> str:
    if not url:
        msg = "A target URL is required"
        raise ConfigurationError(msg)
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        msg = f"Invalid URL {url!r}: {exc}"
        raise RequestBuildError(msg) from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        msg = f"Invalid URL {url!r}: an absolute http or https URL is required"
        raise RequestBuildError(msg)
    return url


def _basic_auth_header(auth: BasicAuthConfig) -> str:
    userpass = f"{auth.user}:{auth.password}".encode()
    return "Basic " + base64.b64encode(userpass).decode("ascii")


def _build_body(spec: RequestSpec) -> tuple[str | None, bytes]:
    if spec.form_data is not None:
        return CONTENT_TYPE_FORM, spec.form_data.encode("utf-8")
    if spec.form is not None:
        return CONTENT_TYPE_FORM, urlencode(parse_form_params(spec.form)).encode("utf-8")
    if spec.json is not None:
        try:
            body = json.dumps(spec.json, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            msg = f"Failed to serialize the JSON body: {exc}"
            raise RequestBuildError(msg) from exc
        return CONTENT_TYPE_JSON, body.encode("utf-8")
    return None, b""


def assemble_request(spec: RequestSpec) -> PreparedRequest:
    """Resolve the request described by ``spec``.

    The body variants are mutually exclusive and checked in the order raw
    form body, form fields, JSON value; only the first one present is
    applied.

    Args:
        spec: The request specification.

    Returns:
        The prepared request.

    Raises:
        ConfigurationError: If the URL is missing.
        RequestBuildError: If the method is not supported, the URL is
            invalid or the body cannot be serialized.

    Example:
        ```pycon
        >>> from w3r.assembler import assemble_request
        >>> from w3r.core.config import RequestSpec
        >>> prepared = assemble_request(
        ...     RequestSpec(url="https://api.example.com", method="POST", json={"a": 1})
        ... )
        >>> prepared.headers
        (('Content-Type', 'application/json; charset=utf-8'),)
        >>> prepared.content
        b'{"a":1}'

        ```
    """
    method = _check_method(spec.method)
    url = _check_url(spec.url)
    headers: list[tuple[str, str]] = []
    content_type, content = _build_body(spec)
    if content_type is not None:
        headers.append(("Content-Type", content_type))
    if spec.basic_auth is not None:
        headers.append(("Authorization", _basic_auth_header(spec.basic_auth)))
    logger.debug(f"Assembled {method} request to {url} ({len(content)} body bytes)")
    return PreparedRequest(method=method, url=url, headers=tuple(headers), content=content)
