r"""Response body pipeline: parse, filter and format JSON bodies.

Bodies that are not valid JSON pass through unchanged, whatever the
filter and pretty-print options.
"""

from __future__ import annotations

__all__ = ["format_json", "format_response_body", "parse_json_body"]

import json
import logging
from typing import Any

from w3r.pipeline.json_path import extract_json_path

logger: logging.Logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


def parse_json_body(body: str) -> Any:
    """Parse a body as JSON.

    ``NaN``, ``Infinity`` and ``-Infinity`` are rejected, and so are
    strings holding an unpaired surrogate escape such as ``"\\ud800"``
    since they cannot be written back as UTF-8.

    Args:
        body: The body text.

    Returns:
        The parsed value.

    Raises:
        ValueError: If the body is not valid JSON.
    """
    value = json.loads(body, parse_constant=_reject_constant)
    try:
        json.dumps(value, ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError as exc:
        msg = f"JSON body holds an unpaired surrogate: {exc}"
        raise ValueError(msg) from exc
    return value


def format_json(value: Any, *, pretty: bool = False) -> str:
    """Serialize a JSON value.

    Args:
        value: The value to serialize.
        pretty: Indent with two spaces if ``True``, otherwise produce a
            compact single line.

    Returns:
        The serialized value. Key order is preserved.

    Example:
        ```pycon
        >>> from w3r.pipeline.formatting import format_json
        >>> format_json({"a": 1, "b": [2, 3]})
        '{"a":1,"b":[2,3]}'
        >>> print(format_json({"a": 1}, pretty=True))
        {
          "a": 1
        }

        ```
    """
    if pretty:
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def format_response_body(body: str, *, json_filter: str | None = None, pretty: bool = False) -> str:
    """Apply the JSON filter and formatting to a response body.

    Args:
        body: The response body text.
        json_filter: Optional path query applied to JSON bodies.
        pretty: Indent JSON bodies if ``True``.

    Returns:
        The rendered body, or ``body`` unchanged when it is not JSON.

    Example:
        ```pycon
        >>> from w3r.pipeline.formatting import format_response_body
        >>> format_response_body('{"data": {"id": 7}}', json_filter="data.id")
        '7'
        >>> format_response_body("hello world", json_filter="a", pretty=True)
        'hello world'

        ```
    """
    try:
        value = parse_json_body(body)
    except ValueError:
        logger.debug("Response body is not JSON, rendering it unchanged")
        return body

    if json_filter is not None:
        value = extract_json_path(value, json_filter)
        logger.debug(f"Applied JSON filter {json_filter!r}")
    return format_json(value, pretty=pretty)
