r"""Terminal presentation: verbose trace, timing report and output
routing.

The verbose trace is line oriented::

    > GET https://api.example.com/items
    > user-agent: w3r/1.0
    > authorization: Basic <credentials>

    < HTTP/1.1 200 OK
    < content-type: application/json

Request headers are reported with set semantics: the headers attached by
the client come first, then every request header the client does not
already attach. Authorization values are never printed.
"""

from __future__ import annotations

__all__ = ["Console", "OutputSink", "format_duration"]

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import httpx

from w3r.core.config import BASIC_AUTH_PLACEHOLDER, BYTES_PER_KB
from w3r.exceptions import OutputError

if TYPE_CHECKING:
    from w3r.assembler import PreparedRequest
    from w3r.callbacks import RequestInfo, RetryInfo
    from w3r.retry.executor import ResponseRecord

logger: logging.Logger = logging.getLogger(__name__)

TIMING_HEADER = "--- Timing Information ---"


def format_duration(seconds: float) -> str:
    """Format a duration for humans.

    Example:
        ```pycon
        >>> from w3r.presentation import format_duration
        >>> format_duration(1.5)
        '1.500s'
        >>> format_duration(0.25)
        '250.000ms'
        >>> format_duration(0.0000125)
        '12.500µs'

        ```
    """
    if seconds >= 1:
        return f"{seconds:.3f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.3f}ms"
    return f"{seconds * 1e6:.3f}µs"


def _display_value(name: str, value: str) -> str:
    if name.lower() == "authorization":
        return BASIC_AUTH_PLACEHOLDER
    return value


class Console:
    r"""Writes the verbose trace, the retry trace and the timing report.

    Args:
        stream: The output stream. Defaults to the current ``sys.stdout``.

    Example:
        ```pycon
        >>> import io
        >>> import httpx
        >>> from w3r.assembler import PreparedRequest
        >>> from w3r.presentation import Console
        >>> stream = io.StringIO()
        >>> Console(stream).print_request(
        ...     PreparedRequest(
        ...         method="GET",
        ...         url="https://api.example.com",
        ...         headers=(("Authorization", "Basic dTpw"),),
        ...     ),
        ...     httpx.Headers({"User-Agent": "w3r/1.0"}),
        ... )
        >>> print(stream.getvalue(), end="")
        > GET https://api.example.com
        > user-agent: w3r/1.0
        > authorization: Basic <credentials>
        <BLANKLINE>

        ```
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def line(self, text: str = "") -> None:
        print(text, file=self.stream)

    def print_request(self, prepared: PreparedRequest, default_headers: httpx.Headers) -> None:
        """Print the request line and the request headers."""
        self.line(f"> {prepared.method} {prepared.url}")
        for name, value in default_headers.multi_items():
            self.line(f"> {name}: {_display_value(name, value)}")
        for name, value in httpx.Headers(list(prepared.headers)).multi_items():
            if name not in default_headers:
                self.line(f"> {name}: {_display_value(name, value)}")
        self.line()

    def print_response(self, record: ResponseRecord) -> None:
        """Print the status line and the response headers."""
        self.line(f"< {record.http_version} {record.status_code} {record.reason_phrase}")
        for name, value in record.headers.multi_items():
            self.line(f"< {name}: {value}")
        self.line()

    def print_timing(self, record: ResponseRecord) -> None:
        """Print the timing report of a response.

        The throughput line is only printed when the body is not empty
        and the total time is positive.
        """
        size = len(record.content)
        self.line(TIMING_HEADER)
        self.line(f"Response received: {format_duration(record.response_time)}")
        self.line(f"Body read time: {format_duration(record.body_read_time)}")
        self.line(f"Total time: {format_duration(record.total_time)}")
        self.line(f"Response size: {size} bytes ({size / BYTES_PER_KB:.2f} KB)")
        if size > 0 and record.total_time > 0:
            throughput = size / record.total_time / BYTES_PER_KB
            self.line(f"Throughput: {throughput:.2f} KB/s")
        self.line()

    def on_request(self, info: RequestInfo) -> None:
        """Print the retry banner from the second attempt onward."""
        if info.attempt > 1:
            self.line(f"--- Retry Attempt {info.attempt - 1} ---")

    def on_retry(self, info: RetryInfo) -> None:
        """Print the reason of a retry, before the backoff wait."""
        if info.status_code is not None:
            self.line(f"HTTP {info.status_code} - retrying after delay...")
        else:
            self.line(f"Request error: {info.error} - retrying after delay...")


class OutputSink:
    """Routes the rendered body to a file or to the console.

    A named output file always receives the body, as UTF-8 bytes, even
    in silent mode. Without output file the body is printed unless
    ``silent`` is set.

    Args:
        output: Optional path of the output file.
        silent: Suppress printing to the console.
        stream: The console stream. Defaults to the current ``sys.stdout``.
    """

    def __init__(
        self, output: str | None = None, *, silent: bool = False, stream: TextIO | None = None
    ) -> None:
        self.output = output
        self.silent = silent
        self._stream = stream

    def write(self, rendered: str) -> None:
        """Deliver the rendered body.

        Raises:
            OutputError: If the output file cannot be written, or the body
                cannot be encoded for its destination.
        """
        if self.output is not None:
            try:
                Path(self.output).write_bytes(rendered.encode("utf-8"))
            except (OSError, UnicodeEncodeError) as exc:
                msg = f"Failed to write the response to {self.output}: {exc}"
                raise OutputError(msg) from exc
            logger.debug(f"Wrote {len(rendered)} characters to {self.output}")
            return
        if self.silent:
            logger.debug("Silent mode: response body not printed")
            return
        try:
            print(rendered, file=self._stream if self._stream is not None else sys.stdout)
        except UnicodeEncodeError as exc:
            msg = f"Failed to print the response: {exc}"
            raise OutputError(msg) from exc
