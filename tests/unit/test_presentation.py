r"""Unit tests for the terminal presentation."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import httpx
import pytest

from w3r.assembler import PreparedRequest
from w3r.callbacks import RequestInfo, RetryInfo
from w3r.exceptions import OutputError
from w3r.presentation import TIMING_HEADER, Console, OutputSink, format_duration
from w3r.retry import ResponseRecord

if TYPE_CHECKING:
    from pathlib import Path


def make_record(content: bytes = b"", total_time: float = 0.5) -> ResponseRecord:
    return ResponseRecord(
        status_code=200,
        http_version="HTTP/1.1",
        reason_phrase="OK",
        headers=httpx.Headers({"Content-Type": "application/json", "X-Request-Id": "42"}),
        content=content,
        response_time=0.25,
        body_read_time=0.0005,
        total_time=total_time,
    )


#####################################
#     Tests for format_duration     #
#####################################


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (1.0, "1.000s"),
        (12.3456, "12.346s"),
        (0.5, "500.000ms"),
        (0.001, "1.000ms"),
        (0.0005, "500.000µs"),
        (0.0, "0.000µs"),
    ],
)
def test_format_duration(seconds: float, expected: str) -> None:
    assert format_duration(seconds) == expected


#############################
#     Tests for Console     #
#############################


def test_console_defaults_to_stdout(capsys: pytest.CaptureFixture) -> None:
    Console().line("hello")
    assert capsys.readouterr().out == "hello\n"


def test_console_print_request() -> None:
    stream = io.StringIO()
    prepared = PreparedRequest(
        method="POST",
        url="https://api.example.com/items",
        headers=(
            ("Content-Type", "application/json; charset=utf-8"),
            ("Authorization", "Basic YWRtaW46c2VjcmV0"),
        ),
        content=b"{}",
    )
    default_headers = httpx.Headers({"User-Agent": "w3r/1.0", "Accept": "application/json"})
    Console(stream).print_request(prepared, default_headers)
    assert stream.getvalue() == (
        "> POST https://api.example.com/items\n"
        "> user-agent: w3r/1.0\n"
        "> accept: application/json\n"
        "> content-type: application/json; charset=utf-8\n"
        "> authorization: Basic <credentials>\n"
        "\n"
    )


def test_console_print_request_lists_default_header_once() -> None:
    stream = io.StringIO()
    prepared = PreparedRequest(
        method="POST",
        url="https://api.example.com",
        headers=(("Content-Type", "application/x-www-form-urlencoded"),),
    )
    default_headers = httpx.Headers({"User-Agent": "w3r/1.0", "Content-Type": "text/plain"})
    Console(stream).print_request(prepared, default_headers)
    assert stream.getvalue().count("content-type") == 1
    assert "> content-type: text/plain\n" in stream.getvalue()


def test_console_print_request_redacts_static_authorization() -> None:
    stream = io.StringIO()
    default_headers = httpx.Headers({"Authorization": "Bearer token"})
    Console(stream).print_request(
        PreparedRequest(method="GET", url="https://api.example.com"), default_headers
    )
    assert "Bearer token" not in stream.getvalue()
    assert "> authorization: Basic <credentials>\n" in stream.getvalue()


def test_console_print_response() -> None:
    stream = io.StringIO()
    Console(stream).print_response(make_record())
    assert stream.getvalue() == (
        "< HTTP/1.1 200 OK\n"
        "< content-type: application/json\n"
        "< x-request-id: 42\n"
        "\n"
    )


def test_console_print_timing() -> None:
    stream = io.StringIO()
    Console(stream).print_timing(make_record(content=b"x" * 2048, total_time=0.5))
    assert stream.getvalue() == (
        f"{TIMING_HEADER}\n"
        "Response received: 250.000ms\n"
        "Body read time: 500.000µs\n"
        "Total time: 500.000ms\n"
        "Response size: 2048 bytes (2.00 KB)\n"
        "Throughput: 4.00 KB/s\n"
        "\n"
    )


def test_console_print_timing_empty_body() -> None:
    stream = io.StringIO()
    Console(stream).print_timing(make_record(content=b""))
    assert "Response size: 0 bytes (0.00 KB)\n" in stream.getvalue()
    assert "Throughput" not in stream.getvalue()


def test_console_print_timing_zero_total_time() -> None:
    stream = io.StringIO()
    Console(stream).print_timing(make_record(content=b"abc", total_time=0.0))
    assert "Throughput" not in stream.getvalue()


def test_console_on_request_first_attempt() -> None:
    stream = io.StringIO()
    Console(stream).on_request(
        RequestInfo(url="https://api.example.com", method="GET", attempt=1, max_retries=2)
    )
    assert stream.getvalue() == ""


def test_console_on_request_retry_banner() -> None:
    stream = io.StringIO()
    Console(stream).on_request(
        RequestInfo(url="https://api.example.com", method="GET", attempt=3, max_retries=2)
    )
    assert stream.getvalue() == "--- Retry Attempt 2 ---\n"


def test_console_on_retry_status() -> None:
    stream = io.StringIO()
    Console(stream).on_retry(
        RetryInfo(
            url="https://api.example.com",
            method="GET",
            attempt=2,
            max_retries=2,
            wait_time=1.0,
            error=None,
            status_code=503,
        )
    )
    assert stream.getvalue() == "HTTP 503 - retrying after delay...\n"


def test_console_on_retry_error() -> None:
    stream = io.StringIO()
    Console(stream).on_retry(
        RetryInfo(
            url="https://api.example.com",
            method="GET",
            attempt=2,
            max_retries=2,
            wait_time=1.0,
            error=httpx.ConnectError("Connection refused"),
            status_code=None,
        )
    )
    assert stream.getvalue() == "Request error: Connection refused - retrying after delay...\n"


################################
#     Tests for OutputSink     #
################################


def test_output_sink_console() -> None:
    stream = io.StringIO()
    OutputSink(stream=stream).write('{"a":1}')
    assert stream.getvalue() == '{"a":1}\n'


def test_output_sink_defaults_to_stdout(capsys: pytest.CaptureFixture) -> None:
    OutputSink().write("body")
    assert capsys.readouterr().out == "body\n"


def test_output_sink_silent() -> None:
    stream = io.StringIO()
    OutputSink(silent=True, stream=stream).write("body")
    assert stream.getvalue() == ""


def test_output_sink_file(tmp_path: Path) -> None:
    stream = io.StringIO()
    path = tmp_path / "out.json"
    OutputSink(str(path), stream=stream).write('{"name":"café"}')
    assert path.read_bytes() == '{"name":"café"}'.encode()
    assert stream.getvalue() == ""


def test_output_sink_file_silent(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    OutputSink(str(path), silent=True).write("body")
    assert path.read_text(encoding="utf-8") == "body"


def test_output_sink_file_overwrites(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    path.write_text("previous content that is longer")
    OutputSink(str(path)).write("new")
    assert path.read_text(encoding="utf-8") == "new"


def test_output_sink_file_error(tmp_path: Path) -> None:
    path = tmp_path / "missing" / "out.txt"
    with pytest.raises(OutputError, match=r"Failed to write the response to"):
        OutputSink(str(path)).write("body")


def test_output_sink_file_unencodable(tmp_path: Path) -> None:
    path = tmp_path / "out.json"
    with pytest.raises(OutputError, match=r"Failed to write the response to"):
        OutputSink(str(path)).write('{"a":"\ud800"}')


def test_output_sink_console_unencodable() -> None:
    stream = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
    with pytest.raises(OutputError, match=r"Failed to print the response"):
        OutputSink(stream=stream).write('{"a":"\ud800"}')
