r"""Command-line front end of w3r.

Parses the invocation, merges it with an optional preset, runs the
engine and maps errors to the exit status:

* 0: a response was received (whatever its HTTP status) or dry run,
* 1: any ``W3rError``, reported as ``Error: <message>`` on stderr,
* 130: the invocation was interrupted or cancelled.

Credentials and proxy settings fall back to the ``BASIC_USER``,
``BASIC_PASS``, ``PROXY_HOST``, ``PROXY_PORT``, ``PROXY_USER`` and
``PROXY_PASS`` environment variables.

Each invocation carries a correlation id, taken from ``--correlation-id``
or generated at random, that JSON log records include.
"""

from __future__ import annotations

__all__ = ["build_parser", "main", "overrides_from_args"]

import argparse
import json
import logging
import os
import signal
import sys
import threading
import uuid
from typing import TYPE_CHECKING, Any

from w3r import __version__
from w3r.core.config import BasicAuthConfig, ProxyConfig
from w3r.engine import execute_request
from w3r.exceptions import ConfigurationError, RequestCancelledError, W3rError
from w3r.presets import load_presets, resolve_spec, select_preset
from w3r.utils.structured_logging import (
    clear_correlation_id,
    configure_logging,
    set_correlation_id,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

logger: logging.Logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Every option defaults to ``None`` so that values absent from the
    invocation do not override preset values.
    """
    parser = argparse.ArgumentParser(
        prog="w3r", description="Issue one HTTP request and render the response."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    target = parser.add_argument_group("request")
    target.add_argument("-u", "--url", help="target URL")
    target.add_argument("-m", "--method", help="HTTP method (default: GET)")
    target.add_argument(
        "--headers", action="append", metavar="'NAME: VALUE'", help="header, repeatable"
    )
    target.add_argument("-j", "--json", help="JSON request body")
    target.add_argument("-f", "--form-data", help="raw form-encoded request body")
    target.add_argument("--form", action="append", metavar="KEY=VALUE", help="form field, repeatable")
    target.add_argument("--cookies", action="append", metavar="COOKIE", help="cookie, repeatable")
    target.add_argument("--basic-user", default=os.environ.get("BASIC_USER"))
    target.add_argument("--basic-pass", default=os.environ.get("BASIC_PASS"))

    transport = parser.add_argument_group("transport")
    transport.add_argument("-t", "--timeout", type=float, help="timeout in seconds (default: 30)")
    transport.add_argument("--proxy-host", default=os.environ.get("PROXY_HOST"))
    transport.add_argument("--proxy-port", default=os.environ.get("PROXY_PORT"))
    transport.add_argument("--proxy-user", default=os.environ.get("PROXY_USER"))
    transport.add_argument("--proxy-pass", default=os.environ.get("PROXY_PASS"))
    transport.add_argument("--retry", type=int, help="number of retries (default: 0)")
    transport.add_argument(
        "--retry-delay", type=float, help="base backoff delay in seconds (default: 1.0)"
    )
    transport.add_argument(
        "--max-backoff", type=float, help="cap on each backoff delay in seconds (default: none)"
    )

    output = parser.add_argument_group("output")
    output.add_argument("-o", "--output", help="write the body to this file")
    output.add_argument("--json-filter", help="path query applied to JSON bodies, e.g. data.items[0]")
    output.add_argument("--pretty-json", action="store_true", default=None)
    output.add_argument("--timing", action="store_true", default=None)
    output.add_argument("-v", "--verbose", action="store_true", default=None)
    output.add_argument("-s", "--silent", action="store_true", default=None)
    output.add_argument("--dry-run", action="store_true", default=None)

    config = parser.add_argument_group("configuration")
    config.add_argument("-c", "--config", help="TOML preset file")
    config.add_argument("-p", "--preset", help="preset name (default: first preset)")
    config.add_argument(
        "--log-level",
        type=str.upper,
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        help="log level (default: WARNING)",
    )
    config.add_argument("--log-json", action="store_true", help="emit JSON log records")
    config.add_argument(
        "--correlation-id", help="id attached to JSON log records (default: random)"
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Convert parsed arguments into ``RequestSpec`` field values.

    Basic auth is only set when both user and password are given, a proxy
    only when both host and port are given.

    Raises:
        ConfigurationError: If ``--json`` is not valid JSON.
    """
    body = None
    if args.json is not None:
        try:
            body = json.loads(args.json)
        except ValueError as exc:
            msg = f"Invalid JSON body: {exc}"
            raise ConfigurationError(msg) from exc

    basic_auth = None
    if args.basic_user is not None and args.basic_pass is not None:
        basic_auth = BasicAuthConfig(user=args.basic_user, password=args.basic_pass)

    proxy = None
    if args.proxy_host is not None and args.proxy_port is not None:
        proxy = ProxyConfig(
            host=args.proxy_host,
            port=args.proxy_port,
            user=args.proxy_user,
            password=args.proxy_pass,
        )

    return {
        "url": args.url,
        "method": args.method,
        "headers": args.headers,
        "form_data": args.form_data,
        "form": args.form,
        "json": body,
        "basic_auth": basic_auth,
        "cookies": args.cookies,
        "proxy": proxy,
        "timeout": args.timeout,
        "retry": args.retry,
        "retry_delay": args.retry_delay,
        "max_backoff": args.max_backoff,
        "dry_run": args.dry_run,
        "verbose": args.verbose,
        "timing": args.timing,
        "silent": args.silent,
        "pretty_json": args.pretty_json,
        "json_filter": args.json_filter,
        "output": args.output,
    }


def _run(args: argparse.Namespace, cancel_event: threading.Event) -> None:
    preset = None
    if args.config is not None:
        preset = select_preset(load_presets(args.config), args.preset)
    elif args.preset is not None:
        msg = "--preset requires --config"
        raise ConfigurationError(msg)
    spec = resolve_spec(overrides_from_args(args), preset)
    logger.debug(f"Resolved {spec.method} request to {spec.url}")
    execute_request(spec, cancel_event=cancel_event)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line.

    Args:
        argv: The arguments, without the program name. Defaults to
            ``sys.argv[1:]``.

    Returns:
        The exit status.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_format=args.log_json)

    cancel_event = threading.Event()
    previous_handler = None
    if threading.current_thread() is threading.main_thread():
        previous_handler = signal.signal(signal.SIGTERM, lambda signum, frame: cancel_event.set())
    set_correlation_id(args.correlation_id or uuid.uuid4().hex)
    try:
        _run(args, cancel_event)
    except (RequestCancelledError, KeyboardInterrupt) as exc:
        print(f"Cancelled: {exc}" if str(exc) else "Cancelled", file=sys.stderr)
        return EXIT_CANCELLED
    except W3rError as exc:
        logger.debug("Invocation failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        clear_correlation_id()
        if previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)
    return EXIT_OK
