r"""Request execution engine.

``execute_request`` drives one invocation from a fully-resolved
``RequestSpec`` to the rendered body:

1. assemble the request (method, URL and body are checked before any
   client exists),
2. build the transport,
3. print the verbose request trace,
4. stop here on dry run,
5. run the retry executor,
6. print the response trace and the timing report,
7. filter and format the body,
8. hand the rendered body to the output sink.
"""

from __future__ import annotations

__all__ = ["ExecutionResult", "execute_request"]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from w3r.assembler import assemble_request
from w3r.pipeline.formatting import format_response_body
from w3r.presentation import Console, OutputSink
from w3r.retry import CallbackConfig, RetryConfig, RetryExecutor
from w3r.transport import build_client

if TYPE_CHECKING:
    import threading

    import httpx

    from w3r.core.config import RequestSpec
    from w3r.retry.executor import ResponseRecord

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one invocation.

    Attributes:
        record: The terminal response, ``None`` on dry run.
        rendered: The rendered body, ``None`` on dry run.
    """

    record: ResponseRecord | None = None
    rendered: str | None = None

    @property
    def dry_run(self) -> bool:
        return self.record is None


def execute_request(
    spec: RequestSpec,
    *,
    console: Console | None = None,
    sink: OutputSink | None = None,
    cancel_event: threading.Event | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ExecutionResult:
    r"""Execute the request described by ``spec``.

    Args:
        spec: The fully-resolved request specification.
        console: Console receiving the verbose and timing output.
        sink: Sink receiving the rendered body. Defaults to an
            ``OutputSink`` built from ``spec.output`` and ``spec.silent``.
        cancel_event: Optional event interrupting the backoff waits.
        transport: Optional transport replacing the network transport.

    Returns:
        The terminal response and the rendered body.

    Raises:
        W3rError: For every fatal error of the invocation.

    Example:
        ```pycon
        >>> import httpx
        >>> from w3r.core.config import RequestSpec
        >>> from w3r.engine import execute_request
        >>> transport = httpx.MockTransport(
        ...     lambda request: httpx.Response(200, json={"data": {"id": 7}})
        ... )
        >>> result = execute_request(
        ...     RequestSpec(url="https://api.example.com", json_filter="data.id", silent=True),
        ...     transport=transport,
        ... )
        >>> result.rendered
        '7'

        ```
    """
    console = console if console is not None else Console()
    sink = sink if sink is not None else OutputSink(spec.output, silent=spec.silent)

    prepared = assemble_request(spec)
    with build_client(spec, transport=transport) as bundle:
        if spec.verbose:
            console.print_request(prepared, bundle.default_headers)

        if spec.dry_run:
            logger.debug(f"Dry run: {prepared.method} request to {prepared.url} not sent")
            return ExecutionResult()

        callbacks = (
            CallbackConfig(on_request=console.on_request, on_retry=console.on_retry)
            if spec.verbose
            else CallbackConfig()
        )
        executor = RetryExecutor(
            RetryConfig.from_spec(spec), callbacks=callbacks, cancel_event=cancel_event
        )
        record = executor.execute(bundle.client, prepared)

    if spec.verbose:
        console.print_response(record)
    if spec.timing:
        console.print_timing(record)

    rendered = format_response_body(
        record.text, json_filter=spec.json_filter, pretty=spec.pretty_json
    )
    sink.write(rendered)
    return ExecutionResult(record=record, rendered=rendered)
