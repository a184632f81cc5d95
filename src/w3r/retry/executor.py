r"""Synchronous retry executor.

This module implements the attempt loop of an invocation by composing a
``RetryStrategy`` (delays), a ``RetryDecider`` (retry or terminate) and a
``CallbackManager`` (lifecycle hooks).

State machine, with ``max_attempts = max_retries + 1``:

* transport error: back off and retry while attempts remain, otherwise
  raise ``RequestFailedError`` with the transport error text;
* response with a retryable status (5xx, 408, 429): back off and retry
  while attempts remain, otherwise the response is terminal;
* any other response: terminal on the first occurrence.

A terminal response is read completely and returned as a
``ResponseRecord``; its status is not interpreted further.
"""

from __future__ import annotations

__all__ = ["ResponseRecord", "RetryExecutor"]

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from w3r.exceptions import RequestFailedError, ResponseReadError
from w3r.retry.config import CallbackConfig, RetryConfig
from w3r.retry.decider import RetryDecider
from w3r.retry.manager import CallbackManager
from w3r.retry.strategy import RetryStrategy
from w3r.utils.sleep import wait
from w3r.utils.structured_logging import log_structured

if TYPE_CHECKING:
    import threading

    from w3r.assembler import PreparedRequest

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResponseRecord:
    r"""The terminal response of an invocation.

    Attributes:
        status_code: The HTTP status code.
        http_version: The protocol version, e.g. ``"HTTP/1.1"``.
        reason_phrase: The reason phrase, e.g. ``"OK"``.
        headers: The response headers.
        content: The raw body bytes.
        response_time: Seconds from the start of the terminal attempt until
            the status line and headers were received.
        body_read_time: Seconds spent reading the body.
        total_time: Seconds from the start of the first attempt until the
            body was read, including earlier attempts and backoff waits.
        attempts: Number of attempts that were made.
        encoding: The charset of the Content-Type header, or ``"utf-8"``
            when the response does not declare one.
    """

    status_code: int
    http_version: str
    reason_phrase: str
    headers: httpx.Headers
    content: bytes
    response_time: float
    body_read_time: float
    total_time: float
    attempts: int = 1
    encoding: str = "utf-8"

    @property
    def text(self) -> str:
        """The body decoded with ``encoding``, invalid sequences replaced."""
        return self.content.decode(self.encoding, errors="replace")


class RetryExecutor:
    """Executes a prepared request with retry logic.

    Args:
        config: Retry configuration.
        callbacks: Optional callback configuration.
        cancel_event: Optional event interrupting the backoff waits.

    Example:
        ```pycon
        >>> import httpx
        >>> from w3r.assembler import PreparedRequest
        >>> from w3r.retry import RetryConfig, RetryExecutor
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))
        >>> executor = RetryExecutor(RetryConfig(max_retries=2))
        >>> with httpx.Client(transport=transport) as client:
        ...     record = executor.execute(
        ...         client, PreparedRequest(method="GET", url="https://api.example.com")
        ...     )
        ...
        >>> record.status_code, record.text, record.attempts
        (200, 'ok', 1)

        ```
    """

    def __init__(
        self,
        config: RetryConfig,
        callbacks: CallbackConfig | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.config = config
        self.strategy = RetryStrategy(
            retry_delay=config.retry_delay, max_wait_time=config.max_wait_time
        )
        self.decider = RetryDecider(max_retries=config.max_retries)
        self.callbacks = CallbackManager(callbacks)
        self.cancel_event = cancel_event

    def execute(self, client: httpx.Client, prepared: PreparedRequest) -> ResponseRecord:
        """Run the attempt loop.

        Args:
            client: The client shared by every attempt.
            prepared: The request, re-materialized for each attempt.

        Returns:
            The terminal response.

        Raises:
            RequestFailedError: If every attempt failed with a transport
                error.
            RequestCancelledError: If a backoff wait was cancelled.
            ResponseReadError: If the terminal response body cannot be read.
        """
        url, method = prepared.url, prepared.method
        max_retries = self.config.max_retries
        start_time = time.perf_counter()

        for attempt in range(self.config.max_attempts):
            self.callbacks.on_request(url, method, attempt, max_retries)
            attempt_start = time.perf_counter()
            try:
                response = client.send(prepared.build(client), stream=True)
            except httpx.RequestError as exc:
                should_retry, reason = self.decider.should_retry_exception(exc, attempt)
                log_structured(
                    logger,
                    logging.DEBUG,
                    f"{method} request to {url} raised {type(exc).__name__} "
                    f"(attempt {attempt + 1}/{max_retries + 1}): {reason}",
                    attempt=attempt + 1,
                    error=str(exc),
                    retry=should_retry,
                )
                if not should_retry:
                    self.callbacks.on_failure(url, method, attempt, max_retries, exc, start_time)
                    raise RequestFailedError(
                        str(exc) or type(exc).__name__,
                        method=method,
                        url=url,
                        attempts=attempt + 1,
                    ) from exc
                self._backoff(url, method, attempt, error=exc, status_code=None)
                continue

            response_time = time.perf_counter() - attempt_start
            should_retry, reason = self.decider.should_retry_response(
                response.status_code, attempt
            )
            log_structured(
                logger,
                logging.DEBUG,
                f"{method} request to {url} returned {response.status_code} "
                f"(attempt {attempt + 1}/{max_retries + 1}): {reason}",
                attempt=attempt + 1,
                status_code=response.status_code,
                retry=should_retry,
            )
            if should_retry:
                response.close()
                self._backoff(url, method, attempt, error=None, status_code=response.status_code)
                continue

            record = self._read_response(response, attempt, response_time, start_time)
            self.callbacks.on_success(
                url, method, attempt, max_retries, record.status_code, start_time
            )
            return record

        msg = f"{method} request to {url} made no attempt"  # pragma: no cover
        raise RuntimeError(msg)  # pragma: no cover

    def _backoff(
        self,
        url: str,
        method: str,
        attempt: int,
        *,
        error: Exception | None,
        status_code: int | None,
    ) -> None:
        sleep_time = self.strategy.calculate_delay(attempt)
        self.callbacks.on_retry(
            url,
            method,
            attempt,
            self.config.max_retries,
            sleep_time,
            error,
            status_code,
        )
        log_structured(
            logger,
            logging.DEBUG,
            f"Retrying {method} request to {url} in {sleep_time:.2f}s",
            attempt=attempt + 2,
            wait_time=sleep_time,
            status_code=status_code,
        )
        wait(sleep_time, self.cancel_event)

    def _read_response(
        self,
        response: httpx.Response,
        attempt: int,
        response_time: float,
        start_time: float,
    ) -> ResponseRecord:
        body_start = time.perf_counter()
        try:
            content = response.read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            msg = f"Failed to read the response body: {exc}"
            raise ResponseReadError(msg) from exc
        finally:
            response.close()
        body_read_time = time.perf_counter() - body_start
        return ResponseRecord(
            status_code=response.status_code,
            http_version=response.http_version,
            reason_phrase=response.reason_phrase,
            headers=response.headers,
            content=content,
            response_time=response_time,
            body_read_time=body_read_time,
            total_time=time.perf_counter() - start_time,
            attempts=attempt + 1,
            encoding=response.encoding or "utf-8",
        )
