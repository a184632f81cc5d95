from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import Generator

TEST_URL = "https://api.example.com/data"


@dataclass
class ScriptedHandler:
    """MockTransport handler replaying a script of outcomes.

    Each outcome is an ``httpx.Response`` or an exception instance; the
    last outcome is repeated once the script is exhausted. Every request
    received is recorded.
    """

    outcomes: list[httpx.Response | Exception]
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(
            outcome.status_code,
            headers=outcome.headers,
            content=outcome.content,
            extensions=outcome.extensions,
        )

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def _no_proxy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep environment proxies away from httpx clients built in tests."""
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def test_url() -> str:
    return TEST_URL


@pytest.fixture
def scripted() -> type[ScriptedHandler]:
    """Return the ScriptedHandler class, to build handlers in tests."""
    return ScriptedHandler


@pytest.fixture
def ok_handler() -> ScriptedHandler:
    """Handler always answering 200 with a small JSON body."""
    return ScriptedHandler([httpx.Response(200, json={"status": "ok"})])


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks."""
    return Mock()


@pytest.fixture(autouse=True)
def _restore_w3r_logger() -> Generator[None, None, None]:
    """Undo handler and level changes made by ``configure_logging``."""
    logger = logging.getLogger("w3r")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
