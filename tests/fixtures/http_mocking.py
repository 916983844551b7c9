# === NAVMAP v1 ===
# {
#   "module": "tests.fixtures.http_mocking",
#   "purpose": "HTTP mocking fixtures for hermetic request-chain testing",
#   "sections": [
#     {"id": "mock-response-builder", "name": "MockResponseBuilder", "anchor": "class-mock-response-builder", "kind": "class"},
#     {"id": "tracking-stream", "name": "TrackingStream", "anchor": "class-tracking-stream", "kind": "class"},
#     {"id": "mock-server", "name": "MockServer", "anchor": "class-mock-server", "kind": "class"},
#     {"id": "mock-server-fixture", "name": "mock_server", "anchor": "fixture-mock-server", "kind": "fixture"}
#   ]
# }
# === /NAVMAP ===

"""
HTTP mocking fixtures for hermetic request-chain testing.

Provides an HTTPX MockTransport-backed server stand-in that records every
request it receives, plus a response builder with a fluent API. All responses
are built fresh per request so streamed bodies are never shared.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Generator, Iterator, Optional

import httpx
import pytest

from Quest.factory import RequestFactory
from Quest.network.transport import HttpxTransport
from Quest.settings import QuestSettings
from Quest.testing import RecordingHandler


class MockResponseBuilder:
    """Builder for constructing mock HTTP responses with fluent API."""

    def __init__(self, status_code: int = 200, content: bytes = b""):
        self.status_code = status_code
        self.content = content
        self.headers: Dict[str, str] = {}

    def with_status(self, code: int) -> MockResponseBuilder:
        self.status_code = code
        return self

    def with_content(self, content: bytes | str) -> MockResponseBuilder:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.content = content
        return self

    def with_json(self, data: Any, content_type: str = "application/json") -> MockResponseBuilder:
        """Set response content as JSON."""
        self.content = json.dumps(data).encode("utf-8")
        self.headers["content-type"] = content_type
        return self

    def with_header(self, name: str, value: str) -> MockResponseBuilder:
        self.headers[name] = value
        return self

    def build(self) -> httpx.Response:
        return httpx.Response(
            status_code=self.status_code,
            content=self.content,
            headers=self.headers,
        )


class TrackingStream(httpx.SyncByteStream):
    """Response body stream that counts how often it is closed."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.close_count = 0

    def __iter__(self) -> Iterator[bytes]:
        yield self.data

    def close(self) -> None:
        self.close_count += 1


class MockServer:
    """In-process stand-in for a remote endpoint.

    ``respond`` installs a builder used for every subsequent request;
    ``respond_using`` installs an arbitrary handler.
    """

    def __init__(self, settings: Optional[QuestSettings] = None) -> None:
        self._responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(200)
        self.handler = RecordingHandler(lambda request: self._responder(request))
        self.client = httpx.Client(transport=httpx.MockTransport(self.handler))
        self.transport = HttpxTransport(self.client)
        self.factory = RequestFactory(settings, transport=self.transport)

    def respond(self, builder: Callable[[], MockResponseBuilder]) -> None:
        self._responder = lambda request: builder().build()

    def respond_with(
        self,
        status_code: int = 200,
        *,
        content: bytes | str = b"",
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        def make() -> MockResponseBuilder:
            builder = MockResponseBuilder(status_code).with_content(content)
            if json_body is not None:
                builder.with_json(json_body)
            for name, value in (headers or {}).items():
                builder.with_header(name, value)
            return builder

        self.respond(make)

    def respond_using(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self._responder = responder

    @property
    def requests(self) -> list[httpx.Request]:
        return self.handler.requests

    @property
    def calls(self) -> int:
        return self.handler.calls

    def close(self) -> None:
        self.client.close()


@pytest.fixture
def mock_server() -> Generator[MockServer, None, None]:
    """Provide a recording MockTransport server and a factory bound to it.

    Example:
        def test_chain(mock_server):
            mock_server.respond_with(200, json_body={"id": 1})
            err = mock_server.factory.get("https://api.example.com/users").send().done()
            assert err is None
    """

    server = MockServer()
    yield server
    server.close()
