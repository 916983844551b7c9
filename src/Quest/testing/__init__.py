"""Test helpers for running request chains against in-process transports."""

from __future__ import annotations

import contextlib
from typing import Callable, Iterator, List

import httpx

from ..network.client import configure_http_client, reset_http_client


@contextlib.contextmanager
def use_mock_http_client(transport: "httpx.BaseTransport", **client_kwargs) -> Iterator[httpx.Client]:
    """Temporarily install an HTTPX client backed by ``transport``."""

    client = httpx.Client(transport=transport, **client_kwargs)
    configure_http_client(client=client)
    try:
        yield client
    finally:
        reset_http_client()
        client.close()


class RecordingHandler:
    """``httpx.MockTransport`` handler that records requests it serves.

    Example:
        >>> handler = RecordingHandler(lambda request: httpx.Response(204))
        >>> transport = httpx.MockTransport(handler)
    """

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.respond(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


__all__ = ["use_mock_http_client", "RecordingHandler"]
