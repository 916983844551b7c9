# === NAVMAP v1 ===
# {
#   "module": "Quest.factory",
#   "purpose": "Default chain factory and module level request constructors",
#   "sections": [
#     {"id": "request-factory", "name": "RequestFactory", "anchor": "class-request-factory", "kind": "class"},
#     {"id": "default-factory", "name": "default_factory", "anchor": "function-default-factory", "kind": "function"},
#     {"id": "constructors", "name": "new/get/post/put/delete", "anchor": "function-new", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Factories building every object of a chain.

:class:`RequestFactory` is the default :class:`~Quest.capabilities.ChainFactory`.
Each method takes an optional ``factory`` naming the outermost factory when
this one is embedded in a :class:`~Quest.delegation.FactoryWrapper`; the
objects it builds remember that outer factory, so a dispatched request's
response and a response's continuation are produced by the consumer's
overrides rather than the defaults.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

import httpx
from opentelemetry import trace

from .cancellation import CancellationToken
from .continuation import Continuation
from .errors import QuestError
from .network.transport import HttpxTransport, Transport
from .request import PendingRequest
from .response import PendingResponse
from .settings import QuestSettings

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from .capabilities import ChainFactory, RequestBuilder


class FactoryShortcuts:
    """Verb shortcuts routed through ``self.new_request``."""

    def new(self, method: str, url: str, *, cancellation: Optional[CancellationToken] = None) -> "RequestBuilder":
        return self.new_request(method, url, cancellation=cancellation)

    def get(self, url: str, **kwargs) -> "RequestBuilder":
        return self.new("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> "RequestBuilder":
        return self.new("POST", url, **kwargs)

    def put(self, url: str, **kwargs) -> "RequestBuilder":
        return self.new("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs) -> "RequestBuilder":
        return self.new("DELETE", url, **kwargs)


class RequestFactory(FactoryShortcuts):
    """Build requests with shared defaults, transport and tracer."""

    def __init__(
        self,
        settings: Optional[QuestSettings] = None,
        *,
        transport: Optional[Transport] = None,
        tracer: Optional[trace.Tracer] = None,
    ) -> None:
        self.settings = settings or QuestSettings()
        self.transport = transport if transport is not None else HttpxTransport()
        self.tracer = tracer

    def new_request(
        self,
        method: str,
        url: str,
        *,
        cancellation: Optional[CancellationToken] = None,
        factory: Optional["ChainFactory"] = None,
    ) -> "RequestBuilder":
        return PendingRequest(
            method,
            url,
            factory=factory if factory is not None else self,
            transport=self.transport,
            headers=self.settings.default_headers(),
            cancellation=cancellation,
            tracer=self.tracer,
            traced=self.settings.trace_requests,
        )

    def new_response(
        self,
        request: "RequestBuilder",
        raw: Optional[httpx.Response],
        *,
        factory: Optional["ChainFactory"] = None,
    ) -> PendingResponse:
        return PendingResponse(request, raw, factory=factory)

    def new_continuation(
        self,
        error: Optional[QuestError],
        *,
        factory: Optional["ChainFactory"] = None,
    ) -> Continuation:
        return Continuation(error, factory if factory is not None else self)


_DEFAULT_LOCK = threading.Lock()
_DEFAULT_FACTORY: Optional["ChainFactory"] = None


def default_factory() -> "ChainFactory":
    """Return the process-wide factory used by :func:`new` and friends."""

    global _DEFAULT_FACTORY
    with _DEFAULT_LOCK:
        if _DEFAULT_FACTORY is None:
            _DEFAULT_FACTORY = RequestFactory()
        return _DEFAULT_FACTORY


def set_default_factory(factory: Optional["ChainFactory"]) -> None:
    """Install ``factory`` for the module level constructors (``None`` restores the default)."""

    global _DEFAULT_FACTORY
    with _DEFAULT_LOCK:
        _DEFAULT_FACTORY = factory


def new(method: str, url: str, *, cancellation: Optional[CancellationToken] = None) -> "RequestBuilder":
    """Create a request for ``method`` and ``url`` using the default factory."""

    return default_factory().new_request(method, url, cancellation=cancellation)


def get(url: str, **kwargs) -> "RequestBuilder":
    return new("GET", url, **kwargs)


def post(url: str, **kwargs) -> "RequestBuilder":
    return new("POST", url, **kwargs)


def put(url: str, **kwargs) -> "RequestBuilder":
    return new("PUT", url, **kwargs)


def delete(url: str, **kwargs) -> "RequestBuilder":
    return new("DELETE", url, **kwargs)


__all__ = [
    "FactoryShortcuts",
    "RequestFactory",
    "default_factory",
    "set_default_factory",
    "new",
    "get",
    "post",
    "put",
    "delete",
]
