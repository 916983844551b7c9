# === NAVMAP v1 ===
# {
#   "module": "Quest.capabilities",
#   "purpose": "Protocols describing each replaceable piece of a request chain",
#   "sections": [
#     {"id": "request-builder", "name": "RequestBuilder", "anchor": "class-request-builder", "kind": "protocol"},
#     {"id": "response-inspector", "name": "ResponseInspector", "anchor": "class-response-inspector", "kind": "protocol"},
#     {"id": "continuation-starter", "name": "ContinuationStarter", "anchor": "class-continuation-starter", "kind": "protocol"},
#     {"id": "chain-factory", "name": "ChainFactory", "anchor": "class-chain-factory", "kind": "protocol"}
#   ]
# }
# === /NAVMAP ===

"""Capabilities a request chain is built from.

Each piece of the chain is addressed through one of these protocols rather
than a concrete class. The defaults live in :mod:`Quest.request`,
:mod:`Quest.response`, :mod:`Quest.continuation` and :mod:`Quest.factory`; the
wrappers in :mod:`Quest.delegation` let a consumer embed a default and
override only the operations it cares about.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, BinaryIO, Dict, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    import httpx

    from .cancellation import CancellationToken
    from .errors import QuestError
    from .multipart import MultipartForm


@runtime_checkable
class RequestBuilder(Protocol):
    """A request that has not been sent yet (or failed before sending)."""

    @property
    def error(self) -> Optional["QuestError"]: ...

    @property
    def factory(self) -> "ChainFactory": ...

    def fail(self, error: "QuestError") -> None: ...

    def record_failure(self, message: str, cause: Optional[BaseException] = None) -> None: ...

    def snapshot(self) -> Dict[str, Any]: ...

    def header(self, key: str, value: str) -> "RequestBuilder": ...

    def basic_auth(self, username: str, password: str) -> "RequestBuilder": ...

    def query_param(self, key: str, value: str) -> "RequestBuilder": ...

    def param(self, key: str, value: str) -> "RequestBuilder": ...

    def body(self, content: bytes) -> "RequestBuilder": ...

    def json_body(self, value: Any) -> "RequestBuilder": ...

    def multipart_body(self, form: "MultipartForm") -> "RequestBuilder": ...

    def send(self, origin: Optional["RequestBuilder"] = None) -> "ResponseInspector": ...


@runtime_checkable
class ResponseInspector(Protocol):
    """The outcome of a dispatch, inspected and decoded step by step."""

    @property
    def error(self) -> Optional["QuestError"]: ...

    @property
    def request(self) -> RequestBuilder: ...

    def fail(self, error: "QuestError") -> None: ...

    def record_failure(self, message: str, cause: Optional[BaseException] = None) -> None: ...

    def snapshot(self) -> Dict[str, Any]: ...

    def expect_success(self) -> "ResponseInspector": ...

    def expect_status(self, code: int) -> "ResponseInspector": ...

    def expect_header(self, key: str, value: str) -> "ResponseInspector": ...

    def expect_type(self, value: str) -> "ResponseInspector": ...

    def get_header(self, key: str, into: Any) -> "ResponseInspector": ...

    def get_body(self, into: Any) -> "ResponseInspector": ...

    def get_json(self, into: Any, model: Any = None) -> "ResponseInspector": ...

    def proxy(self, sink: BinaryIO) -> "ResponseInspector": ...

    def next(self) -> "ContinuationStarter": ...

    def done(self) -> Optional["QuestError"]: ...

    def close(self) -> None: ...


@runtime_checkable
class ContinuationStarter(Protocol):
    """Starts the next request of a chain, inheriting the previous failure."""

    @property
    def error(self) -> Optional["QuestError"]: ...

    def new(self, method: str, url: str) -> RequestBuilder: ...

    def get(self, url: str) -> RequestBuilder: ...

    def post(self, url: str) -> RequestBuilder: ...

    def put(self, url: str) -> RequestBuilder: ...

    def delete(self, url: str) -> RequestBuilder: ...


@runtime_checkable
class ChainFactory(Protocol):
    """Builds every object of a chain.

    ``factory`` names the outermost factory when one factory wraps another;
    implementations must hand it to the objects they build so later links of
    the chain come back through it.
    """

    def new_request(
        self,
        method: str,
        url: str,
        *,
        cancellation: Optional["CancellationToken"] = None,
        factory: Optional["ChainFactory"] = None,
    ) -> RequestBuilder: ...

    def new_response(
        self,
        request: RequestBuilder,
        raw: Optional["httpx.Response"],
        *,
        factory: Optional["ChainFactory"] = None,
    ) -> ResponseInspector: ...

    def new_continuation(
        self,
        error: Optional["QuestError"],
        *,
        factory: Optional["ChainFactory"] = None,
    ) -> ContinuationStarter: ...


__all__ = [
    "RequestBuilder",
    "ResponseInspector",
    "ContinuationStarter",
    "ChainFactory",
]
