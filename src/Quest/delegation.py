# === NAVMAP v1 ===
# {
#   "module": "Quest.delegation",
#   "purpose": "Wrappers that embed a default chain object and override selected steps",
#   "sections": [
#     {"id": "delegate", "name": "Delegate", "anchor": "class-delegate", "kind": "class"},
#     {"id": "request-wrapper", "name": "RequestWrapper", "anchor": "class-request-wrapper", "kind": "class"},
#     {"id": "response-wrapper", "name": "ResponseWrapper", "anchor": "class-response-wrapper", "kind": "class"},
#     {"id": "continuation-wrapper", "name": "ContinuationWrapper", "anchor": "class-continuation-wrapper", "kind": "class"},
#     {"id": "factory-wrapper", "name": "FactoryWrapper", "anchor": "class-factory-wrapper", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Extension by composition.

A consumer extends a chain by embedding one of the default objects in a
wrapper and overriding only the steps it cares about. Everything else is
forwarded to the embedded object. Whenever the embedded object returns
itself (which every chain step does), the wrapper returns *itself* instead,
so the caller stays on the consumer's type for the rest of the chain.

Custom steps should be decorated with :func:`~Quest.steps.request_step` or
:func:`~Quest.steps.response_step`; the wrapper exposes the embedded failure
slot through ``error`` / ``record_failure`` so the short-circuit contract
holds for them too.

To make a whole chain use the wrappers, wrap the factory:

Example:
    >>> class TokenRequest(RequestWrapper):
    ...     @request_step
    ...     def bearer(self, token):
    ...         self.header("Authorization", f"Bearer {token}")
    ...
    >>> class TokenFactory(FactoryWrapper):
    ...     def new_request(self, method, url, **kwargs):
    ...         return TokenRequest(super().new_request(method, url, **kwargs))
    ...
    >>> factory = TokenFactory(RequestFactory())
    >>> factory.get("https://api.example.com/me").bearer("s3cr3t")  # doctest: +ELLIPSIS
    <TokenRequest wrapping <PendingRequest GET https://api.example.com/me (pending)>>

Because the wrapping factory threads itself through ``new_response`` and
``new_continuation``, a continuation obtained from ``next()`` starts its
request through ``TokenFactory`` as well.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, BinaryIO, Dict, Optional

from .factory import FactoryShortcuts

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    import httpx

    from .cancellation import CancellationToken
    from .capabilities import (
        ChainFactory,
        ContinuationStarter,
        RequestBuilder,
        ResponseInspector,
    )
    from .errors import QuestError
    from .multipart import MultipartForm


class Delegate:
    """Forward unknown attributes to ``inner``, keeping chains on the wrapper."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner

    def _chain(self, result: Any) -> Any:
        return self if result is self.inner else result

    def __getattr__(self, name: str) -> Any:
        if name == "inner":
            raise AttributeError(name)
        attr = getattr(self.inner, name)
        if not callable(attr) or isinstance(attr, type):
            return attr

        def forward(*args: Any, **kwargs: Any) -> Any:
            return self._chain(attr(*args, **kwargs))

        forward.__name__ = name
        forward.__doc__ = getattr(attr, "__doc__", None)
        return forward

    def __repr__(self) -> str:
        return f"<{type(self).__name__} wrapping {self.inner!r}>"


class RequestWrapper(Delegate):
    """Embed a :class:`~Quest.capabilities.RequestBuilder` and override some steps."""

    inner: "RequestBuilder"

    @property
    def error(self) -> Optional["QuestError"]:
        return self.inner.error

    @property
    def factory(self) -> "ChainFactory":
        return self.inner.factory

    def fail(self, error: "QuestError") -> None:
        self.inner.fail(error)

    def record_failure(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.inner.record_failure(message, cause=cause)

    def snapshot(self) -> Dict[str, Any]:
        return self.inner.snapshot()

    def header(self, key: str, value: str) -> "RequestWrapper":
        return self._chain(self.inner.header(key, value))

    def basic_auth(self, username: str, password: str) -> "RequestWrapper":
        return self._chain(self.inner.basic_auth(username, password))

    def query_param(self, key: str, value: str) -> "RequestWrapper":
        return self._chain(self.inner.query_param(key, value))

    def param(self, key: str, value: str) -> "RequestWrapper":
        return self._chain(self.inner.param(key, value))

    def body(self, content: bytes) -> "RequestWrapper":
        return self._chain(self.inner.body(content))

    def json_body(self, value: Any) -> "RequestWrapper":
        return self._chain(self.inner.json_body(value))

    def multipart_body(self, form: "MultipartForm") -> "RequestWrapper":
        return self._chain(self.inner.multipart_body(form))

    def send(self, origin: Optional["RequestBuilder"] = None) -> "ResponseInspector":
        return self.inner.send(origin if origin is not None else self)


class ResponseWrapper(Delegate):
    """Embed a :class:`~Quest.capabilities.ResponseInspector` and override some steps."""

    inner: "ResponseInspector"

    @property
    def error(self) -> Optional["QuestError"]:
        return self.inner.error

    @property
    def request(self) -> "RequestBuilder":
        return self.inner.request

    def fail(self, error: "QuestError") -> None:
        self.inner.fail(error)

    def record_failure(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.inner.record_failure(message, cause=cause)

    def snapshot(self) -> Dict[str, Any]:
        return self.inner.snapshot()

    def expect_success(self) -> "ResponseWrapper":
        return self._chain(self.inner.expect_success())

    def expect_status(self, code: int) -> "ResponseWrapper":
        return self._chain(self.inner.expect_status(code))

    def expect_header(self, key: str, value: str) -> "ResponseWrapper":
        return self._chain(self.inner.expect_header(key, value))

    def expect_type(self, value: str) -> "ResponseWrapper":
        return self._chain(self.inner.expect_type(value))

    def get_header(self, key: str, into: Any) -> "ResponseWrapper":
        return self._chain(self.inner.get_header(key, into))

    def get_body(self, into: Any) -> "ResponseWrapper":
        return self._chain(self.inner.get_body(into))

    def get_json(self, into: Any, model: Any = None) -> "ResponseWrapper":
        return self._chain(self.inner.get_json(into, model=model))

    def proxy(self, sink: BinaryIO) -> "ResponseWrapper":
        return self._chain(self.inner.proxy(sink))

    def next(self) -> "ContinuationStarter":
        return self.inner.next()

    def done(self) -> Optional["QuestError"]:
        return self.inner.done()

    def close(self) -> None:
        self.inner.close()

    def __enter__(self) -> "ResponseWrapper":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class ContinuationWrapper(Delegate):
    """Embed a :class:`~Quest.capabilities.ContinuationStarter`."""

    inner: "ContinuationStarter"

    @property
    def error(self) -> Optional["QuestError"]:
        return self.inner.error

    def new(self, method: str, url: str, **kwargs: Any) -> "RequestBuilder":
        return self.inner.new(method, url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> "RequestBuilder":
        return self.new("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> "RequestBuilder":
        return self.new("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> "RequestBuilder":
        return self.new("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> "RequestBuilder":
        return self.new("DELETE", url, **kwargs)


class FactoryWrapper(FactoryShortcuts, Delegate):
    """Embed a :class:`~Quest.capabilities.ChainFactory`, threading itself through.

    Overrides call ``super()`` to obtain the default object and wrap it. The
    wrapper passes itself as ``factory`` to the embedded factory unless an
    even more outer wrapper already did, so nesting wrappers works.
    """

    inner: "ChainFactory"

    def new_request(
        self,
        method: str,
        url: str,
        *,
        cancellation: Optional["CancellationToken"] = None,
        factory: Optional["ChainFactory"] = None,
    ) -> "RequestBuilder":
        return self.inner.new_request(
            method,
            url,
            cancellation=cancellation,
            factory=factory if factory is not None else self,
        )

    def new_response(
        self,
        request: "RequestBuilder",
        raw: Optional["httpx.Response"],
        *,
        factory: Optional["ChainFactory"] = None,
    ) -> "ResponseInspector":
        return self.inner.new_response(
            request, raw, factory=factory if factory is not None else self
        )

    def new_continuation(
        self,
        error: Optional["QuestError"],
        *,
        factory: Optional["ChainFactory"] = None,
    ) -> "ContinuationStarter":
        return self.inner.new_continuation(
            error, factory=factory if factory is not None else self
        )


__all__ = [
    "Delegate",
    "RequestWrapper",
    "ResponseWrapper",
    "ContinuationWrapper",
    "FactoryWrapper",
]
