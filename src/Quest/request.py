# === NAVMAP v1 ===
# {
#   "module": "Quest.request",
#   "purpose": "Fluent request builder with first-failure short-circuiting",
#   "sections": [
#     {"id": "methods", "name": "METHODS", "anchor": "const-methods", "kind": "constant"},
#     {"id": "pending-request", "name": "PendingRequest", "anchor": "class-pending-request", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Request side of a chain.

:class:`PendingRequest` accumulates the pieces of one outbound call. Every
builder operation is a :func:`~Quest.steps.request_step`: once a failure is
recorded the request is frozen and each later operation hands back the same
object untouched, so callers can write the whole chain without checking
anything until ``done()``.

Example:
    >>> from Quest import get
    >>> err = (
    ...     get("https://api.example.com/users/:id")
    ...     .param("id", "42")
    ...     .query_param("expand", "teams")
    ...     .send()
    ...     .expect_success()
    ...     .done()
    ... )  # doctest: +SKIP
"""

from __future__ import annotations

import base64
import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

import httpx
from opentelemetry import trace

from .cancellation import CancellationToken
from .errors import QuestError, RequestError, StepFailure, TransportFailure
from .multipart import MultipartForm
from .network import tracing
from .network.transport import TimeoutTypes, Transport
from .steps import request_step

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from .capabilities import ChainFactory, RequestBuilder, ResponseInspector

LOGGER = logging.getLogger(__name__)

METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


def _substitute_path_token(url: httpx.URL, token: str, value: str) -> Optional[str]:
    """Replace the first ``token`` inside the path portion of ``url``.

    Returns ``None`` when the path does not contain the token.
    """

    text = str(url)
    if url.is_relative_url:
        start = 0
    else:
        start = text.find("/", len(url.scheme) + 3)
        if start < 0:
            return None
    end = len(text)
    for marker in ("?", "#"):
        position = text.find(marker, start)
        if position >= 0:
            end = min(end, position)
    index = text.find(token, start, end)
    if index < 0:
        return None
    return text[:index] + value + text[index + len(token) :]


class PendingRequest:
    """A not-yet-sent call that freezes on its first failure."""

    def __init__(
        self,
        method: str,
        url: Union[str, httpx.URL],
        *,
        factory: "ChainFactory",
        transport: Transport,
        headers: Optional[Mapping[str, str]] = None,
        cancellation: Optional[CancellationToken] = None,
        tracer: Optional[trace.Tracer] = None,
        traced: bool = False,
    ) -> None:
        self.method = method.upper()
        self.url: Optional[httpx.URL] = None
        self.headers = httpx.Headers(headers or {})
        self.content = b""
        self.cancellation = cancellation
        self.transport = transport
        self.request_timeout: TimeoutTypes = None
        self.tracer = tracer
        self.tracing = traced
        self._factory = factory
        self._error: Optional[QuestError] = None

        if self.method not in METHODS:
            self.record_failure(f"unsupported http method {method!r}")
            return
        try:
            self.url = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as exc:
            self.record_failure(f"error parsing url {str(url)!r}: {exc}", cause=exc)

    # ------------------------------------------------------------------
    # Failure slot
    # ------------------------------------------------------------------

    @property
    def error(self) -> Optional[QuestError]:
        return self._error

    @property
    def factory(self) -> "ChainFactory":
        return self._factory

    def fail(self, error: QuestError) -> None:
        """Record ``error`` unless an earlier failure is already recorded."""

        if self._error is None:
            self._error = error

    def record_failure(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.fail(RequestError(message, request_info=self.snapshot(), cause=cause))

    def snapshot(self) -> Dict[str, Any]:
        """Debug view of the request: url, method, body text and headers."""

        try:
            data = self.content.decode("utf-8", errors="replace")
        except Exception:
            data = ""
        return {
            "url": str(self.url) if self.url is not None else None,
            "method": self.method,
            "data": data,
            "headers": dict(self.headers.items()),
        }

    # ------------------------------------------------------------------
    # Builder operations
    # ------------------------------------------------------------------

    @request_step
    def header(self, key: str, value: str) -> "PendingRequest":
        """Set ``key`` to ``value``; both must be plain ASCII."""

        value = str(value)
        try:
            key.encode("ascii")
            value.encode("ascii")
        except UnicodeEncodeError as exc:
            raise StepFailure(f"invalid header {key!r}: {exc}") from exc
        self.headers[key] = value
        return self

    @request_step
    def basic_auth(self, username: str, password: str) -> "PendingRequest":
        credential = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        self.headers["Authorization"] = f"Basic {credential}"
        return self

    @request_step
    def query_param(self, key: str, value: str) -> "PendingRequest":
        """Append ``key=value``; repeated keys keep every value."""

        self.url = self.url.copy_add_param(key, value)
        return self

    @request_step
    def param(self, key: str, value: str) -> "PendingRequest":
        """Replace the first ``:key`` placeholder in the path with ``value``."""

        replaced = _substitute_path_token(self.url, f":{key}", str(value))
        if replaced is None:
            return self
        try:
            self.url = httpx.URL(replaced)
        except httpx.InvalidURL as exc:
            raise StepFailure(f"error parsing url {replaced!r}: {exc}") from exc
        return self

    @request_step
    def body(self, content: Union[bytes, bytearray, str]) -> "PendingRequest":
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.content = bytes(content)
        return self

    @request_step
    def json_body(self, value: Any) -> "PendingRequest":
        try:
            encoded = json.dumps(value, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise StepFailure(f"error encoding json body: {exc}") from exc
        self.headers["Content-Type"] = "application/json"
        self.content = encoded
        return self

    @request_step
    def multipart_body(self, form: MultipartForm) -> "PendingRequest":
        form.close()
        if form.error is not None:
            raise StepFailure(f"invalid multipart form: {form.error}") from form.error
        self.headers["Content-Type"] = form.content_type
        self.content = form.content
        return self

    @request_step
    def timeout(self, seconds: TimeoutTypes) -> "PendingRequest":
        self.request_timeout = seconds
        return self

    @request_step
    def traced(self, tracer: Optional[trace.Tracer] = None) -> "PendingRequest":
        """Wrap dispatch in an OpenTelemetry client span."""

        self.tracing = True
        if tracer is not None:
            self.tracer = tracer
        return self

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def send(self, origin: Optional["RequestBuilder"] = None) -> "ResponseInspector":
        """Dispatch the request; skipped entirely when a failure is recorded.

        ``origin`` is what the response reports as its request and records
        failures through. Wrappers pass themselves so their overrides of
        ``fail`` and ``record_failure`` also see post-dispatch failures.
        """

        origin = origin if origin is not None else self

        if self._error is not None:
            LOGGER.debug(
                "dispatch skipped after earlier failure",
                extra={"method": self.method, "error": self._error.message},
            )
            return self._factory.new_response(origin, None)

        if not self.tracing:
            return self._dispatch(origin, self.headers)

        headers = httpx.Headers(self.headers)
        with tracing.request_span(self.method, self.url, headers, self.tracer) as span:
            response = self._dispatch(origin, headers)
            failure = response.error.cause if response.error is not None else None
            tracing.finish_span(span, response.status_code or None, failure)
        return response

    def _dispatch(self, origin: "RequestBuilder", headers: httpx.Headers) -> "ResponseInspector":
        try:
            raw = self.transport.dispatch(
                self.method,
                self.url,
                headers,
                self.content,
                timeout=self.request_timeout,
                cancellation=self.cancellation,
            )
        except TransportFailure as exc:
            response = self._factory.new_response(origin, exc.response)
            response.record_failure(str(exc), cause=exc)
            return response
        return self._factory.new_response(origin, raw)

    def __repr__(self) -> str:
        state = "failed" if self._error is not None else "pending"
        return f"<PendingRequest {self.method} {self.url} ({state})>"


__all__ = ["PendingRequest", "METHODS"]
