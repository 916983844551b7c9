# === NAVMAP v1 ===
# {
#   "module": "Quest.response",
#   "purpose": "Response inspection, decoding and chain termination",
#   "sections": [
#     {"id": "content-type-aliases", "name": "CONTENT_TYPE_ALIASES", "anchor": "const-content-type-aliases", "kind": "constant"},
#     {"id": "slot", "name": "Slot", "anchor": "class-slot", "kind": "class"},
#     {"id": "pending-response", "name": "PendingResponse", "anchor": "class-pending-response", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Response side of a chain.

A :class:`PendingResponse` wraps the streamed :class:`httpx.Response` produced
by dispatch, or stands in for it when dispatch was skipped. It has no failure
slot of its own: every step reads and writes the originating request's slot,
so a failure recorded anywhere in the chain is what ``done()`` returns.

The underlying stream is released through a :class:`weakref.finalize` handle.
A finalizer runs at most once, which gives exactly-once close whether the
chain ends in ``done()``, ``next()``, a draining getter, an explicit
``close()``, a ``with`` block, or the response simply being dropped.
"""

from __future__ import annotations

import json
import logging
import weakref
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, BinaryIO, Callable, Dict, Generic, Optional, TypeVar, Union

import httpx
from pydantic import ValidationError

from .errors import QuestError, ResponseError, StepFailure
from .steps import response_step

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from .capabilities import ChainFactory, ContinuationStarter, RequestBuilder

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

CONTENT_TYPE_ALIASES = MappingProxyType(
    {
        "html": "text/html",
        "json": "application/json",
        "xml": "application/xml",
        "text": "text/plain",
        "urlencoded": "application/x-www-form-urlencoded",
        "form": "application/x-www-form-urlencoded",
        "form-data": "application/x-www-form-urlencoded",
    }
)


class Slot(Generic[T]):
    """Output location filled by response getters.

    Example:
        >>> body = Slot()
        >>> body.set("hello")
        >>> body.value
        'hello'
    """

    def __init__(self, default: Optional[T] = None) -> None:
        self.value: Optional[T] = default
        self.is_set = False

    def set(self, value: T) -> None:
        self.value = value
        self.is_set = True

    def __repr__(self) -> str:
        return f"Slot({self.value!r})"


Into = Union[Slot, Callable[[Any], None]]


def _deliver(into: Into, value: Any) -> None:
    if isinstance(into, Slot):
        into.set(value)
    elif callable(into):
        into(value)
    else:
        raise TypeError(f"expected a Slot or callable, got {type(into).__name__!r}")


class PendingResponse:
    """The outcome of dispatching a :class:`~Quest.request.PendingRequest`."""

    def __init__(
        self,
        request: "RequestBuilder",
        raw: Optional[httpx.Response] = None,
        *,
        factory: Optional["ChainFactory"] = None,
    ) -> None:
        self._request = request
        self._factory = factory if factory is not None else request.factory
        self.raw = raw
        self._closer = weakref.finalize(self, raw.close) if raw is not None else None
        self._body: Optional[bytes] = None

    # ------------------------------------------------------------------
    # Failure slot (shared with the request)
    # ------------------------------------------------------------------

    @property
    def request(self) -> "RequestBuilder":
        return self._request

    @property
    def error(self) -> Optional[QuestError]:
        return self._request.error

    def fail(self, error: QuestError) -> None:
        self._request.fail(error)

    def record_failure(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.fail(
            ResponseError(
                message,
                request_info=self._request.snapshot(),
                response_info=self.snapshot(),
                cause=cause,
            )
        )

    # ------------------------------------------------------------------
    # Raw accessors
    # ------------------------------------------------------------------

    @property
    def status_code(self) -> int:
        return self.raw.status_code if self.raw is not None else 0

    @property
    def headers(self) -> httpx.Headers:
        return self.raw.headers if self.raw is not None else httpx.Headers()

    @property
    def closed(self) -> bool:
        return self._closer is None or not self._closer.alive

    def close(self) -> None:
        """Release the underlying stream; later calls are no-ops."""

        if self._closer is not None:
            self._closer()

    def _read(self) -> bytes:
        """Drain the stream once, keeping the bytes for snapshots."""

        if self._body is None:
            self._body = self.raw.read() if self.raw is not None else b""
        return self._body

    def _text(self, content: bytes) -> str:
        encoding = self.raw.encoding if self.raw is not None else None
        return content.decode(encoding or "utf-8", errors="replace")

    def snapshot(self) -> Dict[str, Any]:
        """Debug view: status, headers, body text and declared content length."""

        body = ""
        try:
            body = self._text(self._read())
        except Exception:
            if self._body is not None:
                body = self._text(self._body)
        try:
            content_length = int(self.headers.get("content-length", -1))
        except ValueError:
            content_length = -1
        header: Dict[str, list] = {}
        for key, value in self.headers.multi_items():
            header.setdefault(key, []).append(value)
        return {
            "statusCode": self.status_code,
            "header": header,
            "body": body,
            "contentLength": content_length,
        }

    # ------------------------------------------------------------------
    # Expectations
    # ------------------------------------------------------------------

    @response_step
    def expect_success(self) -> "PendingResponse":
        actual = self.status_code
        if actual < 200 or actual >= 300:
            raise StepFailure(
                f"Invalid StatusCode. Expected to be in 200 range, got '{actual}'"
            )
        return self

    @response_step
    def expect_status(self, code: int) -> "PendingResponse":
        actual = self.status_code
        if actual != code:
            raise StepFailure(f"Invalid StatusCode. Expected to be '{code}', got '{actual}'")
        return self

    @response_step
    def expect_header(self, key: str, value: str) -> "PendingResponse":
        """Require the header at ``key`` to contain ``value`` as a substring."""

        actual = self.headers.get(key, "")
        if value not in actual:
            raise StepFailure(
                f"Invalid Header. Expected {key!r} header to be {value!r}, got {actual!r}"
            )
        return self

    def expect_type(self, value: str) -> "PendingResponse":
        """Require a Content-Type, accepting the short aliases in CONTENT_TYPE_ALIASES."""

        return self.expect_header("Content-Type", CONTENT_TYPE_ALIASES.get(value, value))

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    @response_step
    def get_header(self, key: str, into: Into) -> "PendingResponse":
        _deliver(into, self.headers.get(key, ""))
        return self

    @response_step
    def get_body(self, into: Into) -> "PendingResponse":
        try:
            content = self._read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise StepFailure(f"error reading response body: {exc}") from exc
        finally:
            self.close()
        _deliver(into, self._text(content))
        return self

    @response_step
    def get_json(self, into: Into, model: Any = None) -> "PendingResponse":
        """Decode the body as JSON, optionally validating it with a pydantic model."""

        try:
            content = self._read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise StepFailure(f"error reading response body: {exc}") from exc
        finally:
            self.close()
        try:
            value = json.loads(content)
            if model is not None:
                value = model.model_validate(value)
        except ValidationError as exc:
            raise StepFailure(f"response does not match {model.__name__}: {exc}") from exc
        except ValueError as exc:
            raise StepFailure(f"error decoding json body: {exc}") from exc
        _deliver(into, value)
        return self

    @response_step
    def proxy(self, sink: BinaryIO) -> "PendingResponse":
        """Copy the body into ``sink`` chunk by chunk."""

        if self.raw is None:
            return self
        try:
            for chunk in self.raw.iter_bytes():
                sink.write(chunk)
        except (httpx.HTTPError, httpx.StreamError, OSError) as exc:
            raise StepFailure(f"error copying response body: {exc}") from exc
        finally:
            self.close()
        return self

    @response_step
    def log_json(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> "PendingResponse":
        """Log the body as indented JSON; the body stays readable for later steps."""

        try:
            content = self._read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise StepFailure(f"error reading response body: {exc}") from exc
        try:
            rendered = json.dumps(json.loads(content), indent=2)
        except ValueError:
            rendered = self._text(content)
        (logger or LOGGER).log(level, "Response JSON:\n%s", rendered)
        return self

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def next(self) -> "ContinuationStarter":
        """Close this response and hand over its failure to the next request."""

        self.close()
        return self._factory.new_continuation(self.error)

    def done(self) -> Optional[QuestError]:
        """Close this response and return the first failure of the chain."""

        self.close()
        return self.error

    def raise_for_error(self) -> None:
        error = self.done()
        if error is not None:
            raise error

    def __enter__(self) -> "PendingResponse":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<PendingResponse status={self.status_code} failed={self.error is not None}>"


__all__ = ["PendingResponse", "Slot", "CONTENT_TYPE_ALIASES"]
