"""OpenTelemetry side channel for request dispatch.

Spans only observe: they never change whether a chain succeeds. The span is
opened around the transport call, tagged with the request target, and its
context is injected into the outgoing headers so downstream services can join
the trace.
"""

from __future__ import annotations

import contextlib
from typing import Iterator, MutableMapping, Optional

import httpx
from opentelemetry import propagate, trace
from opentelemetry.trace import SpanKind, Status, StatusCode

SPAN_NAME = "Quest: request"


def _tracer(tracer: Optional[trace.Tracer]) -> trace.Tracer:
    return tracer if tracer is not None else trace.get_tracer("Quest")


@contextlib.contextmanager
def request_span(
    method: str,
    url: httpx.URL,
    headers: MutableMapping[str, str],
    tracer: Optional[trace.Tracer] = None,
) -> Iterator[trace.Span]:
    """Open a client span for one dispatch and inject its context into ``headers``."""

    with _tracer(tracer).start_as_current_span(
        SPAN_NAME,
        kind=SpanKind.CLIENT,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        span.set_attribute("http.method", method)
        span.set_attribute("http.host", url.host or "")
        span.set_attribute("http.path", url.path)
        span.set_attribute("http.url", f"{url.scheme}://{url.host}{url.path}")
        carrier: dict = {}
        propagate.inject(carrier)
        headers.update(carrier)
        yield span


def finish_span(
    span: trace.Span,
    status_code: Optional[int] = None,
    failure: Optional[BaseException] = None,
) -> None:
    """Record the dispatch outcome on ``span`` before it ends."""

    if status_code is not None:
        span.set_attribute("http.status_code", status_code)
    if failure is not None:
        span.record_exception(failure)
        span.set_status(Status(StatusCode.ERROR, str(failure)))


__all__ = ["request_span", "finish_span", "SPAN_NAME"]
