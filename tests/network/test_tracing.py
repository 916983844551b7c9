"""Tests for OpenTelemetry spans around dispatch."""

from __future__ import annotations

import httpx
import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import SpanKind, StatusCode

from Quest import QuestSettings, ResponseError
from Quest.network.tracing import SPAN_NAME
from tests.fixtures.http_mocking import MockServer

URL = "https://api.example.com/users?page=2"


@pytest.fixture
def exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer(exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider.get_tracer("tests")


class TestTracedDispatch:
    def test_span_records_request(self, mock_server, tracer, exporter):
        mock_server.respond_with(201)
        err = mock_server.factory.post(URL).traced(tracer).send().expect_status(201).done()
        assert err is None

        (span,) = exporter.get_finished_spans()
        assert span.name == SPAN_NAME == "Quest: request"
        assert span.kind == SpanKind.CLIENT
        assert span.attributes["http.method"] == "POST"
        assert span.attributes["http.host"] == "api.example.com"
        assert span.attributes["http.path"] == "/users"
        assert span.attributes["http.url"] == "https://api.example.com/users"
        assert span.attributes["http.status_code"] == 201
        assert span.status.status_code == StatusCode.UNSET

    def test_trace_context_is_propagated(self, mock_server, tracer, exporter):
        request = mock_server.factory.get(URL).traced(tracer)
        request.send().done()
        (span,) = exporter.get_finished_spans()
        traceparent = mock_server.requests[0].headers["traceparent"]
        assert format(span.context.trace_id, "032x") in traceparent
        assert "traceparent" not in request.headers

    def test_transport_failure_marks_span(self, mock_server, tracer, exporter):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        mock_server.respond_using(refuse)
        err = mock_server.factory.get(URL).traced(tracer).send().done()
        assert isinstance(err, ResponseError)

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert "http.status_code" not in span.attributes
        assert any(event.name == "exception" for event in span.events)

    def test_http_error_status_does_not_fail_span(self, mock_server, tracer, exporter):
        mock_server.respond_with(503)
        err = mock_server.factory.get(URL).traced(tracer).send().expect_success().done()
        assert isinstance(err, ResponseError)
        (span,) = exporter.get_finished_spans()
        assert span.attributes["http.status_code"] == 503
        assert span.status.status_code == StatusCode.UNSET

    def test_failed_request_opens_no_span(self, mock_server, tracer, exporter):
        mock_server.factory.get(URL).json_body(object()).traced(tracer).send().done()
        assert exporter.get_finished_spans() == ()

    def test_untraced_by_default(self, mock_server, exporter):
        mock_server.factory.get(URL).send().done()
        assert "traceparent" not in mock_server.requests[0].headers


class TestSettingsOptIn:
    def test_trace_requests_setting(self, tracer, exporter):
        server = MockServer(QuestSettings(trace_requests=True))
        server.factory.tracer = tracer
        try:
            assert server.factory.get(URL).send().done() is None
        finally:
            server.close()
        assert len(exporter.get_finished_spans()) == 1
