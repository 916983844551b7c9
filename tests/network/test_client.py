"""Tests for the shared HTTPX client.

Tests cover:
- Lazy singleton initialization
- Settings applied to built clients
- PID-aware rebinding
- Thread safety
- Client lifecycle (configure, close, reset)
"""

import threading
from unittest.mock import patch

import httpx
import pytest
from pydantic import ValidationError

from Quest.network.client import (
    close_http_client,
    configure_http_client,
    get_http_client,
    reset_http_client,
)
from Quest.network.transport import HttpxTransport
from Quest.settings import QuestSettings


class TestClientSingleton:
    """Test lazy singleton initialization and reuse."""

    def setup_method(self):
        """Reset client state before each test."""
        reset_http_client()

    def teardown_method(self):
        """Clean up after each test."""
        close_http_client()

    def test_lazy_initialization(self):
        """First call creates client; subsequent calls return same instance."""
        client1 = get_http_client()
        client2 = get_http_client()
        assert isinstance(client1, httpx.Client)
        assert client1 is client2

    def test_close_releases_client(self):
        """close_http_client() releases the singleton."""
        client1 = get_http_client()
        close_http_client()
        assert client1.is_closed
        assert get_http_client() is not client1

    def test_close_is_idempotent(self):
        get_http_client()
        close_http_client()
        close_http_client()

    def test_pid_change_triggers_rebuild(self):
        """PID change triggers client rebuild."""
        from Quest.network import client as client_module

        client1 = get_http_client()
        pid1 = client_module._CLIENT_PID

        with patch("Quest.network.client.os.getpid") as mock_getpid:
            mock_getpid.return_value = pid1 + 9999
            client2 = get_http_client()
            assert client1 is not client2
            assert client_module._CLIENT_PID == pid1 + 9999


class TestClientConfiguration:
    """Settings and explicit clients."""

    def setup_method(self):
        reset_http_client()

    def teardown_method(self):
        reset_http_client()

    def test_default_timeouts(self):
        timeout = get_http_client().timeout
        assert timeout.connect == 5.0
        assert timeout.read == 30.0

    def test_follows_redirects_by_default(self):
        assert get_http_client().follow_redirects is True

    def test_settings_rebuild_client(self):
        client1 = get_http_client()
        configure_http_client(
            settings=QuestSettings(timeout_sec=3.0, follow_redirects=False, base_url="https://api.example.com")
        )
        client2 = get_http_client()
        assert client2 is not client1
        assert client2.timeout.read == 3.0
        assert client2.follow_redirects is False
        assert client2.base_url == httpx.URL("https://api.example.com/")

    def test_reset_restores_default_settings(self):
        configure_http_client(settings=QuestSettings(timeout_sec=3.0))
        reset_http_client()
        assert get_http_client().timeout.read == 30.0

    def test_installed_client_is_used_by_transport(self):
        handler_calls = []

        def handler(request):
            handler_calls.append(request.url.path)
            return httpx.Response(204)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        configure_http_client(client=client)
        assert get_http_client() is client

        response = HttpxTransport().dispatch("GET", httpx.URL("https://api.example.com/ping"), {}, b"")
        response.close()
        assert response.status_code == 204
        assert handler_calls == ["/ping"]

    def test_replacing_client_closes_previous(self):
        previous = get_http_client()
        configure_http_client(client=httpx.Client())
        assert previous.is_closed

    def test_invalid_base_url_rejected(self):
        with pytest.raises(ValidationError):
            QuestSettings(base_url="http://example.com:notaport")


class TestThreadSafety:
    """Test thread-safe client access."""

    def setup_method(self):
        reset_http_client()

    def teardown_method(self):
        close_http_client()

    def test_concurrent_get_returns_same_client(self):
        """Multiple threads getting client get same instance."""
        clients = []
        lock = threading.Lock()

        def get_client():
            client = get_http_client()
            with lock:
                clients.append(client)

        threads = [threading.Thread(target=get_client) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(clients) == 8
        assert all(c is clients[0] for c in clients)

    def test_concurrent_close_doesnt_crash(self):
        """Multiple threads closing client doesn't crash."""
        get_http_client()

        threads = [threading.Thread(target=close_http_client) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert get_http_client() is not None
