# === NAVMAP v1 ===
# {
#   "module": "Quest.network.client",
#   "purpose": "Shared HTTPX client lifecycle",
#   "sections": [
#     {"id": "get-http-client", "name": "get_http_client", "anchor": "function-get-http-client", "kind": "function"},
#     {"id": "configure-http-client", "name": "configure_http_client", "anchor": "function-configure-http-client", "kind": "function"},
#     {"id": "close-http-client", "name": "close_http_client", "anchor": "function-close-http-client", "kind": "function"},
#     {"id": "reset-http-client", "name": "reset_http_client", "anchor": "function-reset-http-client", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Shared HTTPX client used by the default transport.

Key design:
- **Lazy initialization**: the client is created on first dispatch, not at
  import time.
- **PID-aware**: a forked child rebuilds the client on first use instead of
  sharing sockets with its parent.
- **Overridable**: tests and embedding applications install their own client
  (for example one backed by ``httpx.MockTransport``) through
  :func:`configure_http_client`.

Pooling, TLS and retry policy are left at HTTPX defaults.

Example:
    >>> from Quest.network import get_http_client, close_http_client
    >>> client = get_http_client()
    >>> close_http_client()  # at process shutdown or test cleanup
"""

from __future__ import annotations

import contextlib
import logging
import os
import threading
from typing import Optional

import httpx

from ..settings import QuestSettings

LOGGER = logging.getLogger(__name__)

_CLIENT_LOCK = threading.RLock()
_HTTP_CLIENT: Optional[httpx.Client] = None
_CLIENT_PID: Optional[int] = None
_SETTINGS = QuestSettings()


def _build_http_client(settings: QuestSettings) -> httpx.Client:
    kwargs = {}
    if settings.base_url:
        kwargs["base_url"] = settings.base_url
    client = httpx.Client(
        timeout=settings.httpx_timeout(),
        follow_redirects=settings.follow_redirects,
        **kwargs,
    )
    LOGGER.debug(
        "HTTPX client created",
        extra={
            "follow_redirects": settings.follow_redirects,
            "base_url": settings.base_url,
        },
    )
    return client


def _close_client_unlocked() -> None:
    global _HTTP_CLIENT, _CLIENT_PID
    if _HTTP_CLIENT is not None:
        with contextlib.suppress(Exception):
            _HTTP_CLIENT.close()
        LOGGER.debug("HTTPX client closed")
    _HTTP_CLIENT = None
    _CLIENT_PID = None


def get_http_client() -> httpx.Client:
    """Return the shared client, creating it on first use."""

    global _HTTP_CLIENT, _CLIENT_PID

    with _CLIENT_LOCK:
        if _HTTP_CLIENT is not None and _CLIENT_PID != os.getpid():
            LOGGER.debug("Process forked; rebuilding HTTPX client")
            _HTTP_CLIENT = None
        if _HTTP_CLIENT is None:
            _HTTP_CLIENT = _build_http_client(_SETTINGS)
            _CLIENT_PID = os.getpid()
        return _HTTP_CLIENT


def configure_http_client(
    client: Optional[httpx.Client] = None,
    *,
    settings: Optional[QuestSettings] = None,
) -> None:
    """Install ``client`` as the shared client and/or change build settings.

    Passing only ``settings`` drops the current client so the next dispatch
    builds a fresh one from them.
    """

    global _HTTP_CLIENT, _CLIENT_PID, _SETTINGS

    with _CLIENT_LOCK:
        if settings is not None:
            _SETTINGS = settings
        if client is None:
            _close_client_unlocked()
            return
        if _HTTP_CLIENT is not client:
            _close_client_unlocked()
        _HTTP_CLIENT = client
        _CLIENT_PID = os.getpid()


def close_http_client() -> None:
    """Close the shared client; safe to call repeatedly."""

    with _CLIENT_LOCK:
        _close_client_unlocked()


def reset_http_client() -> None:
    """Close the shared client and restore default settings (test helper)."""

    global _SETTINGS

    with _CLIENT_LOCK:
        _close_client_unlocked()
        _SETTINGS = QuestSettings()


__all__ = [
    "get_http_client",
    "configure_http_client",
    "close_http_client",
    "reset_http_client",
]
