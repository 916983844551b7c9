"""Network collaborators: shared HTTPX client, transport adapter and tracing."""

from .client import (
    close_http_client,
    configure_http_client,
    get_http_client,
    reset_http_client,
)
from .transport import HttpxTransport, Transport

__all__ = [
    "get_http_client",
    "configure_http_client",
    "close_http_client",
    "reset_http_client",
    "HttpxTransport",
    "Transport",
]
