"""Transport adapters performing the actual round trip.

A transport receives the fully assembled pieces of a request and returns a
*streamed* :class:`httpx.Response`; the caller owns closing it. Any failure of
the round trip is reported as :class:`~Quest.errors.TransportFailure` so the
request chain only has one exception type to translate.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Protocol, Union, runtime_checkable

import httpx

from ..cancellation import CancellationToken
from ..errors import TransportFailure
from ..logging_utils import mask_sensitive_data
from .client import get_http_client

LOGGER = logging.getLogger(__name__)

TimeoutTypes = Union[float, httpx.Timeout, None]


@runtime_checkable
class Transport(Protocol):
    def dispatch(
        self,
        method: str,
        url: httpx.URL,
        headers: Mapping[str, str],
        content: bytes,
        *,
        timeout: TimeoutTypes = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> httpx.Response: ...


class HttpxTransport:
    """Dispatch through an ``httpx.Client``.

    Without an explicit client the shared one from
    :func:`Quest.network.client.get_http_client` is looked up on every
    dispatch, so :func:`~Quest.network.client.configure_http_client` takes
    effect for existing factories too.
    """

    def __init__(self, client: Optional[httpx.Client] = None) -> None:
        self._client = client

    @property
    def client(self) -> httpx.Client:
        return self._client if self._client is not None else get_http_client()

    def dispatch(
        self,
        method: str,
        url: httpx.URL,
        headers: Mapping[str, str],
        content: bytes,
        *,
        timeout: TimeoutTypes = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> httpx.Response:
        if cancellation is not None and cancellation.is_cancelled():
            raise TransportFailure(f"{method} {url} cancelled before dispatch")

        client = self.client
        extra = {}
        if timeout is not None:
            extra["timeout"] = timeout
        LOGGER.debug(
            "quest-http-request",
            extra={
                "method": method,
                "url": str(url),
                "headers": mask_sensitive_data(dict(headers)),
                "bytes": len(content),
            },
        )
        try:
            request = client.build_request(
                method,
                url,
                headers=dict(headers),
                content=content or None,
                **extra,
            )
            response = client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise TransportFailure(f"{method} {url} failed: {exc}") from exc

        LOGGER.debug(
            "quest-http-response",
            extra={"method": method, "url": str(url), "status": response.status_code},
        )
        return response


__all__ = ["Transport", "HttpxTransport", "TimeoutTypes"]
