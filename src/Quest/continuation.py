"""Chaining one call onto the previous one."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .errors import QuestError

if TYPE_CHECKING:  # pragma: no cover - import cycle guard for type checkers only
    from .cancellation import CancellationToken
    from .capabilities import ChainFactory, RequestBuilder


class Continuation:
    """Starts the next request, carrying over the previous chain's failure.

    A request whose own construction failed keeps that failure; otherwise the
    inherited one (if any) is recorded on it, so ``done()`` at the end of the
    new chain reports the earlier problem even though nothing in the new chain
    failed.
    """

    def __init__(self, error: Optional[QuestError], factory: "ChainFactory") -> None:
        self._error = error
        self.factory = factory

    @property
    def error(self) -> Optional[QuestError]:
        return self._error

    def new(
        self, method: str, url: str, *, cancellation: Optional["CancellationToken"] = None
    ) -> "RequestBuilder":
        request = self.factory.new_request(method, url, cancellation=cancellation)
        if request.error is None and self._error is not None:
            request.fail(self._error)
        return request

    def get(self, url: str, **kwargs) -> "RequestBuilder":
        return self.new("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> "RequestBuilder":
        return self.new("POST", url, **kwargs)

    def put(self, url: str, **kwargs) -> "RequestBuilder":
        return self.new("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs) -> "RequestBuilder":
        return self.new("DELETE", url, **kwargs)


__all__ = ["Continuation"]
