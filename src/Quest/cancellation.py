"""Cooperative cancellation token threaded through request construction.

Request chains never interrupt themselves. A token handed to a factory is
stored on the request and consulted by the transport adapter right before the
round trip, which reports a transport failure when cancellation was requested.
"""

from __future__ import annotations

import threading


class CancellationToken:
    """Thread-safe flag that another thread can flip to abandon a dispatch.

    Examples:
        >>> token = CancellationToken()
        >>> token.is_cancelled()
        False
        >>> token.cancel()
        >>> token.is_cancelled()
        True
    """

    def __init__(self) -> None:
        self._is_cancelled = threading.Event()

    def cancel(self) -> None:
        """Signal that cancellation has been requested."""
        self._is_cancelled.set()

    def is_cancelled(self) -> bool:
        return self._is_cancelled.is_set()

    def reset(self) -> None:
        """Return the token to its initial state (test helper)."""
        self._is_cancelled.clear()


__all__ = ["CancellationToken"]
