"""Exception hierarchy shared by request builders and response inspectors.

A chain records failures instead of raising them, so the classes here double
as values: ``PendingResponse.done()`` hands back the first recorded
:class:`QuestError`, and callers decide whether to raise it. The two concrete
kinds mirror where the failure happened. :class:`RequestError` covers anything
that went wrong while the request was still being assembled, while
:class:`ResponseError` covers dispatch and everything that inspects the
response afterwards. Both carry debug snapshots so a failure can be diagnosed
from its string form alone.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

__all__ = [
    "QuestError",
    "RequestError",
    "ResponseError",
    "TransportFailure",
    "StepFailure",
    "render_snapshot",
]


def render_snapshot(snapshot: Optional[Mapping[str, Any]]) -> str:
    """Serialise a debug snapshot as indented JSON without ever raising."""

    if snapshot is None:
        return "{}"
    try:
        return json.dumps(dict(snapshot), indent=2, default=str)
    except (TypeError, ValueError):
        # Fall back to a line-per-key dump of whatever can be stringified.
        lines = []
        for key, value in snapshot.items():
            try:
                lines.append(f"  {key}: {value!s}")
            except Exception:
                lines.append(f"  {key}: <unrenderable>")
        return "{\n" + "\n".join(lines) + "\n}"


class QuestError(Exception):
    """Base class for failures recorded by a request chain."""

    kind = "Request"

    def __init__(
        self,
        message: str,
        *,
        request_info: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.request_info = dict(request_info or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def render(self) -> str:
        return (
            f"[Quest]: {self.kind} Error - {self.message}\n\n"
            f"Request Info:\n{render_snapshot(self.request_info)}"
        )

    def __str__(self) -> str:
        return self.render()


class RequestError(QuestError):
    """Raised (recorded) when assembling a request fails before dispatch."""


class ResponseError(QuestError):
    """Recorded when dispatch or a response inspection step fails."""

    kind = "Response"

    def __init__(
        self,
        message: str,
        *,
        request_info: Optional[Mapping[str, Any]] = None,
        response_info: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, request_info=request_info, cause=cause)
        self.response_info = dict(response_info or {})

    def render(self) -> str:
        return (
            f"{super().render()}\n\n"
            f"Response Info:\n{render_snapshot(self.response_info)}"
        )


class TransportFailure(Exception):
    """Raised by transport adapters when the round trip itself fails."""

    def __init__(self, message: str, *, response: Any = None) -> None:
        super().__init__(message)
        self.response = response


class StepFailure(Exception):
    """Signal raised inside a chain step body to record a local failure.

    The ``request_step`` and ``response_step`` decorators translate it into the
    matching :class:`QuestError` subtype; it never escapes a decorated step.
    """
