# === NAVMAP v1 ===
# {
#   "module": "Quest.settings",
#   "purpose": "Typed defaults for request construction and the shared HTTPX client",
#   "sections": [
#     {"id": "quest-settings", "name": "QuestSettings", "anchor": "class-quest-settings", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Configuration for request factories and the shared HTTP client.

Settings are plain pydantic models. Nothing is read from the environment; a
caller that wants different defaults builds a :class:`QuestSettings` and hands
it to :class:`Quest.factory.RequestFactory` or to
:func:`Quest.network.configure_http_client`.
"""

from __future__ import annotations

from typing import Dict, Optional

import httpx
from pydantic import BaseModel, Field, field_validator

DEFAULT_USER_AGENT = "quest/v1"
DEFAULT_ACCEPT = "application/json"


class QuestSettings(BaseModel):
    """Defaults applied to every request built by a factory."""

    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header value")
    accept: str = Field(default=DEFAULT_ACCEPT, description="Accept header value")
    extra_headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Additional headers added to every new request",
    )
    timeout_sec: float = Field(default=30.0, gt=0, description="Read/write/pool timeout")
    connect_timeout_sec: float = Field(default=5.0, gt=0, description="Connect timeout")
    follow_redirects: bool = Field(default=True, description="Follow 3xx responses")
    base_url: Optional[str] = Field(
        default=None,
        description="Base URL used by the shared client to resolve relative paths",
    )
    trace_requests: bool = Field(
        default=False,
        description="Open an OpenTelemetry span around every dispatch",
    )

    model_config = {"validate_assignment": True}

    @field_validator("user_agent", "accept")
    @classmethod
    def validate_header_value(cls, value: str) -> str:
        """Header defaults must be sendable as ASCII."""

        try:
            value.encode("ascii")
        except UnicodeEncodeError as exc:
            raise ValueError(f"header value {value!r} is not ASCII") from exc
        return value

    @field_validator("extra_headers")
    @classmethod
    def validate_extra_headers(cls, value: Dict[str, str]) -> Dict[str, str]:
        for key, item in value.items():
            try:
                key.encode("ascii")
                item.encode("ascii")
            except UnicodeEncodeError as exc:
                raise ValueError(f"header {key!r} is not ASCII") from exc
        return value

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: Optional[str]) -> Optional[str]:
        """Reject base URLs that HTTPX cannot parse."""

        if value is None:
            return value
        try:
            httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid base_url {value!r}: {exc}") from exc
        return value

    def default_headers(self) -> Dict[str, str]:
        headers = {"Accept": self.accept, "User-Agent": self.user_agent}
        headers.update(self.extra_headers)
        return headers

    def httpx_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout_sec,
            read=self.timeout_sec,
            write=self.timeout_sec,
            pool=self.timeout_sec,
        )


__all__ = ["QuestSettings", "DEFAULT_USER_AGENT", "DEFAULT_ACCEPT"]
