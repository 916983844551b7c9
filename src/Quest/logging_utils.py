"""Helpers for keeping credentials out of debug logs."""

from __future__ import annotations

import re
from typing import Dict, Mapping, Optional

SENSITIVE_KEYS = frozenset(
    {"authorization", "proxy-authorization", "api_key", "apikey", "x-api-key", "token", "secret", "password", "cookie"}
)
MASK = "***masked***"
_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9+/=_-]{32,}$")


def _mask_value(value: object, key_hint: Optional[str]) -> object:
    if isinstance(value, Mapping):
        return {k: _mask_value(v, str(k).lower()) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_mask_value(item, key_hint) for item in value]
    if isinstance(value, str):
        lowered = value.lower()
        if key_hint in SENSITIVE_KEYS:
            return MASK
        if "bearer " in lowered or "basic " in lowered or "apikey" in lowered:
            return MASK
        if key_hint == "authorization" and _TOKEN_PATTERN.match(value.strip()):
            return MASK
    return value


def mask_sensitive_data(payload: Mapping[str, object]) -> Dict[str, object]:
    """Return a copy of ``payload`` with common secret fields masked."""

    return {key: _mask_value(value, str(key).lower()) for key, value in payload.items()}


__all__ = ["mask_sensitive_data", "MASK"]
