# === NAVMAP v1 ===
# {
#   "module": "tests.conftest",
#   "purpose": "Shared pytest fixtures for suite",
#   "sections": [
#     {"id": "reset-shared-state", "name": "reset_shared_state", "anchor": "fixture-reset-shared-state", "kind": "fixture"}
#   ]
# }
# === /NAVMAP ===

"""
Pytest Configuration

Puts ``src`` and the repository root on ``sys.path`` so the suite runs from a
plain checkout, re-exports the HTTP mocking fixtures, and resets the shared
HTTP client and default factory around every test.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# --- Globals ---

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from Quest.factory import set_default_factory  # noqa: E402
from Quest.network.client import reset_http_client  # noqa: E402
from tests.fixtures.http_mocking import mock_server  # noqa: E402,F401


@pytest.fixture(autouse=True)
def reset_shared_state():
    """Start every test with a fresh shared client and default factory."""

    reset_http_client()
    set_default_factory(None)
    yield
    reset_http_client()
    set_default_factory(None)
