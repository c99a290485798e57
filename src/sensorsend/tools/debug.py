"""Minimal helpers for opt-in debug/instrumentation hooks."""

from __future__ import annotations

import os

DEBUG_SENSORSEND = os.getenv("SENSORSEND_DEBUG", "").lower() in {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    """Return True when lightweight instrumentation should run."""
    return DEBUG_SENSORSEND
