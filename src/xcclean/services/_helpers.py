"""Shared service-layer helper functions."""

from __future__ import annotations

import time
from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for history records)."""
    return datetime.now(UTC).isoformat(timespec="seconds")


def elapsed_ms(start: float) -> float:
    """Milliseconds since *start* (a ``time.perf_counter()`` value)."""
    return round((time.perf_counter() - start) * 1000, 2)
