"""
Time-derived identifiers ("order-1717171717171", "p1717171717171").
"""
from __future__ import annotations

from collections.abc import Container
from datetime import datetime


def time_derived_id(prefix: str, now: datetime, taken: Container[str] = ()) -> str:
    """Build ``prefix + epoch millis``, bumping the millis until unused."""
    millis = int(now.timestamp() * 1000)
    candidate = f"{prefix}{millis}"
    while candidate in taken:
        millis += 1
        candidate = f"{prefix}{millis}"
    return candidate
