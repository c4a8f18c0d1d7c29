from __future__ import annotations

from datetime import datetime

from .clock import SLOT_COUNT, SLOTS_PER_HOUR, slot_of


def work_hours(start: datetime | None, end: datetime | None) -> float | None:
    """Return hours between the two times of day on the quarter-hour grid.

    Only the time of day counts; an end before the start is read as crossing
    midnight. Returns None when either side is missing.
    """
    if start is None or end is None:
        return None
    slots = (slot_of(end) - slot_of(start)) % SLOT_COUNT
    return slots / SLOTS_PER_HOUR


def format_hours(hours: float | None) -> str:
    """Render hours compactly, e.g. 8.25 -> "8.25h", 9.0 -> "9h"."""
    if hours is None:
        return "-"
    return f"{_strip_trailing_zero(hours)}h"


def _strip_trailing_zero(x: float) -> str:
    s = f"{x:.2f}"
    if s.endswith(".00"):
        return s[:-3]
    if s.endswith("0"):
        return s[:-1]
    return s
