"""Quarter-hour time selection.

A day is split into 96 slots of 15 minutes. ``slot_of`` floors a timestamp onto
the grid and ``apply_slot`` writes a slot back onto a reference timestamp,
leaving its calendar date and timezone untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

SLOT_MINUTES = 15
SLOTS_PER_HOUR = 60 // SLOT_MINUTES
SLOT_COUNT = 24 * SLOTS_PER_HOUR

SLOT_LABELS: tuple[str, ...] = tuple(
    f"{s // SLOTS_PER_HOUR:02d}:{(s % SLOTS_PER_HOUR) * SLOT_MINUTES:02d}"
    for s in range(SLOT_COUNT)
)


def slot_of(timestamp: datetime | None) -> int:
    """Return the slot index for a timestamp, flooring to the lower quarter hour.

    A missing timestamp maps to slot 0 (00:00).
    """
    if timestamp is None:
        return 0
    return timestamp.hour * SLOTS_PER_HOUR + timestamp.minute // SLOT_MINUTES


def apply_slot(
    slot: int,
    reference: datetime | None = None,
    *,
    now: Callable[[], datetime] = datetime.now,
) -> datetime:
    """Return ``reference`` with its time of day set to ``slot``.

    Seconds and microseconds are zeroed. Without a reference the current time
    from ``now`` is used.
    """
    _check_slot(slot)
    base = reference if reference is not None else now()
    return base.replace(
        hour=slot // SLOTS_PER_HOUR,
        minute=(slot % SLOTS_PER_HOUR) * SLOT_MINUTES,
        second=0,
        microsecond=0,
    )


def slot_label(slot: int) -> str:
    _check_slot(slot)
    return SLOT_LABELS[slot]


def slot_from_label(label: str) -> int:
    """Inverse of ``slot_label``; raises ValueError for labels off the grid."""
    try:
        return SLOT_LABELS.index(label.strip())
    except ValueError:
        raise ValueError(f"Not a quarter-hour label: {label!r}") from None


def _check_slot(slot: int) -> None:
    if not 0 <= slot < SLOT_COUNT:
        raise ValueError(f"Slot must be within 0..{SLOT_COUNT - 1}, got {slot}")
