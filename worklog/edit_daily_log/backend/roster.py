"""Editing helpers for the list of employees present on a work log.

All functions return a new list and never mutate their input. The roster always
keeps at least one entry; blanks are allowed while typing and only filtered out
by ``materialize``.
"""

from __future__ import annotations

from collections.abc import Sequence


def add(employees: Sequence[str]) -> list[str]:
    """Append one blank entry."""
    return [*employees, ""]


def update(employees: Sequence[str], index: int, value: str) -> list[str]:
    """Replace the entry at ``index`` verbatim. Out-of-range indexes are ignored."""
    updated = list(employees)
    if 0 <= index < len(updated):
        updated[index] = value
    return updated


def remove(employees: Sequence[str], index: int) -> list[str]:
    """Delete the entry at ``index``.

    Removing the only remaining entry resets the roster to a single blank slot.
    """
    if not 0 <= index < len(employees):
        return list(employees)
    updated = [e for i, e in enumerate(employees) if i != index]
    return updated or [""]


def materialize(employees: Sequence[str]) -> list[str]:
    """Trim each entry and drop the empty ones, preserving order."""
    return [t for t in (str(e or "").strip() for e in employees) if t]
