"""Build the outbound update payload from a validated draft."""

from __future__ import annotations

from datetime import date as _date, datetime, time, timezone
from typing import Any

from . import roster
from .forms import LogDraft


def merge_date_and_time(day: _date, time_source: datetime) -> datetime:
    """Combine ``day`` with the time of day of ``time_source``, seconds zeroed.

    The timezone of ``time_source`` is kept, so the wall-clock time the user
    picked is what ends up on ``day``.
    """
    return datetime.combine(
        day,
        time(time_source.hour, time_source.minute),
        tzinfo=time_source.tzinfo,
    )


def to_wire(value: datetime) -> str:
    """Serialize as an absolute UTC ISO-8601 string, e.g. ``2024-03-10T06:30:00.000Z``.

    Naive values are taken as local time.
    """
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_payload(draft: LogDraft, *, status: str | None = None) -> dict[str, Any]:
    """Project a draft into the JSON body sent to the log store.

    Pending and existing attachments are not part of the payload.
    """
    if draft.date is None or draft.start_time is None or draft.end_time is None:
        raise ValueError("Draft must be validated before building a payload")
    start = merge_date_and_time(draft.date, draft.start_time)
    end = merge_date_and_time(draft.date, draft.end_time)
    midnight = datetime.combine(draft.date, time(0, 0), tzinfo=draft.start_time.tzinfo)
    return {
        "date": to_wire(midnight),
        "project": draft.project_id,
        "employees": roster.materialize(draft.employees),
        "startTime": to_wire(start),
        "endTime": to_wire(end),
        "workDescription": draft.work_description,
        "status": status or draft.status,
    }
