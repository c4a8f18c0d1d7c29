"""Draft model and validation for editing a daily work log.

The draft is a plain dataclass built from the stored record by ``from_record``
and checked by ``validate`` before every submission attempt.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date as _date, datetime, tzinfo as _tzinfo
from typing import Any

from . import roster

FIELDS = (
    "date",
    "project_id",
    "employees",
    "start_time",
    "end_time",
    "work_description",
)


@dataclass(frozen=True)
class PhotoFile:
    """A photo picked during this session and not uploaded yet."""

    filename: str
    content: bytes
    content_type: str = "image/jpeg"


@dataclass(frozen=True)
class Project:
    id: str
    name: str


@dataclass
class LogDraft:
    """Editable in-memory representation of one daily log."""

    date: _date | None
    project_id: str
    employees: list[str]
    start_time: datetime | None
    end_time: datetime | None
    work_description: str = ""
    status: str = "draft"
    new_photo_files: list[PhotoFile] = field(default_factory=list)
    existing_photos: tuple[str, ...] = ()
    existing_documents: tuple[str, ...] = ()


def from_record(
    data: dict[str, Any],
    *,
    tz: _tzinfo | None = None,
    now: Callable[[], datetime] | None = None,
) -> LogDraft:
    """Map a stored log record to a draft, filling defaults for missing fields.

    Missing date/start/end fall back to ``now()``. Timestamps are converted to
    ``tz`` when given.
    """
    clock = now or (lambda: datetime.now(tz))
    fallback = clock()

    def _ts(key: str) -> datetime:
        parsed = parse_timestamp(data.get(key))
        if parsed is None:
            return fallback
        return parsed.astimezone(tz) if tz is not None else parsed

    employees = _coerce_employees(data.get("employees"))
    return LogDraft(
        date=_ts("date").date(),
        project_id=_coerce_project(data.get("project")),
        employees=employees or [""],
        start_time=_ts("startTime"),
        end_time=_ts("endTime"),
        work_description=str(data.get("workDescription") or ""),
        status=str(data.get("status") or "draft"),
        existing_photos=tuple(_coerce_refs(data.get("workPhotos"))),
        existing_documents=tuple(_coerce_refs(data.get("documents"))),
    )


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix accepted). Returns None if unusable."""
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def validate(
    draft: LogDraft,
    *,
    strict_employees: bool = False,
    require_end_after_start: bool = False,
    projects: Sequence[Project] | None = None,
    original_project_id: str | None = None,
) -> dict[str, str]:
    """Return a mapping of field name to message; empty when the draft is valid."""
    errors: dict[str, str] = {}
    if draft.date is None:
        errors["date"] = "Date is required."
    project_id = (draft.project_id or "").strip()
    if not project_id:
        errors["project_id"] = "Project is required."
    elif projects is not None and project_id != original_project_id:
        if not any(p.id == project_id for p in projects):
            errors["project_id"] = f"Unknown project: {project_id}"
    if not draft.employees:
        errors["employees"] = "At least one employee is required."
    elif strict_employees and any(not e.strip() for e in draft.employees):
        errors["employees"] = "Employee names cannot be blank."
    elif not roster.materialize(draft.employees):
        errors["employees"] = "At least one employee name is required."
    if draft.start_time is None:
        errors["start_time"] = "Start time is required."
    if draft.end_time is None:
        errors["end_time"] = "End time is required."
    if (
        require_end_after_start
        and "start_time" not in errors
        and "end_time" not in errors
        and draft.end_time.time() <= draft.start_time.time()
    ):
        errors["end_time"] = "End time must be after start time."
    if not (draft.work_description or "").strip():
        errors["work_description"] = "Work description is required."
    return errors


def _coerce_employees(value: Any) -> list[str]:
    # Older clients stored the roster as a JSON-encoded string.
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return [value]
    if not isinstance(value, list):
        return []
    return [str(e) for e in value if e is not None]


def _coerce_project(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("_id") or value.get("id") or value.get("name") or "")
    return str(value or "")


def _coerce_refs(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    refs: list[str] = []
    for x in value:
        if isinstance(x, dict):
            ref = x.get("url") or x.get("path") or x.get("_id")
            if ref:
                refs.append(str(ref))
        elif x:
            refs.append(str(x))
    return refs
