"""Edit actions for a log draft and the reducer that applies them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date as _date, datetime
from typing import Union

from . import roster
from .clock import apply_slot
from .forms import LogDraft, PhotoFile


@dataclass(frozen=True)
class SetDate:
    value: _date | None


@dataclass(frozen=True)
class SetProject:
    project_id: str


@dataclass(frozen=True)
class SetEmployeeAt:
    index: int
    value: str


@dataclass(frozen=True)
class AddEmployee:
    pass


@dataclass(frozen=True)
class RemoveEmployeeAt:
    index: int


@dataclass(frozen=True)
class SetStartTime:
    slot: int


@dataclass(frozen=True)
class SetEndTime:
    slot: int


@dataclass(frozen=True)
class SetDescription:
    text: str


@dataclass(frozen=True)
class AddPhotoFiles:
    files: tuple[PhotoFile, ...]


@dataclass(frozen=True)
class ClearPhotoFiles:
    pass


Action = Union[
    SetDate,
    SetProject,
    SetEmployeeAt,
    AddEmployee,
    RemoveEmployeeAt,
    SetStartTime,
    SetEndTime,
    SetDescription,
    AddPhotoFiles,
    ClearPhotoFiles,
]

# Field each action edits; used to mark fields as touched.
ACTION_FIELDS: dict[type, str] = {
    SetDate: "date",
    SetProject: "project_id",
    SetEmployeeAt: "employees",
    AddEmployee: "employees",
    RemoveEmployeeAt: "employees",
    SetStartTime: "start_time",
    SetEndTime: "end_time",
    SetDescription: "work_description",
    AddPhotoFiles: "new_photo_files",
    ClearPhotoFiles: "new_photo_files",
}


def reduce(
    draft: LogDraft,
    action: Action,
    *,
    now: Callable[[], datetime] = datetime.now,
) -> LogDraft:
    """Return the next draft after ``action``. The input draft is left untouched."""
    if isinstance(action, SetDate):
        value = action.value
        if isinstance(value, datetime):
            value = value.date()
        return replace(draft, date=value)
    if isinstance(action, SetProject):
        return replace(draft, project_id=action.project_id)
    if isinstance(action, SetEmployeeAt):
        return replace(draft, employees=roster.update(draft.employees, action.index, action.value))
    if isinstance(action, AddEmployee):
        return replace(draft, employees=roster.add(draft.employees))
    if isinstance(action, RemoveEmployeeAt):
        return replace(draft, employees=roster.remove(draft.employees, action.index))
    if isinstance(action, SetStartTime):
        return replace(draft, start_time=apply_slot(action.slot, draft.start_time, now=now))
    if isinstance(action, SetEndTime):
        return replace(draft, end_time=apply_slot(action.slot, draft.end_time, now=now))
    if isinstance(action, SetDescription):
        return replace(draft, work_description=action.text)
    if isinstance(action, AddPhotoFiles):
        pending = list(draft.new_photo_files)
        for f in action.files:
            # already-pending files are not queued twice
            if f not in pending:
                pending.append(f)
        return replace(draft, new_photo_files=pending)
    if isinstance(action, ClearPhotoFiles):
        return replace(draft, new_photo_files=[])
    raise TypeError(f"Unknown draft action: {action!r}")
