from __future__ import annotations

import argparse
import asyncio
import logging
import mimetypes
import os
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv

from agents import Agent, ModelSettings, RunContextWrapper, function_tool, run_demo_loop

from .backend.actions import (
    AddEmployee,
    AddPhotoFiles,
    RemoveEmployeeAt,
    SetDate,
    SetDescription,
    SetEmployeeAt,
    SetEndTime,
    SetProject,
    SetStartTime,
)
from .backend.api import ApiClient, HttpAttachmentStore, HttpLogStore, HttpProjectCatalog
from .backend.clock import slot_label, slot_of
from .backend.config import EditorConfig, load_from_env
from .backend.controller import LogDraftController, SessionState, SubmitOutcome
from .backend.forms import PhotoFile
from .backend.notifications import CollectingSink
from .backend.parsers import parse_time_phrase, resolve_date_phrase
from .backend.utils import format_hours, work_hours

load_dotenv()


@dataclass
class EditLogContext:
    """Per-run context holding the edit session."""

    controller: LogDraftController
    sink: CollectingSink
    config: EditorConfig


def describe_draft(controller: LogDraftController, config: EditorConfig) -> dict[str, Any]:
    """Summarize the draft the way the edit form shows it."""
    draft = controller.draft
    if draft is None:
        return {"status": "error", "message": f"No draft (state: {controller.state.value})."}
    out: dict[str, Any] = {
        "status": "ok",
        "date": draft.date.isoformat() if draft.date else None,
        "project": draft.project_id,
        "employees": list(draft.employees),
        "start_time": slot_label(slot_of(draft.start_time)),
        "end_time": slot_label(slot_of(draft.end_time)),
        "work_description": draft.work_description,
        "log_status": draft.status,
        "new_photos": [f.filename for f in draft.new_photo_files],
        "existing_photos": len(draft.existing_photos),
        "existing_documents": len(draft.existing_documents),
        "errors": controller.visible_errors,
    }
    if config.show_work_hours:
        out["work_hours"] = format_hours(work_hours(draft.start_time, draft.end_time))
    return out


def _edited(ctx: RunContextWrapper[EditLogContext], action: Any) -> dict[str, Any]:
    session = ctx.context
    if session.controller.state is not SessionState.READY:
        return {"status": "error", "message": f"Log is not editable ({session.controller.state.value})."}
    session.controller.dispatch(action)
    return describe_draft(session.controller, session.config)


@function_tool
def show_draft(ctx: RunContextWrapper[EditLogContext]) -> dict[str, Any]:
    """Show the current state of the log being edited, including validation errors."""
    return describe_draft(ctx.context.controller, ctx.context.config)


@function_tool
def list_projects(ctx: RunContextWrapper[EditLogContext]) -> dict[str, Any]:
    """List active projects the log can be assigned to (empty when the project is fixed)."""
    projects = ctx.context.controller.projects
    if projects is None:
        return {"status": "fixed", "projects": []}
    return {"status": "ok", "projects": [{"id": p.id, "name": p.name} for p in projects]}


@function_tool
def set_date(ctx: RunContextWrapper[EditLogContext], phrase: str) -> dict[str, Any]:
    """Set the work date.

    Args:
        phrase: A date like "today", "yesterday", "2025-09-09", "09/09/2025" (day first)
            or "September 9 2025".
    """
    day = resolve_date_phrase(phrase, timezone=ctx.context.config.timezone)
    if day is None:
        return {"status": "error", "message": f"Could not understand date: {phrase}"}
    return _edited(ctx, SetDate(day))


@function_tool
def set_project(ctx: RunContextWrapper[EditLogContext], project: str) -> dict[str, Any]:
    """Assign the log to a project.

    Args:
        project: Project id, or project name when it matches one listed by list_projects.
    """
    projects = ctx.context.controller.projects or []
    wanted = project.strip().lower()
    match = next((p for p in projects if wanted in (p.id.lower(), p.name.strip().lower())), None)
    return _edited(ctx, SetProject(match.id if match else project.strip()))


@function_tool
def add_employee(ctx: RunContextWrapper[EditLogContext], name: str | None = None) -> dict[str, Any]:
    """Add an employee row at the end of the list, optionally filling in the name."""
    result = _edited(ctx, AddEmployee())
    if name and result.get("status") == "ok":
        index = len(ctx.context.controller.draft.employees) - 1
        result = _edited(ctx, SetEmployeeAt(index, name))
    return result


@function_tool
def update_employee(ctx: RunContextWrapper[EditLogContext], index: int, name: str) -> dict[str, Any]:
    """Replace the employee at a zero-based position in the list."""
    return _edited(ctx, SetEmployeeAt(index, name))


@function_tool
def remove_employee(ctx: RunContextWrapper[EditLogContext], index: int) -> dict[str, Any]:
    """Remove the employee at a zero-based position. The list always keeps one row."""
    return _edited(ctx, RemoveEmployeeAt(index))


@function_tool
def set_start_time(ctx: RunContextWrapper[EditLogContext], time: str) -> dict[str, Any]:
    """Set the start time, e.g. "7:30", "07:45" or "8am". Snapped down to the quarter hour."""
    slot = parse_time_phrase(time)
    if slot is None:
        return {"status": "error", "message": f"Could not understand time: {time}"}
    return _edited(ctx, SetStartTime(slot))


@function_tool
def set_end_time(ctx: RunContextWrapper[EditLogContext], time: str) -> dict[str, Any]:
    """Set the end time, e.g. "16:45" or "5pm". Snapped down to the quarter hour."""
    slot = parse_time_phrase(time)
    if slot is None:
        return {"status": "error", "message": f"Could not understand time: {time}"}
    return _edited(ctx, SetEndTime(slot))


@function_tool
def set_description(ctx: RunContextWrapper[EditLogContext], text: str) -> dict[str, Any]:
    """Replace the description of the work done."""
    return _edited(ctx, SetDescription(text))


@function_tool
def attach_photos(ctx: RunContextWrapper[EditLogContext], paths: list[str]) -> dict[str, Any]:
    """Attach image files from local paths; they are uploaded after the log is saved."""
    files: list[PhotoFile] = []
    missing: list[str] = []
    for path in paths:
        if not os.path.isfile(path):
            missing.append(path)
            continue
        with open(path, "rb") as f:
            content = f.read()
        ctype = mimetypes.guess_type(path)[0] or "application/octet-stream"
        files.append(PhotoFile(filename=os.path.basename(path), content=content, content_type=ctype))
    if missing:
        return {"status": "error", "message": "Files not found.", "missing": missing}
    return _edited(ctx, AddPhotoFiles(tuple(files)))


@function_tool
async def submit_log(ctx: RunContextWrapper[EditLogContext]) -> dict[str, Any]:
    """Save the edited log and upload any attached photos."""
    session = ctx.context
    if session.controller.state is not SessionState.READY:
        return {"status": "error", "message": f"Log is not editable ({session.controller.state.value})."}
    outcome = await session.controller.submit()
    messages = [n.message for n in session.sink.drain()]
    status = "ok" if outcome is SubmitOutcome.SUCCEEDED else "error"
    result: dict[str, Any] = {"status": status, "outcome": outcome.value, "messages": messages}
    if outcome is SubmitOutcome.INVALID:
        result["errors"] = session.controller.visible_errors
    return result


def build_agent(model_name: str) -> Agent[EditLogContext]:
    instructions = (
        "You help a team leader correct a daily work log that was already submitted. "
        "Start by calling show_draft and summarizing the log in one or two lines. "
        "Apply each change the user asks for with the matching tool: set_date, set_project, "
        "add_employee, update_employee, remove_employee, set_start_time, set_end_time, "
        "set_description, attach_photos. Employee positions are zero-based; use show_draft to check them. "
        "Times are picked in quarter hours; tell the user when a time was snapped down. "
        "When a project must be chosen, use list_projects and never invent a project. "
        "Do not guess missing values; ask one short question at a time. "
        "When the user is done, call submit_log. If it reports errors, explain them and help fix them. "
        "If the log was saved but the photo upload failed, say so clearly; the photos stay attached, so offer to call submit_log again. "
        "After a successful save, confirm and stop."
    )

    return Agent[EditLogContext](
        name="Daily Log Editor",
        instructions=instructions,
        tools=[
            show_draft,
            list_projects,
            set_date,
            set_project,
            add_employee,
            update_employee,
            remove_employee,
            set_start_time,
            set_end_time,
            set_description,
            attach_photos,
            submit_log,
        ],
        model=model_name,
        model_settings=ModelSettings(),
    )


def build_controller(config: EditorConfig, sink: CollectingSink) -> LogDraftController:
    client = ApiClient.from_config(config)
    return LogDraftController(
        HttpLogStore(client),
        HttpAttachmentStore(client),
        project_catalog=HttpProjectCatalog(client) if config.project_selection else None,
        sink=sink,
        config=config,
    )


async def main() -> None:
    parser = argparse.ArgumentParser(description="Edit a submitted daily work log.")
    parser.add_argument("log_id", help="Identifier of the log to edit")
    args = parser.parse_args()

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    model = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
    if not os.environ.get("OPENAI_API_KEY"):
        print("Warning: OPENAI_API_KEY is not set. Set it in your shell or a .env file.")

    config = load_from_env(
        default_path=os.path.join(os.path.dirname(__file__), "editor.example.json")
    )
    sink = CollectingSink()
    controller = build_controller(config, sink)
    if not await controller.load(args.log_id):
        for n in sink.drain():
            print(n.message)
        raise SystemExit(1)

    agent = build_agent(model)
    print(f"Editing log {args.log_id}. Describe the changes, or say 'save' when done. Ctrl+C to exit.")
    context = EditLogContext(controller=controller, sink=sink, config=config)
    await run_demo_loop(agent, stream=True, context=context)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
