"""Session controller for editing one daily log.

Flow: load → edit (dispatch actions) → submit (update, then upload photos).

The controller owns the single draft of the session. Collaborator failures are
caught where each call is issued, logged, and reported through the notification
sink; nothing escapes to the caller.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .actions import ACTION_FIELDS, Action, reduce
from .api import AttachmentStore, LogStore, ProjectCatalog
from .config import EditorConfig
from .errors import (
    EditorFailure,
    LoadFailure,
    StoreError,
    UpdateFailure,
    UploadFailure,
    ValidationFailure,
)
from .forms import FIELDS, LogDraft, Project, from_record, validate
from .notifications import LoggingSink, Notification, NotificationSink
from .payload import build_payload

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    LOADING = "loading"
    LOAD_FAILED = "load_failed"
    READY = "ready"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"


class SubmitOutcome(enum.Enum):
    SUCCEEDED = "succeeded"
    INVALID = "invalid"
    UPDATE_FAILED = "update_failed"
    UPLOAD_FAILED = "upload_failed"


class LogDraftController:
    """Holds the draft for one edit session and drives its persistence."""

    def __init__(
        self,
        log_store: LogStore,
        attachment_store: AttachmentStore,
        *,
        project_catalog: ProjectCatalog | None = None,
        sink: NotificationSink | None = None,
        config: EditorConfig | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.log_store = log_store
        self.attachment_store = attachment_store
        self.project_catalog = project_catalog
        self.sink = sink or LoggingSink()
        self.config = config or EditorConfig()
        self.tz = self.config.tzinfo()
        self.now = now or (lambda: datetime.now(self.tz))

        self.state = SessionState.LOADING
        self.log_id: str | None = None
        self.draft: LogDraft | None = None
        self.projects: list[Project] | None = None
        self.original_project_id: str | None = None
        self.touched: set[str] = set()
        self.last_error: EditorFailure | None = None

    # --- Load ---

    async def load(self, log_id: str) -> bool:
        """Fetch the record (and active projects when enabled) and build the draft."""
        self.log_id = log_id
        self.state = SessionState.LOADING
        use_catalog = self.config.project_selection and self.project_catalog is not None
        try:
            if use_catalog:
                record, projects = await asyncio.gather(
                    self.log_store.fetch_by_id(log_id),
                    self.project_catalog.list_active(),
                )
            else:
                record, projects = await self.log_store.fetch_by_id(log_id), None
            draft = from_record(record, tz=self.tz, now=self.now)
        except Exception as e:
            if isinstance(e, StoreError):
                logger.warning("Loading log %s failed: %s", log_id, e)
            else:
                logger.exception("Unexpected error loading log %s", log_id)
            self._fail(
                LoadFailure(f"Failed to load log {log_id}."), state=SessionState.LOAD_FAILED
            )
            return False

        self.draft = draft
        self.projects = list(projects) if projects is not None else None
        self.original_project_id = self.draft.project_id
        self.touched = set()
        self.last_error = None
        self.state = SessionState.READY
        logger.info("Loaded log %s for editing", log_id)
        return True

    # --- Edit ---

    def dispatch(self, action: Action) -> LogDraft:
        """Apply an edit to the draft and mark the edited field touched."""
        draft = self._require_ready()
        self.draft = reduce(draft, action, now=self.now)
        self.touched.add(ACTION_FIELDS[type(action)])
        return self.draft

    def touch(self, field: str) -> None:
        self.touched.add(field)

    def errors(self) -> dict[str, str]:
        """Evaluate every rule against the current draft."""
        if self.draft is None:
            return {}
        return validate(
            self.draft,
            strict_employees=self.config.strict_employees,
            require_end_after_start=self.config.require_end_after_start,
            projects=self.projects,
            original_project_id=self.original_project_id,
        )

    @property
    def visible_errors(self) -> dict[str, str]:
        """Errors for fields the user already interacted with."""
        return {k: v for k, v in self.errors().items() if k in self.touched}

    # --- Submit ---

    async def submit(self) -> SubmitOutcome:
        """Validate, persist the metadata, then upload pending photos.

        An upload failure is not rolled back: the metadata update stays
        committed and the user retries the photos.
        """
        draft = self._require_ready()
        errors = self.errors()
        if errors:
            self.touched.update(FIELDS)
            self._fail(ValidationFailure(errors), payload={"errors": errors})
            return SubmitOutcome.INVALID

        payload = build_payload(draft, status=self.config.status_override)
        self.state = SessionState.SUBMITTING
        try:
            await self.log_store.update(self.log_id, payload)
        except Exception as e:
            if isinstance(e, StoreError):
                logger.warning("Updating log %s failed: %s", self.log_id, e)
            else:
                logger.exception("Unexpected error updating log %s", self.log_id)
            self._fail(UpdateFailure("Updating the log failed."))
            return SubmitOutcome.UPDATE_FAILED

        if draft.new_photo_files:
            try:
                await self.attachment_store.upload_photos(self.log_id, list(draft.new_photo_files))
            except Exception as e:
                if isinstance(e, StoreError):
                    logger.warning("Uploading photos for log %s failed: %s", self.log_id, e)
                else:
                    logger.exception("Unexpected error uploading photos for log %s", self.log_id)
                self._fail(
                    UploadFailure(
                        "The log was updated but uploading the photos failed. "
                        "The photos are still attached; submit again to retry them."
                    )
                )
                return SubmitOutcome.UPLOAD_FAILED

        self.state = SessionState.SUCCEEDED
        self.last_error = None
        self.sink.notify(
            Notification(type="success", message="The log was updated.", payload={"log": payload})
        )
        logger.info("Log %s updated (%d photos)", self.log_id, len(draft.new_photo_files))
        return SubmitOutcome.SUCCEEDED

    # --- Internal helpers ---

    def _require_ready(self) -> LogDraft:
        if self.state is not SessionState.READY or self.draft is None:
            raise RuntimeError(f"Draft is not editable in state {self.state.value}")
        return self.draft

    def _fail(
        self,
        failure: EditorFailure,
        *,
        state: SessionState = SessionState.READY,
        payload: dict[str, Any] | None = None,
    ) -> None:
        self.last_error = failure
        self.state = state
        self.sink.notify(
            Notification(type="error", message=str(failure), kind=failure.kind, payload=payload or {})
        )
