"""Failure kinds raised by collaborators and reported by the controller."""

from __future__ import annotations


class StoreError(Exception):
    """A remote collaborator call failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RecordNotFound(StoreError):
    """The requested log does not exist."""


class EditorFailure(Exception):
    """Base for failures surfaced to the person editing the log."""

    kind = "error"


class LoadFailure(EditorFailure):
    kind = "load"


class ValidationFailure(EditorFailure):
    kind = "validation"

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)


class UpdateFailure(EditorFailure):
    kind = "update"


class UploadFailure(EditorFailure):
    """Photo upload failed after the metadata update was already committed."""

    kind = "upload"
