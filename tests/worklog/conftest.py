from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from worklog.edit_daily_log.backend.errors import RecordNotFound, StoreError
from worklog.edit_daily_log.backend.forms import Project

TZ_NAME = "Asia/Jerusalem"  # UTC+2 until the end of March 2024
TZ = ZoneInfo(TZ_NAME)
FIXED_NOW = datetime(2024, 3, 12, 10, 7, 33, tzinfo=TZ)


class FakeLogStore:
    def __init__(self, records: dict[str, dict[str, Any]], *, fail_update: bool = False) -> None:
        self.records = records
        self.fail_update = fail_update
        self.updates: list[tuple[str, dict[str, Any]]] = []

    async def fetch_by_id(self, log_id: str) -> dict[str, Any]:
        if log_id not in self.records:
            raise RecordNotFound(f"No log {log_id}", status_code=404)
        return self.records[log_id]

    async def update(self, log_id: str, payload: dict[str, Any]) -> None:
        self.updates.append((log_id, payload))
        if self.fail_update:
            raise StoreError("update rejected", status_code=500)


class FakeAttachmentStore:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.uploads: list[tuple[str, list]] = []

    async def upload_photos(self, log_id: str, files) -> None:
        self.uploads.append((log_id, list(files)))
        if self.fail:
            raise StoreError("upload rejected", status_code=413)


class FakeProjectCatalog:
    def __init__(self, projects: list[Project] | None = None, *, fail: bool = False) -> None:
        self.projects = projects or []
        self.fail = fail
        self.calls = 0

    async def list_active(self) -> list[Project]:
        self.calls += 1
        if self.fail:
            raise StoreError("catalog unavailable")
        return list(self.projects)


@pytest.fixture
def sample_record() -> dict[str, Any]:
    return {
        "_id": "log-1",
        "date": "2024-03-08T22:00:00.000Z",
        "project": "p-1",
        "employees": ["Dana", "Omer"],
        "startTime": "2024-03-09T05:47:12.000Z",
        "endTime": "2024-03-09T14:45:00.000Z",
        "workDescription": "Poured foundation",
        "status": "submitted",
        "workPhotos": [{"url": "/uploads/a.jpg"}],
        "documents": ["/uploads/plan.pdf"],
    }


@pytest.fixture
def fixed_now():
    return lambda: FIXED_NOW
