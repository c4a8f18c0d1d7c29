"""Collaborator contracts and their HTTP implementations.

The controller only depends on the protocols. The ``Http*`` classes talk to the
daily-log backend with ``requests``; blocking calls are pushed to a worker
thread so the event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Protocol

import requests

from .config import EditorConfig
from .errors import RecordNotFound, StoreError
from .forms import PhotoFile, Project

logger = logging.getLogger(__name__)


class LogStore(Protocol):
    async def fetch_by_id(self, log_id: str) -> dict[str, Any]: ...

    async def update(self, log_id: str, payload: dict[str, Any]) -> None: ...


class ProjectCatalog(Protocol):
    async def list_active(self) -> list[Project]: ...


class AttachmentStore(Protocol):
    async def upload_photos(self, log_id: str, files: Sequence[PhotoFile]) -> None: ...


class ApiClient:
    """Thin wrapper around a ``requests.Session`` with auth and error mapping."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.token = token

    @classmethod
    def from_config(cls, cfg: EditorConfig) -> ApiClient:
        return cls(cfg.api_base_url, token=cfg.api_token, timeout=cfg.timeout)

    def headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(
                method, url, headers=self.headers(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise StoreError(f"{method} {url} failed: {e}") from e
        if response.status_code == 404:
            raise RecordNotFound(f"Not found: {url}", status_code=404)
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.warning("%s %s returned %s", method, url, response.status_code)
            raise StoreError(str(e), status_code=response.status_code) from e
        return response

    def json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self.request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Invalid JSON from {path}") from e


class HttpLogStore:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def fetch_by_id(self, log_id: str) -> dict[str, Any]:
        data = await asyncio.to_thread(self.client.json, "GET", f"logs/{log_id}")
        if not isinstance(data, dict):
            raise StoreError(f"Unexpected log record for {log_id}")
        return data

    async def update(self, log_id: str, payload: dict[str, Any]) -> None:
        await asyncio.to_thread(self.client.request, "PUT", f"logs/{log_id}", json=payload)


class HttpProjectCatalog:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_active(self) -> list[Project]:
        data = await asyncio.to_thread(
            self.client.json, "GET", "projects", params={"status": "active"}
        )
        if isinstance(data, dict):
            data = data.get("projects") or []
        return [
            Project(id=str(x.get("_id") or x.get("id") or ""), name=str(x.get("name", "")))
            for x in data or []
            if isinstance(x, dict)
        ]


class HttpAttachmentStore:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def upload_photos(self, log_id: str, files: Sequence[PhotoFile]) -> None:
        parts = [("photos", (f.filename, f.content, f.content_type)) for f in files]
        await asyncio.to_thread(self.client.request, "POST", f"files/{log_id}/photos", files=parts)
