from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from datetime import datetime, tzinfo as _tzinfo
from typing import Any
from zoneinfo import ZoneInfo

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class EditorConfig:
    api_base_url: str = "http://localhost:5000/api"
    api_token: str | None = None
    timeout: float = 15.0
    timezone: str | None = None  # IANA name; system tz when unset
    strict_employees: bool = False
    project_selection: bool = False
    require_end_after_start: bool = False
    status_override: str | None = None  # e.g. "draft" to reset status on every edit
    show_work_hours: bool = True

    def tzinfo(self) -> _tzinfo:
        """Resolve the configured timezone, falling back to the system zone."""
        if self.timezone:
            try:
                return ZoneInfo(self.timezone)
            except Exception:
                pass
        local = datetime.now().astimezone().tzinfo
        return local if local is not None else ZoneInfo("UTC")


def load_editor_config(path: str) -> EditorConfig:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    known = {f.name for f in fields(EditorConfig)}
    values: dict[str, Any] = {k: v for k, v in (data or {}).items() if k in known}
    return EditorConfig(**values)


_ENV_VARS: dict[str, str] = {
    "DAILY_LOG_API_URL": "api_base_url",
    "DAILY_LOG_API_TOKEN": "api_token",
    "DAILY_LOG_TIMEOUT": "timeout",
    "DAILY_LOG_TZ": "timezone",
    "DAILY_LOG_STRICT_EMPLOYEES": "strict_employees",
    "DAILY_LOG_PROJECT_SELECTION": "project_selection",
    "DAILY_LOG_END_AFTER_START": "require_end_after_start",
    "DAILY_LOG_STATUS": "status_override",
    "DAILY_LOG_SHOW_HOURS": "show_work_hours",
}


def load_from_env(default_path: str | None = None) -> EditorConfig:
    """Build a config from DAILY_LOG_CONFIG_PATH (or a default path) plus env overrides."""
    path = os.environ.get("DAILY_LOG_CONFIG_PATH") or default_path
    cfg = EditorConfig()
    if path and os.path.isfile(path):
        cfg = load_editor_config(path)
    for var, attr in _ENV_VARS.items():
        raw = os.environ.get(var)
        if raw is None or raw == "":
            continue
        current = getattr(cfg, attr)
        if isinstance(current, bool):
            setattr(cfg, attr, raw.strip().lower() in _TRUE)
        elif attr == "timeout":
            try:
                setattr(cfg, attr, float(raw))
            except ValueError:
                continue
        else:
            setattr(cfg, attr, raw)
    return cfg
