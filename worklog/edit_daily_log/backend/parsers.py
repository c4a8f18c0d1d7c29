"""Turn the assistant's date and time phrases into draft values.

Dates resolve to ``datetime.date`` and times resolve to quarter-hour slots, so
the results can be dispatched straight into the draft.
"""

from __future__ import annotations

import re
from datetime import date as _date, datetime, timedelta
from zoneinfo import ZoneInfo

from .clock import SLOT_MINUTES, SLOTS_PER_HOUR

_MONTHS = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def resolve_date_phrase(
    phrase: str,
    *,
    timezone: str | None = None,
    today: _date | None = None,
) -> _date | None:
    """Resolve a date phrase to a calendar date, or None when not understood.

    Supported:
    - Relative: today, yesterday, tomorrow.
    - ISO: YYYY-MM-DD.
    - Day-first numeric, as typed in the log form: DD/MM/YYYY.
    - Month names: "September 9 2025", "9 September 2025".
    - Weekdays: "last friday", "this monday" (the most recent or current one).
    """
    s = (phrase or "").strip().lower()
    if not s:
        return None
    base = today or _today(timezone)

    if s in {"today", "todays date", "today's date"}:
        return base
    if s == "yesterday":
        return base - timedelta(days=1)
    if s == "tomorrow":
        return base + timedelta(days=1)

    iso = re.fullmatch(r"(\d{4})-(\d{2})-(\d{2})", s)
    if iso:
        return _safe_date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))

    dmy_num = re.search(r"\b(\d{1,2})[/.](\d{1,2})[/.](\d{4})\b", s)
    if dmy_num:
        return _safe_date(int(dmy_num.group(3)), int(dmy_num.group(2)), int(dmy_num.group(1)))

    mdy = re.search(r"\b([a-z]+)\s+(\d{1,2})(?:st|nd|rd|th)?\s*,?\s*(\d{4})\b", s)
    if mdy and mdy.group(1) in _MONTHS:
        return _safe_date(int(mdy.group(3)), _MONTHS[mdy.group(1)], int(mdy.group(2)))

    dmy = re.search(r"\b(\d{1,2})(?:st|nd|rd|th)?\s+([a-z]+)\s*,?\s*(\d{4})\b", s)
    if dmy and dmy.group(2) in _MONTHS:
        return _safe_date(int(dmy.group(3)), _MONTHS[dmy.group(2)], int(dmy.group(1)))

    wk = re.fullmatch(r"(this|last)\s+(" + "|".join(_WEEKDAYS) + r")", s)
    if wk:
        target = _WEEKDAYS.index(wk.group(2))
        back = (base.weekday() - target) % 7
        if wk.group(1) == "last" and back == 0:
            back = 7
        return base - timedelta(days=back)

    return None


def parse_time_phrase(phrase: str) -> int | None:
    """Resolve "8:30", "16:45", "4pm" or "8.15 am" to a slot index.

    Minutes off the quarter-hour grid are floored. Returns None when not understood.
    """
    s = (phrase or "").strip().lower().replace(" ", "")
    m = re.fullmatch(r"(\d{1,2})(?:[:.](\d{2}))?(am|pm|a\.m\.|p\.m\.)?", s)
    if not m:
        return None
    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    meridiem = (m.group(3) or "").replace(".", "")
    if minute > 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem == "pm" else 0)
    elif hour > 23:
        return None
    return hour * SLOTS_PER_HOUR + minute // SLOT_MINUTES


def _today(timezone: str | None) -> _date:
    if timezone:
        try:
            return datetime.now(ZoneInfo(timezone)).date()
        except Exception:
            pass
    return datetime.now().astimezone().date()


def _safe_date(year: int, month: int, day: int) -> _date | None:
    try:
        return _date(year, month, day)
    except ValueError:
        return None
