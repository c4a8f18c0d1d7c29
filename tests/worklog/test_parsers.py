from datetime import date

from worklog.edit_daily_log.backend.parsers import parse_time_phrase, resolve_date_phrase

BASE = date(2025, 9, 9)  # Tuesday


def test_resolve_relative():
    assert resolve_date_phrase("today", today=BASE) == BASE
    assert resolve_date_phrase("Yesterday", today=BASE) == date(2025, 9, 8)
    assert resolve_date_phrase("tomorrow", today=BASE) == date(2025, 9, 10)


def test_resolve_absolute_formats():
    assert resolve_date_phrase("2025-09-01", today=BASE) == date(2025, 9, 1)
    assert resolve_date_phrase("09/08/2025", today=BASE) == date(2025, 8, 9)
    assert resolve_date_phrase("September 9 2025", today=BASE) == date(2025, 9, 9)
    assert resolve_date_phrase("9th September, 2025", today=BASE) == date(2025, 9, 9)


def test_resolve_weekdays():
    assert resolve_date_phrase("last friday", today=BASE) == date(2025, 9, 5)
    assert resolve_date_phrase("last tuesday", today=BASE) == date(2025, 9, 2)
    assert resolve_date_phrase("this tuesday", today=BASE) == BASE


def test_resolve_rejects_nonsense():
    assert resolve_date_phrase("", today=BASE) is None
    assert resolve_date_phrase("someday", today=BASE) is None
    assert resolve_date_phrase("2025-02-30", today=BASE) is None


def test_parse_time_phrase():
    assert parse_time_phrase("08:30") == 34
    assert parse_time_phrase("9:47") == 39
    assert parse_time_phrase("16.45") == 67
    assert parse_time_phrase("4pm") == 64
    assert parse_time_phrase("12 am") == 0
    assert parse_time_phrase("12pm") == 48
    assert parse_time_phrase("7") == 28


def test_parse_time_phrase_invalid():
    assert parse_time_phrase("25:00") is None
    assert parse_time_phrase("13pm") is None
    assert parse_time_phrase("8:75") is None
    assert parse_time_phrase("noonish") is None
