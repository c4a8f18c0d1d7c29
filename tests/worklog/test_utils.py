from datetime import datetime

from worklog.edit_daily_log.backend.utils import format_hours, work_hours


def test_work_hours_on_grid():
    start = datetime(2024, 3, 10, 8, 30)
    end = datetime(2024, 3, 1, 16, 45)
    assert work_hours(start, end) == 8.25


def test_work_hours_floors_unaligned_and_wraps_midnight():
    assert work_hours(datetime(2024, 1, 1, 7, 47), datetime(2024, 1, 1, 8, 0)) == 0.25
    assert work_hours(datetime(2024, 1, 1, 22, 0), datetime(2024, 1, 1, 6, 0)) == 8.0
    assert work_hours(None, datetime(2024, 1, 1)) is None


def test_format_hours():
    assert format_hours(8.25) == "8.25h"
    assert format_hours(8.5) == "8.5h"
    assert format_hours(9.0) == "9h"
    assert format_hours(None) == "-"
