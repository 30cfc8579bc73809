from datetime import date, time

from src.staff_hive.staff_hive.attendance.duration import compute_duration, format_duration, worked_minutes


def test_full_day_formats_hours_and_minutes():
    assert compute_duration(date(2024, 5, 14), time(9, 0), time(17, 30)) == "8h 30m"


def test_short_shift_has_zero_hours():
    assert compute_duration(date(2024, 5, 14), time(9, 0), time(9, 45)) == "0h 45m"


def test_same_minute_has_no_duration():
    assert compute_duration(date(2024, 5, 14), time(9, 0), time(9, 0)) is None


def test_midnight_crossing_has_no_duration():
    # Both times sit on the record's date; there is no rollover to the next day.
    assert worked_minutes(date(2024, 5, 14), time(23, 50), time(0, 10)) < 0
    assert compute_duration(date(2024, 5, 14), time(23, 50), time(0, 10)) is None


def test_format_uses_floor_division():
    assert format_duration(510) == "8h 30m"
    assert format_duration(61) == "1h 1m"
    assert format_duration(-5) is None
