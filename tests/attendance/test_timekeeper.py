from __future__ import annotations

from datetime import datetime, time

import pytest

from src.staff_hive.staff_hive.attendance.service import AttendanceTimekeeper
from src.staff_hive.staff_hive.core.enums import AttendanceStatus
from src.staff_hive.staff_hive.core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    NoCheckInFound,
    NotFound,
    ValidationError,
)
from tests.fakes import InMemoryAttendance, InMemoryEmployees


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def timekeeper(attendance_repo, employees):
    return AttendanceTimekeeper(attendance_repo, InMemoryEmployees(employees))


def _check_in(timekeeper, employee_id, now, owner_id=1, **kwargs):
    return timekeeper.check_in(owner_id, timekeeper.snapshot_for(owner_id, employee_id), now=now, **kwargs)


def test_check_in_creates_working_record(timekeeper, fixed_now):
    rec = _check_in(timekeeper, 1, fixed_now, location="HQ")

    assert rec.work_date == fixed_now.date()
    assert rec.check_in_time == time(9, 0)
    assert rec.check_out_time is None
    assert rec.duration is None
    assert rec.status == AttendanceStatus.WORKING
    assert rec.location == "HQ"
    assert rec.ip_address == "Unknown"
    assert rec.employee.name == "Employee 1"


def test_double_check_in_raises_with_existing_record(timekeeper, fixed_now):
    first = _check_in(timekeeper, 1, fixed_now)

    with pytest.raises(AlreadyCheckedIn) as exc:
        _check_in(timekeeper, 1, fixed_now.replace(hour=10))

    assert exc.value.record == first


def test_same_employee_next_day_is_allowed(timekeeper, fixed_now):
    _check_in(timekeeper, 1, fixed_now)
    rec = _check_in(timekeeper, 1, fixed_now.replace(day=15))
    assert rec.work_date.day == 15


def test_snapshot_of_foreign_employee_is_not_found(timekeeper):
    with pytest.raises(NotFound):
        timekeeper.snapshot_for(1, 5)


def test_check_out_computes_duration(timekeeper, fixed_now):
    _check_in(timekeeper, 1, fixed_now)
    rec = timekeeper.check_out(1, 1, now=datetime(2024, 5, 14, 17, 30, 59))

    assert rec.check_out_time == time(17, 30)
    assert rec.duration == "8h 30m"
    assert rec.status == AttendanceStatus.COMPLETED


def test_check_out_without_check_in(timekeeper, fixed_now):
    with pytest.raises(NoCheckInFound):
        timekeeper.check_out(1, 1, now=fixed_now)


def test_double_check_out(timekeeper, fixed_now):
    _check_in(timekeeper, 1, fixed_now)
    timekeeper.check_out(1, 1, now=fixed_now.replace(hour=17))

    with pytest.raises(AlreadyCheckedOut):
        timekeeper.check_out(1, 1, now=fixed_now.replace(hour=18))


def test_check_out_same_minute_leaves_duration_empty(timekeeper, fixed_now):
    _check_in(timekeeper, 1, fixed_now)
    rec = timekeeper.check_out(1, 1, now=fixed_now.replace(second=50))

    assert rec.status == AttendanceStatus.COMPLETED
    assert rec.duration is None


def test_note_length_is_validated(timekeeper, fixed_now):
    with pytest.raises(ValidationError):
        _check_in(timekeeper, 1, fixed_now, note="x" * 501)


class RacingAttendance(InMemoryAttendance):
    """Pretends another request inserts the same day between our check and our insert."""

    def __init__(self):
        super().__init__()
        self._raced = False

    def create_checkin(self, **kwargs):
        if not self._raced:
            self._raced = True
            super().create_checkin(**{**kwargs, "location": "rival"})
        return super().create_checkin(**kwargs)


def test_concurrent_check_in_is_reported_as_already_checked_in(employees, fixed_now):
    timekeeper = AttendanceTimekeeper(RacingAttendance(), InMemoryEmployees(employees))
    snapshot = timekeeper.snapshot_for(1, 1)

    with pytest.raises(AlreadyCheckedIn) as exc:
        timekeeper.check_in(1, snapshot, now=fixed_now)

    assert exc.value.record.location == "rival"


class LostCheckoutRace(InMemoryAttendance):
    def update_checkout(self, **kwargs):
        super().update_checkout(**kwargs)
        return False


def test_concurrent_check_out_is_reported_as_already_checked_out(employees, fixed_now):
    timekeeper = AttendanceTimekeeper(LostCheckoutRace(), InMemoryEmployees(employees))
    _check_in(timekeeper, 1, fixed_now)

    with pytest.raises(AlreadyCheckedOut):
        timekeeper.check_out(1, 1, now=fixed_now.replace(hour=17))


def test_records_are_scoped_to_owner(timekeeper, fixed_now):
    _check_in(timekeeper, 1, fixed_now)
    assert timekeeper.get_today(2, 1, today=fixed_now.date()) is None
    assert timekeeper.get_today(1, 1, today=fixed_now.date()) is not None


def test_history_pages_newest_first(timekeeper, fixed_now):
    for day in (10, 11, 12):
        _check_in(timekeeper, 1, fixed_now.replace(day=day))
    _check_in(timekeeper, 2, fixed_now.replace(day=12, hour=8))

    page = timekeeper.history(1, page=1, limit=2)
    assert page.total == 4
    assert page.pages == 2
    assert [(r.work_date.day, r.employee_id) for r in page.records] == [(12, 1), (12, 2)]

    only_one = timekeeper.history(1, employee_id=1, page=2, limit=2)
    assert [r.work_date.day for r in only_one.records] == [10]


def test_history_rejects_inverted_range(timekeeper, fixed_now):
    with pytest.raises(ValidationError):
        timekeeper.history(1, start=fixed_now.date(), end=fixed_now.date().replace(day=1))


def test_records_for_date_ordered_by_check_in(timekeeper, fixed_now):
    _check_in(timekeeper, 2, fixed_now.replace(hour=10))
    _check_in(timekeeper, 1, fixed_now.replace(hour=8))

    rows = timekeeper.records_for_date(1, fixed_now.date())
    assert [r.employee_id for r in rows] == [1, 2]


def test_stats_summary_and_departments(timekeeper, fixed_now):
    _check_in(timekeeper, 1, fixed_now)
    _check_in(timekeeper, 2, fixed_now)
    _check_in(timekeeper, 3, fixed_now)
    timekeeper.check_out(1, 1, now=fixed_now.replace(hour=17))

    stats = timekeeper.stats(1)

    assert (stats.total_records, stats.completed_days, stats.working_days) == (3, 1, 2)
    by_dept = {d.department: (d.count, d.completed) for d in stats.departments}
    assert by_dept == {"Engineering": (2, 1), "Sales": (1, 0)}
