from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local, to_minute
from ..common.validators import page_window, require_max_length
from ..core.constants import MAX_NOTES_LENGTH, UNKNOWN
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    DuplicateRecordError,
    NoCheckInFound,
    NotFound,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .duration import compute_duration
from .model import AttendanceRecord, AttendanceStats, DepartmentStat, EmployeeSnapshot, HistoryPage
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceTimekeeper:
    """Daily check-in/check-out with one record per owner, employee and day."""

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def snapshot_for(self, owner_id: int, employee_id: int) -> EmployeeSnapshot:
        employee = self._employees.get_for_owner(owner_id, employee_id)
        if not employee:
            raise NotFound("Employee not found")
        return EmployeeSnapshot(
            employee_id=employee.employee_id,
            name=employee.name,
            department=employee.department,
            email=employee.email,
        )

    def check_in(
        self,
        owner_id: int,
        employee: EmployeeSnapshot,
        *,
        now: datetime | None = None,
        location: Optional[str] = None,
        ip_address: Optional[str] = None,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        note = require_max_length(note, "Note", MAX_NOTES_LENGTH)

        existing = self._attendance.get_for_employee_and_date(owner_id, employee.employee_id, today)
        if existing:
            raise AlreadyCheckedIn(existing)

        try:
            self._attendance.create_checkin(
                owner_id=owner_id,
                employee=employee,
                work_date=today,
                check_in_time=to_minute(now),
                location=location or UNKNOWN,
                ip_address=ip_address or UNKNOWN,
                note=note,
            )
        except DuplicateRecordError:
            winner = self._attendance.get_for_employee_and_date(owner_id, employee.employee_id, today)
            logger.warning("Concurrent check-in for employee %s on %s", employee.employee_id, today)
            raise AlreadyCheckedIn(winner)

        record = self._attendance.get_for_employee_and_date(owner_id, employee.employee_id, today)
        logger.info("Employee %s checked in at %s", employee.employee_id, record.check_in_time)
        return record

    def check_out(self, owner_id: int, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(owner_id, employee_id, today)
        if not record:
            raise NoCheckInFound("No check-in record found for today")
        if record.is_checked_out:
            raise AlreadyCheckedOut("Employee already checked out today")

        check_out_time = to_minute(now)
        duration = compute_duration(record.work_date, record.check_in_time, check_out_time)

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=check_out_time,
            duration=duration,
            status=AttendanceStatus.COMPLETED,
        )
        if not updated:
            logger.warning("Concurrent check-out for employee %s on %s", employee_id, today)
            raise AlreadyCheckedOut("Employee already checked out today")

        logger.info("Employee %s checked out (%s)", employee_id, duration or "no duration")
        return self._attendance.get_for_employee_and_date(owner_id, employee_id, today)

    def get_today(self, owner_id: int, employee_id: int, *, today: date | None = None) -> Optional[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.get_for_employee_and_date(owner_id, employee_id, today)

    def history(
        self,
        owner_id: int,
        *,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        page: Any = 1,
        limit: Any = None,
    ) -> HistoryPage:
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")

        limit_n, offset = page_window(page, limit)
        records = self._attendance.list_for_owner(
            owner_id, employee_id=employee_id, start=start, end=end, limit=limit_n, offset=offset
        )
        total = self._attendance.count_for_owner(owner_id, employee_id=employee_id, start=start, end=end)
        return HistoryPage(records=list(records), total=total, page=offset // limit_n + 1, limit=limit_n)

    def records_for_date(self, owner_id: int, work_date: date) -> list[AttendanceRecord]:
        return list(self._attendance.list_for_date(owner_id, work_date))

    def stats(self, owner_id: int, *, start: Optional[date] = None, end: Optional[date] = None) -> AttendanceStats:
        records = self._attendance.list_for_owner(owner_id, start=start, end=end)

        by_dept: "OrderedDict[str, list[int]]" = OrderedDict()
        completed = working = 0
        for r in records:
            done = r.status == AttendanceStatus.COMPLETED
            completed += done
            working += r.status == AttendanceStatus.WORKING

            counts = by_dept.setdefault(r.employee.department, [0, 0])
            counts[0] += 1
            counts[1] += done

        departments = [DepartmentStat(department=d, count=c[0], completed=c[1]) for d, c in by_dept.items()]
        departments.sort(key=lambda s: (-s.count, s.department))

        return AttendanceStats(
            total_records=len(records),
            completed_days=completed,
            working_days=working,
            departments=departments,
        )
