from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, EmployeeSnapshot


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, owner_id: int, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        owner_id: int,
        employee: EmployeeSnapshot,
        work_date: date,
        check_in_time: time,
        location: str,
        ip_address: str,
        note: Optional[str] = None,
    ) -> int:
        """Insert a working record; raises DuplicateRecordError if the day is taken."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: time,
        duration: Optional[str],
        status: AttendanceStatus,
    ) -> bool:
        """Set the check-out only while it is still empty. False when no row matched."""

        raise NotImplementedError

    def list_for_owner(
        self,
        owner_id: int,
        *,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[AttendanceRecord]:
        """Newest day first, then latest check-in."""

        raise NotImplementedError

    def count_for_owner(
        self,
        owner_id: int,
        *,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_date(self, owner_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        """All records of one day, earliest check-in first."""

        raise NotImplementedError
