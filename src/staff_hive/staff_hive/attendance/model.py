from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

from ..core.constants import UNKNOWN
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Employee fields copied onto each attendance record at check-in."""

    employee_id: int
    name: str
    department: str
    email: str


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's working day: a check-in, later a check-out."""

    attendance_id: int
    owner_id: int
    employee: EmployeeSnapshot
    work_date: date
    check_in_time: time
    check_out_time: Optional[time] = None
    duration: Optional[str] = None
    status: AttendanceStatus = AttendanceStatus.WORKING
    location: str = UNKNOWN
    ip_address: str = UNKNOWN
    note: Optional[str] = None

    @property
    def employee_id(self) -> int:
        return self.employee.employee_id

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None


@dataclass(frozen=True)
class HistoryPage:
    records: list[AttendanceRecord]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


@dataclass(frozen=True)
class DepartmentStat:
    department: str
    count: int
    completed: int


@dataclass(frozen=True)
class AttendanceStats:
    total_records: int
    completed_days: int
    working_days: int
    departments: list[DepartmentStat] = field(default_factory=list)
