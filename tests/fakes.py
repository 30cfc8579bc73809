"""In-memory repositories shared by the test suite (no MySQL needed)."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Iterable, Optional

from src.staff_hive.staff_hive.attendance.model import AttendanceRecord, EmployeeSnapshot
from src.staff_hive.staff_hive.core.enums import AttendanceStatus, EmployeeStatus, PayrollStatus
from src.staff_hive.staff_hive.core.exceptions import DuplicateRecordError
from src.staff_hive.staff_hive.employees.model import Employee
from src.staff_hive.staff_hive.payroll.model import PayrollFigures, PayrollRecord
from src.staff_hive.staff_hive.users.model import User


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self._by_id = {u.user_id: u for u in users}

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.email == email), None)


class InMemoryEmployees:
    def __init__(self, employees: Iterable[Employee] = ()):
        self._by_id = {e.employee_id: e for e in employees}

    def get_for_owner(self, owner_id: int, employee_id: int) -> Optional[Employee]:
        e = self._by_id.get(employee_id)
        return e if e and e.owner_id == owner_id else None

    def list_active_by_ids(self, owner_id: int, employee_ids: Iterable[int]):
        wanted = set(employee_ids)
        return [
            e
            for e in sorted(self._by_id.values(), key=lambda e: e.employee_id)
            if e.employee_id in wanted and e.owner_id == owner_id and e.is_active
        ]


class InMemoryAttendance:
    def __init__(self):
        self._by_key: dict[tuple[int, int, date], AttendanceRecord] = {}
        self._id = 0

    def get_for_employee_and_date(self, owner_id: int, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_key.get((owner_id, employee_id, work_date))

    def create_checkin(
        self,
        *,
        owner_id: int,
        employee: EmployeeSnapshot,
        work_date: date,
        check_in_time: time,
        location: str,
        ip_address: str,
        note=None,
    ) -> int:
        key = (owner_id, employee.employee_id, work_date)
        if key in self._by_key:
            raise DuplicateRecordError(key="owner_employee_date")

        self._id += 1
        self._by_key[key] = AttendanceRecord(
            attendance_id=self._id,
            owner_id=owner_id,
            employee=employee,
            work_date=work_date,
            check_in_time=check_in_time,
            location=location,
            ip_address=ip_address,
            note=note,
        )
        return self._id

    def update_checkout(self, *, attendance_id: int, check_out_time: time, duration, status: AttendanceStatus) -> bool:
        for key, rec in self._by_key.items():
            if rec.attendance_id == attendance_id and rec.check_out_time is None:
                self._by_key[key] = replace(rec, check_out_time=check_out_time, duration=duration, status=status)
                return True
        return False

    def _select(self, owner_id, employee_id=None, start=None, end=None):
        rows = [
            r
            for r in self._by_key.values()
            if r.owner_id == owner_id
            and (employee_id is None or r.employee_id == employee_id)
            and (start is None or r.work_date >= start)
            and (end is None or r.work_date <= end)
        ]
        rows.sort(key=lambda r: (r.work_date, r.check_in_time), reverse=True)
        return rows

    def list_for_owner(self, owner_id: int, *, employee_id=None, start=None, end=None, limit=None, offset=0):
        rows = self._select(owner_id, employee_id, start, end)
        return rows[offset:] if limit is None else rows[offset : offset + limit]

    def count_for_owner(self, owner_id: int, *, employee_id=None, start=None, end=None) -> int:
        return len(self._select(owner_id, employee_id, start, end))

    def list_for_date(self, owner_id: int, work_date: date):
        rows = [r for r in self._by_key.values() if r.owner_id == owner_id and r.work_date == work_date]
        return sorted(rows, key=lambda r: r.check_in_time)


class InMemoryPayroll:
    def __init__(self):
        self.records: dict[int, PayrollRecord] = {}
        self._id = 0

    def _clash(self, owner_id: int, employee_id: int, period: str, *, exclude: Optional[int] = None) -> bool:
        return any(
            r.owner_id == owner_id and r.employee_id == employee_id and r.period == period and r.payroll_id != exclude
            for r in self.records.values()
        )

    def get_for_owner(self, owner_id: int, payroll_id: int) -> Optional[PayrollRecord]:
        r = self.records.get(payroll_id)
        return r if r and r.owner_id == owner_id else None

    def find_for_period(self, owner_id: int, employee_id: int, period: str) -> Optional[PayrollRecord]:
        return next(
            (
                r
                for r in self.records.values()
                if r.owner_id == owner_id and r.employee_id == employee_id and r.period == period
            ),
            None,
        )

    def create(
        self,
        *,
        owner_id: int,
        employee_id: int,
        employee_name: str,
        period: str,
        figures: PayrollFigures,
        status: PayrollStatus,
        processed_at: datetime,
        notes=None,
    ) -> int:
        if self._clash(owner_id, employee_id, period):
            raise DuplicateRecordError(key="owner_employee_period")

        self._id += 1
        self.records[self._id] = PayrollRecord(
            payroll_id=self._id,
            owner_id=owner_id,
            employee_id=employee_id,
            employee_name=employee_name,
            period=period,
            base_salary=figures.base_salary,
            overtime=figures.overtime,
            bonuses=figures.bonuses,
            deductions=figures.deductions,
            total_amount=figures.total_amount,
            status=status,
            processed_at=processed_at,
            notes=notes,
        )
        return self._id

    def update(self, record: PayrollRecord) -> bool:
        current = self.get_for_owner(record.owner_id, record.payroll_id)
        if not current:
            return False
        if self._clash(record.owner_id, record.employee_id, record.period, exclude=record.payroll_id):
            raise DuplicateRecordError(key="owner_employee_period")
        self.records[record.payroll_id] = record
        return True

    def update_status(self, owner_id: int, payroll_id: int, status: PayrollStatus) -> bool:
        current = self.get_for_owner(owner_id, payroll_id)
        if not current:
            return False
        self.records[payroll_id] = replace(current, status=status)
        return True

    def _select(self, owner_id, period=None, status=None):
        rows = [
            r
            for r in self.records.values()
            if r.owner_id == owner_id and (period is None or r.period == period) and (status is None or r.status == status)
        ]
        return sorted(rows, key=lambda r: r.payroll_id, reverse=True)

    def list_for_owner(self, owner_id: int, *, period=None, status=None, limit=10, offset=0):
        return self._select(owner_id, period, status)[offset : offset + limit]

    def count_for_owner(self, owner_id: int, *, period=None, status=None) -> int:
        return len(self._select(owner_id, period, status))

    def delete(self, owner_id: int, payroll_id: int) -> bool:
        if not self.get_for_owner(owner_id, payroll_id):
            return False
        del self.records[payroll_id]
        return True


def make_employee(
    employee_id: int,
    *,
    owner_id: int = 1,
    salary: str = "100000",
    status: EmployeeStatus = EmployeeStatus.ACTIVE,
    department: str = "Engineering",
) -> Employee:
    return Employee(
        employee_id=employee_id,
        owner_id=owner_id,
        name=f"Employee {employee_id}",
        email=f"e{employee_id}@example.com",
        department=department,
        position="Engineer",
        salary=Decimal(salary),
        status=status,
    )
