from __future__ import annotations

from datetime import date, time
from typing import Any, Dict, Optional, Sequence

from ..core.constants import UNKNOWN
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord, EmployeeSnapshot
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, owner_id, employee_id, employee_name, department, email,
    work_date, check_in_time, check_out_time, duration, status, location, ip_address, note
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        owner_id=int(r["owner_id"]),
        employee=EmployeeSnapshot(
            employee_id=int(r["employee_id"]),
            name=r["employee_name"],
            department=r["department"],
            email=r["email"],
        ),
        work_date=r["work_date"],
        check_in_time=normalize_mysql_time(r["check_in_time"]),
        check_out_time=normalize_mysql_time(r.get("check_out_time")),
        duration=r.get("duration"),
        status=AttendanceStatus(r["status"]),
        location=r.get("location") or UNKNOWN,
        ip_address=r.get("ip_address") or UNKNOWN,
        note=r.get("note"),
    )


def _owner_filter(
    owner_id: int,
    employee_id: Optional[int],
    start: Optional[date],
    end: Optional[date],
) -> tuple[str, list[object]]:
    clauses = ["owner_id=%s"]
    params: list[object] = [int(owner_id)]

    if employee_id is not None:
        clauses.append("employee_id=%s")
        params.append(int(employee_id))
    if start is not None:
        clauses.append("work_date >= %s")
        params.append(start)
    if end is not None:
        clauses.append("work_date <= %s")
        params.append(end)

    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, owner_id: int, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE owner_id=%s AND employee_id=%s AND work_date=%s
                """,
                (int(owner_id), int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        with db_cursor(self._conn_factory, unique_key="owner_employee_date") as cur:
            cur.execute(
                """
                INSERT INTO attendance_records(
                    owner_id, employee_id, employee_name, department, email,
                    work_date, check_in_time, status, location, ip_address, note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(owner_id),
                    employee.employee_id,
                    employee.name,
                    employee.department,
                    employee.email,
                    work_date,
                    check_in_time,
                    AttendanceStatus.WORKING.value,
                    location,
                    ip_address,
                    note,
                ),
            )
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: time,
        duration: Optional[str],
        status: AttendanceStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, duration=%s, status=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, duration, status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

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
        where, params = _owner_filter(owner_id, employee_id, start, end)
        sql = f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE {where}
            ORDER BY work_date DESC, check_in_time DESC
        """
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as cur:
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def count_for_owner(
        self,
        owner_id: int,
        *,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        where, params = _owner_filter(owner_id, employee_id, start, end)
        with db_cursor(self._conn_factory) as cur:
            cur.execute(f"SELECT COUNT(*) AS n FROM attendance_records WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def list_for_date(self, owner_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE owner_id=%s AND work_date=%s
                ORDER BY check_in_time ASC
                """,
                (int(owner_id), work_date),
            )
            return [_to_record(r) for r in fetchall(cur)]
