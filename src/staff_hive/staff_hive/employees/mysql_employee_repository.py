from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, owner_id, name, email, department, position, salary, status"


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        owner_id=int(row["owner_id"]),
        name=row["name"],
        email=row["email"],
        department=row["department"],
        position=row.get("position") or "",
        salary=Decimal(str(row["salary"] or 0)),
        status=EmployeeStatus(row["status"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_owner(self, owner_id: int, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE owner_id=%s AND employee_id=%s",
                (int(owner_id), int(employee_id)),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_active_by_ids(self, owner_id: int, employee_ids: Iterable[int]) -> Sequence[Employee]:
        ids = sorted({int(i) for i in employee_ids})
        if not ids:
            return []

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE owner_id=%s AND status=%s AND employee_id IN ({placeholders})
                ORDER BY employee_id
                """,
                (int(owner_id), EmployeeStatus.ACTIVE.value, *ids),
            )
            return [_to_employee(r) for r in fetchall(cur)]
