from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Deductions, PayrollFigures, PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, owner_id, employee_id, employee_name, period,
    base_salary, overtime, bonuses, tax, pension, other_deductions, total_amount,
    status, processed_at, notes
"""


def _dec(value: Any) -> Decimal:
    # DECIMAL columns come back as Decimal; normalize drops the storage scale padding.
    return Decimal(str(value or 0)).normalize()


def _to_record(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        owner_id=int(r["owner_id"]),
        employee_id=int(r["employee_id"]),
        employee_name=r["employee_name"],
        period=r["period"],
        base_salary=_dec(r["base_salary"]),
        overtime=_dec(r["overtime"]),
        bonuses=_dec(r["bonuses"]),
        deductions=Deductions(tax=_dec(r["tax"]), pension=_dec(r["pension"]), other=_dec(r["other_deductions"])),
        total_amount=_dec(r["total_amount"]),
        status=PayrollStatus(r["status"]),
        processed_at=r.get("processed_at"),
        notes=r.get("notes"),
    )


def _filters(owner_id: int, period: Optional[str], status: Optional[PayrollStatus]) -> tuple[str, list[object]]:
    clauses = ["owner_id=%s"]
    params: list[object] = [int(owner_id)]
    if period:
        clauses.append("period=%s")
        params.append(period)
    if status is not None:
        clauses.append("status=%s")
        params.append(status.value)
    return " AND ".join(clauses), params


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_owner(self, owner_id: int, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records WHERE owner_id=%s AND payroll_id=%s",
                (int(owner_id), int(payroll_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_for_period(self, owner_id: int, employee_id: int, period: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE owner_id=%s AND employee_id=%s AND period=%s
                """,
                (int(owner_id), int(employee_id), period),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory, unique_key="owner_employee_period") as cur:
            cur.execute(
                """
                INSERT INTO payroll_records(
                    owner_id, employee_id, employee_name, period,
                    base_salary, overtime, bonuses, tax, pension, other_deductions, total_amount,
                    status, processed_at, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(owner_id),
                    int(employee_id),
                    employee_name,
                    period,
                    figures.base_salary,
                    figures.overtime,
                    figures.bonuses,
                    figures.deductions.tax,
                    figures.deductions.pension,
                    figures.deductions.other,
                    figures.total_amount,
                    status.value,
                    processed_at,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def update(self, record: PayrollRecord) -> bool:
        with db_cursor(self._conn_factory, unique_key="owner_employee_period") as cur:
            cur.execute(
                """
                UPDATE payroll_records
                SET employee_id=%s, employee_name=%s, period=%s,
                    base_salary=%s, overtime=%s, bonuses=%s, tax=%s, pension=%s,
                    other_deductions=%s, total_amount=%s, status=%s, notes=%s
                WHERE owner_id=%s AND payroll_id=%s
                """,
                (
                    record.employee_id,
                    record.employee_name,
                    record.period,
                    record.base_salary,
                    record.overtime,
                    record.bonuses,
                    record.deductions.tax,
                    record.deductions.pension,
                    record.deductions.other,
                    record.total_amount,
                    record.status.value,
                    record.notes,
                    record.owner_id,
                    record.payroll_id,
                ),
            )
            return cur.rowcount > 0

    def update_status(self, owner_id: int, payroll_id: int, status: PayrollStatus) -> bool:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                "UPDATE payroll_records SET status=%s WHERE owner_id=%s AND payroll_id=%s",
                (status.value, int(owner_id), int(payroll_id)),
            )
            return cur.rowcount > 0

    def list_for_owner(
        self,
        owner_id: int,
        *,
        period: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[PayrollRecord]:
        where, params = _filters(owner_id, period, status)
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE {where}
                ORDER BY created_at DESC, payroll_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, int(limit), int(offset)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_for_owner(self, owner_id: int, *, period: Optional[str] = None, status: Optional[PayrollStatus] = None) -> int:
        where, params = _filters(owner_id, period, status)
        with db_cursor(self._conn_factory) as cur:
            cur.execute(f"SELECT COUNT(*) AS n FROM payroll_records WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def delete(self, owner_id: int, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                "DELETE FROM payroll_records WHERE owner_id=%s AND payroll_id=%s",
                (int(owner_id), int(payroll_id)),
            )
            return cur.rowcount > 0
