from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceTimekeeper
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.model import RateTable
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    payroll_repo: PayrollRepository

    auth_service: AuthService
    attendance_timekeeper: AttendanceTimekeeper
    payroll_service: PayrollService


def build_container(*, db_config: Mapping[str, Any], payroll_rates: Optional[Mapping[str, Any]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)

    calculator = StandardPayrollCalculator(RateTable.from_mapping(payroll_rates))

    return Container(
        conn=conn,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        auth_service=AuthService(users_repo),
        attendance_timekeeper=AttendanceTimekeeper(attendance_repo, employees_repo),
        payroll_service=PayrollService(payroll_repo, employees_repo, calculator=calculator),
    )
