from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class Employee:
    """Directory entry; read-only to attendance and payroll."""

    employee_id: int
    owner_id: int
    name: str
    email: str
    department: str
    position: str
    salary: Decimal
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
