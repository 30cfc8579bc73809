from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollFigures, PayrollRecord


class PayrollRepository(Protocol):
    def get_for_owner(self, owner_id: int, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def find_for_period(self, owner_id: int, employee_id: int, period: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

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
        """Insert a record; raises DuplicateRecordError if (owner, employee, period) is taken."""

        raise NotImplementedError

    def update(self, record: PayrollRecord) -> bool:
        """Persist every editable and derived field; raises DuplicateRecordError on key clash."""

        raise NotImplementedError

    def update_status(self, owner_id: int, payroll_id: int, status: PayrollStatus) -> bool:
        raise NotImplementedError

    def list_for_owner(
        self,
        owner_id: int,
        *,
        period: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[PayrollRecord]:
        """Newest first."""

        raise NotImplementedError

    def count_for_owner(self, owner_id: int, *, period: Optional[str] = None, status: Optional[PayrollStatus] = None) -> int:
        raise NotImplementedError

    def delete(self, owner_id: int, payroll_id: int) -> bool:
        raise NotImplementedError
