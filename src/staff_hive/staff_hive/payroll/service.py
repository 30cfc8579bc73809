from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import current_period, now_local, require_period
from ..common.validators import page_window, require_enum, require_id, require_max_length, require_non_empty
from ..core.constants import MAX_NOTES_LENGTH
from ..core.enums import PayrollStatus
from ..core.exceptions import DuplicatePayrollPeriod, DuplicateRecordError, NoEligibleEmployees, NotFound, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import GenerationResult, PayrollPage, PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

DUPLICATE_PERIOD_MESSAGE = "Payroll record already exists for this employee and period"


def _parse_ids(raw: Iterable[Any]) -> list[int]:
    """Ids that parse as positive integers; anything else is dropped like an unknown id."""
    ids = []
    for value in raw or []:
        try:
            ids.append(require_id(value, "employeeIds"))
        except ValidationError:
            logger.debug("Ignoring malformed employee id %r", value)
    return ids


class PayrollService:
    """Payroll records: one per owner, employee and period, amounts always derived."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    @property
    def calculator(self) -> PayrollCalculator:
        return self._calculator

    def generate_for_period(
        self,
        owner_id: int,
        employee_ids: Iterable[Any],
        period: Optional[str] = None,
        *,
        now: datetime | None = None,
    ) -> GenerationResult:
        """Create a completed record per active employee that has none for `period` yet."""

        now = now or now_local()
        period = require_period(period) if period else current_period(now.date())
        ids = _parse_ids(employee_ids)

        employees = self._employees.list_active_by_ids(owner_id, ids)
        if not employees:
            raise NoEligibleEmployees("No valid active employees found")

        result = GenerationResult()
        for employee in employees:
            if self._payroll.find_for_period(owner_id, employee.employee_id, period):
                result.skipped.append(employee.name)
                continue

            figures = self._calculator.compute(employee.salary)
            try:
                payroll_id = self._payroll.create(
                    owner_id=owner_id,
                    employee_id=employee.employee_id,
                    employee_name=employee.name,
                    period=period,
                    figures=figures,
                    status=PayrollStatus.COMPLETED,
                    processed_at=now,
                )
            except DuplicateRecordError:
                logger.warning("Concurrent payroll for employee %s in %s; skipped", employee.employee_id, period)
                result.skipped.append(employee.name)
                continue

            result.generated.append(self._payroll.get_for_owner(owner_id, payroll_id))

        logger.info(
            "Payroll %s for owner %s: %d generated, %d skipped",
            period,
            owner_id,
            result.count,
            len(result.skipped),
        )
        return result

    def add_record(self, owner_id: int, data: Mapping[str, Any], *, now: datetime | None = None) -> PayrollRecord:
        now = now or now_local()
        employee_id = require_id(data.get("employee_id"), "employeeId")
        period = require_period(data.get("period"))

        employee = self._employees.get_for_owner(owner_id, employee_id)
        if not employee:
            raise NotFound("Employee not found")

        if self._payroll.find_for_period(owner_id, employee_id, period):
            raise DuplicatePayrollPeriod(DUPLICATE_PERIOD_MESSAGE)

        base_salary = data.get("base_salary")
        figures = self._calculator.compute(
            employee.salary if base_salary is None else base_salary,
            data.get("overtime") or Decimal("0"),
            data.get("other_deductions") or Decimal("0"),
        )
        status = require_enum(PayrollStatus, data.get("status") or PayrollStatus.PENDING.value, "status")
        notes = require_max_length(data.get("notes"), "notes", MAX_NOTES_LENGTH)
        employee_name = employee.name
        if data.get("employee_name") is not None:
            employee_name = require_non_empty(data["employee_name"], "employeeName")

        try:
            payroll_id = self._payroll.create(
                owner_id=owner_id,
                employee_id=employee_id,
                employee_name=employee_name,
                period=period,
                figures=figures,
                status=status,
                processed_at=now,
                notes=notes,
            )
        except DuplicateRecordError:
            logger.warning("Concurrent payroll insert for employee %s in %s", employee_id, period)
            raise DuplicatePayrollPeriod(DUPLICATE_PERIOD_MESSAGE)

        logger.info("Payroll record %s added for employee %s (%s)", payroll_id, employee_id, period)
        return self._payroll.get_for_owner(owner_id, payroll_id)

    def update_record(self, owner_id: int, record_id: int, patch: Mapping[str, Any]) -> PayrollRecord:
        current = self.get_record(owner_id, record_id)
        updated = self._calculator.recompute(current, patch)

        if updated.employee_id != current.employee_id:
            employee = self._employees.get_for_owner(owner_id, updated.employee_id)
            if not employee:
                raise NotFound("Employee not found")
            if "employee_name" not in patch:
                updated = self._calculator.recompute(updated, {"employee_name": employee.name})

        if (updated.employee_id, updated.period) != (current.employee_id, current.period):
            clash = self._payroll.find_for_period(owner_id, updated.employee_id, updated.period)
            if clash and clash.payroll_id != current.payroll_id:
                raise DuplicatePayrollPeriod(DUPLICATE_PERIOD_MESSAGE)

        try:
            found = self._payroll.update(updated)
        except DuplicateRecordError:
            logger.warning("Concurrent payroll update clash on record %s", record_id)
            raise DuplicatePayrollPeriod(DUPLICATE_PERIOD_MESSAGE)
        if not found:
            raise NotFound("Payroll record not found")

        logger.info("Payroll record %s updated (total %s)", record_id, updated.total_amount)
        return self.get_record(owner_id, record_id)

    def update_status(self, owner_id: int, record_id: int, status: Any) -> PayrollRecord:
        new_status = require_enum(PayrollStatus, status, "status")
        if not self._payroll.update_status(owner_id, record_id, new_status):
            raise NotFound("Payroll record not found")
        logger.info("Payroll record %s status -> %s", record_id, new_status.value)
        return self.get_record(owner_id, record_id)

    def get_record(self, owner_id: int, record_id: int) -> PayrollRecord:
        record = self._payroll.get_for_owner(owner_id, record_id)
        if not record:
            raise NotFound("Payroll record not found")
        return record

    def list_records(
        self,
        owner_id: int,
        *,
        period: Optional[str] = None,
        status: Optional[str] = None,
        page: Any = 1,
        limit: Any = None,
    ) -> PayrollPage:
        period = require_period(period) if period else None
        status_enum = require_enum(PayrollStatus, status, "status") if status else None
        limit_n, offset = page_window(page, limit)

        records = self._payroll.list_for_owner(owner_id, period=period, status=status_enum, limit=limit_n, offset=offset)
        total = self._payroll.count_for_owner(owner_id, period=period, status=status_enum)
        return PayrollPage(records=list(records), total=total, page=offset // limit_n + 1, limit=limit_n)

    def delete_record(self, owner_id: int, record_id: int) -> None:
        if not self._payroll.delete(owner_id, record_id):
            raise NotFound("Payroll record not found")
        logger.info("Payroll record %s deleted", record_id)
