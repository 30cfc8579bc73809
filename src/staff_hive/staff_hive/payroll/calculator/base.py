from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from decimal import Decimal
from typing import Any, Mapping

from ...common.datetime_utils import require_period
from ...common.validators import require_amount, require_enum, require_id, require_max_length, require_non_empty
from ...core.constants import MAX_NOTES_LENGTH
from ...core.enums import PayrollStatus
from ..model import PayrollFigures, PayrollRecord

# Fields a caller may change; everything else on a record is derived or fixed.
EDITABLE_FIELDS = (
    "employee_id",
    "employee_name",
    "period",
    "base_salary",
    "overtime",
    "other_deductions",
    "status",
    "notes",
)


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, base_salary: Decimal, overtime: Decimal = Decimal("0"), other_deductions: Decimal = Decimal("0")) -> PayrollFigures:
        raise NotImplementedError

    def recompute(self, current: PayrollRecord, patch: Mapping[str, Any]) -> PayrollRecord:
        """Merge `patch` over `current` and re-derive every computed amount.

        Pure: nothing is persisted. Derived keys in the patch (bonuses, tax,
        pension, total_amount) are ignored. Raises ValidationError on bad input.
        """

        changes: dict[str, Any] = {}
        for key in EDITABLE_FIELDS:
            if key not in patch:
                continue
            value = patch[key]
            if key == "employee_id":
                changes[key] = require_id(value, "employeeId")
            elif key == "employee_name":
                changes[key] = require_non_empty(value, "employeeName")
            elif key == "period":
                changes[key] = require_period(value)
            elif key in ("base_salary", "overtime", "other_deductions"):
                changes[key] = require_amount(value, key)
            elif key == "status":
                changes[key] = require_enum(PayrollStatus, value, "status")
            elif key == "notes":
                changes[key] = require_max_length(value, "notes", MAX_NOTES_LENGTH)

        figures = self.compute(
            changes.pop("base_salary", current.base_salary),
            changes.pop("overtime", current.overtime),
            changes.pop("other_deductions", current.deductions.other),
        )

        return replace(
            current,
            **changes,
            base_salary=figures.base_salary,
            overtime=figures.overtime,
            bonuses=figures.bonuses,
            deductions=figures.deductions,
            total_amount=figures.total_amount,
        )
