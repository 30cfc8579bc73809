from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ...common.validators import require_amount
from ...core.exceptions import ValidationError
from ..model import Deductions, PayrollFigures, RateTable
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: bonus, tax and pension as fixed shares of base salary.

    total = base + overtime + bonuses - (tax + pension + other). Amounts are
    exact Decimal products; nothing is rounded.
    """

    def __init__(self, rates: Optional[RateTable] = None):
        self._rates = rates or RateTable()

    @property
    def rates(self) -> RateTable:
        return self._rates

    def compute(self, base_salary: Decimal, overtime: Decimal = Decimal("0"), other_deductions: Decimal = Decimal("0")) -> PayrollFigures:
        base = require_amount(base_salary, "base_salary")
        overtime = require_amount(overtime, "overtime")
        other = require_amount(other_deductions, "other_deductions")

        bonuses = base * self._rates.bonus_rate
        deductions = Deductions(
            tax=base * self._rates.tax_rate,
            pension=base * self._rates.pension_rate,
            other=other,
        )
        total = base + overtime + bonuses - deductions.total
        if total < 0:
            raise ValidationError("Deductions exceed gross pay")

        return PayrollFigures(
            base_salary=base,
            overtime=overtime,
            bonuses=bonuses,
            deductions=deductions,
            total_amount=total,
        )
