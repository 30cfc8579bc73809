from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.validators import require_rate
from ..core.constants import DEFAULT_BONUS_RATE, DEFAULT_PENSION_RATE, DEFAULT_TAX_RATE
from ..core.enums import PayrollStatus

ZERO = Decimal("0")

RATE_VARIABLES = {"bonus": "PAYROLL_BONUS_RATE", "tax": "PAYROLL_TAX_RATE", "pension": "PAYROLL_PENSION_RATE"}


@dataclass(frozen=True)
class RateTable:
    """Fixed percentages of base salary used by the payroll calculator."""

    bonus_rate: Decimal = DEFAULT_BONUS_RATE
    tax_rate: Decimal = DEFAULT_TAX_RATE
    pension_rate: Decimal = DEFAULT_PENSION_RATE

    @classmethod
    def from_mapping(cls, rates: Optional[Mapping[str, Any]]) -> "RateTable":
        """Build from {"bonus", "tax", "pension"} overrides; errors name the env variable."""
        rates = rates or {}
        return cls(
            bonus_rate=require_rate(rates.get("bonus", DEFAULT_BONUS_RATE), RATE_VARIABLES["bonus"]),
            tax_rate=require_rate(rates.get("tax", DEFAULT_TAX_RATE), RATE_VARIABLES["tax"]),
            pension_rate=require_rate(rates.get("pension", DEFAULT_PENSION_RATE), RATE_VARIABLES["pension"]),
        )


@dataclass(frozen=True)
class Deductions:
    tax: Decimal = ZERO
    pension: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.tax + self.pension + self.other


@dataclass(frozen=True)
class PayrollFigures:
    """Calculator output: every derived amount for one base salary."""

    base_salary: Decimal
    overtime: Decimal
    bonuses: Decimal
    deductions: Deductions
    total_amount: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    owner_id: int
    employee_id: int
    employee_name: str
    period: str
    base_salary: Decimal
    overtime: Decimal
    bonuses: Decimal
    deductions: Deductions
    total_amount: Decimal
    status: PayrollStatus = PayrollStatus.PENDING
    processed_at: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a bulk sweep: created records and names of employees already paid."""

    generated: list[PayrollRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.generated)


@dataclass(frozen=True)
class PayrollPage:
    records: list[PayrollRecord]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0
