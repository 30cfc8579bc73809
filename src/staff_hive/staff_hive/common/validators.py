from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Type, TypeVar

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_AMOUNT_DECIMALS, MAX_PAGE_SIZE, MAX_RATE_DECIMALS
from ..core.exceptions import ValidationError

E = TypeVar("E")


def require_non_empty(value: str, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return value


def require_amount(value: Any, field_name: str) -> Decimal:
    """Coerce a JSON number/string into a non-negative Decimal."""
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0:
        raise ValidationError(f"{field_name} must be positive")
    if amount.normalize().as_tuple().exponent < -MAX_AMOUNT_DECIMALS:
        raise ValidationError(f"{field_name} cannot have more than {MAX_AMOUNT_DECIMALS} decimal places")
    return amount


def require_rate(value: Any, field_name: str) -> Decimal:
    """Parse a payroll rate: finite, non-negative, at most MAX_RATE_DECIMALS places."""
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a non-negative number")
    if isinstance(value, bool) or not rate.is_finite() or rate < 0:
        raise ValidationError(f"{field_name} must be a non-negative number")
    if rate.normalize().as_tuple().exponent < -MAX_RATE_DECIMALS:
        raise ValidationError(f"{field_name} cannot have more than {MAX_RATE_DECIMALS} decimal places")
    return rate


def require_id(value: Any, field_name: str) -> int:
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if ident <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return ident


def require_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} is invalid")


def page_window(page: Any, limit: Any) -> tuple[int, int]:
    """Return (limit, offset) for a 1-based page number."""
    try:
        page_n = max(int(page or 1), 1)
        limit_n = int(limit or DEFAULT_PAGE_SIZE)
    except (TypeError, ValueError):
        raise ValidationError("page/limit must be integers")
    limit_n = min(max(limit_n, 1), MAX_PAGE_SIZE)
    return limit_n, (page_n - 1) * limit_n
