from __future__ import annotations

import re
from datetime import date, datetime, time

from ..core.constants import DATE_FORMAT, PERIOD_FORMAT
from ..core.exceptions import ValidationError

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def to_minute(value: datetime) -> time:
    """Time-of-day of `value`, truncated to the minute."""
    return value.time().replace(second=0, microsecond=0)


def current_period(today: date) -> str:
    return today.strftime(PERIOD_FORMAT)


def require_period(value: str) -> str:
    period = (value or "").strip()
    if not _PERIOD_RE.match(period):
        raise ValidationError("Period must be in YYYY-MM format")
    return period


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
