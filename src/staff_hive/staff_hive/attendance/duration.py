"""Working-time arithmetic for a single calendar day.

Both times are placed on the record's date and subtracted as naive
timestamps. There is no day rollover: a check-out that is not strictly
after the check-in yields no duration.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional


def worked_minutes(work_date: date, check_in: time, check_out: time) -> int:
    start = datetime.combine(work_date, check_in)
    end = datetime.combine(work_date, check_out)
    return int((end - start).total_seconds() // 60)


def format_duration(minutes: int) -> Optional[str]:
    """510 -> '8h 30m'; zero or negative -> None."""
    if minutes <= 0:
        return None
    return f"{minutes // 60}h {minutes % 60}m"


def compute_duration(work_date: date, check_in: time, check_out: time) -> Optional[str]:
    return format_duration(worked_minutes(work_date, check_in, check_out))
