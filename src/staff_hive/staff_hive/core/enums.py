from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for authorization checks."""

    ADMIN = "admin"
    USER = "user"


class AttendanceStatus(str, Enum):
    WORKING = "working"
    COMPLETED = "completed"
    ABSENT = "absent"


class PayrollStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"
