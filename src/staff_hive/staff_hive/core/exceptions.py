from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFound(DomainError):
    """Raised when an employee or record does not exist for the caller's owner."""


class AlreadyCheckedIn(DomainError):
    """Raised on a second check-in for the same employee and day.

    The existing record is kept on the exception so callers can display it.
    """

    def __init__(self, record: Any, message: str = "Employee already checked in today"):
        super().__init__(message)
        self.record = record


class NoCheckInFound(DomainError):
    pass


class AlreadyCheckedOut(DomainError):
    pass


class DuplicatePayrollPeriod(DomainError):
    pass


class NoEligibleEmployees(DomainError):
    pass


class DuplicateRecordError(Exception):
    """Raised by repositories when the store rejects a write on a unique key.

    Not a domain error: services translate it into the matching domain error.
    """

    def __init__(self, message: str = "Duplicate record", *, key: Optional[str] = None):
        super().__init__(message)
        self.key = key
