from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicatePayrollPeriod,
    NoCheckInFound,
    NoEligibleEmployees,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (AlreadyCheckedIn, 400),
    (AlreadyCheckedOut, 400),
    (DuplicatePayrollPeriod, 400),
    (ValidationError, 400),
    (NoCheckInFound, 404),
    (NoEligibleEmployees, 404),
    (NotFound, 404),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
)


def ok(data: Any = None, message: str = "", status: int = 200, **extra: Any):
    """Success envelope; `extra` adds top-level keys such as count or pagination."""
    return jsonify({"success": True, "message": message, "data": data, **extra}), status


def fail(message: str, status: int, data: Any = None):
    return jsonify({"success": False, "message": message, "data": data}), status


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def current_owner_id() -> int:
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Authentication required", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("Admin access required", 403)
        return view(*args, **kwargs)

    return wrapper


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def register_error_handlers(app: Flask, *, serialize_attendance=None) -> None:
    """Map domain errors to JSON responses; anything else is a logged 500.

    `serialize_attendance` turns the record carried by AlreadyCheckedIn into JSON.
    """

    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        data = None
        if isinstance(error, AlreadyCheckedIn) and error.record is not None and serialize_attendance:
            data = serialize_attendance(error.record)
        return fail(str(error), status_for(error), data)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return fail(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return fail(f"Server error: {error}", 500)
        return fail("Server error", 500)
