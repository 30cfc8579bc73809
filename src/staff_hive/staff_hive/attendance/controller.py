from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, current_owner_id, json_body, login_required, ok
from ..common.validators import require_id
from ..container import Container
from ..core.constants import DATE_FORMAT, TIME_FORMAT
from .model import AttendanceRecord, AttendanceStats


def _clock(value) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value else None


def serialize_record(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "employeeId": r.employee.employee_id,
        "name": r.employee.name,
        "department": r.employee.department,
        "email": r.employee.email,
        "date": r.work_date.strftime(DATE_FORMAT),
        "checkInTime": _clock(r.check_in_time),
        "checkOutTime": _clock(r.check_out_time),
        "duration": r.duration,
        "status": r.status.value,
        "location": r.location,
        "ipAddress": r.ip_address,
        "notes": r.note,
    }


def serialize_stats(s: AttendanceStats) -> dict:
    return {
        "summary": {
            "totalRecords": s.total_records,
            "completedDays": s.completed_days,
            "workingDays": s.working_days,
        },
        "departmentBreakdown": [
            {"department": d.department, "count": d.count, "completed": d.completed} for d in s.departments
        ],
    }


def _optional_date(name: str):
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def register(app: Flask, container: Container) -> None:
    timekeeper = container.attendance_timekeeper

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @login_required
    def checkin():
        body = json_body()
        owner_id = current_owner_id()
        employee = timekeeper.snapshot_for(owner_id, require_id(body.get("employeeId"), "employeeId"))

        record = timekeeper.check_in(
            owner_id,
            employee,
            location=body.get("location"),
            ip_address=body.get("ipAddress") or request.remote_addr,
            note=body.get("notes"),
        )
        return ok(serialize_record(record), "Check-in successful", 201)

    @app.route("/api/attendance/checkout", methods=["PUT"], endpoint="attendance_checkout")
    @login_required
    def checkout():
        body = json_body()
        record = timekeeper.check_out(current_owner_id(), require_id(body.get("employeeId"), "employeeId"))
        return ok(serialize_record(record), "Check-out successful")

    @app.route("/api/attendance/today/<int:employee_id>", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today(employee_id: int):
        record = timekeeper.get_today(current_owner_id(), employee_id)
        return ok(serialize_record(record) if record else None)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        employee_id = request.args.get("employeeId")
        result = timekeeper.history(
            current_owner_id(),
            employee_id=require_id(employee_id, "employeeId") if employee_id else None,
            start=_optional_date("startDate"),
            end=_optional_date("endDate"),
            page=request.args.get("page"),
            limit=request.args.get("limit"),
        )
        return ok(
            [serialize_record(r) for r in result.records],
            pagination={"page": result.page, "limit": result.limit, "total": result.total, "pages": result.pages},
        )

    @app.route("/api/attendance/admin/date/<string:work_date>", methods=["GET"], endpoint="attendance_by_date")
    @admin_required
    def by_date(work_date: str):
        records = timekeeper.records_for_date(current_owner_id(), parse_iso_date(work_date))
        return ok([serialize_record(r) for r in records], count=len(records))

    @app.route("/api/attendance/admin/stats", methods=["GET"], endpoint="attendance_stats")
    @admin_required
    def stats():
        result = timekeeper.stats(current_owner_id(), start=_optional_date("startDate"), end=_optional_date("endDate"))
        return ok(serialize_stats(result))
