from __future__ import annotations

from decimal import Decimal
from typing import Any

from flask import Flask, request

from ..common.http import admin_required, current_owner_id, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import GenerationResult, PayrollRecord

# camelCase request keys -> service keys. Derived amounts are never read from a request.
_REQUEST_FIELDS = {
    "employeeId": "employee_id",
    "employeeName": "employee_name",
    "period": "period",
    "baseSalary": "base_salary",
    "overtime": "overtime",
    "otherDeductions": "other_deductions",
    "status": "status",
    "notes": "notes",
}


def _money(value: Decimal) -> float:
    return float(value)


def serialize_record(r: PayrollRecord) -> dict:
    return {
        "id": r.payroll_id,
        "employeeId": r.employee_id,
        "employeeName": r.employee_name,
        "period": r.period,
        "baseSalary": _money(r.base_salary),
        "overtime": _money(r.overtime),
        "bonuses": _money(r.bonuses),
        "deductions": {
            "tax": _money(r.deductions.tax),
            "pension": _money(r.deductions.pension),
            "other": _money(r.deductions.other),
        },
        "totalDeductions": _money(r.deductions.total),
        "totalAmount": _money(r.total_amount),
        "status": r.status.value,
        "processedDate": r.processed_at.isoformat() if r.processed_at else None,
        "notes": r.notes,
    }


def serialize_generation(result: GenerationResult) -> dict:
    return {
        "generated": [serialize_record(r) for r in result.generated],
        "skipped": list(result.skipped),
        "count": result.count,
    }


def payroll_input(body: dict) -> dict[str, Any]:
    data = {svc: body[key] for key, svc in _REQUEST_FIELDS.items() if key in body}
    deductions = body.get("deductions")
    if isinstance(deductions, dict) and "other" in deductions and "other_deductions" not in data:
        data["other_deductions"] = deductions["other"]
    return data


def register(app: Flask, container: Container) -> None:
    payroll = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @login_required
    def list_records():
        result = payroll.list_records(
            current_owner_id(),
            period=request.args.get("period"),
            status=request.args.get("status"),
            page=request.args.get("page"),
            limit=request.args.get("limit"),
        )
        return ok(
            [serialize_record(r) for r in result.records],
            count=len(result.records),
            total=result.total,
            page=result.page,
            pages=result.pages,
        )

    @app.route("/api/payroll/<int:record_id>", methods=["GET"], endpoint="payroll_get")
    @login_required
    def get_record(record_id: int):
        return ok(serialize_record(payroll.get_record(current_owner_id(), record_id)))

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @admin_required
    def generate():
        body = json_body()
        employee_ids = body.get("employeeIds") or []
        if not isinstance(employee_ids, list):
            raise ValidationError("employeeIds must be an array")
        result = payroll.generate_for_period(current_owner_id(), employee_ids, body.get("period"))

        message = f"Payroll generated for {result.count} employees"
        if result.skipped:
            message += (
                f". Skipped {len(result.skipped)} employees with existing payroll: {', '.join(result.skipped)}"
            )
        return ok(serialize_generation(result), message, 201)

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_add")
    @admin_required
    def add_record():
        record = payroll.add_record(current_owner_id(), payroll_input(json_body()))
        return ok(serialize_record(record), "Payroll record added successfully", 201)

    @app.route("/api/payroll/<int:record_id>", methods=["PUT"], endpoint="payroll_update")
    @admin_required
    def update_record(record_id: int):
        record = payroll.update_record(current_owner_id(), record_id, payroll_input(json_body()))
        return ok(serialize_record(record), "Payroll record updated successfully")

    @app.route("/api/payroll/<int:record_id>/status", methods=["PATCH"], endpoint="payroll_status")
    @admin_required
    def update_status(record_id: int):
        record = payroll.update_status(current_owner_id(), record_id, json_body().get("status"))
        return ok(serialize_record(record), "Payroll status updated successfully")

    @app.route("/api/payroll/<int:record_id>", methods=["DELETE"], endpoint="payroll_delete")
    @admin_required
    def delete_record(record_id: int):
        payroll.delete_record(current_owner_id(), record_id)
        return ok(message="Payroll record deleted successfully")
