from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from src.staff_hive.staff_hive.attendance.service import AttendanceTimekeeper
from src.staff_hive.staff_hive.container import Container
from src.staff_hive.staff_hive.core.enums import Role
from src.staff_hive.staff_hive.main import create_app
from src.staff_hive.staff_hive.payroll.service import PayrollService
from src.staff_hive.staff_hive.users.model import User
from src.staff_hive.staff_hive.users.service import AuthService
from tests.fakes import InMemoryAttendance, InMemoryEmployees, InMemoryPayroll, InMemoryUsers


@pytest.fixture
def container(employees):
    users = InMemoryUsers(
        [
            User(1, "Admin", "admin@example.com", generate_password_hash("secret1"), Role.ADMIN),
            User(2, "Clerk", "clerk@example.com", generate_password_hash("secret2"), Role.USER),
        ]
    )
    employees_repo = InMemoryEmployees(employees)
    attendance_repo = InMemoryAttendance()
    payroll_repo = InMemoryPayroll()
    return Container(
        conn=None,
        users_repo=users,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        auth_service=AuthService(users),
        attendance_timekeeper=AttendanceTimekeeper(attendance_repo, employees_repo),
        payroll_service=PayrollService(payroll_repo, employees_repo),
    )


@pytest.fixture
def client(container):
    app = create_app(container=container, settings_module="config.testing")
    return app.test_client()


def _login(client, email="admin@example.com", password="secret1"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_and_logout(client):
    res = _login(client)
    assert res.status_code == 200
    assert res.get_json()["data"]["role"] == "admin"

    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/payroll").status_code == 401


def test_bad_credentials_are_401(client):
    res = _login(client, password="wrong")
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_requires_login(client):
    assert client.post("/api/attendance/checkin", json={"employeeId": 1}).status_code == 401


def test_admin_routes_forbid_plain_users(client):
    _login(client, "clerk@example.com", "secret2")
    res = client.post("/api/payroll/generate", json={"employeeIds": [1]})
    assert res.status_code == 403


def test_checkin_checkout_flow(client, monkeypatch):
    import src.staff_hive.staff_hive.attendance.service as attendance_service

    clock = iter([datetime(2024, 5, 14, 9, 0), datetime(2024, 5, 14, 17, 30)])
    monkeypatch.setattr(attendance_service, "now_local", lambda: next(clock))
    _login(client)

    res = client.post("/api/attendance/checkin", json={"employeeId": 1, "location": "HQ"})
    assert res.status_code == 201
    assert res.get_json()["data"]["checkInTime"] == "09:00"

    res = client.put("/api/attendance/checkout", json={"employeeId": 1})
    body = res.get_json()
    assert res.status_code == 200
    assert body["data"]["duration"] == "8h 30m"
    assert body["data"]["status"] == "completed"


def test_double_checkin_returns_existing_record(client, monkeypatch):
    import src.staff_hive.staff_hive.attendance.service as attendance_service

    monkeypatch.setattr(attendance_service, "now_local", lambda: datetime(2024, 5, 14, 9, 0))
    _login(client)

    client.post("/api/attendance/checkin", json={"employeeId": 1})
    res = client.post("/api/attendance/checkin", json={"employeeId": 1})

    assert res.status_code == 400
    assert res.get_json()["message"] == "Employee already checked in today"
    assert res.get_json()["data"]["employeeId"] == 1


def test_checkout_without_checkin_is_404(client):
    _login(client)
    assert client.put("/api/attendance/checkout", json={"employeeId": 1}).status_code == 404


def test_generate_and_duplicate_add(client):
    _login(client)

    res = client.post("/api/payroll/generate", json={"employeeIds": [1, 2, 3, 4], "period": "2024-05"})
    body = res.get_json()
    assert res.status_code == 201
    assert body["data"]["count"] == 3
    assert body["data"]["generated"][0]["totalAmount"] == 94500.0

    res = client.post("/api/payroll", json={"employeeId": 1, "period": "2024-05"})
    assert res.status_code == 400

    res = client.post("/api/payroll/generate", json={"employeeIds": [4]})
    assert res.status_code == 404


def test_update_ignores_total_from_request(client):
    _login(client)
    created = client.post("/api/payroll", json={"employeeId": 1, "period": "2024-05"}).get_json()["data"]

    res = client.put(f"/api/payroll/{created['id']}", json={"baseSalary": 200000, "totalAmount": 1})
    assert res.status_code == 200
    assert res.get_json()["data"]["totalAmount"] == 189000.0


def test_validation_error_is_400(client):
    _login(client)
    res = client.post("/api/payroll", json={"employeeId": 1, "period": "May 2024"})
    assert res.status_code == 400


def _check_in_three(client, monkeypatch):
    import src.staff_hive.staff_hive.attendance.service as attendance_service

    monkeypatch.setattr(attendance_service, "now_local", lambda: datetime(2024, 5, 14, 9, 0))
    _login(client)
    for employee_id in (1, 2, 3):
        client.post("/api/attendance/checkin", json={"employeeId": employee_id})
    client.put("/api/attendance/checkout", json={"employeeId": 2})


def test_history_lists_records_with_pagination(client, monkeypatch):
    _check_in_three(client, monkeypatch)

    body = client.get("/api/attendance/history?limit=2").get_json()

    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


def test_records_for_date_include_count(client, monkeypatch):
    _check_in_three(client, monkeypatch)

    body = client.get("/api/attendance/admin/date/2024-05-14").get_json()

    assert body["count"] == 3
    assert [r["employeeId"] for r in body["data"]] == [1, 2, 3]


def test_stats_summary_and_department_breakdown(client, monkeypatch):
    _check_in_three(client, monkeypatch)

    data = client.get("/api/attendance/admin/stats").get_json()["data"]

    assert data["summary"] == {"totalRecords": 3, "completedDays": 1, "workingDays": 2}
    breakdown = {d["department"]: (d["count"], d["completed"]) for d in data["departmentBreakdown"]}
    assert breakdown == {"Engineering": (2, 0), "Sales": (1, 1)}


def test_payroll_list_envelope(client):
    _login(client)
    client.post("/api/payroll/generate", json={"employeeIds": [1, 2, 3], "period": "2024-05"})

    body = client.get("/api/payroll?limit=2").get_json()

    assert (body["count"], body["total"], body["page"], body["pages"]) == (2, 3, 1, 2)
    assert len(body["data"]) == 2


def test_generate_ignores_malformed_ids(client):
    _login(client)
    res = client.post("/api/payroll/generate", json={"employeeIds": [1, "abc", 0], "period": "2024-05"})

    assert res.status_code == 201
    assert [r["employeeId"] for r in res.get_json()["data"]["generated"]] == [1]


def test_non_text_employee_name_is_400(client):
    _login(client)
    res = client.post("/api/payroll", json={"employeeId": 1, "period": "2024-05", "employeeName": 42})
    assert res.status_code == 400
