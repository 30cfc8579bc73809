from __future__ import annotations

from datetime import datetime

import pytest

from src.staff_hive.staff_hive.core.enums import EmployeeStatus
from tests.fakes import make_employee


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 5, 14, 9, 0, 27)


@pytest.fixture
def employees():
    """Owner 1: three active (100000, 200000, 0) and one inactive; owner 2: one active."""
    return [
        make_employee(1, salary="100000"),
        make_employee(2, salary="200000", department="Sales"),
        make_employee(3, salary="0"),
        make_employee(4, salary="50000", status=EmployeeStatus.INACTIVE),
        make_employee(5, owner_id=2, salary="80000"),
    ]
