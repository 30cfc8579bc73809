from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_for_owner(self, owner_id: int, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active_by_ids(self, owner_id: int, employee_ids: Iterable[int]) -> Sequence[Employee]:
        """Employees among `employee_ids` owned by `owner_id` with status active."""

        raise NotImplementedError
