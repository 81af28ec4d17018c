from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmployeeProfile


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[EmployeeProfile]:
        raise NotImplementedError

    def list_active(self) -> Sequence[EmployeeProfile]:
        """Active employees ordered by employee id."""

        raise NotImplementedError
