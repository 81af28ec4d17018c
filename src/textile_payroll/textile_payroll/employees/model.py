from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class EmployeeProfile:
    """Read-only employee view consumed by payroll (owned by the HR module)."""

    employee_id: int
    full_name: str
    salary: float
    employee_code: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
