from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmployeeProfile
from .repository import EmployeeRepository

_COLUMNS = "employee_id, employee_code, full_name, department, position, salary, status"


def _to_profile(r: dict) -> EmployeeProfile:
    return EmployeeProfile(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        salary=float(r["salary"]),
        employee_code=r.get("employee_code"),
        department=r.get("department"),
        position=r.get("position"),
        status=EmployeeStatus(r.get("status") or EmployeeStatus.ACTIVE.value),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[EmployeeProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def list_active(self) -> Sequence[EmployeeProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE status=%s ORDER BY employee_id ASC",
                (EmployeeStatus.ACTIVE.value,),
            )
            return [_to_profile(r) for r in fetchall(cur)]
