from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    overtime = r.get("overtime_hours")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in=normalize_mysql_time(r.get("check_in")),
        check_out=normalize_mysql_time(r.get("check_out")),
        overtime_hours=float(overtime) if overtime is not None else None,
        is_payroll_processed=bool(r.get("is_payroll_processed")),
        note=r.get("note"),
    )


def mark_processed_with_cursor(cur, attendance_ids: Sequence[int]) -> int:
    """Shared by the payroll repository so marking joins its transaction."""
    ids = [int(i) for i in attendance_ids]
    if not ids:
        return 0
    cur.execute(
        f"UPDATE attendance_records SET is_payroll_processed=1 WHERE attendance_id IN ({in_clause(ids)})",
        tuple(ids),
    )
    return int(cur.rowcount)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_between(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, employee_id, work_date, status, check_in, check_out,
                       overtime_hours, is_payroll_processed, note
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def mark_processed(self, attendance_ids: Sequence[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return mark_processed_with_cursor(cur, attendance_ids)
