from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_between(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records with ``work_date`` in [start, end], oldest first."""

        raise NotImplementedError

    def mark_processed(self, attendance_ids: Sequence[int]) -> int:
        """Flag records as consumed by a payroll. Returns the number updated."""

        raise NotImplementedError
