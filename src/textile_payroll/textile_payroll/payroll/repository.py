from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PayrollRecord


class PayrollRepository(Protocol):
    # True when save() marks the consumed attendance in its own transaction.
    supports_transactions: bool

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def find_for_month(self, employee_id: int, month: int, year: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        """Newest pay period first."""

        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def save(self, record: PayrollRecord, *, processed_attendance_ids: Sequence[int] = ()) -> PayrollRecord:
        """Insert or update keyed by (employee_id, month, year); returns the stored record."""

        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        raise NotImplementedError
