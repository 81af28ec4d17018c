"""In-memory repositories shared by the payroll tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
from threading import Lock

from src.textile_payroll.textile_payroll.attendance.model import AttendanceRecord
from src.textile_payroll.textile_payroll.core.enums import AttendanceStatus


class FakeEmployeesRepo:
    def __init__(self, employees):
        self._employees = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._employees.get(int(employee_id))

    def list_active(self):
        return [self._employees[k] for k in sorted(self._employees, reverse=True)]


class FakeAttendanceRepo:
    def __init__(self):
        self.records: list[AttendanceRecord] = []
        self.processed: list[int] = []
        self.fail_marking = False

    def add_present(self, employee_id, start, end, **kw):
        day = start
        while day <= end:
            self.records.append(
                AttendanceRecord(
                    attendance_id=len(self.records) + 1,
                    employee_id=employee_id,
                    work_date=day,
                    status=AttendanceStatus.PRESENT,
                    **kw,
                )
            )
            day += timedelta(days=1)

    def get_for_employee_between(self, employee_id, start, end):
        return [r for r in self.records if r.employee_id == employee_id and start <= r.work_date <= end]

    def mark_processed(self, attendance_ids):
        if self.fail_marking:
            raise RuntimeError("attendance service down")
        self.processed.extend(attendance_ids)
        return len(attendance_ids)


class FakePayrollRepo:
    supports_transactions = False

    def __init__(self):
        self._rows = {}
        self._next_id = 1
        self._lock = Lock()
        self.saved_attendance_ids = []

    def get_by_id(self, payroll_id):
        return self._rows.get(int(payroll_id))

    def find_for_month(self, employee_id, month, year):
        for r in list(self._rows.values()):
            if (r.employee_id, r.month, r.year) == (employee_id, month, year):
                return r
        return None

    def list_for_employee(self, employee_id):
        rows = [r for r in list(self._rows.values()) if r.employee_id == employee_id]
        return sorted(rows, key=lambda r: r.pay_period.start, reverse=True)

    def list_recent(self, limit):
        return sorted(list(self._rows.values()), key=lambda r: r.pay_period.start, reverse=True)[:limit]

    def save(self, record, *, processed_attendance_ids=()):
        with self._lock:
            self.saved_attendance_ids.append(tuple(processed_attendance_ids))
            existing = self.find_for_month(record.employee_id, record.month, record.year)
            payroll_id = record.payroll_id or (existing.payroll_id if existing else None)
            if payroll_id is None:
                payroll_id = self._next_id
                self._next_id += 1
            stored = replace(record, payroll_id=payroll_id)
            self._rows[payroll_id] = stored
            return stored

    def delete(self, payroll_id):
        return self._rows.pop(int(payroll_id), None) is not None

    def count(self):
        return len(self._rows)


class TransactionalPayrollRepo(FakePayrollRepo):
    supports_transactions = True


class FakeSettingsRepo:
    def __init__(self):
        self._active = None

    def get_active(self):
        return self._active

    def save_active(self, settings):
        self._active = replace(settings, settings_id=settings.settings_id or 1)
        return self._active

    def delete_active(self):
        self._active = None


