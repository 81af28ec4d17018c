from __future__ import annotations

import json
from dataclasses import replace
from typing import Optional, Sequence

from ..attendance.mysql_attendance_repository import mark_processed_with_cursor
from ..core.enums import PaymentMethod, PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json
from .model import (
    AllowanceLines,
    AttendanceSummary,
    DeductionLines,
    EarningsOverrides,
    OvertimeLine,
    PayPeriod,
    PayrollRecord,
    PreviewOptions,
)
from .repository import PayrollRepository

_SELECT = """
    SELECT p.payroll_id, p.employee_id, e.full_name, p.pay_month, p.pay_year,
           p.period_start, p.period_end, p.basic_salary,
           p.overtime_hours, p.overtime_rate, p.overtime_amount,
           p.allowances_json, p.deductions_json,
           p.total_earnings, p.total_deductions, p.net_salary,
           p.attendance_json, p.options_json, p.overrides_json,
           p.payment_status, p.payment_method, p.payment_date, p.transaction_id, p.remarks
    FROM payrolls p
    JOIN employees e ON e.employee_id = p.employee_id
"""


def _to_record(r: dict) -> PayrollRecord:
    attendance = load_json(r["attendance_json"], {})
    options = load_json(r["options_json"], {})
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        employee_name=r.get("full_name") or "",
        pay_period=PayPeriod(start=r["period_start"], end=r["period_end"]),
        basic_salary=float(r["basic_salary"]),
        overtime=OvertimeLine(
            hours=float(r["overtime_hours"]),
            rate=float(r["overtime_rate"]),
            amount=float(r["overtime_amount"]),
        ),
        allowances=AllowanceLines.from_dict(load_json(r["allowances_json"], {})),
        deductions=DeductionLines.from_dict(load_json(r["deductions_json"], {})),
        total_earnings=float(r["total_earnings"]),
        total_deductions=float(r["total_deductions"]),
        net_salary=float(r["net_salary"]),
        effective_working_days=float(attendance.pop("effectiveWorkingDays", 0.0)),
        attendance=AttendanceSummary.from_dict({"employeeId": r["employee_id"], **attendance}),
        options=PreviewOptions.from_dict(options),
        overrides=EarningsOverrides.from_dict(load_json(r.get("overrides_json"), {})),
        payment_status=PaymentStatus(r["payment_status"]),
        payment_method=PaymentMethod(r["payment_method"]),
        payment_date=r.get("payment_date"),
        transaction_id=r.get("transaction_id"),
        remarks=r.get("remarks"),
    )


class MySQLPayrollRepository(PayrollRepository):
    supports_transactions = True

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_for_month(self, employee_id: int, month: int, year: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE p.employee_id=%s AND p.pay_month=%s AND p.pay_year=%s",
                (int(employee_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.employee_id=%s ORDER BY p.period_start DESC", (int(employee_id),))
            return [_to_record(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY p.period_start DESC, p.payroll_id DESC LIMIT %s", (int(limit),))
            return [_to_record(r) for r in fetchall(cur)]

    def save(self, record: PayrollRecord, *, processed_attendance_ids: Sequence[int] = ()) -> PayrollRecord:
        attendance = {**record.attendance.to_dict(), "effectiveWorkingDays": record.effective_working_days}
        overrides = None if record.overrides.is_empty else json.dumps(record.overrides.to_dict())
        params = (
            record.employee_id,
            record.month,
            record.year,
            record.pay_period.start,
            record.pay_period.end,
            record.basic_salary,
            record.overtime.hours,
            record.overtime.rate,
            record.overtime.amount,
            json.dumps(record.allowances.to_dict()),
            json.dumps(record.deductions.to_dict()),
            record.total_earnings,
            record.total_deductions,
            record.net_salary,
            json.dumps(attendance),
            json.dumps(record.options.to_dict()),
            overrides,
            record.payment_status.value,
            record.payment_method.value,
            record.payment_date,
            record.transaction_id,
            record.remarks,
        )

        with db_cursor(self._conn_factory) as (_, cur):
            # The unique key (employee_id, pay_month, pay_year) turns a concurrent
            # second insert into an update of the same row.
            cur.execute(
                """
                INSERT INTO payrolls(
                    employee_id, pay_month, pay_year, period_start, period_end, basic_salary,
                    overtime_hours, overtime_rate, overtime_amount, allowances_json, deductions_json,
                    total_earnings, total_deductions, net_salary, attendance_json, options_json,
                    overrides_json, payment_status, payment_method, payment_date, transaction_id, remarks
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    payroll_id=LAST_INSERT_ID(payroll_id),
                    period_start=VALUES(period_start), period_end=VALUES(period_end),
                    basic_salary=VALUES(basic_salary), overtime_hours=VALUES(overtime_hours),
                    overtime_rate=VALUES(overtime_rate), overtime_amount=VALUES(overtime_amount),
                    allowances_json=VALUES(allowances_json), deductions_json=VALUES(deductions_json),
                    total_earnings=VALUES(total_earnings), total_deductions=VALUES(total_deductions),
                    net_salary=VALUES(net_salary), attendance_json=VALUES(attendance_json),
                    options_json=VALUES(options_json), overrides_json=VALUES(overrides_json),
                    payment_status=VALUES(payment_status), payment_method=VALUES(payment_method),
                    payment_date=VALUES(payment_date), transaction_id=VALUES(transaction_id),
                    remarks=VALUES(remarks)
                """,
                params,
            )
            payroll_id = int(cur.lastrowid)
            mark_processed_with_cursor(cur, processed_attendance_ids)

        return replace(record, payroll_id=payroll_id)

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            return cur.rowcount > 0
