from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_date, require_id, require_month
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import PaymentStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.model import EmployeeProfile
from ..employees.repository import EmployeeRepository
from .calculator.aggregator import AttendanceAggregator
from .calculator.assembler import PayrollAssembler
from .model import (
    BatchFailure,
    BatchItem,
    BatchResult,
    DeletionResult,
    EarningsOverrides,
    OverlapResult,
    PayPeriod,
    PayrollPreview,
    PayrollRecord,
    PreviewOptions,
)
from .repository import PayrollRepository
from .settings_service import PayrollSettingsService
from .status import ensure_transition, parse_method, parse_status

logger = logging.getLogger(__name__)


class PayrollService:
    """Preview, generation and lifecycle of payroll records.

    All arithmetic goes through ``PayrollAssembler``; this class only loads
    inputs, enforces the one-record-per-month and no-overlap rules and
    persists results.
    """

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        settings: PayrollSettingsService,
        *,
        aggregator: Optional[AttendanceAggregator] = None,
        assembler: Optional[PayrollAssembler] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._attendance = attendance
        self._settings = settings
        self._aggregator = aggregator or AttendanceAggregator(attendance)
        self._assembler = assembler or PayrollAssembler()
        self._clock = clock

    # -- reads -------------------------------------------------------------

    def _require_employee(self, employee_id: Any) -> EmployeeProfile:
        eid = require_id(employee_id, "Employee id")
        employee = self._employees.get_by_id(eid)
        if not employee:
            raise NotFoundError(f"Employee {eid} not found")
        return employee

    def get(self, payroll_id: Any) -> PayrollRecord:
        pid = require_id(payroll_id, "Payroll id")
        record = self._payrolls.get_by_id(pid)
        if not record:
            raise NotFoundError(f"Payroll {pid} not found")
        return record

    def list_for_employee(self, employee_id: Any) -> Sequence[PayrollRecord]:
        return self._payrolls.list_for_employee(require_id(employee_id, "Employee id"))

    def history(self, limit: Any = DEFAULT_HISTORY_LIMIT) -> Sequence[PayrollRecord]:
        try:
            n = int(limit)
        except (TypeError, ValueError):
            raise ValidationError("Limit must be a number")
        if n <= 0:
            raise ValidationError("Limit must be greater than 0")
        return self._payrolls.list_recent(n)

    # -- computation -------------------------------------------------------

    def _compute(
        self,
        employee: EmployeeProfile,
        period: PayPeriod,
        options: Optional[PreviewOptions],
        overrides: Optional[EarningsOverrides],
    ) -> PayrollPreview:
        summary = self._aggregator.aggregate(employee.employee_id, period)
        return self._assembler.assemble(
            employee=employee,
            period=period,
            summary=summary,
            settings=self._settings.get_settings(),
            options=options,
            overrides=overrides,
        )

    def compute_preview(
        self,
        employee_id: Any,
        period: PayPeriod,
        options: Optional[PreviewOptions] = None,
    ) -> PayrollPreview:
        """Same numbers as ``generate`` would store, without persisting."""
        employee = self._require_employee(employee_id)
        return self._compute(employee, period, options, None)

    def check_overlap(
        self,
        employee_id: Any,
        period: PayPeriod,
        *,
        exclude_payroll_id: Optional[int] = None,
    ) -> OverlapResult:
        eid = require_id(employee_id, "Employee id")
        existing = sorted(self._payrolls.list_for_employee(eid), key=lambda r: r.pay_period.start)
        for record in existing:
            if exclude_payroll_id is not None and record.payroll_id == exclude_payroll_id:
                continue
            if record.pay_period.overlaps(period):
                return OverlapResult(
                    overlapping=True,
                    conflicting_period=record.pay_period,
                    conflicting_payroll_id=record.payroll_id,
                )
        return OverlapResult(overlapping=False)

    # -- persistence -------------------------------------------------------

    def _persist(self, record: PayrollRecord, attendance_ids: Sequence[int]) -> PayrollRecord:
        if getattr(self._payrolls, "supports_transactions", False):
            return self._payrolls.save(record, processed_attendance_ids=attendance_ids)

        saved = self._payrolls.save(record)
        if attendance_ids:
            try:
                self._attendance.mark_processed(attendance_ids)
            except Exception:
                # Generation already succeeded; marking is best-effort here.
                logger.warning(
                    "Could not mark %d attendance records processed for payroll %s",
                    len(attendance_ids),
                    saved.payroll_id,
                    exc_info=True,
                )
        return saved

    @staticmethod
    def _ensure_not_paid(record: PayrollRecord, action: str) -> None:
        if record.payment_status == PaymentStatus.PAID:
            raise ConflictError(f"Payroll {record.payroll_id} is already paid and cannot be {action}")

    def _generate_for(
        self,
        employee: EmployeeProfile,
        period: PayPeriod,
        *,
        options: Optional[PreviewOptions],
        overrides: Optional[EarningsOverrides],
        existing: Optional[PayrollRecord],
    ) -> PayrollRecord:
        if existing:
            self._ensure_not_paid(existing, "regenerated")

        overlap = self.check_overlap(
            employee.employee_id,
            period,
            exclude_payroll_id=existing.payroll_id if existing else None,
        )
        if overlap.overlapping:
            conflict = overlap.conflicting_period
            raise ConflictError(
                f"Pay period overlaps existing payroll {conflict.start.isoformat()} to {conflict.end.isoformat()}",
                conflicting_period=conflict,
            )

        if existing:
            # Applied overrides stay authoritative; new ones are layered on top.
            overrides = existing.overrides.merge(overrides) if overrides is not None else existing.overrides
        overrides = overrides or EarningsOverrides()
        preview = self._compute(employee, period, options, overrides)
        if existing:
            record = existing.with_computation(preview, overrides=overrides)
        else:
            record = PayrollRecord.from_preview(preview, overrides=overrides)

        saved = self._persist(record, preview.attendance.record_ids)
        logger.info(
            "%s payroll %s for employee %s (%s to %s), net %.2f",
            "Updated" if existing else "Generated",
            saved.payroll_id,
            employee.employee_id,
            period.start.isoformat(),
            period.end.isoformat(),
            saved.net_salary,
        )
        return saved

    def generate(
        self,
        employee_id: Any,
        period: PayPeriod,
        overrides: Optional[EarningsOverrides] = None,
        options: Optional[PreviewOptions] = None,
    ) -> PayrollRecord:
        """Insert, or update in place when the (employee, month, year) record exists."""
        employee = self._require_employee(employee_id)
        existing = self._payrolls.find_for_month(employee.employee_id, period.month, period.year)
        return self._generate_for(employee, period, options=options, overrides=overrides, existing=existing)

    def generate_all(
        self,
        month: Any,
        year: Any,
        *,
        overwrite: bool = False,
        max_workers: Optional[int] = None,
    ) -> BatchResult:
        m, y = require_month(month, year)
        period = PayPeriod.for_month(y, m)
        employees = sorted(self._employees.list_active(), key=lambda e: e.employee_id)

        def run_one(employee: EmployeeProfile):
            try:
                existing = self._payrolls.find_for_month(employee.employee_id, m, y)
                if existing and not overwrite:
                    raise ConflictError(f"Payroll for {m}/{y} already exists")
                saved = self._generate_for(
                    employee,
                    period,
                    options=existing.options if existing else None,
                    overrides=None,
                    existing=existing,
                )
                return BatchItem(
                    employee_id=employee.employee_id,
                    employee_name=employee.full_name,
                    payroll_id=saved.payroll_id,
                    total_earnings=saved.total_earnings,
                    net_salary=saved.net_salary,
                )
            except Exception as e:
                logger.warning("Payroll generation failed for employee %s: %s", employee.employee_id, e)
                return BatchFailure(
                    employee_id=employee.employee_id,
                    employee_name=employee.full_name,
                    message=str(e),
                )

        if max_workers and max_workers > 1 and len(employees) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                outcomes = list(executor.map(run_one, employees))
        else:
            outcomes = [run_one(e) for e in employees]

        result = BatchResult(
            month=m,
            year=y,
            succeeded=tuple(o for o in outcomes if isinstance(o, BatchItem)),
            failed=tuple(o for o in outcomes if isinstance(o, BatchFailure)),
        )
        logger.info(
            "Bulk payroll %d/%d: %d succeeded, %d failed",
            m,
            y,
            len(result.succeeded),
            len(result.failed),
        )
        return result

    def recalculate(self, payroll_id: Any) -> PayrollRecord:
        """Re-derive from current data; keeps status, payment details and overrides."""
        record = self.get(payroll_id)
        self._ensure_not_paid(record, "recalculated")
        employee = self._require_employee(record.employee_id)
        preview = self._compute(employee, record.pay_period, record.options, record.overrides)
        saved = self._persist(record.with_computation(preview), preview.attendance.record_ids)
        logger.info("Recalculated payroll %s, net %.2f", saved.payroll_id, saved.net_salary)
        return saved

    def apply_overrides(self, payroll_id: Any, overrides: EarningsOverrides) -> PayrollRecord:
        record = self.get(payroll_id)
        self._ensure_not_paid(record, "edited")
        if overrides.is_empty:
            raise ValidationError("No changes supplied")
        merged = record.overrides.merge(overrides)
        employee = self._require_employee(record.employee_id)
        preview = self._compute(employee, record.pay_period, record.options, merged)
        saved = self._payrolls.save(record.with_computation(preview, overrides=merged))
        logger.info("Applied manual overrides to payroll %s", saved.payroll_id)
        return saved

    # -- payment -----------------------------------------------------------

    def _transition(self, record: PayrollRecord, new_status: PaymentStatus, payment_date: Any) -> PayrollRecord:
        ensure_transition(record.payment_status, new_status)
        if record.payment_status == PaymentStatus.PAID:
            raise ConflictError(f"Payroll {record.payroll_id} is already paid; payment details cannot be changed")
        paid_on = record.payment_date
        if payment_date is not None and payment_date != "":
            paid_on = require_date(payment_date, "Payment date")
        if new_status == PaymentStatus.PAID and paid_on is None:
            paid_on = self._clock().date()
        return replace(record, payment_status=new_status, payment_date=paid_on)

    def update_payment_status(
        self,
        payroll_id: Any,
        new_status: Any,
        payment_date: Optional[date] = None,
    ) -> PayrollRecord:
        record = self.get(payroll_id)
        status = parse_status(new_status)
        if record.payment_status == status and payment_date is None:
            return record
        saved = self._payrolls.save(self._transition(record, status, payment_date))
        logger.info(
            "Payroll %s status %s -> %s",
            saved.payroll_id,
            record.payment_status.value,
            saved.payment_status.value,
        )
        return saved

    def record_payment(
        self,
        payroll_id: Any,
        *,
        method: Any = None,
        status: Any = PaymentStatus.PAID,
        payment_date: Any = None,
        transaction_id: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> PayrollRecord:
        record = self.get(payroll_id)
        updated = self._transition(record, parse_status(status), payment_date)
        updated = replace(
            updated,
            payment_method=parse_method(method),
            transaction_id=str(transaction_id or "").strip() or record.transaction_id,
            remarks=str(remarks or "").strip() or record.remarks,
        )
        saved = self._payrolls.save(updated)
        logger.info(
            "Recorded %s payment for payroll %s (%s)",
            saved.payment_method.value,
            saved.payroll_id,
            saved.payment_status.value,
        )
        return saved

    def delete(self, payroll_id: Any) -> DeletionResult:
        record = self.get(payroll_id)
        warning = None
        if record.payment_status == PaymentStatus.PAID:
            warning = f"Payroll {record.payroll_id} was already paid; deletion requires confirmation"
        deleted = self._payrolls.delete(record.payroll_id)
        if warning:
            logger.warning("Deleted paid payroll %s", record.payroll_id)
        else:
            logger.info("Deleted payroll %s", record.payroll_id)
        return DeletionResult(deleted=deleted, warning=warning)
