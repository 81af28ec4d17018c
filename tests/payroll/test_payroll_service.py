from __future__ import annotations

from datetime import date, datetime

import pytest

from src.textile_payroll.textile_payroll.core.enums import CalculationMode, PaymentMethod, PaymentStatus
from src.textile_payroll.textile_payroll.core.exceptions import (
    ConflictError,
    NotFoundError,
    PartialBatchFailure,
    ValidationError,
)
from src.textile_payroll.textile_payroll.employees.model import EmployeeProfile
from src.textile_payroll.textile_payroll.payroll.calculator.aggregator import AttendanceAggregator
from src.textile_payroll.textile_payroll.payroll.model import EarningsOverrides, PayPeriod, PreviewOptions
from src.textile_payroll.textile_payroll.payroll.service import PayrollService
from src.textile_payroll.textile_payroll.payroll.settings_service import PayrollSettingsService

from fakes import FakeAttendanceRepo, FakeEmployeesRepo, FakePayrollRepo, FakeSettingsRepo, TransactionalPayrollRepo


MARCH = PayPeriod.for_month(2025, 3)
FIRST_HALF = PayPeriod(date(2025, 3, 1), date(2025, 3, 15))
NO_EXTRAS = PreviewOptions(include_allowances=False, include_deductions=False)


def _service(payrolls=None, employees=None):
    employees = employees or [
        EmployeeProfile(employee_id=1, full_name="Nguyen Lan", salary=60000),
        EmployeeProfile(employee_id=2, full_name="Tran Minh", salary=45000),
    ]
    attendance = FakeAttendanceRepo()
    payrolls = payrolls or FakePayrollRepo()
    svc = PayrollService(
        payrolls,
        FakeEmployeesRepo(employees),
        attendance,
        PayrollSettingsService(FakeSettingsRepo()),
        aggregator=AttendanceAggregator(attendance),
        clock=lambda: datetime(2025, 4, 2, 9, 30),
    )
    return svc, payrolls, attendance


def test_preview_is_not_persisted():
    svc, payrolls, attendance = _service()
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 15))

    preview = svc.compute_preview(1, FIRST_HALF, NO_EXTRAS)

    assert preview.basic_salary == 29032.26
    assert preview.net_salary == 29032.26
    assert payrolls.count() == 0
    assert attendance.processed == []


def test_generate_matches_preview_and_marks_attendance():
    svc, payrolls, attendance = _service()
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 31))

    preview = svc.compute_preview(1, MARCH)
    record = svc.generate(1, MARCH)

    assert record.payroll_id == 1
    assert record.net_salary == preview.net_salary
    assert record.basic_salary == 60000
    assert record.payment_status == PaymentStatus.PENDING
    assert record.payment_method == PaymentMethod.BANK_TRANSFER
    assert sorted(attendance.processed) == list(range(1, 32))


def test_generating_twice_updates_the_same_record():
    svc, payrolls, attendance = _service()
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 10))
    first = svc.generate(1, MARCH)

    attendance.add_present(1, date(2025, 3, 11), date(2025, 3, 31))
    second = svc.generate(1, MARCH)

    assert payrolls.count() == 1
    assert second.payroll_id == first.payroll_id
    assert second.attendance.days_worked == 31


def test_unknown_employee_and_invalid_id():
    svc, _, _ = _service()

    with pytest.raises(NotFoundError):
        svc.generate(99, MARCH)
    with pytest.raises(ValidationError):
        svc.compute_preview("abc", MARCH)


def test_check_overlap_reports_conflicting_period():
    svc, _, attendance = _service()
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 15))
    svc.generate(1, FIRST_HALF)

    overlapping = svc.check_overlap(1, PayPeriod(date(2025, 3, 10), date(2025, 3, 20)))
    adjacent = svc.check_overlap(1, PayPeriod(date(2025, 3, 16), date(2025, 3, 31)))
    before = svc.check_overlap(1, PayPeriod(date(2025, 2, 1), date(2025, 2, 28)))
    other_employee = svc.check_overlap(2, FIRST_HALF)

    assert overlapping.overlapping is True
    assert overlapping.conflicting_period == FIRST_HALF
    assert adjacent.overlapping is False
    assert before.overlapping is False
    assert other_employee.overlapping is False


def test_generate_rejects_overlap_with_another_months_payroll():
    svc, payrolls, _ = _service()
    svc.generate(1, PayPeriod(date(2025, 2, 15), date(2025, 3, 14)))

    with pytest.raises(ConflictError) as exc:
        svc.generate(1, PayPeriod(date(2025, 2, 1), date(2025, 2, 20)))

    assert exc.value.conflicting_period == PayPeriod(date(2025, 2, 15), date(2025, 3, 14))
    assert payrolls.count() == 1


def test_attendance_marking_failure_does_not_fail_generation():
    svc, payrolls, attendance = _service()
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 5))
    attendance.fail_marking = True

    record = svc.generate(1, MARCH)

    assert record.payroll_id is not None
    assert payrolls.count() == 1


def test_transactional_repository_marks_attendance_in_save():
    svc, payrolls, attendance = _service(payrolls=TransactionalPayrollRepo())
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 3))

    svc.generate(1, MARCH)

    assert payrolls.saved_attendance_ids == [(1, 2, 3)]
    assert attendance.processed == []


def test_recalculate_is_idempotent_and_keeps_status():
    svc, _, attendance = _service()
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 10))
    record = svc.generate(1, FIRST_HALF)
    svc.update_payment_status(record.payroll_id, "Processed")

    attendance.add_present(1, date(2025, 3, 11), date(2025, 3, 15), overtime_hours=1)
    once = svc.recalculate(record.payroll_id)
    twice = svc.recalculate(record.payroll_id)

    assert once == twice
    assert once.payment_status == PaymentStatus.PROCESSED
    assert once.attendance.days_worked == 15
    assert once.overtime.hours == 5
    assert once.basic_salary > record.basic_salary


def test_manual_overrides_survive_recalculation():
    svc, _, attendance = _service()
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 31))
    record = svc.generate(1, MARCH)

    edited = svc.apply_overrides(record.payroll_id, EarningsOverrides(housing=1234, overtime_amount=500))
    recalculated = svc.recalculate(record.payroll_id)

    assert edited.allowances.housing == 1234
    assert edited.overtime.amount == 500
    assert edited.total_earnings == 60000 + 500 + 1234 + 2000 + 1500
    assert recalculated.allowances.housing == 1234
    assert recalculated.total_earnings == edited.total_earnings


def test_regenerating_keeps_applied_overrides():
    svc, payrolls, attendance = _service()
    attendance.add_present(1, date(2025, 3, 1), date(2025, 3, 31))
    record = svc.generate(1, MARCH)
    svc.apply_overrides(record.payroll_id, EarningsOverrides(housing=1234))

    again = svc.generate(1, MARCH)
    layered = svc.generate(1, MARCH, overrides=EarningsOverrides(meal=0))

    assert payrolls.count() == 1
    assert again.allowances.housing == 1234
    assert again.overrides.housing == 1234
    assert layered.allowances.housing == 1234
    assert layered.allowances.meal == 0
    assert layered.total_earnings == 60000 + 1234 + 2000


def test_apply_overrides_requires_a_change():
    svc, _, _ = _service()
    record = svc.generate(1, MARCH)

    with pytest.raises(ValidationError):
        svc.apply_overrides(record.payroll_id, EarningsOverrides())


def test_payment_status_machine():
    svc, _, _ = _service()
    record = svc.generate(1, MARCH)

    processed = svc.update_payment_status(record.payroll_id, "Processed")
    paid = svc.update_payment_status(record.payroll_id, PaymentStatus.PAID)

    assert processed.payment_status == PaymentStatus.PROCESSED
    assert paid.payment_status == PaymentStatus.PAID
    assert paid.payment_date == date(2025, 4, 2)
    with pytest.raises(ValidationError):
        svc.update_payment_status(record.payroll_id, "Pending")
    with pytest.raises(ValidationError):
        svc.update_payment_status(record.payroll_id, "Processed")
    assert svc.update_payment_status(record.payroll_id, "Paid") == paid


def test_pending_can_go_straight_to_paid_with_payment_details():
    svc, _, _ = _service()
    record = svc.generate(1, MARCH)

    paid = svc.record_payment(
        record.payroll_id,
        method="cash",
        payment_date="2025-04-05",
        transaction_id="TX-88",
        remarks="Paid at gate",
    )

    assert paid.payment_status == PaymentStatus.PAID
    assert paid.payment_method == PaymentMethod.CASH
    assert paid.payment_date == date(2025, 4, 5)
    assert paid.transaction_id == "TX-88"
    with pytest.raises(ValidationError):
        svc.record_payment(record.payroll_id, method="Crypto")


def test_paid_records_are_not_recomputed():
    svc, _, _ = _service()
    record = svc.generate(1, MARCH)
    svc.record_payment(record.payroll_id)

    with pytest.raises(ConflictError):
        svc.recalculate(record.payroll_id)
    with pytest.raises(ConflictError):
        svc.generate(1, MARCH)


def test_paid_records_keep_their_payment_details():
    svc, _, _ = _service()
    record = svc.generate(1, MARCH)
    paid = svc.record_payment(record.payroll_id, payment_date="2025-04-01", transaction_id="TX-1")

    with pytest.raises(ConflictError):
        svc.update_payment_status(record.payroll_id, "Paid", "2030-01-01")
    with pytest.raises(ConflictError):
        svc.record_payment(record.payroll_id, method="Cash", transaction_id="TX-2")

    stored = svc.get(record.payroll_id)
    assert stored == paid
    assert stored.payment_date == date(2025, 4, 1)
    assert stored.transaction_id == "TX-1"


def test_deleting_paid_record_returns_warning():
    svc, payrolls, _ = _service()
    pending = svc.generate(1, MARCH)
    paid = svc.generate(2, MARCH)
    svc.record_payment(paid.payroll_id)

    plain = svc.delete(pending.payroll_id)
    flagged = svc.delete(paid.payroll_id)

    assert plain.deleted is True and plain.warning is None
    assert flagged.deleted is True and "confirmation" in flagged.warning
    assert payrolls.count() == 0
    with pytest.raises(NotFoundError):
        svc.get(paid.payroll_id)


def test_generate_all_collects_failures_without_aborting():
    employees = [
        EmployeeProfile(employee_id=3, full_name="Le Hoa", salary=30000),
        EmployeeProfile(employee_id=1, full_name="Nguyen Lan", salary=60000),
        EmployeeProfile(employee_id=2, full_name="Pham Zero", salary=0),
    ]
    svc, payrolls, _ = _service(employees=employees)

    result = svc.generate_all(3, 2025)

    assert [s.employee_id for s in result.succeeded] == [1, 3]
    assert [f.employee_id for f in result.failed] == [2]
    assert "Salary" in result.failed[0].message
    assert payrolls.count() == 2
    with pytest.raises(PartialBatchFailure) as exc:
        result.raise_for_failures()
    assert exc.value.result is result


def test_generate_all_without_overwrite_reports_existing_records():
    svc, payrolls, _ = _service()
    svc.generate(1, MARCH)

    result = svc.generate_all(3, 2025)
    again = svc.generate_all(3, 2025, overwrite=True)

    assert [f.employee_id for f in result.failed] == [1]
    assert [s.employee_id for s in result.succeeded] == [2]
    assert again.failed == ()
    assert payrolls.count() == 2


def test_generate_all_overwrite_keeps_manual_options():
    svc, _, _ = _service()
    manual = PreviewOptions(mode=CalculationMode.MANUAL, manual_working_days=31, manual_overtime_hours=10)
    svc.generate(1, MARCH, options=manual)

    result = svc.generate_all(3, 2025, overwrite=True)
    regenerated = svc.get(result.succeeded[0].payroll_id)

    assert result.succeeded[0].employee_id == 1
    assert regenerated.options.mode == CalculationMode.MANUAL
    assert regenerated.overtime.hours == 10
    assert regenerated.overtime.amount == 3629.00


def test_generate_all_in_parallel_keeps_employee_order():
    employees = [EmployeeProfile(employee_id=i, full_name=f"Worker {i}", salary=20000 + i) for i in range(1, 9)]
    svc, payrolls, _ = _service(employees=employees)

    result = svc.generate_all(3, 2025, max_workers=4)

    assert [s.employee_id for s in result.succeeded] == list(range(1, 9))
    assert payrolls.count() == 8


def test_history_and_employee_listing():
    svc, _, _ = _service()
    svc.generate(1, PayPeriod.for_month(2025, 1))
    svc.generate(1, PayPeriod.for_month(2025, 2))
    svc.generate(2, PayPeriod.for_month(2025, 2))

    mine = svc.list_for_employee(1)

    assert [r.month for r in mine] == [2, 1]
    assert len(svc.history(limit=2)) == 2
    with pytest.raises(ValidationError):
        svc.history(limit=0)
