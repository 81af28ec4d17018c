from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import days_in_month, month_bounds
from ..common.money import parse_amount, round2
from ..common.validators import parse_flag, require_date, require_non_negative_number
from ..core.enums import CalculationMode, PaymentMethod, PaymentStatus
from ..core.exceptions import PartialBatchFailure, ValidationError
from .rules import CustomLineItem, parse_custom_items


@dataclass(frozen=True)
class PayPeriod:
    """Inclusive date range a payroll covers; may span several months."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValidationError("End date cannot be before start date")

    @classmethod
    def for_month(cls, year: int, month: int) -> "PayPeriod":
        start, end = month_bounds(year, month)
        return cls(start=start, end=end)

    @classmethod
    def parse(cls, start: Any, end: Any) -> "PayPeriod":
        return cls(start=require_date(start, "Pay period start"), end=require_date(end, "Pay period end"))

    @property
    def month(self) -> int:
        return self.end.month

    @property
    def year(self) -> int:
        return self.end.year

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def is_same_month(self) -> bool:
        return (self.start.year, self.start.month) == (self.end.year, self.end.month)

    @property
    def is_full_month(self) -> bool:
        return (
            self.is_same_month
            and self.start.day == 1
            and self.end.day == days_in_month(self.end.year, self.end.month)
        )

    def overlaps(self, other: "PayPeriod") -> bool:
        return self.start <= other.end and other.start <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class AttendanceSummary:
    """Attendance of one employee reduced over a pay period."""

    employee_id: int
    total_days: int = 0
    working_days: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    half_day: int = 0
    leave: int = 0
    total_hours_worked: float = 0.0
    total_overtime_hours: float = 0.0
    record_ids: tuple[int, ...] = ()

    @property
    def days_worked(self) -> int:
        """Late days count as present."""
        return self.present + self.late

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "totalDays": self.total_days,
            "workingDays": self.working_days,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "halfDay": self.half_day,
            "leave": self.leave,
            "daysWorked": self.days_worked,
            "totalHoursWorked": self.total_hours_worked,
            "totalOvertimeHours": self.total_overtime_hours,
            "recordIds": list(self.record_ids),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "AttendanceSummary":
        return cls(
            employee_id=int(raw["employeeId"]),
            total_days=int(raw.get("totalDays", 0)),
            working_days=int(raw.get("workingDays", 0)),
            present=int(raw.get("present", 0)),
            absent=int(raw.get("absent", 0)),
            late=int(raw.get("late", 0)),
            half_day=int(raw.get("halfDay", 0)),
            leave=int(raw.get("leave", 0)),
            total_hours_worked=float(raw.get("totalHoursWorked", 0.0)),
            total_overtime_hours=float(raw.get("totalOvertimeHours", 0.0)),
            record_ids=tuple(int(i) for i in raw.get("recordIds", [])),
        )


@dataclass(frozen=True)
class OvertimeLine:
    hours: float = 0.0
    rate: float = 0.0
    amount: float = 0.0

    def to_dict(self) -> dict:
        return {"hours": self.hours, "rate": self.rate, "amount": self.amount}

    @classmethod
    def from_dict(cls, raw: dict) -> "OvertimeLine":
        return cls(
            hours=parse_amount(raw.get("hours")),
            rate=parse_amount(raw.get("rate")),
            amount=parse_amount(raw.get("amount")),
        )


def _sum_rounded(values) -> float:
    return round2(sum(round2(v) for v in values))


@dataclass(frozen=True)
class AllowanceLines:
    housing: float = 0.0
    transport: float = 0.0
    meal: float = 0.0
    other: float = 0.0
    custom: tuple[CustomLineItem, ...] = ()

    @property
    def total(self) -> float:
        return _sum_rounded([self.housing, self.transport, self.meal, self.other, *(c.amount for c in self.custom)])

    def to_dict(self) -> dict:
        return {
            "housing": self.housing,
            "transport": self.transport,
            "meal": self.meal,
            "other": self.other,
            "custom": [c.to_dict() for c in self.custom],
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "AllowanceLines":
        return cls(
            housing=parse_amount(raw.get("housing")),
            transport=parse_amount(raw.get("transport")),
            meal=parse_amount(raw.get("meal")),
            other=parse_amount(raw.get("other")),
            custom=parse_custom_items(raw.get("custom")),
        )


@dataclass(frozen=True)
class DeductionLines:
    tax: float = 0.0
    insurance: float = 0.0
    other: float = 0.0
    custom: tuple[CustomLineItem, ...] = ()

    @property
    def total(self) -> float:
        return _sum_rounded([self.tax, self.insurance, self.other, *(c.amount for c in self.custom)])

    def to_dict(self) -> dict:
        return {
            "tax": self.tax,
            "insurance": self.insurance,
            "other": self.other,
            "custom": [c.to_dict() for c in self.custom],
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "DeductionLines":
        return cls(
            tax=parse_amount(raw.get("tax")),
            insurance=parse_amount(raw.get("insurance")),
            other=parse_amount(raw.get("other")),
            custom=parse_custom_items(raw.get("custom")),
        )


def _optional_number(raw: dict, key: str, field_name: str) -> Optional[float]:
    value = raw.get(key)
    if value is None or value == "":
        return None
    return require_non_negative_number(value, field_name)


@dataclass(frozen=True)
class PreviewOptions:
    """Calculation switches shared by preview, generation and recalculation."""

    mode: CalculationMode = CalculationMode.AUTOMATIC
    manual_working_days: Optional[float] = None
    manual_overtime_hours: Optional[float] = None
    include_overtime: bool = True
    include_allowances: bool = True
    include_deductions: bool = True
    tax_calculation: bool = True
    custom_allowances: tuple[CustomLineItem, ...] = ()
    custom_deductions: tuple[CustomLineItem, ...] = ()

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "manualWorkingDays": self.manual_working_days,
            "manualOvertimeHours": self.manual_overtime_hours,
            "includeOvertime": self.include_overtime,
            "includeAllowances": self.include_allowances,
            "includeDeductions": self.include_deductions,
            "taxCalculation": self.tax_calculation,
            "customAllowances": [c.to_dict() for c in self.custom_allowances],
            "customDeductions": [c.to_dict() for c in self.custom_deductions],
        }

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "PreviewOptions":
        raw = raw or {}
        mode_raw = str(raw.get("mode") or CalculationMode.AUTOMATIC.value).strip().capitalize()
        try:
            mode = CalculationMode(mode_raw)
        except ValueError:
            raise ValidationError("Mode must be Automatic or Manual")
        return cls(
            mode=mode,
            manual_working_days=_optional_number(raw, "manualWorkingDays", "Working days"),
            manual_overtime_hours=_optional_number(raw, "manualOvertimeHours", "Overtime hours"),
            include_overtime=parse_flag(raw, "includeOvertime", True),
            include_allowances=parse_flag(raw, "includeAllowances", True),
            include_deductions=parse_flag(raw, "includeDeductions", True),
            tax_calculation=parse_flag(raw, "taxCalculation", True),
            custom_allowances=parse_custom_items(raw.get("customAllowances")),
            custom_deductions=parse_custom_items(raw.get("customDeductions")),
        )


_OVERRIDE_KEYS = {
    "basic_salary": "basicSalary",
    "overtime_amount": "overtimeAmount",
    "housing": "housing",
    "transport": "transport",
    "meal": "meal",
    "other_allowance": "otherAllowance",
}


@dataclass(frozen=True)
class EarningsOverrides:
    """Manual edits to earnings lines, re-applied on every recalculation.

    ``None`` means "use the computed value". Custom lists, when given, replace
    the computed custom items entirely.
    """

    basic_salary: Optional[float] = None
    overtime_amount: Optional[float] = None
    housing: Optional[float] = None
    transport: Optional[float] = None
    meal: Optional[float] = None
    other_allowance: Optional[float] = None
    custom_allowances: Optional[tuple[CustomLineItem, ...]] = None
    custom_deductions: Optional[tuple[CustomLineItem, ...]] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)

    def merge(self, newer: "EarningsOverrides") -> "EarningsOverrides":
        changes = {
            name: getattr(newer, name) for name in self.__dataclass_fields__ if getattr(newer, name) is not None
        }
        return replace(self, **changes)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {api: getattr(self, name) for name, api in _OVERRIDE_KEYS.items()}
        out["customAllowances"] = (
            [c.to_dict() for c in self.custom_allowances] if self.custom_allowances is not None else None
        )
        out["customDeductions"] = (
            [c.to_dict() for c in self.custom_deductions] if self.custom_deductions is not None else None
        )
        return out

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "EarningsOverrides":
        raw = raw or {}
        values: dict[str, Any] = {
            name: _optional_number(raw, api, api) for name, api in _OVERRIDE_KEYS.items()
        }
        for name, api in (("custom_allowances", "customAllowances"), ("custom_deductions", "customDeductions")):
            values[name] = parse_custom_items(raw[api]) if raw.get(api) is not None else None
        return cls(**values)


@dataclass(frozen=True)
class PayrollPreview:
    """Fully computed payroll for a period; nothing persisted."""

    employee_id: int
    employee_name: str
    pay_period: PayPeriod
    basic_salary: float
    overtime: OvertimeLine
    allowances: AllowanceLines
    deductions: DeductionLines
    total_earnings: float
    total_deductions: float
    net_salary: float
    effective_working_days: float
    attendance: AttendanceSummary
    options: PreviewOptions = field(default_factory=PreviewOptions)

    @property
    def month(self) -> int:
        return self.pay_period.month

    @property
    def year(self) -> int:
        return self.pay_period.year

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "payPeriod": self.pay_period.to_dict(),
            "month": self.month,
            "year": self.year,
            "basicSalary": self.basic_salary,
            "overtime": self.overtime.to_dict(),
            "allowances": self.allowances.to_dict(),
            "deductions": self.deductions.to_dict(),
            "totalEarnings": self.total_earnings,
            "totalDeductions": self.total_deductions,
            "netSalary": self.net_salary,
            "effectiveWorkingDays": self.effective_working_days,
            "attendance": self.attendance.to_dict(),
            "options": self.options.to_dict(),
        }


@dataclass(frozen=True)
class PayrollRecord:
    """Persisted payroll; at most one per (employee_id, month, year)."""

    employee_id: int
    employee_name: str
    pay_period: PayPeriod
    basic_salary: float
    overtime: OvertimeLine
    allowances: AllowanceLines
    deductions: DeductionLines
    total_earnings: float
    total_deductions: float
    net_salary: float
    effective_working_days: float
    attendance: AttendanceSummary
    options: PreviewOptions = field(default_factory=PreviewOptions)
    overrides: EarningsOverrides = field(default_factory=EarningsOverrides)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    payment_date: Optional[date] = None
    transaction_id: Optional[str] = None
    remarks: Optional[str] = None
    payroll_id: Optional[int] = None

    @property
    def month(self) -> int:
        return self.pay_period.month

    @property
    def year(self) -> int:
        return self.pay_period.year

    @classmethod
    def from_preview(cls, preview: PayrollPreview, *, overrides: Optional[EarningsOverrides] = None) -> "PayrollRecord":
        return cls(
            employee_id=preview.employee_id,
            employee_name=preview.employee_name,
            pay_period=preview.pay_period,
            basic_salary=preview.basic_salary,
            overtime=preview.overtime,
            allowances=preview.allowances,
            deductions=preview.deductions,
            total_earnings=preview.total_earnings,
            total_deductions=preview.total_deductions,
            net_salary=preview.net_salary,
            effective_working_days=preview.effective_working_days,
            attendance=preview.attendance,
            options=preview.options,
            overrides=overrides or EarningsOverrides(),
        )

    def with_computation(self, preview: PayrollPreview, *, overrides: Optional[EarningsOverrides] = None) -> "PayrollRecord":
        """Replace every computed field, keep identity and payment details."""
        return replace(
            self,
            employee_name=preview.employee_name,
            pay_period=preview.pay_period,
            basic_salary=preview.basic_salary,
            overtime=preview.overtime,
            allowances=preview.allowances,
            deductions=preview.deductions,
            total_earnings=preview.total_earnings,
            total_deductions=preview.total_deductions,
            net_salary=preview.net_salary,
            effective_working_days=preview.effective_working_days,
            attendance=preview.attendance,
            options=preview.options,
            overrides=overrides if overrides is not None else self.overrides,
        )

    def to_dict(self) -> dict:
        return {
            "payrollId": self.payroll_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "payPeriod": self.pay_period.to_dict(),
            "month": self.month,
            "year": self.year,
            "basicSalary": self.basic_salary,
            "overtime": self.overtime.to_dict(),
            "allowances": self.allowances.to_dict(),
            "deductions": self.deductions.to_dict(),
            "totalEarnings": self.total_earnings,
            "totalDeductions": self.total_deductions,
            "netSalary": self.net_salary,
            "effectiveWorkingDays": self.effective_working_days,
            "attendance": self.attendance.to_dict(),
            "options": self.options.to_dict(),
            "overrides": self.overrides.to_dict(),
            "paymentStatus": self.payment_status.value,
            "paymentMethod": self.payment_method.value,
            "paymentDate": self.payment_date.isoformat() if self.payment_date else None,
            "transactionId": self.transaction_id,
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class OverlapResult:
    overlapping: bool
    conflicting_period: Optional[PayPeriod] = None
    conflicting_payroll_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "overlapping": self.overlapping,
            "conflictingPeriod": self.conflicting_period.to_dict() if self.conflicting_period else None,
            "conflictingPayrollId": self.conflicting_payroll_id,
        }


@dataclass(frozen=True)
class DeletionResult:
    deleted: bool
    warning: Optional[str] = None

    def to_dict(self) -> dict:
        return {"deleted": self.deleted, "warning": self.warning}


@dataclass(frozen=True)
class BatchItem:
    employee_id: int
    employee_name: str
    payroll_id: Optional[int]
    total_earnings: float
    net_salary: float

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "payrollId": self.payroll_id,
            "totalEarnings": self.total_earnings,
            "netSalary": self.net_salary,
        }


@dataclass(frozen=True)
class BatchFailure:
    employee_id: int
    employee_name: str
    message: str

    def to_dict(self) -> dict:
        return {"employeeId": self.employee_id, "employeeName": self.employee_name, "message": self.message}


@dataclass(frozen=True)
class BatchResult:
    month: int
    year: int
    succeeded: tuple[BatchItem, ...] = ()
    failed: tuple[BatchFailure, ...] = ()

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def raise_for_failures(self) -> None:
        if self.failed:
            raise PartialBatchFailure(
                f"{len(self.failed)} of {self.total} payrolls failed for {self.month}/{self.year}",
                result=self,
            )

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "total": self.total,
            "succeeded": [s.to_dict() for s in self.succeeded],
            "failed": [f.to_dict() for f in self.failed],
        }
