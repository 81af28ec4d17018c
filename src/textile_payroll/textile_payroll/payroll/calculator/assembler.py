from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ...common.money import round2
from ...common.validators import require_positive_number
from ...employees.model import EmployeeProfile
from ..factory import WorkingDaysStrategyFactory
from ..model import (
    AllowanceLines,
    AttendanceSummary,
    DeductionLines,
    EarningsOverrides,
    OvertimeLine,
    PayPeriod,
    PayrollPreview,
    PreviewOptions,
)
from ..settings_model import PayrollSettings
from .components import AllowanceDeductionEngine
from .overtime import OvertimeCalculator
from .proration import ProRationCalculator


def totals(
    basic_salary: float,
    overtime: OvertimeLine,
    allowances: AllowanceLines,
    deductions: DeductionLines,
) -> tuple[float, float, float]:
    """(total_earnings, total_deductions, net_salary), all rounded."""
    total_earnings = round2(basic_salary + overtime.amount + allowances.total)
    total_deductions = round2(deductions.total)
    return total_earnings, total_deductions, round2(total_earnings - total_deductions)


class PayrollAssembler:
    """Single entry point for payroll arithmetic.

    Pure: takes already loaded employee, attendance summary and settings and
    returns an immutable preview. Used by live previews and by generation.
    """

    def __init__(
        self,
        *,
        proration: Optional[ProRationCalculator] = None,
        overtime: Optional[OvertimeCalculator] = None,
        engine: Optional[AllowanceDeductionEngine] = None,
        strategy_factory: Optional[WorkingDaysStrategyFactory] = None,
    ):
        self._proration = proration or ProRationCalculator()
        self._overtime = overtime or OvertimeCalculator()
        self._engine = engine or AllowanceDeductionEngine()
        self._factory = strategy_factory or WorkingDaysStrategyFactory()

    def assemble(
        self,
        *,
        employee: EmployeeProfile,
        period: PayPeriod,
        summary: AttendanceSummary,
        settings: PayrollSettings,
        options: Optional[PreviewOptions] = None,
        overrides: Optional[EarningsOverrides] = None,
    ) -> PayrollPreview:
        options = options or PreviewOptions()
        overrides = overrides or EarningsOverrides()
        monthly_salary = require_positive_number(employee.salary, "Salary")

        strategy = self._factory.for_mode(options.mode)
        effective_days = strategy.effective_working_days(summary, options)
        basic_salary = self._proration.basic_salary(monthly_salary, period, effective_days)
        if overrides.basic_salary is not None:
            basic_salary = round2(overrides.basic_salary)

        overtime = OvertimeLine()
        if options.include_overtime:
            overtime = self._overtime.calculate(monthly_salary, period, strategy.overtime_hours(summary, options))
        if overrides.overtime_amount is not None:
            overtime = replace(overtime, amount=round2(overrides.overtime_amount))

        allowances = AllowanceLines()
        if options.include_allowances:
            allowances = self._engine.allowances(settings.allowances, monthly_salary, options.custom_allowances)
            allowances = self._apply_allowance_overrides(allowances, overrides)

        deductions = DeductionLines()
        if options.include_deductions:
            custom = overrides.custom_deductions if overrides.custom_deductions is not None else options.custom_deductions
            deductions = self._engine.deductions(
                settings.deductions,
                basic_salary,
                custom,
                include_tax=options.tax_calculation,
            )

        total_earnings, total_deductions, net_salary = totals(basic_salary, overtime, allowances, deductions)

        return PayrollPreview(
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            pay_period=period,
            basic_salary=basic_salary,
            overtime=overtime,
            allowances=allowances,
            deductions=deductions,
            total_earnings=total_earnings,
            total_deductions=total_deductions,
            net_salary=net_salary,
            effective_working_days=effective_days,
            attendance=summary,
            options=options,
        )

    @staticmethod
    def _apply_allowance_overrides(lines: AllowanceLines, overrides: EarningsOverrides) -> AllowanceLines:
        changes: dict = {}
        for line, value in (
            ("housing", overrides.housing),
            ("transport", overrides.transport),
            ("meal", overrides.meal),
            ("other", overrides.other_allowance),
        ):
            if value is not None:
                changes[line] = round2(value)
        if overrides.custom_allowances is not None:
            changes["custom"] = tuple(overrides.custom_allowances)
        return replace(lines, **changes) if changes else lines
