from __future__ import annotations

from typing import Sequence

from ..model import AllowanceLines, DeductionLines
from ..rules import CustomLineItem, evaluate_rule
from ..settings_model import AllowanceRules, DeductionRules


class AllowanceDeductionEngine:
    """Evaluate the standard rules and carry custom items through.

    Allowance percentages apply to the monthly salary, deduction percentages
    to the pro-rated basic salary.
    """

    def allowances(
        self,
        rules: AllowanceRules,
        monthly_salary: float,
        custom: Sequence[CustomLineItem] = (),
    ) -> AllowanceLines:
        return AllowanceLines(
            housing=evaluate_rule(rules.housing, monthly_salary),
            transport=evaluate_rule(rules.transport, monthly_salary),
            meal=evaluate_rule(rules.meal, monthly_salary),
            other=evaluate_rule(rules.other, monthly_salary),
            custom=tuple(custom),
        )

    def deductions(
        self,
        rules: DeductionRules,
        basic_salary: float,
        custom: Sequence[CustomLineItem] = (),
        *,
        include_tax: bool = True,
    ) -> DeductionLines:
        return DeductionLines(
            tax=evaluate_rule(rules.tax, basic_salary) if include_tax else 0.0,
            insurance=evaluate_rule(rules.insurance, basic_salary),
            other=evaluate_rule(rules.other, basic_salary),
            custom=tuple(custom),
        )
