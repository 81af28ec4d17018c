from __future__ import annotations

from ...common.datetime_utils import days_in_month
from ...common.money import round2
from ...core.constants import OVERTIME_MULTIPLIER, STANDARD_HOURS_PER_DAY
from ..model import OvertimeLine, PayPeriod


class OvertimeCalculator:
    """1.5x the hourly rate derived from the start month, whatever the span."""

    def hourly_rate(self, monthly_salary: float, period: PayPeriod) -> float:
        start_month_days = days_in_month(period.start.year, period.start.month)
        return round2(monthly_salary / (start_month_days * STANDARD_HOURS_PER_DAY) * OVERTIME_MULTIPLIER)

    def calculate(self, monthly_salary: float, period: PayPeriod, hours: float) -> OvertimeLine:
        rate = self.hourly_rate(monthly_salary, period)
        hours = max(float(hours), 0.0)
        return OvertimeLine(hours=hours, rate=rate, amount=round2(hours * rate))
