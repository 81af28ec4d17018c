from __future__ import annotations

from datetime import date

from ...common.datetime_utils import days_in_month
from ...common.money import round2
from ..model import PayPeriod


def _next_month(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


class ProRationCalculator:
    """Monthly base salary -> basic salary for a concrete pay period.

    Same month: the start month's daily rate times the effective working
    days, except that the whole calendar month returns the monthly salary
    unchanged.

    Across months: when the effective working days equal the period's day
    count, each partial month is priced at its own daily rate and the months
    in between at the full salary. Any other day count is priced uniformly at
    the start month's daily rate.
    """

    def basic_salary(self, monthly_salary: float, period: PayPeriod, effective_working_days: float) -> float:
        start_month_days = days_in_month(period.start.year, period.start.month)

        if period.is_same_month:
            if period.is_full_month:
                return float(monthly_salary)
            return round2(monthly_salary / start_month_days * effective_working_days)

        if effective_working_days == period.total_days:
            return self._calendar_prorated(monthly_salary, period)

        return round2(monthly_salary / start_month_days * effective_working_days)

    def _calendar_prorated(self, monthly_salary: float, period: PayPeriod) -> float:
        start, end = period.start, period.end

        start_month_days = days_in_month(start.year, start.month)
        lead = round2(monthly_salary / start_month_days * (start_month_days - start.day + 1))
        total = lead

        cursor = _next_month(start)
        while (cursor.year, cursor.month) < (end.year, end.month):
            total = round2(total + monthly_salary)
            cursor = _next_month(cursor)

        end_month_days = days_in_month(end.year, end.month)
        tail = round2(monthly_salary / end_month_days * end.day)
        return round2(total + tail)
