from datetime import date

import pytest

from src.textile_payroll.textile_payroll.payroll.calculator.proration import ProRationCalculator
from src.textile_payroll.textile_payroll.payroll.model import PayPeriod


def test_partial_month_uses_start_month_daily_rate():
    calc = ProRationCalculator()
    period = PayPeriod(date(2025, 3, 1), date(2025, 3, 15))

    assert calc.basic_salary(60000, period, 15) == 29032.26


def test_full_month_returns_monthly_salary_exactly():
    calc = ProRationCalculator()

    assert calc.basic_salary(60000, PayPeriod.for_month(2025, 3), 31) == 60000
    assert calc.basic_salary(33333.33, PayPeriod.for_month(2025, 2), 28) == 33333.33


def test_full_month_shortcut_ignores_working_days():
    calc = ProRationCalculator()

    assert calc.basic_salary(60000, PayPeriod.for_month(2025, 4), 12) == 60000


@pytest.mark.parametrize("salary", [60000, 45123.45, 17000, 99999.99])
@pytest.mark.parametrize("split_day", [10, 15, 16, 20])
def test_adjacent_halves_sum_to_full_month(salary, split_day):
    calc = ProRationCalculator()
    first = PayPeriod(date(2025, 3, 1), date(2025, 3, split_day))
    second = PayPeriod(date(2025, 3, split_day + 1), date(2025, 3, 31))

    total = calc.basic_salary(salary, first, first.total_days) + calc.basic_salary(salary, second, second.total_days)

    assert abs(total - calc.basic_salary(salary, PayPeriod.for_month(2025, 3), 31)) <= 0.01 + 1e-9


def test_multi_month_with_every_day_uses_each_months_rate():
    calc = ProRationCalculator()
    period = PayPeriod(date(2025, 1, 16), date(2025, 2, 15))

    # 16 days of January at 60000/31 plus 15 days of February at 60000/28.
    assert calc.basic_salary(60000, period, period.total_days) == 63110.60


def test_multi_month_adds_full_months_in_between():
    calc = ProRationCalculator()
    period = PayPeriod(date(2025, 1, 20), date(2025, 3, 10))

    assert period.total_days == 50
    assert calc.basic_salary(60000, period, 50) == 102580.65


def test_multi_month_other_day_counts_priced_at_start_month_rate():
    calc = ProRationCalculator()
    period = PayPeriod(date(2025, 1, 16), date(2025, 2, 15))

    assert calc.basic_salary(60000, period, 20) == 38709.68


def test_half_days_price_half_a_day():
    calc = ProRationCalculator()
    period = PayPeriod(date(2025, 4, 1), date(2025, 4, 10))

    assert calc.basic_salary(30000, period, 9.5) == 9500.00
