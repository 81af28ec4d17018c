import threading
from datetime import datetime

import pytest

from src.textile_payroll.textile_payroll.core.exceptions import ValidationError
from src.textile_payroll.textile_payroll.payroll.model import BatchResult
from src.textile_payroll.textile_payroll.payroll.scheduler import (
    AutoGenerationConfig,
    MonthlyPayrollScheduler,
    should_fire,
)


class FakePayrollService:
    def __init__(self):
        self.calls = []
        self.called = threading.Event()

    def generate_all(self, month, year, *, overwrite=False, max_workers=None):
        self.calls.append((month, year))
        self.called.set()
        return BatchResult(month=month, year=year)


def test_disabled_config_never_fires():
    assert not should_fire(AutoGenerationConfig(enabled=False), datetime(2025, 4, 1, 12))


def test_fires_once_day_and_hour_are_reached():
    config = AutoGenerationConfig(enabled=True, day_of_month=3, hour=6)

    assert not should_fire(config, datetime(2025, 4, 2, 23))
    assert not should_fire(config, datetime(2025, 4, 3, 5, 59))
    assert should_fire(config, datetime(2025, 4, 3, 6))
    assert should_fire(config, datetime(2025, 4, 20, 1))


def test_does_not_fire_twice_in_one_month():
    config = AutoGenerationConfig(enabled=True, last_run=datetime(2025, 4, 1, 0, 5))

    assert not should_fire(config, datetime(2025, 4, 15))
    assert should_fire(config, datetime(2025, 5, 1))


def test_day_past_month_end_fires_on_last_day():
    config = AutoGenerationConfig(enabled=True, day_of_month=31)

    assert should_fire(config, datetime(2025, 4, 30))
    assert not should_fire(config, datetime(2025, 4, 29, 23))


def test_invalid_config_is_rejected():
    with pytest.raises(ValidationError):
        AutoGenerationConfig(day_of_month=0)
    with pytest.raises(ValidationError):
        AutoGenerationConfig(hour=24)


def test_tick_generates_previous_month_once():
    service = FakePayrollService()
    scheduler = MonthlyPayrollScheduler(service, config=AutoGenerationConfig(enabled=True))

    first = scheduler.tick(datetime(2025, 1, 1, 0, 30))
    second = scheduler.tick(datetime(2025, 1, 2, 0, 30))

    assert first.month == 12 and first.year == 2024
    assert second is None
    assert service.calls == [(12, 2024)]
    assert scheduler.status().last_run == datetime(2025, 1, 1, 0, 30)


def test_enable_and_disable_are_explicit_transitions():
    scheduler = MonthlyPayrollScheduler(FakePayrollService())

    enabled = scheduler.enable()
    disabled = scheduler.disable()

    assert enabled.enabled is True
    assert disabled.enabled is False
    assert scheduler.status() == disabled
    assert scheduler.tick(datetime(2025, 6, 1, 12)) is None


def test_run_now_defaults_to_previous_month():
    service = FakePayrollService()
    scheduler = MonthlyPayrollScheduler(service, clock=lambda: datetime(2025, 3, 18, 10))

    scheduler.run_now()
    scheduler.run_now(7, 2024)

    assert service.calls == [(2, 2025), (7, 2024)]
    with pytest.raises(ValidationError):
        scheduler.run_now(0, 2025)


def test_background_thread_runs_due_tick():
    service = FakePayrollService()
    scheduler = MonthlyPayrollScheduler(
        service,
        config=AutoGenerationConfig(enabled=True),
        clock=lambda: datetime(2025, 8, 1, 3),
        tick_interval_seconds=0.01,
    )

    scheduler.start()
    try:
        assert service.called.wait(timeout=5)
    finally:
        scheduler.stop(timeout=5)

    assert service.calls == [(7, 2025)]
    assert not scheduler.is_running
