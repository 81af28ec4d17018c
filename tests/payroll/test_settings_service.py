from dataclasses import replace

import pytest

from src.textile_payroll.textile_payroll.core.exceptions import ValidationError
from src.textile_payroll.textile_payroll.payroll.rules import Fixed, Percentage
from src.textile_payroll.textile_payroll.payroll.settings_model import PayrollSettings
from src.textile_payroll.textile_payroll.payroll.settings_service import PayrollSettingsService


class FakeSettingsRepo:
    def __init__(self):
        self._active = None
        self.saves = 0

    def get_active(self):
        return self._active

    def save_active(self, settings):
        self.saves += 1
        self._active = replace(settings, settings_id=settings.settings_id or 7)
        return self._active

    def delete_active(self):
        self._active = None


def test_defaults_are_created_once():
    repo = FakeSettingsRepo()
    svc = PayrollSettingsService(repo)

    first = svc.get_settings()
    second = svc.get_settings()

    assert first == second
    assert repo.saves == 1
    assert first.settings_id == 7
    assert first.allowances.housing == Percentage(10)
    assert first.allowances.transport == Fixed(2000)
    assert first.deductions.insurance == Percentage(5)


def test_partial_update_keeps_other_rules():
    svc = PayrollSettingsService(FakeSettingsRepo())

    updated = svc.update_settings({"allowances": {"meal": {"type": "fixed", "value": "1800"}}, "deductions": {"tax": {"type": "percentage", "value": 12}}})

    assert updated.allowances.meal == Fixed(1800)
    assert updated.allowances.housing == Percentage(10)
    assert updated.deductions.tax == Percentage(12)
    assert updated.settings_id == 7


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {"allowances": ["housing"]},
        {"allowances": {"housing": {"type": "ratio", "value": 5}}},
        {"deductions": {"tax": {"type": "percentage", "value": "ten"}}},
        {"deductions": {"other": {"type": "fixed", "value": -1}}},
    ],
)
def test_invalid_updates_are_rejected(payload):
    svc = PayrollSettingsService(FakeSettingsRepo())

    with pytest.raises(ValidationError):
        svc.update_settings(payload)


def test_reset_restores_defaults():
    svc = PayrollSettingsService(FakeSettingsRepo())
    svc.update_settings({"allowances": {"housing": {"type": "fixed", "value": 0}}})

    reset = svc.reset_settings()

    assert reset.allowances == PayrollSettings().allowances
    assert reset.deductions == PayrollSettings().deductions


def test_settings_round_trip_through_dict():
    settings = PayrollSettings()

    assert PayrollSettings.from_dict(settings.to_dict()) == settings
