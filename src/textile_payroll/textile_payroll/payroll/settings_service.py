from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .settings_model import AllowanceRules, DeductionRules, PayrollSettings
from .settings_repository import PayrollSettingsRepository

logger = logging.getLogger(__name__)


class PayrollSettingsService:
    def __init__(self, settings: PayrollSettingsRepository):
        self._settings = settings

    def get_settings(self) -> PayrollSettings:
        current = self._settings.get_active()
        if current is None:
            logger.info("No payroll settings stored, creating defaults")
            current = self._settings.save_active(PayrollSettings())
        return current

    def update_settings(self, payload: Optional[dict[str, Any]]) -> PayrollSettings:
        """Partial update: only the rules present in ``payload`` change."""
        if not isinstance(payload, dict):
            raise ValidationError("Settings payload must be an object")
        allowances_raw = payload.get("allowances")
        deductions_raw = payload.get("deductions")
        for name, raw in (("allowances", allowances_raw), ("deductions", deductions_raw)):
            if raw is not None and not isinstance(raw, dict):
                raise ValidationError(f"{name} must be an object")

        current = self.get_settings()
        updated = PayrollSettings(
            allowances=AllowanceRules.from_dict(allowances_raw, strict=True, base=current.allowances),
            deductions=DeductionRules.from_dict(deductions_raw, strict=True, base=current.deductions),
            settings_id=current.settings_id,
        )
        saved = self._settings.save_active(updated)
        logger.info("Payroll settings updated (settings_id=%s)", saved.settings_id)
        return saved

    def reset_settings(self) -> PayrollSettings:
        self._settings.delete_active()
        saved = self._settings.save_active(PayrollSettings())
        logger.info("Payroll settings reset to defaults")
        return saved
