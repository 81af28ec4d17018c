from __future__ import annotations

from typing import Optional, Protocol

from .settings_model import PayrollSettings


class PayrollSettingsRepository(Protocol):
    def get_active(self) -> Optional[PayrollSettings]:
        raise NotImplementedError

    def save_active(self, settings: PayrollSettings) -> PayrollSettings:
        raise NotImplementedError

    def delete_active(self) -> None:
        raise NotImplementedError
