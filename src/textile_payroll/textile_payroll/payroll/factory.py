from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import CalculationMode
from .strategies.automatic_strategy import AutomaticStrategy
from .strategies.base import WorkingDaysStrategy
from .strategies.manual_strategy import ManualStrategy


@dataclass
class WorkingDaysStrategyFactory:
    """Factory Pattern: choose the working-days strategy for a calculation mode."""

    def for_mode(self, mode: CalculationMode) -> WorkingDaysStrategy:
        if mode == CalculationMode.MANUAL:
            return ManualStrategy()
        return AutomaticStrategy()
