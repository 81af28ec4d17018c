from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import AttendanceSummary, PreviewOptions


class WorkingDaysStrategy(ABC):
    """Strategy Pattern: where the pro-ration numerator comes from."""

    @abstractmethod
    def effective_working_days(self, summary: AttendanceSummary, options: PreviewOptions) -> float:
        raise NotImplementedError

    @abstractmethod
    def overtime_hours(self, summary: AttendanceSummary, options: PreviewOptions) -> float:
        raise NotImplementedError
