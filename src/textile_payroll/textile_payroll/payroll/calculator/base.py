from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceRecord


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for hours worked per record)."""

    @abstractmethod
    def hours_worked(self, record: AttendanceRecord) -> float:
        raise NotImplementedError
