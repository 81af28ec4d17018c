from __future__ import annotations

from ..model import AttendanceSummary, PreviewOptions
from .base import WorkingDaysStrategy


class AutomaticStrategy(WorkingDaysStrategy):
    """Attendance-driven: present + late + half of the half days."""

    def effective_working_days(self, summary: AttendanceSummary, options: PreviewOptions) -> float:
        return summary.days_worked + 0.5 * summary.half_day

    def overtime_hours(self, summary: AttendanceSummary, options: PreviewOptions) -> float:
        return summary.total_overtime_hours
