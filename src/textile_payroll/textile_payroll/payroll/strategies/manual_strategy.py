from __future__ import annotations

from ...core.exceptions import ValidationError
from ..model import AttendanceSummary, PreviewOptions
from .base import WorkingDaysStrategy


class ManualStrategy(WorkingDaysStrategy):
    """Manually entered working days; half days still come from attendance."""

    def effective_working_days(self, summary: AttendanceSummary, options: PreviewOptions) -> float:
        if options.manual_working_days is None:
            raise ValidationError("Working days are required in manual mode")
        return float(options.manual_working_days) + 0.5 * summary.half_day

    def overtime_hours(self, summary: AttendanceSummary, options: PreviewOptions) -> float:
        if options.manual_overtime_hours is not None:
            return float(options.manual_overtime_hours)
        return summary.total_overtime_hours
