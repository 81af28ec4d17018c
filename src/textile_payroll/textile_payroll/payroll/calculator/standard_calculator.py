from __future__ import annotations

from datetime import datetime, timedelta

from ...attendance.model import AttendanceRecord
from ...core.constants import HALF_DAY_HOURS, STANDARD_HOURS_PER_DAY
from ...core.enums import AttendanceStatus
from .base import HoursCalculator

_DAY = datetime(2000, 1, 1)


class StandardHoursCalculator(HoursCalculator):
    """Standard rule: check_out - check_in, a check-out before check-in is next day.

    Present/Late without both times count a full day; Half Day counts half.
    """

    def hours_worked(self, record: AttendanceRecord) -> float:
        if record.status == AttendanceStatus.HALF_DAY:
            return float(HALF_DAY_HOURS)
        if record.status not in (AttendanceStatus.PRESENT, AttendanceStatus.LATE):
            return 0.0
        if record.check_in is None or record.check_out is None:
            return float(STANDARD_HOURS_PER_DAY)

        check_in = datetime.combine(_DAY, record.check_in)
        check_out = datetime.combine(_DAY, record.check_out)
        if check_out < check_in:
            check_out += timedelta(days=1)
        return (check_out - check_in).total_seconds() / 3600
