from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from ...attendance.model import AttendanceRecord
from ...attendance.repository import AttendanceRepository
from ...common.datetime_utils import iter_days
from ...common.money import round2
from ...core.constants import DEFAULT_WEEKEND_DAYS
from ...core.enums import AttendanceStatus
from ..model import AttendanceSummary, PayPeriod
from .base import HoursCalculator
from .standard_calculator import StandardHoursCalculator


class AttendanceAggregator:
    """Reduce an employee's attendance over a pay period into counts.

    A working day (not in ``weekend_days``) without any record counts as
    Absent. Records on weekend days still count under their own status.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
        hours_calculator: Optional[HoursCalculator] = None,
    ):
        self._attendance = attendance
        self._weekend_days = frozenset(int(d) for d in weekend_days)
        self._hours = hours_calculator or StandardHoursCalculator()

    @property
    def weekend_days(self) -> frozenset[int]:
        return self._weekend_days

    def aggregate(self, employee_id: int, period: PayPeriod) -> AttendanceSummary:
        records = self._attendance.get_for_employee_between(employee_id, period.start, period.end)
        return self.summarize(employee_id, period, records)

    def summarize(self, employee_id: int, period: PayPeriod, records: Sequence[AttendanceRecord]) -> AttendanceSummary:
        in_period = [r for r in records if period.start <= r.work_date <= period.end]
        counts = Counter(r.status for r in in_period)
        recorded_dates = {r.work_date for r in in_period}

        working_days = 0
        missing = 0
        for day in iter_days(period.start, period.end):
            if day.weekday() in self._weekend_days:
                continue
            working_days += 1
            if day not in recorded_dates:
                missing += 1

        return AttendanceSummary(
            employee_id=int(employee_id),
            total_days=period.total_days,
            working_days=working_days,
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT] + missing,
            late=counts[AttendanceStatus.LATE],
            half_day=counts[AttendanceStatus.HALF_DAY],
            leave=counts[AttendanceStatus.ON_LEAVE],
            total_hours_worked=round2(sum(self._hours.hours_worked(r) for r in in_period)),
            total_overtime_hours=round2(sum(r.overtime_hours or 0.0 for r in in_period)),
            record_ids=tuple(r.attendance_id for r in in_period),
        )
