from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in [start, end]."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def working_days_between(start: date, end: date, weekends: Iterable[int]) -> int:
    weekend_set = frozenset(weekends)
    return sum(1 for d in iter_days(start, end) if d.weekday() not in weekend_set)


def working_days_in_month(year: int, month: int, weekends: Iterable[int]) -> int:
    start, end = month_bounds(year, month)
    return working_days_between(start, end, weekends)


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1
