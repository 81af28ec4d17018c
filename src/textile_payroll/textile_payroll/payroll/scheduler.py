"""Automatic monthly payroll generation.

``AutoGenerationConfig`` is an immutable record; enabling, disabling and
recording a run each produce a new one. ``should_fire`` is pure so it can be
tested without threads or a clock. ``MonthlyPayrollScheduler`` polls it from
a daemon thread and runs bulk generation for the previous calendar month.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import days_in_month, now_local, previous_month
from ..common.validators import require_month
from ..core.constants import AUTO_PAYROLL_DAY, AUTO_PAYROLL_HOUR, AUTO_PAYROLL_TICK_SECONDS
from ..core.exceptions import ValidationError
from .model import BatchResult
from .service import PayrollService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoGenerationConfig:
    enabled: bool = False
    day_of_month: int = AUTO_PAYROLL_DAY
    hour: int = AUTO_PAYROLL_HOUR
    last_run: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not 1 <= int(self.day_of_month) <= 31:
            raise ValidationError("Day of month must be between 1 and 31")
        if not 0 <= int(self.hour) <= 23:
            raise ValidationError("Hour must be between 0 and 23")

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "dayOfMonth": self.day_of_month,
            "hour": self.hour,
            "lastRun": self.last_run.isoformat() if self.last_run else None,
        }


def should_fire(config: AutoGenerationConfig, now: datetime) -> bool:
    """Enabled, the configured day/hour reached this month, and not yet run this month."""
    if not config.enabled:
        return False
    # Day 31 in a 30-day month fires on the last day.
    due_day = min(config.day_of_month, days_in_month(now.year, now.month))
    if (now.day, now.hour) < (due_day, config.hour):
        return False
    if config.last_run and (config.last_run.year, config.last_run.month) == (now.year, now.month):
        return False
    return True


class MonthlyPayrollScheduler:
    def __init__(
        self,
        payroll_service: PayrollService,
        *,
        config: Optional[AutoGenerationConfig] = None,
        clock: Callable[[], datetime] = now_local,
        tick_interval_seconds: float = AUTO_PAYROLL_TICK_SECONDS,
        max_workers: Optional[int] = None,
    ):
        self._service = payroll_service
        self._config = config or AutoGenerationConfig()
        self._clock = clock
        self._tick_interval = tick_interval_seconds
        self._max_workers = max_workers
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def status(self) -> AutoGenerationConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def enable(self) -> AutoGenerationConfig:
        with self._lock:
            self._config = replace(self._config, enabled=True)
        logger.info("Automatic payroll generation enabled")
        return self._config

    def disable(self) -> AutoGenerationConfig:
        with self._lock:
            self._config = replace(self._config, enabled=False)
        logger.info("Automatic payroll generation disabled")
        return self._config

    def should_fire(self, now: Optional[datetime] = None) -> bool:
        return should_fire(self._config, now or self._clock())

    def tick(self, now: Optional[datetime] = None) -> Optional[BatchResult]:
        """Run the previous month's payroll when due. Returns None when nothing ran."""
        now = now or self._clock()
        with self._lock:
            if not should_fire(self._config, now):
                return None
            year, month = previous_month(now.year, now.month)
            return self._run(month, year, now)

    def run_now(self, month: Optional[int] = None, year: Optional[int] = None) -> BatchResult:
        now = self._clock()
        if month is None or year is None:
            year, month = previous_month(now.year, now.month)
        month, year = require_month(month, year)
        with self._lock:
            return self._run(month, year, now)

    def _run(self, month: int, year: int, now: datetime) -> BatchResult:
        logger.info("Automatic payroll run for %d/%d", month, year)
        result = self._service.generate_all(month, year, max_workers=self._max_workers)
        self._config = replace(self._config, last_run=now)
        if result.failed:
            logger.warning(
                "Automatic payroll run for %d/%d finished with %d failures",
                month,
                year,
                len(result.failed),
            )
        return result

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name="payroll-scheduler", daemon=True)
        self._thread.start()
        logger.info("Payroll scheduler started (tick every %ss)", self._tick_interval)

    def stop(self, timeout: float = 30.0) -> None:
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("Payroll scheduler stopped")

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Payroll scheduler tick failed")
            self._stop_event.wait(timeout=self._tick_interval)
