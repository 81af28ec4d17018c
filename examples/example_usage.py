"""Example: drive the payroll service directly, without Flask.

Controllers are a thin layer; previews and generation live in PayrollService.
"""

import importlib
import json

from dotenv import load_dotenv

from config import get_settings_module

from src.textile_payroll.textile_payroll.container import build_container
from src.textile_payroll.textile_payroll.payroll.model import PayPeriod, PreviewOptions


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, weekend_days=settings.WEEKEND_DAYS)

    period = PayPeriod.for_month(2025, 3)
    preview = container.payroll_service.compute_preview(1, period, PreviewOptions())
    print(json.dumps(preview.to_dict(), indent=2))

    overlap = container.payroll_service.check_overlap(1, period)
    print("overlapping:", overlap.overlapping)


if __name__ == "__main__":
    main()
