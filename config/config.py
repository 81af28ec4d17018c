"""Settings shared by every environment, read from DB_* and AUTO_* env vars."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def env_weekend_days(default: str = "5,6") -> tuple:
    # Python weekday indices, Monday=0 ... Sunday=6.
    raw = os.getenv("WEEKEND_DAYS", default)
    return tuple(int(part) for part in raw.split(",") if part.strip())


def db_config(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "textile_payroll"),
    }


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
WEEKEND_DAYS = env_weekend_days()

AUTO_PAYROLL_ENABLED = env_flag("AUTO_PAYROLL_ENABLED", "0")
AUTO_PAYROLL_DAY = int(os.getenv("AUTO_PAYROLL_DAY", "1"))
AUTO_PAYROLL_HOUR = int(os.getenv("AUTO_PAYROLL_HOUR", "0"))
AUTO_PAYROLL_TICK_SECONDS = int(os.getenv("AUTO_PAYROLL_TICK_SECONDS", "60"))
