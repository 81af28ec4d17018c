import os

from .config import (  # noqa: F401
    AUTO_PAYROLL_DAY,
    AUTO_PAYROLL_ENABLED,
    AUTO_PAYROLL_HOUR,
    AUTO_PAYROLL_TICK_SECONDS,
    LOG_LEVEL,
    WEEKEND_DAYS,
    db_config,
    env_flag,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
