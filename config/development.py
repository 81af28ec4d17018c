import os

from .config import (  # noqa: F401
    AUTO_PAYROLL_DAY,
    AUTO_PAYROLL_ENABLED,
    AUTO_PAYROLL_HOUR,
    AUTO_PAYROLL_TICK_SECONDS,
    WEEKEND_DAYS,
    db_config,
    env_flag,
)

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
