from .config import WEEKEND_DAYS, db_config, env_flag  # noqa: F401

SECRET_KEY = "test-secret"

DB_CONFIG = db_config()

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")

# The scheduler thread never starts under tests.
AUTO_PAYROLL_ENABLED = False
AUTO_PAYROLL_DAY = 1
AUTO_PAYROLL_HOUR = 0
AUTO_PAYROLL_TICK_SECONDS = 60
