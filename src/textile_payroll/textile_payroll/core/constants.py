"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Python weekday indices (Monday=0 ... Sunday=6).
DEFAULT_WEEKEND_DAYS = (5, 6)

STANDARD_HOURS_PER_DAY = 8
HALF_DAY_HOURS = 4
OVERTIME_MULTIPLIER = 1.5

DEFAULT_HISTORY_LIMIT = 20

AUTO_PAYROLL_DAY = 1
AUTO_PAYROLL_HOUR = 0
AUTO_PAYROLL_TICK_SECONDS = 60
