"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Manila"
# date.weekday(): Monday=0 ... Sunday=6
DEFAULT_EXCLUDED_WEEKDAY = 6

DEFAULT_TIME_IN_START = "07:00"
DEFAULT_TIME_IN_END = "09:00"
DEFAULT_TIME_OUT_START = "17:00"
DEFAULT_TIME_OUT_END = "19:00"

LATE_GRACE_MINUTES = 1
EXPECTED_DAILY_HOURS = 8
LATE_DEDUCTION_CAP_RATIO = 0.5

# Every payroll period is treated as half a month, whatever its length.
SEMI_MONTHLY_FACTOR = 0.5

DEFAULT_HISTORY_LIMIT = 30
SNAPSHOT_SCHEMA_VERSION = 1
