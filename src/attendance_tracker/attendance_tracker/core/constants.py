"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_LATE_THRESHOLD = time(10, 15)
DEFAULT_ABSENT_THRESHOLD = time(11, 0)
DEFAULT_STANDARD_WORK_MINUTES = 8 * 60
DEFAULT_TIMEZONE = "Asia/Dhaka"

DEFAULT_SWEEP_TIME = time(11, 0)
SWEEP_MISFIRE_GRACE_SECONDS = 3600

DEFAULT_INDEX_RETRY_ATTEMPTS = 3
DEFAULT_INDEX_RETRY_DELAY_SECONDS = 2.0

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_REPORT_DAYS = 7
