"""Settings shared by every environment; each env module star-imports and overrides."""

import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Attendance policy (HH:MM, local to TIMEZONE)
TIMEZONE = os.getenv("TIMEZONE", "Asia/Dhaka")
LATE_THRESHOLD = os.getenv("LATE_THRESHOLD", "10:15")
ABSENT_THRESHOLD = os.getenv("ABSENT_THRESHOLD", "11:00")
STANDARD_WORK_MINUTES = int(os.getenv("STANDARD_WORK_MINUTES", "480"))

# Absence sweep; disable when an external cron runs scripts/run_sweep.py instead.
SWEEP_ENABLED = bool(int(os.getenv("SWEEP_ENABLED", "0")))
SWEEP_TIME = os.getenv("SWEEP_TIME", "11:00")

INDEX_RETRY_ATTEMPTS = int(os.getenv("INDEX_RETRY_ATTEMPTS", "3"))
INDEX_RETRY_DELAY_SECONDS = float(os.getenv("INDEX_RETRY_DELAY_SECONDS", "2.0"))

DEBUG = False
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
