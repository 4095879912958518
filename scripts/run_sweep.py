"""Run the absence sweep once, for cron or other external schedulers.

Usage: python scripts/run_sweep.py [YYYY-MM-DD]

Without a date the sweep targets today in the configured timezone. Re-running
for the same day is harmless. Exit status is 1 when any employee could not be
marked, so the scheduler can alert and retry, and 2 when the day's absent
threshold has not passed yet.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from attendance_tracker.common.datetime_utils import parse_iso_date
from attendance_tracker.container import build_container
from attendance_tracker.core.exceptions import SweepTooEarlyError
from attendance_tracker.main import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mark employees without an attendance record as ABSENT.")
    parser.add_argument("date", nargs="?", type=parse_iso_date, help="day to sweep (YYYY-MM-DD), default today")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(settings)

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    try:
        result = container.absence_sweeper.run(args.date)
    except SweepTooEarlyError as e:
        print(e, file=sys.stderr)
        return 2

    print(
        f"{result.work_date}: marked={result.marked_count} "
        f"already_recorded={result.already_recorded} failed={result.failed_user_ids}"
    )
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
