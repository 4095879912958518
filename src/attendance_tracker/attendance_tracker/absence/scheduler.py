from __future__ import annotations

import logging
from datetime import time

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..core.constants import DEFAULT_SWEEP_TIME, DEFAULT_TIMEZONE, SWEEP_MISFIRE_GRACE_SECONDS
from .sweeper import AbsenceSweeper

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "absence-sweep"


def run_sweep_job(sweeper: AbsenceSweeper) -> None:
    result = sweeper.run()
    if result.failed_user_ids:
        logger.warning(
            "absence sweep for %s left %d users unmarked: %s",
            result.work_date,
            len(result.failed_user_ids),
            result.failed_user_ids,
        )


def build_scheduler(
    sweeper: AbsenceSweeper,
    *,
    timezone: str = DEFAULT_TIMEZONE,
    sweep_time: time = DEFAULT_SWEEP_TIME,
) -> BackgroundScheduler:
    """Daily cron job for the absence sweep. The caller owns ``start()``/``shutdown()``.

    ``sweep_time`` may not be earlier than the sweeper's absent threshold.
    """
    if sweep_time < sweeper.policy.absent_threshold:
        raise ValueError(
            f"sweep_time {sweep_time.strftime('%H:%M')} is earlier than the absent threshold "
            f"{sweeper.policy.absent_threshold.strftime('%H:%M')}"
        )

    scheduler = BackgroundScheduler(
        timezone=timezone,
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": SWEEP_MISFIRE_GRACE_SECONDS,
        },
    )
    scheduler.add_job(
        run_sweep_job,
        CronTrigger(hour=sweep_time.hour, minute=sweep_time.minute, timezone=timezone),
        args=[sweeper],
        id=SWEEP_JOB_ID,
        replace_existing=True,
    )
    logger.info("absence sweep scheduled daily at %s (%s)", sweep_time.strftime("%H:%M"), timezone)
    return scheduler
