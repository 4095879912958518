from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..attendance.policy import TimePolicy
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError, SweepTooEarlyError
from ..users.repository import UserDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    work_date: date
    marked_count: int
    failed_user_ids: list[int] = field(default_factory=list)
    already_recorded: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed_user_ids


class AbsenceSweeper:
    """Backfill an ABSENT record for every employee with no record for the day.

    Safe to trigger more than once per day: only users still missing a record
    are written, so a repeated run marks nobody. A day can only be swept once
    its absent threshold has passed.
    """

    def __init__(self, attendance: AttendanceRepository, users: UserDirectory, *, policy: TimePolicy | None = None):
        self._attendance = attendance
        self._users = users
        self._policy = policy or TimePolicy()

    @property
    def policy(self) -> TimePolicy:
        return self._policy

    def run(self, trigger: Optional[datetime | date] = None, *, now: datetime | None = None) -> SweepResult:
        now = self._policy.localize(now or now_utc())
        work_date = self._policy.start_of_day(trigger if trigger is not None else now)

        cutoff = self._policy.threshold_instant(work_date, self._policy.absent_threshold)
        if now < cutoff:
            logger.warning("absence sweep for %s refused: cutoff %s not reached", work_date, cutoff.isoformat())
            raise SweepTooEarlyError(
                f"Absences for {work_date} cannot be recorded before {cutoff.strftime('%Y-%m-%d %H:%M')}"
            )

        logger.info("absence sweep started for %s", work_date)

        employees = self._users.list_all()
        existing_by_user = {r.user_id: r for r in self._attendance.find_all_by_day(work_date)}

        marked = 0
        raced = 0
        failed: list[int] = []
        for employee in employees:
            if employee.user_id in existing_by_user:
                continue
            try:
                self._attendance.create(
                    user_id=employee.user_id,
                    work_date=work_date,
                    check_in_time=None,
                    status=AttendanceStatus.ABSENT,
                    overtime=0.0,
                )
            except DuplicateRecordError:
                # Checked in (or another sweep ran) between our read and this insert.
                raced += 1
                continue
            except Exception:
                logger.exception("absence sweep: failed to mark user %s absent for %s", employee.user_id, work_date)
                failed.append(employee.user_id)
                continue
            marked += 1
            logger.debug("marked user %s absent for %s", employee.user_id, work_date)

        result = SweepResult(
            work_date=work_date,
            marked_count=marked,
            failed_user_ids=failed,
            already_recorded=len(existing_by_user) + raced,
        )
        logger.info(
            "absence sweep for %s done: marked=%d already_recorded=%d failed=%d",
            work_date,
            result.marked_count,
            result.already_recorded,
            len(result.failed_user_ids),
        )
        return result
