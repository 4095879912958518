from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceState
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    DuplicateRecordError,
    MarkedAbsentError,
    NoCheckInFoundError,
    UnknownEmployeeError,
)
from ..users.repository import UserDirectory
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, CheckInResult, TodayStatus
from .policy import TimePolicy
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Daily check-in/check-out lifecycle per user: NO_RECORD -> CHECKED_IN -> CHECKED_OUT.

    Every call re-reads the day's record before writing, so a caller may retry a
    failed call as a whole. Store errors are not retried here.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserDirectory,
        *,
        policy: TimePolicy | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._policy = policy or TimePolicy()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def policy(self) -> TimePolicy:
        return self._policy

    def check_in(self, user_id: int, *, now: datetime | None = None) -> CheckInResult:
        now = self._policy.localize(now or now_utc())
        today = self._policy.start_of_day(now)

        if not self._users.get_by_id(user_id):
            raise UnknownEmployeeError()

        existing = self._attendance.find_by_user_and_day(user_id, today)
        if existing:
            if existing.check_in_time is None:
                raise MarkedAbsentError()
            raise AlreadyCheckedInError()

        decision = self._factory.for_checkin(now=now, today=today, policy=self._policy).decide_checkin(
            policy=self._policy
        )

        try:
            attendance_id = self._attendance.create(
                user_id=user_id,
                work_date=today,
                check_in_time=now,
                status=decision.status,
                overtime=0.0,
            )
        except DuplicateRecordError:
            # Lost a race with a concurrent check-in or the absence sweep.
            logger.info("check-in for user %s on %s lost to a concurrent insert", user_id, today)
            raise AlreadyCheckedInError()

        logger.info("user %s checked in at %s as %s", user_id, now.isoformat(), decision.status.value)
        record = AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=today,
            check_in_time=now,
            check_out_time=None,
            status=decision.status,
            overtime=0.0,
        )
        return CheckInResult(record=record, message=decision.message)

    def check_out(self, user_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._policy.localize(now or now_utc())
        today = self._policy.start_of_day(now)

        record = self._attendance.find_by_user_and_day(user_id, today)
        if not record or record.check_in_time is None:
            raise NoCheckInFoundError()
        if record.check_out_time is not None:
            raise AlreadyCheckedOutError()

        overtime = self._policy.compute_overtime(record.check_in_time, now)
        self._attendance.update(record.attendance_id, check_out_time=now, overtime=overtime)

        logger.info("user %s checked out at %s (overtime %.2fh)", user_id, now.isoformat(), overtime)
        return replace(record, check_out_time=now, overtime=overtime)

    def get_today_status(self, user_id: int, *, now: datetime | None = None) -> TodayStatus:
        """On-demand pull of today's state; any refresh cadence belongs to the caller."""
        now = self._policy.localize(now or now_utc())
        record = self._attendance.find_by_user_and_day(user_id, self._policy.start_of_day(now))
        if not record:
            return TodayStatus(state=AttendanceState.NO_RECORD)

        state = record.state
        if state == AttendanceState.CHECKED_OUT:
            message = "You have completed your attendance for today"
        elif state == AttendanceState.MARKED_ABSENT:
            message = "You have been marked absent for today"
        else:
            message = self._factory.for_status(record.status).describe(policy=self._policy)
        return TodayStatus(state=state, record=record, message=message)

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.find_recent_for_user(user_id, limit)
