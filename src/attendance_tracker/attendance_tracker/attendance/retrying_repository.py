from __future__ import annotations

import logging
import time
from datetime import date, datetime
from typing import Callable, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_INDEX_RETRY_ATTEMPTS, DEFAULT_INDEX_RETRY_DELAY_SECONDS
from ..core.enums import AttendanceStatus
from ..core.exceptions import IndexNotReadyError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryingAttendanceRepository(AttendanceRepository):
    """Decorator over any AttendanceRepository that waits out ``IndexNotReadyError``.

    Each attempt waits ``delay_seconds * attempt`` before the next one. Other
    errors, ``UnavailableError`` included, are raised on the first occurrence.
    """

    def __init__(
        self,
        inner: AttendanceRepository,
        *,
        attempts: int = DEFAULT_INDEX_RETRY_ATTEMPTS,
        delay_seconds: float = DEFAULT_INDEX_RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self._inner = inner
        self._attempts = int(attempts)
        self._delay = float(delay_seconds)
        self._sleep = sleep

    def _call(self, operation: str, fn: Callable[[], T]) -> T:
        attempt = 1
        while True:
            try:
                return fn()
            except IndexNotReadyError:
                if attempt >= self._attempts:
                    logger.error("%s: index still not ready after %d attempts", operation, attempt)
                    raise
                wait = self._delay * attempt
                logger.warning("%s: index not ready, retrying in %.1fs (attempt %d/%d)", operation, wait, attempt, self._attempts)
                self._sleep(wait)
                attempt += 1

    def find_by_user_and_day(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._call("find_by_user_and_day", lambda: self._inner.find_by_user_and_day(user_id, work_date))

    def find_all_by_day(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._call("find_all_by_day", lambda: self._inner.find_all_by_day(work_date))

    def find_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        return self._call(
            "find_range",
            lambda: self._inner.find_range(start_date=start_date, end_date=end_date, user_id=user_id),
        )

    def find_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        return self._call("find_recent_for_user", lambda: self._inner.find_recent_for_user(user_id, limit))

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: Optional[datetime],
        status: AttendanceStatus,
        overtime: float = 0.0,
    ) -> int:
        return self._call(
            "create",
            lambda: self._inner.create(
                user_id=user_id,
                work_date=work_date,
                check_in_time=check_in_time,
                status=status,
                overtime=overtime,
            ),
        )

    def update(self, attendance_id: int, *, check_out_time: datetime, overtime: float) -> None:
        self._call(
            "update",
            lambda: self._inner.update(attendance_id, check_out_time=check_out_time, overtime=overtime),
        )
