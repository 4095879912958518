from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Per-user, per-day access to attendance records.

    Every method may raise ``UnavailableError`` or ``IndexNotReadyError``.
    """

    def find_by_user_and_day(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_all_by_day(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Inclusive range, newest ``work_date`` first."""

        raise NotImplementedError

    def find_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: Optional[datetime],
        status: AttendanceStatus,
        overtime: float = 0.0,
    ) -> int:
        """Insert a record and return its id.

        The insert is conditional on (user_id, work_date): when a record already
        exists, ``DuplicateRecordError`` is raised and nothing is written.
        """

        raise NotImplementedError

    def update(self, attendance_id: int, *, check_out_time: datetime, overtime: float) -> None:
        """Set check-out fields. Raises ``RecordNotFoundError`` for an unknown id."""

        raise NotImplementedError
