from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceState, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per user per calendar day."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    overtime: float = 0.0

    @property
    def state(self) -> AttendanceState:
        if self.check_in_time is None:
            return AttendanceState.MARKED_ABSENT
        if self.check_out_time is None:
            return AttendanceState.CHECKED_IN
        return AttendanceState.CHECKED_OUT

    @property
    def worked_minutes(self) -> int:
        if not self.check_in_time or not self.check_out_time:
            return 0
        return int((self.check_out_time - self.check_in_time).total_seconds() // 60)


@dataclass(frozen=True)
class CheckInResult:
    record: AttendanceRecord
    message: str


@dataclass(frozen=True)
class TodayStatus:
    """Read-model for the dashboard: today's state plus the record behind it, if any."""

    state: AttendanceState
    record: Optional[AttendanceRecord] = None
    message: Optional[str] = None
