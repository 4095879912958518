from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from .policy import TimePolicy
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_status(self, status: AttendanceStatus) -> AttendanceStrategy:
        if status == AttendanceStatus.ABSENT:
            return AbsentStrategy()
        if status == AttendanceStatus.LATE:
            return LateStrategy()
        return PresentStrategy()

    def for_checkin(self, *, now: datetime, today: Optional[date], policy: TimePolicy) -> AttendanceStrategy:
        return self.for_status(policy.classify_check_in(now, today))
