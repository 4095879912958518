from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..policy import TimePolicy
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, policy: TimePolicy) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            message="Checked in late. This will be marked as late attendance.",
        )
