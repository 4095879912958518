from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..policy import TimePolicy
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Check-in at or before the late threshold."""

    def decide_checkin(self, *, policy: TimePolicy) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, message="Successfully checked in!")

    def describe(self, *, policy: TimePolicy) -> str:
        return "Checked in on time."
