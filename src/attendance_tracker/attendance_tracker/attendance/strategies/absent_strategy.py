from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..policy import TimePolicy
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Check-in after the absent threshold: recorded, but counted as absent."""

    def decide_checkin(self, *, policy: TimePolicy) -> StatusDecision:
        cutoff = policy.absent_threshold.strftime("%I:%M %p").lstrip("0")
        return StatusDecision(
            status=AttendanceStatus.ABSENT,
            message=f"Checked in after {cutoff}. This will be marked as absent.",
        )
