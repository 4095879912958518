from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import AttendanceStatus
from ..policy import TimePolicy


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    message: str


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate the status a check-in gets and how we tell the user."""

    @abstractmethod
    def decide_checkin(self, *, policy: TimePolicy) -> StatusDecision:
        raise NotImplementedError

    def describe(self, *, policy: TimePolicy) -> str:
        """Message shown while the day's record is open (dashboard refresh)."""
        return self.decide_checkin(policy=policy).message
