"""Workday thresholds and the status/overtime math built on them.

Everything here is a pure function of its inputs and the configured reference
timezone; nothing reads the wall clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import pytz

from ..common.datetime_utils import parse_clock
from ..core.constants import (
    DEFAULT_ABSENT_THRESHOLD,
    DEFAULT_LATE_THRESHOLD,
    DEFAULT_STANDARD_WORK_MINUTES,
    DEFAULT_TIMEZONE,
)
from ..core.enums import AttendanceStatus
from ..core.exceptions import InvalidIntervalError


@dataclass(frozen=True)
class TimePolicy:
    late_threshold: time = DEFAULT_LATE_THRESHOLD
    absent_threshold: time = DEFAULT_ABSENT_THRESHOLD
    standard_work_minutes: int = DEFAULT_STANDARD_WORK_MINUTES
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        if self.absent_threshold < self.late_threshold:
            raise ValueError("absent_threshold must not be earlier than late_threshold")
        if self.standard_work_minutes < 0:
            raise ValueError("standard_work_minutes must be non-negative")
        pytz.timezone(self.timezone)  # raises UnknownTimeZoneError early

    @classmethod
    def from_settings(cls, settings) -> "TimePolicy":
        return cls(
            late_threshold=parse_clock(getattr(settings, "LATE_THRESHOLD", DEFAULT_LATE_THRESHOLD)),
            absent_threshold=parse_clock(getattr(settings, "ABSENT_THRESHOLD", DEFAULT_ABSENT_THRESHOLD)),
            standard_work_minutes=int(getattr(settings, "STANDARD_WORK_MINUTES", DEFAULT_STANDARD_WORK_MINUTES)),
            timezone=str(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
        )

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)

    def localize(self, instant: datetime) -> datetime:
        """Return ``instant`` as an aware datetime in the reference timezone.

        Naive datetimes are taken to already be reference-timezone wall time.
        """
        if instant.tzinfo is None:
            return self.tz.localize(instant)
        return instant.astimezone(self.tz)

    def start_of_day(self, instant: datetime | date) -> date:
        if not isinstance(instant, datetime):
            return instant
        return self.localize(instant).date()

    def threshold_instant(self, day: date, at: time) -> datetime:
        return self.tz.localize(datetime.combine(day, at))

    def classify_check_in(self, now: datetime, reference_day: Optional[date] = None) -> AttendanceStatus:
        """PRESENT up to and including the late threshold, LATE up to and including
        the absent threshold, ABSENT after it."""
        local_now = self.localize(now)
        day = reference_day or local_now.date()

        if local_now > self.threshold_instant(day, self.absent_threshold):
            return AttendanceStatus.ABSENT
        if local_now > self.threshold_instant(day, self.late_threshold):
            return AttendanceStatus.LATE
        return AttendanceStatus.PRESENT

    def worked_minutes(self, in_time: datetime, out_time: datetime) -> int:
        seconds = (self.localize(out_time) - self.localize(in_time)).total_seconds()
        return int(seconds // 60)

    def compute_overtime(
        self,
        in_time: datetime,
        out_time: datetime,
        standard_work_minutes: Optional[int] = None,
    ) -> float:
        if self.localize(out_time) <= self.localize(in_time):
            raise InvalidIntervalError()

        standard = self.standard_work_minutes if standard_work_minutes is None else int(standard_work_minutes)
        overtime_minutes = max(0, self.worked_minutes(in_time, out_time) - standard)
        hours = Decimal(overtime_minutes) / Decimal(60)
        return float(hours.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
