from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status stored with every daily record."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"


class AttendanceState(str, Enum):
    """Where a user stands in the daily check-in/check-out lifecycle."""

    NO_RECORD = "NO_RECORD"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    MARKED_ABSENT = "MARKED_ABSENT"
