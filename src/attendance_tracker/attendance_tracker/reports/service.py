from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Union

from ..attendance.model import AttendanceRecord
from ..attendance.policy import TimePolicy
from ..attendance.repository import AttendanceRepository
from ..common.validators import require_date_range
from ..core.enums import AttendanceStatus
from ..users.repository import UserDirectory

ALL_EMPLOYEES = "all"

REPORT_FIELDS = ["date", "user_id", "employee", "check_in", "check_out", "status", "duration", "overtime"]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def format_duration(record: AttendanceRecord) -> str:
    if record.check_in_time and record.check_out_time:
        minutes = record.worked_minutes
        return f"{minutes // 60}h {minutes % 60}m"
    if record.status == AttendanceStatus.ABSENT and not record.check_in_time:
        return "Absent"
    return "-"


def format_overtime(hours: float) -> str:
    return f"{hours:.2f}h" if hours > 0 else "-"


class AttendanceReportService:
    """Read side: record listings and per-employee summaries for report/export collaborators."""

    def __init__(self, attendance: AttendanceRepository, users: UserDirectory, *, policy: TimePolicy | None = None):
        self._attendance = attendance
        self._users = users
        self._policy = policy or TimePolicy()

    def list_records(
        self,
        user_id_or_all: Union[int, str, None],
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        """Records in [start_date, end_date], newest day first.

        ``None`` or ``"all"`` selects every employee.
        """
        require_date_range(start_date, end_date)
        user_id = None if user_id_or_all in (None, ALL_EMPLOYEES) else int(user_id_or_all)
        return self._attendance.find_range(start_date=start_date, end_date=end_date, user_id=user_id)

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
    ) -> ReportData:
        records = self.list_records(user_id, start, end)
        names = {e.user_id: e.display_name for e in self._users.list_by_ids({r.user_id for r in records})}

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in records:
            employee = names.get(r.user_id, str(r.user_id))
            out_rows.append(
                {
                    "date": r.work_date.strftime("%Y-%m-%d"),
                    "user_id": r.user_id,
                    "employee": employee,
                    "check_in": self._fmt_time(r.check_in_time),
                    "check_out": self._fmt_time(r.check_out_time),
                    "status": r.status.value,
                    "duration": format_duration(r),
                    "overtime": format_overtime(r.overtime),
                }
            )

            s = summary_map.get(r.user_id)
            if not s:
                s = {
                    "user_id": r.user_id,
                    "employee": employee,
                    "present": 0,
                    "late": 0,
                    "absent": 0,
                    "overtime_hours": 0.0,
                }
                summary_map[r.user_id] = s
            s[r.status.value.lower()] += 1
            s["overtime_hours"] += r.overtime

        summary = []
        for s in summary_map.values():
            s["overtime_hours"] = round(s["overtime_hours"], 2)
            summary.append(s)

        summary.sort(key=lambda x: (-x["overtime_hours"], x["user_id"]))
        return ReportData(rows=out_rows, summary=summary)

    def _fmt_time(self, value) -> str:
        if value is None:
            return "Not marked"
        return self._policy.localize(value).strftime("%I:%M %p")
