from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import AttendanceStatus
from ..core.exceptions import RecordNotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, resolve_tz, to_db_datetime
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, work_date, check_in_time, check_out_time, status, overtime"


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, timezone: str = DEFAULT_TIMEZONE):
        self._conn_factory = conn_factory
        self._tz = resolve_tz(timezone)

    def _to_record(self, r: dict) -> AttendanceRecord:
        return AttendanceRecord(
            attendance_id=int(r["attendance_id"]),
            user_id=int(r["user_id"]),
            work_date=r["work_date"],
            check_in_time=from_db_datetime(r.get("check_in_time"), self._tz),
            check_out_time=from_db_datetime(r.get("check_out_time"), self._tz),
            status=AttendanceStatus(r["status"]),
            overtime=float(r.get("overtime") or 0),
        )

    def find_by_user_and_day(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (user_id, work_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._to_record(r)

    def find_all_by_day(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s
                ORDER BY user_id ASC
                """,
                (work_date,),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def find_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, user_id ASC
                """,
                tuple(params),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def find_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: Optional[datetime],
        status: AttendanceStatus,
        overtime: float = 0.0,
    ) -> int:
        # uq_attendance_user_day turns a duplicate into ER_DUP_ENTRY -> DuplicateRecordError.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, check_in_time, check_out_time, status, overtime)
                VALUES(%s,%s,%s,NULL,%s,%s)
                """,
                (user_id, work_date, to_db_datetime(check_in_time, self._tz), status.value, overtime),
            )
            return int(cur.lastrowid)

    def update(self, attendance_id: int, *, check_out_time: datetime, overtime: float) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, overtime=%s
                WHERE attendance_id=%s
                """,
                (to_db_datetime(check_out_time, self._tz), overtime, int(attendance_id)),
            )
            if cur.rowcount == 0:
                raise RecordNotFoundError(f"Attendance record {attendance_id} does not exist")
