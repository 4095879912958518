from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absence.sweeper import AbsenceSweeper
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import TimePolicy
from .attendance.repository import AttendanceRepository
from .attendance.retrying_repository import RetryingAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_INDEX_RETRY_ATTEMPTS, DEFAULT_INDEX_RETRY_DELAY_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import AttendanceReportService
from .users.mysql_user_repository import MySQLUserDirectory
from .users.repository import UserDirectory


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    policy: TimePolicy
    attendance_repo: AttendanceRepository
    users_repo: UserDirectory

    attendance_service: AttendanceService
    absence_sweeper: AbsenceSweeper
    report_service: AttendanceReportService


def wire_services(
    attendance_repo: AttendanceRepository,
    users_repo: UserDirectory,
    *,
    policy: TimePolicy,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    return Container(
        conn=conn,
        policy=policy,
        attendance_repo=attendance_repo,
        users_repo=users_repo,
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            policy=policy,
            strategy_factory=AttendanceStrategyFactory(),
        ),
        absence_sweeper=AbsenceSweeper(attendance_repo, users_repo, policy=policy),
        report_service=AttendanceReportService(attendance_repo, users_repo, policy=policy),
    )


def build_container(*, db_config: dict, settings=None) -> Container:
    policy = TimePolicy.from_settings(settings) if settings is not None else TimePolicy()
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    attendance_repo = RetryingAttendanceRepository(
        MySQLAttendanceRepository(conn, timezone=policy.timezone),
        attempts=int(getattr(settings, "INDEX_RETRY_ATTEMPTS", DEFAULT_INDEX_RETRY_ATTEMPTS)),
        delay_seconds=float(getattr(settings, "INDEX_RETRY_DELAY_SECONDS", DEFAULT_INDEX_RETRY_DELAY_SECONDS)),
    )
    users_repo = MySQLUserDirectory(conn)

    return wire_services(attendance_repo, users_repo, policy=policy, conn=conn)
