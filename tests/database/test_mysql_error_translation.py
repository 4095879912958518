from __future__ import annotations

from datetime import date, datetime

import pytest
from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from attendance_tracker.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from attendance_tracker.core.enums import AttendanceStatus
from attendance_tracker.core.exceptions import (
    DuplicateRecordError,
    IndexNotReadyError,
    RecordNotFoundError,
    UnavailableError,
)
from attendance_tracker.database.mysql_base import translate_mysql_errors
from attendance_tracker.users.mysql_user_repository import MySQLUserDirectory

DAY = date(2026, 2, 2)


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = conn.rowcount
        self.lastrowid = conn.lastrowid

    def execute(self, sql, params=None):
        self.conn.executed.append((" ".join(sql.split()), params))
        if self.conn.error is not None:
            raise self.conn.error

    def fetchone(self):
        return self.conn.rows[0] if self.conn.rows else None

    def fetchall(self):
        return list(self.conn.rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, rows=(), error=None, rowcount=1, lastrowid=7):
        self.rows = list(rows)
        self.error = error
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.executed = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, conn=None, connect_error=None):
        self.conn = conn
        self.connect_error = connect_error

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        return self.conn


@pytest.mark.parametrize(
    "error, expected",
    [
        (mysql_errors.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY), DuplicateRecordError),
        (mysql_errors.ProgrammingError(msg="Table doesn't exist", errno=errorcode.ER_NO_SUCH_TABLE), IndexNotReadyError),
        (mysql_errors.DatabaseError(msg="Lock wait timeout", errno=errorcode.ER_LOCK_WAIT_TIMEOUT), IndexNotReadyError),
        (mysql_errors.InterfaceError(msg="Can't connect", errno=errorcode.CR_CONN_HOST_ERROR), UnavailableError),
        (mysql_errors.OperationalError(msg="Lost connection", errno=errorcode.CR_SERVER_LOST), UnavailableError),
    ],
)
def test_mysql_errors_map_to_store_errors(error, expected):
    with pytest.raises(expected) as info:
        with translate_mysql_errors():
            raise error

    assert info.value.__cause__ is error


def test_sql_errors_propagate_unchanged():
    error = mysql_errors.ProgrammingError(msg="syntax", errno=errorcode.ER_PARSE_ERROR)

    with pytest.raises(mysql_errors.ProgrammingError):
        with translate_mysql_errors():
            raise error


def test_create_duplicate_rolls_back_and_raises_duplicate():
    conn = FakeConnection(error=mysql_errors.IntegrityError(msg="dup", errno=errorcode.ER_DUP_ENTRY))
    repo = MySQLAttendanceRepository(FakeConnectionFactory(conn))

    with pytest.raises(DuplicateRecordError):
        repo.create(user_id=1, work_date=DAY, check_in_time=None, status=AttendanceStatus.ABSENT)

    assert conn.rolled_back
    assert not conn.committed
    assert conn.closed


def test_create_stores_wall_time_in_reference_timezone(policy):
    conn = FakeConnection(lastrowid=42)
    repo = MySQLAttendanceRepository(FakeConnectionFactory(conn), timezone="Asia/Dhaka")

    attendance_id = repo.create(
        user_id=1,
        work_date=DAY,
        check_in_time=policy.localize(datetime(2026, 2, 2, 10, 5)),
        status=AttendanceStatus.PRESENT,
    )

    _, params = conn.executed[0]
    assert attendance_id == 42
    assert params == (1, DAY, datetime(2026, 2, 2, 10, 5), "PRESENT", 0.0)
    assert conn.committed


def test_update_of_missing_record_raises_not_found():
    conn = FakeConnection(rowcount=0)
    repo = MySQLAttendanceRepository(FakeConnectionFactory(conn))

    with pytest.raises(RecordNotFoundError):
        repo.update(99, check_out_time=datetime(2026, 2, 2, 18, 0), overtime=0.0)

    assert conn.rolled_back


def test_unreachable_server_is_unavailable():
    factory = FakeConnectionFactory(
        connect_error=mysql_errors.InterfaceError(msg="Can't connect", errno=errorcode.CR_CONN_HOST_ERROR)
    )
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(UnavailableError):
        repo.find_by_user_and_day(1, DAY)


def test_rows_come_back_as_aware_records():
    conn = FakeConnection(
        rows=[
            {
                "attendance_id": 5,
                "user_id": 1,
                "work_date": DAY,
                "check_in_time": datetime(2026, 2, 2, 10, 5),
                "check_out_time": None,
                "status": "PRESENT",
                "overtime": None,
            }
        ]
    )
    repo = MySQLAttendanceRepository(FakeConnectionFactory(conn))

    record = repo.find_by_user_and_day(1, DAY)

    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in_time.tzinfo is not None
    assert record.check_in_time.hour == 10
    assert record.check_out_time is None
    assert record.overtime == 0.0


def test_range_query_filters_by_user_only_when_given():
    conn = FakeConnection()
    repo = MySQLAttendanceRepository(FakeConnectionFactory(conn))

    repo.find_range(start_date=DAY, end_date=DAY)
    repo.find_range(start_date=DAY, end_date=DAY, user_id=3)

    (all_sql, all_params), (one_sql, one_params) = conn.executed
    assert "user_id=%s" not in all_sql
    assert all_params == (DAY, DAY)
    assert one_params == (DAY, DAY, 3)
    assert "ORDER BY work_date DESC, user_id ASC" in one_sql


def test_user_directory_lists_active_employees():
    conn = FakeConnection(
        rows=[
            {"user_id": 1, "email": "alice@example.com", "name": "Alice", "is_manager": 0},
            {"user_id": 2, "email": "bilal@example.com", "name": None, "is_manager": 1},
        ]
    )
    directory = MySQLUserDirectory(FakeConnectionFactory(conn))

    employees = directory.list_all()

    assert [e.user_id for e in employees] == [1, 2]
    assert employees[1].is_manager is True
    assert employees[1].display_name == "bilal@example.com"
    assert "is_active=1" in conn.executed[0][0]


def test_user_lookup_ignores_deactivated_employees():
    conn = FakeConnection(rows=[])
    directory = MySQLUserDirectory(FakeConnectionFactory(conn))

    assert directory.get_by_id(4) is None
    sql, params = conn.executed[0]
    assert "is_active=1" in sql
    assert params == (4,)


def test_user_lookup_by_ids_includes_deactivated_employees():
    conn = FakeConnection(
        rows=[{"user_id": 4, "email": "dara@example.com", "name": "Dara", "is_manager": 0, "is_active": 0}]
    )
    directory = MySQLUserDirectory(FakeConnectionFactory(conn))

    employees = directory.list_by_ids([4, 1, 4])

    sql, params = conn.executed[0]
    assert "is_active" not in sql.split("FROM")[1]
    assert params == (1, 4)
    assert employees[0].is_active is False


def test_user_lookup_by_no_ids_skips_the_query():
    conn = FakeConnection()
    directory = MySQLUserDirectory(FakeConnectionFactory(conn))

    assert directory.list_by_ids([]) == []
    assert conn.executed == []
