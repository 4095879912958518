from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from attendance_tracker.absence.sweeper import AbsenceSweeper
from attendance_tracker.attendance.model import AttendanceRecord
from attendance_tracker.attendance.policy import TimePolicy
from attendance_tracker.attendance.service import AttendanceService
from attendance_tracker.core.enums import AttendanceStatus
from attendance_tracker.core.exceptions import DuplicateRecordError, RecordNotFoundError
from attendance_tracker.users.model import Employee


class InMemoryAttendance:
    """Attendance store keyed on (user_id, work_date), like the unique index in MySQL."""

    def __init__(self):
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self.creates = 0
        self.updates = 0

    def find_by_user_and_day(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

    def find_all_by_day(self, work_date: date):
        return [r for (_, d), r in self._by_user_date.items() if d == work_date]

    def find_range(self, *, start_date: date, end_date: date, user_id: Optional[int] = None):
        items = [
            r
            for r in self._by_user_date.values()
            if start_date <= r.work_date <= end_date and (user_id is None or r.user_id == user_id)
        ]
        items.sort(key=lambda r: r.user_id)
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items

    def find_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self._by_user_date.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def create(self, *, user_id: int, work_date: date, check_in_time, status: AttendanceStatus, overtime: float = 0.0) -> int:
        if (user_id, work_date) in self._by_user_date:
            raise DuplicateRecordError(f"{user_id}/{work_date}")
        self._id += 1
        self.creates += 1
        self._by_user_date[(user_id, work_date)] = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
            overtime=overtime,
        )
        return self._id

    def update(self, attendance_id: int, *, check_out_time: datetime, overtime: float) -> None:
        for k, v in list(self._by_user_date.items()):
            if v.attendance_id == attendance_id:
                self._by_user_date[k] = replace(v, check_out_time=check_out_time, overtime=overtime)
                self.updates += 1
                return
        raise RecordNotFoundError(str(attendance_id))

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_user_date.values())


class InMemoryUsers:
    def __init__(self, employees: list[Employee]):
        self._by_id = {e.user_id: e for e in employees}

    def add(self, employee: Employee) -> None:
        self._by_id[employee.user_id] = employee

    def list_all(self):
        return [e for e in self._by_id.values() if e.is_active]

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        employee = self._by_id.get(user_id)
        return employee if employee and employee.is_active else None

    def list_by_ids(self, user_ids):
        return [self._by_id[u] for u in sorted(set(user_ids)) if u in self._by_id]


@pytest.fixture
def policy() -> TimePolicy:
    return TimePolicy()


@pytest.fixture
def fixed_now(policy) -> datetime:
    return policy.localize(datetime(2026, 2, 2, 10, 5, 0))


@pytest.fixture
def employees() -> list[Employee]:
    return [
        Employee(user_id=1, email="alice@example.com", name="Alice"),
        Employee(user_id=2, email="bilal@example.com", name="Bilal"),
        Employee(user_id=3, email="chandni@example.com", name="", is_manager=True),
    ]


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def users_repo(employees) -> InMemoryUsers:
    return InMemoryUsers(employees)


@pytest.fixture
def attendance_service(attendance_repo, users_repo, policy):
    return AttendanceService(attendance_repo, users_repo, policy=policy)


@pytest.fixture
def sweeper(attendance_repo, users_repo, policy):
    return AbsenceSweeper(attendance_repo, users_repo, policy=policy)
