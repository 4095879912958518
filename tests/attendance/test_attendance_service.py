from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from attendance_tracker.core.enums import AttendanceState, AttendanceStatus
from attendance_tracker.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    DuplicateRecordError,
    InvalidIntervalError,
    MarkedAbsentError,
    NoCheckInFoundError,
    UnavailableError,
    UnknownEmployeeError,
)
from attendance_tracker.users.model import Employee


def local(policy, hour, minute, second=0, day=2):
    return policy.localize(datetime(2026, 2, day, hour, minute, second))


def test_check_in_on_time_then_check_out_with_overtime(attendance_service, attendance_repo, policy):
    result = attendance_service.check_in(1, now=local(policy, 10, 5))

    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.check_in_time == local(policy, 10, 5)
    assert result.record.check_out_time is None
    assert result.message == "Successfully checked in!"

    record = attendance_service.check_out(1, now=local(policy, 18, 35))

    assert record.check_out_time == local(policy, 18, 35)
    assert record.overtime == 0.5
    stored = attendance_repo.find_by_user_and_day(1, record.work_date)
    assert stored == record


def test_check_in_late_returns_late_message(attendance_service, policy):
    result = attendance_service.check_in(1, now=local(policy, 10, 40))

    assert result.record.status == AttendanceStatus.LATE
    assert "late" in result.message


def test_check_in_after_absent_threshold_is_recorded_as_absent(attendance_service, sweeper, attendance_repo, policy):
    result = attendance_service.check_in(2, now=local(policy, 11, 30))

    assert result.record.status == AttendanceStatus.ABSENT
    assert result.record.check_in_time == local(policy, 11, 30)
    assert "marked as absent" in result.message

    sweep = sweeper.run(now=local(policy, 11, 35))

    records_for_user = [r for r in attendance_repo.all() if r.user_id == 2]
    assert len(records_for_user) == 1
    assert records_for_user[0].check_in_time is not None
    assert 2 not in sweep.failed_user_ids


def test_second_check_in_same_day_fails(attendance_service, attendance_repo, policy):
    attendance_service.check_in(1, now=local(policy, 9, 0))

    with pytest.raises(AlreadyCheckedInError):
        attendance_service.check_in(1, now=local(policy, 9, 30))

    assert attendance_repo.creates == 1


def test_check_in_after_check_out_still_fails(attendance_service, policy):
    attendance_service.check_in(1, now=local(policy, 9, 0))
    attendance_service.check_out(1, now=local(policy, 17, 0))

    with pytest.raises(AlreadyCheckedInError):
        attendance_service.check_in(1, now=local(policy, 17, 30))


def test_check_in_next_day_is_allowed(attendance_service, policy):
    attendance_service.check_in(1, now=local(policy, 9, 0, day=2))
    result = attendance_service.check_in(1, now=local(policy, 9, 0, day=3))

    assert result.record.work_date.day == 3


def test_check_in_after_sweep_marked_absent(attendance_service, sweeper, policy):
    sweeper.run(now=local(policy, 11, 0))

    with pytest.raises(MarkedAbsentError) as exc:
        attendance_service.check_in(1, now=local(policy, 11, 45))

    assert isinstance(exc.value, AlreadyCheckedInError)


def test_check_in_unknown_employee(attendance_service, policy):
    with pytest.raises(UnknownEmployeeError):
        attendance_service.check_in(99, now=local(policy, 9, 0))


def test_deactivated_employee_cannot_check_in(attendance_service, users_repo, attendance_repo, policy):
    users_repo.add(Employee(user_id=4, email="dara@example.com", name="Dara", is_active=False))

    with pytest.raises(UnknownEmployeeError):
        attendance_service.check_in(4, now=local(policy, 9, 0))

    assert attendance_repo.all() == []


def test_check_in_lost_race_reports_already_checked_in(attendance_service, attendance_repo, policy, monkeypatch):
    def create(**kwargs):
        raise DuplicateRecordError("uq_attendance_user_day")

    monkeypatch.setattr(attendance_repo, "create", create)

    with pytest.raises(AlreadyCheckedInError):
        attendance_service.check_in(1, now=local(policy, 9, 0))


def test_store_unavailable_propagates(attendance_service, attendance_repo, policy, monkeypatch):
    def find(user_id, work_date):
        raise UnavailableError("connection refused")

    monkeypatch.setattr(attendance_repo, "find_by_user_and_day", find)

    with pytest.raises(UnavailableError):
        attendance_service.check_in(1, now=local(policy, 9, 0))


def test_check_out_without_check_in(attendance_service, policy):
    with pytest.raises(NoCheckInFoundError):
        attendance_service.check_out(1, now=local(policy, 18, 0))


def test_check_out_of_sweep_record_is_rejected(attendance_service, sweeper, attendance_repo, policy):
    sweeper.run(now=local(policy, 11, 0))

    with pytest.raises(NoCheckInFoundError):
        attendance_service.check_out(1, now=local(policy, 18, 0))

    assert attendance_repo.updates == 0


def test_second_check_out_fails_and_record_is_unchanged(attendance_service, attendance_repo, policy):
    attendance_service.check_in(1, now=local(policy, 9, 0))
    first = attendance_service.check_out(1, now=local(policy, 18, 0))

    with pytest.raises(AlreadyCheckedOutError):
        attendance_service.check_out(1, now=local(policy, 19, 0))

    assert attendance_repo.find_by_user_and_day(1, first.work_date) == first
    assert attendance_repo.updates == 1


def test_check_out_before_check_in_instant_is_invalid(attendance_service, attendance_repo, policy):
    now = local(policy, 9, 0)
    attendance_service.check_in(1, now=now)

    with pytest.raises(InvalidIntervalError):
        attendance_service.check_out(1, now=now - timedelta(seconds=1))

    assert attendance_repo.updates == 0


def test_overtime_zero_until_check_out(attendance_service, policy):
    record = attendance_service.check_in(1, now=local(policy, 8, 0)).record
    assert record.overtime == 0.0


def test_today_status_walks_the_lifecycle(attendance_service, policy):
    assert attendance_service.get_today_status(1, now=local(policy, 8, 0)).state == AttendanceState.NO_RECORD

    attendance_service.check_in(1, now=local(policy, 10, 20))
    status = attendance_service.get_today_status(1, now=local(policy, 12, 0))
    assert status.state == AttendanceState.CHECKED_IN
    assert status.record.status == AttendanceStatus.LATE
    assert status.message == "Checked in late. This will be marked as late attendance."

    attendance_service.check_out(1, now=local(policy, 19, 0))
    status = attendance_service.get_today_status(1, now=local(policy, 19, 5))
    assert status.state == AttendanceState.CHECKED_OUT
    assert status.message == "You have completed your attendance for today"


def test_today_status_for_swept_user(attendance_service, sweeper, policy):
    sweeper.run(now=local(policy, 11, 0))

    status = attendance_service.get_today_status(2, now=local(policy, 12, 0))

    assert status.state == AttendanceState.MARKED_ABSENT
    assert status.record.status == AttendanceStatus.ABSENT


def test_history_is_newest_first(attendance_service, policy):
    for day in (2, 3, 4):
        attendance_service.check_in(1, now=local(policy, 9, 0, day=day))

    history = attendance_service.get_history(1, limit=2)

    assert [r.work_date.day for r in history] == [4, 3]
