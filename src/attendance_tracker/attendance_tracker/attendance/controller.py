from __future__ import annotations

import csv
import io
import logging
from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.validators import require_user_id
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    InvalidIntervalError,
    NoCheckInFoundError,
    StoreError,
    UnknownEmployeeError,
    ValidationError,
)
from ..reports.service import ALL_EMPLOYEES, REPORT_FIELDS
from .model import AttendanceRecord

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "System is temporarily unavailable. Please try again."

_CONFLICTS = (AlreadyCheckedInError, AlreadyCheckedOutError, NoCheckInFoundError, InvalidIntervalError)


def record_to_json(record: AttendanceRecord) -> dict:
    return {
        "id": record.attendance_id,
        "user_id": record.user_id,
        "date": record.work_date.isoformat(),
        "in_time": record.check_in_time.isoformat() if record.check_in_time else None,
        "out_time": record.check_out_time.isoformat() if record.check_out_time else None,
        "status": record.status.value,
        "overtime": record.overtime,
    }


def register(app: Flask, container: Container) -> None:
    def _error(exc: Exception):
        if isinstance(exc, UnknownEmployeeError):
            return jsonify({"success": False, "message": str(exc)}), 404
        if isinstance(exc, _CONFLICTS):
            return jsonify({"success": False, "message": str(exc)}), 409
        if isinstance(exc, ValidationError):
            return jsonify({"success": False, "message": str(exc)}), 400
        if isinstance(exc, StoreError):
            logger.warning("attendance store unavailable: %s", exc)
            return jsonify({"success": False, "message": UNAVAILABLE_MESSAGE}), 503
        logger.exception("unexpected attendance error")
        return jsonify({"success": False, "message": "Unexpected system error"}), 500

    def _date_range():
        today = container.policy.start_of_day(now_utc())
        try:
            start = parse_iso_date(request.args["start"]) if request.args.get("start") else today - timedelta(days=DEFAULT_REPORT_DAYS)
            end = parse_iso_date(request.args["end"]) if request.args.get("end") else today
        except ValueError:
            raise ValidationError("Dates must be formatted YYYY-MM-DD")
        return start, end

    def _user_filter():
        value = request.args.get("user_id") or ALL_EMPLOYEES
        return None if value == ALL_EMPLOYEES else require_user_id(value)

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    def api_check_in():
        try:
            data = request.get_json(silent=True) or {}
            result = container.attendance_service.check_in(require_user_id(data.get("user_id")))
            return jsonify({"success": True, "message": result.message, "record": record_to_json(result.record)}), 201
        except Exception as e:
            return _error(e)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    def api_check_out():
        try:
            data = request.get_json(silent=True) or {}
            record = container.attendance_service.check_out(require_user_id(data.get("user_id")))
            return jsonify({"success": True, "message": "Successfully checked out!", "record": record_to_json(record)}), 200
        except Exception as e:
            return _error(e)

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_today_status")
    def api_today_status():
        try:
            status = container.attendance_service.get_today_status(require_user_id(request.args.get("user_id")))
            return jsonify(
                {
                    "success": True,
                    "state": status.state.value,
                    "message": status.message,
                    "record": record_to_json(status.record) if status.record else None,
                }
            ), 200
        except Exception as e:
            return _error(e)

    @app.route("/api/attendance/records", methods=["GET"], endpoint="api_records")
    def api_records():
        try:
            start, end = _date_range()
            records = container.report_service.list_records(_user_filter(), start, end)
            return jsonify({"success": True, "records": [record_to_json(r) for r in records]}), 200
        except Exception as e:
            return _error(e)

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="api_report_csv")
    def api_report_csv():
        try:
            start, end = _date_range()
            data = container.report_service.build_attendance_report(start=start, end=end, user_id=_user_filter())
        except Exception as e:
            return _error(e)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        filename = f"attendance_report_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/sweep", methods=["POST"], endpoint="api_sweep")
    def api_sweep():
        try:
            data = request.get_json(silent=True) or {}
            try:
                trigger = parse_iso_date(data["date"]) if data.get("date") else None
            except ValueError:
                raise ValidationError("Dates must be formatted YYYY-MM-DD")
            result = container.absence_sweeper.run(trigger)
            return jsonify(
                {
                    "success": result.ok,
                    "date": result.work_date.isoformat(),
                    "marked_count": result.marked_count,
                    "already_recorded": result.already_recorded,
                    "failed_user_ids": result.failed_user_ids,
                }
            ), 200
        except Exception as e:
            return _error(e)
