from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError


def _int_arg(name: str, default: int) -> int:
    value = request.args.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _date_arg(name: str):
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees/<int:employee_id>/attendance", methods=["GET"], endpoint="api_monthly_attendance")
    def api_monthly_attendance(employee_id: int):
        now = container.clock.now()
        month = _int_arg("month", now.month)
        year = _int_arg("year", now.year)

        aggregate = container.monthly_report_service.compute(employee_id, month, year, now=now)
        return jsonify({"success": True, "data": aggregate.to_dict()})

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_list")
    def api_attendance_list():
        days = container.attendance_overview_service.list_days(
            _date_arg("start"), _date_arg("end"), status=request.args.get("status") or None
        )
        return jsonify({"success": True, "data": [d.to_dict() for d in days]})

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="api_attendance_stats")
    def api_attendance_stats():
        stats = container.attendance_overview_service.stats(_date_arg("start"), _date_arg("end"))
        return jsonify({"success": True, "data": stats.to_dict()})
