from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/employees/<int:employee_id>/clock-in", methods=["POST"], endpoint="api_clock_in")
    def api_clock_in(employee_id: int):
        data = _payload()
        snapshot = service.clock_in(employee_id, location=data.get("location"), notes=data.get("notes"))
        return jsonify({"success": True, "data": snapshot.to_dict()}), 201

    @app.route("/api/employees/<int:employee_id>/clock-out", methods=["POST"], endpoint="api_clock_out")
    def api_clock_out(employee_id: int):
        data = _payload()
        snapshot = service.clock_out(employee_id, location=data.get("location"), notes=data.get("notes"))
        return jsonify({"success": True, "data": snapshot.to_dict()})

    @app.route("/api/employees/<int:employee_id>/breaks", methods=["POST"], endpoint="api_break_start")
    def api_break_start(employee_id: int):
        snapshot = service.start_break(employee_id, reason=_payload().get("reason"))
        return jsonify({"success": True, "data": snapshot.to_dict()}), 201

    @app.route("/api/employees/<int:employee_id>/breaks/<int:break_id>/end", methods=["POST"], endpoint="api_break_end")
    def api_break_end(employee_id: int, break_id: int):
        snapshot = service.end_break(employee_id, break_id)
        return jsonify({"success": True, "data": snapshot.to_dict()})

    @app.route("/api/employees/<int:employee_id>/breaks", methods=["GET"], endpoint="api_breaks")
    def api_breaks(employee_id: int):
        breaks = service.list_breaks(employee_id)
        return jsonify({"success": True, "data": [b.to_dict() for b in breaks]})

    @app.route("/api/employees/<int:employee_id>/today", methods=["GET"], endpoint="api_today")
    def api_today(employee_id: int):
        return jsonify({"success": True, "data": service.today(employee_id).to_dict()})

    @app.route("/api/employees/<int:employee_id>/history", methods=["GET"], endpoint="api_history")
    def api_history(employee_id: int):
        limit = request.args.get("limit", default=DEFAULT_HISTORY_LIMIT, type=int)
        return jsonify({"success": True, "data": service.history(employee_id, limit=limit)})

    @app.route("/api/employees/<int:employee_id>/attendance/mark", methods=["POST"], endpoint="api_mark_day")
    def api_mark_day(employee_id: int):
        data = _payload()
        work_date = parse_iso_date(data["date"]) if data.get("date") else None
        day = service.mark_day(employee_id, data.get("status"), work_date=work_date, notes=data.get("notes"))
        return jsonify({"success": True, "data": day.to_dict()}), 201
