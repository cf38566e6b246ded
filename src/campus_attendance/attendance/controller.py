from __future__ import annotations

from datetime import date
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError
from ..container import Container


def _caller_label() -> str:
    # label only: authentication lives outside this service
    return session.get("name") or session.get("employee_id") or "System"


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue."}), 401
            return view(*args, **kwargs)

        return wrapper

    def _optional_date(name: str):
        value = request.args.get(name)
        return parse_iso_date(value) if value else None

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        try:
            status_s = request.args.get("status")
            # unknown status values are ignored, as the filter is optional
            status = AttendanceStatus(status_s) if status_s in {s.value for s in AttendanceStatus} else None

            records = container.attendance_service.list_attendance(
                employee_id=request.args.get("employeeId"),
                work_date=_optional_date("date"),
                start_date=_optional_date("startDate"),
                end_date=_optional_date("endDate"),
                status=status,
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"data": [r.to_dict() for r in records]})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        """Polled by the dashboard every minute; read-only."""
        try:
            record = container.attendance_service.get_today_record(str(session["employee_id"]), date.today())
        except DomainError as e:
            return error_response(e)
        return jsonify({"data": record.to_dict() if record else None})

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="attendance_get")
    def attendance_get(attendance_id: int):
        try:
            record = container.attendance_service.get_attendance(attendance_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"data": record.to_dict()})

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_create")
    def attendance_create():
        payload = request.get_json(silent=True) or {}
        try:
            record = container.attendance_service.save_attendance(payload, actor=payload.get("createdBy") or _caller_label())
        except DomainError as e:
            return error_response(e)
        return jsonify({"message": "Attendance record created successfully", "data": record.to_dict()}), 201

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    def attendance_update(attendance_id: int):
        payload = request.get_json(silent=True) or {}
        try:
            record = container.attendance_service.update_attendance(
                attendance_id,
                payload,
                actor=payload.get("updatedBy") or _caller_label(),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"message": "Attendance record updated successfully", "data": record.to_dict()})

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    def attendance_delete(attendance_id: int):
        payload = request.get_json(silent=True) or {}
        try:
            container.attendance_service.delete_attendance(attendance_id, actor=payload.get("deletedBy") or _caller_label())
        except DomainError as e:
            return error_response(e)
        return jsonify({"message": "Attendance record deleted successfully"})
