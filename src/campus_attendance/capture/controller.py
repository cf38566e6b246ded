from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.responses import error_response
from ..core.enums import EventKind
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..geofence.location import FixedLocationProvider
from .frames import decode_data_url
from .workflow import CaptureWorkflow


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue."}), 401
            return view(*args, **kwargs)

        return wrapper

    def _employee_id() -> str:
        return str(session["employee_id"])

    def _current() -> CaptureWorkflow:
        workflow = container.capture_registry.get(_employee_id())
        if workflow is None:
            raise ValidationError("No capture in progress.")
        return workflow

    def _state_body(workflow: CaptureWorkflow) -> dict:
        return {
            "state": workflow.state.value,
            "kind": workflow.kind.value if workflow.kind else None,
        }

    @app.route("/api/capture/start", methods=["POST"], endpoint="capture_start")
    @login_required
    def capture_start():
        data = request.get_json(silent=True) or {}
        try:
            try:
                kind = EventKind(data.get("kind"))
            except ValueError:
                raise ValidationError("kind must be checkIn or checkOut")

            employee_id = _employee_id()
            employee = container.employee_directory.get_by_id(employee_id)
            name = employee.full_name if employee else (session.get("name") or employee_id)

            workflow = container.capture_registry.open(employee_id, name)
            presence = workflow.start_capture(kind, FixedLocationProvider(data.get("latitude"), data.get("longitude")))
        except DomainError as e:
            return error_response(e, state="idle")

        return jsonify({"success": True, "distanceMeters": round(presence.distance_km * 1000), **_state_body(workflow)})

    @app.route("/api/capture/frame", methods=["POST"], endpoint="capture_frame")
    @login_required
    def capture_frame():
        try:
            workflow = _current()
            if "image" in request.files:
                frame = request.files["image"].read()
            else:
                data = request.get_json(silent=True) or {}
                frame = decode_data_url(data["image"]) if data.get("image") else None
            workflow.capture(frame)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, **_state_body(workflow)})

    @app.route("/api/capture/submit", methods=["POST"], endpoint="capture_submit")
    @login_required
    def capture_submit():
        try:
            workflow = _current()
            kind = workflow.kind
            record = workflow.submit()
        except DomainError as e:
            body = {}
            workflow = container.capture_registry.get(_employee_id())
            if workflow is not None:
                body = _state_body(workflow)
            return error_response(e, **body)

        label = "Sign in" if kind == EventKind.CHECK_IN else "Sign out"
        today = workflow.today_record or record
        return jsonify(
            {
                "success": True,
                "message": f"{label} recorded successfully",
                "data": record.to_dict(),
                "today": today.to_dict(),
                **_state_body(workflow),
            }
        ), 201

    @app.route("/api/capture/cancel", methods=["POST"], endpoint="capture_cancel")
    @login_required
    def capture_cancel():
        container.capture_registry.close(_employee_id())
        return jsonify({"success": True, "state": "idle"})

    @app.route("/api/capture/state", methods=["GET"], endpoint="capture_state")
    @login_required
    def capture_state():
        workflow = container.capture_registry.get(_employee_id())
        if workflow is None:
            return jsonify({"state": "idle", "kind": None})
        return jsonify(_state_body(workflow))
