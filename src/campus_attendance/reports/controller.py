from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..container import Container
from .export import export_report_csv, export_report_xlsx, export_section_csv, report_filename, section_filename


def register(app: Flask, container: Container) -> None:
    def _optional_date(name: str):
        value = request.args.get(name)
        return parse_iso_date(value) if value else None

    def _build(*, require_range: bool):
        on = _optional_date("date")
        start = _optional_date("start")
        end = _optional_date("end")
        if require_range and on is None and (start is None or end is None):
            raise ValidationError("Please select both start and end dates to generate a report.")

        report = container.report_service.build_attendance_report(
            on=on,
            start=start,
            end=end,
            search_term=request.args.get("search"),
        )
        if require_range and not report.sections:
            raise NotFoundError("No attendance records found for the selected date range.")
        return report, (on or start), (on or end)

    def _download(body, *, mimetype: str, filename: str):
        return send_file(io.BytesIO(body), mimetype=mimetype, as_attachment=True, download_name=filename)

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="report_attendance")
    def report_attendance():
        try:
            report, _, _ = _build(require_range=False)
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "data": [s.to_dict() for s in report.sections],
                "unresolvedEmployeeIds": report.unresolved_employee_ids,
            }
        )

    @app.route("/api/reports/attendance.csv", methods=["GET"], endpoint="report_attendance_csv")
    def report_attendance_csv():
        try:
            report, start, end = _build(require_range=True)
        except DomainError as e:
            return error_response(e)
        return _download(
            export_report_csv(report.sections).encode("utf-8"),
            mimetype="text/csv",
            filename=report_filename(start, end),
        )

    @app.route("/api/reports/attendance.xlsx", methods=["GET"], endpoint="report_attendance_xlsx")
    def report_attendance_xlsx():
        try:
            report, start, end = _build(require_range=True)
        except DomainError as e:
            return error_response(e)
        return _download(
            export_report_xlsx(report.sections),
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=report_filename(start, end, extension="xlsx"),
        )

    @app.route("/api/reports/attendance/section.csv", methods=["GET"], endpoint="report_section_csv")
    def report_section_csv():
        try:
            department = (request.args.get("department") or "").strip()
            work_date = _optional_date("date")
            if not department or work_date is None:
                raise ValidationError("department and date are required")
            section = container.report_service.get_section(
                department=department,
                work_date=work_date,
                search_term=request.args.get("search"),
            )
        except DomainError as e:
            return error_response(e)
        return _download(
            export_section_csv(section).encode("utf-8"),
            mimetype="text/csv",
            filename=section_filename(section),
        )
