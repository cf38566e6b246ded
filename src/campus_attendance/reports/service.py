from __future__ import annotations

from datetime import date
from typing import Optional

from ..attendance.classifier import StatusClassifier
from ..attendance.model import AttendanceFilter
from ..attendance.repository import AttendanceRepository
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeDirectory
from .aggregator import aggregate
from .model import ReportData, ReportSection


class AttendanceReportService:
    """Use case: department/day attendance report for HR."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeDirectory,
        classifier: StatusClassifier,
    ):
        self._attendance = attendance
        self._employees = employees
        self._classifier = classifier

    def build_attendance_report(
        self,
        *,
        on: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        search_term: Optional[str] = None,
    ) -> ReportData:
        if on is not None and (start is not None or end is not None):
            raise ValidationError("Use either a single date or a date range, not both")
        if start and end and start > end:
            raise ValidationError("Start date must not be after end date")

        criteria = AttendanceFilter(work_date=on) if on else AttendanceFilter(start_date=start, end_date=end)
        records = self._attendance.list_records(criteria)

        return aggregate(
            records,
            self._employees.list_all(),
            expected_arrival=self._classifier.expected_arrival,
            on=on,
            start=start,
            end=end,
            search_term=search_term,
        )

    def get_section(
        self,
        *,
        department: str,
        work_date: date,
        search_term: Optional[str] = None,
    ) -> ReportSection:
        report = self.build_attendance_report(on=work_date, search_term=search_term)
        for section in report.sections:
            if section.department == department:
                return section
        raise NotFoundError(f"No attendance for {department} on {work_date:%Y-%m-%d}")
