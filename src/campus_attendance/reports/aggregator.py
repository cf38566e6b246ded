from __future__ import annotations

import logging
from datetime import date, time
from typing import Iterable, Optional, Sequence

from ..attendance.classifier import minutes_late
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import format_12h, format_report_date
from ..core.constants import DEFAULT_EMPLOYMENT_TYPE, MISSING_TIME_PLACEHOLDER, UNASSIGNED_DEPARTMENT
from ..core.enums import AttendanceStatus
from ..employees.model import EmployeeRef
from .model import ReportData, ReportRow, ReportSection

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.LATE: "Late",
    AttendanceStatus.HALF_DAY: "Half Day",
    AttendanceStatus.LEAVE: "Leave",
}


def _in_range(work_date: date, on: Optional[date], start: Optional[date], end: Optional[date]) -> bool:
    if on is not None:
        return work_date == on
    if start is not None and work_date < start:
        return False
    if end is not None and work_date > end:
        return False
    return True


def status_display(record: AttendanceRecord, expected_arrival: time) -> str:
    """Persisted status label, or a live `Late (N mins)` when the check-in was late."""
    if record.check_in is not None:
        late_by = minutes_late(record.check_in, expected_arrival)
        if late_by > 0:
            return f"Late ({late_by} mins)"
    return STATUS_LABELS.get(record.status, record.status.value)


def to_row(record: AttendanceRecord, employee: EmployeeRef, expected_arrival: time) -> ReportRow:
    return ReportRow(
        employee_name=employee.full_name,
        employee_id=record.employee_id,
        employment_type=employee.employment_type or DEFAULT_EMPLOYMENT_TYPE,
        date=format_report_date(record.work_date),
        sign_in=format_12h(record.check_in, MISSING_TIME_PLACEHOLDER),
        sign_out=format_12h(record.check_out, MISSING_TIME_PLACEHOLDER),
        status=status_display(record, expected_arrival),
    )


def _matches(row: ReportRow, needle: str) -> bool:
    return needle in row.employee_name.lower() or needle in row.employee_id.lower()


def aggregate(
    records: Iterable[AttendanceRecord],
    employees: Iterable[EmployeeRef],
    *,
    expected_arrival: time,
    on: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    search_term: Optional[str] = None,
) -> ReportData:
    """Group attendance into (department, date) sections.

    Sections come out newest date first; rows keep the order of `records`.
    Records whose employee is not in the directory are left out of the
    sections and listed in `unresolved_employee_ids`.
    """

    directory = {e.employee_id: e for e in employees}
    grouped: dict[tuple[str, date], list[ReportRow]] = {}
    unresolved: list[str] = []

    for record in records:
        if not _in_range(record.work_date, on, start, end):
            continue

        employee = directory.get(record.employee_id)
        if employee is None:
            if record.employee_id not in unresolved:
                unresolved.append(record.employee_id)
            continue

        key = (employee.department or UNASSIGNED_DEPARTMENT, record.work_date)
        grouped.setdefault(key, []).append(to_row(record, employee, expected_arrival))

    if unresolved:
        logger.warning(
            "attendance report skipped records for %d unknown employee(s): %s",
            len(unresolved),
            ", ".join(unresolved),
        )

    sections = [
        ReportSection(department=dept, date=work_date.strftime("%Y-%m-%d"), rows=rows)
        for (dept, work_date), rows in grouped.items()
    ]
    # stable: departments on the same day keep first-seen order
    sections.sort(key=lambda s: s.date, reverse=True)

    needle = (search_term or "").strip().lower()
    if needle:
        sections = [
            ReportSection(department=s.department, date=s.date, rows=[r for r in s.rows if _matches(r, needle)])
            for s in sections
        ]
        sections = [s for s in sections if s.rows]

    return ReportData(sections=sections, unresolved_employee_ids=unresolved)


def build_report(
    records: Sequence[AttendanceRecord],
    employees: Sequence[EmployeeRef],
    *,
    expected_arrival: time,
    on: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    search_term: Optional[str] = None,
) -> list[ReportSection]:
    return aggregate(
        records,
        employees,
        expected_arrival=expected_arrival,
        on=on,
        start=start,
        end=end,
        search_term=search_term,
    ).sections
