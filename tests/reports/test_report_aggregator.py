from __future__ import annotations

from datetime import date, time

from campus_attendance.attendance.model import AttendanceRecord
from campus_attendance.core.enums import AttendanceStatus
from campus_attendance.employees.model import EmployeeRef
from campus_attendance.reports.aggregator import aggregate, build_report

EXPECTED = time(8, 11)


def _rec(employee_id, work_date, check_in=None, check_out=None, status=AttendanceStatus.PRESENT, rid=1):
    return AttendanceRecord(
        attendance_id=rid,
        employee_id=employee_id,
        employee_name="(stored name)",
        work_date=work_date,
        check_in=check_in,
        check_out=check_out,
        status=status,
    )


def test_department_day_section_with_late_label():
    employees = [
        EmployeeRef(employee_id="empA", full_name="Alice", department="IT", employment_type="Regular"),
        EmployeeRef(employee_id="empB", full_name="Bob", department="IT", employment_type=None),
    ]
    records = [
        _rec("empA", date(2025, 4, 1), time(8, 20), time(17, 5), AttendanceStatus.LATE, rid=1),
        _rec("empB", date(2025, 4, 1), time(8, 0), rid=2),
    ]

    sections = build_report(records, employees, expected_arrival=EXPECTED, on=date(2025, 4, 1))

    assert len(sections) == 1
    section = sections[0]
    assert (section.department, section.date) == ("IT", "2025-04-01")

    alice, bob = section.rows
    assert alice.employee_name == "Alice"
    assert alice.date == "04-01-2025"
    assert alice.sign_in == "8:20 AM"
    assert alice.sign_out == "5:05 PM"
    assert alice.status == "Late (9 mins)"

    assert bob.status == "Present"
    assert bob.sign_out == "---------"
    assert bob.employment_type == "Regular"


def test_sections_newest_first_and_split_by_department(employees):
    records = [
        _rec("EMP-001", date(2025, 4, 1), time(8, 0), rid=1),
        _rec("EMP-003", date(2025, 4, 2), time(8, 0), rid=2),
        _rec("EMP-002", date(2025, 4, 2), time(8, 0), rid=3),
        _rec("EMP-001", date(2025, 3, 31), time(8, 0), rid=4),
    ]

    sections = build_report(records, employees, expected_arrival=EXPECTED, start=date(2025, 4, 1), end=date(2025, 4, 2))

    assert [(s.department, s.date) for s in sections] == [
        ("HR", "2025-04-02"),
        ("IT", "2025-04-02"),
        ("IT", "2025-04-01"),
    ]


def test_status_labels_for_admin_statuses(employees):
    records = [
        _rec("EMP-001", date(2025, 4, 1), None, status=AttendanceStatus.LEAVE, rid=1),
        _rec("EMP-002", date(2025, 4, 1), time(8, 5), status=AttendanceStatus.HALF_DAY, rid=2),
        _rec("EMP-003", date(2025, 4, 1), None, status=AttendanceStatus.ABSENT, rid=3),
    ]

    sections = build_report(records, employees, expected_arrival=EXPECTED)

    statuses = {r.employee_id: r.status for s in sections for r in s.rows}
    assert statuses == {"EMP-001": "Leave", "EMP-002": "Half Day", "EMP-003": "Absent"}


def test_late_label_uses_check_in_even_when_status_was_overridden(employees):
    records = [_rec("EMP-001", date(2025, 4, 1), time(8, 41), status=AttendanceStatus.PRESENT)]

    (section,) = build_report(records, employees, expected_arrival=EXPECTED)

    assert section.rows[0].status == "Late (30 mins)"


def test_search_filters_rows_and_drops_empty_sections(employees):
    records = [
        _rec("EMP-001", date(2025, 4, 1), time(8, 0), rid=1),
        _rec("EMP-002", date(2025, 4, 1), time(8, 0), rid=2),
        _rec("EMP-003", date(2025, 4, 1), time(8, 0), rid=3),
    ]

    by_name = build_report(records, employees, expected_arrival=EXPECTED, search_term="  ben ")
    assert [(s.department, [r.employee_id for r in s.rows]) for s in by_name] == [("IT", ["EMP-002"])]

    by_id = build_report(records, employees, expected_arrival=EXPECTED, search_term="emp-003")
    assert [s.department for s in by_id] == ["HR"]


def test_unknown_employees_are_reported_not_rendered(employees, make_employees, caplog):
    directory = make_employees(
        list(employees.list_all())
        + [EmployeeRef(employee_id="EMP-009", full_name="Dan Lim", department=None, employment_type=None)]
    ).list_all()
    records = [
        _rec("EMP-001", date(2025, 4, 1), time(8, 0), rid=1),
        _rec("GHOST", date(2025, 4, 1), time(8, 0), rid=2),
        _rec("GHOST", date(2025, 4, 2), time(8, 0), rid=3),
        _rec("EMP-009", date(2025, 4, 1), time(8, 0), rid=4),
    ]

    with caplog.at_level("WARNING"):
        report = aggregate(records, directory, expected_arrival=EXPECTED)

    assert report.unresolved_employee_ids == ["GHOST"]
    assert "GHOST" in caplog.text
    assert [s.department for s in report.sections] == ["IT", "Unassigned"]
    assert all(r.employee_id != "GHOST" for s in report.sections for r in s.rows)
