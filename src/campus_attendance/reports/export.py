from __future__ import annotations

import csv
import io
import re
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from .model import ReportSection

REPORT_HEADER = [
    "Department",
    "Date",
    "Employee Name",
    "Employee ID",
    "Employee Type",
    "Sign In Time",
    "Sign Out Time",
    "Attendance Status",
]

SECTION_HEADER = [
    "Employee Name",
    "Employee ID",
    "Employee Type",
    "Date",
    "Sign In Time",
    "Sign Out Time",
    "Attendance Status",
]


def _report_rows(sections: Iterable[ReportSection]):
    for section in sections:
        for row in section.rows:
            yield [
                section.department,
                section.date,
                row.employee_name,
                row.employee_id,
                row.employment_type,
                row.sign_in,
                row.sign_out,
                row.status,
            ]


def _write(header: list[str], rows) -> str:
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    # header line is written bare, data fields are all quoted
    out.write(",".join(header) + "\n")
    writer.writerows(rows)
    return out.getvalue()


def export_report_csv(sections: Iterable[ReportSection]) -> str:
    """Whole report, one line per (employee, date)."""
    return _write(REPORT_HEADER, _report_rows(sections))


def export_section_csv(section: ReportSection) -> str:
    """One department/day section; the department column is dropped."""
    return _write(
        SECTION_HEADER,
        (
            [r.employee_name, r.employee_id, r.employment_type, r.date, r.sign_in, r.sign_out, r.status]
            for r in section.rows
        ),
    )


def export_report_xlsx(sections: Iterable[ReportSection]) -> bytes:
    df = pd.DataFrame(list(_report_rows(sections)), columns=REPORT_HEADER)
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Attendance")
    return out.getvalue()


def report_filename(start: Optional[date], end: Optional[date], *, extension: str = "csv") -> str:
    if start and end:
        return f"attendance_report_{start:%Y-%m-%d}_to_{end:%Y-%m-%d}.{extension}"
    return f"attendance_report.{extension}"


def section_filename(section: ReportSection) -> str:
    department = re.sub(r"\s+", "_", section.department)
    return f"attendance_{department}_{section.date}.csv"
