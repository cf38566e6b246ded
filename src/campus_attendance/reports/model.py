from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReportRow:
    """Display-ready attendance line; nothing here is persisted."""

    employee_name: str
    employee_id: str
    employment_type: str
    date: str
    sign_in: str
    sign_out: str
    status: str

    def to_dict(self) -> dict:
        return {
            "employeeName": self.employee_name,
            "employeeId": self.employee_id,
            "employmentType": self.employment_type,
            "date": self.date,
            "signIn": self.sign_in,
            "signOut": self.sign_out,
            "status": self.status,
        }


@dataclass(frozen=True)
class ReportSection:
    department: str
    date: str
    rows: list[ReportRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "department": self.department,
            "date": self.date,
            "rows": [r.to_dict() for r in self.rows],
        }


@dataclass(frozen=True)
class ReportData:
    sections: list[ReportSection]
    # records dropped because their employee is missing from the directory
    unresolved_employee_ids: list[str] = field(default_factory=list)
