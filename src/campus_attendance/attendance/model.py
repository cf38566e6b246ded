from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import AttendanceStatus, EventKind


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day.

    check_in set with check_out unset is the normal "signed in, not yet out"
    state. No record at all means the employee is implicitly absent.
    """

    attendance_id: int
    employee_id: str
    employee_name: str
    work_date: date
    check_in: Optional[time]
    check_out: Optional[time]
    status: AttendanceStatus
    check_in_image: Optional[str] = None
    check_out_image: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def has_event(self, kind: EventKind) -> bool:
        if kind == EventKind.CHECK_IN:
            return self.check_in is not None
        return self.check_out is not None

    def to_dict(self) -> dict:
        return {
            "id": str(self.attendance_id),
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "checkIn": format_hhmm(self.check_in),
            "checkOut": format_hhmm(self.check_out),
            "status": self.status.value,
            "notes": self.notes,
            "checkInImage": self.check_in_image,
            "checkOutImage": self.check_out_image,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class AttendanceFilter:
    employee_id: Optional[str] = None
    work_date: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AttendanceStatus] = None
