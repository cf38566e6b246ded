from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Mapping, Optional, Sequence

from ..common.activity import log_activity
from ..common.datetime_utils import now_local, parse_hhmm, parse_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.enums import AttendanceStatus, EventKind
from ..core.exceptions import NotFoundError, ValidationError
from .classifier import StatusClassifier
from .model import AttendanceFilter, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# API field -> (column, parser)
_PAYLOAD_FIELDS: dict[str, tuple[str, Callable[[object], object]]] = {
    "employeeName": ("employee_name", lambda v: require_non_empty(v, "Employee name")),
    "checkIn": ("check_in", lambda v: parse_hhmm(v) if optional_text(v) else None),
    "checkOut": ("check_out", lambda v: parse_hhmm(v) if optional_text(v) else None),
    "status": ("status", lambda v: _parse_status(v)),
    "notes": ("notes", optional_text),
    "checkInImage": ("check_in_image", optional_text),
    "checkOutImage": ("check_out_image", optional_text),
}

_EVENT_COLUMNS = {
    EventKind.CHECK_IN: ("check_in", "check_in_image"),
    EventKind.CHECK_OUT: ("check_out", "check_out_image"),
}


def _parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).strip())
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"Status must be one of: {allowed}")


def _parse_payload_fields(payload: Mapping[str, object]) -> dict[str, object]:
    """Only keys present in the payload are returned; a null clears the field."""
    values: dict[str, object] = {}
    for key, (column, parse) in _PAYLOAD_FIELDS.items():
        if key not in payload:
            continue
        raw = payload[key]
        if raw is None and column == "status":
            continue
        if raw is None and column != "employee_name":
            values[column] = None
        else:
            values[column] = parse(raw)
    return values


def _check_time_order(check_in: Optional[time], check_out: Optional[time]) -> None:
    if check_in and check_out and check_out < check_in:
        raise ValidationError("Check-out time cannot be earlier than check-in time")


class AttendanceService:
    """Use cases around the per-(employee, day) attendance record."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        classifier: StatusClassifier,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._classifier = classifier
        self._clock = clock

    @property
    def classifier(self) -> StatusClassifier:
        return self._classifier

    def record_event(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        kind: EventKind,
        at: time,
        image_ref: Optional[str],
    ) -> AttendanceRecord:
        """Store one check-in or check-out in a single atomic upsert.

        A new record gets only the named event and its image; status is
        classified for check-ins. An existing record has only the named
        event, its image and updated_at touched. Event ordering is not
        enforced here so the same path serves corrective writes.
        """

        event_column, image_column = _EVENT_COLUMNS[kind]
        status = self._classifier.classify(at if kind == EventKind.CHECK_IN else None)

        record = self._attendance.upsert(
            employee_id=require_non_empty(employee_id, "Employee ID"),
            work_date=work_date,
            insert_values={
                "employee_name": require_non_empty(employee_name, "Employee name"),
                "status": status,
                event_column: at,
                image_column: image_ref,
            },
            update_columns=(event_column, image_column),
            now=self._clock(),
        )
        logger.info(
            "recorded %s for %s on %s at %s (status=%s)",
            kind.value,
            record.employee_id,
            record.work_date,
            at.strftime("%H:%M"),
            record.status.value,
        )
        return record

    def save_attendance(self, payload: Mapping[str, object], *, actor: str = "System") -> AttendanceRecord:
        """Create-or-update from an API payload (camelCase keys).

        Uses the same atomic upsert as the capture path. On insert a missing
        status is derived from checkIn; on update only supplied fields change.
        """

        employee_id = require_non_empty(payload.get("employeeId"), "Employee ID")
        require_non_empty(payload.get("employeeName"), "Employee name")
        work_date = parse_iso_date(str(payload.get("date") or ""))

        values = _parse_payload_fields(payload)
        update_columns = [c for c in values if c != "employee_name"]
        if "check_in" in values or "check_out" in values:
            existing = self._attendance.get_for_employee_and_date(employee_id, work_date)
            _check_time_order(
                values.get("check_in", existing.check_in if existing else None),
                values.get("check_out", existing.check_out if existing else None),
            )
        if values.get("status") is None:
            values["status"] = self._classifier.classify(values.get("check_in"))

        record = self._attendance.upsert(
            employee_id=employee_id,
            work_date=work_date,
            insert_values=values,
            update_columns=update_columns,
            now=self._clock(),
        )
        log_activity(
            actor=actor,
            action="CREATE",
            resource_id=str(record.attendance_id),
            resource_name=f"{record.employee_name} - {record.work_date:%Y-%m-%d}",
            description=f"Attendance record saved for {record.employee_name} ({record.employee_id}) on {record.work_date:%Y-%m-%d}",
            employee_id=record.employee_id,
            status_value=record.status.value,
        )
        return record

    def list_attendance(
        self,
        *,
        employee_id: Optional[str] = None,
        work_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must not be after end date")
        return self._attendance.list_records(
            AttendanceFilter(
                employee_id=optional_text(employee_id),
                work_date=work_date,
                start_date=start_date,
                end_date=end_date,
                status=status,
            )
        )

    def get_attendance(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def get_today_record(self, employee_id: str, today: date) -> Optional[AttendanceRecord]:
        """Read-only lookup used by the dashboard poll."""
        return self._attendance.get_for_employee_and_date(employee_id, today)

    def update_attendance(
        self,
        attendance_id: int,
        payload: Mapping[str, object],
        *,
        actor: str = "System",
    ) -> AttendanceRecord:
        """Administrative correction; the caller supplies status explicitly."""

        current = self.get_attendance(attendance_id)
        values = _parse_payload_fields(payload)
        if not values:
            raise ValidationError("No fields to update")

        _check_time_order(values.get("check_in", current.check_in), values.get("check_out", current.check_out))

        if not self._attendance.update_fields(attendance_id=current.attendance_id, values=values, now=self._clock()):
            raise NotFoundError("Attendance record not found")

        record = self.get_attendance(current.attendance_id)
        log_activity(
            actor=actor,
            action="UPDATE",
            resource_id=str(record.attendance_id),
            resource_name=f"{record.employee_name} - {record.work_date:%Y-%m-%d}",
            description=f"Attendance record updated for {record.employee_name} ({record.employee_id}) on {record.work_date:%Y-%m-%d}",
            fields=sorted(values),
        )
        return record

    def delete_attendance(self, attendance_id: int, *, actor: str = "System") -> None:
        record = self.get_attendance(attendance_id)
        if not self._attendance.delete_by_id(record.attendance_id):
            raise NotFoundError("Attendance record not found")

        log_activity(
            actor=actor,
            action="DELETE",
            resource_id=str(record.attendance_id),
            resource_name=f"{record.employee_name} - {record.work_date:%Y-%m-%d}",
            description=f"Attendance record deleted for {record.employee_name} ({record.employee_id}) on {record.work_date:%Y-%m-%d}",
        )
