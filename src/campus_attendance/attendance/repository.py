from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Protocol, Sequence

from .model import AttendanceFilter, AttendanceRecord

# Columns a caller may write; identity (employee_id, work_date) and the
# timestamps are owned by the repository.
WRITABLE_COLUMNS = (
    "employee_name",
    "check_in",
    "check_out",
    "status",
    "notes",
    "check_in_image",
    "check_out_image",
)


class AttendanceRepository(Protocol):
    """Storage for daily attendance records.

    Implementations own the (employee_id, work_date) uniqueness invariant.
    """

    def upsert(
        self,
        *,
        employee_id: str,
        work_date: date,
        insert_values: Mapping[str, object],
        update_columns: Sequence[str],
        now: datetime,
    ) -> AttendanceRecord:
        """Insert the record, or update only `update_columns` if it exists.

        Must be a single atomic conditional write, never a read followed by
        a separate insert or update.
        """

        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_records(self, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def update_fields(self, *, attendance_id: int, values: Mapping[str, object], now: datetime) -> bool:
        """Admin-only override; bypasses classification."""

        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError
