from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import normalize_time
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceFilter, AttendanceRecord
from .repository import WRITABLE_COLUMNS, AttendanceRepository

_SELECT = """
    SELECT attendance_id, employee_id, employee_name, work_date, check_in, check_out, status,
           notes, check_in_image, check_out_image, created_at, updated_at
    FROM attendance_records
"""


def _to_record(r: Mapping[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=str(r["employee_id"]),
        employee_name=r["employee_name"],
        work_date=r["work_date"],
        check_in=normalize_time(r.get("check_in")),
        check_out=normalize_time(r.get("check_out")),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        check_in_image=r.get("check_in_image"),
        check_out_image=r.get("check_out_image"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _db_value(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


def _check_columns(columns) -> None:
    unknown = set(columns) - set(WRITABLE_COLUMNS)
    if unknown:
        raise ValueError(f"Unknown attendance columns: {sorted(unknown)}")


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        employee_id: str,
        work_date: date,
        insert_values: Mapping[str, object],
        update_columns: Sequence[str],
        now: datetime,
    ) -> AttendanceRecord:
        _check_columns(insert_values)
        _check_columns(update_columns)

        columns = ["employee_id", "work_date", *insert_values.keys(), "created_at", "updated_at"]
        params = [employee_id, work_date, *(_db_value(v) for v in insert_values.values()), now, now]

        # LAST_INSERT_ID(attendance_id) keeps the row id available on the update branch too.
        assignments = ["attendance_id=LAST_INSERT_ID(attendance_id)"]
        assignments += [f"{c}=VALUES({c})" for c in update_columns]
        assignments.append("updated_at=VALUES(updated_at)")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_records({", ".join(columns)})
                VALUES({", ".join(["%s"] * len(columns))})
                ON DUPLICATE KEY UPDATE {", ".join(assignments)}
                """,
                tuple(params),
            )
            cur.execute(_SELECT + " WHERE attendance_id=%s", (int(cur.lastrowid),))
            return _to_record(fetchone(cur))

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE employee_id=%s AND work_date=%s", (employee_id, work_date))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_records(self, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if criteria.employee_id:
            clauses.append("employee_id=%s")
            params.append(criteria.employee_id)
        if criteria.work_date is not None:
            clauses.append("work_date=%s")
            params.append(criteria.work_date)
        if criteria.start_date is not None:
            clauses.append("work_date>=%s")
            params.append(criteria.start_date)
        if criteria.end_date is not None:
            clauses.append("work_date<=%s")
            params.append(criteria.end_date)
        if criteria.status is not None:
            clauses.append("status=%s")
            params.append(criteria.status.value)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY work_date DESC, check_in DESC", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def update_fields(self, *, attendance_id: int, values: Mapping[str, object], now: datetime) -> bool:
        _check_columns(values)
        assignments = [f"{c}=%s" for c in values] + ["updated_at=%s"]
        params = [_db_value(v) for v in values.values()] + [now, int(attendance_id)]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET {', '.join(assignments)} WHERE attendance_id=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
