from __future__ import annotations

import dataclasses
import io
import threading
from datetime import date, datetime, time
from typing import Optional

import pytest
from PIL import Image

from campus_attendance.attendance.classifier import StatusClassifier
from campus_attendance.attendance.model import AttendanceFilter, AttendanceRecord
from campus_attendance.attendance.service import AttendanceService
from campus_attendance.config.settings import AttendanceSettings
from campus_attendance.core.enums import AttendanceStatus
from campus_attendance.core.exceptions import CameraUnavailable, StoreFailure
from campus_attendance.employees.model import EmployeeRef
from campus_attendance.geofence.model import GeoCoordinate

ANCHOR = GeoCoordinate(latitude=14.5995, longitude=120.9842)


class InMemoryAttendance:
    """Mirrors the unique (employee_id, work_date) key of the real table."""

    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.fail_writes = 0
        self.fail_reads = 0

    def snapshot(self) -> dict[int, AttendanceRecord]:
        with self._lock:
            return dict(self._rows)

    def _find(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._rows.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def upsert(self, *, employee_id, work_date, insert_values, update_columns, now):
        with self._lock:
            if self.fail_writes:
                self.fail_writes -= 1
                raise StoreFailure("Database error while saving attendance")

            existing = self._find(employee_id, work_date)
            if existing is None:
                self._id += 1
                fields = {
                    "attendance_id": self._id,
                    "employee_id": employee_id,
                    "employee_name": "",
                    "work_date": work_date,
                    "check_in": None,
                    "check_out": None,
                    "status": AttendanceStatus.PRESENT,
                    "created_at": now,
                    "updated_at": now,
                }
                fields.update(insert_values)
                rec = AttendanceRecord(**fields)
            else:
                changes = {c: insert_values.get(c) for c in update_columns}
                rec = dataclasses.replace(existing, updated_at=now, **changes)
            self._rows[rec.attendance_id] = rec
            return rec

    def get_for_employee_and_date(self, employee_id, work_date):
        with self._lock:
            if self.fail_reads:
                self.fail_reads -= 1
                raise StoreFailure("Database is unavailable")
            return self._find(employee_id, work_date)

    def get_by_id(self, attendance_id):
        return self._rows.get(int(attendance_id))

    def list_records(self, criteria: AttendanceFilter):
        items = list(self._rows.values())
        if criteria.employee_id:
            items = [r for r in items if r.employee_id == criteria.employee_id]
        if criteria.work_date:
            items = [r for r in items if r.work_date == criteria.work_date]
        if criteria.start_date:
            items = [r for r in items if r.work_date >= criteria.start_date]
        if criteria.end_date:
            items = [r for r in items if r.work_date <= criteria.end_date]
        if criteria.status:
            items = [r for r in items if r.status == criteria.status]
        items.sort(key=lambda r: (r.work_date, r.check_in or time.min), reverse=True)
        return items

    def update_fields(self, *, attendance_id, values, now):
        rec = self._rows.get(int(attendance_id))
        if not rec:
            return False
        self._rows[rec.attendance_id] = dataclasses.replace(rec, updated_at=now, **values)
        return True

    def delete_by_id(self, attendance_id):
        return self._rows.pop(int(attendance_id), None) is not None


class InMemoryEmployees:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._by_id.get(employee_id)

    def list_all(self):
        return list(self._by_id.values())

    def __iter__(self):
        return iter(self._by_id.values())


class FakeSession:
    def __init__(self, frame: bytes):
        self._frame = frame
        self.released = False

    def capture_still(self) -> bytes:
        return self._frame

    def release(self) -> None:
        self.released = True


class FakeCamera:
    def __init__(self, frame: bytes, *, denied: bool = False):
        self._frame = frame
        self._denied = denied
        self.sessions: list[FakeSession] = []

    def open_session(self):
        if self._denied:
            raise CameraUnavailable("Unable to access camera. Please check permissions.")
        session = FakeSession(self._frame)
        self.sessions.append(session)
        return session


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_png(color=(200, 30, 30), size=(16, 12)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings() -> AttendanceSettings:
    return AttendanceSettings(
        anchor=ANCHOR,
        radius_km=0.1,
        expected_arrival=time(8, 11),
        location_timeout_seconds=1.0,
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 4, 1, 8, 5, 30))


@pytest.fixture
def attendance_service(attendance_repo, settings, clock) -> AttendanceService:
    return AttendanceService(attendance_repo, StatusClassifier(settings.expected_arrival), clock=clock)


@pytest.fixture
def png_frame() -> bytes:
    return make_png()


@pytest.fixture
def camera(png_frame) -> FakeCamera:
    return FakeCamera(png_frame)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            EmployeeRef(employee_id="EMP-001", full_name="Ana Reyes", department="IT", employment_type="Regular"),
            EmployeeRef(employee_id="EMP-002", full_name="Ben Cruz", department="IT", employment_type="Contractual"),
            EmployeeRef(employee_id="EMP-003", full_name="Carla Santos", department="HR", employment_type=None),
        ]
    )


@pytest.fixture
def denied_camera() -> FakeCamera:
    return FakeCamera(b"", denied=True)


@pytest.fixture
def make_employees():
    return InMemoryEmployees
