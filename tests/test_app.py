from __future__ import annotations

import csv
import io

import pytest

from campus_attendance.container import assemble
from campus_attendance.employees.model import EmployeeRef
from campus_attendance.main import create_app


@pytest.fixture
def app(settings, attendance_repo, employees):
    container = assemble(settings=settings, attendance_repo=attendance_repo, employee_directory=employees)
    return create_app(container=container, settings_module="campus_attendance.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in(client):
    with client.session_transaction() as sess:
        sess["employee_id"] = "EMP-001"
        sess["name"] = "Ana Reyes"
    return client


def _seed(client):
    for employee_id, name, day, check_in in (
        ("EMP-001", "Ana Reyes", "2025-04-01", "08:20"),
        ("EMP-002", "Ben Cruz", "2025-04-01", "08:00"),
        ("EMP-003", "Carla Santos", "2025-04-02", "08:10"),
    ):
        resp = client.post(
            "/api/attendance",
            json={"employeeId": employee_id, "employeeName": name, "date": day, "checkIn": check_in},
        )
        assert resp.status_code == 201


def test_capture_endpoints_require_session(client):
    assert client.post("/api/capture/start", json={"kind": "checkIn"}).status_code == 401
    assert client.get("/api/attendance/today").status_code == 401


def test_sign_in_flow_over_http(signed_in, png_frame):
    resp = signed_in.post("/api/capture/start", json={"kind": "checkIn", "latitude": 14.5995, "longitude": 120.9842})
    assert resp.status_code == 200
    assert resp.get_json()["state"] == "camera_open"

    resp = signed_in.post(
        "/api/capture/frame",
        data={"image": (io.BytesIO(png_frame), "still.png")},
        content_type="multipart/form-data",
    )
    assert resp.get_json()["state"] == "captured"

    resp = signed_in.post("/api/capture/submit")
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["data"]["employeeId"] == "EMP-001"
    assert body["data"]["checkIn"] is not None
    assert body["data"]["checkOut"] is None
    assert body["state"] == "idle"

    today = signed_in.get("/api/attendance/today").get_json()["data"]
    assert today["id"] == body["data"]["id"]


def test_start_outside_geofence_is_forbidden(signed_in):
    resp = signed_in.post("/api/capture/start", json={"kind": "checkIn", "latitude": 14.6100, "longitude": 120.9842})

    assert resp.status_code == 403
    body = resp.get_json()
    assert body["error"] == "OutsideGeofence"
    assert body["distanceMeters"] > 100
    assert signed_in.get("/api/capture/state").get_json()["state"] == "idle"


def test_start_without_location_and_bad_kind(signed_in):
    assert signed_in.post("/api/capture/start", json={"kind": "checkIn"}).status_code == 422
    assert signed_in.post("/api/capture/start", json={"kind": "lunch"}).status_code == 400


def test_check_out_before_check_in_conflicts(signed_in, png_frame, attendance_repo):
    signed_in.post("/api/capture/start", json={"kind": "checkOut", "latitude": 14.5995, "longitude": 120.9842})
    signed_in.post(
        "/api/capture/frame",
        data={"image": (io.BytesIO(png_frame), "still.png")},
        content_type="multipart/form-data",
    )

    resp = signed_in.post("/api/capture/submit")

    assert resp.status_code == 409
    assert resp.get_json()["error"] == "OutOfOrderEvent"
    assert attendance_repo.snapshot() == {}


def test_attendance_crud(client):
    resp = client.post(
        "/api/attendance",
        json={"employeeId": "EMP-002", "employeeName": "Ben Cruz", "date": "2025-04-01", "checkIn": "08:30"},
    )
    created = resp.get_json()["data"]
    assert created["status"] == "late"

    resp = client.put(f"/api/attendance/{created['id']}", json={"checkOut": "17:00", "updatedBy": "HR Admin"})
    assert resp.get_json()["data"]["checkOut"] == "17:00"

    listed = client.get("/api/attendance?employeeId=EMP-002&status=late").get_json()["data"]
    assert [r["id"] for r in listed] == [created["id"]]

    assert client.delete(f"/api/attendance/{created['id']}").status_code == 200
    assert client.get(f"/api/attendance/{created['id']}").status_code == 404


def test_attendance_create_validation(client):
    resp = client.post("/api/attendance", json={"employeeId": "EMP-002", "date": "2025-04-01"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_report_json_and_csv_download(client):
    _seed(client)

    data = client.get("/api/reports/attendance?date=2025-04-01").get_json()["data"]
    assert [(s["department"], s["date"]) for s in data] == [("IT", "2025-04-01")]
    assert data[0]["rows"][0]["status"] == "Late (9 mins)"

    resp = client.get("/api/reports/attendance.csv?start=2025-04-01&end=2025-04-02")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance_report_2025-04-01_to_2025-04-02.csv" in resp.headers["Content-Disposition"]
    rows = list(csv.reader(io.StringIO(resp.get_data(as_text=True))))
    assert [r[0] for r in rows[1:]] == ["HR", "IT", "IT"]


def test_report_csv_requires_range_and_data(client):
    assert client.get("/api/reports/attendance.csv?start=2025-04-01").status_code == 400
    assert client.get("/api/reports/attendance.csv?start=2025-01-01&end=2025-01-31").status_code == 404


def test_section_csv_download(client):
    _seed(client)

    resp = client.get("/api/reports/attendance/section.csv?department=IT&date=2025-04-01")

    assert resp.status_code == 200
    assert "attendance_IT_2025-04-01.csv" in resp.headers["Content-Disposition"]
    rows = list(csv.reader(io.StringIO(resp.get_data(as_text=True))))
    assert [r[1] for r in rows[1:]] == ["EMP-001", "EMP-002"]

    assert client.get("/api/reports/attendance/section.csv?department=HR&date=2025-04-01").status_code == 404


@pytest.mark.parametrize(
    "department, expected",
    [
        ("Sales; x=1", 'filename="attendance_Sales;_x=1_2025-04-01.csv"'),
        ("Kế toán", "filename*=UTF-8''attendance_K%E1%BA%BF_to%C3%A1n_2025-04-01.csv"),
    ],
)
def test_section_download_name_is_encoded(settings, attendance_repo, make_employees, department, expected):
    directory = make_employees(
        [EmployeeRef(employee_id="EMP-100", full_name="Lan Pham", department=department, employment_type="Regular")]
    )
    container = assemble(settings=settings, attendance_repo=attendance_repo, employee_directory=directory)
    client = create_app(container=container, settings_module="campus_attendance.config.testing").test_client()
    client.post(
        "/api/attendance",
        json={"employeeId": "EMP-100", "employeeName": "Lan Pham", "date": "2025-04-01", "checkIn": "08:00"},
    )

    resp = client.get("/api/reports/attendance/section.csv", query_string={"department": department, "date": "2025-04-01"})

    assert resp.status_code == 200
    disposition = resp.headers["Content-Disposition"]
    assert disposition.startswith("attachment;")
    assert expected in disposition
    disposition.encode("latin-1")
