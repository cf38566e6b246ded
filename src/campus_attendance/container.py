from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.classifier import StatusClassifier
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .capture.devices import ClientCameraDevice, ImageCaptureDevice, OpenCVCameraDevice
from .capture.workflow import CaptureSessionRegistry, CaptureWorkflow
from .config.settings import AttendanceSettings
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeDirectory
from .employees.repository import EmployeeDirectory
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    settings: AttendanceSettings

    attendance_repo: AttendanceRepository
    employee_directory: EmployeeDirectory
    camera: ImageCaptureDevice

    classifier: StatusClassifier
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    capture_registry: CaptureSessionRegistry

    conn: Optional[DatabaseConnection] = None


def camera_for(settings: AttendanceSettings) -> ImageCaptureDevice:
    if settings.camera_backend == "opencv":
        return OpenCVCameraDevice(settings.camera_index)
    return ClientCameraDevice()


def assemble(
    *,
    settings: AttendanceSettings,
    attendance_repo: AttendanceRepository,
    employee_directory: EmployeeDirectory,
    camera: Optional[ImageCaptureDevice] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    camera = camera or camera_for(settings)
    classifier = StatusClassifier(settings.expected_arrival)
    attendance_service = AttendanceService(attendance_repo, classifier)
    report_service = AttendanceReportService(attendance_repo, employee_directory, classifier)

    def new_workflow(employee_id: str, employee_name: str) -> CaptureWorkflow:
        return CaptureWorkflow(
            employee_id=employee_id,
            employee_name=employee_name,
            attendance=attendance_service,
            settings=settings,
            camera=camera,
        )

    return Container(
        settings=settings,
        attendance_repo=attendance_repo,
        employee_directory=employee_directory,
        camera=camera,
        classifier=classifier,
        attendance_service=attendance_service,
        report_service=report_service,
        capture_registry=CaptureSessionRegistry(new_workflow),
        conn=conn,
    )


def build_container(*, db_config: dict, settings: AttendanceSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        settings=settings,
        attendance_repo=MySQLAttendanceRepository(conn),
        employee_directory=MySQLEmployeeDirectory(conn),
        conn=conn,
    )
