from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..config.settings import AttendanceSettings
from ..core.enums import CaptureState, EventKind
from ..core.exceptions import (
    CameraUnavailable,
    DomainError,
    DuplicateEvent,
    OutOfOrderEvent,
    OutsideGeofence,
    StoreFailure,
    ValidationError,
)
from ..geofence.location import LocationProvider, acquire_location
from ..geofence.model import PresenceCheck
from ..geofence.validator import verify_presence
from .devices import CaptureSession, ClientFrameSession, ImageCaptureDevice
from .frames import normalize_frame, to_data_url

logger = logging.getLogger(__name__)


class CaptureWorkflow:
    """One user's interactive sign-in/out capture.

    Idle -> LocationCheck -> CameraOpen -> Captured -> Idle. Nothing is
    persisted before `submit`; cancelling in any state releases the camera
    and drops the frame. A failed store write keeps the frame so the user
    can resubmit without recapturing.
    """

    def __init__(
        self,
        *,
        employee_id: str,
        employee_name: str,
        attendance: AttendanceService,
        settings: AttendanceSettings,
        camera: ImageCaptureDevice,
        clock: Callable[[], datetime] = now_local,
    ):
        self.employee_id = employee_id
        self.employee_name = employee_name
        self._attendance = attendance
        self._settings = settings
        self._camera = camera
        self._clock = clock

        self._lock = threading.RLock()
        self._state = CaptureState.IDLE
        self._kind: Optional[EventKind] = None
        self._session: Optional[CaptureSession] = None
        self._image_ref: Optional[str] = None
        self._attempt = 0

        self.today_record: Optional[AttendanceRecord] = None

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def kind(self) -> Optional[EventKind]:
        return self._kind

    @property
    def image_ref(self) -> Optional[str]:
        return self._image_ref

    def start_capture(self, kind: EventKind, location: LocationProvider) -> PresenceCheck:
        with self._lock:
            self._reset()
            self._attempt += 1
            attempt = self._attempt
            self._kind = kind
            self._state = CaptureState.LOCATION_CHECK

        # Not under the lock: cancel() must be able to interrupt the wait.
        try:
            device_location = acquire_location(location, timeout_seconds=self._settings.location_timeout_seconds)
        except DomainError:
            with self._lock:
                if attempt == self._attempt:
                    self._reset()
            raise

        presence = verify_presence(self._settings.anchor, device_location, self._settings.radius_km)

        with self._lock:
            if attempt != self._attempt or self._state != CaptureState.LOCATION_CHECK:
                raise ValidationError("Capture was cancelled.")

            if not presence.allowed:
                logger.info(
                    "%s rejected %s: %.0f m from anchor",
                    self.employee_id,
                    kind.value,
                    presence.distance_km * 1000,
                )
                self._reset()
                raise OutsideGeofence(presence.distance_km, self._settings.radius_km)

            try:
                self._session = self._camera.open_session()
            except CameraUnavailable:
                self._reset()
                raise
            except Exception as e:
                self._reset()
                raise CameraUnavailable("Unable to access camera. Please check permissions.") from e

            self._state = CaptureState.CAMERA_OPEN
            return presence

    def capture(self, frame: Optional[bytes] = None) -> str:
        """Take one still and release the camera immediately.

        `frame` carries the image when the camera lives in the browser.
        """

        with self._lock:
            if self._state != CaptureState.CAMERA_OPEN or self._session is None:
                raise ValidationError("Camera is not open.")

            session = self._session
            if frame is not None and not isinstance(session, ClientFrameSession):
                raise ValidationError("This camera does not accept uploaded frames.")

            try:
                if frame is not None:
                    session.provide(frame)
                raw = session.capture_still()
                self._image_ref = to_data_url(normalize_frame(raw))
            except CameraUnavailable:
                self._reset()
                raise
            finally:
                self._release_session()

            self._state = CaptureState.CAPTURED
            return self._image_ref

    def cancel(self) -> None:
        with self._lock:
            if self._state != CaptureState.IDLE:
                logger.debug("%s cancelled capture in state %s", self.employee_id, self._state.value)
            self._attempt += 1
            self._reset()

    def submit(self) -> AttendanceRecord:
        with self._lock:
            if self._state != CaptureState.CAPTURED or self._kind is None or self._image_ref is None:
                raise ValidationError("Please capture your photo first.")

            now = self._clock()
            today = now.date()
            at = now.time().replace(second=0, microsecond=0)
            kind = self._kind

            # StoreFailure from this read also leaves the frame in place.
            existing = self._attendance.get_today_record(self.employee_id, today)
            try:
                if kind == EventKind.CHECK_OUT and (existing is None or existing.check_in is None):
                    raise OutOfOrderEvent("You need to sign in before signing out.")
                if existing is not None and existing.has_event(kind):
                    label = "Sign in" if kind == EventKind.CHECK_IN else "Sign out"
                    raise DuplicateEvent(f"{label} is already recorded for today.")
            except DomainError:
                self._reset()
                raise

            try:
                record = self._attendance.record_event(
                    employee_id=self.employee_id,
                    employee_name=self.employee_name,
                    work_date=today,
                    kind=kind,
                    at=at,
                    image_ref=self._image_ref,
                )
            except StoreFailure:
                logger.warning("%s %s not saved, keeping captured frame for retry", self.employee_id, kind.value)
                raise

            self._reset()
            try:
                self.today_record = self._attendance.get_today_record(self.employee_id, today)
            except StoreFailure:
                # the event is saved; only the refreshed view is missing
                logger.warning("%s %s saved, today view not refreshed", self.employee_id, kind.value)
                self.today_record = record
            return record

    def _release_session(self) -> None:
        if self._session is not None:
            try:
                self._session.release()
            finally:
                self._session = None

    def _reset(self) -> None:
        self._release_session()
        self._state = CaptureState.IDLE
        self._kind = None
        self._image_ref = None


class CaptureSessionRegistry:
    """At most one open capture per user; opening a new one releases the old."""

    def __init__(self, factory: Callable[[str, str], CaptureWorkflow]):
        self._factory = factory
        self._lock = threading.Lock()
        self._by_employee: dict[str, CaptureWorkflow] = {}

    def open(self, employee_id: str, employee_name: str) -> CaptureWorkflow:
        with self._lock:
            previous = self._by_employee.pop(employee_id, None)
            workflow = self._factory(employee_id, employee_name)
            self._by_employee[employee_id] = workflow
        if previous is not None:
            previous.cancel()
        return workflow

    def get(self, employee_id: str) -> Optional[CaptureWorkflow]:
        with self._lock:
            return self._by_employee.get(employee_id)

    def close(self, employee_id: str) -> None:
        with self._lock:
            workflow = self._by_employee.pop(employee_id, None)
        if workflow is not None:
            workflow.cancel()
