from __future__ import annotations

import logging
from typing import Optional, Protocol

import cv2
import numpy as np

from ..core.exceptions import CameraUnavailable

logger = logging.getLogger(__name__)


class CaptureSession(Protocol):
    """An open camera; yields one encoded still frame, then is released."""

    def capture_still(self) -> bytes:
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError


class ImageCaptureDevice(Protocol):
    def open_session(self) -> CaptureSession:
        raise NotImplementedError


class OpenCVCaptureSession(CaptureSession):
    def __init__(self, capture: "cv2.VideoCapture"):
        self._capture = capture

    def capture_still(self) -> bytes:
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraUnavailable("Unable to read a frame from the camera.")

        frame = np.ascontiguousarray(frame, dtype=np.uint8)
        ok, buf = cv2.imencode(".jpg", frame)
        if not ok:
            raise CameraUnavailable("Unable to encode the captured frame.")
        return buf.tobytes()

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None


class OpenCVCameraDevice(ImageCaptureDevice):
    """Local webcam (kiosk deployments) read through OpenCV."""

    def __init__(self, index: int = 0):
        self._index = int(index)

    def open_session(self) -> CaptureSession:
        capture = cv2.VideoCapture(self._index)
        if not capture.isOpened():
            capture.release()
            logger.warning("camera %s could not be opened", self._index)
            raise CameraUnavailable("Unable to access camera. Please check permissions.")
        return OpenCVCaptureSession(capture)


class ClientFrameSession(CaptureSession):
    """Session whose frame is taken by the browser and uploaded later."""

    def __init__(self):
        self._frame: Optional[bytes] = None
        self._released = False

    def provide(self, frame: bytes) -> None:
        if self._released:
            raise CameraUnavailable("Capture session is already closed.")
        self._frame = bytes(frame)

    def capture_still(self) -> bytes:
        if self._released:
            raise CameraUnavailable("Capture session is already closed.")
        if not self._frame:
            raise CameraUnavailable("No frame was received from the camera.")
        return self._frame

    def release(self) -> None:
        self._frame = None
        self._released = True


class ClientCameraDevice(ImageCaptureDevice):
    def open_session(self) -> CaptureSession:
        return ClientFrameSession()
