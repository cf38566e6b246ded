from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from campus_attendance.capture.devices import ClientFrameSession
from campus_attendance.capture.frames import decode_data_url, normalize_frame, to_data_url
from campus_attendance.core.exceptions import CameraUnavailable


def test_normalize_frame_produces_bounded_rgb_jpeg():
    buf = io.BytesIO()
    Image.new("RGBA", (2000, 1000), (10, 20, 30, 128)).save(buf, format="PNG")

    jpeg = normalize_frame(buf.getvalue(), max_side=640)

    img = Image.open(io.BytesIO(jpeg))
    assert img.format == "JPEG"
    assert img.mode == "RGB"
    assert img.size == (640, 320)


@pytest.mark.parametrize("data", [b"", b"not an image"])
def test_normalize_frame_rejects_bad_input(data):
    with pytest.raises(CameraUnavailable):
        normalize_frame(data)


def test_data_url_accepts_canvas_output(png_frame):
    url = "data:image/png;base64," + base64.b64encode(png_frame).decode("ascii")

    assert decode_data_url(url) == png_frame
    assert to_data_url(b"\xff\xd8").startswith("data:image/jpeg;base64,")


def test_decode_data_url_rejects_garbage():
    with pytest.raises(CameraUnavailable):
        decode_data_url("data:image/png;base64,@@@")


def test_client_session_is_single_use(png_frame):
    session = ClientFrameSession()
    with pytest.raises(CameraUnavailable):
        session.capture_still()

    session.provide(png_frame)
    assert session.capture_still() == png_frame

    session.release()
    with pytest.raises(CameraUnavailable):
        session.provide(png_frame)
