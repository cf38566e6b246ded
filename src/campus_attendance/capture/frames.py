from __future__ import annotations

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import CameraUnavailable

DATA_URL_PREFIX = "data:image/jpeg;base64,"


def normalize_frame(data: bytes, *, max_side: int = 1280, quality: int = 85) -> bytes:
    """Re-encode a captured still as an RGB JPEG no larger than `max_side`."""
    if not data:
        raise CameraUnavailable("Captured frame is empty.")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise CameraUnavailable("Captured frame is not a valid image.") from e

    img = img.convert("RGB")
    img.thumbnail((max_side, max_side))

    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def to_data_url(jpeg: bytes) -> str:
    return DATA_URL_PREFIX + base64.b64encode(jpeg).decode("ascii")


def decode_data_url(value: str) -> bytes:
    """Accept `data:image/...;base64,` strings as produced by canvas.toDataURL."""
    value = (value or "").strip()
    if value.startswith("data:"):
        _, _, value = value.partition(",")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CameraUnavailable("Captured frame is not valid base64 data.") from e
