from __future__ import annotations

import importlib
from dataclasses import dataclass
from datetime import time
from types import ModuleType
from typing import Optional, Union

from ..common.datetime_utils import parse_hhmm
from ..core import constants
from ..geofence.model import GeoCoordinate
from . import get_settings_module


@dataclass(frozen=True)
class AttendanceSettings:
    """Business configuration injected into the validator, classifier and reports."""

    anchor: GeoCoordinate
    radius_km: float
    expected_arrival: time
    location_timeout_seconds: float = constants.DEFAULT_LOCATION_TIMEOUT_SECONDS
    camera_index: int = constants.DEFAULT_CAMERA_INDEX
    # "client": browser camera uploads the frame; "opencv": local webcam
    camera_backend: str = constants.DEFAULT_CAMERA_BACKEND


def load_settings(module: Optional[Union[str, ModuleType]] = None) -> AttendanceSettings:
    if module is None:
        module = get_settings_module()
    if isinstance(module, str):
        module = importlib.import_module(module)

    return AttendanceSettings(
        anchor=GeoCoordinate(
            latitude=float(getattr(module, "INSTITUTION_LATITUDE", constants.DEFAULT_INSTITUTION_LATITUDE)),
            longitude=float(getattr(module, "INSTITUTION_LONGITUDE", constants.DEFAULT_INSTITUTION_LONGITUDE)),
        ),
        radius_km=float(getattr(module, "GEOFENCE_RADIUS_KM", constants.DEFAULT_GEOFENCE_RADIUS_KM)),
        expected_arrival=parse_hhmm(str(getattr(module, "EXPECTED_ARRIVAL", constants.DEFAULT_EXPECTED_ARRIVAL))),
        location_timeout_seconds=float(
            getattr(module, "LOCATION_TIMEOUT_SECONDS", constants.DEFAULT_LOCATION_TIMEOUT_SECONDS)
        ),
        camera_index=int(getattr(module, "CAMERA_INDEX", constants.DEFAULT_CAMERA_INDEX)),
        camera_backend=str(getattr(module, "CAMERA_BACKEND", constants.DEFAULT_CAMERA_BACKEND)).lower(),
    )
