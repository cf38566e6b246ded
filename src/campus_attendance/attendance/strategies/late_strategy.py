from __future__ import annotations

from datetime import time
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import ClassificationStrategy, StatusDecision


class LateStrategy(ClassificationStrategy):
    """Late check-in."""

    def decide(self, *, check_in: Optional[time], minutes_late: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, minutes_late=minutes_late)
