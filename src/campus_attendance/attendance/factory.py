from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import ClassificationStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class StatusStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, check_in: Optional[time], minutes_late: int) -> ClassificationStrategy:
        if check_in is None:
            return AbsentStrategy()
        # strictly after the threshold; arriving exactly on it is present
        if minutes_late > 0:
            return LateStrategy()
        return PresentStrategy()
