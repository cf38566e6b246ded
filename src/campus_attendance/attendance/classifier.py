from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus
from .factory import StatusStrategyFactory
from .strategies.base import StatusDecision

_REFERENCE_DAY = date(2000, 1, 1)


def minutes_late(check_in: time, expected_arrival: time) -> int:
    """Whole minutes between expected arrival and check-in, floored.

    Negative when the employee arrived early.
    """

    delta = datetime.combine(_REFERENCE_DAY, check_in) - datetime.combine(_REFERENCE_DAY, expected_arrival)
    return int(delta.total_seconds() // 60)


class StatusClassifier:
    """Derives present/late/absent from a check-in time.

    half-day and leave are never produced here; they are only set through
    the administrative update path.
    """

    def __init__(self, expected_arrival: time, *, strategy_factory: Optional[StatusStrategyFactory] = None):
        self._expected_arrival = expected_arrival
        self._factory = strategy_factory or StatusStrategyFactory()

    @property
    def expected_arrival(self) -> time:
        return self._expected_arrival

    def minutes_late(self, check_in: time) -> int:
        return minutes_late(check_in, self._expected_arrival)

    def decide(self, check_in: Optional[time]) -> StatusDecision:
        late_by = self.minutes_late(check_in) if check_in is not None else 0
        strategy = self._factory.for_checkin(check_in=check_in, minutes_late=late_by)
        return strategy.decide(check_in=check_in, minutes_late=late_by)

    def classify(self, check_in: Optional[time]) -> AttendanceStatus:
        return self.decide(check_in).status


def classify(check_in: Optional[time], expected_arrival: time) -> AttendanceStatus:
    return StatusClassifier(expected_arrival).classify(check_in)
