from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmployeeRef


class EmployeeDirectory(Protocol):
    """Read-only lookup into the external employee directory."""

    def get_by_id(self, employee_id: str) -> Optional[EmployeeRef]:
        raise NotImplementedError

    def list_all(self) -> Sequence[EmployeeRef]:
        raise NotImplementedError
