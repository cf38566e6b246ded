from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EmployeeRef:
    """Read-only projection of an employee owned by the HR directory."""

    employee_id: str
    full_name: str
    department: Optional[str]
    employment_type: Optional[str]
