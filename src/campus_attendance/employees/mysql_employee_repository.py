from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmployeeRef
from .repository import EmployeeDirectory

_SELECT = """
    SELECT e.employee_id, e.full_name, d.dept_name, e.employment_type
    FROM employees e
    LEFT JOIN departments d ON d.dept_id = e.dept_id
"""


def _to_ref(r: Mapping[str, Any]) -> EmployeeRef:
    return EmployeeRef(
        employee_id=str(r["employee_id"]),
        full_name=r["full_name"],
        department=r.get("dept_name"),
        employment_type=r.get("employment_type"),
    )


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[EmployeeRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_ref(r) if r else None

    def list_all(self) -> Sequence[EmployeeRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY e.full_name")
            return [_to_ref(r) for r in fetchall(cur)]
