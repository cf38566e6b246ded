from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger("campus_attendance.activity")


def log_activity(
    *,
    actor: str,
    action: str,
    resource_id: Optional[str],
    resource_name: str,
    description: str,
    status: str = "success",
    **metadata: Any,
) -> None:
    """Audit trail for attendance mutations.

    The actor is the caller label from the session; it is recorded, never
    used for authorization.
    """

    logger.info(
        "%s Attendance %s (%s) by %s: %s",
        action,
        resource_id or "-",
        resource_name,
        actor or "System",
        description,
        extra={"activity_status": status, "activity_metadata": metadata},
    )
