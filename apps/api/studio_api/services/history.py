from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from studio_api.models.appointment_history import AppointmentHistory
from studio_api.services.business_time import BusinessClock

TRACKED_FIELDS = ("start_time", "end_time", "status")


def _render(clock: BusinessClock, value: Any) -> str:
    if isinstance(value, datetime):
        return clock.format_local(value)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def track_appointment_changes(
    db: Session,
    clock: BusinessClock,
    appointment_id: UUID,
    old: dict,
    new: dict,
    changed_by: Optional[UUID],
) -> list[AppointmentHistory]:
    """
    Stage one history row per tracked field whose rendered value changed.

    Dates compare by their business-local rendering, so sub-minute
    differences are not history. Fields missing from `old` or empty in
    `new` are skipped. The caller commits.
    """
    rows = []
    for field in TRACKED_FIELDS:
        if field not in old or not new.get(field):
            continue
        old_value = old[field]
        old_str = _render(clock, old_value) if old_value is not None else None
        new_str = _render(clock, new[field])
        if old_str != new_str:
            rows.append(
                AppointmentHistory(
                    appointment_id=appointment_id,
                    field_changed=field,
                    old_value=old_str,
                    new_value=new_str,
                    changed_by=changed_by,
                )
            )
    db.add_all(rows)
    return rows
