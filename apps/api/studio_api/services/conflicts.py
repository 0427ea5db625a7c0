import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from studio_api.core.errors import SlotConflict, ValidationError
from studio_api.models.employee import Employee
from studio_api.services.business_time import as_utc
from studio_api.services.occupancy import OccupancyIndex

logger = logging.getLogger(__name__)


class ConflictGuard:
    """
    Exact-overlap check run before an appointment is written as accepted.

    Two intervals conflict iff existing.start < new_end and
    existing.end > new_start, so back-to-back bookings are fine. This is
    stricter than the hour marks used for slot generation; the two checks
    are kept separate on purpose.
    """

    def __init__(self, db: Session, occupancy: OccupancyIndex):
        self.db = db
        self.occupancy = occupancy

    def ensure_available(
        self,
        employee_id: UUID,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[UUID] = None,
        message: str = "Time slot conflicts with another accepted appointment",
    ) -> None:
        start, end = as_utc(start), as_utc(end)
        if end <= start:
            raise ValidationError("endTime must be after startTime")

        # Serialize concurrent acceptances for the same employee until the
        # caller commits (no-op on backends without SELECT ... FOR UPDATE).
        self.db.execute(select(Employee.employee_id).where(Employee.employee_id == employee_id).with_for_update())

        conflicts = self.occupancy.accepted_between(employee_id, start, end, exclude_appointment_id)
        if conflicts:
            logger.info(
                "Rejected %s-%s for employee %s: overlaps %s",
                start.isoformat(),
                end.isoformat(),
                employee_id,
                ", ".join(str(a.appointment_id) for a in conflicts),
            )
            raise SlotConflict(message)
