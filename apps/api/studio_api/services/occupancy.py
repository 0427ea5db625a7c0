from datetime import datetime, timedelta
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from studio_api.models.appointment import Appointment, AppointmentStatus
from studio_api.services.business_time import BusinessClock, as_utc

ONE_HOUR = timedelta(hours=1)


class OccupancyIndex:
    """Accepted appointments of an employee, the only ones that take up time."""

    def __init__(self, db: Session, clock: BusinessClock):
        self.db = db
        self.clock = clock

    def accepted_between(
        self,
        employee_id: UUID,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[UUID] = None,
    ) -> list[Appointment]:
        """Accepted appointments whose [start_time, end_time) intersects [start, end)."""
        stmt = (
            select(Appointment)
            .where(
                Appointment.employee_id == employee_id,
                Appointment.status == AppointmentStatus.accepted,
                Appointment.start_time < end,
                Appointment.end_time > start,
            )
            .order_by(Appointment.start_time)
        )
        if exclude_appointment_id is not None:
            stmt = stmt.where(Appointment.appointment_id != exclude_appointment_id)
        return list(self.db.execute(stmt).scalars())

    def occupied_marks(self, appointments: Iterable[Appointment]) -> set[int]:
        """
        Hour marks (epoch seconds) covered by the appointments.

        Each appointment marks every local hour start from the hour holding
        its start up to, not including, its end. Slot generation drops a
        slot only when its exact start is one of these marks.
        """
        marks: set[int] = set()
        for appt in appointments:
            end = as_utc(appt.end_time)
            cursor = self.clock.hour_floor(appt.start_time)
            while cursor < end:
                marks.add(int(cursor.timestamp()))
                cursor += ONE_HOUR
        return marks
