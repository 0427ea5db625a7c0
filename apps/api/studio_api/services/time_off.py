import logging
import uuid
from datetime import date
from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studio_api.core.errors import DuplicateTimeOff, EmptyBatch, NotFound, ValidationError
from studio_api.models.time_off import EmployeeTimeOff, TimeOffStatus
from studio_api.services.business_time import BusinessClock

logger = logging.getLogger(__name__)


class TimeOffStore:
    def __init__(
        self,
        db: Session,
        clock: BusinessClock,
        blocking_statuses: Iterable[str] = ("pending", "approved", "rejected"),
    ):
        self.db = db
        self.clock = clock
        self.blocking_statuses = [TimeOffStatus(s) for s in blocking_statuses]

    def _for_day(self, employee_id: UUID, day: date):
        start, end = self.clock.day_bounds(day)
        return select(EmployeeTimeOff).where(
            EmployeeTimeOff.employee_id == employee_id,
            EmployeeTimeOff.date >= start,
            EmployeeTimeOff.date < end,
        )

    def find(self, employee_id: UUID, day: date) -> Optional[EmployeeTimeOff]:
        return self.db.execute(self._for_day(employee_id, day)).scalars().first()

    def is_day_off(self, employee_id: UUID, day: date) -> bool:
        stmt = self._for_day(employee_id, day).where(EmployeeTimeOff.status.in_(self.blocking_statuses))
        return self.db.execute(stmt).scalars().first() is not None

    def create(self, employee_id: UUID, day_str: str, reason: Optional[str] = None) -> EmployeeTimeOff:
        day = self.clock.parse_date(day_str)
        if self.find(employee_id, day) is not None:
            raise DuplicateTimeOff(f"Time off already requested for {day.isoformat()}")

        row = EmployeeTimeOff(
            employee_id=employee_id,
            date=self.clock.day_bounds(day)[0],
            reason=reason,
            status=TimeOffStatus.pending,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race against another request for the same day
            self.db.rollback()
            raise DuplicateTimeOff(f"Time off already requested for {day.isoformat()}")
        self.db.refresh(row)
        logger.info("Time off requested for employee %s on %s", employee_id, day.isoformat())
        return row

    def create_bulk(
        self, employee_id: UUID, day_strs: Sequence[str], reason: Optional[str] = None
    ) -> tuple[UUID, list[EmployeeTimeOff]]:
        """
        Create one row per requested day under a shared batch id.

        Days that already have a row are skipped; only a batch where every
        day was skipped is an error.
        """
        days = [self.clock.parse_date(s) for s in day_strs]
        batch_id = uuid.uuid4()
        created: list[EmployeeTimeOff] = []
        seen: set[date] = set()

        for day in days:
            if day in seen or self.find(employee_id, day) is not None:
                continue
            seen.add(day)
            row = EmployeeTimeOff(
                employee_id=employee_id,
                date=self.clock.day_bounds(day)[0],
                reason=reason,
                status=TimeOffStatus.pending,
                batch_id=batch_id,
            )
            self.db.add(row)
            created.append(row)

        if not created:
            raise EmptyBatch()

        try:
            self.db.commit()
        except IntegrityError:
            # another request took one of these days in the meantime
            self.db.rollback()
            raise DuplicateTimeOff("Time off was already requested for one of these days")
        for row in created:
            self.db.refresh(row)
        logger.info("Bulk time off for employee %s: %d of %d days created", employee_id, len(created), len(days))
        return batch_id, created

    def get(self, time_off_id: UUID) -> EmployeeTimeOff:
        row = self.db.get(EmployeeTimeOff, time_off_id)
        if not row:
            raise NotFound("Time off not found")
        return row

    @staticmethod
    def _review_outcome(status: str) -> TimeOffStatus:
        outcome = TimeOffStatus(status)
        if outcome == TimeOffStatus.pending:
            raise ValidationError("A review must approve or reject the request")
        return outcome

    def set_status(self, time_off_id: UUID, status: str, reviewer_id: UUID) -> EmployeeTimeOff:
        outcome = self._review_outcome(status)
        row = self.get(time_off_id)
        if row.status != TimeOffStatus.pending:
            raise ValidationError(f"Time off was already {row.status.value}")

        row.status = outcome
        row.reviewed_by = reviewer_id
        row.reviewed_at = self.clock.now_utc()
        self.db.commit()
        self.db.refresh(row)
        logger.info("Time off %s marked %s by %s", time_off_id, status, reviewer_id)
        return row

    def set_batch_status(self, batch_id: UUID, status: str, reviewer_id: UUID) -> list[EmployeeTimeOff]:
        """
        Review the still-pending days of a batch.

        Days that were decided one by one keep their outcome; a batch with
        nothing left to review is an error. Returns the rows reviewed now.
        """
        outcome = self._review_outcome(status)
        rows = list(
            self.db.execute(select(EmployeeTimeOff).where(EmployeeTimeOff.batch_id == batch_id)).scalars()
        )
        if not rows:
            raise NotFound("Time off batch not found")

        pending = [row for row in rows if row.status == TimeOffStatus.pending]
        if not pending:
            raise ValidationError("Every day in this batch was already reviewed")

        reviewed_at = self.clock.now_utc()
        for row in pending:
            row.status = outcome
            row.reviewed_by = reviewer_id
            row.reviewed_at = reviewed_at
        self.db.commit()
        for row in pending:
            self.db.refresh(row)
        logger.info("Time off batch %s (%d of %d days) marked %s by %s", batch_id, len(pending), len(rows), status, reviewer_id)
        return pending

    def search(self, employee_id: Optional[UUID] = None, status: Optional[str] = None) -> list[EmployeeTimeOff]:
        stmt = select(EmployeeTimeOff).order_by(EmployeeTimeOff.date.desc())
        if employee_id is not None:
            stmt = stmt.where(EmployeeTimeOff.employee_id == employee_id)
        if status is not None:
            stmt = stmt.where(EmployeeTimeOff.status == TimeOffStatus(status))
        return list(self.db.execute(stmt).scalars())
