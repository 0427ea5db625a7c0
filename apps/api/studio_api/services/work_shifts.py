import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from studio_api.core.errors import NotFound, ShiftStateError, ValidationError
from studio_api.models.employee import Employee
from studio_api.models.work_override import WorkOverride
from studio_api.models.work_shift import WorkShift
from studio_api.services.business_time import BusinessClock, as_utc

logger = logging.getLogger(__name__)


def _open_shift(db: Session, employee_id: UUID):
    return db.execute(
        select(WorkShift).where(WorkShift.employee_id == employee_id, WorkShift.clock_out.is_(None))
    ).scalars().first()


def clock_in(db: Session, clock: BusinessClock, employee_id: UUID) -> WorkShift:
    if _open_shift(db, employee_id) is not None:
        raise ShiftStateError("Already clocked in")
    shift = WorkShift(employee_id=employee_id, clock_in=clock.now_utc())
    db.add(shift)
    db.commit()
    db.refresh(shift)
    logger.info("Employee %s clocked in", employee_id)
    return shift


def clock_out(db: Session, clock: BusinessClock, employee_id: UUID) -> WorkShift:
    shift = _open_shift(db, employee_id)
    if shift is None:
        raise ShiftStateError("Not clocked in")
    shift.clock_out = clock.now_utc()
    db.commit()
    db.refresh(shift)
    logger.info("Employee %s clocked out", employee_id)
    return shift


def shifts_for(db: Session, employee_id: UUID) -> list[WorkShift]:
    return list(
        db.execute(
            select(WorkShift).where(WorkShift.employee_id == employee_id).order_by(WorkShift.clock_in.desc())
        ).scalars()
    )


def _override_for(db: Session, clock: BusinessClock, employee_id: UUID, day) -> Optional[WorkOverride]:
    start, end = clock.day_bounds(day)
    return db.execute(
        select(WorkOverride).where(
            WorkOverride.employee_id == employee_id,
            WorkOverride.date >= start,
            WorkOverride.date < end,
        )
    ).scalars().first()


def extend_shift(db: Session, clock: BusinessClock, employee_id: UUID, day_str: str, new_end_time: datetime) -> WorkOverride:
    """Set (or move) the end of an employee's shift on one business day."""
    if db.get(Employee, employee_id) is None:
        raise NotFound("Employee not found")
    day = clock.parse_date(day_str)
    day_start, _ = clock.day_bounds(day)
    new_end = as_utc(new_end_time)
    if new_end <= day_start:
        raise ValidationError("newEndTime must be after the start of that day")

    override = _override_for(db, clock, employee_id, day)
    if override is None:
        override = WorkOverride(employee_id=employee_id, date=day_start, new_end_time=new_end)
        db.add(override)
    else:
        override.new_end_time = new_end
    db.commit()
    db.refresh(override)
    logger.info("Shift of employee %s on %s extended to %s", employee_id, day.isoformat(), new_end.isoformat())
    return override


def expected_end(db: Session, clock: BusinessClock, shift: WorkShift) -> Optional[datetime]:
    """Override end of an open shift's business day, if the owner set one."""
    if shift.clock_out is not None:
        return None
    override = _override_for(db, clock, shift.employee_id, clock.to_local(shift.clock_in).date())
    return override.new_end_time if override else None


def edit_shift_times(
    db: Session,
    shift_id: UUID,
    clock_in_time: Optional[datetime] = None,
    clock_out_time: Optional[datetime] = None,
) -> WorkShift:
    """Admin correction of recorded clock times."""
    shift = db.get(WorkShift, shift_id)
    if not shift:
        raise NotFound("Work shift not found")

    new_in = as_utc(clock_in_time) if clock_in_time else as_utc(shift.clock_in)
    new_out = as_utc(clock_out_time) if clock_out_time else shift.clock_out
    if new_out is not None and as_utc(new_out) <= new_in:
        raise ValidationError("clockOut must be after clockIn")

    shift.clock_in = new_in
    shift.clock_out = new_out
    db.commit()
    db.refresh(shift)
    logger.info("Work shift %s times corrected", shift_id)
    return shift
