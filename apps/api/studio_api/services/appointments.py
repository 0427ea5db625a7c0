import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from studio_api.core.errors import Forbidden, InvalidDate, NotFound, ValidationError
from studio_api.models.appointment import Appointment, AppointmentStatus
from studio_api.models.appointment_history import AppointmentHistory
from studio_api.models.employee import Employee, EmployeeRole
from studio_api.models.working_hours import WorkingHoursKind
from studio_api.schemas.appointments import AppointmentCreate, AppointmentSeriesCreate, BookingRequest
from studio_api.services.business_time import BusinessClock, as_utc
from studio_api.services.conflicts import ConflictGuard
from studio_api.services.history import TRACKED_FIELDS, track_appointment_changes
from studio_api.services.recurrence import generate_occurrences
from studio_api.services.time_off import TimeOffStore
from studio_api.services.working_hours import WorkingHoursStore

logger = logging.getLogger(__name__)

BOOKING_LENGTH = timedelta(hours=1)


def _snapshot(appt: Appointment) -> dict:
    return {f: getattr(appt, f) for f in TRACKED_FIELDS}


def ensure_can_modify(actor: Employee, appt: Appointment) -> None:
    if actor.role != EmployeeRole.admin and appt.employee_id != actor.employee_id:
        raise Forbidden("You can only manage your own appointments")


class AppointmentService:
    def __init__(
        self,
        db: Session,
        clock: BusinessClock,
        guard: ConflictGuard,
        working_hours: WorkingHoursStore,
        time_off: TimeOffStore,
    ):
        self.db = db
        self.clock = clock
        self.guard = guard
        self.working_hours = working_hours
        self.time_off = time_off

    def get(self, appointment_id: UUID) -> Appointment:
        appt = self.db.get(Appointment, appointment_id)
        if not appt:
            raise NotFound("Appointment not found")
        return appt

    def list_for(self, actor: Employee) -> list[Appointment]:
        stmt = select(Appointment).order_by(Appointment.created_at.desc(), Appointment.start_time.desc())
        if actor.role != EmployeeRole.admin:
            stmt = stmt.where(Appointment.employee_id == actor.employee_id)
        return list(self.db.execute(stmt).scalars())

    def history(self, appointment_id: UUID) -> list[AppointmentHistory]:
        return list(
            self.db.execute(
                select(AppointmentHistory)
                .where(AppointmentHistory.appointment_id == appointment_id)
                .order_by(AppointmentHistory.changed_at)
            ).scalars()
        )

    def _working_window(self, day, rules) -> Optional[tuple[datetime, datetime]]:
        bounds = []
        for rule in rules:
            if rule.kind == WorkingHoursKind.custom:
                for interval in rule.intervals or []:
                    start = self.clock.at(day, interval["start_time"])
                    end = self.clock.at(day, interval["end_time"]) if interval.get("end_time") else start + BOOKING_LENGTH
                    bounds.append((start, end))
            else:
                bounds.append((self.clock.at(day, rule.start_time), self.clock.at(day, rule.end_time)))
        if not bounds:
            return None
        return min(b[0] for b in bounds), max(b[1] for b in bounds)

    def request_booking(self, employee: Employee, payload: BookingRequest) -> Appointment:
        """Customer-facing one-hour booking request, created as pending."""
        day = self.clock.parse_date(payload.date)
        try:
            start = self.clock.at(day, payload.start_time)
        except ValueError:
            raise InvalidDate("Invalid or past start time")
        if start <= self.clock.now_utc():
            raise InvalidDate("Invalid or past start time")

        rules = self.working_hours.rules_for(employee.employee_id, self.clock.weekday(day))
        if not rules:
            raise NotFound("No working hours set for this day")

        window = self._working_window(day, rules)
        if window is None or start < window[0] or start > window[1] - BOOKING_LENGTH:
            raise ValidationError("Requested time is outside of working hours")

        if self.time_off.is_day_off(employee.employee_id, day):
            raise ValidationError("Employee is off on that day")

        end = start + BOOKING_LENGTH
        self.guard.ensure_available(employee.employee_id, start, end, message="Time slot already booked!")

        appt = Appointment(
            employee_id=employee.employee_id,
            customer_name=payload.customer_name,
            email=payload.email,
            phone=payload.phone,
            detail=payload.detail,
            status=AppointmentStatus.pending,
            start_time=start,
            end_time=end,
        )
        self.db.add(appt)
        self.db.commit()
        self.db.refresh(appt)
        logger.info("Booking request %s for employee %s at %s", appt.appointment_id, employee.employee_id, start.isoformat())
        return appt

    def _bookable_employee(self, actor: Employee, employee_id: UUID) -> Employee:
        employee = self.db.get(Employee, employee_id)
        if not employee:
            raise NotFound("Employee not found")
        if actor.role != EmployeeRole.admin and employee.employee_id != actor.employee_id:
            raise Forbidden("You can only create appointments for yourself")
        return employee

    def create(self, actor: Employee, payload: AppointmentCreate) -> Appointment:
        employee = self._bookable_employee(actor, payload.employee_id)

        start, end = as_utc(payload.start_time), as_utc(payload.end_time)
        status = AppointmentStatus(payload.status)
        if status == AppointmentStatus.accepted:
            self.guard.ensure_available(employee.employee_id, start, end)
        elif end <= start:
            raise ValidationError("endTime must be after startTime")

        appt = Appointment(
            employee_id=employee.employee_id,
            customer_name=payload.customer_name,
            email=payload.email,
            phone=payload.phone,
            detail=payload.detail,
            status=status,
            start_time=start,
            end_time=end,
        )
        self.db.add(appt)
        self.db.commit()
        self.db.refresh(appt)
        logger.info("Appointment %s created by %s (%s)", appt.appointment_id, actor.employee_id, status.value)
        return appt

    def update_status(
        self,
        appt: Appointment,
        actor: Employee,
        status: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> Appointment:
        ensure_can_modify(actor, appt)
        new_status = AppointmentStatus(status)
        start = as_utc(start_time) if start_time else appt.start_time
        end = as_utc(end_time) if end_time else appt.end_time
        if start is not None and end is not None and as_utc(end) <= as_utc(start):
            raise ValidationError("endTime must be after startTime")

        if new_status == AppointmentStatus.accepted:
            if start is None or end is None:
                raise ValidationError("startTime and endTime are required to accept an appointment")
            self.guard.ensure_available(appt.employee_id, start, end, exclude_appointment_id=appt.appointment_id)

        return self._apply(appt, actor, {"status": new_status, "start_time": start, "end_time": end})

    def reschedule(self, appt: Appointment, actor: Employee, start_time: datetime, end_time: datetime) -> Appointment:
        ensure_can_modify(actor, appt)
        start, end = as_utc(start_time), as_utc(end_time)
        if appt.status == AppointmentStatus.accepted:
            self.guard.ensure_available(appt.employee_id, start, end, exclude_appointment_id=appt.appointment_id)
        elif end <= start:
            raise ValidationError("endTime must be after startTime")

        return self._apply(appt, actor, {"start_time": start, "end_time": end})

    def create_series(self, actor: Employee, payload: AppointmentSeriesCreate) -> tuple[UUID, list[Appointment]]:
        """
        Book every occurrence of a recurrence under one series id.

        Accepted series run each occurrence through the conflict guard;
        one conflict refuses the whole series and nothing is written.
        """
        employee = self._bookable_employee(actor, payload.employee_id)
        occurrences = generate_occurrences(
            self.clock,
            self.clock.parse_date(payload.start_date),
            payload.frequency,
            payload.start_time,
            payload.end_time,
            interval=payload.interval,
            count=payload.count,
            end_date=self.clock.parse_date(payload.end_date) if payload.end_date else None,
            by_weekday=payload.by_weekday,
        )
        if not occurrences:
            raise ValidationError("The recurrence produces no occurrences")

        status = AppointmentStatus(payload.status)
        if status == AppointmentStatus.accepted:
            for occ in occurrences:
                self.guard.ensure_available(
                    employee.employee_id,
                    occ.start,
                    occ.end,
                    message=f"{self.clock.format_local(occ.start)} conflicts with another accepted appointment",
                )

        series_id = uuid.uuid4()
        rows = [
            Appointment(
                employee_id=employee.employee_id,
                customer_name=payload.customer_name,
                email=payload.email,
                phone=payload.phone,
                detail=payload.detail,
                status=status,
                start_time=occ.start,
                end_time=occ.end,
                series_id=series_id,
            )
            for occ in occurrences
        ]
        self.db.add_all(rows)
        self.db.commit()
        for row in rows:
            self.db.refresh(row)
        logger.info("Series %s: %d %s appointments for employee %s", series_id, len(rows), status.value, employee.employee_id)
        return series_id, rows

    def duplicate(
        self,
        appt: Appointment,
        actor: Employee,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> Appointment:
        """Copy the customer details into a new pending appointment."""
        ensure_can_modify(actor, appt)
        start = as_utc(start_time) if start_time else appt.start_time
        end = as_utc(end_time) if end_time else appt.end_time
        if start is None or end is None:
            raise ValidationError("startTime and endTime are required")
        if as_utc(end) <= as_utc(start):
            raise ValidationError("endTime must be after startTime")

        copy = Appointment(
            employee_id=appt.employee_id,
            customer_name=appt.customer_name,
            email=appt.email,
            phone=appt.phone,
            detail=appt.detail,
            status=AppointmentStatus.pending,
            start_time=start,
            end_time=end,
        )
        self.db.add(copy)
        self.db.commit()
        self.db.refresh(copy)
        logger.info("Appointment %s duplicated as %s by %s", appt.appointment_id, copy.appointment_id, actor.employee_id)
        return copy

    def delete(self, appt: Appointment, actor: Employee) -> None:
        ensure_can_modify(actor, appt)
        self.db.execute(delete(AppointmentHistory).where(AppointmentHistory.appointment_id == appt.appointment_id))
        self.db.delete(appt)
        self.db.commit()
        logger.info("Appointment %s deleted by %s", appt.appointment_id, actor.employee_id)

    def delete_series(self, series_id: UUID, actor: Employee) -> int:
        rows = list(self.db.execute(select(Appointment).where(Appointment.series_id == series_id)).scalars())
        if not rows:
            raise NotFound("Appointment series not found")
        for row in rows:
            ensure_can_modify(actor, row)

        ids = [row.appointment_id for row in rows]
        self.db.execute(delete(AppointmentHistory).where(AppointmentHistory.appointment_id.in_(ids)))
        self.db.execute(delete(Appointment).where(Appointment.appointment_id.in_(ids)))
        self.db.commit()
        logger.info("Series %s (%d appointments) deleted by %s", series_id, len(ids), actor.employee_id)
        return len(ids)

    def _apply(self, appt: Appointment, actor: Employee, changes: dict) -> Appointment:
        old = _snapshot(appt)
        for name, value in changes.items():
            setattr(appt, name, value)
        track_appointment_changes(self.db, self.clock, appt.appointment_id, old, changes, actor.employee_id)
        self.db.commit()
        self.db.refresh(appt)
        logger.info("Appointment %s updated by %s: %s", appt.appointment_id, actor.employee_id, sorted(changes))
        return appt
