"""
Request-scoped wiring.

Services get their session, clock and collaborators here, so tests can
swap any of them through app.dependency_overrides.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from studio_api.core.config import settings
from studio_api.core.database import get_db
from studio_api.services.appointments import AppointmentService
from studio_api.services.business_time import BusinessClock
from studio_api.services.conflicts import ConflictGuard
from studio_api.services.notifications import NotificationDispatcher
from studio_api.services.occupancy import OccupancyIndex
from studio_api.services.slots import SlotGenerator
from studio_api.services.time_off import TimeOffStore
from studio_api.services.working_hours import WorkingHoursStore


def get_clock() -> BusinessClock:
    return BusinessClock(settings.business_timezone)


def get_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(
        expo_push_url=settings.expo_push_url,
        twilio_account_sid=settings.twilio_account_sid,
        twilio_auth_token=settings.twilio_auth_token,
        twilio_from_number=settings.twilio_from_number,
        timeout=settings.notification_timeout_seconds,
    )


def get_working_hours_store(db: Session = Depends(get_db)) -> WorkingHoursStore:
    return WorkingHoursStore(db)


def get_time_off_store(db: Session = Depends(get_db), clock: BusinessClock = Depends(get_clock)) -> TimeOffStore:
    return TimeOffStore(db, clock, settings.time_off_blocking_statuses)


def get_occupancy(db: Session = Depends(get_db), clock: BusinessClock = Depends(get_clock)) -> OccupancyIndex:
    return OccupancyIndex(db, clock)


def get_slot_generator(
    clock: BusinessClock = Depends(get_clock),
    working_hours: WorkingHoursStore = Depends(get_working_hours_store),
    time_off: TimeOffStore = Depends(get_time_off_store),
    occupancy: OccupancyIndex = Depends(get_occupancy),
) -> SlotGenerator:
    return SlotGenerator(clock, working_hours, time_off, occupancy)


def get_appointment_service(
    db: Session = Depends(get_db),
    clock: BusinessClock = Depends(get_clock),
    working_hours: WorkingHoursStore = Depends(get_working_hours_store),
    time_off: TimeOffStore = Depends(get_time_off_store),
    occupancy: OccupancyIndex = Depends(get_occupancy),
) -> AppointmentService:
    return AppointmentService(db, clock, ConflictGuard(db, occupancy), working_hours, time_off)
