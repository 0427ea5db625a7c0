"""Common test fixtures."""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from studio_api.core.database import Base, get_db  # noqa: E402
from studio_api.core.deps import get_clock, get_dispatcher  # noqa: E402
from studio_api.main import app  # noqa: E402
from studio_api.models.appointment import Appointment, AppointmentStatus  # noqa: E402
from studio_api.models.appointment_history import AppointmentHistory  # noqa: E402,F401
from studio_api.models.device_token import DeviceToken  # noqa: E402
from studio_api.models.employee import Employee, EmployeeRole  # noqa: E402
from studio_api.models.time_off import EmployeeTimeOff  # noqa: E402,F401
from studio_api.models.work_override import WorkOverride  # noqa: E402,F401
from studio_api.models.work_shift import WorkShift  # noqa: E402,F401
from studio_api.models.working_hours import WorkingHoursRule  # noqa: E402,F401
from studio_api.routers.auth import create_access_token  # noqa: E402
from studio_api.services.business_time import BusinessClock  # noqa: E402
from studio_api.services.conflicts import ConflictGuard  # noqa: E402
from studio_api.services.notifications import NotificationDispatcher  # noqa: E402
from studio_api.services.occupancy import OccupancyIndex  # noqa: E402
from studio_api.services.slots import SlotGenerator  # noqa: E402
from studio_api.services.time_off import TimeOffStore  # noqa: E402
from studio_api.services.working_hours import WorkingHoursStore  # noqa: E402

TZ = "America/Edmonton"

# Monday 2025-03-03, 06:00 in Edmonton (MST, UTC-7)
NOW = datetime(2025, 3, 3, 13, 0, tzinfo=timezone.utc)

EXPO_TOKEN = "ExponentPushToken[test-device]"


def utc(year, month, day, hour, minute=0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


class RecordingDispatcher(NotificationDispatcher):
    """Keeps messages instead of sending them."""

    def __init__(self):
        super().__init__(expo_push_url="http://push.invalid")
        self.pushes = []
        self.sms = []

    def send_push(self, tokens, message):
        self.pushes.append((list(tokens), message))
        return []

    def send_sms(self, to, body):
        self.sms.append((to, body))
        return True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock() -> BusinessClock:
    return BusinessClock(TZ, now=lambda: NOW)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def client(db, clock, dispatcher):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _employee(db, name, email, role=EmployeeRole.employee, phone=None) -> Employee:
    emp = Employee(name=name, email=email, role=role, phone=phone, is_active=True)
    db.add(emp)
    db.commit()
    db.refresh(emp)
    return emp


@pytest.fixture
def employee(db) -> Employee:
    return _employee(db, "Zoe", "zoe@studio.test")


@pytest.fixture
def other_employee(db) -> Employee:
    return _employee(db, "Nicole", "nicole@studio.test")


@pytest.fixture
def admin(db) -> Employee:
    return _employee(db, "Owner", "owner@studio.test", role=EmployeeRole.admin)


def auth_headers(emp: Employee) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(emp.employee_id)})}"}


@pytest.fixture
def working_hours(db) -> WorkingHoursStore:
    return WorkingHoursStore(db)


@pytest.fixture
def time_off(db, clock) -> TimeOffStore:
    return TimeOffStore(db, clock)


@pytest.fixture
def occupancy(db, clock) -> OccupancyIndex:
    return OccupancyIndex(db, clock)


@pytest.fixture
def slots(clock, working_hours, time_off, occupancy) -> SlotGenerator:
    return SlotGenerator(clock, working_hours, time_off, occupancy)


@pytest.fixture
def guard(db, occupancy) -> ConflictGuard:
    return ConflictGuard(db, occupancy)


def add_appointment(db, emp, start, end, status=AppointmentStatus.accepted, phone=None) -> Appointment:
    appt = Appointment(
        employee_id=emp.employee_id,
        customer_name="Sam Customer",
        phone=phone,
        status=status,
        start_time=start,
        end_time=end,
    )
    db.add(appt)
    db.commit()
    db.refresh(appt)
    return appt


def add_device(db, emp, token=EXPO_TOKEN) -> DeviceToken:
    row = DeviceToken(employee_id=emp.employee_id, token=token, enabled=True)
    db.add(row)
    db.commit()
    return row
