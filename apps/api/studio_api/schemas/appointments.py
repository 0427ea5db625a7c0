from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel
from typing import Literal, Optional
from uuid import UUID

from studio_api.models.appointment import AppointmentStatus
from studio_api.schemas.types import UtcDatetime

AppointmentStatusValue = Literal["pending", "accepted", "rejected", "cancelled", "completed"]

class BookingRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM
    customer_name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    detail: Optional[str] = None

class AppointmentCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    employee_id: UUID
    customer_name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    detail: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: AppointmentStatusValue = "pending"

class AppointmentStatusUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: AppointmentStatus
    start_time: Optional[UtcDatetime] = None
    end_time: Optional[UtcDatetime] = None

class AppointmentReschedule(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_time: datetime
    end_time: datetime

class AppointmentSeriesCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    employee_id: UUID
    customer_name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    detail: Optional[str] = None
    start_date: str  # YYYY-MM-DD, business-local
    end_date: Optional[str] = None
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    frequency: Literal["daily", "weekly", "monthly"]
    interval: int = 1
    count: Optional[int] = None
    by_weekday: Optional[list[int]] = None  # 0=Sun ... 6=Sat, weekly only
    status: Literal["pending", "accepted"] = "pending"

class AppointmentDuplicate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # defaults to the original's times
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

class AppointmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    appointment_id: UUID
    employee_id: UUID
    customer_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    detail: Optional[str] = None
    status: AppointmentStatus
    start_time: Optional[UtcDatetime] = None
    end_time: Optional[UtcDatetime] = None
    series_id: Optional[UUID] = None

class AppointmentHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    history_id: UUID
    appointment_id: UUID
    field_changed: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    changed_by: Optional[UUID] = None
    changed_at: Optional[UtcDatetime] = None

class AppointmentSeriesOut(BaseModel):
    series_id: UUID
    count: int
    appointments: list[AppointmentOut]
