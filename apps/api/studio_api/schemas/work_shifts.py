from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from uuid import UUID

from studio_api.schemas.types import UtcDatetime

class WorkShiftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    work_shift_id: UUID
    employee_id: UUID
    clock_in: UtcDatetime
    clock_out: Optional[UtcDatetime] = None
    # owner override for a shift still open
    expected_end: Optional[UtcDatetime] = None

class ShiftExtend(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    employee_id: UUID
    date: str  # YYYY-MM-DD, business-local
    new_end_time: datetime

class ShiftTimesEdit(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    work_shift_id: UUID
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None

class WorkOverrideOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    work_override_id: UUID
    employee_id: UUID
    date: UtcDatetime
    new_end_time: UtcDatetime
