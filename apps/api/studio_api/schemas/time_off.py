from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional
from uuid import UUID

from studio_api.models.time_off import TimeOffStatus
from studio_api.schemas.types import UtcDatetime

TimeOffStatusValue = Literal["pending", "approved", "rejected"]
# a review only ever moves a row out of pending
TimeOffReviewValue = Literal["approved", "rejected"]

class TimeOffCreate(BaseModel):
    date: str  # YYYY-MM-DD, business-local
    reason: Optional[str] = None
    employee_id: Optional[UUID] = None  # admins only

class TimeOffBulkCreate(BaseModel):
    dates: list[str] = Field(min_length=1)
    reason: Optional[str] = None
    employee_id: Optional[UUID] = None  # admins only

class TimeOffStatusUpdate(BaseModel):
    status: TimeOffReviewValue

class TimeOffOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    time_off_id: UUID
    employee_id: UUID
    date: UtcDatetime
    status: TimeOffStatus
    reason: Optional[str] = None
    batch_id: Optional[UUID] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[UtcDatetime] = None

class TimeOffBulkResult(BaseModel):
    count: int
    batch_id: UUID
    created: list[TimeOffOut]
