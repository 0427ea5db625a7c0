from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from uuid import UUID

from studio_api.models.working_hours import WorkingHoursKind


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class CustomIntervalIn(CamelModel):
    start_time: str
    end_time: Optional[str] = None

class WorkingHoursRuleIn(CamelModel):
    # Shape checks only; rule semantics are validated by the store
    type: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    interval_length: Optional[int] = None
    intervals: Optional[list[CustomIntervalIn]] = None

class WorkingHoursSet(WorkingHoursRuleIn):
    weekday: int
    employee_id: Optional[UUID] = None  # admins only

class WorkingHoursDaySet(CamelModel):
    rules: list[WorkingHoursRuleIn]
    employee_id: Optional[UUID] = None  # admins only

class WorkingHoursRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rule_id: UUID
    employee_id: UUID
    weekday: int
    kind: WorkingHoursKind
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    interval_minutes: Optional[int] = None
    intervals: Optional[list[dict]] = None
