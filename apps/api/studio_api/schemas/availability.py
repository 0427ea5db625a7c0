from pydantic import BaseModel

from studio_api.schemas.types import UtcDatetime

class SlotOut(BaseModel):
    start: UtcDatetime
    end: UtcDatetime
