from pydantic import BaseModel
from typing import Optional

class DeviceRegister(BaseModel):
    token: str
    platform: Optional[str] = None
