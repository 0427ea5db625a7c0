from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from studio_api.models.device_token import DeviceToken
from studio_api.services.business_time import BusinessClock


def register_device(db: Session, clock: BusinessClock, employee_id: UUID, token: str, platform: Optional[str]) -> DeviceToken:
    row = db.execute(select(DeviceToken).where(DeviceToken.token == token)).scalar_one_or_none()
    if row is None:
        row = DeviceToken(employee_id=employee_id, token=token, platform=platform)
        db.add(row)
    else:
        # a token follows whoever signed in on the device last
        row.employee_id = employee_id
        row.platform = platform
    row.enabled = True
    row.last_seen = clock.now_utc()
    db.commit()
    db.refresh(row)
    return row


def enabled_tokens(db: Session, employee_id: UUID) -> list[str]:
    return list(
        db.execute(
            select(DeviceToken.token).where(DeviceToken.employee_id == employee_id, DeviceToken.enabled == True)  # noqa: E712
        ).scalars()
    )
