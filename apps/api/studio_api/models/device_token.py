import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from studio_api.core.database import Base

class DeviceToken(Base):
    __tablename__ = "device_tokens"

    device_token_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    token = Column(String, nullable=False, unique=True)
    platform = Column(String, nullable=True)
    enabled = Column(Boolean, nullable=False, default=True)
    last_seen = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
