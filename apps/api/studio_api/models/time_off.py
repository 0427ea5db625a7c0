import uuid
import enum
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from studio_api.core.database import Base

class TimeOffStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"

class EmployeeTimeOff(Base):
    __tablename__ = "employee_time_off"
    __table_args__ = (UniqueConstraint("employee_id", "date", name="uq_time_off_employee_date"),)

    time_off_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # local midnight of the business day, stored as a UTC instant
    date = Column(DateTime(timezone=True), nullable=False)

    status = Column(Enum(TimeOffStatus, name="time_off_status"), nullable=False, default=TimeOffStatus.pending)
    reason = Column(String, nullable=True)
    batch_id = Column(Uuid, nullable=True, index=True)

    reviewed_by = Column(Uuid, ForeignKey("employees.employee_id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
