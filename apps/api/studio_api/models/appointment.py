import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey, Uuid
from sqlalchemy.sql import func

from studio_api.core.database import Base

class AppointmentStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    cancelled = "cancelled"
    completed = "completed"

class Appointment(Base):
    __tablename__ = "appointments"

    appointment_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    customer_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    detail = Column(Text, nullable=True)

    status = Column(Enum(AppointmentStatus, name="appointment_status"), nullable=False, default=AppointmentStatus.pending)
    start_time = Column(DateTime(timezone=True), nullable=True, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True)

    # occurrences created together by a recurring booking share this id
    series_id = Column(Uuid, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
