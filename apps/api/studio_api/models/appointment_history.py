import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from studio_api.core.database import Base

class AppointmentHistory(Base):
    __tablename__ = "appointment_history"

    history_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    appointment_id = Column(
        Uuid,
        ForeignKey("appointments.appointment_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    field_changed = Column(String, nullable=False)
    old_value = Column(String, nullable=True)
    new_value = Column(String, nullable=True)
    changed_by = Column(Uuid, ForeignKey("employees.employee_id", ondelete="SET NULL"), nullable=True)

    changed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
