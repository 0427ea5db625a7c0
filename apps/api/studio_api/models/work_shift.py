import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Uuid

from studio_api.core.database import Base

class WorkShift(Base):
    __tablename__ = "work_shifts"

    work_shift_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    clock_in = Column(DateTime(timezone=True), nullable=False)
    clock_out = Column(DateTime(timezone=True), nullable=True)
