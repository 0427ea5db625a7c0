import uuid
from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid

from studio_api.core.database import Base

class WorkOverride(Base):
    """An owner-set end of shift for one employee on one business day."""

    __tablename__ = "work_overrides"
    __table_args__ = (UniqueConstraint("employee_id", "date", name="uq_work_override_employee_date"),)

    work_override_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # local midnight of the business day, stored as a UTC instant
    date = Column(DateTime(timezone=True), nullable=False)
    new_end_time = Column(DateTime(timezone=True), nullable=False)
