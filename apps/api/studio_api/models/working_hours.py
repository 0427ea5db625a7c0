import uuid
import enum
from sqlalchemy import Column, String, SmallInteger, Integer, Enum, ForeignKey, JSON, Uuid

from studio_api.core.database import Base

class WorkingHoursKind(str, enum.Enum):
    fixed = "fixed"
    interval = "interval"
    custom = "custom"

class WorkingHoursRule(Base):
    __tablename__ = "working_hours_rules"

    rule_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    weekday = Column(SmallInteger, nullable=False)  # 0=Sun ... 6=Sat
    kind = Column(Enum(WorkingHoursKind, name="working_hours_kind"), nullable=False)

    # "HH:MM" wall-clock strings in the business zone (fixed / interval)
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)
    interval_minutes = Column(Integer, nullable=True)

    # custom: [{"start_time": "HH:MM", "end_time": "HH:MM"}, ...]
    intervals = Column(JSON, nullable=True)

    # enumeration order within (employee, weekday)
    position = Column(SmallInteger, nullable=False, default=0)
