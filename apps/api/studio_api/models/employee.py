import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, Enum, Uuid
from sqlalchemy.sql import func

from studio_api.core.database import Base

class EmployeeRole(str, enum.Enum):
    employee = "employee"
    admin = "admin"

class Employee(Base):
    __tablename__ = "employees"

    employee_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=False, unique=True)

    role = Column(Enum(EmployeeRole, name="employee_role"), nullable=False, default=EmployeeRole.employee)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
