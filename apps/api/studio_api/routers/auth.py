from datetime import datetime, timedelta, timezone
from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from typing import Optional

from studio_api.core.database import get_db
from studio_api.core.config import settings
from studio_api.core.errors import Forbidden, NotFound
from studio_api.models.employee import Employee, EmployeeRole

security = HTTPBearer()

# JWT settings
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create a JWT access token (tokens are normally issued by the auth service)."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=ALGORITHM)


def get_current_employee(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Employee:
    """Get the current authenticated employee from JWT token."""
    token = credentials.credentials
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
        employee_id: str = payload.get("sub")
        if employee_id is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials",
            )
        employee = db.get(Employee, UUID(employee_id))
    except (JWTError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )

    if employee is None or not employee.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Employee not found or inactive",
        )
    return employee


def require_admin(current_employee: Employee = Depends(get_current_employee)) -> Employee:
    if current_employee.role != EmployeeRole.admin:
        raise Forbidden("This endpoint requires the admin role")
    return current_employee


def resolve_target_employee(db: Session, actor: Employee, employee_id: Optional[UUID]) -> Employee:
    """Employees act on themselves; admins may name anyone."""
    if employee_id is None or employee_id == actor.employee_id:
        return actor
    if actor.role != EmployeeRole.admin:
        raise Forbidden("You can only manage your own records")
    employee = db.get(Employee, employee_id)
    if not employee:
        raise NotFound("Employee not found")
    return employee
