from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio_api.core.database import get_db
from studio_api.core.deps import get_clock
from studio_api.models.employee import Employee
from studio_api.routers.auth import get_current_employee
from studio_api.schemas.devices import DeviceRegister
from studio_api.services.business_time import BusinessClock
from studio_api.services.devices import register_device

router = APIRouter()


@router.post("/register")
def register(
    payload: DeviceRegister,
    db: Session = Depends(get_db),
    clock: BusinessClock = Depends(get_clock),
    current_employee: Employee = Depends(get_current_employee),
):
    register_device(db, clock, current_employee.employee_id, payload.token, payload.platform)
    return {"ok": True}
