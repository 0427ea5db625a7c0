from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio_api.core.database import get_db
from studio_api.core.deps import get_clock
from studio_api.models.employee import Employee
from studio_api.models.work_shift import WorkShift
from studio_api.routers.auth import get_current_employee, require_admin
from studio_api.schemas.work_shifts import ShiftExtend, ShiftTimesEdit, WorkOverrideOut, WorkShiftOut
from studio_api.services import work_shifts
from studio_api.services.business_time import BusinessClock

router = APIRouter()


def _shift_out(db: Session, clock: BusinessClock, shift: WorkShift) -> WorkShiftOut:
    data = WorkShiftOut.model_validate(shift).model_dump()
    data["expected_end"] = work_shifts.expected_end(db, clock, shift)
    return WorkShiftOut(**data)


@router.post("/clock-in", response_model=WorkShiftOut)
def clock_in(
    db: Session = Depends(get_db),
    clock: BusinessClock = Depends(get_clock),
    current_employee: Employee = Depends(get_current_employee),
):
    return _shift_out(db, clock, work_shifts.clock_in(db, clock, current_employee.employee_id))


@router.post("/clock-out", response_model=WorkShiftOut)
def clock_out(
    db: Session = Depends(get_db),
    clock: BusinessClock = Depends(get_clock),
    current_employee: Employee = Depends(get_current_employee),
):
    return work_shifts.clock_out(db, clock, current_employee.employee_id)


@router.get("", response_model=list[WorkShiftOut])
def get_work_shifts(
    db: Session = Depends(get_db),
    clock: BusinessClock = Depends(get_clock),
    current_employee: Employee = Depends(get_current_employee),
):
    return [_shift_out(db, clock, s) for s in work_shifts.shifts_for(db, current_employee.employee_id)]


@router.post("/extend-shift", response_model=WorkOverrideOut)
def extend_shift(
    payload: ShiftExtend,
    db: Session = Depends(get_db),
    clock: BusinessClock = Depends(get_clock),
    admin: Employee = Depends(require_admin),
):
    return work_shifts.extend_shift(db, clock, payload.employee_id, payload.date, payload.new_end_time)


@router.put("/edit-clockinout", response_model=WorkShiftOut)
def edit_clock_in_out(
    payload: ShiftTimesEdit,
    db: Session = Depends(get_db),
    admin: Employee = Depends(require_admin),
):
    return work_shifts.edit_shift_times(db, payload.work_shift_id, payload.clock_in, payload.clock_out)
