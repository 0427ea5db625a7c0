from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studio_api.core.database import get_db
from studio_api.core.deps import get_working_hours_store
from studio_api.core.errors import ValidationError
from studio_api.models.employee import Employee
from studio_api.routers.auth import get_current_employee, resolve_target_employee
from studio_api.schemas.working_hours import WorkingHoursDaySet, WorkingHoursRuleOut, WorkingHoursSet
from studio_api.services.working_hours import WorkingHoursStore

router = APIRouter()


@router.post("", response_model=list[WorkingHoursRuleOut])
def set_working_hours(
    payload: WorkingHoursSet,
    db: Session = Depends(get_db),
    store: WorkingHoursStore = Depends(get_working_hours_store),
    current_employee: Employee = Depends(get_current_employee),
):
    """Replace the weekday's rules with the single rule in the payload."""
    target = resolve_target_employee(db, current_employee, payload.employee_id)
    return store.replace(target.employee_id, payload.weekday, [payload])


@router.put("/{weekday}", response_model=list[WorkingHoursRuleOut])
def set_working_hours_for_day(
    weekday: int,
    payload: WorkingHoursDaySet,
    db: Session = Depends(get_db),
    store: WorkingHoursStore = Depends(get_working_hours_store),
    current_employee: Employee = Depends(get_current_employee),
):
    """Replace the weekday's rules with several rules at once."""
    target = resolve_target_employee(db, current_employee, payload.employee_id)
    return store.replace(target.employee_id, weekday, payload.rules)


@router.get("/all", response_model=list[WorkingHoursRuleOut])
def get_all_working_hours(
    employee_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    store: WorkingHoursStore = Depends(get_working_hours_store),
    current_employee: Employee = Depends(get_current_employee),
):
    target = resolve_target_employee(db, current_employee, employee_id)
    return store.all_for(target.employee_id)


@router.get("/{weekday}", response_model=list[WorkingHoursRuleOut])
def get_working_hours(
    weekday: int,
    employee_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    store: WorkingHoursStore = Depends(get_working_hours_store),
    current_employee: Employee = Depends(get_current_employee),
):
    if not 0 <= weekday <= 6:
        raise ValidationError("weekday must be between 0 (Sunday) and 6 (Saturday)")
    target = resolve_target_employee(db, current_employee, employee_id)
    return store.rules_for(target.employee_id, weekday)
