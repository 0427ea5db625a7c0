from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from studio_api.core.database import get_db
from studio_api.core.deps import get_dispatcher, get_time_off_store
from studio_api.models.employee import Employee
from studio_api.routers.auth import get_current_employee, require_admin, resolve_target_employee
from studio_api.schemas.time_off import (
    TimeOffBulkCreate,
    TimeOffBulkResult,
    TimeOffCreate,
    TimeOffOut,
    TimeOffStatusUpdate,
    TimeOffStatusValue,
)
from studio_api.services.devices import enabled_tokens
from studio_api.services.notifications import NotificationDispatcher, PushMessage
from studio_api.services.time_off import TimeOffStore

router = APIRouter()


def _notify_reviewed(
    background_tasks: BackgroundTasks,
    db: Session,
    dispatcher: NotificationDispatcher,
    employee_id: UUID,
    status: str,
    days: int,
):
    tokens = enabled_tokens(db, employee_id)
    if not tokens:
        return
    noun = "day" if days == 1 else "days"
    background_tasks.add_task(
        dispatcher.send_push,
        tokens,
        PushMessage(
            title="Time off reviewed",
            body=f"Your time off request ({days} {noun}) was {status}.",
            data={"type": "timeOffReviewed", "status": status},
        ),
    )


@router.post("", response_model=TimeOffOut)
def set_time_off(
    payload: TimeOffCreate,
    db: Session = Depends(get_db),
    store: TimeOffStore = Depends(get_time_off_store),
    current_employee: Employee = Depends(get_current_employee),
):
    target = resolve_target_employee(db, current_employee, payload.employee_id)
    return store.create(target.employee_id, payload.date, payload.reason)


@router.post("/bulk", response_model=TimeOffBulkResult)
def set_time_off_bulk(
    payload: TimeOffBulkCreate,
    db: Session = Depends(get_db),
    store: TimeOffStore = Depends(get_time_off_store),
    current_employee: Employee = Depends(get_current_employee),
):
    target = resolve_target_employee(db, current_employee, payload.employee_id)
    batch_id, created = store.create_bulk(target.employee_id, payload.dates, payload.reason)
    return TimeOffBulkResult(
        count=len(created),
        batch_id=batch_id,
        created=[TimeOffOut.model_validate(r) for r in created],
    )


@router.get("", response_model=list[TimeOffOut])
def get_my_time_off(
    status: Optional[TimeOffStatusValue] = Query(None),
    store: TimeOffStore = Depends(get_time_off_store),
    current_employee: Employee = Depends(get_current_employee),
):
    return store.search(employee_id=current_employee.employee_id, status=status)


@router.get("/all", response_model=list[TimeOffOut])
def get_all_time_off(
    status: Optional[TimeOffStatusValue] = Query(None),
    employee_id: Optional[UUID] = Query(None),
    store: TimeOffStore = Depends(get_time_off_store),
    current_admin: Employee = Depends(require_admin),
):
    return store.search(employee_id=employee_id, status=status)


@router.patch("/batch/{batch_id}/status", response_model=list[TimeOffOut])
def set_time_off_batch_status(
    batch_id: UUID,
    payload: TimeOffStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    store: TimeOffStore = Depends(get_time_off_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_admin: Employee = Depends(require_admin),
):
    rows = store.set_batch_status(batch_id, payload.status, current_admin.employee_id)
    _notify_reviewed(background_tasks, db, dispatcher, rows[0].employee_id, payload.status, len(rows))
    return rows


@router.patch("/{time_off_id}/status", response_model=TimeOffOut)
def set_time_off_status(
    time_off_id: UUID,
    payload: TimeOffStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    store: TimeOffStore = Depends(get_time_off_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_admin: Employee = Depends(require_admin),
):
    row = store.set_status(time_off_id, payload.status, current_admin.employee_id)
    _notify_reviewed(background_tasks, db, dispatcher, row.employee_id, payload.status, 1)
    return row
