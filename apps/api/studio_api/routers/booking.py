from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from studio_api.core.database import get_db
from studio_api.core.deps import get_appointment_service, get_dispatcher
from studio_api.core.errors import NotFound
from studio_api.models.employee import Employee, EmployeeRole
from studio_api.schemas.appointments import AppointmentOut, BookingRequest
from studio_api.services.appointments import AppointmentService
from studio_api.services.devices import enabled_tokens
from studio_api.services.notifications import NotificationDispatcher, PushMessage

router = APIRouter()


def _require_employee(db: Session, employee_id: UUID) -> Employee:
    emp = db.get(Employee, employee_id)
    if not emp or emp.role != EmployeeRole.employee or not emp.is_active:
        raise NotFound("Employee not found")
    return emp


@router.post("/{employee_id}/request-booking", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
def request_booking(
    employee_id: UUID,
    payload: BookingRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    service: AppointmentService = Depends(get_appointment_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    employee = _require_employee(db, employee_id)
    appt = service.request_booking(employee, payload)

    tokens = enabled_tokens(db, employee.employee_id)
    if tokens:
        background_tasks.add_task(
            dispatcher.send_push,
            tokens,
            PushMessage(
                title="New booking request",
                body=f"{appt.customer_name} requested {payload.date} at {payload.start_time}.",
                data={"type": "bookingRequest", "appointmentId": str(appt.appointment_id)},
            ),
        )
    return appt
