from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, status

from studio_api.core.deps import get_appointment_service, get_dispatcher
from studio_api.models.appointment import Appointment, AppointmentStatus
from studio_api.models.employee import Employee
from studio_api.routers.auth import get_current_employee
from studio_api.schemas.appointments import (
    AppointmentCreate,
    AppointmentDuplicate,
    AppointmentHistoryOut,
    AppointmentOut,
    AppointmentReschedule,
    AppointmentSeriesCreate,
    AppointmentSeriesOut,
    AppointmentStatusUpdate,
)
from studio_api.services.appointments import AppointmentService, ensure_can_modify
from studio_api.services.notifications import NotificationDispatcher

router = APIRouter()


def _confirm_by_sms(
    background_tasks: BackgroundTasks,
    dispatcher: NotificationDispatcher,
    service: AppointmentService,
    appt: Appointment,
):
    if appt.status != AppointmentStatus.accepted or not appt.phone:
        return
    when = service.clock.format_local(appt.start_time, "ddd MMM D [at] h:mm A")
    background_tasks.add_task(
        dispatcher.send_sms,
        appt.phone,
        f"Hi {appt.customer_name}, your appointment on {when} is confirmed.",
    )


@router.get("", response_model=list[AppointmentOut])
def get_appointments(
    service: AppointmentService = Depends(get_appointment_service),
    current_employee: Employee = Depends(get_current_employee),
):
    return service.list_for(current_employee)


@router.post("", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreate,
    background_tasks: BackgroundTasks,
    service: AppointmentService = Depends(get_appointment_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_employee: Employee = Depends(get_current_employee),
):
    appt = service.create(current_employee, payload)
    _confirm_by_sms(background_tasks, dispatcher, service, appt)
    return appt


@router.get("/{appointment_id}", response_model=AppointmentOut)
def get_appointment(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service),
    current_employee: Employee = Depends(get_current_employee),
):
    appt = service.get(appointment_id)
    ensure_can_modify(current_employee, appt)
    return appt


@router.get("/{appointment_id}/history", response_model=list[AppointmentHistoryOut])
def get_appointment_history(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service),
    current_employee: Employee = Depends(get_current_employee),
):
    appt = service.get(appointment_id)
    ensure_can_modify(current_employee, appt)
    return service.history(appointment_id)


@router.patch("/{appointment_id}/status", response_model=AppointmentOut)
def update_appointment_status(
    appointment_id: UUID,
    payload: AppointmentStatusUpdate,
    background_tasks: BackgroundTasks,
    service: AppointmentService = Depends(get_appointment_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_employee: Employee = Depends(get_current_employee),
):
    appt = service.get(appointment_id)
    was_accepted = appt.status == AppointmentStatus.accepted
    appt = service.update_status(appt, current_employee, payload.status, payload.start_time, payload.end_time)
    if not was_accepted:
        _confirm_by_sms(background_tasks, dispatcher, service, appt)
    return appt


@router.patch("/{appointment_id}", response_model=AppointmentOut)
def reschedule_appointment(
    appointment_id: UUID,
    payload: AppointmentReschedule,
    service: AppointmentService = Depends(get_appointment_service),
    current_employee: Employee = Depends(get_current_employee),
):
    appt = service.get(appointment_id)
    return service.reschedule(appt, current_employee, payload.start_time, payload.end_time)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service),
    current_employee: Employee = Depends(get_current_employee),
):
    service.delete(service.get(appointment_id), current_employee)


@router.post("/{appointment_id}/duplicate", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
def duplicate_appointment(
    appointment_id: UUID,
    payload: AppointmentDuplicate,
    service: AppointmentService = Depends(get_appointment_service),
    current_employee: Employee = Depends(get_current_employee),
):
    appt = service.get(appointment_id)
    return service.duplicate(appt, current_employee, payload.start_time, payload.end_time)


@router.post("/recurring", response_model=AppointmentSeriesOut, status_code=status.HTTP_201_CREATED)
def create_recurring_appointments(
    payload: AppointmentSeriesCreate,
    service: AppointmentService = Depends(get_appointment_service),
    current_employee: Employee = Depends(get_current_employee),
):
    series_id, rows = service.create_series(current_employee, payload)
    return AppointmentSeriesOut(
        series_id=series_id,
        count=len(rows),
        appointments=[AppointmentOut.model_validate(r) for r in rows],
    )


@router.delete("/recurring/{series_id}")
def delete_recurring_appointments(
    series_id: UUID,
    service: AppointmentService = Depends(get_appointment_service),
    current_employee: Employee = Depends(get_current_employee),
):
    return {"deleted": service.delete_series(series_id, current_employee)}
