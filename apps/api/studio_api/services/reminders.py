import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from studio_api.models.appointment import Appointment, AppointmentStatus
from studio_api.services.business_time import BusinessClock, as_utc
from studio_api.services.devices import enabled_tokens
from studio_api.services.notifications import NotificationDispatcher, PushMessage

logger = logging.getLogger(__name__)


def run_daily_reminder(
    db: Session,
    clock: BusinessClock,
    dispatcher: NotificationDispatcher,
    dry_run: bool = False,
) -> dict:
    """
    Push each employee a digest of tomorrow's accepted appointments.

    "Tomorrow" is the next business-local calendar day.
    """
    tomorrow = clock.today().add(days=1)
    start, end = clock.day_bounds(tomorrow)

    appts = db.execute(
        select(Appointment)
        .where(
            Appointment.status == AppointmentStatus.accepted,
            Appointment.start_time >= start,
            Appointment.start_time < end,
        )
        .order_by(Appointment.start_time)
    ).scalars().all()

    by_employee: dict = {}
    for appt in appts:
        by_employee.setdefault(appt.employee_id, []).append(as_utc(appt.start_time))

    report = []
    for employee_id, start_times in by_employee.items():
        count = len(start_times)
        first = clock.format_local(start_times[0], "h:mm A")
        tokens = enabled_tokens(db, employee_id)

        if count == 1:
            body = f"You have 1 appointment tomorrow at {first}."
        else:
            body = f"You have {count} appointments tomorrow. First at {first}."

        if not dry_run and tokens:
            dispatcher.send_push(
                tokens,
                PushMessage(
                    title="Tomorrow's schedule",
                    body=body,
                    data={"type": "tomorrowDigest", "date": tomorrow.isoformat()},
                ),
            )

        report.append({"employeeId": str(employee_id), "count": count, "tokens": len(tokens)})

    window_start = clock.to_local(start)
    window_end = clock.to_local(end)
    logger.info("Daily reminder for %s: %d appointments, %d employees", tomorrow.isoformat(), len(appts), len(report))
    return {
        "windowLocal": f"{window_start.isoformat()} to {window_end.isoformat()}",
        "totalAppointments": len(appts),
        "employeesNotified": len(report),
        "detail": report,
    }
