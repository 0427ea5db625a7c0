from datetime import datetime

import pytest

from studio_api.schemas.working_hours import WorkingHoursRuleIn

from conftest import EXPO_TOKEN, add_appointment, add_device, auth_headers, utc

TARGET = "2025-03-04"


def instant(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def booking(start_time="10:00", day=TARGET, **extra):
    body = {
        "date": day,
        "startTime": start_time,
        "customerName": "Sam Customer",
        "email": "sam@example.com",
        "phone": "+15875550100",
    }
    body.update(extra)
    return body


@pytest.fixture
def open_tuesday(working_hours, employee):
    working_hours.replace(
        employee.employee_id, 2, [WorkingHoursRuleIn(type="fixed", start_time="09:00", end_time="17:00")]
    )


@pytest.fixture
def pending(client, employee, open_tuesday):
    resp = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking())
    assert resp.status_code == 201
    return resp.json()


def test_availability_endpoint(client, employee, open_tuesday):
    resp = client.get(f"/availability/{employee.employee_id}", params={"date": TARGET})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 8
    assert instant(body[0]["start"]) == utc(2025, 3, 4, 16)
    assert instant(body[0]["end"]) == utc(2025, 3, 4, 17)


def test_availability_bad_date(client, employee, open_tuesday):
    assert client.get(f"/availability/{employee.employee_id}", params={"date": "2025-03-01"}).status_code == 400
    assert client.get(f"/availability/{employee.employee_id}", params={"date": "soon"}).status_code == 400


def test_availability_unknown_employee(client):
    resp = client.get("/availability/00000000-0000-0000-0000-000000000000", params={"date": TARGET})
    assert resp.status_code == 404


def test_request_booking_creates_pending_hour(client, db, dispatcher, employee, open_tuesday):
    add_device(db, employee)

    resp = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking())

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert instant(body["start_time"]) == utc(2025, 3, 4, 17)
    assert instant(body["end_time"]) == utc(2025, 3, 4, 18)
    [(tokens, message)] = dispatcher.pushes
    assert tokens == [EXPO_TOKEN]
    assert message.data["appointmentId"] == body["appointment_id"]


def test_pending_booking_keeps_slot_listed(client, employee, pending):
    starts = [instant(s["start"]) for s in client.get(f"/availability/{employee.employee_id}", params={"date": TARGET}).json()]
    assert utc(2025, 3, 4, 17) in starts


@pytest.mark.parametrize("start_time", ["08:00", "16:30", "17:00"])
def test_request_booking_outside_hours(client, employee, open_tuesday, start_time):
    resp = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking(start_time))
    assert resp.status_code == 400


def test_request_booking_last_hour_fits(client, employee, open_tuesday):
    resp = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking("16:00"))
    assert resp.status_code == 201


def test_request_booking_without_working_hours(client, employee, open_tuesday):
    resp = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking(day="2025-03-05"))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No working hours set for this day"


def test_request_booking_on_day_off(client, time_off, employee, open_tuesday):
    time_off.create(employee.employee_id, TARGET)

    resp = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking())

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Employee is off on that day"


@pytest.mark.parametrize("start_time,day", [("10:00", "2025-03-02"), ("25:00", TARGET), ("10:00", "someday")])
def test_request_booking_bad_time(client, employee, open_tuesday, start_time, day):
    resp = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking(start_time, day))
    assert resp.status_code == 400


def test_request_booking_against_accepted(client, db, employee, open_tuesday):
    add_appointment(db, employee, utc(2025, 3, 4, 17, 30), utc(2025, 3, 4, 18, 30))

    resp = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking())

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Time slot already booked!"


def test_request_booking_for_unknown_or_admin(client, admin, open_tuesday):
    assert client.post(f"/booking/{admin.employee_id}/request-booking", json=booking()).status_code == 404
    resp = client.post("/booking/00000000-0000-0000-0000-000000000000/request-booking", json=booking())
    assert resp.status_code == 404


def test_accept_records_history_and_texts_customer(client, dispatcher, employee, pending):
    headers = auth_headers(employee)

    resp = client.patch(f"/appointments/{pending['appointment_id']}/status", json={"status": "accepted"}, headers=headers)

    assert resp.status_code == 200
    assert resp.json()["status"] == "accepted"
    history = client.get(f"/appointments/{pending['appointment_id']}/history", headers=headers).json()
    assert [(h["field_changed"], h["old_value"], h["new_value"]) for h in history] == [("status", "pending", "accepted")]
    assert history[0]["changed_by"] == str(employee.employee_id)
    [(phone, body)] = dispatcher.sms
    assert phone == "+15875550100"
    assert "Tue Mar 4 at 10:00 AM" in body


def test_accept_with_new_times(client, employee, pending):
    headers = auth_headers(employee)

    resp = client.patch(
        f"/appointments/{pending['appointment_id']}/status",
        json={"status": "accepted", "startTime": "2025-03-04T18:00:00Z", "endTime": "2025-03-04T19:00:00Z"},
        headers=headers,
    )

    assert resp.status_code == 200
    history = client.get(f"/appointments/{pending['appointment_id']}/history", headers=headers).json()
    changes = {h["field_changed"]: (h["old_value"], h["new_value"]) for h in history}
    assert changes["start_time"] == ("Mar 4, 2025 10:00 AM", "Mar 4, 2025 11:00 AM")
    assert changes["end_time"] == ("Mar 4, 2025 11:00 AM", "Mar 4, 2025 12:00 PM")


def test_accepted_slot_leaves_availability(client, employee, pending):
    client.patch(
        f"/appointments/{pending['appointment_id']}/status", json={"status": "accepted"}, headers=auth_headers(employee)
    )

    starts = [instant(s["start"]) for s in client.get(f"/availability/{employee.employee_id}", params={"date": TARGET}).json()]
    assert utc(2025, 3, 4, 17) not in starts
    assert len(starts) == 7


def test_accepting_overlap_is_refused_without_writes(client, employee, open_tuesday):
    headers = auth_headers(employee)
    first = client.post(f"/booking/{employee.employee_id}/request-booking", json=booking()).json()
    second = client.post(
        f"/booking/{employee.employee_id}/request-booking", json=booking(customerName="Alex Other")
    ).json()

    assert client.patch(f"/appointments/{first['appointment_id']}/status", json={"status": "accepted"}, headers=headers).status_code == 200
    resp = client.patch(f"/appointments/{second['appointment_id']}/status", json={"status": "accepted"}, headers=headers)

    assert resp.status_code == 400
    assert client.get(f"/appointments/{second['appointment_id']}", headers=headers).json()["status"] == "pending"
    assert client.get(f"/appointments/{second['appointment_id']}/history", headers=headers).json() == []


def test_rejecting_needs_no_free_slot(client, db, employee, pending):
    add_appointment(db, employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18))

    resp = client.patch(
        f"/appointments/{pending['appointment_id']}/status", json={"status": "rejected"}, headers=auth_headers(employee)
    )

    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"


def test_status_change_refuses_reversed_times(client, employee, pending):
    headers = auth_headers(employee)

    resp = client.patch(
        f"/appointments/{pending['appointment_id']}/status",
        json={"status": "rejected", "startTime": "2025-03-04T20:00:00Z", "endTime": "2025-03-04T18:00:00Z"},
        headers=headers,
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "endTime must be after startTime"
    body = client.get(f"/appointments/{pending['appointment_id']}", headers=headers).json()
    assert body["status"] == "pending"
    assert instant(body["start_time"]) == utc(2025, 3, 4, 17)


def test_other_employee_cannot_touch(client, other_employee, pending):
    headers = auth_headers(other_employee)
    assert client.get(f"/appointments/{pending['appointment_id']}", headers=headers).status_code == 403
    resp = client.patch(f"/appointments/{pending['appointment_id']}/status", json={"status": "accepted"}, headers=headers)
    assert resp.status_code == 403


def test_admin_can_accept_for_employee(client, admin, pending):
    resp = client.patch(
        f"/appointments/{pending['appointment_id']}/status", json={"status": "accepted"}, headers=auth_headers(admin)
    )
    assert resp.status_code == 200


def test_listing_is_scoped(client, db, admin, employee, other_employee):
    add_appointment(db, employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18))
    add_appointment(db, other_employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18))

    assert len(client.get("/appointments", headers=auth_headers(employee)).json()) == 1
    assert len(client.get("/appointments", headers=auth_headers(admin)).json()) == 2


def test_create_accepted_checks_conflicts(client, db, employee):
    add_appointment(db, employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18))
    payload = {
        "employeeId": str(employee.employee_id),
        "customerName": "Walk In",
        "startTime": "2025-03-04T17:30:00Z",
        "endTime": "2025-03-04T18:30:00Z",
        "status": "accepted",
    }

    assert client.post("/appointments", json=payload, headers=auth_headers(employee)).status_code == 400

    payload["status"] = "pending"
    resp = client.post("/appointments", json=payload, headers=auth_headers(employee))
    assert resp.status_code == 201
    assert resp.json()["status"] == "pending"


def test_reschedule_accepted_onto_another(client, db, employee):
    headers = auth_headers(employee)
    add_appointment(db, employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18))
    moving = add_appointment(db, employee, utc(2025, 3, 4, 20), utc(2025, 3, 4, 21))

    resp = client.patch(
        f"/appointments/{moving.appointment_id}",
        json={"startTime": "2025-03-04T17:00:00Z", "endTime": "2025-03-04T18:00:00Z"},
        headers=headers,
    )
    assert resp.status_code == 400

    resp = client.patch(
        f"/appointments/{moving.appointment_id}",
        json={"startTime": "2025-03-04T18:00:00Z", "endTime": "2025-03-04T19:00:00Z"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert instant(resp.json()["start_time"]) == utc(2025, 3, 4, 18)
    fields = [h["field_changed"] for h in client.get(f"/appointments/{moving.appointment_id}/history", headers=headers).json()]
    assert sorted(fields) == ["end_time", "start_time"]


def test_unknown_appointment(client, employee):
    resp = client.get("/appointments/00000000-0000-0000-0000-000000000000", headers=auth_headers(employee))
    assert resp.status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
