from datetime import datetime

import pytest

from studio_api.models.appointment_history import AppointmentHistory

from conftest import add_appointment, auth_headers, utc


def instant(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def series(employee, **extra):
    body = {
        "employeeId": str(employee.employee_id),
        "customerName": "Sam Customer",
        "startDate": "2025-03-04",
        "startTime": "10:00",
        "endTime": "11:00",
        "frequency": "weekly",
        "count": 3,
    }
    body.update(extra)
    return body


@pytest.fixture
def weekly(client, employee):
    resp = client.post("/appointments/recurring", json=series(employee), headers=auth_headers(employee))
    assert resp.status_code == 201
    return resp.json()


def test_series_shares_one_id(client, employee, weekly):
    assert weekly["count"] == 3
    assert {a["series_id"] for a in weekly["appointments"]} == {weekly["series_id"]}
    assert {a["status"] for a in weekly["appointments"]} == {"pending"}
    # 10:00 local on both sides of the DST change
    assert [instant(a["start_time"]) for a in weekly["appointments"]] == [
        utc(2025, 3, 4, 17),
        utc(2025, 3, 11, 16),
        utc(2025, 3, 18, 16),
    ]
    assert len(client.get("/appointments", headers=auth_headers(employee)).json()) == 3


def test_accepted_series_refuses_any_conflict(client, db, employee):
    add_appointment(db, employee, utc(2025, 3, 11, 16), utc(2025, 3, 11, 17))

    resp = client.post(
        "/appointments/recurring", json=series(employee, status="accepted"), headers=auth_headers(employee)
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Mar 11, 2025 10:00 AM conflicts with another accepted appointment"
    assert len(client.get("/appointments", headers=auth_headers(employee)).json()) == 1


def test_accepted_series_without_conflicts(client, employee):
    resp = client.post(
        "/appointments/recurring",
        json=series(employee, status="accepted", frequency="daily", count=None, endDate="2025-03-06"),
        headers=auth_headers(employee),
    )

    assert resp.status_code == 201
    assert resp.json()["count"] == 3
    assert {a["status"] for a in resp.json()["appointments"]} == {"accepted"}


def test_series_for_someone_else(client, employee, other_employee):
    resp = client.post("/appointments/recurring", json=series(employee), headers=auth_headers(other_employee))
    assert resp.status_code == 403


def test_series_needs_a_bound(client, employee):
    resp = client.post("/appointments/recurring", json=series(employee, count=None), headers=auth_headers(employee))
    assert resp.status_code == 400


def test_delete_series(client, employee, other_employee, weekly):
    url = f"/appointments/recurring/{weekly['series_id']}"

    assert client.delete(url, headers=auth_headers(other_employee)).status_code == 403
    resp = client.delete(url, headers=auth_headers(employee))

    assert resp.json() == {"deleted": 3}
    assert client.get("/appointments", headers=auth_headers(employee)).json() == []
    assert client.delete(url, headers=auth_headers(employee)).status_code == 404


def test_delete_appointment_and_history(client, db, employee):
    appt = add_appointment(db, employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18))
    headers = auth_headers(employee)
    client.patch(
        f"/appointments/{appt.appointment_id}",
        json={"startTime": "2025-03-04T18:00:00Z", "endTime": "2025-03-04T19:00:00Z"},
        headers=headers,
    )

    assert client.delete(f"/appointments/{appt.appointment_id}", headers=headers).status_code == 204

    assert client.get(f"/appointments/{appt.appointment_id}", headers=headers).status_code == 404
    assert db.query(AppointmentHistory).count() == 0


def test_delete_needs_ownership(client, db, employee, other_employee):
    appt = add_appointment(db, employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18))
    assert client.delete(f"/appointments/{appt.appointment_id}", headers=auth_headers(other_employee)).status_code == 403


def test_duplicate_is_pending_copy(client, db, employee):
    appt = add_appointment(db, employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18), phone="+15875550100")

    resp = client.post(f"/appointments/{appt.appointment_id}/duplicate", json={}, headers=auth_headers(employee))

    assert resp.status_code == 201
    body = resp.json()
    assert body["appointment_id"] != str(appt.appointment_id)
    assert body["status"] == "pending"
    assert body["phone"] == "+15875550100"
    assert instant(body["start_time"]) == utc(2025, 3, 4, 17)


def test_duplicate_with_new_times(client, db, employee):
    appt = add_appointment(db, employee, utc(2025, 3, 4, 17), utc(2025, 3, 4, 18))
    url = f"/appointments/{appt.appointment_id}/duplicate"

    resp = client.post(
        url, json={"startTime": "2025-03-05T17:00:00Z", "endTime": "2025-03-05T18:00:00Z"}, headers=auth_headers(employee)
    )
    assert resp.status_code == 201
    assert instant(resp.json()["start_time"]) == utc(2025, 3, 5, 17)

    resp = client.post(
        url, json={"startTime": "2025-03-05T18:00:00Z", "endTime": "2025-03-05T17:00:00Z"}, headers=auth_headers(employee)
    )
    assert resp.status_code == 400
