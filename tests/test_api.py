# tests/test_api.py

from datetime import date, timedelta

from sqlalchemy.exc import OperationalError

BUSINESS_ID = "biz-1"

WEEKDAYS_9_TO_5 = {
    "hours": [
        {"day_of_week": d, "open_time": "09:00", "close_time": "17:00", "is_active": 1 <= d <= 5}
        for d in range(7)
    ]
}


def book(client, on_date, at_time="10:00", client_id="client-1"):
    return client.post(
        f"/businesses/{BUSINESS_ID}/appointments",
        json={
            "service_id": "svc-1",
            "client_id": client_id,
            "appointment_date": on_date.isoformat(),
            "appointment_time": at_time,
            "notes": "first visit",
        },
    )


def slots(client, on_date):
    return client.get(f"/businesses/{BUSINESS_ID}/available-slots", params={"date": on_date.isoformat()})


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_put_and_get_hours(client):
    res = client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)
    assert res.status_code == 200
    assert [h["day_of_week"] for h in res.json()] == [1, 2, 3, 4, 5]

    res = client.get(f"/businesses/{BUSINESS_ID}/hours")
    assert res.status_code == 200
    assert res.json()[0] == {"day_of_week": 1, "open_time": "09:00", "close_time": "17:00", "is_active": True}


def test_hours_are_normalized(client):
    body = {"hours": [{"day_of_week": 2, "open_time": "9:30", "close_time": "1800", "is_active": True}]}
    res = client.put(f"/businesses/{BUSINESS_ID}/hours", json=body)

    assert res.status_code == 200
    assert res.json() == [{"day_of_week": 2, "open_time": "09:30", "close_time": "18:00", "is_active": True}]


def test_hours_validation(client):
    url = f"/businesses/{BUSINESS_ID}/hours"
    bad_day = {"hours": [{"day_of_week": 7, "open_time": "09:00", "close_time": "17:00", "is_active": True}]}
    inverted = {"hours": [{"day_of_week": 1, "open_time": "17:00", "close_time": "09:00", "is_active": True}]}
    missing = {"hours": [{"day_of_week": 1, "is_active": True}]}
    garbage = {"hours": [{"day_of_week": 1, "open_time": "late", "close_time": "17:00", "is_active": True}]}
    duplicate = {"hours": [
        {"day_of_week": 1, "open_time": "09:00", "close_time": "17:00", "is_active": True},
        {"day_of_week": 1, "open_time": "10:00", "close_time": "12:00", "is_active": True},
    ]}

    for body in (bad_day, inverted, missing, garbage, duplicate):
        assert client.put(url, json=body).status_code == 422


def test_formatted_hours(client):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)

    res = client.get(f"/businesses/{BUSINESS_ID}/hours/formatted")
    assert res.status_code == 200
    days = res.json()
    assert days[0]["day"] == "Sunday"
    assert days[0]["status"] == "Closed"
    assert days[1]["status"] == "9:00 AM - 5:00 PM"


def test_closed_day_slots(client, next_weekday):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)

    res = slots(client, next_weekday(0))
    assert res.status_code == 200
    body = res.json()
    assert body["closed"] is True
    assert body["slots"] == []
    assert body["window"] is None
    assert body["message"] == "Business is closed on this day"


def test_open_day_slots(client, next_weekday):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)
    monday = next_weekday(1)

    body = slots(client, monday).json()
    assert body["closed"] is False
    assert body["window"] == {"open": "09:00", "close": "17:00"}
    assert len(body["slots"]) == 16
    assert body["slots"][0] == {"date": monday.isoformat(), "time": "09:00", "available": True}
    assert body["slots"][-1]["time"] == "16:30"


def test_slots_require_valid_date(client):
    assert client.get(f"/businesses/{BUSINESS_ID}/available-slots").status_code == 422
    assert client.get(f"/businesses/{BUSINESS_ID}/available-slots", params={"date": "2024-13-40"}).status_code == 422
    res = client.get(f"/businesses/{BUSINESS_ID}/available-slots", params={"date": "2024-02-30"})
    assert res.status_code == 422
    assert res.json()["detail"] == "Invalid date, expected YYYY-MM-DD"


def test_slots_use_the_calendar_day_of_the_query(client):
    sunday_only = {"hours": [{"day_of_week": 0, "open_time": "10:00", "close_time": "12:00", "is_active": True}]}
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=sunday_only)

    # 2024-03-10 is a Sunday, 2024-03-09 the Saturday before it
    sunday = client.get(f"/businesses/{BUSINESS_ID}/available-slots", params={"date": "2024-03-10"}).json()
    assert sunday["date"] == "2024-03-10"
    assert sunday["closed"] is False
    assert [s["time"] for s in sunday["slots"]] == ["10:00", "10:30", "11:00", "11:30"]

    saturday = client.get(f"/businesses/{BUSINESS_ID}/available-slots", params={"date": "2024-03-09"}).json()
    assert saturday["closed"] is True


def test_book_then_slot_is_taken(client, next_weekday):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)
    monday = next_weekday(1)

    res = book(client, monday)
    assert res.status_code == 201
    appt = res.json()
    assert appt["status"] == "pending"
    assert appt["appointment_time"] == "10:00"
    assert appt["notes"] == "first visit"

    taken = [s["time"] for s in slots(client, monday).json()["slots"] if not s["available"]]
    assert taken == ["10:00"]


def test_double_booking_returns_409(client, next_weekday):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)
    monday = next_weekday(1)

    assert book(client, monday).status_code == 201
    res = book(client, monday, client_id="client-2")
    assert res.status_code == 409
    assert res.json()["detail"] == "Time slot is no longer available"

    listed = client.get(f"/businesses/{BUSINESS_ID}/appointments", params={"on_date": monday.isoformat()})
    assert len(listed.json()) == 1


def test_booking_validation(client, next_weekday):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)
    monday = next_weekday(1)

    # closed day, off-grid time, bad time, past date, missing field
    assert book(client, next_weekday(0)).status_code == 422
    assert book(client, monday, at_time="10:10").status_code == 422
    assert book(client, monday, at_time="99:00").status_code == 422
    assert book(client, date.today() - timedelta(days=7)).status_code == 422
    res = client.post(f"/businesses/{BUSINESS_ID}/appointments", json={"service_id": "svc-1"})
    assert res.status_code == 422


def test_cancel_frees_slot(client, next_weekday):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)
    monday = next_weekday(1)
    appt_id = book(client, monday).json()["id"]

    res = client.patch(f"/businesses/{BUSINESS_ID}/appointments/{appt_id}", json={"status": "confirmed"})
    assert res.status_code == 200
    assert res.json()["status"] == "confirmed"

    res = client.delete(f"/businesses/{BUSINESS_ID}/appointments/{appt_id}")
    assert res.status_code == 200
    assert res.json()["status"] == "cancelled"

    assert all(s["available"] for s in slots(client, monday).json()["slots"])
    assert book(client, monday, client_id="client-2").status_code == 201


def test_status_update_errors(client, next_weekday):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)
    appt_id = book(client, next_weekday(1)).json()["id"]
    url = f"/businesses/{BUSINESS_ID}/appointments/{appt_id}"

    assert client.patch(url, json={"status": "archived"}).status_code == 422
    assert client.patch(url, json={"status": "completed"}).status_code == 409
    assert client.patch(f"/businesses/{BUSINESS_ID}/appointments/999", json={"status": "confirmed"}).status_code == 404
    assert client.delete(f"/businesses/other/appointments/{appt_id}").status_code == 404


def test_list_appointments_filters(client, next_weekday):
    client.put(f"/businesses/{BUSINESS_ID}/hours", json=WEEKDAYS_9_TO_5)
    monday, tuesday = next_weekday(1), next_weekday(2)
    first = book(client, monday, at_time="09:00").json()
    book(client, tuesday, at_time="11:00", client_id="client-2")
    client.delete(f"/businesses/{BUSINESS_ID}/appointments/{first['id']}")

    url = f"/businesses/{BUSINESS_ID}/appointments"
    assert len(client.get(url).json()) == 2
    assert [a["client_id"] for a in client.get(url, params={"status": "pending"}).json()] == ["client-2"]
    assert [a["id"] for a in client.get(url, params={"client_id": "client-1"}).json()] == [first["id"]]
    assert len(client.get(url, params={"on_date": tuesday.isoformat()}).json()) == 1


def test_storage_failure_is_500(client, session, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is gone"))

    monkeypatch.setattr(session, "exec", boom)

    res = slots(client, date.today())
    assert res.status_code == 500
    assert res.json() == {"detail": "Internal server error"}
