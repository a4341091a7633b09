from __future__ import annotations

from fastapi.testclient import TestClient

from tests.test_auth_api import signup


def _event_payload(**overrides):
    payload = {
        "place": "Main Hall",
        "name": "Python Meetup",
        "capacity": 10,
        "duration": "2h",
        "address": "1 Example Street",
        "start_time": "18:00",
        "end_time": "20:00",
    }
    payload.update(overrides)
    return payload


def _create_event(client: TestClient, **overrides):
    return client.post("/v1/events", json=_event_payload(**overrides))


def _register(client: TestClient, event_id: str, seats: int, name: str = "Guest"):
    return client.post(
        f"/v1/events/{event_id}/register",
        json={"name": name, "mobile": "+15550100", "seats": seats},
    )


def _signed_in(client: TestClient) -> TestClient:
    assert signup(client, "organizer@example.com").status_code == 201
    return client


def test_create_event_requires_session(client: TestClient):
    resp = _create_event(client)
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "NO_TOKEN"


def test_create_event_starts_empty(client: TestClient):
    client = _signed_in(client)

    resp = _create_event(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Event created successfully"
    event = body["event"]
    assert event["capacity"] == 10
    assert event["seats_taken"] == 0
    assert event["remaining_seats"] == 10
    assert event["attendees"] == []
    assert event["image"] == ""


def test_create_event_accepts_legacy_field_names(client: TestClient):
    client = _signed_in(client)

    resp = client.post(
        "/v1/events",
        json={
            "place": "Garden",
            "eventname": "Picnic",
            "participationNumber": 4,
            "duration": "3h",
            "address": "Park Lane",
            "image": "https://img.example.com/picnic.png",
            "startTime": "12:00",
            "endTime": "15:00",
        },
    )
    assert resp.status_code == 201
    event = resp.json()["event"]
    assert event["name"] == "Picnic"
    assert event["capacity"] == 4
    assert event["start_time"] == "12:00"
    assert event["image"] == "https://img.example.com/picnic.png"


def test_create_event_reports_missing_fields(client: TestClient):
    client = _signed_in(client)
    payload = _event_payload()
    del payload["address"]
    payload["place"] = "   "

    resp = client.post("/v1/events", json=payload)
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["code"] == "MISSING_FIELDS"
    assert "place" in detail["message"]
    assert "address" in detail["message"]


def test_create_event_rejects_invalid_capacity(client: TestClient):
    client = _signed_in(client)

    for capacity in (0, -3, 2**31, 2**63):
        resp = _create_event(client, capacity=capacity)
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "INVALID_CAPACITY"

    for capacity in (2.5, True, "10"):
        resp = _create_event(client, capacity=capacity)
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"

    assert client.get("/v1/events").json() == []


def test_create_event_accepts_largest_capacity(client: TestClient):
    client = _signed_in(client)

    resp = _create_event(client, capacity=2**31 - 1)
    assert resp.status_code == 201
    assert resp.json()["event"]["remaining_seats"] == 2**31 - 1


def test_end_to_end_capacity_accounting(client: TestClient):
    client = _signed_in(client)
    event_id = _create_event(client, capacity=10).json()["event"]["id"]

    assert _register(client, event_id, 6).status_code == 200

    rejected = _register(client, event_id, 5)
    assert rejected.status_code == 409
    assert rejected.json()["detail"] == {
        "code": "INSUFFICIENT_SEATS",
        "message": "Only 4 seats remaining",
        "remaining": 4,
    }

    accepted = _register(client, event_id, 4, name="Second Guest")
    assert accepted.status_code == 200
    event = accepted.json()["event"]
    assert event["seats_taken"] == 10
    assert event["remaining_seats"] == 0
    assert [a["seats"] for a in event["attendees"]] == [6, 4]
    assert [a["name"] for a in event["attendees"]] == ["Guest", "Second Guest"]

    full = _register(client, event_id, 1)
    assert full.status_code == 409
    assert full.json()["detail"]["remaining"] == 0


def test_register_requires_positive_seats(client: TestClient):
    client = _signed_in(client)
    event_id = _create_event(client).json()["event"]["id"]

    for seats in (0, -1):
        resp = _register(client, event_id, seats)
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "INVALID_SEATS"


def test_register_on_unknown_event_is_not_found(client: TestClient):
    resp = _register(client, "00000000-0000-4000-8000-000000000000", 1)
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "EVENT_NOT_FOUND"

    malformed = _register(client, "not-a-uuid", 1)
    assert malformed.status_code == 400


def test_registration_is_public(client: TestClient):
    signed_in = _signed_in(client)
    event_id = _create_event(signed_in).json()["event"]["id"]
    client.post("/v1/auth/logout")

    assert _register(client, event_id, 2).status_code == 200


def test_list_and_get_events(client: TestClient):
    client = _signed_in(client)
    first = _create_event(client, name="First").json()["event"]["id"]
    second = _create_event(client, name="Second").json()["event"]["id"]
    _register(client, second, 3)

    listed = client.get("/v1/events")
    assert listed.status_code == 200
    by_id = {e["id"]: e for e in listed.json()}
    assert set(by_id) == {first, second}
    assert by_id[second]["seats_taken"] == 3

    one = client.get(f"/v1/events/{second}")
    assert one.status_code == 200
    assert one.json()["attendees"][0]["seats"] == 3


def test_delete_event_removes_it(client: TestClient):
    client = _signed_in(client)
    keep = _create_event(client, name="Keep").json()["event"]["id"]
    gone = _create_event(client, name="Gone").json()["event"]["id"]
    _register(client, gone, 2)

    resp = client.delete(f"/v1/events/{gone}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Event Deleted Successfully"}

    ids = {e["id"] for e in client.get("/v1/events").json()}
    assert ids == {keep}
    assert client.get(f"/v1/events/{gone}").status_code == 404

    again = client.delete(f"/v1/events/{gone}")
    assert again.status_code == 404
    assert again.json()["detail"]["code"] == "EVENT_NOT_FOUND"


def test_delete_event_requires_session(client: TestClient):
    signed_in = _signed_in(client)
    event_id = _create_event(signed_in).json()["event"]["id"]
    client.post("/v1/auth/logout")

    assert client.delete(f"/v1/events/{event_id}").status_code == 401
    assert client.get(f"/v1/events/{event_id}").status_code == 200
