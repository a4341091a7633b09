from __future__ import annotations

import random
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select

from eventdesk.api.v1.schemas import AttendeeCreate, EventCreate
from eventdesk.db import SessionLocal
from eventdesk.models import Event, EventAttendee
from eventdesk.services import events_service
from eventdesk.services.exceptions import CapacityError, NotFoundError, ValidationError


def _new_event(capacity: int):
    with SessionLocal() as db:
        event = events_service.create_event(
            db,
            EventCreate(
                place="Hall",
                name="Concurrency Night",
                capacity=capacity,
                duration="1h",
                address="Somewhere 1",
                start_time="19:00",
                end_time="20:00",
            ),
        )
        return event.id


def _attendee(seats: int, name: str = "Guest") -> AttendeeCreate:
    return AttendeeCreate(name=name, mobile="+15550100", seats=seats)


def _stored_totals(event_id):
    with SessionLocal() as db:
        attendee_sum = db.scalar(
            select(func.coalesce(func.sum(EventAttendee.seats), 0)).where(
                EventAttendee.event_id == event_id
            )
        )
        event = db.get(Event, event_id)
        return int(attendee_sum), event.seats_taken, event.capacity


@pytest.mark.parametrize("seed", [1, 7, 42, 1234])
def test_concurrent_registrations_never_oversell(seed: int):
    rng = random.Random(seed)
    capacity = rng.randint(5, 15)
    requests = [rng.randint(1, 4) for _ in range(12)]
    assert sum(requests) > capacity

    event_id = _new_event(capacity)
    barrier = threading.Barrier(len(requests))

    def _register(index: int, seats: int) -> int:
        barrier.wait()
        with SessionLocal() as db:
            try:
                events_service.register_attendee(db, event_id, _attendee(seats, f"Guest {index}"))
            except CapacityError as err:
                assert 0 <= err.remaining < seats
                return 0
            return seats

    with ThreadPoolExecutor(max_workers=len(requests)) as executor:
        futures = [executor.submit(_register, i, seats) for i, seats in enumerate(requests)]
        accepted = [f.result() for f in futures]

    attendee_sum, seats_taken, stored_capacity = _stored_totals(event_id)
    assert attendee_sum <= stored_capacity
    assert attendee_sum == sum(accepted)
    assert seats_taken == attendee_sum
    # Every rejection was genuine: no remaining request fits in what is left
    rejected = [seats for seats, got in zip(requests, accepted) if got == 0]
    if rejected:
        assert capacity - attendee_sum < max(rejected)


@pytest.mark.parametrize("prior", [[3], [2, 2, 1], [7], []])
def test_capacity_error_reports_exact_remaining(prior: list[int]):
    capacity = 8
    event_id = _new_event(capacity)
    with SessionLocal() as db:
        for seats in prior:
            events_service.register_attendee(db, event_id, _attendee(seats))

    remaining = capacity - sum(prior)
    with SessionLocal() as db:
        with pytest.raises(CapacityError) as exc_info:
            events_service.register_attendee(db, event_id, _attendee(remaining + 1))

    assert exc_info.value.remaining == remaining
    assert _stored_totals(event_id)[:2] == (sum(prior), sum(prior))


def test_registration_fills_event_exactly():
    event_id = _new_event(5)
    with SessionLocal() as db:
        event = events_service.register_attendee(db, event_id, _attendee(5))
        assert event.seats_taken == 5
        assert event.remaining_seats == 0
        assert [a.position for a in event.attendees] == [0]


def test_seats_taken_is_recomputed_from_attendees():
    event_id = _new_event(10)
    with SessionLocal() as db:
        events_service.register_attendee(db, event_id, _attendee(3))

    # A drifted cached counter does not affect the capacity check
    with SessionLocal() as db:
        db.get(Event, event_id).seats_taken = 0
        db.commit()

    with SessionLocal() as db:
        with pytest.raises(CapacityError) as exc_info:
            events_service.register_attendee(db, event_id, _attendee(8))
        assert exc_info.value.remaining == 7

        event = events_service.register_attendee(db, event_id, _attendee(7))
        assert event.seats_taken == 10


def test_invalid_seats_checked_before_lookup():
    with SessionLocal() as db:
        with pytest.raises(ValidationError):
            events_service.register_attendee(db, "missing", _attendee(0))


def test_unknown_event_is_not_found():
    with SessionLocal() as db:
        with pytest.raises(NotFoundError):
            events_service.register_attendee(db, uuid.uuid4(), _attendee(1))
