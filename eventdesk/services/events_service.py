from __future__ import annotations

import time
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from eventdesk.api.v1.schemas.events import AttendeeCreate, EventCreate
from eventdesk.services.store import store_errors
from eventdesk.models import Event, EventAttendee
from eventdesk.services.error_codes import ErrorCode
from eventdesk.services.exceptions import (
    CapacityError,
    NotFoundError,
    TransientError,
    ValidationError,
)

logger = structlog.get_logger()

REQUIRED_EVENT_FIELDS = ("place", "name", "capacity", "duration", "address", "start_time", "end_time")
# Upper bound of the INTEGER capacity column on PostgreSQL
MAX_CAPACITY = 2**31 - 1
READ_RETRY_ATTEMPTS = 3
READ_RETRY_BACKOFF_SECONDS = 0.05


def _event_not_found() -> NotFoundError:
    return NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "Event not found")


def _total_reserved(db: Session, event_id: Any) -> int:
    return int(
        db.scalar(
            select(func.coalesce(func.sum(EventAttendee.seats), 0)).where(
                EventAttendee.event_id == event_id
            )
        )
        or 0
    )


def _attendee_count(db: Session, event_id: Any) -> int:
    return int(
        db.scalar(
            select(func.count())
            .select_from(EventAttendee)
            .where(EventAttendee.event_id == event_id)
        )
        or 0
    )


def list_events(db: Session) -> list[Event]:
    stmt = select(Event).options(selectinload(Event.attendees)).order_by(Event.created_at)
    for attempt in range(1, READ_RETRY_ATTEMPTS + 1):
        try:
            with store_errors(db):
                return list(db.scalars(stmt))
        except TransientError:
            if attempt == READ_RETRY_ATTEMPTS:
                raise
            logger.warning("store_read_retry", operation="list_events", attempt=attempt)
            time.sleep(READ_RETRY_BACKOFF_SECONDS * attempt)


def get_event(db: Session, event_id: Any) -> Event:
    with store_errors(db):
        event = db.scalar(
            select(Event).where(Event.id == event_id).options(selectinload(Event.attendees))
        )
    if not event:
        raise _event_not_found()
    return event


def create_event(db: Session, payload: EventCreate) -> Event:
    data = payload.model_dump()
    missing = [
        name
        for name in REQUIRED_EVENT_FIELDS
        if data.get(name) is None or (isinstance(data[name], str) and not data[name].strip())
    ]
    if missing:
        raise ValidationError(
            ErrorCode.MISSING_FIELDS.value,
            f"All fields are required (missing: {', '.join(missing)})",
        )

    capacity = data["capacity"]
    if not 0 < capacity <= MAX_CAPACITY:
        raise ValidationError(
            ErrorCode.INVALID_CAPACITY.value,
            f"capacity must be a positive integer up to {MAX_CAPACITY}",
        )

    event = Event(
        place=payload.place,
        name=payload.name,
        capacity=capacity,
        duration=payload.duration,
        address=payload.address,
        image=payload.image or "",
        start_time=payload.start_time,
        end_time=payload.end_time,
        seats_taken=0,
    )
    with store_errors(db):
        db.add(event)
        db.commit()
        db.refresh(event)

    logger.info("event_created", event_id=str(event.id), capacity=event.capacity)
    return event


def register_attendee(db: Session, event_id: Any, payload: AttendeeCreate) -> Event:
    """Reserve ``payload.seats`` seats on an event for one attendee.

    The event row stays locked from the capacity check until commit: ``FOR UPDATE``
    on PostgreSQL, the ``BEGIN IMMEDIATE`` write lock on SQLite. Concurrent
    registrations for the same event therefore run one after another and the
    seat total is always computed from committed attendee rows.
    """
    if payload.seats <= 0:
        raise ValidationError(ErrorCode.INVALID_SEATS.value, "Seats must be a positive number")

    try:
        with store_errors(db):
            event = db.scalar(
                select(Event)
                .where(Event.id == event_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            if not event:
                db.rollback()
                raise _event_not_found()

            total_reserved = _total_reserved(db, event.id)
            remaining = event.capacity - total_reserved
            if remaining < payload.seats:
                db.rollback()
                logger.info(
                    "registration_rejected",
                    event_id=str(event_id),
                    requested=payload.seats,
                    remaining=remaining,
                )
                raise CapacityError(ErrorCode.INSUFFICIENT_SEATS.value, remaining)

            db.add(
                EventAttendee(
                    event_id=event.id,
                    position=_attendee_count(db, event.id),
                    name=payload.name,
                    mobile=payload.mobile,
                    seats=payload.seats,
                )
            )
            seats_taken = total_reserved + payload.seats
            event.seats_taken = seats_taken
            event_pk = event.id
            db.add(event)
            db.commit()
    except IntegrityError as exc:
        # Another append for this event got the same position: the lock was not held.
        db.rollback()
        raise TransientError(
            ErrorCode.CONCURRENT_REGISTRATION.value,
            "concurrent registration in progress, retry",
        ) from exc

    logger.info(
        "attendee_registered",
        event_id=str(event_pk),
        seats=payload.seats,
        seats_taken=seats_taken,
    )
    return get_event(db, event_pk)


def delete_event(db: Session, event_id: Any) -> None:
    with store_errors(db):
        event = db.get(Event, event_id)
        if not event:
            raise _event_not_found()
        db.delete(event)
        db.commit()

    logger.info("event_deleted", event_id=str(event_id))
