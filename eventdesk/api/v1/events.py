from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from eventdesk.api.errors import http_error_from_service
from eventdesk.api.v1.schemas import (
    AttendeeCreate,
    EventCreate,
    EventCreatedOut,
    EventOut,
    MessageOut,
    RegistrationOut,
)
from eventdesk.auth.deps import DBSession, get_current_user_id
from eventdesk.services import events_service
from eventdesk.services.exceptions import ServiceError

router = APIRouter(prefix="/events", tags=["events"])

# Creating and deleting events needs a signed-in user; browsing and registering do not.
require_session = [Depends(get_current_user_id)]


@router.get("", response_model=list[EventOut])
def list_events(db: DBSession):
    try:
        return events_service.list_events(db)
    except ServiceError as err:
        raise http_error_from_service(err) from err


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: UUID, db: DBSession):
    try:
        return events_service.get_event(db, event_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err


@router.post("", response_model=EventCreatedOut, status_code=201, dependencies=require_session)
def create_event(payload: EventCreate, db: DBSession):
    try:
        event = events_service.create_event(db, payload)
        event = events_service.get_event(db, event.id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return EventCreatedOut(event=EventOut.model_validate(event))


@router.post("/{event_id}/register", response_model=RegistrationOut)
def register_attendee(event_id: UUID, payload: AttendeeCreate, db: DBSession):
    try:
        event = events_service.register_attendee(db, event_id, payload)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return RegistrationOut(event=EventOut.model_validate(event))


@router.delete("/{event_id}", response_model=MessageOut, dependencies=require_session)
def delete_event(event_id: UUID, db: DBSession):
    try:
        events_service.delete_event(db, event_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return MessageOut(message="Event Deleted Successfully")
