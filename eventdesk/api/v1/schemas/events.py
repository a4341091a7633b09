from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

# Field names used by the original single-page frontend
_LEGACY_EVENT_FIELDS = {
    "eventname": "name",
    "participationNumber": "capacity",
    "startTime": "start_time",
    "endTime": "end_time",
}


class SchemaBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class EventCreate(SchemaBase):
    # Required-field checks live in the events service so they surface as
    # ValidationError with the list of missing fields.
    place: str | None = None
    name: str | None = None
    # Booleans and numeric strings are rejected rather than coerced
    capacity: StrictInt | None = None
    duration: str | None = None
    address: str | None = None
    image: str | None = None
    start_time: str | None = None
    end_time: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_legacy_names(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            for legacy, current in _LEGACY_EVENT_FIELDS.items():
                if data.get(current) is None and legacy in data:
                    data[current] = data.pop(legacy)
        return data


class AttendeeCreate(SchemaBase):
    name: str = Field(min_length=1, max_length=200)
    mobile: str = Field(min_length=1, max_length=50)
    seats: int


class AttendeeOut(SchemaBase):
    name: str
    mobile: str
    seats: int


class EventOut(SchemaBase):
    id: UUID
    place: str
    name: str
    capacity: int
    duration: str
    address: str
    image: str
    start_time: str
    end_time: str
    seats_taken: int
    remaining_seats: int
    attendees: list[AttendeeOut]


class EventCreatedOut(SchemaBase):
    message: str = "Event created successfully"
    event: EventOut


class RegistrationOut(SchemaBase):
    message: str = "Registration successful"
    event: EventOut


class MessageOut(SchemaBase):
    message: str
