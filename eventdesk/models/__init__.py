from eventdesk.models.base import Base
from eventdesk.models.event import Event
from eventdesk.models.event_attendee import EventAttendee
from eventdesk.models.user import User

__all__ = ["Base", "User", "Event", "EventAttendee"]
