from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventdesk.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from eventdesk.models.event_attendee import EventAttendee


class Event(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_events_capacity_positive"),
        CheckConstraint("seats_taken >= 0 AND seats_taken <= capacity", name="ck_events_seats_taken"),
    )

    place: Mapped[str] = mapped_column(String(200), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    duration: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    image: Mapped[str] = mapped_column(String, nullable=False, default="")
    start_time: Mapped[str] = mapped_column(String(100), nullable=False)
    end_time: Mapped[str] = mapped_column(String(100), nullable=False)

    # Cached SUM(event_attendees.seats); rewritten on every registration
    seats_taken: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    attendees: Mapped[list[EventAttendee]] = relationship(
        back_populates="event",
        order_by="EventAttendee.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def remaining_seats(self) -> int:
        return self.capacity - self.seats_taken
