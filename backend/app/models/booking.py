"""
Booking model: an email address registered for an event.

`event_id` is a plain indexed column rather than a foreign key. The booking
service checks that the event exists when the booking is written; deleting
an event leaves its bookings in place.
"""

import uuid

from sqlalchemy import Column, String, Uuid

from app.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid, nullable=False, index=True)
    email = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, email={self.email})>"
