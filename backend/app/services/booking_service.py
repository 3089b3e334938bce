"""
Booking service.

A booking only holds the event's id. The event must exist when the booking
is written; the check runs in the same session right before the insert.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.core.metrics import record_booking_attempt
from app.models.booking import Booking
from app.models.event import Event
from app.schemas.booking import BookingCreate

logger = get_logger(__name__)


async def create_booking(db: AsyncSession, booking_data: BookingCreate) -> Booking:
    """Register an email for an event. Raises NotFoundError if the event is gone."""
    result = await db.execute(select(Event.id).where(Event.id == booking_data.event_id))
    if result.scalar_one_or_none() is None:
        record_booking_attempt("missing_event")
        logger.warning("booking_failed_missing_event", event_id=str(booking_data.event_id))
        raise NotFoundError(
            f"Event with ID {booking_data.event_id} does not exist",
            details={"event_id": str(booking_data.event_id)},
        )

    booking = Booking(event_id=booking_data.event_id, email=booking_data.email)
    db.add(booking)
    await db.commit()
    await db.refresh(booking)

    record_booking_attempt("success")
    logger.info("booking_created", booking_id=str(booking.id), event_id=str(booking.event_id))
    return booking
