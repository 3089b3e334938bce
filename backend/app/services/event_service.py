"""
Event service: validate, normalize and persist event records.

Writes follow one path: field validation (pydantic) -> normalization
(slug/date/time) -> a single commit. A failure at any step leaves the
database untouched. Slug uniqueness is enforced by the unique index; the
resulting IntegrityError is reported as DuplicateKeyError.
"""

import uuid
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
    validation_error_from,
)
from app.core.logging import get_logger
from app.core.metrics import record_event_operation
from app.models.event import Event
from app.schemas.event import EventCreate, EventResponse, EventUpdate
from app.services.normalization import normalize_event

logger = get_logger(__name__)

DUPLICATE_TITLE_MESSAGE = "An event with this title already exists"


async def _commit_event(db: AsyncSession, event: Event, operation: str) -> Event:
    # Rollback expires the instance, so read the slug while it is still loaded
    slug = event.slug
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        record_event_operation(operation, "conflict")
        logger.warning(f"event_{operation}_conflict", slug=slug)
        raise DuplicateKeyError(DUPLICATE_TITLE_MESSAGE, details={"slug": slug}) from e
    await db.refresh(event)
    return event


def prepare_event(event_data: EventCreate) -> dict:
    """Normalized column values for a new event. Writes nothing."""
    return normalize_event(event_data.model_dump(), is_new=True)


async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
    """Create an event; the slug is derived from the title."""
    event = Event(**prepare_event(event_data))
    db.add(event)
    await _commit_event(db, event, "create")

    record_event_operation("create", "success")
    logger.info("event_created", event_id=str(event.id), slug=event.slug)
    return event


async def list_events(db: AsyncSession) -> list[Event]:
    """All events, newest first."""
    result = await db.execute(select(Event).order_by(Event.created_at.desc()))
    return list(result.scalars().all())


async def get_event_by_slug(db: AsyncSession, slug: str) -> Event:
    slug = slug.strip().lower()
    if not slug:
        raise ValidationError("Invalid or missing slug parameter")

    result = await db.execute(select(Event).where(Event.slug == slug))
    event = result.scalar_one_or_none()
    if not event:
        raise NotFoundError(f"Event with slug '{slug}' not found")
    return event


def parse_event_id(identifier: str) -> Optional[uuid.UUID]:
    """Return the identifier as a UUID if it has that shape, else None."""
    try:
        return uuid.UUID(identifier)
    except ValueError:
        return None


async def resolve_event(db: AsyncSession, identifier: str) -> Event:
    """
    Find an event by generated id or by slug.

    An identifier shaped like a UUID is tried as an id first; when that
    matches nothing, or the identifier is not a UUID, it is tried as a
    case-insensitive slug.
    """
    identifier = identifier.strip()
    if not identifier:
        raise ValidationError("Invalid or missing slug/ID parameter")

    event_id = parse_event_id(identifier)
    if event_id is not None:
        event = await db.get(Event, event_id)
        if event is not None:
            return event

    result = await db.execute(select(Event).where(Event.slug == identifier.lower()))
    event = result.scalar_one_or_none()
    if event is None:
        raise NotFoundError(f"Event with ID/slug '{identifier}' not found")
    return event


def merge_event_update(event: Event, changes: EventUpdate) -> dict:
    """
    Normalized column values for `event` with `changes` applied. Writes nothing.
    The merged record must still satisfy every EventCreate rule.
    """
    supplied = changes.model_dump(exclude_unset=True)
    current = {field: getattr(event, field) for field in EventCreate.model_fields}
    try:
        merged = EventCreate.model_validate({**current, **supplied})
    except PydanticValidationError as e:
        record_event_operation("update", "invalid")
        raise validation_error_from(e, "Invalid event update") from e

    return normalize_event(merged.model_dump(), previous_title=event.title, is_new=False)


async def apply_event_update(db: AsyncSession, event: Event, changes: EventUpdate) -> Event:
    """Merge the supplied fields into an event and persist it."""
    supplied = changes.model_dump(exclude_unset=True)
    values = merge_event_update(event, changes)
    for field, value in values.items():
        setattr(event, field, value)
    await _commit_event(db, event, "update")

    record_event_operation("update", "success")
    logger.info(
        "event_updated",
        event_id=str(event.id),
        slug=event.slug,
        fields=sorted(supplied),
    )
    return event


async def update_event(db: AsyncSession, identifier: str, changes: EventUpdate) -> Event:
    event = await resolve_event(db, identifier)
    return await apply_event_update(db, event, changes)


async def delete_event(db: AsyncSession, identifier: str) -> EventResponse:
    """Delete an event by id or slug and return a snapshot of it."""
    try:
        event = await resolve_event(db, identifier)
    except NotFoundError:
        record_event_operation("delete", "not_found")
        raise

    snapshot = EventResponse.model_validate(event)
    await db.delete(event)
    await db.commit()

    record_event_operation("delete", "success")
    logger.info("event_deleted", event_id=str(snapshot.id), slug=snapshot.slug)
    return snapshot
