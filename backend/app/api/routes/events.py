"""
Event endpoints. Create and update accept JSON or multipart bodies; the feed
is cached in Redis and invalidated on every write.
"""

import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.payloads import read_event_payload, validate_payload
from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.core.security import get_current_user_id
from app.db.session import get_db
from app.schemas.event import EventCreate, EventListResponse, EventResponse, EventUpdate
from app.services.cache_service import (
    get_cached_feed,
    get_feed_generation,
    invalidate_feed_cache,
    set_cached_feed,
)
from app.services.event_service import (
    apply_event_update,
    create_event,
    delete_event,
    get_event_by_slug,
    list_events,
    merge_event_update,
    prepare_event,
    resolve_event,
)
from app.services.image_service import ImageUploader, get_image_uploader

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])

JSON_REQUIRED_FIELDS = ("title", "description", "image")
# Stands in for the uploaded file's URL while the other fields are checked
PENDING_IMAGE_URL = "https://pending.invalid/image"


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    request: Request,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    uploader: ImageUploader = Depends(get_image_uploader),
):
    """
    Create an event.

    JSON bodies must carry an image URL. Multipart bodies must carry an image
    file, uploaded once every other field is valid; its URL becomes the
    event's image.
    """
    payload = await read_event_payload(request)

    if payload.is_multipart:
        if payload.image_file is None:
            raise ValidationError("Image file is required")
        # Every other field must pass before the file reaches the image host
        draft = validate_payload(
            EventCreate, {**payload.values, "image": PENDING_IMAGE_URL}, "Invalid event"
        )
        prepare_event(draft)
        payload.values["image"] = await uploader.upload(payload.image_file)
    else:
        missing = [name for name in JSON_REQUIRED_FIELDS if not payload.values.get(name)]
        if missing:
            raise ValidationError(
                "Missing required fields: title, description, image",
                details={"missing": missing},
            )

    event_data = validate_payload(EventCreate, payload.values, "Invalid event")
    event = await create_event(db, event_data)
    logger.info("event_create_requested", user_id=str(user_id), slug=event.slug)
    await invalidate_feed_cache()
    return event


@router.get("/", response_model=EventListResponse)
async def list_events_endpoint(db: AsyncSession = Depends(get_db)):
    """All events, newest first. Served from the feed cache when warm."""
    cached = await get_cached_feed()
    if cached is not None:
        return EventListResponse(events=cached, total=len(cached), cached=True)

    generation = await get_feed_generation()
    events = await list_events(db)
    feed = [EventResponse.model_validate(e).model_dump(mode="json") for e in events]
    await set_cached_feed(feed, generation)
    return EventListResponse(events=feed, total=len(feed))


@router.get("/{slug}", response_model=EventResponse)
async def get_event_endpoint(slug: str, db: AsyncSession = Depends(get_db)):
    """Get a single event by slug (case-insensitive)."""
    return await get_event_by_slug(db, slug)


@router.put("/{identifier}", response_model=EventResponse)
async def update_event_endpoint(
    identifier: str,
    request: Request,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    uploader: ImageUploader = Depends(get_image_uploader),
):
    """
    Partially update an event addressed by id or slug.
    A multipart body may include a replacement image file.
    """
    payload = await read_event_payload(request)
    changes = validate_payload(EventUpdate, payload.values, "Invalid event update")
    event = await resolve_event(db, identifier)

    if payload.image_file is not None:
        # The merged record must pass before the file reaches the image host
        merge_event_update(event, changes)
        payload.values["image"] = await uploader.upload(payload.image_file)
        changes = validate_payload(EventUpdate, payload.values, "Invalid event update")

    event = await apply_event_update(db, event, changes)
    logger.info("event_update_requested", user_id=str(user_id), slug=event.slug)
    await invalidate_feed_cache()
    return event


@router.delete("/{identifier}", response_model=EventResponse)
async def delete_event_endpoint(
    identifier: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete an event addressed by id or slug; returns the deleted record."""
    snapshot = await delete_event(db, identifier)
    logger.info("event_delete_requested", user_id=str(user_id), slug=snapshot.slug)
    await invalidate_feed_cache()
    return snapshot
