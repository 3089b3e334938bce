"""
Pydantic schemas for event-related request/response validation.

`EventCreate` holds the field rules for a complete event. Updates are
validated twice: `EventUpdate` checks the supplied fields, then the merged
record is re-validated as an `EventCreate`.
"""

import uuid
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NonEmptyStr = Annotated[str, Field(min_length=1)]
EventMode = Literal["online", "offline", "hybrid"]

IMAGE_URL_PATTERN = r"^https?://.+"

# Fields a multipart form carries as plain strings; `image` arrives as a file
EVENT_STRING_FIELDS = (
    "title",
    "description",
    "overview",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)
EVENT_LIST_FIELDS = ("agenda", "tags")


def _unique(values: Optional[list[str]]) -> Optional[list[str]]:
    if values is None:
        return None
    return list(dict.fromkeys(values))


class EventCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10)
    overview: NonEmptyStr
    image: str = Field(..., max_length=2048, pattern=IMAGE_URL_PATTERN)
    venue: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    date: NonEmptyStr
    time: NonEmptyStr
    mode: EventMode
    audience: str = Field(..., min_length=1, max_length=255)
    agenda: list[NonEmptyStr] = Field(..., min_length=1)
    organizer: str = Field(..., min_length=1, max_length=255)
    tags: list[NonEmptyStr] = Field(..., min_length=1)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v):
        return _unique(v)


class EventUpdate(BaseModel):
    """Partial update: only the fields present in the payload are applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10)
    overview: Optional[NonEmptyStr] = None
    image: Optional[str] = Field(None, max_length=2048, pattern=IMAGE_URL_PATTERN)
    venue: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[NonEmptyStr] = None
    time: Optional[NonEmptyStr] = None
    mode: Optional[EventMode] = None
    audience: Optional[str] = Field(None, min_length=1, max_length=255)
    agenda: Optional[list[NonEmptyStr]] = Field(None, min_length=1)
    organizer: Optional[str] = Field(None, min_length=1, max_length=255)
    tags: Optional[list[NonEmptyStr]] = Field(None, min_length=1)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v):
        return _unique(v)


class EventResponse(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
    cached: bool = False
