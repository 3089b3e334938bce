"""
Pydantic schemas for booking-related request/response validation.
"""

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class BookingCreate(BaseModel):
    event_id: uuid.UUID
    email: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please provide a valid email address")
        return v


class BookingResponse(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}
