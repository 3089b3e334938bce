"""
Event model for the public developer-event feed.

Key design decisions:
- `slug` is derived from `title` by the normalization pipeline and is unique
  at the database level; a collision surfaces as an IntegrityError
- `date` and `time` are stored as canonical strings (YYYY-MM-DD, HH:MM[:SS])
- `agenda` and `tags` are JSON arrays, order preserved
- Index on `created_at` (from TimestampMixin) serves the newest-first feed
"""

import uuid

from sqlalchemy import Column, String, Text, JSON, Uuid, CheckConstraint

from app.db.base import Base, TimestampMixin

EVENT_MODES = ("online", "offline", "hybrid")


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(String(2048), nullable=False)
    venue = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)
    time = Column(String(8), nullable=False)
    mode = Column(String(10), nullable=False)
    audience = Column(String(255), nullable=False)
    agenda = Column(JSON, nullable=False)
    organizer = Column(String(255), nullable=False)
    tags = Column(JSON, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "mode IN ('online', 'offline', 'hybrid')", name="check_event_mode"
        ),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug})>"
