"""
Event normalization pipeline: slug, date and time.

Runs on already-validated field values right before an event is written.
A failure raises ValidationError, so nothing reaches the database.
"""

import re
from datetime import datetime
from typing import Any, Mapping, Optional

from app.core.exceptions import ValidationError

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")

# Tried in order when a date is not already YYYY-MM-DD
DATE_INPUT_FORMATS = (
    "%Y-%m-%d",           # 2025-1-5 (unpadded)
    "%Y/%m/%d",           # 2025/01/15
    "%Y-%m-%dT%H:%M:%S",  # 2025-01-15T14:30:00
    "%Y-%m-%d %H:%M:%S",  # 2025-01-15 14:30:00
    "%m/%d/%Y",           # 01/15/2025
    "%B %d, %Y",          # January 15, 2025
    "%b %d, %Y",          # Jan 15, 2025
    "%d %B %Y",           # 15 January 2025
    "%d %b %Y",           # 15 Jan 2025
    "%Y.%m.%d",           # 2025.01.15
)

INVALID_DATE_MESSAGE = "Invalid date format. Expected YYYY-MM-DD or valid date string"
INVALID_TIME_MESSAGE = "Invalid time format. Expected HH:MM or HH:MM:SS"


def slugify(title: str) -> str:
    """
    Derive a URL-safe slug from a title.

    >>> slugify("C++ Meetup!!")
    'c-meetup'
    """
    slug = title.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE_RUN.sub("-", slug)
    return _HYPHEN_RUN.sub("-", slug)


def normalize_date(value: str) -> str:
    value = value.strip()
    if ISO_DATE.match(value):
        # Zero-padded but possibly impossible (month 13); check it's a real day
        try:
            datetime.strptime(value, "%Y-%m-%d")
        except ValueError as e:
            raise ValidationError(INVALID_DATE_MESSAGE, details={"date": value}) from e
        return value

    for fmt in DATE_INPUT_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return parsed.strftime("%Y-%m-%d")

    raise ValidationError(INVALID_DATE_MESSAGE, details={"date": value})


def normalize_time(value: str) -> str:
    value = value.strip()
    if not TIME_OF_DAY.match(value):
        raise ValidationError(INVALID_TIME_MESSAGE, details={"time": value})
    return value


def normalize_event(
    values: Mapping[str, Any],
    previous_title: Optional[str] = None,
    is_new: bool = True,
) -> dict[str, Any]:
    """
    Return a normalized copy of an event's field values.

    The slug is (re)derived only for new events or when the title differs
    from `previous_title`; callers keep the stored slug otherwise.
    """
    normalized = dict(values)
    if is_new or normalized["title"] != previous_title:
        slug = slugify(normalized["title"])
        if not slug:
            raise ValidationError(
                "Title must contain at least one letter or digit",
                details={"title": normalized["title"]},
            )
        normalized["slug"] = slug
    normalized["date"] = normalize_date(normalized["date"])
    normalized["time"] = normalize_time(normalized["time"])
    return normalized
