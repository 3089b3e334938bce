"""
Event request bodies: JSON objects or multipart forms.

Multipart forms carry scalar fields as strings, `agenda` and `tags` as
JSON-encoded lists, and `image` as a file.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile
from starlette.requests import Request

from app.core.exceptions import ValidationError, validation_error_from
from app.schemas.event import EVENT_LIST_FIELDS, EVENT_STRING_FIELDS

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class EventPayload:
    values: dict[str, Any]
    image_file: Optional[UploadFile] = None
    is_multipart: bool = False


async def _read_json(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as e:
        raise ValidationError("Malformed JSON body") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


async def _read_form(request: Request) -> EventPayload:
    form = await request.form()
    values: dict[str, Any] = {}

    for name in EVENT_STRING_FIELDS:
        value = form.get(name)
        # Blank form fields mean "not supplied"
        if isinstance(value, str) and value.strip():
            values[name] = value

    for name in EVENT_LIST_FIELDS:
        raw = form.get(name)
        if isinstance(raw, str) and raw.strip():
            try:
                values[name] = json.loads(raw)
            except ValueError as e:
                raise ValidationError(
                    f"'{name}' must be a JSON-encoded list", details={name: raw}
                ) from e

    image = form.get("image")
    image_file = None
    if isinstance(image, UploadFile) and image.filename:
        image_file = image
    elif isinstance(image, str) and image.strip():
        values["image"] = image.strip()

    return EventPayload(values=values, image_file=image_file, is_multipart=True)


async def read_event_payload(request: Request) -> EventPayload:
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        return EventPayload(values=await _read_json(request))
    if content_type.startswith("multipart/form-data"):
        return await _read_form(request)
    raise ValidationError(
        "Content-Type must be application/json or multipart/form-data",
        details={"content_type": content_type or None},
    )


def validate_payload(model: Type[ModelT], values: dict[str, Any], message: str) -> ModelT:
    try:
        return model.model_validate(values)
    except PydanticValidationError as e:
        raise validation_error_from(e, message) from e
