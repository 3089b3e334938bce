"""
Tests for the booking endpoint.
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models.booking import Booking


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, db_session, test_event):
    """Booking an existing event stores the normalized email."""
    event_id = str(test_event.id)
    response = await client.post(
        "/api/v1/bookings/",
        json={"event_id": event_id, "email": "  Attendee@Example.COM "},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["event_id"] == event_id
    assert data["email"] == "attendee@example.com"

    result = await db_session.execute(select(Booking))
    assert len(result.scalars().all()) == 1


@pytest.mark.asyncio
async def test_create_booking_unknown_event(client: AsyncClient):
    event_id = uuid.uuid4()
    response = await client.post(
        "/api/v1/bookings/",
        json={"event_id": str(event_id), "email": "attendee@example.com"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == f"Event with ID {event_id} does not exist"


@pytest.mark.asyncio
async def test_create_booking_after_event_deleted(client: AsyncClient, auth_headers, test_event):
    """The existence check runs at write time, not at event creation time."""
    event_id = str(test_event.id)
    deleted = await client.delete(f"/api/v1/events/{event_id}", headers=auth_headers)
    assert deleted.status_code == 200

    response = await client.post(
        "/api/v1/bookings/",
        json={"event_id": event_id, "email": "late@example.com"},
    )
    assert response.status_code == 404
    assert "does not exist" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_booking_invalid_email(client: AsyncClient, test_event):
    response = await client.post(
        "/api/v1/bookings/",
        json={"event_id": str(test_event.id), "email": "not-an-email"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_booking_malformed_event_id(client: AsyncClient):
    response = await client.post(
        "/api/v1/bookings/",
        json={"event_id": "12345", "email": "attendee@example.com"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_bookings_survive_event_deletion(client: AsyncClient, auth_headers, db_session, test_event):
    event_id = str(test_event.id)
    await client.post(
        "/api/v1/bookings/",
        json={"event_id": event_id, "email": "early@example.com"},
    )
    await client.delete(f"/api/v1/events/{event_id}", headers=auth_headers)

    result = await db_session.execute(select(Booking.email))
    assert result.scalars().all() == ["early@example.com"]
